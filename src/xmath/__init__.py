"""
xmath — точная арифметика фиксированной точности

- rounding: floor/ceil/round и деление с тегом точности над Fraction и float
- number:   Number (Real) — рациональное число, перенормализуемое к
            сетке base^-precision после каждой операции
- stepper:  Stepper — дискретная сетка над диапазоном с точной конверсией
            индекс <-> значение
"""

from src.xmath.config import NumberFormat, StepperConfig, load_stepper
from src.xmath.errors import (
    ErrorKind,
    InvalidBaseError,
    StepperError,
    StepperInvariantError,
    XMathError,
)
from src.xmath.number import MAX_BASE, MIN_BASE, Number, Real, check_base
from src.xmath.rounding import (
    INT64_MAX,
    INT64_MIN,
    UINT64_MAX,
    Accuracy,
    ceil_float,
    ceil_p,
    ceil_rat,
    float_to_rat,
    floor_float,
    floor_p,
    floor_rat,
    int64_rat,
    int_rat,
    rat_to_float,
    round_float,
    round_p,
    round_rat,
    truncating_divide,
    uint64_rat,
)
from src.xmath.stepper import Stepper, StepResult

__all__ = [
    # Rounding: Constants
    "INT64_MIN",
    "INT64_MAX",
    "UINT64_MAX",
    # Rounding: Types
    "Accuracy",
    # Rounding: Functions
    "truncating_divide",
    "floor_rat",
    "ceil_rat",
    "round_rat",
    "int_rat",
    "int64_rat",
    "uint64_rat",
    "float_to_rat",
    "rat_to_float",
    "floor_float",
    "ceil_float",
    "round_float",
    "floor_p",
    "ceil_p",
    "round_p",
    # Number
    "MIN_BASE",
    "MAX_BASE",
    "Number",
    "Real",
    "check_base",
    # Stepper
    "Stepper",
    "StepResult",
    # Errors
    "ErrorKind",
    "XMathError",
    "InvalidBaseError",
    "StepperError",
    "StepperInvariantError",
    # Config
    "NumberFormat",
    "StepperConfig",
    "load_stepper",
]
