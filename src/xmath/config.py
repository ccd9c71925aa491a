"""
Config — Конфигурационные модели xmath

Immutable Pydantic модели для параметров Number и Stepper.
Значения по умолчанию заданы явно (precision=0, base=10), ленивой
инициализации нет.

StepperConfig соответствует контракту stepper.json: границы max/min
могут быть числами или строками "+Inf" / "-Inf".
"""

import math
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from src.xmath.contracts import validate_stepper_config
from src.xmath.number import DEFAULT_BASE, DEFAULT_PRECISION, Number, check_base
from src.xmath.stepper import Stepper


def _validate_base(v: int) -> int:
    # InvalidBaseError наследует ValueError, pydantic оборачивает его в ValidationError
    check_base(v)
    return v


# =============================================================================
# NUMBER FORMAT
# =============================================================================


class NumberFormat(BaseModel):
    """Формат Number: точность и основание."""

    precision: int = Field(DEFAULT_PRECISION, description="Разрядов после точки")
    base: int = Field(DEFAULT_BASE, description="Основание системы счисления [2, 36]")

    model_config = {"frozen": True}

    @field_validator("base")
    @classmethod
    def validate_base(cls, v: int) -> int:
        return _validate_base(v)

    def new_number(self) -> Number:
        """Новый нулевой Number в этом формате."""
        return Number(self.precision, self.base)


# =============================================================================
# STEPPER CONFIG
# =============================================================================


class StepperConfig(BaseModel):
    """
    Параметры Stepper.

    Валидация модели проверяет только форму данных (типы, диапазон base,
    положительный step). Точная представимость step/max/min и согласованность
    диапазона проверяются при build() конструктором Stepper.
    """

    precision: int = Field(DEFAULT_PRECISION, description="Разрядов после точки")
    base: int = Field(DEFAULT_BASE, description="Основание системы счисления [2, 36]")
    step: float = Field(..., gt=0, description="Шаг сетки")
    max_value: float = Field(math.inf, alias="max", description="Верхняя граница")
    min_value: float = Field(-math.inf, alias="min", description="Нижняя граница")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("base")
    @classmethod
    def validate_base(cls, v: int) -> int:
        return _validate_base(v)

    @field_validator("max_value", "min_value", mode="before")
    @classmethod
    def parse_infinite_bound(cls, v: Any) -> Any:
        """Строки "+Inf" / "-Inf" / "Inf" -> float."""
        if isinstance(v, str):
            return float(v)
        return v

    @field_validator("max_value", "min_value")
    @classmethod
    def reject_nan_bound(cls, v: float) -> float:
        if math.isnan(v):
            raise ValueError("bound must not be NaN")
        return v

    def build(self) -> Stepper:
        """
        Создание Stepper.

        Raises:
            StepperError: При невалидной комбинации step/max/min
        """
        return Stepper(self.precision, self.base, self.step, self.max_value, self.min_value)

    def to_contract(self) -> Dict[str, Any]:
        """Сериализация по контракту stepper.json."""
        return {
            "precision": self.precision,
            "base": self.base,
            "step": self.step,
            "max": _bound_to_contract(self.max_value),
            "min": _bound_to_contract(self.min_value),
        }

    @classmethod
    def from_contract(cls, data: Dict[str, Any]) -> "StepperConfig":
        """
        Десериализация по контракту stepper.json.

        Raises:
            jsonschema.ValidationError: Если data не соответствует контракту
            pydantic.ValidationError: Если данные не проходят валидацию модели
        """
        validate_stepper_config(data)
        return cls.model_validate(data)


def _bound_to_contract(v: float) -> Any:
    if math.isinf(v):
        return "+Inf" if v > 0 else "-Inf"
    return v


def load_stepper(data: Dict[str, Any]) -> Stepper:
    """
    Stepper из сериализованной конфигурации (контракт stepper.json).

    Raises:
        jsonschema.ValidationError: Если data не соответствует контракту
        pydantic.ValidationError: Если данные не проходят валидацию модели
        StepperError: При невалидной комбинации step/max/min
    """
    return StepperConfig.from_contract(data).build()
