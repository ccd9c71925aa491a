"""
Contract Validation Module

JSON Schema контракты для сериализованных Number и Stepper.
"""

from .validators import (
    NUMBER_CONTRACT,
    STEPPER_CONTRACT,
    ContractValidator,
    NumberValidator,
    SchemaLoader,
    StepperValidator,
    validate_number,
    validate_stepper_config,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "NumberValidator",
    "StepperValidator",
    # Shared validators
    "NUMBER_CONTRACT",
    "STEPPER_CONTRACT",
    # Functions
    "validate_number",
    "validate_stepper_config",
]
