"""
Contracts — JSON Schema контракты сериализованных xmath объектов

- number.json  — Number.to_dict() / Number.from_dict()
- stepper.json — StepperConfig.to_contract() / StepperConfig.from_contract()

Схемы лежат в schema/ рядом с модулем, загружаются один раз и проходят
meta-validation (Draft 2020-12). Валидаторы NUMBER_CONTRACT и
STEPPER_CONTRACT создаются при импорте и переиспользуются: компиляция
Draft202012Validator не повторяется на каждый from_dict().
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import jsonschema
from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Кэширующий загрузчик схем из каталога."""

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = schema_dir or SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self.schema_dir}")
        self._cache: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, name: str) -> Dict[str, Any]:
        """
        Схема по имени без расширения ('number', 'stepper').

        Raises:
            FileNotFoundError: Нет файла <name>.json
            ValueError: Файл не является валидной JSON Schema 2020-12
        """
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Schema not found: {path}")
        schema = json.loads(path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {name}.json: {e.message}") from e

        self._cache[name] = schema
        return schema


_LOADER = SchemaLoader()


# =============================================================================
# VALIDATORS
# =============================================================================


class ContractValidator:
    """Скомпилированный валидатор одного контракта."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name
        self.schema = (loader or _LOADER).load_schema(schema_name)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: Первое найденное нарушение контракта
        """
        self._validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        """Все нарушения контракта, без остановки на первом."""
        return self._validator.iter_errors(data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.schema_name!r})"


class NumberValidator(ContractValidator):
    def __init__(self, loader: Optional[SchemaLoader] = None):
        super().__init__("number", loader)


class StepperValidator(ContractValidator):
    def __init__(self, loader: Optional[SchemaLoader] = None):
        super().__init__("stepper", loader)


NUMBER_CONTRACT = NumberValidator()
STEPPER_CONTRACT = StepperValidator()


def validate_number(data: Dict[str, Any]) -> None:
    """Проверка dict по number.json (jsonschema.ValidationError при нарушении)."""
    NUMBER_CONTRACT.validate(data)


def validate_stepper_config(data: Dict[str, Any]) -> None:
    """Проверка dict по stepper.json (jsonschema.ValidationError при нарушении)."""
    STEPPER_CONTRACT.validate(data)
