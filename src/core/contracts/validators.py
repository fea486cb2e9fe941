"""
JSON Schema Contract Validators

Модуль для валидации JSON данных на границе со слоем хранения согласно
формальным JSON Schema контрактам (библиотека jsonschema).

Схемы:
- territory.json       — запись территории, приходящая из хранилища
- territory_claim.json — замкнутый многоугольник + площадь, уходящие в хранилище
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в contracts/schema/ относительно корня проекта.
    """

    def __init__(self):
        # Корень проекта: 4 уровня вверх от этого файла
        self._schema_dir = Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'territory')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class TerritoryRecordValidator(ContractValidator):
    """Валидатор записи территории из хранилища."""

    def __init__(self):
        super().__init__("territory")


class TerritoryClaimValidator(ContractValidator):
    """Валидатор payload замкнутого многоугольника для хранилища."""

    def __init__(self):
        super().__init__("territory_claim")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_territory_record(data: Dict[str, Any]) -> None:
    """
    Валидация записи территории.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    TerritoryRecordValidator().validate(data)


def validate_territory_claim(data: Dict[str, Any]) -> None:
    """
    Валидация payload territory_claim.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    TerritoryClaimValidator().validate(data)


__all__ = [
    "ValidationError",
    "SchemaLoader",
    "ContractValidator",
    "TerritoryRecordValidator",
    "TerritoryClaimValidator",
    "validate_territory_record",
    "validate_territory_claim",
]
