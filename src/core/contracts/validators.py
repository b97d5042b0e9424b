"""
JSON Schema Contract Validators

Модуль для валидации персистентного состояния пула согласно формальному
JSON Schema контракту. Использует библиотеку jsonschema.

Схемы:
- pool_state.json (reserves, shares, fee, share balances, stats)
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator

from src.core.domain.pool_state import PoolState


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Находит схемы в schema/ рядом с этим модулем (устанавливаются как package data).
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or (Path(__file__).parent / "schema")
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'pool_state')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема сама по себе невалидна
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation
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
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        return self.validator.iter_errors(data)


class PoolStateValidator(ContractValidator):
    """Валидатор для pool_state контракта."""

    def __init__(self):
        super().__init__("pool_state")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_pool_state(data: Dict[str, Any]) -> None:
    """
    Валидация pool_state данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    PoolStateValidator().validate(data)


def dump_pool_state(state: PoolState) -> str:
    """
    Сериализация снапшота в JSON с проверкой контракта.

    Returns:
        JSON строка
    """
    data = state.model_dump(mode="json")
    validate_pool_state(data)
    return json.dumps(data, sort_keys=True)


def load_pool_state(raw: str) -> PoolState:
    """
    Десериализация снапшота: сначала JSON Schema, затем инварианты модели.

    Raises:
        ValidationError (jsonschema): нарушение схемы
        pydantic.ValidationError: нарушение инвариантов (пустой пул, сумма долей)
    """
    data = json.loads(raw)
    validate_pool_state(data)
    return PoolState.model_validate(data)
