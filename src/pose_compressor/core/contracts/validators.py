"""
JSON Schema Contract Validators

Модуль для валидации JSON-экспорта согласно формальным JSON Schema контрактам.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы:
- compressed_archive.json (CompressedArchive.to_dict())
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат в каталоге schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'compressed_archive')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            json.JSONDecodeError: Если файл не является валидным JSON
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

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


class CompressedArchiveValidator(ContractValidator):
    """Валидатор для compressed_archive контракта."""

    def __init__(self):
        super().__init__("compressed_archive")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_compressed_archive(data: Dict[str, Any]) -> None:
    """
    Валидация JSON-экспорта сжатого архива.

    Помимо схемы проверяет, что runs каждой кости идут без пропусков
    и end >= begin (ограничения, не выразимые в JSON Schema).

    Raises:
        ValidationError: Если данные не соответствуют контракту
    """
    CompressedArchiveValidator().validate(data)
    for bone in data["bones"]:
        previous_end = None
        for run in bone["runs"]:
            if run["end"] < run["begin"]:
                raise ValidationError(
                    f"run end {run['end']} precedes begin {run['begin']} "
                    f"in bone {bone['from']}->{bone['to']}"
                )
            if previous_end is not None and run["begin"] != previous_end + 1:
                raise ValidationError(
                    f"runs of bone {bone['from']}->{bone['to']} are not contiguous "
                    f"at {run['begin']}"
                )
            previous_end = run["end"]
