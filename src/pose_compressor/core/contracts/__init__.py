"""
Contract Validation Module

Модуль для валидации JSON контрактов pose_compressor.
"""

from .validators import (
    CompressedArchiveValidator,
    ContractValidator,
    SchemaLoader,
    validate_compressed_archive,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "CompressedArchiveValidator",
    # Functions
    "validate_compressed_archive",
]
