"""
Tests for JSON Schema Contract Validators

Тестирование контракта JSON-экспорта сжатого архива:
- Валидность самой схемы
- Валидация правильных данных
- Детекция нарушений required полей и типов
- Детекция нарушений enum / minimum / additionalProperties
- Проверки непрерывности runs поверх схемы
- Интеграция с CompressedArchive.to_dict()
"""

import copy
import json
from pathlib import Path

import pytest
from jsonschema import ValidationError

from pose_compressor.compression import compress_archive
from pose_compressor.core.contracts import (
    CompressedArchiveValidator,
    SchemaLoader,
    validate_compressed_archive,
)
from pose_compressor.core.domain import BONES, BoneSamples, PoseArchive, Sample
from pose_compressor.core.math import ColumnVector


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_archive():
    """Валидный JSON-экспорт для тестирования."""
    return {
        "bones": [
            {
                "from": "Neck",
                "to": "Head",
                "runs": [
                    {"begin": 0, "end": 32, "vector": None},
                    {"begin": 33, "end": 99, "vector": [12.0, -97.0, 5.0]},
                    {"begin": 100, "end": 100, "vector": [0.0, 100.0, 0.0]},
                ],
            },
            {"from": "SpineBase", "to": "SpineMid", "runs": []},
        ]
    }


# =============================================================================
# SCHEMA LOADER TESTS
# =============================================================================


class TestSchemaLoader:
    """Тесты загрузчика схем"""

    def test_schema_is_valid(self) -> None:
        """Схема проходит meta-validation"""
        schema = SchemaLoader().load_schema("compressed_archive")
        assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"

    def test_schema_is_cached(self) -> None:
        loader = SchemaLoader()
        assert loader.load_schema("compressed_archive") is loader.load_schema(
            "compressed_archive"
        )

    def test_missing_schema(self) -> None:
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("unknown")

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "missing")

    def test_invalid_schema(self, tmp_path: Path) -> None:
        (tmp_path / "broken.json").write_text(json.dumps({"type": 12}), encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(tmp_path).load_schema("broken")

    def test_joint_enum_matches_domain(self) -> None:
        """enum суставов совпадает с JointType"""
        schema = SchemaLoader().load_schema("compressed_archive")
        joints = set(schema["$defs"]["joint"]["enum"])
        assert joints == {bone.to_joint.value for bone in BONES} | {
            bone.from_joint.value for bone in BONES
        }


# =============================================================================
# VALIDATION TESTS
# =============================================================================


class TestCompressedArchiveContract:
    """Тесты контракта compressed_archive"""

    def test_valid(self, valid_archive) -> None:
        validate_compressed_archive(valid_archive)
        assert CompressedArchiveValidator().is_valid(valid_archive)

    def test_missing_required(self, valid_archive) -> None:
        data = copy.deepcopy(valid_archive)
        del data["bones"][0]["runs"][1]["vector"]
        with pytest.raises(ValidationError, match="'vector' is a required property"):
            validate_compressed_archive(data)

    def test_wrong_type(self, valid_archive) -> None:
        data = copy.deepcopy(valid_archive)
        data["bones"][0]["runs"][0]["begin"] = "0"
        with pytest.raises(ValidationError):
            validate_compressed_archive(data)

    def test_unknown_joint(self, valid_archive) -> None:
        data = copy.deepcopy(valid_archive)
        data["bones"][0]["to"] = "Tail"
        with pytest.raises(ValidationError):
            validate_compressed_archive(data)

    def test_negative_time(self, valid_archive) -> None:
        data = copy.deepcopy(valid_archive)
        data["bones"][0]["runs"][0]["begin"] = -1
        assert not CompressedArchiveValidator().is_valid(data)

    def test_empty_vector(self, valid_archive) -> None:
        data = copy.deepcopy(valid_archive)
        data["bones"][0]["runs"][1]["vector"] = []
        with pytest.raises(ValidationError):
            validate_compressed_archive(data)

    def test_additional_properties(self, valid_archive) -> None:
        data = copy.deepcopy(valid_archive)
        data["bones"][0]["runs"][0]["weight"] = 1
        with pytest.raises(ValidationError):
            validate_compressed_archive(data)

    def test_iter_errors(self, valid_archive) -> None:
        data = copy.deepcopy(valid_archive)
        data["bones"][0]["to"] = "Tail"
        data["bones"][0]["runs"][0]["end"] = "x"
        errors = list(CompressedArchiveValidator().iter_errors(data))
        assert len(errors) == 2


class TestRunConstraints:
    """Ограничения, не выразимые в JSON Schema"""

    def test_end_before_begin(self, valid_archive) -> None:
        data = copy.deepcopy(valid_archive)
        data["bones"][0]["runs"][2] = {"begin": 100, "end": 90, "vector": None}
        with pytest.raises(ValidationError, match="precedes begin"):
            validate_compressed_archive(data)

    def test_gap(self, valid_archive) -> None:
        data = copy.deepcopy(valid_archive)
        data["bones"][0]["runs"][1]["begin"] = 34
        with pytest.raises(ValidationError, match="not contiguous"):
            validate_compressed_archive(data)


# =============================================================================
# INTEGRATION TESTS
# =============================================================================


class TestDomainIntegration:
    """Интеграция с CompressedArchive.to_dict()"""

    def test_compressed_archive_export_is_valid(self) -> None:
        x = ColumnVector.create(100.0, 0.0, 0.0)
        raw = PoseArchive(
            bones=tuple(
                BoneSamples(
                    bone=bone,
                    samples=(Sample(5, x), Sample(6, None), Sample(7, x)),
                )
                for bone in BONES
            )
        )

        data = compress_archive(raw).to_dict()

        validate_compressed_archive(data)
        assert len(data["bones"]) == 24
        assert data["bones"][0]["runs"][0] == {"begin": 0, "end": 4, "vector": None}
        assert data["bones"][0]["runs"][1] == {"begin": 5, "end": 5, "vector": [100.0, 0.0, 0.0]}
