"""
Тесты для XML-архивов

Проверяет:
1. Имена файлов и поиск архивов в каталоге
2. Чтение исходного архива (маркер "null", ошибки формата)
3. Запись и чтение сжатого архива
"""

from datetime import datetime
from pathlib import Path

import pytest

from pose_compressor.archive import (
    ArchiveError,
    ArchiveKind,
    compressed_name_for,
    list_archives,
    parse_archive_name,
    read_compressed_archive,
    read_pose_archive,
    report_name_for,
    write_compressed_archive,
    write_pose_archive,
)
from pose_compressor.compression import compress_archive
from pose_compressor.core.domain import (
    BONES,
    BoneSamples,
    BoneTrack,
    CompressedArchive,
    PoseArchive,
    Run,
    Sample,
)
from pose_compressor.core.math import ColumnVector

RAW_NAME = "KinectPoseArchive_2021-05-01_12.30.00.xml"
COMPRESSED_NAME = "CompressedPoseArchive_2021-05-01_12.30.00.xml"

RAW_XML = """<?xml version="1.0" encoding="utf-8"?>
<PoseArchive>
  <Bone From="Neck" To="Head">
    <Node Time="0">3,1:12;-97;5;</Node>
    <Node Time="33">null</Node>
    <Node Time="66">3,1:12;-97;6;</Node>
  </Bone>
  <Bone From="SpineShoulder" To="Neck">
    <Node Time="0">null</Node>
    <Node Time="33">3,1:0;100;0;</Node>
    <Node Time="66">3,1:0;100;0;</Node>
  </Bone>
</PoseArchive>
"""


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


# =============================================================================
# ИМЕНА ФАЙЛОВ
# =============================================================================


class TestArchiveNames:
    """Тесты имён архивов"""

    def test_parse_raw_name(self) -> None:
        assert parse_archive_name(RAW_NAME, ArchiveKind.RAW) == datetime(2021, 5, 1, 12, 30, 0)
        assert parse_archive_name(RAW_NAME, ArchiveKind.COMPRESSED) is None

    def test_parse_compressed_name(self) -> None:
        recorded_at = parse_archive_name(COMPRESSED_NAME, ArchiveKind.COMPRESSED)
        assert recorded_at == datetime(2021, 5, 1, 12, 30, 0)

    @pytest.mark.parametrize(
        "name",
        [
            "KinectPoseArchive_2021-05-01.xml",
            "KinectPoseArchive_2021-13-01_12.30.00.xml",
            "KinectPoseArchive_2021-05-01_12.30.00.txt",
            "notes.xml",
        ],
    )
    def test_not_an_archive(self, name: str) -> None:
        assert parse_archive_name(name, ArchiveKind.RAW) is None

    def test_compressed_name_for(self) -> None:
        assert compressed_name_for(RAW_NAME) == COMPRESSED_NAME
        with pytest.raises(ArchiveError):
            compressed_name_for("archive.xml")

    def test_report_name_for(self) -> None:
        name = report_name_for(datetime(2022, 1, 2, 3, 4, 5))
        assert name == "ComparisonReport_2022-01-02_03.04.05.md"


class TestListArchives:
    """Тесты list_archives"""

    def test_sorted_by_time(self, tmp_path: Path) -> None:
        _write(tmp_path / "KinectPoseArchive_2021-05-02_08.00.00.xml", "x" * 2048)
        _write(tmp_path / RAW_NAME, "<a/>")
        _write(tmp_path / COMPRESSED_NAME, "<a/>")
        _write(tmp_path / "readme.txt", "")
        (tmp_path / "KinectPoseArchive_2021-05-03_08.00.00.xml").mkdir()

        raw = list_archives(tmp_path, ArchiveKind.RAW)

        assert [archive.path.name for archive in raw] == [
            RAW_NAME,
            "KinectPoseArchive_2021-05-02_08.00.00.xml",
        ]
        assert raw[1].size_kb == 2.0
        assert raw[1].kind is ArchiveKind.RAW
        compressed = list_archives(tmp_path, ArchiveKind.COMPRESSED)
        assert [archive.path.name for archive in compressed] == [COMPRESSED_NAME]

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ArchiveError, match="not found"):
            list_archives(tmp_path / "missing", ArchiveKind.RAW)


# =============================================================================
# ИСХОДНЫЙ АРХИВ
# =============================================================================


class TestReadPoseArchive:
    """Тесты read_pose_archive"""

    def test_read(self, tmp_path: Path) -> None:
        archive = read_pose_archive(_write(tmp_path / RAW_NAME, RAW_XML))

        assert [bone_samples.bone for bone_samples in archive.bones] == [BONES[0], BONES[1]]
        first = archive.bones[0].samples
        assert [sample.time for sample in first] == [0, 33, 66]
        assert first[0].vector == ColumnVector.create(12.0, -97.0, 5.0)
        assert first[1].vector is None
        assert archive.duration_ms == 66

    def test_write_read_round_trip(self, tmp_path: Path) -> None:
        archive = read_pose_archive(_write(tmp_path / RAW_NAME, RAW_XML))
        copy_path = tmp_path / "copy.xml"
        write_pose_archive(archive, copy_path)
        assert read_pose_archive(copy_path) == archive

    @pytest.mark.parametrize(
        "text,match",
        [
            ("<PoseArchive><Bone", "malformed XML"),
            ("<PoseArchive/>", "blank archive"),
            ('<PoseArchive><Bone From="Neck" To="Head"/></PoseArchive>', "blank archive"),
            (
                '<PoseArchive><Bone From="Neck"><Node Time="0">null</Node></Bone></PoseArchive>',
                "must carry",
            ),
            (
                '<PoseArchive><Bone From="Neck" To="Tail"><Node Time="0">null</Node></Bone>'
                "</PoseArchive>",
                "unknown joint",
            ),
            (
                '<PoseArchive><Bone From="Neck" To="Head"><Node>null</Node></Bone></PoseArchive>',
                "missing attribute",
            ),
            (
                '<PoseArchive><Bone From="Neck" To="Head"><Node Time="a">null</Node></Bone>'
                "</PoseArchive>",
                "not an integer",
            ),
            (
                '<PoseArchive><Bone From="Neck" To="Head"><Node Time="0">3,1:x;</Node></Bone>'
                "</PoseArchive>",
                "invalid vector",
            ),
            (
                '<PoseArchive><Bone From="Neck" To="Head"><Node Time="5">null</Node>'
                '<Node Time="5">null</Node></Bone></PoseArchive>',
                "strictly increasing",
            ),
        ],
    )
    def test_invalid(self, tmp_path: Path, text: str, match: str) -> None:
        path = _write(tmp_path / RAW_NAME, text)
        with pytest.raises(ArchiveError, match=match):
            read_pose_archive(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ArchiveError, match="cannot read"):
            read_pose_archive(tmp_path / RAW_NAME)


# =============================================================================
# СЖАТЫЙ АРХИВ
# =============================================================================


class TestCompressedArchiveXml:
    """Тесты записи и чтения сжатого архива"""

    def test_compress_write_read(self, tmp_path: Path) -> None:
        raw = read_pose_archive(_write(tmp_path / RAW_NAME, RAW_XML))
        compressed = compress_archive(raw)
        path = tmp_path / COMPRESSED_NAME

        write_compressed_archive(compressed, path)
        restored = read_compressed_archive(path)

        assert restored == compressed
        assert restored.duration_ms == 66

    def test_layout(self, tmp_path: Path) -> None:
        """Undefined run записывается пустым <Node/>"""
        archive = CompressedArchive(
            tracks=(
                BoneTrack(
                    bone=BONES[0],
                    runs=(
                        Run(begin_time=0, end_time=32),
                        Run(
                            begin_time=33,
                            end_time=65,
                            representative=ColumnVector.create(12.0, -97.0, 5.0),
                        ),
                    ),
                ),
            )
        )
        path = tmp_path / COMPRESSED_NAME
        write_compressed_archive(archive, path)
        text = path.read_text(encoding="utf-8")

        assert text.startswith("<?xml version='1.0' encoding='utf-8'?>")
        assert "<CompressedPose>" in text
        assert '<Bone To="Head" From="Neck">' in text
        assert '<Node Begin="0" End="32" />' in text
        assert '<Node Begin="33" End="65">3,1:12;-97;5;</Node>' in text

    def test_not_contiguous(self, tmp_path: Path) -> None:
        text = (
            '<CompressedPose><Bone To="Head" From="Neck">'
            '<Node Begin="0" End="4"/><Node Begin="7" End="9"/>'
            "</Bone></CompressedPose>"
        )
        with pytest.raises(ArchiveError, match="contiguous"):
            read_compressed_archive(_write(tmp_path / COMPRESSED_NAME, text))

    def test_end_before_begin(self, tmp_path: Path) -> None:
        text = (
            '<CompressedPose><Bone To="Head" From="Neck">'
            '<Node Begin="5" End="4"/></Bone></CompressedPose>'
        )
        with pytest.raises(ArchiveError):
            read_compressed_archive(_write(tmp_path / COMPRESSED_NAME, text))

    def test_write_to_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(ArchiveError, match="cannot write"):
            write_compressed_archive(CompressedArchive(), tmp_path / "missing" / "out.xml")

    def test_pose_archive_samples_survive(self, tmp_path: Path) -> None:
        archive = PoseArchive(
            bones=(
                BoneSamples(
                    bone=BONES[5],
                    samples=(Sample(0, ColumnVector.create(0.25, 0.5, -1.0)), Sample(1, None)),
                ),
            )
        )
        path = tmp_path / RAW_NAME
        write_pose_archive(archive, path)
        assert "<Node Time=\"1\">null</Node>" in path.read_text(encoding="utf-8")
        assert read_pose_archive(path) == archive
