"""
XML Archive — чтение и запись архивов поз

Исходный архив:
    <Root>
      <Bone From="Neck" To="Head">
        <Node Time="0">3,1:12;-97;5;</Node>
        <Node Time="33">null</Node>
        ...
Сжатый архив:
    <CompressedPose>
      <Bone To="Head" From="Neck">
        <Node Begin="0" End="32">3,1:12;-97;5;</Node>
        <Node Begin="33" End="65"/>          (undefined run)

Имена файлов: KinectPoseArchive_YYYY-MM-DD_HH.mm.ss.xml и
CompressedPoseArchive_YYYY-MM-DD_HH.mm.ss.xml (одинаковая метка времени).
"""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Final, List, Optional, Union

from pydantic import ValidationError

from pose_compressor.core.domain.archive import BoneSamples, CompressedArchive, PoseArchive
from pose_compressor.core.domain.run import BoneTrack, Run, Sample
from pose_compressor.core.domain.skeleton import Bone, JointType
from pose_compressor.core.math.column_vector import ColumnVector
from pose_compressor.core.math.exceptions import MatrixFormatError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# =============================================================================
# КОНСТАНТЫ ФОРМАТА
# =============================================================================

COMPRESSED_ROOT_TAG: Final[str] = "CompressedPose"
RAW_ROOT_TAG: Final[str] = "PoseArchive"
BONE_TAG: Final[str] = "Bone"
NODE_TAG: Final[str] = "Node"

ATTR_FROM: Final[str] = "From"
ATTR_TO: Final[str] = "To"
ATTR_TIME: Final[str] = "Time"
ATTR_BEGIN: Final[str] = "Begin"
ATTR_END: Final[str] = "End"

# Маркер нераспознанной кости в исходном архиве
NULL_MARKER: Final[str] = "null"

RAW_PREFIX: Final[str] = "KinectPoseArchive"
COMPRESSED_PREFIX: Final[str] = "CompressedPoseArchive"
REPORT_PREFIX: Final[str] = "ComparisonReport"

TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d_%H.%M.%S"
_TIMESTAMP_PATTERN: Final[str] = r"(\d{4}-\d{2}-\d{2}_\d{2}\.\d{2}\.\d{2})"


class ArchiveError(Exception):
    """Файл архива не читается или нарушает формат."""


class ArchiveKind(str, Enum):
    """Вид архива"""

    RAW = "raw"
    COMPRESSED = "compressed"


_NAME_PATTERNS: Final[dict] = {
    ArchiveKind.RAW: re.compile(rf"^{RAW_PREFIX}_{_TIMESTAMP_PATTERN}\.xml$"),
    ArchiveKind.COMPRESSED: re.compile(rf"^{COMPRESSED_PREFIX}_{_TIMESTAMP_PATTERN}\.xml$"),
}


# =============================================================================
# ИМЕНА ФАЙЛОВ
# =============================================================================


@dataclass(frozen=True)
class ArchiveFile:
    """Найденный файл архива."""

    path: Path
    kind: ArchiveKind
    recorded_at: datetime
    size_bytes: int

    @property
    def size_kb(self) -> float:
        return self.size_bytes / 1024.0


def parse_archive_name(name: str, kind: ArchiveKind) -> Optional[datetime]:
    """Метка времени записи из имени файла; None если имя не соответствует kind."""
    match = _NAME_PATTERNS[kind].match(name)
    if match is None:
        return None
    try:
        return datetime.strptime(match.group(1), TIMESTAMP_FORMAT)
    except ValueError:
        return None


def compressed_name_for(raw_name: str) -> str:
    """
    Имя сжатого архива для исходного (та же метка времени).

    Examples:
        >>> compressed_name_for("KinectPoseArchive_2021-05-01_12.30.00.xml")
        'CompressedPoseArchive_2021-05-01_12.30.00.xml'

    Raises:
        ArchiveError: Если raw_name не является именем исходного архива
    """
    recorded_at = parse_archive_name(raw_name, ArchiveKind.RAW)
    if recorded_at is None:
        raise ArchiveError(f"not a raw pose archive name: {raw_name!r}")
    return f"{COMPRESSED_PREFIX}_{recorded_at.strftime(TIMESTAMP_FORMAT)}.xml"


def report_name_for(generated_at: datetime) -> str:
    return f"{REPORT_PREFIX}_{generated_at.strftime(TIMESTAMP_FORMAT)}.md"


def list_archives(directory: PathLike, kind: ArchiveKind) -> List[ArchiveFile]:
    """
    Архивы вида kind в каталоге, отсортированные по имени (= по времени записи).

    Raises:
        ArchiveError: Если directory не существует
    """
    root = Path(directory)
    if not root.is_dir():
        raise ArchiveError(f"archive directory not found: {root}")

    found = []
    for path in sorted(root.iterdir()):
        if not path.is_file():
            continue
        recorded_at = parse_archive_name(path.name, kind)
        if recorded_at is not None:
            found.append(ArchiveFile(path, kind, recorded_at, path.stat().st_size))
    return found


# =============================================================================
# РАЗБОР XML
# =============================================================================


def _load_root(path: PathLike) -> ET.Element:
    try:
        return ET.parse(path).getroot()
    except ET.ParseError as exc:
        raise ArchiveError(f"{path}: malformed XML: {exc}") from exc
    except OSError as exc:
        raise ArchiveError(f"{path}: cannot read archive: {exc}") from exc


def _int_attribute(element: ET.Element, name: str, path: PathLike) -> int:
    value = element.get(name)
    if value is None:
        raise ArchiveError(f"{path}: <{element.tag}> is missing attribute {name!r}")
    try:
        return int(value)
    except ValueError as exc:
        raise ArchiveError(f"{path}: attribute {name}={value!r} is not an integer") from exc


def _bone_of(element: ET.Element, path: PathLike) -> Bone:
    to_name = element.get(ATTR_TO)
    from_name = element.get(ATTR_FROM)
    if to_name is None or from_name is None:
        raise ArchiveError(f"{path}: <{element.tag}> must carry {ATTR_FROM!r} and {ATTR_TO!r}")
    try:
        return Bone(to_joint=JointType(to_name), from_joint=JointType(from_name))
    except ValueError as exc:
        raise ArchiveError(f"{path}: unknown joint in bone {from_name}->{to_name}") from exc


def _vector_of(text: Optional[str], path: PathLike) -> Optional[ColumnVector]:
    try:
        return ColumnVector.parse(text)
    except MatrixFormatError as exc:
        raise ArchiveError(f"{path}: invalid vector text {text!r}") from exc


def read_pose_archive(path: PathLike) -> PoseArchive:
    """
    Чтение исходного архива.

    Текст "null" переводится в None до передачи в ядро.

    Raises:
        ArchiveError: Если XML некорректен, не хватает атрибутов, времена не
            возрастают, либо архив пуст (у первой кости нет отсчётов)
    """
    root = _load_root(path)
    bones = []
    for bone_element in root:
        bone = _bone_of(bone_element, path)
        samples = []
        for node in bone_element:
            time = _int_attribute(node, ATTR_TIME, path)
            text = (node.text or "").strip()
            vector = None if text == NULL_MARKER else _vector_of(text, path)
            samples.append(Sample(time, vector))
        try:
            bones.append(BoneSamples(bone=bone, samples=tuple(samples)))
        except ValidationError as exc:
            raise ArchiveError(f"{path}: bone {bone.label}: {exc}") from exc

    archive = PoseArchive(bones=tuple(bones))
    if archive.is_blank:
        raise ArchiveError(f"{path}: blank archive (no samples recorded)")
    logger.info("read pose archive %s: %d bones", path, len(archive.bones))
    return archive


def read_compressed_archive(path: PathLike) -> CompressedArchive:
    """
    Чтение сжатого архива.

    Raises:
        ArchiveError: Если XML некорректен или runs не образуют непрерывную дорожку
    """
    root = _load_root(path)
    tracks = []
    for bone_element in root:
        bone = _bone_of(bone_element, path)
        runs = []
        for node in bone_element:
            begin = _int_attribute(node, ATTR_BEGIN, path)
            end = _int_attribute(node, ATTR_END, path)
            representative = _vector_of((node.text or "").strip(), path)
            try:
                runs.append(Run(begin_time=begin, end_time=end, representative=representative))
            except ValidationError as exc:
                raise ArchiveError(f"{path}: bone {bone.label}: {exc}") from exc
        try:
            tracks.append(BoneTrack(bone=bone, runs=tuple(runs)))
        except ValidationError as exc:
            raise ArchiveError(f"{path}: bone {bone.label}: {exc}") from exc

    archive = CompressedArchive(tracks=tuple(tracks))
    logger.info(
        "read compressed archive %s: %d bones, %d runs",
        path,
        len(archive.tracks),
        archive.run_count,
    )
    return archive


# =============================================================================
# ЗАПИСЬ XML
# =============================================================================


def _write_tree(root: ET.Element, path: PathLike) -> None:
    tree = ET.ElementTree(root)
    ET.indent(tree)
    try:
        tree.write(path, encoding="utf-8", xml_declaration=True)
    except OSError as exc:
        raise ArchiveError(f"{path}: cannot write archive: {exc}") from exc


def write_compressed_archive(archive: CompressedArchive, path: PathLike) -> None:
    """Запись сжатого архива; undefined run записывается пустым <Node/>."""
    root = ET.Element(COMPRESSED_ROOT_TAG)
    for track in archive.tracks:
        bone_element = ET.SubElement(
            root,
            BONE_TAG,
            {ATTR_TO: track.bone.to_joint.value, ATTR_FROM: track.bone.from_joint.value},
        )
        for run in track.runs:
            node = ET.SubElement(
                bone_element,
                NODE_TAG,
                {ATTR_BEGIN: str(run.begin_time), ATTR_END: str(run.end_time)},
            )
            if run.representative is not None:
                node.text = run.representative.to_text()
    _write_tree(root, path)
    logger.info("wrote compressed archive %s: %d runs", path, archive.run_count)


def write_pose_archive(archive: PoseArchive, path: PathLike) -> None:
    """Запись исходного архива; нераспознанный отсчёт записывается как "null"."""
    root = ET.Element(RAW_ROOT_TAG)
    for bone_samples in archive.bones:
        bone_element = ET.SubElement(
            root,
            BONE_TAG,
            {
                ATTR_FROM: bone_samples.bone.from_joint.value,
                ATTR_TO: bone_samples.bone.to_joint.value,
            },
        )
        for sample in bone_samples.samples:
            node = ET.SubElement(bone_element, NODE_TAG, {ATTR_TIME: str(sample.time)})
            node.text = NULL_MARKER if sample.vector is None else sample.vector.to_text()
    _write_tree(root, path)
