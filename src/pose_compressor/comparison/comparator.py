"""
Comparator — сравнение исходного архива со сжатым

Каждый исходный отсчёт (user) сравнивается с представителем run, активного
в тот же момент в сжатом архиве (standard).

Классификация отсчёта:
- user или standard не определён → UNDEFINED; оба не определены → SIMILAR_UNDEFINED
  (входит в similarity, но не в strict similarity)
- оба определены → offset = angle(standard, user);
  SIMILAR если offset < порога или векторы равны, иначе DISSIMILAR
  (offset NaN для вектора нулевой длины даёт DISSIMILAR)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Final, List, Optional, Sequence

from pydantic import BaseModel, Field

from pose_compressor.core.domain.archive import CompressedArchive, PoseArchive
from pose_compressor.core.domain.run import BoneTrack, Sample
from pose_compressor.core.domain.skeleton import Bone
from pose_compressor.core.math.column_vector import ColumnVector
from pose_compressor.core.math.exceptions import InvalidArgumentError, ShapeMismatchError

logger = logging.getLogger(__name__)

# =============================================================================
# ПАРАМЕТРЫ СРАВНЕНИЯ
# =============================================================================

# Отсчёты с углом (радианы) меньше порога считаются похожими
SIMILARITY_THRESHOLD_RAD_DEFAULT: Final[float] = 0.2


@dataclass(frozen=True)
class ComparisonConfig:
    """Параметры сравнения."""

    similarity_threshold_rad: float = SIMILARITY_THRESHOLD_RAD_DEFAULT

    def __post_init__(self) -> None:
        if not self.similarity_threshold_rad >= 0:
            raise InvalidArgumentError(
                f"similarity_threshold_rad must be non-negative, "
                f"got {self.similarity_threshold_rad}"
            )


# =============================================================================
# РЕЗУЛЬТАТЫ
# =============================================================================


class SampleVerdict(str, Enum):
    """Результат сравнения одного отсчёта"""

    SIMILAR = "Similar"
    SIMILAR_UNDEFINED = "Similar*"
    DISSIMILAR = "Dissimilar"
    UNDEFINED = "Undefined"


@dataclass(frozen=True)
class ComparisonRow:
    """Строка детального сравнения."""

    time: int
    user: Optional[ColumnVector]
    standard: Optional[ColumnVector]
    offset: Optional[float]  # None если хотя бы одна сторона не определена
    verdict: SampleVerdict


class ComparisonStats(BaseModel):
    """Счётчики сравнения и производные проценты."""

    total: int = Field(default=0, ge=0)
    similar: int = Field(default=0, ge=0, description="SIMILAR + SIMILAR_UNDEFINED")
    strictly_similar: int = Field(default=0, ge=0, description="Только SIMILAR")
    undefined: int = Field(default=0, ge=0, description="Хотя бы одна сторона не определена")
    standard_undefined: int = Field(default=0, ge=0)
    user_undefined: int = Field(default=0, ge=0)

    model_config = {"frozen": True}

    def _pct(self, count: int) -> float:
        return 100.0 * count / self.total if self.total else 0.0

    @property
    def similarity_pct(self) -> float:
        return self._pct(self.similar)

    @property
    def strict_similarity_pct(self) -> float:
        return self._pct(self.strictly_similar)

    @property
    def undefined_pct(self) -> float:
        return self._pct(self.undefined)

    @property
    def standard_undefined_pct(self) -> float:
        return self._pct(self.standard_undefined)

    @property
    def user_undefined_pct(self) -> float:
        return self._pct(self.user_undefined)

    def __add__(self, other: "ComparisonStats") -> "ComparisonStats":
        return ComparisonStats(
            total=self.total + other.total,
            similar=self.similar + other.similar,
            strictly_similar=self.strictly_similar + other.strictly_similar,
            undefined=self.undefined + other.undefined,
            standard_undefined=self.standard_undefined + other.standard_undefined,
            user_undefined=self.user_undefined + other.user_undefined,
        )

    @classmethod
    def from_rows(cls, rows: Sequence[ComparisonRow]) -> "ComparisonStats":
        return cls(
            total=len(rows),
            similar=sum(
                1
                for row in rows
                if row.verdict in (SampleVerdict.SIMILAR, SampleVerdict.SIMILAR_UNDEFINED)
            ),
            strictly_similar=sum(1 for row in rows if row.verdict is SampleVerdict.SIMILAR),
            undefined=sum(1 for row in rows if row.offset is None),
            standard_undefined=sum(1 for row in rows if row.standard is None),
            user_undefined=sum(1 for row in rows if row.user is None),
        )


@dataclass(frozen=True)
class BoneComparison:
    """Сравнение одной кости."""

    bone: Bone
    rows: tuple[ComparisonRow, ...]
    stats: ComparisonStats


@dataclass(frozen=True)
class ArchiveComparison:
    """Сравнение архивов целиком."""

    bones: tuple[BoneComparison, ...]
    stats: ComparisonStats
    raw_duration_ms: Optional[int]
    compressed_duration_ms: Optional[int]


# =============================================================================
# СРАВНЕНИЕ
# =============================================================================


def classify_sample(
    user: Optional[ColumnVector],
    standard: Optional[ColumnVector],
    config: Optional[ComparisonConfig] = None,
) -> tuple[Optional[float], SampleVerdict]:
    """
    Классификация пары (user, standard).

    Returns:
        (offset, verdict); offset равен None если хотя бы одна сторона не определена

    Examples:
        >>> classify_sample(None, None)
        (None, <SampleVerdict.SIMILAR_UNDEFINED: 'Similar*'>)
    """
    config = config or ComparisonConfig()
    if user is None or standard is None:
        if user is None and standard is None:
            return None, SampleVerdict.SIMILAR_UNDEFINED
        return None, SampleVerdict.UNDEFINED

    offset = standard.angle(user)
    if offset < config.similarity_threshold_rad or standard == user:
        return offset, SampleVerdict.SIMILAR
    return offset, SampleVerdict.DISSIMILAR


def compare_bone(
    samples: Sequence[Sample],
    track: BoneTrack,
    config: Optional[ComparisonConfig] = None,
) -> BoneComparison:
    """
    Сравнение исходных отсчётов кости с её сжатой дорожкой.

    Args:
        samples: Исходные отсчёты (user)
        track: Сжатая дорожка (standard)
        config: Параметры сравнения
    """
    config = config or ComparisonConfig()
    rows: List[ComparisonRow] = []
    for time, user in samples:
        standard = track.lookup(time)
        offset, verdict = classify_sample(user, standard, config)
        rows.append(ComparisonRow(time, user, standard, offset, verdict))
    return BoneComparison(
        bone=track.bone,
        rows=tuple(rows),
        stats=ComparisonStats.from_rows(rows),
    )


def compare_archives(
    raw: PoseArchive,
    compressed: CompressedArchive,
    config: Optional[ComparisonConfig] = None,
) -> ArchiveComparison:
    """
    Покостное сравнение архивов; кости сопоставляются по позиции.

    Raises:
        ShapeMismatchError: Если число костей в архивах различается
    """
    config = config or ComparisonConfig()
    if len(raw.bones) != len(compressed.tracks):
        raise ShapeMismatchError(
            f"archives have different bone counts: {len(raw.bones)} vs {len(compressed.tracks)}"
        )

    bones = []
    total = ComparisonStats()
    for bone_samples, track in zip(raw.bones, compressed.tracks):
        if bone_samples.bone != track.bone:
            logger.warning(
                "bone mismatch at same position: %s vs %s",
                bone_samples.bone.label,
                track.bone.label,
            )
        comparison = compare_bone(bone_samples.samples, track, config)
        logger.info(
            "compared bone %s: similarity %.2f %%",
            track.bone.label,
            comparison.stats.similarity_pct,
        )
        bones.append(comparison)
        total = total + comparison.stats

    return ArchiveComparison(
        bones=tuple(bones),
        stats=total,
        raw_duration_ms=raw.duration_ms,
        compressed_duration_ms=compressed.duration_ms,
    )
