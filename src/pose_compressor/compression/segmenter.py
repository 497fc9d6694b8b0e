"""
Segmenter — сжатие отсчётов ориентации кости в интервалы (runs)

Жадное расширение интервала вперёд:
1. Если первый отсчёт не в момент 0 — ведущий undefined-run [0, first_time - 1]
2. anchor = отсчёт под указателем; интервал расширяется, пока текущий отсчёт
   принадлежит anchor:
   - anchor undefined → текущий тоже undefined
   - anchor defined → текущий defined и angle(anchor, current) не больше порога
     (угол NaN к вектору нулевой длины порог не превышает)
3. Интервал заканчивается за тик до следующего отсчёта (или на последнем отсчёте)
4. Представитель: Σ(vᵢ / scale) → normalize → × scale → round по компонентам

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Runs упорядочены, не пересекаются и покрывают [0, last_time] без пропусков
2. Каждый отсчёт интервала отстоит от anchor не более чем на порог (радианы)
3. Округление представителя — единственное место потери точности
"""

from dataclasses import dataclass
from typing import Final, List, Optional, Sequence

from pose_compressor.core.domain.run import Run, Sample
from pose_compressor.core.math.column_vector import ColumnVector
from pose_compressor.core.math.exceptions import InvalidArgumentError

# =============================================================================
# ПАРАМЕТРЫ СЕГМЕНТАЦИИ
# =============================================================================

# Максимальный угол (радианы) между anchor и отсчётом внутри одного run
ANGLE_THRESHOLD_RAD_DEFAULT: Final[float] = 0.1

# Масштаб квантования представителя: длина представителя до округления
QUANTIZATION_SCALE_DEFAULT: Final[float] = 100.0


@dataclass(frozen=True)
class SegmentationConfig:
    """Параметры сегментации."""

    angle_threshold_rad: float = ANGLE_THRESHOLD_RAD_DEFAULT
    quantization_scale: float = QUANTIZATION_SCALE_DEFAULT

    def __post_init__(self) -> None:
        if not self.angle_threshold_rad >= 0:
            raise InvalidArgumentError(
                f"angle_threshold_rad must be non-negative, got {self.angle_threshold_rad}"
            )
        if not self.quantization_scale > 0:
            raise InvalidArgumentError(
                f"quantization_scale must be positive, got {self.quantization_scale}"
            )


# =============================================================================
# СЕГМЕНТАЦИЯ
# =============================================================================


def _validate_samples(samples: Sequence[Sample]) -> None:
    previous: Optional[int] = None
    for time, _ in samples:
        if isinstance(time, bool) or not isinstance(time, int):
            raise InvalidArgumentError(f"sample time must be an int, got {time!r}")
        if time < 0:
            raise InvalidArgumentError(f"sample time must be non-negative, got {time}")
        if previous is not None and time <= previous:
            raise InvalidArgumentError(
                f"sample times must be strictly increasing: {previous} then {time}"
            )
        previous = time


def is_run_member(
    anchor: Optional[ColumnVector],
    sample: Optional[ColumnVector],
    angle_threshold_rad: float = ANGLE_THRESHOLD_RAD_DEFAULT,
) -> bool:
    """
    Правило принадлежности отсчёта интервалу anchor.

    Examples:
        >>> is_run_member(None, None)
        True
        >>> v = ColumnVector.create(1.0, 0.0, 0.0)
        >>> is_run_member(v, None)
        False
        >>> is_run_member(v, v)
        True
    """
    if anchor is None:
        return sample is None
    if sample is None:
        return False
    # NaN (нулевая длина одного из векторов) не превышает порог
    return not anchor.angle(sample) > angle_threshold_rad


def representative_of(
    members: Sequence[ColumnVector],
    quantization_scale: float = QUANTIZATION_SCALE_DEFAULT,
) -> ColumnVector:
    """
    Нормализованное среднее направление, квантованное до целых.

    Σ(vᵢ / scale) нормализуется к единичной длине, умножается на scale
    и округляется покомпонентно (round half to even).

    Raises:
        InvalidArgumentError: Если members пуст
        DivisionByZeroError: Если сумма векторов нулевая
    """
    if not members:
        raise InvalidArgumentError("members must not be empty")

    total = ColumnVector(members[0].rows)
    for member in members:
        total = total + member / quantization_scale

    scaled = total.normalize() * quantization_scale
    return ColumnVector.create(*(float(round(value)) for value in scaled))


def segment_bone(
    samples: Sequence[Sample],
    config: Optional[SegmentationConfig] = None,
) -> List[Run]:
    """
    Сжатие отсчётов одной кости в упорядоченный список Run.

    Args:
        samples: Отсчёты (time, vector | None), time строго возрастает
        config: Параметры сегментации (default: SegmentationConfig())

    Returns:
        Runs, покрывающие [0, samples[-1].time] без пропусков.
        Пустой список для пустого входа.

    Raises:
        InvalidArgumentError: Если времена отрицательны или не возрастают
        MatrixArithmeticError: Если anchor и отсчёт оба нулевые, либо сумма
            векторов run нулевая

    Examples:
        >>> v = ColumnVector.create(100.0, 0.0, 0.0)
        >>> runs = segment_bone([Sample(2, v), Sample(3, v), Sample(4, None)])
        >>> [(r.begin_time, r.end_time, r.is_defined) for r in runs]
        [(0, 1, False), (2, 3, True), (4, 4, False)]
    """
    config = config or SegmentationConfig()
    _validate_samples(samples)
    if not samples:
        return []

    times = [time for time, _ in samples]
    vectors = [vector for _, vector in samples]

    runs: List[Run] = []
    if times[0] != 0:
        runs.append(Run(begin_time=0, end_time=times[0] - 1))

    ptr = 0
    while ptr < len(samples):
        anchor = vectors[ptr]
        end = ptr + 1
        while end < len(samples) and is_run_member(
            anchor, vectors[end], config.angle_threshold_rad
        ):
            end += 1

        # пропуски между отсчётами достаются предыдущему run
        end_time = times[end] - 1 if end < len(samples) else times[-1]
        representative = (
            None
            if anchor is None
            else representative_of(vectors[ptr:end], config.quantization_scale)
        )
        runs.append(
            Run(begin_time=times[ptr], end_time=end_time, representative=representative)
        )
        ptr = end

    return runs
