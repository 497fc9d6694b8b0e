"""
Run — интервал времени с одним представительным вектором

Результат сегментации одной кости: упорядоченная последовательность
непересекающихся Run, покрывающая время без пропусков.

Immutable Pydantic модели. Представительный вектор копируется при создании,
поэтому изменение исходного ColumnVector не затрагивает Run.
"""

from bisect import bisect_right
from typing import NamedTuple, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from pose_compressor.core.domain.skeleton import Bone
from pose_compressor.core.math.column_vector import ColumnVector


# =============================================================================
# SAMPLE
# =============================================================================


class Sample(NamedTuple):
    """Отсчёт ориентации кости: время (мс) и вектор либо None (кость не распознана)."""

    time: int
    vector: Optional[ColumnVector]


# =============================================================================
# RUN MODEL
# =============================================================================


class Run(BaseModel):
    """
    Интервал [begin_time, end_time] (включительно) с представителем.

    representative равен None для интервала, где кость не распознана.
    """

    begin_time: int = Field(..., ge=0, description="Начало интервала (мс, включительно)")
    end_time: int = Field(..., ge=0, description="Конец интервала (мс, включительно)")
    representative: Optional[ColumnVector] = Field(
        default=None, description="Представительный вектор, None для undefined"
    )

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("representative")
    @classmethod
    def copy_representative(cls, v: Optional[ColumnVector]) -> Optional[ColumnVector]:
        """Run владеет своей копией вектора."""
        return None if v is None else v.clone()

    @model_validator(mode="after")
    def validate_interval(self) -> "Run":
        if self.end_time < self.begin_time:
            raise ValueError(
                f"end_time {self.end_time} must be >= begin_time {self.begin_time}"
            )
        return self

    @property
    def is_defined(self) -> bool:
        return self.representative is not None

    @property
    def duration(self) -> int:
        """Число тиков, покрытых интервалом."""
        return self.end_time - self.begin_time + 1

    def covers(self, time: int) -> bool:
        return self.begin_time <= time <= self.end_time


# =============================================================================
# BONE TRACK
# =============================================================================


class BoneTrack(BaseModel):
    """
    Сжатая дорожка одной кости.

    Инвариант: runs упорядочены, не пересекаются и идут без пропусков
    (begin следующего == end предыдущего + 1).
    """

    bone: Bone
    runs: tuple[Run, ...] = Field(default=())

    model_config = {"frozen": True}

    @field_validator("runs")
    @classmethod
    def validate_contiguous(cls, v: tuple[Run, ...]) -> tuple[Run, ...]:
        for previous, current in zip(v, v[1:]):
            if current.begin_time != previous.end_time + 1:
                raise ValueError(
                    f"runs must be contiguous: [{previous.begin_time}, {previous.end_time}] "
                    f"followed by [{current.begin_time}, {current.end_time}]"
                )
        return v

    @property
    def begin_time(self) -> Optional[int]:
        return self.runs[0].begin_time if self.runs else None

    @property
    def end_time(self) -> Optional[int]:
        return self.runs[-1].end_time if self.runs else None

    def run_at(self, time: int) -> Optional[Run]:
        """Run, покрывающий time, либо None."""
        index = bisect_right([run.begin_time for run in self.runs], time) - 1
        if index < 0:
            return None
        run = self.runs[index]
        return run if run.covers(time) else None

    def lookup(self, time: int) -> Optional[ColumnVector]:
        """Представитель в момент time; None если время не покрыто или run undefined."""
        run = self.run_at(time)
        return None if run is None else run.representative
