"""
Archive models — исходный и сжатый архивы поз

PoseArchive: отсчёты каждой кости с шагом по времени (мс).
CompressedArchive: по одной BoneTrack на кость, в порядке исходного архива.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from pose_compressor.core.domain.run import BoneTrack, Sample
from pose_compressor.core.domain.skeleton import Bone


# =============================================================================
# RAW ARCHIVE
# =============================================================================


class BoneSamples(BaseModel):
    """Отсчёты одной кости; время строго возрастает."""

    bone: Bone
    samples: tuple[Sample, ...] = Field(default=())

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("samples")
    @classmethod
    def validate_increasing(cls, v: tuple[Sample, ...]) -> tuple[Sample, ...]:
        for previous, current in zip(v, v[1:]):
            if current.time <= previous.time:
                raise ValueError(
                    f"sample times must be strictly increasing: {previous.time} then {current.time}"
                )
        return v

    @property
    def last_time(self) -> Optional[int]:
        return self.samples[-1].time if self.samples else None


class PoseArchive(BaseModel):
    """Исходный архив: BoneSamples в порядке BONES."""

    bones: tuple[BoneSamples, ...] = Field(default=())

    model_config = {"frozen": True}

    @property
    def is_blank(self) -> bool:
        """Пустая запись: у первой кости нет отсчётов."""
        return not self.bones or not self.bones[0].samples

    @property
    def duration_ms(self) -> Optional[int]:
        """Время последнего отсчёта последней кости."""
        return self.bones[-1].last_time if self.bones else None


# =============================================================================
# COMPRESSED ARCHIVE
# =============================================================================


class CompressedArchive(BaseModel):
    """Сжатый архив: BoneTrack в порядке исходного архива."""

    tracks: tuple[BoneTrack, ...] = Field(default=())

    model_config = {"frozen": True}

    @property
    def duration_ms(self) -> Optional[int]:
        """Конец последнего run последней кости."""
        return self.tracks[-1].end_time if self.tracks else None

    @property
    def run_count(self) -> int:
        return sum(len(track.runs) for track in self.tracks)

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-представление (контракт compressed_archive.json).

        Returns:
            {"bones": [{"from", "to", "runs": [{"begin", "end", "vector"}]}]}
        """
        return {
            "bones": [
                {
                    "from": track.bone.from_joint.value,
                    "to": track.bone.to_joint.value,
                    "runs": [
                        {
                            "begin": run.begin_time,
                            "end": run.end_time,
                            "vector": (
                                None
                                if run.representative is None
                                else run.representative.to_list()
                            ),
                        }
                        for run in track.runs
                    ],
                }
                for track in self.tracks
            ]
        }
