"""
Compressor — сжатие всего архива поз по костям

Кости независимы: каждая сегментируется отдельно, порядок сохраняется.
"""

import logging
from typing import Optional

from pose_compressor.compression.segmenter import SegmentationConfig, segment_bone
from pose_compressor.core.domain.archive import CompressedArchive, PoseArchive
from pose_compressor.core.domain.run import BoneTrack

logger = logging.getLogger(__name__)


def compress_archive(
    archive: PoseArchive,
    config: Optional[SegmentationConfig] = None,
) -> CompressedArchive:
    """
    Сегментация каждой кости архива.

    Args:
        archive: Исходный архив
        config: Параметры сегментации (default: SegmentationConfig())

    Returns:
        CompressedArchive с одной BoneTrack на кость
    """
    config = config or SegmentationConfig()
    tracks = []
    for bone_samples in archive.bones:
        runs = segment_bone(bone_samples.samples, config)
        logger.info(
            "compressed bone %s: %d samples into %d runs",
            bone_samples.bone.label,
            len(bone_samples.samples),
            len(runs),
        )
        for run in runs:
            logger.debug(
                "bone %s run [%d, %d] -> %s",
                bone_samples.bone.label,
                run.begin_time,
                run.end_time,
                run.representative,
            )
        tracks.append(BoneTrack(bone=bone_samples.bone, runs=tuple(runs)))
    return CompressedArchive(tracks=tuple(tracks))
