"""
Compression — сегментация отсчётов ориентации в интервалы.
"""

from .compressor import compress_archive
from .segmenter import (
    ANGLE_THRESHOLD_RAD_DEFAULT,
    QUANTIZATION_SCALE_DEFAULT,
    SegmentationConfig,
    is_run_member,
    representative_of,
    segment_bone,
)

__all__ = [
    "ANGLE_THRESHOLD_RAD_DEFAULT",
    "QUANTIZATION_SCALE_DEFAULT",
    "SegmentationConfig",
    "is_run_member",
    "representative_of",
    "segment_bone",
    "compress_archive",
]
