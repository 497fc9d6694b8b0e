"""
Comparison — оценка сжатого архива относительно исходного.
"""

from .comparator import (
    SIMILARITY_THRESHOLD_RAD_DEFAULT,
    ArchiveComparison,
    BoneComparison,
    ComparisonConfig,
    ComparisonRow,
    ComparisonStats,
    SampleVerdict,
    classify_sample,
    compare_archives,
    compare_bone,
)
from .report import render_report

__all__ = [
    # Config
    "SIMILARITY_THRESHOLD_RAD_DEFAULT",
    "ComparisonConfig",
    # Results
    "SampleVerdict",
    "ComparisonRow",
    "ComparisonStats",
    "BoneComparison",
    "ArchiveComparison",
    # Functions
    "classify_sample",
    "compare_bone",
    "compare_archives",
    "render_report",
]
