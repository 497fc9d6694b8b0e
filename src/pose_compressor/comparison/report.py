"""
Report — Markdown-отчёт о сравнении архивов

Чистая функция: форматирование без файлового вывода.
"""

import math
from datetime import datetime
from typing import Final, List, Optional

from pose_compressor.comparison.comparator import (
    ArchiveComparison,
    BoneComparison,
    ComparisonConfig,
    ComparisonRow,
    ComparisonStats,
)

NULL_TEXT: Final[str] = "null"
UNDEFINED_TEXT: Final[str] = "Undefined"
NAN_TEXT: Final[str] = "NaN"


def _stats_lines(stats: ComparisonStats) -> List[str]:
    return [
        f"**Similarity:** {stats.similarity_pct:.2f} %\n",
        f"**Similarity (Strict):** {stats.strict_similarity_pct:.2f} %\n",
        f"**Undefined (All):** {stats.undefined_pct:.2f} %\n",
        f"**Undefined (Standard):** {stats.standard_undefined_pct:.2f} %\n",
        f"**Undefined (User):** {stats.user_undefined_pct:.2f} %\n",
    ]


def _row_line(row: ComparisonRow) -> str:
    user = NULL_TEXT if row.user is None else row.user.to_text()
    standard = NULL_TEXT if row.standard is None else row.standard.to_text()
    if row.offset is None:
        offset = UNDEFINED_TEXT
    elif math.isnan(row.offset):
        offset = NAN_TEXT
    else:
        offset = f"{row.offset:.2f}"
    return f"|{row.time}|{user}|{standard}|{offset}|{row.verdict.value}|"


def _bone_section(comparison: BoneComparison) -> List[str]:
    lines = [
        f"### From {comparison.bone.from_joint.value} To {comparison.bone.to_joint.value}\n",
        *_stats_lines(comparison.stats),
        "|Time|User|Standard|Offset|Result|",
        "|---|---|---|---|---|",
    ]
    lines.extend(_row_line(row) for row in comparison.rows)
    lines.append("")
    return lines


def _duration(value: Optional[int]) -> str:
    return "n/a" if value is None else f"{value} ms"


def render_report(
    comparison: ArchiveComparison,
    raw_name: str,
    compressed_name: str,
    generated_at: datetime,
    config: Optional[ComparisonConfig] = None,
) -> str:
    """
    Markdown-отчёт: Summary, Details по костям, Explanations.

    Args:
        comparison: Результат compare_archives
        raw_name: Имя исходного архива
        compressed_name: Имя сжатого архива
        generated_at: Время формирования отчёта
        config: Параметры сравнения (для раздела Explanations)
    """
    config = config or ComparisonConfig()
    threshold = config.similarity_threshold_rad

    lines = [
        "# Comparison Result\n",
        f"*{generated_at:%Y/%m/%d %H:%M:%S}*\n",
        "## Summary\n",
        f"**Original Archive's Name:** {raw_name}\n",
        f"**Original Archive's Duration:** {_duration(comparison.raw_duration_ms)}\n",
        f"**Compressed Archive's Name:** {compressed_name}\n",
        f"**Compressed Archive's Duration:** {_duration(comparison.compressed_duration_ms)}\n",
        *_stats_lines(comparison.stats),
        "## Details\n",
    ]
    for bone in comparison.bones:
        lines.extend(_bone_section(bone))

    lines.extend(
        [
            "## Explanations\n",
            "- The original archive is treated as the user's one and the compressed archive "
            "as the standard one.\n",
            "- The unit of time is millisecond; the unit of offset is radian.\n",
            f"- Two poses are similar if the offset between them is less than {threshold:.1f}.\n",
            "- “null” means that the sensor failed to detect the bone at that time.\n",
            "- If at least one side of a row is “null”, its offset is “Undefined”.\n",
            "- If both the user and the standard are “null”, the result is “Similar\\*”; "
            "the ‘\\*’ distinguishes it from the regular “Similar”.\n",
            "- “Similarity” counts both “Similar” and “Similar\\*”, while "
            "“Similarity (Strict)” counts only “Similar”.\n",
        ]
    )
    return "\n".join(lines)
