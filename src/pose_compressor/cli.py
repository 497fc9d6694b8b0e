"""
pose-compressor command line

usage:
  pose-compressor compress KinectPoseArchive_2021-05-01_12.30.00.xml
  pose-compressor compare KinectPoseArchive_... CompressedPoseArchive_...
  pose-compressor list ./archives
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from jsonschema import ValidationError

from pose_compressor.archive import (
    ArchiveError,
    ArchiveKind,
    compressed_name_for,
    list_archives,
    read_compressed_archive,
    read_pose_archive,
    report_name_for,
    write_compressed_archive,
)
from pose_compressor.comparison import (
    SIMILARITY_THRESHOLD_RAD_DEFAULT,
    ComparisonConfig,
    compare_archives,
    render_report,
)
from pose_compressor.compression import (
    ANGLE_THRESHOLD_RAD_DEFAULT,
    SegmentationConfig,
    compress_archive,
)
from pose_compressor.core.contracts import validate_compressed_archive
from pose_compressor.core.math import EPS_DEFAULT, LinearAlgebraError, set_epsilon

logger = logging.getLogger(__name__)


def cmd_compress(args: argparse.Namespace) -> None:
    """compress one raw archive"""
    raw_path = Path(args.raw)
    output = Path(args.output) if args.output else raw_path.with_name(
        compressed_name_for(raw_path.name)
    )

    archive = read_pose_archive(raw_path)
    compressed = compress_archive(
        archive, SegmentationConfig(angle_threshold_rad=args.threshold)
    )
    write_compressed_archive(compressed, output)
    print(f"compressed archive saved: {output} ({compressed.run_count} runs)")

    if args.json:
        data = compressed.to_dict()
        validate_compressed_archive(data)
        json_path = output.with_suffix(".json")
        json_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        print(f"json export saved: {json_path}")


def cmd_compare(args: argparse.Namespace) -> None:
    """compare a raw archive against its compressed counterpart"""
    raw_path = Path(args.raw)
    compressed_path = Path(args.compressed)
    config = ComparisonConfig(similarity_threshold_rad=args.threshold)

    comparison = compare_archives(
        read_pose_archive(raw_path), read_compressed_archive(compressed_path), config
    )

    print(f"Similarity:          {comparison.stats.similarity_pct:.1f} %")
    print(f"Similarity (Strict): {comparison.stats.strict_similarity_pct:.1f} %")

    generated_at = datetime.now()
    report_path = Path(args.output) if args.output else raw_path.with_name(
        report_name_for(generated_at)
    )
    report = render_report(
        comparison, raw_path.name, compressed_path.name, generated_at, config
    )
    report_path.write_text(report, encoding="utf-8")
    print(f"report saved: {report_path}")


def cmd_list(args: argparse.Namespace) -> None:
    """list archives in a directory"""
    for kind in (ArchiveKind.RAW, ArchiveKind.COMPRESSED):
        archives = list_archives(args.directory, kind)
        print(f"{kind.value} archives: {len(archives)}")
        for number, archive in enumerate(archives, start=1):
            print(
                f"  {number}.\t{archive.recorded_at:%Y/%m/%d}\t"
                f"{archive.recorded_at:%H:%M:%S}\t{archive.size_kb:.0f} KB"
            )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pose-compressor",
        description="compress bone-orientation archives and compare them with the originals",
    )
    parser.add_argument(
        "--epsilon",
        type=float,
        default=EPS_DEFAULT,
        help=f"zero/equality tolerance (default: {EPS_DEFAULT})",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="warnings only")

    subparsers = parser.add_subparsers(dest="command", required=True)

    compress = subparsers.add_parser("compress", help="compress a raw pose archive")
    compress.add_argument("raw", help="KinectPoseArchive_*.xml")
    compress.add_argument("-o", "--output", help="output path (default: CompressedPoseArchive_*.xml)")
    compress.add_argument(
        "--threshold",
        type=float,
        default=ANGLE_THRESHOLD_RAD_DEFAULT,
        help=f"max angle inside a run, radians (default: {ANGLE_THRESHOLD_RAD_DEFAULT})",
    )
    compress.add_argument("--json", action="store_true", help="also write a validated json export")
    compress.set_defaults(func=cmd_compress)

    compare = subparsers.add_parser("compare", help="compare raw and compressed archives")
    compare.add_argument("raw", help="KinectPoseArchive_*.xml")
    compare.add_argument("compressed", help="CompressedPoseArchive_*.xml")
    compare.add_argument("-o", "--output", help="report path (default: ComparisonReport_*.md)")
    compare.add_argument(
        "--threshold",
        type=float,
        default=SIMILARITY_THRESHOLD_RAD_DEFAULT,
        help=f"similarity threshold, radians (default: {SIMILARITY_THRESHOLD_RAD_DEFAULT})",
    )
    compare.set_defaults(func=cmd_compare)

    listing = subparsers.add_parser("list", help="list archives in a directory")
    listing.add_argument("directory")
    listing.set_defaults(func=cmd_list)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        set_epsilon(args.epsilon)
        args.func(args)
    except (ArchiveError, LinearAlgebraError, ValidationError, OSError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
