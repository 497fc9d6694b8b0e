"""
Archive persistence — XML архивы поз и их поиск в каталоге.
"""

from .xml_archive import (
    ArchiveError,
    ArchiveFile,
    ArchiveKind,
    compressed_name_for,
    list_archives,
    parse_archive_name,
    read_compressed_archive,
    read_pose_archive,
    report_name_for,
    write_compressed_archive,
    write_pose_archive,
)

__all__ = [
    # Types
    "ArchiveError",
    "ArchiveFile",
    "ArchiveKind",
    # Names
    "compressed_name_for",
    "list_archives",
    "parse_archive_name",
    "report_name_for",
    # Read / write
    "read_compressed_archive",
    "read_pose_archive",
    "write_compressed_archive",
    "write_pose_archive",
]
