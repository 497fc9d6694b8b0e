"""
pose_compressor — dense Matrix/ColumnVector engine and run-length compression
of bone-orientation archives.
"""

__version__ = "0.1.0"
