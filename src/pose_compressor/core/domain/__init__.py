"""
Domain models and value objects.

Contains the skeleton table, raw samples, compressed runs and archives.
"""

from pose_compressor.core.domain.archive import BoneSamples, CompressedArchive, PoseArchive
from pose_compressor.core.domain.run import BoneTrack, Run, Sample
from pose_compressor.core.domain.skeleton import BONE_COUNT, BONES, Bone, JointType

__all__ = [
    # Skeleton
    "BONES",
    "BONE_COUNT",
    "Bone",
    "JointType",
    # Runs
    "Sample",
    "Run",
    "BoneTrack",
    # Archives
    "BoneSamples",
    "PoseArchive",
    "CompressedArchive",
]
