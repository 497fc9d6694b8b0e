"""
Test suite for pose_compressor

Contains:
- tests/unit/          : Unit tests for individual modules
"""
