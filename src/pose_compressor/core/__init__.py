"""
Core numeric engine, domain models, and contracts.

This package contains the foundational building blocks that are independent
of archive files and front ends.
"""
