"""Общие fixtures тестов."""

import pytest

from pose_compressor.core.math import EPS_DEFAULT, set_epsilon


@pytest.fixture(autouse=True)
def restore_default_epsilon():
    """Каждый тест начинается и заканчивается с epsilon по умолчанию."""
    set_epsilon(EPS_DEFAULT)
    yield
    set_epsilon(EPS_DEFAULT)
