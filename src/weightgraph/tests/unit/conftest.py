import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from sample_data import MockWeightProvider, daily_series


@pytest.fixture(scope="session")
def q_app():
    """Provides a QApplication instance for the test session."""
    return QApplication.instance() or QApplication([])


@pytest.fixture
def weight_provider():
    return MockWeightProvider(weight=daily_series(30), bmi=daily_series(30, value=lambda i: 22.0 + i * 0.1))
