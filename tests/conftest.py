"""
Pytest configuration and shared fixtures.
"""

import os
from typing import Callable, List

import pytest
from fastapi.testclient import TestClient

# Minimal env required for app initialization in tests
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("PDF_FONT_PATH", "")

from chat_export.main import app  # noqa: E402
from chat_export.models import PageConfig, Role, Turn  # noqa: E402


@pytest.fixture
def app_client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def char_measure() -> Callable[[str, float], float]:
    """Monospace measurement: every character is half the font size wide."""

    def _measure(text: str, font_size: float) -> float:
        return len(text) * font_size * 0.5

    return _measure


@pytest.fixture
def page_config() -> PageConfig:
    return PageConfig()


@pytest.fixture
def make_turns() -> Callable[..., List[Turn]]:
    def _make(*pairs: tuple[str, str]) -> List[Turn]:
        return [Turn(role=Role(role), text=text) for role, text in pairs]

    return _make
