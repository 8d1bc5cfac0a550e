"""Shared fixtures for butterfly tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from butterfly.main import app
from butterfly.models import Configuration


# ---------------------------------------------------------------------------
# Configuration Fixtures (used by engine & validation tests)
# ---------------------------------------------------------------------------


@pytest.fixture
def default_config() -> Configuration:
    """A Configuration with all default values (R=160, d=50, 60/120 deg)."""
    return Configuration()


@pytest.fixture
def classic_config() -> Configuration:
    """The classical diagram: R=160, PQ at y=50, chords at 60 and 120 deg."""
    return Configuration(radius=160, chord_offset=50, angle_ab=60, angle_cd=120)


@pytest.fixture
def centred_config() -> Configuration:
    """PQ through the centre -- a diameter."""
    return Configuration(radius=100, chord_offset=0, angle_ab=35, angle_cd=140)


@pytest.fixture
def skewed_config() -> Configuration:
    """Negative offset, asymmetric angles."""
    return Configuration(radius=3.5, chord_offset=-2.1, angle_ab=17, angle_cd=103)


# ---------------------------------------------------------------------------
# App Fixtures (used by route/websocket tests)
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> TestClient:
    """Return a TestClient for the FastAPI app."""
    return TestClient(app)
