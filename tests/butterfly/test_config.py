"""Tests for environment-driven configuration."""

from __future__ import annotations

import logging

import pytest

from butterfly.config import (
    DEFAULT_CHORD_OFFSET,
    DEFAULT_RADIUS,
    get_cors_origins,
    get_default_configuration,
    get_log_level,
)

_ENV_VARS = (
    "BUTTERFLY_RADIUS",
    "BUTTERFLY_CHORD_OFFSET",
    "BUTTERFLY_ANGLE_AB",
    "BUTTERFLY_ANGLE_CD",
    "BUTTERFLY_LOG_LEVEL",
    "BUTTERFLY_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaultConfiguration:
    def test_unset_env_gives_classical_defaults(self) -> None:
        c = get_default_configuration()
        assert c.radius == DEFAULT_RADIUS == 160
        assert c.chord_offset == DEFAULT_CHORD_OFFSET == 50
        assert (c.angle_ab, c.angle_cd) == (60, 120)

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BUTTERFLY_RADIUS", "200")
        monkeypatch.setenv("BUTTERFLY_CHORD_OFFSET", "-75.5")
        monkeypatch.setenv("BUTTERFLY_ANGLE_AB", "30")
        monkeypatch.setenv("BUTTERFLY_ANGLE_CD", "150")
        c = get_default_configuration()
        assert (c.radius, c.chord_offset, c.angle_ab, c.angle_cd) == (200, -75.5, 30, 150)

    @pytest.mark.parametrize("raw", ["abc", "nan", "inf", ""])
    def test_bad_values_fall_back(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv("BUTTERFLY_RADIUS", raw)
        assert get_default_configuration().radius == DEFAULT_RADIUS

    def test_bad_value_is_logged(self, monkeypatch: pytest.MonkeyPatch, caplog) -> None:
        monkeypatch.setenv("BUTTERFLY_ANGLE_AB", "sixty")
        with caplog.at_level(logging.WARNING, logger="butterfly.config"):
            get_default_configuration()
        assert "BUTTERFLY_ANGLE_AB" in caplog.text


class TestLogLevel:
    def test_default_info(self) -> None:
        assert get_log_level() == "INFO"

    def test_case_insensitive(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BUTTERFLY_LOG_LEVEL", " debug ")
        assert get_log_level() == "DEBUG"

    def test_unknown_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BUTTERFLY_LOG_LEVEL", "verbose")
        assert get_log_level() == "INFO"


class TestCorsOrigins:
    def test_default_is_vite_dev_server(self) -> None:
        assert "http://localhost:5173" in get_cors_origins()

    def test_comma_separated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BUTTERFLY_CORS_ORIGINS", "https://a.example, https://b.example,")
        assert get_cors_origins() == ["https://a.example", "https://b.example"]
