"""Tests for environment-driven configuration helpers."""

from __future__ import annotations

import importlib

import pytest

from auto_route import config


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("1", True), ("yes", True), (" ON ", True), ("0", False), ("off", False)],
)
def test_env_bool_parses_common_spellings(monkeypatch, raw, expected) -> None:
    monkeypatch.setenv("AUTO_ROUTE_TEST_FLAG", raw)

    assert config._env_bool("AUTO_ROUTE_TEST_FLAG", not expected) is expected


def test_env_helpers_fall_back_on_garbage(monkeypatch) -> None:
    monkeypatch.setenv("AUTO_ROUTE_TEST_VALUE", "not-a-number")

    assert config._env_float("AUTO_ROUTE_TEST_VALUE", 2.5) == 2.5
    assert config._env_int("AUTO_ROUTE_TEST_VALUE", 7) == 7
    assert config._env_bool("AUTO_ROUTE_TEST_VALUE", True) is True


def test_env_helpers_use_default_when_unset(monkeypatch) -> None:
    monkeypatch.delenv("AUTO_ROUTE_TEST_VALUE", raising=False)

    assert config._env_float("AUTO_ROUTE_TEST_VALUE", 1.5) == 1.5
    assert config._env_int("AUTO_ROUTE_TEST_VALUE", 3) == 3


def test_overrides_are_read_at_import(monkeypatch) -> None:
    monkeypatch.setenv("ROUTE_BUFFER_METERS", "35")
    monkeypatch.setenv("MAP_MATCHING_MAX_COORDINATES", "50")
    monkeypatch.setenv("ROUTE_SNAP_TO_NETWORK", "true")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.ROUTE_BUFFER_METERS == 35.0
        assert reloaded.MAP_MATCHING_MAX_COORDINATES == 50
        assert reloaded.ROUTE_SNAP_TO_NETWORK is True
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_defaults_match_documented_values() -> None:
    assert config.MAP_MATCHING_MAX_COORDINATES == 90
    assert config.ROUTE_SMOOTHING_TOLERANCE == pytest.approx(0.0001)
    assert config.MAP_MATCHING_GEOMETRY_FORMAT == "geojson"
