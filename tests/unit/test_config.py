from __future__ import annotations

import os

import pytest

from src.config import ImportConfig, env_bool
from src.domain.exceptions import ConfigError

_VARS = (
    "GTFS_PATHS",
    "MAP_NAME",
    "MATCH_TOLERANCE_M",
    "ROUTE_STORE_BUCKET",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    cfg = ImportConfig.from_env()

    assert cfg.gtfs_paths == ("data/gtfs",)
    assert cfg.map_name == "default"
    assert cfg.tolerance_m == 25.0
    assert cfg.route_store_bucket is None
    assert cfg.log_level == "INFO"


def test_reads_every_variable(monkeypatch) -> None:
    monkeypatch.setenv("GTFS_PATHS", os.pathsep.join(["feeds/bus", " feeds/tram ", ""]))
    monkeypatch.setenv("MAP_NAME", "gran-canaria")
    monkeypatch.setenv("MATCH_TOLERANCE_M", "40.5")
    monkeypatch.setenv("ROUTE_STORE_BUCKET", "routes-bucket")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    cfg = ImportConfig.from_env()

    assert cfg.gtfs_paths == ("feeds/bus", "feeds/tram")
    assert cfg.map_name == "gran-canaria"
    assert cfg.tolerance_m == 40.5
    assert cfg.route_store_bucket == "routes-bucket"
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["wide", "0", "-3"])
def test_rejects_bad_tolerance(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("MATCH_TOLERANCE_M", raw)

    with pytest.raises(ConfigError):
        ImportConfig.from_env()


@pytest.mark.parametrize("raw", ["a/b", "..", "."])
def test_rejects_map_names_that_are_paths(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("MAP_NAME", raw)

    with pytest.raises(ConfigError):
        ImportConfig.from_env()


def test_rejects_empty_feed_list(monkeypatch) -> None:
    monkeypatch.setenv("GTFS_PATHS", os.pathsep)

    with pytest.raises(ConfigError):
        ImportConfig.from_env()


@pytest.mark.parametrize(
    ("raw", "expected"), [("1", True), ("Yes", True), ("off", False), ("", False)]
)
def test_env_bool(monkeypatch, raw: str, expected: bool) -> None:
    monkeypatch.setenv("SOME_FLAG", raw)

    assert env_bool("SOME_FLAG") is expected
