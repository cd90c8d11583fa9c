"""Tests for environment-driven configuration."""

from __future__ import annotations

from datetime import date

import pytest

from streakkeeper.config import BaseConfig, TestConfig


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    for name in (
        "STREAKKEEPER_DATABASE_URL",
        "STREAKKEEPER_DEV_MODE",
        "STREAKKEEPER_TODAY",
        "STREAKKEEPER_HEATMAP_DAYS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STREAKKEEPER_DATA_DIR", str(tmp_path / "data"))


def test_defaults(tmp_path):
    config = BaseConfig()

    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL.endswith("streakkeeper.db")
    assert config.DEV_MODE is True
    assert config.TODAY is None
    assert config.HEATMAP_DAYS == 30
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_pinned_today(monkeypatch):
    monkeypatch.setenv("STREAKKEEPER_TODAY", "2024-01-08")
    assert BaseConfig().today() == date(2024, 1, 8)


def test_unpinned_today_uses_local_date():
    assert BaseConfig().today() == date.today()


def test_invalid_today_rejected(monkeypatch):
    monkeypatch.setenv("STREAKKEEPER_TODAY", "08/01/2024")
    with pytest.raises(ValueError):
        BaseConfig()


@pytest.mark.parametrize("value, expected", [("0", False), ("no", False), ("TRUE", True), ("on", True)])
def test_dev_mode_flag(monkeypatch, value, expected):
    monkeypatch.setenv("STREAKKEEPER_DEV_MODE", value)
    assert BaseConfig().DEV_MODE is expected


def test_heatmap_days_must_be_positive(monkeypatch):
    monkeypatch.setenv("STREAKKEEPER_HEATMAP_DAYS", "0")
    with pytest.raises(ValueError):
        BaseConfig()


def test_database_url_override(monkeypatch):
    monkeypatch.setenv("STREAKKEEPER_DATABASE_URL", "postgresql://localhost/habits")
    config = BaseConfig()
    assert config.DATABASE_URL == "postgresql://localhost/habits"
    assert config.sqlalchemy_engine_options() == {}


def test_test_config_uses_memory_database():
    config = TestConfig()
    assert config.DATABASE_URL == "sqlite://"
    assert "poolclass" in config.sqlalchemy_engine_options()
