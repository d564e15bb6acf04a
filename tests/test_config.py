"""Tests for rps_duel.config"""
import pytest

from rps_duel.config import GameConfig


def test_defaults(monkeypatch):
    for name in ("RPS_HISTORY_SIZE", "RPS_AUTO_PLAY_MS", "RPS_SEED", "RPS_HOST", "RPS_PORT"):
        monkeypatch.delenv(name, raising=False)
    config = GameConfig.from_env()
    assert config == GameConfig()
    assert config.history_size == 10
    assert config.auto_play_ms == 1500
    assert config.seed is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("RPS_HISTORY_SIZE", "5")
    monkeypatch.setenv("RPS_AUTO_PLAY_MS", "250")
    monkeypatch.setenv("RPS_SEED", "42")
    monkeypatch.setenv("RPS_HOST", "0.0.0.0")
    monkeypatch.setenv("RPS_PORT", "8080")
    config = GameConfig.from_env()
    assert config == GameConfig(history_size=5, auto_play_ms=250, seed=42,
                                host="0.0.0.0", port=8080)


def test_bad_integer(monkeypatch):
    monkeypatch.setenv("RPS_PORT", "http")
    with pytest.raises(ValueError, match="RPS_PORT"):
        GameConfig.from_env()
