"""Game configuration with environment overrides."""

import os
from dataclasses import dataclass
from typing import Optional

from .history import DEFAULT_HISTORY_SIZE

DEFAULT_AUTO_PLAY_MS = 1500
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5000


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass
class GameConfig:
    history_size: int = DEFAULT_HISTORY_SIZE
    auto_play_ms: int = DEFAULT_AUTO_PLAY_MS
    seed: Optional[int] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls) -> "GameConfig":
        """Build a config from RPS_* environment variables."""
        return cls(
            history_size=_env_int("RPS_HISTORY_SIZE", DEFAULT_HISTORY_SIZE),
            auto_play_ms=_env_int("RPS_AUTO_PLAY_MS", DEFAULT_AUTO_PLAY_MS),
            seed=_env_int("RPS_SEED", None),
            host=os.environ.get("RPS_HOST", DEFAULT_HOST),
            port=_env_int("RPS_PORT", DEFAULT_PORT),
        )
