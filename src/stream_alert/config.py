from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "stream-alert"


def _xdg_dir(env: str, fallback: str) -> Path:
    base = os.environ.get(env) or str(Path.home() / fallback)
    return Path(base) / APP_NAME


def _default_data_dir() -> Path:
    return _xdg_dir("XDG_DATA_HOME", ".local/share")


def _default_config_dir() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", ".config")


class Settings(BaseSettings):
    status_url: str = Field(default=...)
    interval: float = Field(default=9.0, ge=0)
    http_timeout: float = Field(default=10.0, gt=0)

    status_field: str = "status"
    online_status: str = "live"
    user_id_field: str = "user_id"
    broadcast_count_field: str = "broadcast_count"
    broadcast_id_field: str = "broadcast_id"

    data_dir: Path = Field(default_factory=_default_data_dir)
    config_dir: Path = Field(default_factory=_default_config_dir)

    player_command: str = "aplay -q"
    player_device_flag: str = "-D"
    alert_repeats: int = Field(default=3, ge=1)
    alert_pause: float = Field(default=1.0, ge=0)

    notifier: Literal["audio", "console"] = "audio"

    log_level: str = "INFO"
    log_rotation: str = "10 MB"

    limiter_max_rate: float = 10
    limiter_time_period: float = 10

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @field_validator("data_dir", "config_dir", mode="after")
    @classmethod
    def _expand_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @property
    def state_file(self) -> Path:
        return self.data_dir / "state"

    @property
    def lock_file(self) -> Path:
        return self.data_dir / "lock"

    @property
    def log_file(self) -> Path:
        return self.data_dir / f"{APP_NAME}.log"

    @property
    def devices_file(self) -> Path:
        return self.config_dir / "devices"

    @property
    def sounds_file(self) -> Path:
        return self.config_dir / "sounds"

    model_config = SettingsConfigDict(
        env_prefix="STREAM_ALERT_", env_file=".env", env_file_encoding="utf-8"
    )
