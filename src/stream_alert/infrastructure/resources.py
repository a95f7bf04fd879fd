"""Data/config directory bootstrap and line-oriented config lists."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from .error import DirectoryBootstrapError, InfraError, NoAlertSoundsError

DEFAULT_DEVICE = "default"


def ensure_dirs(paths: Iterable[Path]) -> None:
    for path in paths:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryBootstrapError(
                message=f"Can't create directory {path}: {e}",
                context={"path": str(path)},
            ) from e


def read_list(path: Path) -> list[str]:
    """Return non-empty, non-comment lines of *path*; missing file is empty."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except OSError as e:
        raise InfraError(
            f"Can't read {path}: {e}",
            code="INFRA_LIST_READ_FAILED",
            context={"path": str(path)},
        ) from e
    items: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            items.append(line)
    return items


def load_audio_devices(path: Path) -> list[str]:
    devices = read_list(path)
    if not devices:
        logger.info("No audio devices in {}, using the default device", path)
        return [DEFAULT_DEVICE]
    return devices


def load_alert_sounds(path: Path) -> list[Path]:
    sounds = [
        (p if p.is_absolute() else path.parent / p)
        for p in (Path(item).expanduser() for item in read_list(path))
    ]
    if not sounds:
        raise NoAlertSoundsError(path=path)
    for sound in sounds:
        if not sound.exists():
            logger.warning("Alert sound {} does not exist", sound)
    return sounds
