from __future__ import annotations

import os
from pathlib import Path
from types import TracebackType
from typing import IO, Self

from loguru import logger
from pydantic import ValidationError

from stream_alert.application.ports import StateStoreProtocol
from stream_alert.domain.models import FetchedState, StreamerState

from .error import StateStoreError

_FIELDS = ("user_id", "broadcast_count", "broadcast_id")


class FileStateStore(StateStoreProtocol):
    """Three-line state file kept open for the lifetime of the process.

    Line order is fixed: user id, broadcast count, broadcast id. Missing
    or blank lines are treated as absent fields.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        try:
            path.touch(exist_ok=True)
            self._fh: IO[str] = path.open("r+", encoding="utf-8")
        except OSError as e:
            raise StateStoreError(
                message=f"Can't open state file {path}: {e}",
                context={"path": str(path)},
            ) from e

    def load(self) -> StreamerState | None:
        try:
            self._fh.seek(0)
            lines = [self._fh.readline() for _ in _FIELDS]
        except (OSError, ValueError) as e:
            raise StateStoreError(
                message=f"Can't read state file {self.path}: {e}",
                context={"path": str(self.path)},
            ) from e

        values = {
            name: line.strip()
            for name, line in zip(_FIELDS, lines)
            if line.strip()
        }
        if not values:
            return None
        try:
            return StreamerState.model_validate(values)
        except ValidationError as e:
            raise StateStoreError(
                message=f"State file {self.path} is corrupted: {e}",
                context={"path": str(self.path), "values": values},
            ) from e

    def persist(self, state: FetchedState) -> None:
        text = f"{state.user_id}\n{state.broadcast_count}\n{state.broadcast_id}\n"
        try:
            self._fh.seek(0)
            self._fh.truncate()
            self._fh.write(text)
            self._fh.flush()
            os.fsync(self._fh.fileno())
        except (OSError, ValueError) as e:
            raise StateStoreError(
                message=f"Can't write state file {self.path}: {e}",
                context={"path": str(self.path)},
            ) from e
        logger.trace("State persisted to {}", self.path)

    def clear(self) -> None:
        try:
            self._fh.seek(0)
            self._fh.truncate()
            self._fh.flush()
            os.fsync(self._fh.fileno())
        except (OSError, ValueError) as e:
            raise StateStoreError(
                message=f"Can't clear state file {self.path}: {e}",
                context={"path": str(self.path)},
            ) from e

    def close(self) -> None:
        self._fh.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
