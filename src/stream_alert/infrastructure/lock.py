from __future__ import annotations

import fcntl
import os
from pathlib import Path
from types import TracebackType
from typing import IO, Self

from loguru import logger

from .error import AlreadyRunningError, InfraError


class SingletonLock:
    """Exclusive non-blocking ``flock`` on *path*, held until :meth:`release`.

    The kernel drops the lock when the process dies, so a crashed instance
    never leaves a stale lock behind.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._fh: IO[str] | None = None

    @property
    def locked(self) -> bool:
        return self._fh is not None

    def acquire(self) -> None:
        try:
            fh = self.path.open("a+", encoding="utf-8")
        except OSError as e:
            raise InfraError(
                f"Can't open lock file {self.path}: {e}",
                code="INFRA_LOCK_OPEN_FAILED",
                context={"path": str(self.path)},
            ) from e
        try:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as e:
            fh.close()
            raise AlreadyRunningError(path=self.path) from e
        except OSError as e:
            fh.close()
            raise InfraError(
                f"Can't lock {self.path}: {e}",
                code="INFRA_LOCK_FAILED",
                context={"path": str(self.path)},
            ) from e
        fh.seek(0)
        fh.truncate()
        fh.write(f"{os.getpid()}\n")
        fh.flush()
        self._fh = fh
        logger.debug("Acquired lock {}", self.path)

    def release(self) -> None:
        if self._fh is None:
            return
        fcntl.flock(self._fh.fileno(), fcntl.LOCK_UN)
        self._fh.close()
        self._fh = None
        logger.debug("Released lock {}", self.path)

    def __enter__(self) -> Self:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
