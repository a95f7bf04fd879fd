from pathlib import Path

import pytest

from stream_alert.infrastructure.error import AlreadyRunningError
from stream_alert.infrastructure.lock import SingletonLock


def test_lock_writes_pid(tmp_path: Path) -> None:
    path = tmp_path / "lock"
    with SingletonLock(path) as lock:
        assert lock.locked
        assert path.read_text().strip().isdigit()
    assert not lock.locked


def test_second_instance_fails_fast(tmp_path: Path) -> None:
    path = tmp_path / "lock"
    with SingletonLock(path):
        other = SingletonLock(path)
        with pytest.raises(AlreadyRunningError) as exc:
            other.acquire()
        assert not other.locked
        assert exc.value.code == "INFRA_ALREADY_RUNNING"
        assert str(path) in exc.value.message


def test_lock_can_be_reacquired_after_release(tmp_path: Path) -> None:
    path = tmp_path / "lock"
    first = SingletonLock(path)
    first.acquire()
    first.release()
    first.release()
    with SingletonLock(path) as second:
        assert second.locked
