"""Decide whether a freshly fetched record is a new broadcast."""

from __future__ import annotations

from .exceptions import TimeTravelError
from .models import AlertDecision, FetchedState, StreamerState


def _identifier_key(value: str) -> int | str:
    digits = value[1:] if value.startswith("-") else value
    if digits.isascii() and digits.isdigit():
        return int(value)
    return value


def identifiers_equal(left: str, right: str) -> bool:
    """Compare ids numerically when both are integers, else as strings."""
    lkey, rkey = _identifier_key(left), _identifier_key(right)
    if isinstance(lkey, int) and isinstance(rkey, int):
        return lkey == rkey
    return left == right


def decide(old: StreamerState | None, new: FetchedState) -> AlertDecision:
    """Return ALERT unless *new* repeats the broadcast stored in *old*.

    Raises :class:`TimeTravelError` when the stored broadcast count of the
    same user is greater than the fetched one.
    """

    if old is None or old.user_id is None:
        return AlertDecision.ALERT
    if not identifiers_equal(old.user_id, new.user_id):
        return AlertDecision.ALERT
    if old.broadcast_count is None:
        return AlertDecision.ALERT
    if old.broadcast_count > new.broadcast_count:
        raise TimeTravelError(
            user_id=new.user_id,
            stored_count=old.broadcast_count,
            fetched_count=new.broadcast_count,
        )
    if old.broadcast_count == new.broadcast_count:
        return AlertDecision.NO_ALERT
    return AlertDecision.ALERT


def record_changed(old: StreamerState | None, new: FetchedState) -> bool:
    """Return ``True`` if the stored record differs from *new*."""

    if old is None:
        return True
    return (
        old.user_id is None
        or old.broadcast_count is None
        or old.broadcast_id is None
        or not identifiers_equal(old.user_id, new.user_id)
        or old.broadcast_count < new.broadcast_count
        or not identifiers_equal(old.broadcast_id, new.broadcast_id)
    )
