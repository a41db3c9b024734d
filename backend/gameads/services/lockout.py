"""Login lockout policy.

Functions here operate on anything exposing ``failed_attempt_count`` and
``locked_until`` (normally an AdminAccount). They mutate those two fields but
never persist; the caller saves the account.

Lock durations escalate with the failed attempt count:

    attempts 1-3  -> 30 seconds
    attempts 4-6  -> 2 minutes
    attempts 7+   -> 10 minutes

A lock is only applied once the count reaches the configured maximum.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

LOCK_TIERS: tuple[tuple[int, timedelta], ...] = (
    (7, timedelta(minutes=10)),
    (4, timedelta(minutes=2)),
    (1, timedelta(seconds=30)),
)


class LockoutTarget(Protocol):
    failed_attempt_count: int
    locked_until: datetime | None


@dataclass(frozen=True)
class LockoutState:
    """Snapshot of the lockout fields as reported to clients."""

    locked: bool
    attempts_remaining: int
    lock_time_remaining: int


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by some drivers) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def lock_duration_for(attempts: int) -> timedelta:
    for threshold, duration in LOCK_TIERS:
        if attempts >= threshold:
            return duration
    return timedelta(0)


def is_locked(target: LockoutTarget, now: datetime) -> bool:
    """Return True while a lock is active.

    An expired lock is cleared here, along with the attempt count.
    """
    if target.locked_until is None:
        return False
    if as_utc(target.locked_until) > now:
        return True
    target.locked_until = None
    target.failed_attempt_count = 0
    return False


def remaining_lock_seconds(target: LockoutTarget, now: datetime) -> int:
    if target.locked_until is None:
        return 0
    remaining = (as_utc(target.locked_until) - now).total_seconds()
    return max(0, math.ceil(remaining))


def attempts_remaining(target: LockoutTarget, max_attempts: int) -> int:
    return max(0, max_attempts - target.failed_attempt_count)


def record_failed_attempt(target: LockoutTarget, now: datetime, max_attempts: int) -> None:
    target.failed_attempt_count = (target.failed_attempt_count or 0) + 1
    if target.failed_attempt_count >= max_attempts:
        target.locked_until = now + lock_duration_for(target.failed_attempt_count)


def reset(target: LockoutTarget) -> None:
    target.failed_attempt_count = 0
    target.locked_until = None


def snapshot(target: LockoutTarget, now: datetime, max_attempts: int) -> LockoutState:
    locked = is_locked(target, now)
    return LockoutState(
        locked=locked,
        attempts_remaining=attempts_remaining(target, max_attempts),
        lock_time_remaining=remaining_lock_seconds(target, now) if locked else 0,
    )
