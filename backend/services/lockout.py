"""
Account lockout state machine.

Pure functions over ``(login_attempts, lock_until)``; nothing here touches the
database or the clock; callers pass ``now`` in and persist what comes back.

    Unlocked(n) --failure, n+1 < max--> Unlocked(n+1)
    Unlocked(n) --failure, n+1 >= max--> Locked(now + lock_duration)
    Locked(t), now < t --any attempt--> rejected, no state change
    Locked(t), now >= t --evaluated as--> Unlocked(0)
    any --success--> Unlocked(0)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union

from helpers.time_utils import ensure_utc


@dataclass(frozen=True)
class LockoutPolicy:
    max_attempts: int = 5
    lock_duration: timedelta = timedelta(hours=2)


@dataclass(frozen=True)
class Unlocked:
    attempts: int = 0


@dataclass(frozen=True)
class Locked:
    until: datetime


LockState = Union[Unlocked, Locked]


@dataclass(frozen=True)
class LockoutUpdate:
    """Values to persist on the account after an attempt."""

    login_attempts: int
    lock_until: Optional[datetime]

    @property
    def locked(self) -> bool:
        return self.lock_until is not None


def evaluate_lock_state(
    now: datetime, attempts: int, lock_until: Optional[datetime]
) -> LockState:
    """
    Current state of an account.

    An expired lock counts as unlocked and its stale attempt counter is
    discarded, so the next failure starts counting from one again.
    """
    lock_until = ensure_utc(lock_until)
    if lock_until is not None:
        if lock_until > now:
            return Locked(until=lock_until)
        return Unlocked(attempts=0)
    return Unlocked(attempts=attempts or 0)


def register_failure(
    state: LockState, now: datetime, policy: LockoutPolicy = LockoutPolicy()
) -> LockoutUpdate:
    if isinstance(state, Locked):
        raise ValueError("Failures are not counted while the account is locked")

    attempts = state.attempts + 1
    if attempts >= policy.max_attempts:
        return LockoutUpdate(login_attempts=attempts, lock_until=now + policy.lock_duration)
    return LockoutUpdate(login_attempts=attempts, lock_until=None)


def register_success() -> LockoutUpdate:
    return LockoutUpdate(login_attempts=0, lock_until=None)
