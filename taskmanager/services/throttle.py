"""In-memory login throttling: consecutive failed attempts per email."""

import logging
from functools import lru_cache
from threading import Lock

from taskmanager.core.config import settings
from taskmanager.services.interfaces import AttemptStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 6


class InMemoryAttemptStore:
    """
    Failed-attempt counters held in a dict guarded by one lock.

    Process-local: counters are not shared between workers and are lost on
    restart. Use a shared store (e.g. Redis) for multi-instance deployments.
    Keys are never evicted. Every email ever tried, registered or not, keeps an
    entry until a successful login or reset, so a client spraying addresses can
    grow the map without bound; a shared store with key TTLs caps that.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._lock = Lock()

    def increment(self, key: str) -> int:
        with self._lock:
            count = self._counts.get(key, 0) + 1
            self._counts[key] = count
            return count

    def get(self, key: str) -> int | None:
        with self._lock:
            return self._counts.get(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._counts.pop(key, None)


class LoginThrottle:
    """
    Blocks an identity after max_attempts consecutive failed logins.

    There is no time window: a blocked identity stays blocked until
    record_success is called (successful login or password reset).

    Example:
        >>> throttle = LoginThrottle(InMemoryAttemptStore(), max_attempts=6)
        >>> if throttle.is_blocked("a@x.com"):
        ...     raise TooManyAttemptsError()
        >>> throttle.record_failure("a@x.com")
        1
    """

    def __init__(self, store: AttemptStore, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        self.max_attempts = max_attempts
        self._store = store

    def is_blocked(self, identity: str) -> bool:
        count = self._store.get(identity)
        blocked = count is not None and count >= self.max_attempts
        if blocked:
            logger.warning(
                "Login throttled",
                extra={"identity": identity, "attempt_count": count},
            )
        return blocked

    def record_failure(self, identity: str) -> int:
        """Increment the failure counter (starting at 1) and return the new count."""
        count = self._store.increment(identity)
        logger.info(
            "Login attempt failed",
            extra={
                "identity": identity,
                "attempt_count": count,
                "remaining_attempts": self.remaining_attempts(identity),
            },
        )
        return count

    def record_success(self, identity: str) -> None:
        """Forget all failures for identity."""
        self._store.delete(identity)

    def remaining_attempts(self, identity: str) -> int:
        """Failures left before identity is blocked; 0 once blocked."""
        return max(0, self.max_attempts - (self._store.get(identity) or 0))


@lru_cache
def get_login_throttle() -> LoginThrottle:
    """Process-wide throttle instance (cached)."""
    return LoginThrottle(InMemoryAttemptStore(), max_attempts=settings.LOGIN_MAX_ATTEMPTS)
