"""Login attempt limiting persisted in local storage.

A fixed window counts failed sign-in attempts per key (usually the e-mail
address). Reaching ``max_attempts`` locks the key for ``lockout_seconds``;
a successful sign-in clears the counter.
"""

import json
import math
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass

from cirkit.config import Settings
from cirkit.infrastructure.storage.local import KeyValueStorage
from cirkit.shared.logging import get_logger

logger = get_logger(__name__)

STORAGE_PREFIX = "rate_limit_"


@dataclass(frozen=True)
class RateLimitConfig:
    max_attempts: int = 5
    window_seconds: float = 15 * 60
    lockout_seconds: float = 15 * 60

    @classmethod
    def from_settings(cls, settings: Settings) -> "RateLimitConfig":
        return cls(
            max_attempts=settings.login_max_attempts,
            window_seconds=settings.login_window_seconds,
            lockout_seconds=settings.login_lockout_seconds,
        )


@dataclass
class RateLimitState:
    attempts: int
    window_start: float
    locked_until: float | None = None


@dataclass(frozen=True)
class RateLimitStatus:
    allowed: bool
    remaining_attempts: int
    lockout_end_time: float | None = None


class LoginRateLimiter:
    """Failed-login counter for one key."""

    def __init__(
        self,
        key: str,
        storage: KeyValueStorage,
        config: RateLimitConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.key = key
        self.storage = storage
        self.config = config or RateLimitConfig()
        self.clock = clock

    @property
    def storage_key(self) -> str:
        return f"{STORAGE_PREFIX}{self.key}"

    def _fresh(self, now: float) -> RateLimitState:
        return RateLimitState(attempts=0, window_start=now, locked_until=None)

    def _load(self) -> RateLimitState:
        raw = self.storage.get(self.storage_key)
        if raw:
            try:
                data = json.loads(raw)
                return RateLimitState(
                    attempts=int(data["attempts"]),
                    window_start=float(data["window_start"]),
                    locked_until=(
                        float(data["locked_until"])
                        if data.get("locked_until") is not None
                        else None
                    ),
                )
            except (ValueError, KeyError, TypeError):
                logger.warning("rate_limit_state_corrupt", key=self.key)
        return self._fresh(self.clock())

    def _save(self, state: RateLimitState) -> None:
        self.storage[self.storage_key] = json.dumps(asdict(state))

    def check(self) -> RateLimitStatus:
        """Whether another attempt is allowed right now."""
        now = self.clock()
        state = self._load()

        if state.locked_until is not None and now < state.locked_until:
            return RateLimitStatus(
                allowed=False, remaining_attempts=0, lockout_end_time=state.locked_until
            )

        if state.locked_until is not None:
            state = self._fresh(now)
            self._save(state)

        if now - state.window_start > self.config.window_seconds:
            state = self._fresh(now)
            self._save(state)

        remaining = self.config.max_attempts - state.attempts
        return RateLimitStatus(allowed=remaining > 0, remaining_attempts=remaining)

    def record_attempt(self, success: bool = False) -> RateLimitStatus:
        """Record the outcome of a sign-in attempt."""
        now = self.clock()

        if success:
            self._save(self._fresh(now))
            return RateLimitStatus(allowed=True, remaining_attempts=self.config.max_attempts)

        state = self._load()
        if now - state.window_start > self.config.window_seconds:
            state = self._fresh(now)

        state.attempts += 1

        if state.attempts >= self.config.max_attempts:
            state.locked_until = now + self.config.lockout_seconds
            self._save(state)
            logger.warning("login_locked_out", key=self.key, locked_until=state.locked_until)
            return RateLimitStatus(
                allowed=False, remaining_attempts=0, lockout_end_time=state.locked_until
            )

        self._save(state)
        return RateLimitStatus(
            allowed=True, remaining_attempts=self.config.max_attempts - state.attempts
        )

    def reset(self) -> None:
        self.storage.pop(self.storage_key, None)

    def remaining_lockout_seconds(self) -> int:
        """Seconds until the lockout ends, rounded up; 0 when not locked."""
        state = self._load()
        if state.locked_until is None:
            return 0
        remaining = state.locked_until - self.clock()
        return math.ceil(remaining) if remaining > 0 else 0
