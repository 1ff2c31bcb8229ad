"""
Anti-CSRF state tokens for the OAuth authorize redirect.

States live in process memory: a restart forgets pending handshakes, which
only forces the affected users to click "log in" again.
"""

import secrets
import threading
import time
from typing import Callable, Dict, Optional

from ..constants import Defaults, Timeouts
from ..exceptions import InvalidStateError
from ..utils.logger import get_logger, mask_secret


class OAuthStateManager:
    """
    Issues single-use state tokens and verifies them on callback.

    A state is pending from issue() until it is consumed or its TTL elapses.
    Every read-modify-write happens under one lock, so two callbacks racing
    with the same state cannot both succeed.
    """

    def __init__(
        self,
        ttl_seconds: int = Timeouts.OAUTH_STATE_TTL,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._pending: Dict[str, float] = {}
        self._lock = threading.Lock()
        self.logger = get_logger()

    def issue(self) -> str:
        """Create a fresh state and record it as pending."""
        state = secrets.token_urlsafe(Defaults.STATE_TOKEN_BYTES)
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            self._pending[state] = now + self.ttl_seconds
            pending = len(self._pending)

        self.logger.debug("OAuth state issued", extra={"pending_states": pending})
        return state

    def consume(self, state: str) -> None:
        """
        Spend a pending state.

        An empty state is accepted without any check; it is reserved for
        trusted non-browser callers that never went through issue().

        Raises:
            InvalidStateError: If the state was never issued, already consumed, or expired
        """
        if state == "":
            return

        now = self._clock()
        with self._lock:
            expires_at = self._pending.pop(state, None)

        if expires_at is None:
            raise InvalidStateError(state=mask_secret(state))
        if expires_at <= now:
            raise InvalidStateError("OAuth state has expired", state=mask_secret(state))

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def clear(self) -> None:
        """Drop every pending state."""
        with self._lock:
            self._pending.clear()

    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock
        expired = [s for s, expires_at in self._pending.items() if expires_at <= now]
        for s in expired:
            del self._pending[s]
