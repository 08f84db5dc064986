"""SessionStore — opaque session tokens with a fixed time-to-live.

NOTE: Expiry is checked lazily in ``validate``; nothing sweeps in the
background. ``purge_expired`` exists for callers that want to bound memory,
but the application never schedules it.

NOTE: There is no server-side logout. A session ends only by expiring.
"""

import logging
import secrets
from datetime import timedelta

from src.pari_common.datetime_utils import Clock, utc_now
from src.pari_common.errors import SessionInvalidError
from src.pari_session.domain.models import Session

logger = logging.getLogger(__name__)

_TOKEN_BYTES = 32


class SessionStore:
    def __init__(self, ttl: timedelta, clock: Clock = utc_now) -> None:
        if ttl <= timedelta(0):
            raise ValueError(f"Session TTL must be positive, got {ttl}")
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create_session(self, user_id: str) -> Session:
        """Issue a new token for ``user_id``. A user may hold any number of sessions."""
        token = secrets.token_urlsafe(_TOKEN_BYTES)
        while token in self._sessions:
            token = secrets.token_urlsafe(_TOKEN_BYTES)
        now = self._clock()
        session = Session(
            token=token,
            user_id=user_id,
            created_at=now,
            expires_at=now + self._ttl,
        )
        self._sessions[token] = session
        return session

    def get(self, token: str | None) -> Session | None:
        if not token:
            return None
        return self._sessions.get(token)

    def validate(self, token: str | None) -> str:
        """Return the session's user_id.

        Raises:
            SessionInvalidError: token missing, unknown, or past its expiry.
        """
        session = self.get(token)
        if session is None or session.is_expired(self._clock()):
            raise SessionInvalidError()
        return session.user_id

    def purge_expired(self) -> int:
        """Drop expired sessions. Returns how many were removed."""
        now = self._clock()
        expired = [t for t, s in self._sessions.items() if s.is_expired(now)]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.debug("Purged %d expired sessions", len(expired))
        return len(expired)
