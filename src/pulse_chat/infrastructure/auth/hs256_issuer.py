from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt


class HS256Issuer:
    """Sign short-lived bearer tokens whose ``sub`` is the user id."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_minutes: int = 60 * 24) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(minutes=expires_minutes)

    def issue(self, user_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {"sub": str(user_id), "iat": now, "exp": now + self._ttl}
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)
