"""JWT issuing and verification."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from domain.model.errors import InvalidTokenError
from domain.model.token import TokenClaims

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=24)


class TokenService:
    """Signs and verifies bearer tokens with a server-held secret."""

    def __init__(self, secret: str, algorithm: str = JWT_ALGORITHM, ttl: timedelta = TOKEN_TTL):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    def issue(self, user_id: str, email: str) -> str:
        """Create a signed token for the given identity, valid for the configured TTL."""
        now = datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            "email": email,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify signature and expiry and return the token's claims.

        Raises:
            InvalidTokenError: bad signature, malformed, expired, or missing claims.
                The cause is not exposed to the caller.
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise InvalidTokenError("Invalid token") from e

        user_id = payload.get("userId")
        if not user_id or "exp" not in payload:
            logger.debug("JWT verification failed: missing claims")
            raise InvalidTokenError("Invalid token")

        return TokenClaims(
            user_id=user_id,
            email=payload.get("email", ""),
            issued_at=_from_timestamp(payload.get("iat", payload["exp"])),
            expires_at=_from_timestamp(payload["exp"]),
        )


def _from_timestamp(value) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc)
