from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TokenClaims:
    """Identity claims carried by a bearer token."""
    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime
