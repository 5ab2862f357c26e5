from dataclasses import dataclass, replace
from datetime import datetime


@dataclass
class User:
    """Domain model representing a registered user."""
    id: str
    name: str
    email: str
    created_at: datetime
    password_hash: str | None = None

    def public(self) -> 'User':
        """Return a copy without the password hash."""
        return replace(self, password_hash=None)
