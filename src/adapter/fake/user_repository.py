"""In-memory implementation of UserRepository for testing."""

import uuid
from datetime import datetime, timezone
from domain.model.errors import ConflictError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def create(self, name: str, email: str, password_hash: str, user_id: str | None = None) -> User:
        if any(u.email == email for u in self.store.values()):
            raise ConflictError("User already registered with this email")

        user = User(
            id=user_id or self.new_id(),
            name=name,
            email=email,
            created_at=datetime.now(timezone.utc),
            password_hash=password_hash,
        )
        self.store[user.id] = user
        return user

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    def get_by_id(self, user_id: str) -> User | None:
        user = self.store.get(user_id)
        return user.public() if user else None
