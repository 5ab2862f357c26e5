from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user credential storage."""
    def new_id(self) -> str:
        """Allocate an ID for a user that is about to be created."""
        ...

    def create(self, name: str, email: str, password_hash: str, user_id: str | None = None) -> User:
        """Create a new user. Raise ConflictError if the email is taken.

        Uses ``user_id`` when given (from new_id), otherwise allocates one.
        """
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by exact email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID without its password hash. Return None if not found."""
        ...
