"""Auth service — registration, authentication and authorization logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

from domain.model.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    ValidationError,
)
from domain.model.token import TokenClaims
from domain.model.user import User
from port.user_repository import UserRepository
from services.password_service import hash_password, verify_password
from services.token_service import TokenService

logger = logging.getLogger(__name__)


def _require(*values: str | None) -> None:
    if not all(values):
        raise ValidationError("All fields are required")


def register(
    repo: UserRepository,
    tokens: TokenService,
    name: str | None,
    email: str | None,
    password: str | None,
) -> tuple[User, str]:
    """Register a new user and issue a token for it.

    Returns the created user (without password hash) and the token.

    Raises:
        ValidationError: a field is missing or empty
        ConflictError: email already registered
    """
    _require(name, email, password)

    if repo.get_by_email(email):
        raise ConflictError("User already registered with this email")

    # Token is signed before the insert so a signing failure leaves no record
    user_id = repo.new_id()
    token = tokens.issue(user_id, email)

    # create() raises ConflictError too if a concurrent signup won the race
    user = repo.create(
        name=name, email=email, password_hash=hash_password(password), user_id=user_id
    )

    logger.info("User registered", extra={"userId": user.id, "email": email})
    return user.public(), token


def authenticate(
    repo: UserRepository,
    tokens: TokenService,
    email: str | None,
    password: str | None,
) -> str:
    """Authenticate a user by email and password and return a new token.

    Doesn't reveal whether the email exists.

    Raises:
        ValidationError: a field is missing or empty
        InvalidCredentialsError: unknown email or wrong password
    """
    _require(email, password)

    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("Invalid credentials")

    logger.info("User logged in", extra={"userId": user.id, "email": email})
    return tokens.issue(user.id, user.email)


def verify_bearer(tokens: TokenService, token: str | None) -> TokenClaims:
    """Check a presented bearer token without touching the store.

    Raises:
        MissingTokenError: no token presented
        InvalidTokenError: token fails verification
    """
    if not token:
        raise MissingTokenError("No token provided")
    return tokens.verify(token)


def fetch_authorized_user(repo: UserRepository, claims: TokenClaims) -> User:
    """Load the user a verified token was issued for.

    Raises:
        InvalidTokenError: the user no longer exists
    """
    user = repo.get_by_id(claims.user_id)
    if not user:
        logger.warning("Token refers to unknown user", extra={"userId": claims.user_id})
        raise InvalidTokenError("Invalid token")
    return user.public()


def authorize_and_fetch(
    repo: UserRepository,
    tokens: TokenService,
    token: str | None,
) -> User:
    """Resolve a bearer token to the user it was issued for.

    Raises:
        MissingTokenError: no token presented
        InvalidTokenError: token fails verification or its user no longer exists
    """
    return fetch_authorized_user(repo, verify_bearer(tokens, token))
