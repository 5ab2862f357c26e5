"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to fixed HTTP status codes and messages.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError):
    """Required input is missing or empty."""


class ConflictError(DomainError):
    """A user with the same email already exists."""


class InvalidCredentialsError(DomainError):
    """Unknown email or wrong password.

    Both cases share this error so callers cannot tell whether an account exists.
    """


class MissingTokenError(DomainError):
    """No bearer token was presented."""


class InvalidTokenError(DomainError):
    """Token is malformed, badly signed, expired, or names an unknown user."""


class UnexpectedError(DomainError):
    """Persistence or infrastructure failure."""
