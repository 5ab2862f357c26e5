"""Password hashing with bcrypt."""

import bcrypt

# Work factor 8 (2^8 iterations); fixed for every hash this service produces
BCRYPT_ROUNDS = 8

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash password with a fresh random salt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash as string (salt and cost embedded)
    """
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_encode(password), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash.

    Returns False for a malformed or missing hash instead of raising.
    """
    if not isinstance(plain_password, str) or not isinstance(hashed_password, str):
        return False
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed_password.encode('utf-8'))
    except ValueError:
        return False
