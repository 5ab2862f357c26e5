from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from adapter.mongodb.connection import get_mongodb_client, get_database_name
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import UnexpectedError
from domain.model.token import TokenClaims
from port.user_repository import UserRepository
from services import auth_service
from services.token_service import TokenService
from utils.config import get_settings

bearer_scheme = HTTPBearer(auto_error=False)


def _get_db():
    """Get MongoDB database, raising UnexpectedError if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise UnexpectedError("Database unavailable")
    return client[get_database_name()]


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


@lru_cache
def get_token_service() -> TokenService:
    return TokenService(get_settings().require_jwt_secret())


def get_verified_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Verify the bearer token. Declare before get_user_repo so no store is needed to reject it.

    Raises MissingTokenError / InvalidTokenError, handled by the app as 401.
    """
    return auth_service.verify_bearer(tokens, credentials.credentials if credentials else None)
