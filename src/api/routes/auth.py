"""Authentication routes (signup, signin, protected resource)."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from api.dependencies import get_token_service, get_user_repo, get_verified_claims
from api.models import (
    MessageResponse,
    ProtectedResponse,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
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
from services import auth_service
from services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

_ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    401: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


def _message(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


def _unauthorized(message: str) -> JSONResponse:
    return _message(status.HTTP_401_UNAUTHORIZED, message, headers={"WWW-Authenticate": "Bearer"})


async def missing_token_handler(request: Request, exc: MissingTokenError) -> JSONResponse:
    return _unauthorized("No token provided")


async def invalid_token_handler(request: Request, exc: InvalidTokenError) -> JSONResponse:
    return _unauthorized("Invalid token")


def _to_response(user: User) -> UserResponse:
    """Convert domain User to API UserResponse."""
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        created_at=user.created_at,
    )


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES,
)
async def signup(
    request: SignupRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new user and return a JWT token.

    Raises:
        400 if a field is missing or the email is already registered
    """
    try:
        _, token = auth_service.register(
            repo, tokens, name=request.name, email=request.email, password=request.password
        )
    except ValidationError as e:
        return _message(status.HTTP_400_BAD_REQUEST, str(e))
    except ConflictError:
        return _message(status.HTTP_400_BAD_REQUEST, "User already registered with this email")
    except Exception as e:
        logger.error("Error registering user", extra={"email": request.email, "error": str(e)})
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error registering user")

    return TokenResponse(message="User registered successfully", token=token)


@router.post("/signin", response_model=TokenResponse, responses=_ERROR_RESPONSES)
async def signin(
    request: SigninRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Login user and return JWT token.

    Raises:
        401 if credentials are invalid (same response for unknown email and wrong password)
    """
    try:
        token = auth_service.authenticate(repo, tokens, email=request.email, password=request.password)
    except ValidationError as e:
        return _message(status.HTTP_400_BAD_REQUEST, str(e))
    except InvalidCredentialsError:
        return _message(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")
    except Exception as e:
        logger.error("Error signing in", extra={"email": request.email, "error": str(e)})
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error signing in. Please try again")

    return TokenResponse(message="Logged in successfully", token=token)


@router.get("/protected", response_model=ProtectedResponse, responses=_ERROR_RESPONSES)
async def protected(
    claims: TokenClaims = Depends(get_verified_claims),
    repo: UserRepository = Depends(get_user_repo),
):
    """Return the user the bearer token was issued for.

    Raises:
        401 if the token is missing, invalid, expired, or its user no longer exists
    """
    try:
        user = auth_service.fetch_authorized_user(repo, claims)
    except InvalidTokenError:
        return _unauthorized("Invalid token")
    except Exception as e:
        logger.error("Error accessing protected route", extra={"error": str(e)})
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error accessing protected route")

    return ProtectedResponse(message="Access granted to protected route", user=_to_response(user))
