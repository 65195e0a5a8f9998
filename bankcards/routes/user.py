"""API routes for registration and session tokens"""

from fastapi import APIRouter, Depends

from bankcards.schemas.token import RefreshRequestSchema, TokenPairSchema
from bankcards.schemas.user import LoginRequestSchema, UserCreateSchema
from bankcards.services.auth import AuthService

user_router = APIRouter(prefix="/users", tags=["Users"])


@user_router.post("/registration", response_model=TokenPairSchema)
def registration(
    user: UserCreateSchema,
    auth_service: AuthService = Depends(),
):
    """
    Create a new user and log it in.
    Does NOT require authentication (X-Token Header).
    """
    return auth_service.register(user)


@user_router.post("/login", response_model=TokenPairSchema)
def login(
    credentials: LoginRequestSchema,
    auth_service: AuthService = Depends(),
):
    return auth_service.login(credentials.username, credentials.password)


@user_router.post("/refresh-tokens", response_model=TokenPairSchema)
def refresh_tokens(
    refresh_request: RefreshRequestSchema,
    auth_service: AuthService = Depends(),
):
    return auth_service.refresh(refresh_request.refresh_token)
