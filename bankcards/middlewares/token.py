"""Middleware for User authentication"""

from fastapi import Depends, Header

from bankcards.errors.card import AccessDenied
from bankcards.errors.common import NotFoundError
from bankcards.errors.token import TokenInvalid
from bankcards.models.user import Role
from bankcards.schemas.user import IdentitySchema
from bankcards.services.token import TokenService
from bankcards.services.user import UserService


def get_identity_from_token(
    x_token: str = Header(
        description="Access token for User authentication",
    ),
    token_service: TokenService = Depends(),
    user_service: UserService = Depends(),
) -> IdentitySchema:
    username = token_service.verify_subject(x_token)
    try:
        identity = user_service.require_identity_by_username(username)
    except NotFoundError:
        # user was deleted after the token was issued
        raise TokenInvalid from None
    if not token_service.is_valid_for(x_token, identity):
        raise TokenInvalid
    return identity


def require_admin(
    identity: IdentitySchema = Depends(get_identity_from_token),
) -> IdentitySchema:
    if identity.role != Role.ADMIN:
        raise AccessDenied("ADMIN role required")
    return identity


def require_user(
    identity: IdentitySchema = Depends(get_identity_from_token),
) -> IdentitySchema:
    if identity.role != Role.USER:
        raise AccessDenied("USER role required")
    return identity
