"""Registration, login and token refresh"""

import logging

from fastapi import Depends

from bankcards.errors.common import NotFoundError
from bankcards.errors.token import InvalidCredentials, TokenInvalid, TokenMissing
from bankcards.schemas.token import TokenPairSchema
from bankcards.schemas.user import IdentitySchema, UserCreateSchema
from bankcards.services.password import verify_password
from bankcards.services.token import REFRESH, TokenService
from bankcards.services.user import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        user_service: UserService = Depends(),
        token_service: TokenService = Depends(),
    ):
        self.user_service = user_service
        self.token_service = token_service

    def register(self, schema: UserCreateSchema) -> TokenPairSchema:
        logger.info("Registering new user: %s", schema.username)
        user = self.user_service.create(schema)
        return self.token_service.issue_pair(IdentitySchema.model_validate(user))

    def login(self, username: str, password: str) -> TokenPairSchema:
        logger.info("Login attempt for user: %s", username)
        user = self.user_service.get_by_username(username)
        if not verify_password(password, user.password):
            logger.warning("Bad credentials for user: %s", username)
            raise InvalidCredentials
        return self.token_service.issue_pair(IdentitySchema.model_validate(user))

    def refresh(self, refresh_token: str | None) -> TokenPairSchema:
        if refresh_token is None or not refresh_token.strip():
            raise TokenMissing("Refresh token cannot be empty")
        username = self.token_service.verify_subject(refresh_token, REFRESH)
        try:
            identity = self.user_service.require_identity_by_username(username)
        except NotFoundError:
            raise TokenInvalid("Invalid refresh token") from None
        if not self.token_service.is_valid_for(refresh_token, identity, REFRESH):
            raise TokenInvalid("Invalid refresh token")
        return self.token_service.issue_pair(identity)
