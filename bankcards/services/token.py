"""Token service. Issues and verifies signed, time-limited session tokens.

A token is a HS256 JWT carrying the username as subject, issue and expiry
timestamps and its kind. Access tokens are short lived and authenticate
requests, refresh tokens are long lived and only buy a new pair; a token
of one kind is refused where the other is expected.
"""

import logging
import time

import jwt
from fastapi import Depends

from bankcards.config import Config, get_config
from bankcards.errors.token import AuthError, TokenExpired, TokenInvalid, TokenMalformed
from bankcards.schemas.token import TokenPairSchema
from bankcards.schemas.user import IdentitySchema

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


class TokenService:
    ALGORITHM = "HS256"

    def __init__(self, config: Config = Depends(get_config)):
        self.config = config

    def _generate_new_token(self, username: str, ttl: int, kind: str) -> str:
        """Generate a new signed token of the given kind for username valid for ttl seconds."""
        now = int(time.time())
        data = {
            "sub": username,
            "iat": now,
            "exp": now + ttl,
            "type": kind,
        }
        return jwt.encode(data, self.config.secret_key, algorithm=self.ALGORITHM)

    def issue_access(self, identity: IdentitySchema) -> str:
        return self._generate_new_token(
            identity.username, self.config.access_token_ttl, ACCESS
        )

    def issue_refresh(self, identity: IdentitySchema) -> str:
        return self._generate_new_token(
            identity.username, self.config.refresh_token_ttl, REFRESH
        )

    def issue_pair(self, identity: IdentitySchema) -> TokenPairSchema:
        return TokenPairSchema(
            access_token=self.issue_access(identity),
            refresh_token=self.issue_refresh(identity),
        )

    def verify_subject(self, token: str, kind: str = ACCESS) -> str:
        """Check signature, structure, expiry and kind, return the username inside."""
        try:
            payload = jwt.decode(
                token,
                self.config.secret_key,
                algorithms=[self.ALGORITHM],
                options={"require": ["sub", "iat", "exp", "type"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired from None
        except jwt.InvalidTokenError:
            raise TokenMalformed from None
        if payload["type"] != kind:
            raise TokenInvalid(f"{kind} token expected")
        return payload["sub"]

    def is_valid_for(
        self, token: str, identity: IdentitySchema, kind: str = ACCESS
    ) -> bool:
        try:
            username = self.verify_subject(token, kind)
        except AuthError as exc:
            logger.debug("Token rejected: %s", exc.error)
            return False
        return username == identity.username
