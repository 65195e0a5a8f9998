"""DTO for session tokens"""

from bankcards.schemas.base import BaseSchema


class RefreshRequestSchema(BaseSchema):
    refresh_token: str | None = None


class TokenPairSchema(BaseSchema):
    access_token: str
    refresh_token: str
