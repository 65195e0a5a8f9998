"""DTO for User"""

from pydantic import ConfigDict, Field

from bankcards.models.user import Role
from bankcards.schemas.base import BaseReadSchema, BaseSchema


class IdentitySchema(BaseSchema):
    """Authenticated principal. Immutable snapshot, safe to share between requests."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    username: str
    role: Role


class UserSchema(BaseReadSchema):
    username: str
    role: Role


class UserCreateSchema(BaseSchema):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6, max_length=100)
    role: Role = Role.USER


class UserUpdateSchema(BaseSchema):
    username: str | None = Field(default=None, min_length=3, max_length=50)
    password: str | None = Field(default=None, min_length=6, max_length=100)
    role: Role | None = None


class LoginRequestSchema(BaseSchema):
    username: str
    password: str
