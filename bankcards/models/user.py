"""User model. Owns cards, authenticates with username and password."""

import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from bankcards.models.base import BaseModel


class Role(enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(BaseModel):
    __tablename__ = "users"
    __repr_hidden__ = ("password",)

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    # password hash, never the password itself
    password: Mapped[str] = mapped_column(nullable=False)
    role: Mapped[Role] = mapped_column(Enum(Role), nullable=False, default=Role.USER)
