"""Card model. Holds an encrypted card number and a balance."""

import enum
from datetime import date
from decimal import Decimal

from sqlalchemy import DECIMAL, Date, Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bankcards.models.base import BaseModel
from bankcards.models.user import User


class CardStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"
    EXPIRED = "EXPIRED"


class Card(BaseModel):
    __tablename__ = "cards"
    __repr_hidden__ = ("number",)

    # ciphertext produced by CardNumberCipher
    number: Mapped[str] = mapped_column(String(255), nullable=False)

    owner_id: Mapped[int] = mapped_column(
        ForeignKey("users.id"), nullable=False, index=True
    )
    owner: Mapped[User] = relationship()

    expiration: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[CardStatus] = mapped_column(
        Enum(CardStatus), nullable=False, default=CardStatus.ACTIVE
    )
    balance: Mapped[Decimal] = mapped_column(
        DECIMAL(scale=2), nullable=False, default=Decimal(0)
    )

    # bumped on every UPDATE, a stale write raises StaleDataError
    version: Mapped[int] = mapped_column(nullable=False)

    __mapper_args__ = {"version_id_col": version}
