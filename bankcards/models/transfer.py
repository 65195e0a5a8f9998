"""Transfer model. Append-only ledger of completed card-to-card transfers."""

from decimal import Decimal

from sqlalchemy import DECIMAL
from sqlalchemy.orm import Mapped, mapped_column

from bankcards.models.base import BaseModel


class Transfer(BaseModel):
    __tablename__ = "transfers"

    # plain ids instead of foreign keys: ledger rows outlive deleted cards
    from_card_id: Mapped[int] = mapped_column(nullable=False, index=True)
    to_card_id: Mapped[int] = mapped_column(nullable=False, index=True)

    amount: Mapped[Decimal] = mapped_column(DECIMAL(scale=2), nullable=False)
