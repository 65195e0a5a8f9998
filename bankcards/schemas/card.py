"""DTO for Card"""

from datetime import date
from decimal import Decimal

from pydantic import Field

from bankcards.models.card import CardStatus
from bankcards.schemas.base import BaseSchema, Money


class CardSchema(BaseSchema):
    id: int
    # always masked, e.g. "**** **** **** 1234"
    card_number: str
    owner: str
    expiry_date: date
    status: CardStatus
    balance: Money


class CardCreateSchema(BaseSchema):
    number: str = Field(pattern=r"^\d{16}$")
    owner_id: int
    expiration: date
    balance: Decimal = Field(ge=0, decimal_places=2)


class CardUpdateSchema(CardCreateSchema):
    """Update replaces every field of the card, same shape as creation."""


class CardFiltersSchema(BaseSchema):
    status: str | None = None
    # owner username, honoured for admins only
    owner: str | None = None
