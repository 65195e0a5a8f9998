"""Ownership, role and status rules for cards. Pure checks, no database access."""

from datetime import date
from decimal import Decimal

from bankcards.errors.card import (
    AccessDenied,
    CardNotActive,
    CardsNotActive,
    InsufficientFunds,
    StatusNotFound,
)
from bankcards.models.card import Card, CardStatus
from bankcards.models.user import Role
from bankcards.schemas.user import IdentitySchema


class CardAccessValidator:
    def require_status(self, name: str) -> CardStatus:
        try:
            return CardStatus(name.strip().upper())
        except (ValueError, AttributeError):
            raise StatusNotFound(name) from None

    def is_expired(self, expiration: date, now: date | None = None) -> bool:
        return expiration < (now or date.today())

    def determine_initial_status(
        self, expiration: date, now: date | None = None
    ) -> CardStatus:
        if self.is_expired(expiration, now):
            return CardStatus.EXPIRED
        return CardStatus.ACTIVE

    def check_ownership(self, card: Card, identity: IdentitySchema) -> None:
        if card.owner_id != identity.id:
            raise AccessDenied("Card does not belong to user")

    def check_pair_ownership(
        self, card_a: Card, card_b: Card, identity: IdentitySchema
    ) -> None:
        if card_a.owner_id != identity.id or card_b.owner_id != identity.id:
            raise AccessDenied("Cards must belong to user")

    def has_read_access(self, card: Card, identity: IdentitySchema) -> bool:
        return identity.role == Role.ADMIN or card.owner_id == identity.id

    def check_read_access(self, card: Card, identity: IdentitySchema) -> None:
        if not self.has_read_access(card, identity):
            raise AccessDenied("Card does not belong to user")

    def check_active(self, card: Card) -> None:
        if card.status != CardStatus.ACTIVE:
            raise CardNotActive(f"card id={card.id} is {card.status.value}")

    def check_both_active(self, card_a: Card, card_b: Card) -> None:
        if card_a.status != CardStatus.ACTIVE or card_b.status != CardStatus.ACTIVE:
            raise CardsNotActive

    def check_sufficient_funds(self, card: Card, amount: Decimal) -> None:
        if card.balance < amount:
            raise InsufficientFunds
