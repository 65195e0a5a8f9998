"""Card service. Issues cards, changes their status and moves money between them."""

import logging
from decimal import Decimal

from fastapi import Depends
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from bankcards.errors.card import CardConcurrentlyModified
from bankcards.errors.common import NotFoundError, ValidationError
from bankcards.models.card import Card, CardStatus
from bankcards.models.transfer import Transfer
from bankcards.models.user import Role
from bankcards.schemas.base import PaginationSchema
from bankcards.schemas.card import (
    CardCreateSchema,
    CardFiltersSchema,
    CardSchema,
    CardUpdateSchema,
)
from bankcards.schemas.user import IdentitySchema
from bankcards.services.base import BaseService
from bankcards.services.card_access import CardAccessValidator
from bankcards.services.cipher import CardNumberCipher, get_card_cipher
from bankcards.services.ledger import TransferLedgerService
from bankcards.services.user import UserService
from bankcards.uow import get_uow

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class CardService(BaseService[Card]):
    model = Card

    def __init__(
        self,
        db: Session = Depends(get_uow),
        user_service: UserService = Depends(),
        validator: CardAccessValidator = Depends(),
        ledger: TransferLedgerService = Depends(),
        cipher: CardNumberCipher = Depends(get_card_cipher),
    ):
        self.db = db
        self.user_service = user_service
        self.validator = validator
        self.ledger = ledger
        self.cipher = cipher

    def to_schema(self, card: Card) -> CardSchema:
        return CardSchema(
            id=card.id,
            card_number=self.cipher.mask_from_ciphertext(card.number),
            owner=card.owner.username,
            expiry_date=card.expiration,
            status=card.status,
            balance=card.balance,
        )

    def _flush(self) -> None:
        try:
            self.db.flush()
        except StaleDataError:
            raise CardConcurrentlyModified from None

    def _get_for_update(self, card_id: int) -> Card:
        card = (
            self.db.query(self.model)
            .filter(self.model.id == card_id)
            .with_for_update()
            .first()
        )
        if not card:
            raise NotFoundError(f"{self.model.__name__} id={card_id}")
        return card

    def _check_amount(self, value: Decimal, field: str) -> None:
        """Balances are stored with two decimals, anything finer would be rounded away."""
        if value < 0:
            raise ValidationError(f"{field} must not be negative", where=field)
        if value != value.quantize(CENT):
            raise ValidationError(f"{field} must be a whole number of cents", where=field)

    def _set_status(self, card: Card, status: CardStatus) -> CardSchema:
        card.status = status
        self._flush()
        self.db.refresh(card)
        logger.info("Card id=%s is now %s", card.id, status.value)
        return self.to_schema(card)

    def create_card(self, schema: CardCreateSchema) -> CardSchema:
        logger.info("Creating card for owner_id=%s", schema.owner_id)
        self._check_amount(schema.balance, "balance")
        card = Card(
            number=self.cipher.encrypt(schema.number),
            owner=self.user_service.get(schema.owner_id),
            expiration=schema.expiration,
            balance=schema.balance,
            status=self.validator.determine_initial_status(schema.expiration),
        )
        return self.to_schema(self._save(card))

    def get_card(self, card_id: int, identity: IdentitySchema) -> CardSchema:
        card = self.get(card_id)
        self.validator.check_read_access(card, identity)
        return self.to_schema(card)

    def list_cards(
        self,
        filters: CardFiltersSchema,
        identity: IdentitySchema,
        skip: int = 0,
        limit: int = 100,
    ) -> PaginationSchema[CardSchema]:
        """Admins see every card, anyone else only their own whatever owner filter they send."""
        logger.info(
            "Fetching cards for user=%s status=%s owner=%s",
            identity.username,
            filters.status,
            filters.owner,
        )
        query = self.db.query(self.model)
        if filters.status is not None:
            status = self.validator.require_status(filters.status)
            query = query.filter(self.model.status == status)

        owner_id: int | None = None
        if identity.role != Role.ADMIN:
            owner_id = identity.id
        elif filters.owner is not None:
            owner_id = self.user_service.require_identity_by_username(filters.owner).id
        if owner_id is not None:
            query = query.filter(self.model.owner_id == owner_id)

        page = self._paginate(query, skip, limit)
        return PaginationSchema[CardSchema](
            items=[self.to_schema(card) for card in page.items],
            total=page.total,
            skip=page.skip,
            limit=page.limit,
        )

    def update_card(self, card_id: int, schema: CardUpdateSchema) -> CardSchema:
        """Replace number, owner, expiration and balance. A past expiration forces EXPIRED."""
        card = self.get(card_id)
        self._check_amount(schema.balance, "balance")
        card.number = self.cipher.encrypt(schema.number)
        card.owner = self.user_service.get(schema.owner_id)
        card.expiration = schema.expiration
        card.balance = schema.balance
        if self.validator.is_expired(schema.expiration):
            card.status = CardStatus.EXPIRED
        self._flush()
        self.db.refresh(card)
        logger.info("Updated card id=%s", card.id)
        return self.to_schema(card)

    def delete_card(self, card_id: int) -> int:
        card = self.get(card_id)
        self.db.delete(card)
        self.db.flush()
        logger.info("Deleted card id=%s", card_id)
        return card_id

    def transfer(
        self,
        from_card_id: int,
        to_card_id: int,
        amount: Decimal,
        identity: IdentitySchema,
    ) -> Transfer:
        """Move amount between two active cards of the same owner.

        Every check runs before the first balance is touched and the whole
        operation lives in the request's unit of work, so a failure leaves
        both balances and the ledger as they were.
        """
        self._check_amount(amount, "amount")
        if from_card_id == to_card_id:
            raise ValidationError("cannot transfer to the same card", where="to_card_id")

        from_card = self._get_for_update(from_card_id)
        to_card = self._get_for_update(to_card_id)

        self.validator.check_pair_ownership(from_card, to_card, identity)
        self.validator.check_both_active(from_card, to_card)
        self.validator.check_sufficient_funds(from_card, amount)

        from_card.balance = from_card.balance - amount
        to_card.balance = to_card.balance + amount
        self._flush()

        record = self.ledger.append(from_card, to_card, amount)
        logger.info(
            "Transferred %s from card id=%s to card id=%s, ledger id=%s",
            amount,
            from_card.id,
            to_card.id,
            record.id,
        )
        return record

    def request_block(self, card_id: int, identity: IdentitySchema) -> CardSchema:
        card = self.get(card_id)
        self.validator.check_ownership(card, identity)
        self.validator.check_active(card)
        return self._set_status(card, CardStatus.BLOCKED)

    def admin_block(self, card_id: int) -> CardSchema:
        return self._set_status(self.get(card_id), CardStatus.BLOCKED)

    def admin_activate(self, card_id: int) -> CardSchema:
        return self._set_status(self.get(card_id), CardStatus.ACTIVE)
