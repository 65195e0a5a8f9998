"""Transfer ledger. Records are only ever appended."""

from decimal import Decimal

from fastapi import Depends
from sqlalchemy.orm import Session

from bankcards.models.card import Card
from bankcards.models.transfer import Transfer
from bankcards.uow import get_uow


class TransferLedgerService:
    def __init__(self, db: Session = Depends(get_uow)):
        self.db = db

    def append(self, from_card: Card, to_card: Card, amount: Decimal) -> Transfer:
        record = Transfer(
            from_card_id=from_card.id,
            to_card_id=to_card.id,
            amount=amount,
        )
        self.db.add(record)
        self.db.flush()
        self.db.refresh(record)
        return record
