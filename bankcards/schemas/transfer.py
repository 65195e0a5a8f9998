"""DTO for Transfer"""

from decimal import Decimal

from pydantic import Field, model_validator

from bankcards.schemas.base import BaseReadSchema, BaseSchema, Money


class TransferSchema(BaseReadSchema):
    from_card_id: int
    to_card_id: int
    amount: Money


class TransferCreateSchema(BaseSchema):
    from_card_id: int
    to_card_id: int
    amount: Decimal = Field(ge=0, decimal_places=2)

    @model_validator(mode="after")
    def check_ids_are_different(self):
        if self.from_card_id == self.to_card_id:
            raise ValueError("from_card_id and to_card_id must be different")
        return self
