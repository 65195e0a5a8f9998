"""Base DTOs for API endpoints"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer

# money always leaves the API as a string with exactly two decimal places
Money = Annotated[
    Decimal,
    PlainSerializer(lambda value: format(value, ".2f"), return_type=str, when_used="json"),
]


class BaseSchema(BaseModel):
    # from_attributes builds schemas straight from ORM objects, services
    # paginate raw models so those must be allowed as field types too
    model_config = ConfigDict(
        from_attributes=True,
        arbitrary_types_allowed=True,
    )


class BaseReadSchema(BaseSchema):
    id: int
    created_at: datetime
    modified_at: datetime | None = None


M = TypeVar("M")


class PaginationSchema(BaseSchema, Generic[M]):
    items: list[M]
    total: int
    skip: int
    limit: int
