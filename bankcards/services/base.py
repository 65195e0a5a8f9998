"""Base service with the lookups every model service needs."""

from typing import Generic, Type, TypeVar

from fastapi import Depends
from sqlalchemy.orm import Query, Session

from bankcards.errors.common import NotFoundError
from bankcards.models.base import BaseModel
from bankcards.schemas.base import PaginationSchema
from bankcards.uow import get_uow

M = TypeVar("M", bound=BaseModel)  # model


class BaseService(Generic[M]):
    model: Type[M]
    db: Session

    def __init__(self, db: Session = Depends(get_uow)):
        self.db = db

    def get(self, obj_id: int) -> M:
        db_obj = self.db.query(self.model).filter(self.model.id == obj_id).first()
        if not db_obj:
            raise NotFoundError(f"{self.model.__name__} id={obj_id}")
        return db_obj

    def _save(self, obj: M) -> M:
        self.db.add(obj)
        self.db.flush()
        self.db.refresh(obj)
        return obj

    def _paginate(self, query: Query[M], skip: int, limit: int) -> PaginationSchema[M]:
        query = query.order_by(self.model.id.desc())
        total = query.count()
        items = query.offset(skip).limit(limit).all()
        return PaginationSchema[M](items=items, total=total, skip=skip, limit=limit)
