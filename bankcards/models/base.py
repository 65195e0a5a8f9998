"""Base for all ORM models"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlalchemy.inspection import inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class BaseModel(DeclarativeBase):
    # do not create separate table for this class
    __abstract__ = True

    # columns that never show up in repr()
    __repr_hidden__ = ()

    id: Mapped[int] = mapped_column(primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), nullable=False
    )
    modified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, nullable=True, onupdate=func.now()
    )

    def __repr__(self):
        model_name = self.__class__.__name__
        attr_strs = []
        for attr in inspect(self.__class__).columns.keys():
            if attr in self.__repr_hidden__:
                attr_strs.append(f"{attr}=<hidden>")
                continue
            attr_strs.append(f"{attr}={getattr(self, attr)!r}")
        return f"<{model_name}({', '.join(attr_strs)})>"
