import logging
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from bankcards.db import get_db

logger = logging.getLogger(__name__)


class UnitOfWork:
    """All-or-nothing boundary around one request.

    Services only flush into the session. Their writes become visible to
    other requests when the whole request succeeds and the transaction
    commits; any exception rolls every write back, ledger rows included.
    """

    def __init__(self, db: Session):
        self.db = db

    def __getattr__(self, attr):
        # services talk to the unit of work as if it were the session
        return getattr(self.db, attr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.db.commit()
            else:
                logger.debug("Rolling back unit of work after %s", exc_type.__name__)
                self.db.rollback()
        finally:
            self.db.close()


def get_uow(
    db: Session = Depends(get_db),
) -> Generator[UnitOfWork, None, None]:
    """One unit of work per request, shared by every service the route pulls in."""
    with UnitOfWork(db) as uow:
        yield uow
