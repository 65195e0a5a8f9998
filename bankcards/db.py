"""Database connection and schema creation"""

import logging
import os
from typing import Any, Generator

from fastapi import Depends
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from bankcards.config import Config, get_config
from bankcards.models.base import BaseModel

# models register their tables on BaseModel.metadata when imported
from bankcards.models.card import Card  # noqa: F401
from bankcards.models.transfer import Transfer  # noqa: F401
from bankcards.models.user import User  # noqa: F401

logger = logging.getLogger(__name__)


class DatabaseConnection:
    engine: Engine
    session_local: sessionmaker[Session]
    # tables are created by the first connection of the process only
    _tables_ready: bool = False

    def __init__(self, config: Config = Depends(get_config)) -> None:
        self.engine = create_engine(config.database_url, **self._engine_options(config))
        self.session_local = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )
        if not DatabaseConnection._tables_ready:
            self.create_tables()
            DatabaseConnection._tables_ready = True

    @staticmethod
    def _engine_options(config: Config) -> dict[str, Any]:
        if config.database_url.startswith("sqlite"):
            os.makedirs(config.database_path.parent, exist_ok=True)
            # sessions are handed between the threadpool workers
            return {"connect_args": {"check_same_thread": False}}
        # server databases drop idle connections
        return {"pool_pre_ping": True}

    def create_tables(self) -> None:
        logger.info("Creating tables on %s", self.engine.url.render_as_string())
        BaseModel.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        logger.info("Dropping tables on %s", self.engine.url.render_as_string())
        BaseModel.metadata.drop_all(bind=self.engine)

    def get_session(self) -> Session:
        return self.session_local()


def get_db(db_conn: DatabaseConnection = Depends()) -> Generator[Session, Any, None]:
    """Session for a single request, closed once the request is done."""
    session = db_conn.get_session()
    try:
        yield session
    finally:
        session.close()
