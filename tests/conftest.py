"""Fixtures for service level tests on an in-memory database"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bankcards.models.base import BaseModel
from bankcards.models.user import Role, User
from bankcards.services.card import CardService
from bankcards.services.card_access import CardAccessValidator
from bankcards.services.cipher import CardNumberCipher
from bankcards.services.ledger import TransferLedgerService
from bankcards.services.password import hash_password
from bankcards.services.user import IdentityCache, UserService

TEST_ENCRYPTION_KEY = "0123456789abcdef"


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    BaseModel.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def cipher():
    return CardNumberCipher(TEST_ENCRYPTION_KEY)


@pytest.fixture
def identity_cache():
    return IdentityCache(maxsize=128, ttl=60)


@pytest.fixture
def user_service(db_session: Session, identity_cache):
    return UserService(db=db_session, identity_cache=identity_cache)


@pytest.fixture
def card_service(db_session: Session, user_service, cipher):
    return CardService(
        db=db_session,
        user_service=user_service,
        validator=CardAccessValidator(),
        ledger=TransferLedgerService(db=db_session),
        cipher=cipher,
    )


@pytest.fixture
def make_user(db_session: Session):
    """Insert a user directly, skipping the service layer"""

    def f(username: str, role: Role = Role.USER) -> User:
        user = User(username=username, password=hash_password("password-123"), role=role)
        db_session.add(user)
        db_session.flush()
        return user

    return f
