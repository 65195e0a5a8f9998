"""Tests for the user directory and its identity cache"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bankcards.errors.common import NotFoundError
from bankcards.errors.user import UsernameTaken, UserOwnsCards
from bankcards.models.base import BaseModel
from bankcards.models.card import Card
from bankcards.models.user import Role, User
from bankcards.schemas.base import PaginationSchema
from bankcards.schemas.card import CardCreateSchema
from bankcards.schemas.user import IdentitySchema, UserCreateSchema, UserUpdateSchema
from bankcards.services.password import verify_password
from bankcards.services.user import IdentityCache, UserService


class TestIdentityCache:
    def test_put_and_get_by_both_keys(self):
        cache = IdentityCache(maxsize=8, ttl=60)
        identity = IdentitySchema(id=1, username="alice", role=Role.USER)
        cache.put(identity)
        assert cache.get_by_id(1) == identity
        assert cache.get_by_username("alice") == identity

    def test_invalidate_by_id_drops_username_too(self):
        cache = IdentityCache(maxsize=8, ttl=60)
        cache.put(IdentitySchema(id=1, username="alice", role=Role.USER))
        cache.invalidate(user_id=1)
        assert cache.get_by_id(1) is None
        assert cache.get_by_username("alice") is None

    def test_invalidate_by_username_drops_id_too(self):
        cache = IdentityCache(maxsize=8, ttl=60)
        cache.put(IdentitySchema(id=1, username="alice", role=Role.USER))
        cache.invalidate(username="alice")
        assert cache.get_by_id(1) is None

    def test_snapshot_read_before_invalidation_is_not_cached(self):
        cache = IdentityCache(maxsize=8, ttl=60)
        generation = cache.generation
        # a writer invalidates while the reader is still loading the old row
        cache.invalidate(user_id=1, username="alice")
        stale = IdentitySchema(id=1, username="alice", role=Role.ADMIN)
        assert cache.put(stale, generation) is False
        assert cache.get_by_id(1) is None
        assert cache.put(stale, cache.generation) is True

    def test_invalidate_unknown_keys(self):
        cache = IdentityCache(maxsize=8, ttl=60)
        cache.invalidate(user_id=42, username="nobody")
        cache.clear()


class TestUserLookups:
    def test_get_by_username(self, user_service, make_user):
        user = make_user("alice")
        assert user_service.get_by_username("alice").id == user.id

    def test_missing_user(self, user_service):
        with pytest.raises(NotFoundError):
            user_service.get_by_username("ghost")
        with pytest.raises(NotFoundError):
            user_service.require_identity(999)
        with pytest.raises(NotFoundError):
            user_service.require_identity_by_username("ghost")

    def test_identity_is_read_through_cache(self, user_service, identity_cache, make_user):
        user = make_user("alice", Role.ADMIN)
        identity = user_service.require_identity(user.id)
        assert identity == IdentitySchema(id=user.id, username="alice", role=Role.ADMIN)
        assert identity_cache.get_by_id(user.id) == identity
        assert identity_cache.get_by_username("alice") == identity
        assert user_service.require_identity_by_username("alice") is identity

    def test_search(self, user_service, make_user):
        for name in ("alice", "Alicia", "bob", "al_x", "alxx"):
            make_user(name)
        page = user_service.search("ALI")
        assert sorted(u.username for u in page.items) == ["Alicia", "alice"]
        assert page.total == 2
        # underscore is matched literally
        assert [u.username for u in user_service.search("l_").items] == ["al_x"]
        assert user_service.search("  ").total == 5
        assert user_service.search(None, skip=1, limit=2).total == 5
        assert len(user_service.search(None, skip=1, limit=2).items) == 2


    def test_page_holds_orm_rows(self, user_service, make_user):
        alice = make_user("alice")
        page = user_service.search("alice")
        assert isinstance(page, PaginationSchema)
        assert page.items == [alice]
        assert isinstance(page.items[0], User)


class TestUserWrites:
    def test_create_hashes_password(self, user_service):
        user = user_service.create(
            UserCreateSchema(username="alice", password="secret-pass")
        )
        assert user.role == Role.USER
        assert user.password != "secret-pass"
        assert verify_password("secret-pass", user.password)

    def test_username_is_unique(self, user_service, make_user):
        make_user("alice")
        with pytest.raises(UsernameTaken):
            user_service.create(UserCreateSchema(username="alice", password="secret-pass"))

    def test_update_is_visible_through_cache(self, user_service, make_user):
        user = make_user("alice")
        assert user_service.require_identity(user.id).role == Role.USER

        user_service.update(user.id, UserUpdateSchema(username="alicia", role=Role.ADMIN))

        identity = user_service.require_identity(user.id)
        assert identity.username == "alicia"
        assert identity.role == Role.ADMIN
        with pytest.raises(NotFoundError):
            user_service.require_identity_by_username("alice")

    def test_update_skips_blank_fields(self, user_service, make_user):
        user = make_user("alice")
        old_hash = user.password
        user_service.update(user.id, UserUpdateSchema(username="   ", password="      "))
        assert user.username == "alice"
        assert user.password == old_hash

    def test_update_to_taken_username(self, user_service, make_user):
        make_user("alice")
        bob = make_user("bob")
        with pytest.raises(UsernameTaken):
            user_service.update(bob.id, UserUpdateSchema(username="alice"))
        # renaming to your own name is not a conflict
        user_service.update(bob.id, UserUpdateSchema(username="bob"))

    def test_delete_drops_cached_identity(self, user_service, make_user):
        user = make_user("alice")
        user_service.require_identity(user.id)
        user_service.delete(user.id)
        with pytest.raises(NotFoundError):
            user_service.require_identity(user.id)
        with pytest.raises(NotFoundError):
            user_service.require_identity_by_username("alice")

    def test_delete_owner_of_cards(self, db_session, user_service, card_service, make_user):
        user = make_user("alice")
        card_service.create_card(
            CardCreateSchema(
                number="4000123412341234",
                owner_id=user.id,
                expiration=date(2099, 1, 1),
                balance=Decimal("10.00"),
            )
        )
        with pytest.raises(UserOwnsCards):
            user_service.delete(user.id)
        assert db_session.query(User).count() == 1

        user_service.delete(user.id, cascade=True)
        assert db_session.query(User).count() == 0
        assert db_session.query(Card).count() == 0


class TestCacheAcrossTransactions:
    @pytest.fixture
    def sessions(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'users.db'}",
            connect_args={"check_same_thread": False},
        )
        BaseModel.metadata.create_all(bind=engine)
        make_session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        writer, reader = make_session(), make_session()
        yield writer, reader
        writer.close()
        reader.close()
        engine.dispose()

    def test_demotion_is_visible_after_commit(self, sessions, identity_cache):
        writer, reader = sessions
        writes = UserService(db=writer, identity_cache=identity_cache)
        reads = UserService(db=reader, identity_cache=identity_cache)
        carol = writes.create(
            UserCreateSchema(username="carol", password="password-123", role=Role.ADMIN)
        )
        writer.commit()

        writes.update(carol.id, UserUpdateSchema(role=Role.USER))
        # another request misses the cache before the demotion commits
        assert reads.require_identity(carol.id).role == Role.ADMIN
        reader.commit()
        writer.commit()

        assert identity_cache.get_by_id(carol.id) is None
        assert reads.require_identity(carol.id).role == Role.USER

    def test_rolled_back_write_leaves_no_trace_in_cache(self, sessions, identity_cache):
        writer, _ = sessions
        writes = UserService(db=writer, identity_cache=identity_cache)
        carol = writes.create(
            UserCreateSchema(username="carol", password="password-123", role=Role.ADMIN)
        )
        writer.commit()

        writes.update(carol.id, UserUpdateSchema(role=Role.USER))
        # the same request reads its own uncommitted change, then fails
        assert writes.require_identity(carol.id).role == Role.USER
        writer.rollback()

        assert identity_cache.get_by_id(carol.id) is None
        assert writes.require_identity(carol.id).role == Role.ADMIN
