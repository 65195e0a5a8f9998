"""User service. Resolves users by id or username and manages accounts.

Resolved identities go through a process-wide read-through cache. Every
write to a user drops the affected cache keys, so a read that follows a
write observes the write.
"""

import logging
import threading
import time

from cachetools import TTLCache
from fastapi import Depends
from sqlalchemy import event, func
from sqlalchemy.orm import Session

from bankcards.config import Config, get_config
from bankcards.errors.common import NotFoundError
from bankcards.errors.user import UsernameTaken, UserOwnsCards
from bankcards.models.card import Card
from bankcards.models.user import User
from bankcards.schemas.base import PaginationSchema
from bankcards.schemas.user import IdentitySchema, UserCreateSchema, UserUpdateSchema
from bankcards.services.base import BaseService
from bankcards.services.password import hash_password
from bankcards.uow import get_uow

logger = logging.getLogger(__name__)


class IdentityCache:
    """Identity snapshots keyed by user id and by username.

    Every invalidation bumps a generation counter. A reader takes the
    generation before it loads a user and `put` drops the snapshot if an
    invalidation happened meanwhile, so a row read before a concurrent
    commit never lands in the cache after that commit.
    """

    def __init__(self, maxsize: int, ttl: float):
        self._by_id: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=time.time)
        self._by_username: TTLCache = TTLCache(
            maxsize=maxsize, ttl=ttl, timer=time.time
        )
        self._generation = 0
        self._lock = threading.RLock()

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def get_by_id(self, user_id: int) -> IdentitySchema | None:
        with self._lock:
            return self._by_id.get(user_id)

    def get_by_username(self, username: str) -> IdentitySchema | None:
        with self._lock:
            return self._by_username.get(username)

    def put(self, identity: IdentitySchema, generation: int | None = None) -> bool:
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._by_id[identity.id] = identity
            self._by_username[identity.username] = identity
            return True

    def invalidate(
        self, user_id: int | None = None, username: str | None = None
    ) -> None:
        with self._lock:
            self._generation += 1
            cached = self._by_id.pop(user_id, None) if user_id is not None else None
            if cached is not None:
                self._by_username.pop(cached.username, None)
            if username is not None:
                cached = self._by_username.pop(username, None)
                if cached is not None:
                    self._by_id.pop(cached.id, None)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._by_id.clear()
            self._by_username.clear()


# session.info key holding invalidations to repeat once the transaction commits
PENDING_INVALIDATIONS = "bankcards.pending_identity_invalidations"


@event.listens_for(Session, "after_commit")
@event.listens_for(Session, "after_rollback")
def _run_pending_invalidations(session: Session) -> None:
    # after a rollback too: the request may have cached its own uncommitted rows
    for cache, user_id, username in session.info.pop(PENDING_INVALIDATIONS, ()):
        cache.invalidate(user_id=user_id, username=username)


_identity_cache: IdentityCache | None = None
_identity_cache_lock = threading.Lock()


def get_identity_cache(config: Config = Depends(get_config)) -> IdentityCache:
    global _identity_cache
    if _identity_cache is None:
        with _identity_cache_lock:
            if _identity_cache is None:
                _identity_cache = IdentityCache(
                    maxsize=config.identity_cache_size, ttl=config.identity_cache_ttl
                )
    return _identity_cache


class UserService(BaseService[User]):
    model = User

    def __init__(
        self,
        db: Session = Depends(get_uow),
        identity_cache: IdentityCache = Depends(get_identity_cache),
    ):
        self.db = db
        self._identity_cache = identity_cache

    def get_by_username(self, username: str) -> User:
        db_obj = (
            self.db.query(self.model).filter(self.model.username == username).first()
        )
        if not db_obj:
            raise NotFoundError(f"{self.model.__name__} {username=}")
        return db_obj

    def require_identity(self, user_id: int) -> IdentitySchema:
        identity = self._identity_cache.get_by_id(user_id)
        if identity is None:
            generation = self._identity_cache.generation
            identity = IdentitySchema.model_validate(self.get(user_id))
            self._identity_cache.put(identity, generation)
        return identity

    def require_identity_by_username(self, username: str) -> IdentitySchema:
        identity = self._identity_cache.get_by_username(username)
        if identity is None:
            generation = self._identity_cache.generation
            identity = IdentitySchema.model_validate(self.get_by_username(username))
            self._identity_cache.put(identity, generation)
        return identity

    def search(
        self, q: str | None = None, skip=0, limit=100
    ) -> PaginationSchema[User]:
        """Case-insensitive username substring search, all users when q is blank."""
        query = self.db.query(self.model)
        if q is not None and q.strip():
            needle = q.strip().lower()
            query = query.filter(
                func.lower(self.model.username).contains(needle, autoescape=True)
            )
        return self._paginate(query, skip, limit)

    def _forget(self, user_id: int | None = None, username: str | None = None) -> None:
        """Drop cached identities now and once more when the transaction ends."""
        self._identity_cache.invalidate(user_id=user_id, username=username)
        pending = self.db.info.setdefault(PENDING_INVALIDATIONS, [])
        pending.append((self._identity_cache, user_id, username))

    def _ensure_username_free(self, username: str, user_id: int | None = None) -> None:
        query = self.db.query(self.model).filter(self.model.username == username)
        if user_id is not None:
            query = query.filter(self.model.id != user_id)
        if query.first() is not None:
            raise UsernameTaken(username)

    def create(self, schema: UserCreateSchema) -> User:
        logger.info("Creating user %s with role %s", schema.username, schema.role.value)
        self._ensure_username_free(schema.username)
        user = User(
            username=schema.username,
            password=hash_password(schema.password),
            role=schema.role,
        )
        self._save(user)
        self._forget(user_id=user.id, username=user.username)
        return user

    def update(self, user_id: int, schema: UserUpdateSchema) -> User:
        """Partial update, absent or blank fields are left as they are."""
        user = self.get(user_id)
        old_username = user.username
        if schema.username is not None and schema.username.strip():
            self._ensure_username_free(schema.username, user_id=user.id)
            user.username = schema.username
        if schema.password is not None and schema.password.strip():
            user.password = hash_password(schema.password)
        if schema.role is not None:
            user.role = schema.role
        self.db.flush()
        self.db.refresh(user)
        self._forget(user_id=user.id, username=old_username)
        self._forget(username=user.username)
        logger.info("Updated user id=%s", user.id)
        return user

    def delete(self, user_id: int, cascade: bool = False) -> int:
        """Delete a user. Owned cards block the deletion unless cascade is requested."""
        user = self.get(user_id)
        cards = self.db.query(Card).filter(Card.owner_id == user.id).all()
        if cards and not cascade:
            raise UserOwnsCards(f"user id={user_id} owns {len(cards)} card(s)")
        for card in cards:
            self.db.delete(card)
        self.db.flush()
        self.db.delete(user)
        self.db.flush()
        self._forget(user_id=user.id, username=user.username)
        logger.info("Deleted user id=%s together with %d card(s)", user_id, len(cards))
        return user_id
