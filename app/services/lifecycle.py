"""Rules for creating, disclosing, changing and removing secrets.

The lifecycle is the only place that decides whether a secret may be shown.
Disclosure checks run in a fixed order so that an expired or already
consumed secret fails before any password is looked at:

    not found -> expired -> already consumed -> password required
    -> invalid password -> disclosed

Consuming a one-time secret is a compare-and-set in the store, never a read
followed by a separate write. Owner edits carry the same "not yet viewed"
guard in their UPDATE.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from app.core.clock import Clock, new_secret_id, utcnow
from app.core.exceptions import (
    InvalidPassword,
    PasswordRequired,
    SecretAlreadyConsumed,
    SecretExpired,
    SecretForbidden,
    SecretNotFound,
    SecretValidationError,
)
from app.models.secret import Secret
from app.schemas.secret import (
    SecretDisclosure,
    SecretMeta,
    SecretOut,
    SecretPage,
    SecretStats,
)
from app.services.cache import SecretMetaCache
from app.services.passwords import PasswordGuard, password_guard
from app.services.stats import compute_stats
from app.services.store import SecretStore

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {"content", "password", "one_time_access", "expires_at"}


class SecretLifecycle:
    def __init__(
        self,
        db: Session,
        clock: Clock = utcnow,
        id_factory: Callable[[], str] = new_secret_id,
        guard: PasswordGuard = password_guard,
        cache: Optional[SecretMetaCache] = None,
    ):
        self.store = SecretStore(db)
        self.clock = clock
        self.id_factory = id_factory
        self.guard = guard
        self.cache = cache

    def to_out(self, secret: Secret, now: datetime = None) -> SecretOut:
        now = now or self.clock()
        return SecretOut(
            id=secret.id,
            content=secret.content,
            one_time_access=secret.one_time_access,
            expires_at=secret.expires_at,
            is_viewed=secret.is_viewed,
            viewed_at=secret.viewed_at,
            created_at=secret.created_at,
            updated_at=secret.updated_at,
            has_password=secret.has_password,
            is_expired=secret.is_expired(now),
            status=secret.status(now),
        )

    @staticmethod
    def _meta(secret: Secret) -> SecretMeta:
        return SecretMeta(
            id=secret.id,
            has_password=secret.has_password,
            one_time_access=secret.one_time_access,
            expires_at=secret.expires_at,
            created_at=secret.created_at,
        )

    def _cache_meta(self, secret: Secret, now: datetime):
        if self.cache is None:
            return
        meta = self._meta(secret)
        self.cache.set(secret.id, meta.model_dump(mode="json"), secret.expires_at, now)

    def _forget(self, secret_id: str):
        if self.cache is not None:
            self.cache.delete(secret_id)

    def create(
        self,
        owner_id: str,
        content: str,
        password: Optional[str] = None,
        one_time_access: bool = False,
        expires_at: Optional[datetime] = None,
    ) -> SecretOut:
        if not content:
            raise SecretValidationError("Content must not be empty")

        now = self.clock()
        secret = Secret(
            id=self.id_factory(),
            content=content,
            password_hash=self.guard.hash(password) if password else None,
            one_time_access=one_time_access,
            expires_at=expires_at,
            is_viewed=False,
            viewed_at=None,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        secret = self.store.insert(secret)
        logger.info("secret %s created by %s", secret.id, owner_id)

        self._cache_meta(secret, now)
        return self.to_out(secret, now)

    def _check_readable(self, secret_id: str, expires_at: Optional[datetime], consumed: bool, now: datetime):
        if expires_at is not None and expires_at <= now:
            logger.info("secret %s requested after expiry", secret_id)
            raise SecretExpired()
        if consumed:
            logger.info("secret %s requested after it was consumed", secret_id)
            raise SecretAlreadyConsumed()

    def get_meta(self, secret_id: str) -> SecretMeta:
        now = self.clock()

        if self.cache is not None:
            cached = self.cache.get(secret_id)
            if cached:
                meta = SecretMeta(**cached)
                # entries are written only at creation and dropped on consumption,
                # update and delete, so a cached entry is never consumed
                self._check_readable(secret_id, meta.expires_at, False, now)
                return meta

        secret = self.store.get_by_id(secret_id)
        if secret is None:
            raise SecretNotFound()
        self._check_readable(
            secret.id, secret.expires_at, secret.one_time_access and secret.is_viewed, now
        )
        return self._meta(secret)

    def disclose(self, secret_id: str, password: Optional[str] = None) -> SecretDisclosure:
        now = self.clock()

        secret = self.store.get_by_id(secret_id)
        if secret is None:
            raise SecretNotFound()
        self._check_readable(
            secret.id, secret.expires_at, secret.one_time_access and secret.is_viewed, now
        )

        if secret.password_hash is not None:
            if not password:
                raise PasswordRequired()
            if not self.guard.verify(password, secret.password_hash):
                logger.info("secret %s: wrong password", secret.id)
                raise InvalidPassword()

        content = secret.content
        if not secret.one_time_access:
            logger.info("secret %s disclosed", secret.id)
            return SecretDisclosure(content=content, consumed=False)

        if not self.store.mark_viewed(secret.id, now):
            logger.info("secret %s lost the race to another disclosure", secret_id)
            raise SecretAlreadyConsumed()
        self._forget(secret_id)
        logger.info("secret %s disclosed and consumed", secret_id)
        return SecretDisclosure(content=content, consumed=True)

    def update(self, owner_id: str, secret_id: str, changes: Dict[str, Any]) -> SecretOut:
        secret = self.store.get_for_owner(owner_id, secret_id)
        if secret is None:
            raise SecretNotFound()
        if secret.is_viewed:
            raise SecretForbidden()

        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise SecretValidationError(f"Cannot update {', '.join(sorted(unknown))}")

        fields: Dict[str, Any] = {}
        if "content" in changes:
            if not changes["content"]:
                raise SecretValidationError("Content must not be empty")
            fields["content"] = changes["content"]
        if "password" in changes:
            password = changes["password"]
            fields["password_hash"] = self.guard.hash(password) if password else None
        if "one_time_access" in changes:
            fields["one_time_access"] = bool(changes["one_time_access"])
        if "expires_at" in changes:
            fields["expires_at"] = changes["expires_at"]

        now = self.clock()
        fields["updated_at"] = now
        if not self.store.update_fields(owner_id, secret_id, fields):
            logger.info("secret %s was viewed before the update landed", secret_id)
            raise SecretForbidden()
        self._forget(secret_id)
        secret = self.store.get_for_owner(owner_id, secret_id)
        if secret is None:
            raise SecretNotFound()
        logger.info("secret %s updated (%s)", secret_id, ", ".join(sorted(changes)) or "no fields")
        return self.to_out(secret, now)

    def delete(self, owner_id: str, secret_id: str):
        if not self.store.delete_by_owner(owner_id, secret_id):
            raise SecretNotFound()
        self._forget(secret_id)
        logger.info("secret %s deleted by %s", secret_id, owner_id)

    def list(
        self,
        owner_id: str,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 10,
        offset: int = 0,
    ) -> SecretPage:
        now = self.clock()
        items, total = self.store.find_by_owner(
            owner_id,
            now,
            search=search,
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=offset,
        )
        return SecretPage(
            items=[self.to_out(s, now) for s in items],
            total=total,
            limit=limit,
            offset=offset,
        )

    def stats(self, owner_id: str) -> SecretStats:
        return compute_stats(self.store.all_for_owner(owner_id), self.clock())
