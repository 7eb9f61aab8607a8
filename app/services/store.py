from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, delete, func, not_, select, update
from sqlalchemy.orm import Session

from app.models.secret import Secret, SecretStatus


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _expired_clause(now: datetime):
    return and_(Secret.expires_at.is_not(None), Secret.expires_at <= now)


def _status_clause(status: str, now: datetime):
    expired = _expired_clause(now)
    if status == SecretStatus.EXPIRED:
        return expired
    if status == SecretStatus.VIEWED:
        return and_(Secret.is_viewed.is_(True), not_(expired))
    if status == SecretStatus.ACTIVE:
        return and_(Secret.is_viewed.is_(False), not_(expired))
    raise ValueError(f"unknown status {status!r}")


class SecretStore:
    """Persistence for secrets.

    Everything except ``get_by_id`` and ``mark_viewed`` is scoped to an
    owner. Those two serve the public disclosure link, where the secret id
    itself is the credential.
    """

    def __init__(self, db: Session):
        self.db = db

    def insert(self, secret: Secret) -> Secret:
        self.db.add(secret)
        self.db.commit()
        self.db.refresh(secret)
        return secret

    def get_by_id(self, secret_id: str) -> Optional[Secret]:
        return self.db.get(Secret, secret_id)

    def get_for_owner(self, owner_id: str, secret_id: str) -> Optional[Secret]:
        stmt = select(Secret).where(Secret.id == secret_id, Secret.owner_id == owner_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def find_by_owner(
        self,
        owner_id: str,
        now: datetime,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Secret], int]:
        conditions = [Secret.owner_id == owner_id]
        if search:
            conditions.append(Secret.content.ilike(f"%{_escape_like(search)}%", escape="\\"))
        if status:
            conditions.append(_status_clause(status, now))

        total = self.db.execute(
            select(func.count()).select_from(Secret).where(*conditions)
        ).scalar_one()

        column = Secret.expires_at if sort_by == "expires_at" else Secret.created_at
        ordering = column.asc() if sort_order == "asc" else column.desc()
        if sort_by == "expires_at":
            ordering = ordering.nulls_last()

        stmt = (
            select(Secret)
            .where(*conditions)
            .order_by(ordering, Secret.id)
            .limit(limit)
            .offset(offset)
        )
        return list(self.db.execute(stmt).scalars().all()), total

    def all_for_owner(self, owner_id: str) -> List[Secret]:
        stmt = select(Secret).where(Secret.owner_id == owner_id)
        return list(self.db.execute(stmt).scalars().all())

    def update_fields(self, owner_id: str, secret_id: str, fields: Dict[str, Any]) -> bool:
        """Apply an owner's edit unless the secret has been viewed meanwhile.

        The ``is_viewed`` guard lives in the UPDATE itself, so an edit can
        never land on a secret consumed after the owner's read.
        """
        stmt = (
            update(Secret)
            .where(
                Secret.id == secret_id,
                Secret.owner_id == owner_id,
                Secret.is_viewed.is_(False),
            )
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1

    def mark_viewed(self, secret_id: str, now: datetime) -> bool:
        """Consume a one-time secret.

        Single conditional UPDATE guarded by ``is_viewed``, committed before
        returning. Only one caller can ever get True for a given secret.
        """
        stmt = (
            update(Secret)
            .where(Secret.id == secret_id, Secret.is_viewed.is_(False))
            .values(is_viewed=True, viewed_at=now)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1

    def delete_by_owner(self, owner_id: str, secret_id: str) -> bool:
        stmt = (
            delete(Secret)
            .where(Secret.id == secret_id, Secret.owner_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1
