from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from app.core.clock import utcnow
from app.db.base_class import Base


class SecretStatus:
    ACTIVE = "active"
    VIEWED = "viewed"
    EXPIRED = "expired"


class Secret(Base):
    id = Column(String, primary_key=True, index=True)
    content = Column(Text, nullable=False)
    password_hash = Column(String, nullable=True)
    one_time_access = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime, nullable=True)
    is_viewed = Column(Boolean, nullable=False, default=False)
    viewed_at = Column(DateTime, nullable=True)
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    owner = relationship("User", back_populates="secrets")

    __table_args__ = (
        Index("ix_secrets_owner_id_created_at", "owner_id", "created_at"),
    )

    @property
    def has_password(self) -> bool:
        return self.password_hash is not None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def status(self, now: datetime) -> str:
        # expiry wins over the view marker
        if self.is_expired(now):
            return SecretStatus.EXPIRED
        if self.is_viewed:
            return SecretStatus.VIEWED
        return SecretStatus.ACTIVE
