from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from app.core.clock import utcnow
from app.db.base_class import Base


class User(Base):
    id = Column(String, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    secrets = relationship("Secret", back_populates="owner", passive_deletes=True)
