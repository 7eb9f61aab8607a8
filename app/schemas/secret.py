from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.clock import to_naive_utc


class SecretStatusFilter(str, Enum):
    active = "active"
    viewed = "viewed"
    expired = "expired"


class SortBy(str, Enum):
    created_at = "created_at"
    expires_at = "expires_at"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class SecretCreate(BaseModel):
    content: str = Field(..., description="Secret text to share")
    password: Optional[str] = Field(None, description="Password required to view the secret")
    one_time_access: bool = Field(False, description="Secret can be viewed only once")
    expires_at: Optional[datetime] = Field(None, description="Moment after which the secret can no longer be viewed")

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class SecretUpdate(BaseModel):
    """Partial update; only the fields present in the request are applied.

    An empty ``password`` removes password protection and an explicit
    ``expires_at: null`` removes the expiration.
    """

    content: Optional[str] = None
    password: Optional[str] = None
    one_time_access: Optional[bool] = None
    expires_at: Optional[datetime] = None

    @field_validator("content", "password", "one_time_access")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)


class SecretOut(BaseModel):
    id: str
    content: str
    one_time_access: bool
    expires_at: Optional[datetime] = None
    is_viewed: bool
    viewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    has_password: bool
    is_expired: bool
    status: SecretStatusFilter


class SecretMeta(BaseModel):
    id: str
    has_password: bool
    one_time_access: bool
    expires_at: Optional[datetime] = None
    created_at: datetime


class SecretView(BaseModel):
    password: Optional[str] = Field(None, description="Password, when the secret is protected")


class SecretDisclosure(BaseModel):
    content: str
    consumed: bool = Field(..., description="This request used up a one-time secret")


class SecretPage(BaseModel):
    items: List[SecretOut]
    total: int
    limit: int
    offset: int


class SecretStats(BaseModel):
    total: int
    active: int
    viewed: int
    expired: int
    one_time_access: int
    recent_secrets: int
