from typing import Generator, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.clock import Clock, utcnow
from app.core.security import decode_access_token
from app.db.session import SessionLocal
from app.models.user import User
from app.services.cache import SecretMetaCache, get_meta_cache
from app.services.lifecycle import SecretLifecycle
from app.services.passwords import password_guard

bearer = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_clock() -> Clock:
    return utcnow


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        user_id = decode_access_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_owner_id(current_user: User = Depends(get_current_user)) -> str:
    return current_user.id


def get_lifecycle(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    cache: Optional[SecretMetaCache] = Depends(get_meta_cache),
) -> SecretLifecycle:
    return SecretLifecycle(db, clock=clock, guard=password_guard, cache=cache)
