import logging
import uuid
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.core.security import create_access_token
from app.models.user import User
from app.schemas.user import (
    PasswordChange,
    Token,
    UserCreate,
    UserLogin,
    UserOut,
    UserUpdate,
)
from app.services.passwords import password_guard

logger = logging.getLogger(__name__)

router = APIRouter()


def find_by_email(db: Session, email: str):
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)) -> Any:
    email = user_in.email.lower()
    if find_by_email(db, email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    user = User(
        id=str(uuid.uuid4()),
        email=email,
        name=user_in.name,
        password_hash=password_guard.hash(user_in.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("user %s registered", user.id)
    return user


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, db: Session = Depends(get_db)) -> Any:
    user = find_by_email(db, credentials.email.lower())
    if not user or not password_guard.verify(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return Token(access_token=create_access_token(user.id))


@router.get("/me", response_model=UserOut)
def read_profile(current_user: User = Depends(get_current_user)) -> Any:
    return current_user


@router.patch("/me", response_model=UserOut)
def update_profile(
    profile_in: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Any:
    if profile_in.email is not None:
        email = profile_in.email.lower()
        taken = find_by_email(db, email)
        if taken is not None and taken.id != current_user.id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email is already taken by another user",
            )
        current_user.email = email
    if profile_in.name is not None:
        current_user.name = profile_in.name

    db.commit()
    db.refresh(current_user)
    logger.info("user %s updated their profile", current_user.id)
    return current_user


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    change_in: PasswordChange,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    if not password_guard.verify(change_in.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect",
        )
    current_user.password_hash = password_guard.hash(change_in.new_password)
    db.commit()
    logger.info("user %s changed their password", current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
