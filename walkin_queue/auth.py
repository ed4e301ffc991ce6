# walkin_queue/auth.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError
from sqlmodel import Session, select

from .config import get_settings
from .db import get_session
from .models import User
from .schemas import Principal, UserRole

logger = logging.getLogger(__name__)

PRINCIPAL_VERSION = 1

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")


def create_access_token(user: User, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    if expires_minutes is None:
        expires_minutes = settings.access_token_expire_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode = {
        "sub": user.username,
        "role": user.role,
        "ver": PRINCIPAL_VERSION,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_principal(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
) -> Principal:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise _unauthorized("Token is not valid")

    if payload.get("ver") != PRINCIPAL_VERSION or payload.get("sub") is None:
        raise _unauthorized("Token is not valid")

    user = session.exec(
        select(User).where(User.username == payload["sub"])
    ).first()

    if user is None:
        raise _unauthorized("User not found")

    try:
        return Principal(version=PRINCIPAL_VERSION, username=user.username, role=user.role)
    except PydanticValidationError:
        raise _unauthorized("Token is not valid")


def ensure_admin_user(session: Session, username: str, password: str) -> User:
    user = session.exec(select(User).where(User.username == username)).first()
    if user is not None:
        return user

    user = User(username=username, password_hash=hash_password(password), role=UserRole.admin.value)
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Created admin user %s", username)
    return user
