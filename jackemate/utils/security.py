from datetime import datetime, timedelta, UTC
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from jackemate import models, schemas
from jackemate.config import settings
from jackemate.crud import user as user_crud
from jackemate.database import get_db


# ==========================
# AUTH CONFIG
# ==========================

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")

# Public endpoints read the token when present to fill viewer-specific fields
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto"
)


# ==========================
# PASSWORD UTILS
# ==========================

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Bcrypt max input length = 72 bytes
    Truncate safely to avoid crash
    """
    password_bytes = password.encode("utf-8")

    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
        password = password_bytes.decode("utf-8", errors="ignore")

    return pwd_context.hash(password)


# ==========================
# JWT TOKEN
# ==========================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()

    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


def decode_access_token(token: str) -> Optional[schemas.TokenData]:
    """Token payload, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        return None

    return schemas.TokenData(user_id=user_id, role=payload.get("role"))


# ==========================
# AUTH HELPERS
# ==========================

def authenticate_user(db: Session, email: str, password: str):
    user = user_crud.get_user_by_email(db, email)

    if not user:
        return False

    if not verify_password(password, user.password_hash):
        return False

    return user


def _active_user(db: Session, token_data: Optional[schemas.TokenData]) -> Optional[models.User]:
    if token_data is None:
        return None
    user = user_crud.get_user(db, token_data.user_id)
    if user is None or not user.is_active:
        return None
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user = _active_user(db, decode_access_token(token))
    if user is None:
        raise credentials_exception

    return user


def get_current_user_optional(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[models.User]:
    """Authenticated user, or None for anonymous callers and bad tokens."""
    if not token:
        return None
    return _active_user(db, decode_access_token(token))
