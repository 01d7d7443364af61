"""Password hashing, bearer tokens and the FastAPI auth dependencies."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import Settings
from .database import get_db
from .errors import Unauthorized
from .models.user import User

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified access token."""

    user_id: str
    username: str


def hash_password(password: str, rounds: int = 10) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Not a bcrypt hash, or a password bcrypt refuses to process.
        return False


def create_access_token(user_id: str, username: str, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "username": username,
        "iat": now,
        "exp": now + timedelta(minutes=settings.access_token_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> TokenClaims:
    """Verify a token and return its claims.

    Raises ``Unauthorized`` when the signature is wrong, the token is
    malformed or expired, or the identity claims are missing.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("token expired")
    except jwt.PyJWTError:
        raise Unauthorized("token invalid")

    user_id = payload.get("sub")
    username = payload.get("username")
    if not isinstance(user_id, str) or not isinstance(username, str):
        raise Unauthorized("token invalid")
    return TokenClaims(user_id=user_id, username=username)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> TokenClaims:
    if credentials is None:
        raise Unauthorized("token missing")
    return decode_access_token(credentials.credentials, settings)


def get_current_user(
    claims: TokenClaims = Depends(get_token_claims),
    db: Session = Depends(get_db),
) -> User:
    user = db.get(User, claims.user_id)
    if user is None:
        raise Unauthorized("user not found")
    return user
