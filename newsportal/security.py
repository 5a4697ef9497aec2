"""
Identity helpers: password hashing and bearer tokens.

Thin wrappers around passlib and python-jose.  The rest of the application
only ever sees the numeric user id returned by :func:`decode_access_token`.
"""
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from newsportal import errors
from newsportal.config import settings

# PBKDF2-SHA256 needs no native bcrypt build.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognised hash.
        return False


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Sign a token whose ``sub`` claim carries *user_id*."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": str(user_id), "iat": now, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> int:
    """
    Verify *token* and return the user id it carries.

    Raises ``Unauthenticated`` for a bad signature, an expired token or a
    payload without a numeric ``sub``.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise errors.Unauthenticated("Invalid or expired token") from exc
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise errors.Unauthenticated("Malformed token payload") from exc
