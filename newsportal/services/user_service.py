"""
User service — registration and login for news authors.

Users exist so that news can be attributed to an author and mutations can
be gated on authorship.  Password hashing and token signing live in
``newsportal.security``; this module only stores and looks users up.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from newsportal import errors
from newsportal.models import User
from newsportal.schemas import LoginRequest, UserCreate
from newsportal.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def _user_to_dict(user: User) -> dict:
    """Public view of a user; the password hash is never included."""
    return {"id": user.id, "email": user.email, "name": user.name}


def _auth_payload(user: User) -> dict:
    return {"user": _user_to_dict(user), "token": create_access_token(user.id)}


async def get_user(db: AsyncSession, user_id: int) -> dict | None:
    user = await db.get(User, user_id)
    return _user_to_dict(user) if user else None


async def register_user(db: AsyncSession, data: UserCreate) -> dict:
    """
    Create a user and return ``{user, token}``.

    Email uniqueness is enforced by the database; a duplicate surfaces as
    ``Conflict``.
    """
    user = User(
        email=data.email.lower(),
        password=hash_password(data.password),
        name=data.name,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise errors.Conflict("A user with this email already exists") from exc

    logger.info("Registered user id=%d", user.id)
    return _auth_payload(user)


async def login_user(db: AsyncSession, data: LoginRequest) -> dict:
    """Return ``{user, token}`` for valid credentials, else ``Unauthenticated``."""
    result = await db.execute(select(User).where(User.email == data.email.lower()))
    user = result.scalar_one_or_none()
    if user is None or not verify_password(data.password, user.password):
        logger.info("Failed login for %s", data.email)
        raise errors.Unauthenticated("Invalid email or password")
    return _auth_payload(user)
