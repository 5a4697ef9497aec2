"""Authorship checks for news mutations."""
import logging
from typing import TypeVar

from newsportal import errors

logger = logging.getLogger(__name__)

T = TypeVar("T")


def ensure_author(resource: T | None, user_id: int, label: str = "News") -> T:
    """
    Return *resource* when *user_id* is its author.

    Existence is checked first, so a missing resource raises ``NotFound``
    even for a caller who could never have edited it.  A present resource
    owned by someone else raises ``Forbidden``.
    """
    if resource is None:
        raise errors.NotFound(f"{label} not found")
    if resource.author_id != user_id:
        logger.warning(
            "User %d denied access to %s id=%s owned by user %d",
            user_id, label.lower(), resource.id, resource.author_id,
        )
        raise errors.Forbidden(f"You are not the author of this {label.lower()}")
    return resource
