"""
Ownership Gate

Single authorization check binding files and share links to their owner.
Share link resolution is anonymous and never goes through this gate.
"""

from typing import Any

from .errors import UnauthorizedError


def is_owner(caller_id: str, record: Any) -> bool:
    """Check if ``caller_id`` is the owning identity of ``record``."""
    owner_id = getattr(record, "owner_id", None)
    return bool(caller_id) and owner_id is not None and caller_id == owner_id


def ensure_owner(caller_id: str, record: Any) -> None:
    """
    Assert that the caller owns a file or share link.

    Args:
        caller_id: Authenticated caller identity
        record: Any record with an ``owner_id`` attribute

    Raises:
        UnauthorizedError: If the caller is not the owner
    """
    if not is_owner(caller_id, record):
        raise UnauthorizedError(
            f"Caller is not the owner of {type(record).__name__}"
        )
