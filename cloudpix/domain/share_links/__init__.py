"""
Share Link Domain

Owner-issued capabilities that grant anonymous read access to one file
until they expire or are revoked.
"""

from .cascade import CascadeCoordinator, CascadeResult
from .entities import ShareLink
from .repositories import ShareLinkRepository
from .services import ShareLinkManager
from .value_objects import CredentialLifetimePolicy, ExpirationPolicy, ShareLinkStatus

__all__ = [
    "ShareLink",
    "ShareLinkManager",
    "ShareLinkRepository",
    "ShareLinkStatus",
    "ExpirationPolicy",
    "CredentialLifetimePolicy",
    "CascadeCoordinator",
    "CascadeResult",
]
