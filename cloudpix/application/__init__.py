"""
Application Services Layer

Orchestrates domain services and coordinates use cases.
"""

from .event_publisher import EventPublisher
from .file_service import FileService
from .share_link_service import ShareLinkService

__all__ = [
    'FileService',
    'ShareLinkService',
    'EventPublisher',
]
