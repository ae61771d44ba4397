"""
Test fixtures package.

Provides factory functions and mock implementations for testing.
"""

from .domain_fixtures import DEFAULT_NOW, create_share_link, create_stored_file
from .mock_repositories import (
    FakeClock,
    MockFileRepository,
    MockShareLinkRepository,
    MockStorageRepository,
)

__all__ = [
    # Domain fixtures
    "DEFAULT_NOW",
    "create_share_link",
    "create_stored_file",
    # Mock repositories
    "FakeClock",
    "MockFileRepository",
    "MockShareLinkRepository",
    "MockStorageRepository",
]
