"""
Shared pytest fixtures and configuration for the CloudPix backend test suite.

This module provides:
- Hypothesis configuration for property-based testing
- In-memory repositories and a controllable clock
- Domain and application services wired against them
"""

import pytest

# Hypothesis configuration
from hypothesis import HealthCheck, Phase, settings

from cloudpix.application.event_publisher import EventPublisher
from cloudpix.application.file_service import FileService
from cloudpix.application.share_link_service import ShareLinkService
from cloudpix.domain.files.services import FileManager
from cloudpix.domain.share_links.cascade import CascadeCoordinator
from cloudpix.domain.share_links.services import ShareLinkManager
from tests.fixtures import (
    FakeClock,
    MockFileRepository,
    MockShareLinkRepository,
    MockStorageRepository,
    create_stored_file,
)

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile("default")


# =============================================================================
# Infrastructure Fixtures
# =============================================================================

@pytest.fixture
def clock():
    """Provide a controllable clock starting at 2024-01-15 12:00 UTC."""
    return FakeClock()


@pytest.fixture
def share_link_repository():
    return MockShareLinkRepository()


@pytest.fixture
def file_repository():
    return MockFileRepository()


@pytest.fixture
def storage_repository(clock):
    return MockStorageRepository(clock=clock)


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def share_link_manager(share_link_repository, file_repository, clock):
    return ShareLinkManager(share_link_repository, file_repository, clock=clock)


@pytest.fixture
def file_manager(file_repository, storage_repository, share_link_repository, clock):
    return FileManager(
        file_repository,
        storage_repository,
        CascadeCoordinator(share_link_repository),
        clock=clock,
    )


@pytest.fixture
def event_publisher():
    return EventPublisher()


@pytest.fixture
def published_events(event_publisher):
    """Collect every event published through ``event_publisher``."""
    from cloudpix.domain.events import DomainEvent

    events = []
    event_publisher.subscribe(DomainEvent, events.append)
    return events


@pytest.fixture
def share_link_service(share_link_manager, file_manager, storage_repository, event_publisher):
    return ShareLinkService(
        share_link_manager,
        file_manager,
        storage_repository,
        event_publisher=event_publisher,
        public_base_url="https://cloudpix.example",
    )


@pytest.fixture
def file_service(file_manager, event_publisher):
    return FileService(file_manager, event_publisher=event_publisher)


@pytest.fixture
def stored_file(file_repository, storage_repository):
    """An active file owned by ``owner-1`` with its bytes in storage."""
    file = create_stored_file(owner_id="owner-1", file_name="holiday.jpg")
    file_repository.save(file)
    storage_repository._objects[file.storage_key] = b"jpeg bytes"
    return file


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require external services)"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests (full workflows)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    - tests/e2e/* -> @pytest.mark.e2e
    - tests/property/* -> @pytest.mark.property
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
        elif "/e2e/" in test_path or "\\e2e\\" in test_path:
            item.add_marker(pytest.mark.e2e)
        elif "/property/" in test_path or "\\property\\" in test_path:
            item.add_marker(pytest.mark.property)
