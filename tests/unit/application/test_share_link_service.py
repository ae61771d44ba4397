"""
Unit tests for ShareLinkService.

Exercises creation, anonymous resolution, revocation, listing and cleanup
against in-memory repositories.
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from cloudpix.application.share_link_service import ShareLinkService
from cloudpix.domain.errors import (
    InfrastructureError,
    MintingFailedError,
    ShareLinkExpiredError,
    ShareLinkNotFoundError,
    ShareLinkRevokedError,
    StoredFileNotFoundError,
    UnauthorizedError,
)
from cloudpix.domain.events import (
    AccessRecordingFailedEvent,
    ShareLinkAccessedEvent,
    ShareLinkCreatedEvent,
    ShareLinkRevokedEvent,
    ShareLinksListedEvent,
)
from cloudpix.domain.files.value_objects import FileStatus
from cloudpix.domain.share_links.value_objects import SECONDS_PER_DAY


@pytest.fixture
def link(share_link_service, stored_file):
    return share_link_service.create_share_link(stored_file.file_id, "owner-1", 7)


class TestCreateShareLink:
    def test_returns_owner_view(self, share_link_service, stored_file, clock):
        result = share_link_service.create_share_link(stored_file.file_id, "owner-1", 1)

        assert result["file_id"] == stored_file.file_id
        assert result["owner_id"] == "owner-1"
        assert result["expires_at"] == (clock() + timedelta(days=1)).isoformat()
        assert result["status"] == "active"
        assert result["is_active"] is True
        assert result["access_count"] == 0
        assert result["share_url"] == f"https://cloudpix.example/share/{result['link_id']}"

    def test_publishes_created_event(self, share_link_service, stored_file, published_events):
        result = share_link_service.create_share_link(stored_file.file_id, "owner-1", None)

        created = [e for e in published_events if isinstance(e, ShareLinkCreatedEvent)]
        assert len(created) == 1
        assert created[0].aggregate_id == result["link_id"]
        assert created[0].expires_at is None

    def test_non_owner_publishes_nothing(self, share_link_service, stored_file, published_events):
        with pytest.raises(UnauthorizedError):
            share_link_service.create_share_link(stored_file.file_id, "intruder", 7)
        assert published_events == []


class TestResolveShareLink:
    def test_resolve_returns_file_and_credential(self, share_link_service, link, stored_file):
        result = share_link_service.resolve_share_link(link["link_id"])

        assert result["share_link"]["link_id"] == link["link_id"]
        assert result["file"] == stored_file.to_shared_dict()
        assert result["download"]["expires_in"] == SECONDS_PER_DAY
        assert stored_file.storage_key in result["download"]["url"]

    def test_resolve_hides_owner_and_storage_details(self, share_link_service, link):
        result = share_link_service.resolve_share_link(link["link_id"])

        assert "owner_id" not in result["file"]
        assert "storage_key" not in result["file"]
        assert "access_count" not in result["share_link"]

    def test_resolve_counts_access(self, share_link_service, share_link_repository, link):
        share_link_service.resolve_share_link(link["link_id"])
        share_link_service.resolve_share_link(link["link_id"])

        assert share_link_repository.get_by_id(link["link_id"]).access_count == 2

    def test_unknown_link(self, share_link_service):
        with pytest.raises(ShareLinkNotFoundError):
            share_link_service.resolve_share_link("does-not-exist")

    def test_expired_link(self, share_link_service, stored_file, clock, storage_repository):
        result = share_link_service.create_share_link(stored_file.file_id, "owner-1", 1)
        clock.advance(hours=25)

        with pytest.raises(ShareLinkExpiredError):
            share_link_service.resolve_share_link(result["link_id"])
        assert not any(
            c["method"] == "mint_read_credential" for c in storage_repository.get_call_history()
        )

    def test_revoked_link(self, share_link_service, link):
        share_link_service.revoke_share_link(link["link_id"], "owner-1")
        with pytest.raises(ShareLinkRevokedError):
            share_link_service.resolve_share_link(link["link_id"])

    def test_failed_resolution_does_not_count(
        self, share_link_service, share_link_repository, link
    ):
        share_link_service.revoke_share_link(link["link_id"], "owner-1")
        with pytest.raises(ShareLinkRevokedError):
            share_link_service.resolve_share_link(link["link_id"])
        assert share_link_repository.get_by_id(link["link_id"]).access_count == 0

    def test_deleted_file(self, share_link_service, file_repository, stored_file, link):
        file_repository.delete(stored_file.file_id)
        with pytest.raises(StoredFileNotFoundError):
            share_link_service.resolve_share_link(link["link_id"])

    def test_inactive_file(self, share_link_service, file_repository, stored_file, link):
        stored_file.status = FileStatus.DELETED
        file_repository.save(stored_file)
        with pytest.raises(StoredFileNotFoundError):
            share_link_service.resolve_share_link(link["link_id"])

    def test_credential_bounded_by_link_expiry(
        self, share_link_service, stored_file, clock
    ):
        result = share_link_service.create_share_link(stored_file.file_id, "owner-1", 1)
        clock.advance(hours=23, minutes=50)

        resolved = share_link_service.resolve_share_link(result["link_id"])

        assert resolved["download"]["expires_in"] == 600

    def test_credential_bounded_by_storage_ceiling(
        self, share_link_manager, file_manager, stored_file, clock
    ):
        from tests.fixtures import MockStorageRepository

        storage = MockStorageRepository(clock=clock, credential_ceiling_seconds=300)
        service = ShareLinkService(share_link_manager, file_manager, storage)
        result = service.create_share_link(stored_file.file_id, "owner-1", 30)

        resolved = service.resolve_share_link(result["link_id"])

        assert resolved["download"]["expires_in"] == 300

    def test_minting_failure_propagates_and_does_not_count(
        self, share_link_service, share_link_repository, storage_repository, link
    ):
        storage_repository.fail_minting = True
        with pytest.raises(MintingFailedError):
            share_link_service.resolve_share_link(link["link_id"])
        assert share_link_repository.get_by_id(link["link_id"]).access_count == 0

    def test_counter_failure_does_not_fail_resolution(
        self, share_link_service, share_link_repository, published_events, link
    ):
        share_link_repository.fail_increment = True

        result = share_link_service.resolve_share_link(link["link_id"])

        assert result["download"]["url"]
        failures = [e for e in published_events if isinstance(e, AccessRecordingFailedEvent)]
        assert len(failures) == 1
        accessed = [e for e in published_events if isinstance(e, ShareLinkAccessedEvent)]
        assert accessed[0].access_count is None

    def test_store_outage_on_lookup_propagates(self, file_manager, storage_repository):
        manager = Mock()
        manager.get_link.side_effect = InfrastructureError("redis down")
        service = ShareLinkService(manager, file_manager, storage_repository)

        with pytest.raises(InfrastructureError):
            service.resolve_share_link("any")


class TestRevokeShareLink:
    def test_revoke(self, share_link_service, published_events, link):
        result = share_link_service.revoke_share_link(link["link_id"], "owner-1")

        assert result["is_revoked"] is True
        assert result["status"] == "revoked"
        assert any(isinstance(e, ShareLinkRevokedEvent) for e in published_events)

    def test_revoke_twice(self, share_link_service, link):
        share_link_service.revoke_share_link(link["link_id"], "owner-1")
        again = share_link_service.revoke_share_link(link["link_id"], "owner-1")
        assert again["status"] == "revoked"

    def test_revoke_by_other_user(self, share_link_service, link):
        with pytest.raises(UnauthorizedError):
            share_link_service.revoke_share_link(link["link_id"], "intruder")


class TestListing:
    def test_list_file_links_flags_status(self, share_link_service, stored_file, clock):
        short = share_link_service.create_share_link(stored_file.file_id, "owner-1", 1)
        long = share_link_service.create_share_link(stored_file.file_id, "owner-1", 30)
        clock.advance(days=2)

        links = share_link_service.list_file_share_links(stored_file.file_id, "owner-1")
        by_id = {link["link_id"]: link for link in links}

        assert by_id[short["link_id"]]["status"] == "expired"
        assert by_id[long["link_id"]]["status"] == "active"

    def test_list_file_links_active_only(self, share_link_service, stored_file, clock):
        share_link_service.create_share_link(stored_file.file_id, "owner-1", 1)
        long = share_link_service.create_share_link(stored_file.file_id, "owner-1", 30)
        clock.advance(days=2)

        links = share_link_service.list_file_share_links(
            stored_file.file_id, "owner-1", active_only=True
        )

        assert [link["link_id"] for link in links] == [long["link_id"]]

    def test_list_file_links_publishes_event(
        self, share_link_service, stored_file, published_events, link
    ):
        share_link_service.list_file_share_links(stored_file.file_id, "owner-1")
        listed = [e for e in published_events if isinstance(e, ShareLinksListedEvent)]
        assert listed[0].scope == "file"
        assert listed[0].link_count == 1

    def test_list_owner_links_includes_file_summary(
        self, share_link_service, file_repository, stored_file, share_link_repository
    ):
        from tests.fixtures import create_share_link

        live = share_link_service.create_share_link(stored_file.file_id, "owner-1", 7)
        orphan = create_share_link(file_id="gone-file", owner_id="owner-1")
        share_link_repository.create(orphan)

        links = share_link_service.list_owner_share_links("owner-1")
        by_id = {link["link_id"]: link for link in links}

        assert by_id[live["link_id"]]["file"]["file_name"] == "holiday.jpg"
        assert by_id[orphan.link_id]["file"] is None

    def test_list_owner_links_empty(self, share_link_service):
        assert share_link_service.list_owner_share_links("nobody") == []


class TestCleanup:
    def test_cleanup_stats(self, share_link_service, stored_file, clock, link):
        share_link_service.revoke_share_link(link["link_id"], "owner-1")
        clock.advance(days=1)

        stats = share_link_service.cleanup_stale_links(grace_seconds=0)

        assert stats == {"share_links_purged": 1, "index_entries_pruned": 0, "errors": []}

    def test_cleanup_collects_errors(self, file_manager, storage_repository):
        manager = Mock()
        manager.purge_stale_links.side_effect = InfrastructureError("redis down")
        manager.prune_indexes.return_value = 3
        service = ShareLinkService(manager, file_manager, storage_repository)

        stats = service.cleanup_stale_links(grace_seconds=60)

        assert stats["share_links_purged"] == 0
        assert stats["index_entries_pruned"] == 3
        assert len(stats["errors"]) == 1
        manager.purge_stale_links.assert_called_once_with(60)
