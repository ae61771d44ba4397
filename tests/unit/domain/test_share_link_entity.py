"""
Unit tests for the ShareLink entity.

Covers validity, status precedence, revocation, serialization and the
owner-facing representation.
"""

from datetime import timedelta, timezone

import pytest

from cloudpix.domain.share_links.entities import ShareLink
from cloudpix.domain.share_links.value_objects import ShareLinkStatus
from tests.fixtures import DEFAULT_NOW, create_share_link


class TestShareLinkCreation:
    def test_create_starts_active_with_zero_count(self):
        expires_at = DEFAULT_NOW + timedelta(days=7)
        link = ShareLink.create("file-1", "owner-1", DEFAULT_NOW, expires_at)

        assert link.file_id == "file-1"
        assert link.owner_id == "owner-1"
        assert link.created_at == DEFAULT_NOW
        assert link.expires_at == expires_at
        assert link.access_count == 0
        assert link.is_revoked is False
        assert link.retention_ttl == 7 * 24 * 60 * 60

    def test_create_generates_unique_ids(self):
        ids = {ShareLink.create("f", "o", DEFAULT_NOW).link_id for _ in range(50)}
        assert len(ids) == 50

    def test_never_expiring_link_has_no_retention_ttl(self):
        link = ShareLink.create("file-1", "owner-1", DEFAULT_NOW, None)
        assert link.expires_at is None
        assert link.retention_ttl is None

    def test_past_expiry_has_no_retention_ttl(self):
        link = ShareLink.create(
            "file-1", "owner-1", DEFAULT_NOW, DEFAULT_NOW - timedelta(seconds=5)
        )
        assert link.retention_ttl is None


class TestShareLinkValidity:
    def test_valid_before_expiry(self):
        link = create_share_link(expires_in_days=1)
        assert link.is_valid(DEFAULT_NOW + timedelta(hours=23, minutes=59))

    def test_invalid_exactly_at_expiry(self):
        link = create_share_link(expires_in_days=1)
        assert not link.is_valid(link.expires_at)

    def test_invalid_after_expiry(self):
        link = create_share_link(expires_in_days=1)
        assert not link.is_valid(DEFAULT_NOW + timedelta(hours=25))

    def test_never_expiring_link_is_valid_far_in_future(self):
        link = create_share_link(expires_in_days=None)
        assert link.is_valid(DEFAULT_NOW + timedelta(days=365 * 50))

    def test_revoked_link_is_invalid_before_expiry(self):
        link = create_share_link(expires_in_days=30, is_revoked=True)
        assert not link.is_valid(DEFAULT_NOW)

    def test_validity_ignores_access_count(self):
        link = create_share_link(access_count=10_000)
        assert link.is_valid(DEFAULT_NOW)


class TestShareLinkStatus:
    def test_active(self):
        assert create_share_link().status(DEFAULT_NOW) == ShareLinkStatus.ACTIVE

    def test_expired(self):
        link = create_share_link(expires_in_days=1)
        assert link.status(DEFAULT_NOW + timedelta(days=2)) == ShareLinkStatus.EXPIRED

    def test_revoked_wins_over_expired(self):
        link = create_share_link(expires_in_days=1, is_revoked=True)
        assert link.status(DEFAULT_NOW + timedelta(days=2)) == ShareLinkStatus.REVOKED

    def test_terminal_states(self):
        assert ShareLinkStatus.EXPIRED.is_terminal()
        assert ShareLinkStatus.REVOKED.is_terminal()
        assert not ShareLinkStatus.ACTIVE.is_terminal()


class TestShareLinkRevocation:
    def test_revoke_changes_state_once(self):
        link = create_share_link()
        assert link.revoke() is True
        assert link.is_revoked is True
        assert link.revoke() is False
        assert link.is_revoked is True

    def test_revoke_records_time_once(self):
        link = create_share_link()
        later = DEFAULT_NOW + timedelta(hours=2)
        assert link.revoke(later) is True
        assert link.revoke(later + timedelta(days=1)) is False
        assert link.revoked_at == later


class TestPurgeability:
    DAY = 24 * 3600

    def test_freshly_revoked_link_is_kept_for_grace(self):
        revoked_at = DEFAULT_NOW + timedelta(days=1)
        link = create_share_link(is_revoked=True, revoked_at=revoked_at)

        assert not link.is_purgeable(revoked_at + timedelta(hours=23), self.DAY)
        assert link.is_purgeable(revoked_at + timedelta(days=1), self.DAY)

    def test_revoked_without_timestamp_counts_from_creation(self):
        link = create_share_link(expires_in_days=None)
        link.is_revoked = True

        assert not link.is_purgeable(DEFAULT_NOW, self.DAY)
        assert link.is_purgeable(DEFAULT_NOW + timedelta(days=1), self.DAY)

    def test_expired_link_is_kept_for_grace(self):
        link = create_share_link(expires_in_days=1)

        assert not link.is_purgeable(DEFAULT_NOW + timedelta(days=1, hours=23), self.DAY)
        assert link.is_purgeable(DEFAULT_NOW + timedelta(days=2), self.DAY)

    def test_active_and_never_expiring_links_are_kept(self):
        far_future = DEFAULT_NOW + timedelta(days=3650)
        assert not create_share_link().is_purgeable(DEFAULT_NOW, 0)
        assert not create_share_link(expires_in_days=None).is_purgeable(far_future, 0)


class TestRemainingSeconds:
    def test_remaining_seconds(self):
        link = create_share_link(expires_in_days=1)
        assert link.get_remaining_seconds(DEFAULT_NOW + timedelta(hours=23)) == 3600

    def test_remaining_seconds_floor_at_zero(self):
        link = create_share_link(expires_in_days=1)
        assert link.get_remaining_seconds(DEFAULT_NOW + timedelta(days=3)) == 0

    def test_remaining_seconds_never(self):
        assert create_share_link(expires_in_days=None).get_remaining_seconds(DEFAULT_NOW) is None


class TestShareLinkSerialization:
    def test_round_trip_preserves_every_field(self):
        link = create_share_link(access_count=4, is_revoked=True)
        restored = ShareLink.from_dict(link.to_dict())
        assert restored == link

    def test_from_dict_without_revoked_at(self):
        data = create_share_link(is_revoked=True).to_dict()
        del data["revoked_at"]
        restored = ShareLink.from_dict(data)
        assert restored.is_revoked is True
        assert restored.revoked_at is None

    def test_round_trip_never_expiring(self):
        link = create_share_link(expires_in_days=None)
        restored = ShareLink.from_dict(link.to_dict())
        assert restored.expires_at is None
        assert restored == link

    def test_from_dict_normalizes_naive_timestamps_to_utc(self):
        data = create_share_link().to_dict()
        data["created_at"] = "2024-01-15T12:00:00"
        restored = ShareLink.from_dict(data)
        assert restored.created_at.tzinfo == timezone.utc

    def test_from_dict_missing_field_raises(self):
        data = create_share_link().to_dict()
        del data["owner_id"]
        with pytest.raises(KeyError):
            ShareLink.from_dict(data)


class TestShareLinkPresentation:
    def test_share_url(self):
        link = create_share_link(link_id="abc-123")
        assert link.generate_share_url("https://cloudpix.example/") == (
            "https://cloudpix.example/share/abc-123"
        )

    def test_public_dict_flags_status(self):
        link = create_share_link(expires_in_days=1)
        later = DEFAULT_NOW + timedelta(days=2)
        data = link.to_public_dict(later, "https://cloudpix.example")

        assert data["status"] == "expired"
        assert data["is_active"] is False
        assert data["share_url"].endswith(f"/share/{link.link_id}")
        assert "retention_ttl" not in data

    def test_public_dict_never_expiring(self):
        link = create_share_link(expires_in_days=None)
        data = link.to_public_dict(DEFAULT_NOW, "https://cloudpix.example")
        assert data["expires_at"] is None
        assert data["is_active"] is True
