"""
Share Link Configuration

Allowed link durations and limits on credentials minted at access time.
"""

import os

from cloudpix.domain.share_links.value_objects import (
    SECONDS_PER_DAY,
    CredentialLifetimePolicy,
    ExpirationPolicy,
)


class ShareLinkConfig:
    """Share link configuration settings."""

    def __init__(self):
        durations = os.getenv("SHARE_ALLOWED_DURATIONS", "1,7,30")
        self.allowed_durations = frozenset(
            int(d) for d in durations.split(",") if d.strip()
        )
        self.credential_daily_cap_seconds = int(
            os.getenv("SHARE_CREDENTIAL_DAILY_CAP_SECONDS", SECONDS_PER_DAY)
        )
        self.credential_min_seconds = int(os.getenv("SHARE_CREDENTIAL_MIN_SECONDS", 1))

        # Expired links stay readable as "expired" this long before they are purged
        self.retention_grace_seconds = int(
            os.getenv("SHARE_RETENTION_GRACE_SECONDS", 7 * SECONDS_PER_DAY)
        )

    def expiration_policy(self) -> ExpirationPolicy:
        return ExpirationPolicy(allowed_days=self.allowed_durations)

    def credential_policy(self) -> CredentialLifetimePolicy:
        return CredentialLifetimePolicy(
            daily_cap_seconds=self.credential_daily_cap_seconds,
            min_seconds=self.credential_min_seconds,
        )
