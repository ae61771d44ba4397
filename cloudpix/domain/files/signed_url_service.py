"""
Signed URL Service

Generates and validates time-limited HMAC signed URLs for objects kept in
local storage. Used by the local storage backend to mint read credentials
and by the storage download endpoint to verify them.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import quote

from ..clock import Clock, utc_now
from .value_objects import AccessCredential

DEFAULT_DOWNLOAD_PATH = "/api/v1/storage"


class SignedUrlService:
    """
    Service for generating and validating signed URLs.

    The signature covers the object key and the expiry timestamp, so a URL
    cannot be re-pointed at another object or extended.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        clock: Clock = utc_now,
    ):
        """
        Initialize SignedUrlService.

        Args:
            secret_key: Secret key for HMAC signing (generated if not provided,
                which invalidates URLs across restarts)
            base_url: Prefix for download URLs, defaults to the relative
                storage endpoint path
            clock: Time source
        """
        self.secret_key = secret_key or self._generate_secret_key()
        self.base_url = (base_url or DEFAULT_DOWNLOAD_PATH).rstrip("/")
        self.clock = clock

    @staticmethod
    def _generate_secret_key(length: int = 32) -> str:
        """Generate a cryptographically secure secret key."""
        return secrets.token_hex(length)

    def generate_signed_url(self, key: str, lifetime_seconds: int) -> AccessCredential:
        """
        Generate a signed URL for reading ``key``.

        Args:
            key: Object key relative to the storage root
            lifetime_seconds: Seconds the URL stays valid

        Returns:
            AccessCredential with URL and expiration information
        """
        now = self.clock()
        expires = int(now.timestamp()) + int(lifetime_seconds)
        signature = self._generate_signature(key, expires)

        url = (
            f"{self.base_url}/{quote(key, safe='/')}"
            f"?expires={expires}&signature={signature}"
        )
        return AccessCredential(
            url=url,
            expires_at=datetime.fromtimestamp(expires, tz=timezone.utc),
            expires_in=int(lifetime_seconds),
        )

    def _generate_signature(self, key: str, expires: int) -> str:
        """
        Generate HMAC-SHA256 signature for a key and expiry.

        Args:
            key: Object key
            expires: Expiry as a Unix timestamp

        Returns:
            HMAC signature as hex string
        """
        message = f"{key}:{expires}"
        return hmac.new(
            self.secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def validate_signature(self, key: str, signature: str, expires: int) -> bool:
        """Check a signature in constant time."""
        expected_signature = self._generate_signature(key, expires)
        return hmac.compare_digest(signature, expected_signature)

    def validate(
        self, key: str, signature: Optional[str], expires: Optional[int]
    ) -> bool:
        """
        Validate a download request.

        Args:
            key: Requested object key
            signature: ``signature`` query parameter
            expires: ``expires`` query parameter as a Unix timestamp

        Returns:
            True if the signature matches and the URL has not expired
        """
        if not key or not signature or expires is None:
            return False

        if not self.validate_signature(key, signature, expires):
            return False

        return self.clock() < datetime.fromtimestamp(expires, tz=timezone.utc)

    def remaining(self, expires: int) -> timedelta:
        """Time left before a URL with this expiry stops working."""
        return datetime.fromtimestamp(expires, tz=timezone.utc) - self.clock()
