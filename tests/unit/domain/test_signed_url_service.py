"""
Unit tests for SignedUrlService.
"""

from datetime import timedelta
from urllib.parse import parse_qs, urlparse

from cloudpix.domain.files.signed_url_service import SignedUrlService
from tests.fixtures import FakeClock


def _params(url):
    query = parse_qs(urlparse(url).query)
    return int(query["expires"][0]), query["signature"][0]


class TestGenerateSignedUrl:
    def test_url_layout(self):
        clock = FakeClock()
        service = SignedUrlService(secret_key="secret", clock=clock)

        credential = service.generate_signed_url("u1/f1/cat.png", 60)

        assert credential.url.startswith("/api/v1/storage/u1/f1/cat.png?expires=")
        assert credential.expires_in == 60
        assert credential.expires_at == clock() + timedelta(seconds=60)

    def test_custom_base_url(self):
        service = SignedUrlService(secret_key="s", base_url="https://cdn.example/dl/")
        url = service.generate_signed_url("k", 10).url
        assert url.startswith("https://cdn.example/dl/k?")

    def test_key_is_quoted(self):
        service = SignedUrlService(secret_key="s")
        url = service.generate_signed_url("u1/f1/my photo.png", 10).url
        assert "/u1/f1/my%20photo.png?" in url

    def test_generated_secret_when_missing(self):
        assert len(SignedUrlService().secret_key) == 64


class TestValidate:
    def test_fresh_url_validates(self):
        service = SignedUrlService(secret_key="secret", clock=FakeClock())
        expires, signature = _params(service.generate_signed_url("k", 60).url)
        assert service.validate("k", signature, expires)

    def test_expired_url_rejected(self):
        clock = FakeClock()
        service = SignedUrlService(secret_key="secret", clock=clock)
        expires, signature = _params(service.generate_signed_url("k", 60).url)

        clock.advance(seconds=60)

        assert not service.validate("k", signature, expires)

    def test_signature_bound_to_key(self):
        service = SignedUrlService(secret_key="secret", clock=FakeClock())
        expires, signature = _params(service.generate_signed_url("k", 60).url)
        assert not service.validate("other", signature, expires)

    def test_signature_bound_to_expiry(self):
        service = SignedUrlService(secret_key="secret", clock=FakeClock())
        expires, signature = _params(service.generate_signed_url("k", 60).url)
        assert not service.validate("k", signature, expires + 3600)

    def test_other_secret_rejected(self):
        clock = FakeClock()
        signer = SignedUrlService(secret_key="one", clock=clock)
        verifier = SignedUrlService(secret_key="two", clock=clock)
        expires, signature = _params(signer.generate_signed_url("k", 60).url)
        assert not verifier.validate("k", signature, expires)

    def test_missing_parameters(self):
        service = SignedUrlService(secret_key="secret")
        assert not service.validate("k", None, 123)
        assert not service.validate("k", "sig", None)
        assert not service.validate("", "sig", 123)

    def test_remaining(self):
        clock = FakeClock()
        service = SignedUrlService(secret_key="secret", clock=clock)
        expires, _ = _params(service.generate_signed_url("k", 90).url)
        assert service.remaining(expires) == timedelta(seconds=90)
