"""
Unit tests for error categorization and structured error responses.
"""

import pytest

from cloudpix.domain.errors import (
    ERROR_MESSAGES,
    ApplicationError,
    AuthenticationError,
    DomainError,
    ErrorCategory,
    FileTooLargeError,
    InfrastructureError,
    InvalidRequestError,
    InvalidStateError,
    MintingFailedError,
    NotFoundError,
    ShareLinkExpiredError,
    ShareLinkNotFoundError,
    ShareLinkRevokedError,
    StoredFileNotFoundError,
    UnauthorizedError,
    UnsupportedFileTypeError,
    categorize_domain_error,
    create_error_response,
)
from cloudpix.domain.ownership import ensure_owner, is_owner
from tests.fixtures import create_stored_file


@pytest.mark.parametrize(
    "error,category,status",
    [
        (ShareLinkNotFoundError("x"), ErrorCategory.LINK_NOT_FOUND, 404),
        (StoredFileNotFoundError("x"), ErrorCategory.FILE_NOT_FOUND, 404),
        (NotFoundError("x"), ErrorCategory.NOT_FOUND, 404),
        (UnauthorizedError("x"), ErrorCategory.UNAUTHORIZED, 403),
        (AuthenticationError("x"), ErrorCategory.AUTHENTICATION_REQUIRED, 401),
        (ShareLinkExpiredError("x"), ErrorCategory.LINK_EXPIRED, 410),
        (ShareLinkRevokedError("x"), ErrorCategory.LINK_REVOKED, 410),
        (InvalidStateError("x"), ErrorCategory.INVALID_STATE, 409),
        (FileTooLargeError("x"), ErrorCategory.FILE_TOO_LARGE, 413),
        (UnsupportedFileTypeError("x"), ErrorCategory.UNSUPPORTED_FILE_TYPE, 415),
        (InvalidRequestError("x"), ErrorCategory.INVALID_REQUEST, 400),
        (MintingFailedError("x"), ErrorCategory.MINTING_FAILED, 502),
        (InfrastructureError("x"), ErrorCategory.SERVICE_UNAVAILABLE, 503),
        (RuntimeError("x"), ErrorCategory.SYSTEM_ERROR, 500),
    ],
)
def test_categorize_domain_error(error, category, status):
    assert categorize_domain_error(error) == (category, status)


def test_expired_and_revoked_are_distinct():
    expired, _ = categorize_domain_error(ShareLinkExpiredError("x"))
    revoked, _ = categorize_domain_error(ShareLinkRevokedError("x"))
    assert expired != revoked


def test_missing_file_error_leaves_builtin_alone():
    assert not issubclass(StoredFileNotFoundError, OSError)
    assert issubclass(FileNotFoundError, OSError)
    assert categorize_domain_error(FileNotFoundError("disk")) == (
        ErrorCategory.SYSTEM_ERROR,
        500,
    )


def test_every_category_has_a_message():
    for category in ErrorCategory:
        assert set(ERROR_MESSAGES[category]) == {"title", "message", "action"}


def test_domain_error_keeps_original():
    cause = ValueError("boom")
    error = InfrastructureError("redis down", cause)
    assert error.original_error is cause
    assert isinstance(error, DomainError)


def test_error_response_hides_technical_message():
    body, status = create_error_response(
        ErrorCategory.LINK_EXPIRED, "Share link expired: secret-id", status_code=410
    )
    assert status == 410
    assert body["error"] == "link_expired"
    assert "secret-id" not in str(body)
    assert "retryable" not in body


def test_service_unavailable_is_retryable():
    error = ApplicationError(ErrorCategory.SERVICE_UNAVAILABLE)
    assert error.to_dict()["retryable"] is True


class TestOwnership:
    def test_owner(self):
        file = create_stored_file(owner_id="owner-1")
        assert is_owner("owner-1", file)
        ensure_owner("owner-1", file)

    def test_non_owner(self):
        file = create_stored_file(owner_id="owner-1")
        assert not is_owner("owner-2", file)
        with pytest.raises(UnauthorizedError):
            ensure_owner("owner-2", file)

    def test_empty_caller_never_owns(self):
        file = create_stored_file(owner_id="")
        assert not is_owner("", file)

    def test_record_without_owner(self):
        assert not is_owner("owner-1", object())
