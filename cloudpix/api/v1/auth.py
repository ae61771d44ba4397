"""
Bearer authentication for API v1 resources.
"""

from functools import wraps

from flask import current_app, g, request

from cloudpix.domain.errors import (
    AuthenticationError,
    ErrorCategory,
    create_error_response,
)
from cloudpix.infrastructure.jwt_token_verifier import JWTTokenVerifier


def _extract_bearer_token() -> str:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def require_auth(f):
    """
    Require a valid bearer token and store the caller id in ``g.user_id``.

    Responds 401 ``authentication_required`` when the token is missing or
    does not verify.
    """

    @wraps(f)
    def decorated(*args, **kwargs):
        token = _extract_bearer_token()
        try:
            verifier = current_app.container.resolve(JWTTokenVerifier)
            g.user_id = verifier.verify(token)
        except AuthenticationError as e:
            current_app.logger.info(f"[AUTH_V1] Rejected request to {request.path}: {e}")
            return create_error_response(
                ErrorCategory.AUTHENTICATION_REQUIRED, str(e), status_code=401
            )
        return f(*args, **kwargs)

    return decorated
