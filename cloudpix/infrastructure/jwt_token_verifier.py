"""
JWT Token Verifier

Verifies bearer tokens issued by the login service and extracts the
caller identity. Token issuance lives elsewhere.
"""

import logging
from typing import Iterable, Optional

from jose import JWTError, jwt

from cloudpix.domain.errors import AuthenticationError

logger = logging.getLogger(__name__)

# Claims checked for the caller id, in order
IDENTITY_CLAIMS = ("userId", "sub")


class JWTTokenVerifier:
    """Decodes and verifies signed JWTs with python-jose."""

    def __init__(self, secret_key: str, algorithms: Optional[Iterable[str]] = None):
        """
        Args:
            secret_key: Shared signing secret
            algorithms: Accepted algorithms, HS256 by default
        """
        if not secret_key:
            raise ValueError("secret_key cannot be empty")
        self.secret_key = secret_key
        self.algorithms = list(algorithms or ["HS256"])

    def verify(self, token: str) -> str:
        """
        Verify a token and return the caller id.

        Raises:
            AuthenticationError: If the token is invalid, expired or carries
                no identity claim
        """
        if not token:
            raise AuthenticationError("Missing token")

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=self.algorithms)
        except JWTError as e:
            raise AuthenticationError("Invalid or expired token", e) from e

        for claim in IDENTITY_CLAIMS:
            user_id = payload.get(claim)
            if user_id:
                return str(user_id)

        raise AuthenticationError("Token has no identity claim")
