"""Inbound trigger authentication."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def expected_authorization(secret: str) -> str:
    """Header value a caller must send: ``Bearer <secret>``."""
    return f"{BEARER_PREFIX}{secret}"


def validate_trigger_auth(authorization: str | None, secret: str) -> bool:
    """Check the ``Authorization`` header against the trigger secret.

    The whole header must match exactly; scheme and token are not parsed
    separately, so a lowercase ``bearer`` or extra whitespace is rejected.
    """
    if not authorization:
        logger.warning("Auth failed: missing Authorization header")
        return False
    if not authorization.startswith(BEARER_PREFIX):
        logger.warning("Auth failed: unsupported authorization scheme")
        return False
    valid = authorization == expected_authorization(secret)
    if not valid:
        logger.warning("Auth failed: invalid token")
    return valid
