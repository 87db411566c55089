"""Owner identity derived from the bearer access token."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from jose import jwt
from jose.exceptions import JOSEError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncIdentity:
    """Authenticated user on whose behalf submissions are delivered."""

    owner_id: str
    access_token: str


def identity_from_token(access_token: str | None, *, now: float | None = None) -> SyncIdentity | None:
    """Build a SyncIdentity from a JWT access token.

    The claims are read without signature verification; the device never
    holds the signing key and the server verifies the token anyway. Returns
    None when the token is missing, malformed, has no `sub`, or is expired.
    """
    if not access_token:
        return None

    try:
        claims = jwt.get_unverified_claims(access_token)
    except JOSEError as exc:
        logger.warning("Ignoring unreadable access token: %s", exc)
        return None

    subject = claims.get("sub")
    if not subject:
        logger.warning("Ignoring access token without a subject claim")
        return None

    expires_at = claims.get("exp")
    if expires_at is not None:
        try:
            expires_at = float(expires_at)
        except (TypeError, ValueError):
            logger.warning("Ignoring access token with unreadable expiry %r", expires_at)
            return None
        current = time.time() if now is None else now
        if expires_at <= current:
            logger.info("Access token for %s has expired", subject)
            return None

    return SyncIdentity(owner_id=str(subject), access_token=access_token)
