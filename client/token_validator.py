"""Bearer token liveness checks.

The token is decoded without verifying its signature. The result only
decides which view the client starts in; the server re-validates the token
and the request signature on every call.
"""

import math
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import jwt

from common.exceptions import AuthExpired
from common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    """Claims of a bearer token that the client cares about."""

    expires_at: int
    raw: dict[str, Any] = field(default_factory=dict)


def decode_claims(token: str) -> TokenClaims:
    """
    Decode the claims of a bearer token.

    Args:
        token: Encoded JWT

    Returns:
        TokenClaims with the expiry in epoch seconds

    Raises:
        AuthExpired: If the token cannot be decoded or has no numeric exp claim
    """
    try:
        claims = jwt.decode(token, options={'verify_signature': False})
    except jwt.InvalidTokenError as e:
        raise AuthExpired(f"Token cannot be decoded: {e}") from e

    exp = claims.get('exp')
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise AuthExpired("Token has no expiry claim")
    if not math.isfinite(exp):
        raise AuthExpired("Token expiry claim is not a finite number")

    return TokenClaims(expires_at=int(exp), raw=claims)


def is_live(token: Optional[str], now: Optional[int] = None) -> bool:
    """
    Check whether a bearer token has not yet expired.

    Only ``now - exp > 0`` counts as expired, so a token is still live
    during its expiry second.

    Args:
        token: Encoded JWT
        now: Current time in epoch seconds (defaults to the wall clock)

    Returns:
        True if the token is live, False if expired or undecodable
    """
    if not token:
        return False

    try:
        claims = decode_claims(token)
    except AuthExpired as e:
        logger.info(f"Treating token as expired: {e}")
        return False

    if now is None:
        now = int(time.time())

    diff = now - claims.expires_at
    if diff > 0:
        logger.info(f"Token expired {diff}s ago")
        return False
    return True
