"""Per-request signatures over the request timestamp and URL."""

import base64
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from client.session_store import Session
from common.constants import SIGNED_MESSAGE_SEPARATOR
from common.exceptions import SigningError
from common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SignedRequest:
    """Signature material for one outgoing call. Never reused."""

    method: str
    url: str
    timestamp: str
    signature: str


def canonical_message(timestamp_ms: str, url: str) -> str:
    """Build the signed message. Method and body are not part of it."""
    return f"{timestamp_ms}{SIGNED_MESSAGE_SEPARATOR}{url}"


@lru_cache(maxsize=4)
def _load_private_key(private_key: str) -> rsa.RSAPrivateKey:
    try:
        key = serialization.load_pem_private_key(private_key.encode(), password=None)
    except (ValueError, TypeError) as e:
        raise SigningError(f"Private key cannot be loaded: {e}") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise SigningError("Private key is not an RSA key")
    return key


def forget_loaded_keys() -> None:
    """Drop parsed private keys held for reuse, e.g. after logout."""
    _load_private_key.cache_clear()


def sign(private_key: Optional[str], timestamp_ms: str, url: str) -> str:
    """
    Sign ``timestamp_ms + "+" + url`` with RSASSA-PKCS1-v1_5 over SHA-256.

    Args:
        private_key: PEM encoded RSA private key
        timestamp_ms: Epoch milliseconds as a decimal string
        url: Absolute request URL exactly as sent

    Returns:
        Base64 encoded signature

    Raises:
        SigningError: If no usable private key is given
    """
    if not private_key:
        raise SigningError("No private key in session")

    key = _load_private_key(private_key)
    message = canonical_message(timestamp_ms, url)
    signature = key.sign(message.encode('utf-8'), padding.PKCS1v15(), hashes.SHA256())
    return base64.b64encode(signature).decode('ascii')


class RequestSigner:
    """Signs outgoing requests with the private key of a shared Session."""

    def __init__(self, session: Session, clock: Callable[[], float] = time.time):
        """
        Initialize the signer.

        Args:
            session: Session holding the private key (read on every call)
            clock: Source of epoch seconds
        """
        self.session = session
        self.clock = clock
        self._last_timestamp = 0

    def next_timestamp(self) -> str:
        """
        Generate a fresh millisecond timestamp.

        Timestamps are strictly increasing per signer; a call in the same
        millisecond as the previous one is moved forward by 1 ms.
        """
        now_ms = int(self.clock() * 1000)
        if now_ms <= self._last_timestamp:
            now_ms = self._last_timestamp + 1
        self._last_timestamp = now_ms
        return str(now_ms)

    def sign_request(self, method: str, url: str, private_key: Optional[str] = None) -> SignedRequest:
        """
        Produce signature material for one call.

        Args:
            method: HTTP method (recorded, not signed)
            url: Absolute request URL
            private_key: Key snapshot taken by the caller; defaults to the session's key

        Returns:
            SignedRequest with a fresh timestamp
        """
        if private_key is None:
            private_key = self.session.private_key
        timestamp = self.next_timestamp()
        signature = sign(private_key, timestamp, url)
        logger.debug(f"Signed {method} {url} [timestamp={timestamp}]")
        return SignedRequest(method=method, url=url, timestamp=timestamp, signature=signature)
