"""Durable per-origin storage for the bearer token and private key."""

import json
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Session:
    """
    Credentials for the current client session.

    A single instance is shared by reference between the store, the
    transport and the signer. Only SessionStore mutates it.
    """

    bearer_token: Optional[str] = None
    private_key: Optional[str] = None

    def snapshot(self) -> tuple[Optional[str], Optional[str]]:
        """Return (bearer_token, private_key) read together."""
        return self.bearer_token, self.private_key

    @property
    def has_token(self) -> bool:
        return bool(self.bearer_token)


class SessionStore:
    """Persists one Session per origin in a JSON file."""

    def __init__(self, path: Path, origin: str):
        """
        Initialize the session store.

        Args:
            path: Path to the session JSON file (typically ~/.sealdrive/session.json)
            origin: Origin the session belongs to (the app server URL)
        """
        self.path = path
        self.origin = origin.rstrip('/')
        self._session = Session()
        self._load()

    def _load(self) -> None:
        entry = self._read_entries().get(self.origin)
        if not isinstance(entry, dict):
            if entry is not None:
                logger.warning(f"Session entry for {self.origin} is malformed, starting empty")
            entry = {}
        token = entry.get('bearer_token')
        key = entry.get('private_key')
        if not isinstance(token, str) or not isinstance(key, str):
            token, key = None, None
        self._session.bearer_token, self._session.private_key = token, key
        logger.debug(f"Loaded session for {self.origin} [has_token={self._session.has_token}]")

    def _read_entries(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (ValueError, OSError) as e:
            logger.warning(f"Session file unreadable, starting empty: {e}")
            try:
                shutil.copy(self.path, self.path.with_suffix('.json.bak'))
            except OSError as backup_error:
                logger.warning(f"Could not back up session file: {backup_error}")
            return {}
        return data if isinstance(data, dict) else {}

    def _persist(self, bearer_token: Optional[str], private_key: Optional[str]) -> None:
        entries = self._read_entries()
        if bearer_token is None and private_key is None:
            entries.pop(self.origin, None)
        else:
            entries[self.origin] = {
                'bearer_token': bearer_token,
                'private_key': private_key,
            }

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix='.session-')
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(entries, f, indent=2)
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    def get(self) -> Session:
        """
        Get the session object for this origin.

        Returns:
            The shared Session instance
        """
        return self._session

    def set(self, bearer_token: str, private_key: str) -> None:
        """
        Save a new token and key together, then hold them in memory.

        Args:
            bearer_token: JWT issued by the auth server
            private_key: PEM encoded private signing key

        Raises:
            OSError: If the session file cannot be written; the held session is unchanged
        """
        self._persist(bearer_token, private_key)
        self._session.bearer_token, self._session.private_key = bearer_token, private_key
        logger.info(f"Session stored for {self.origin}")

    def clear(self) -> None:
        """
        Remove both token and key, in memory and on disk.

        Raises:
            OSError: If the session file cannot be rewritten; memory is cleared regardless
        """
        self._session.bearer_token, self._session.private_key = None, None
        self._persist(None, None)
        logger.info(f"Session cleared for {self.origin}")
