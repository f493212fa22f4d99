"""User-facing client wiring the session, transport and APIs together."""

from pathlib import Path
from typing import Awaitable, Callable, Optional

import httpx

from cli.config import Config
from cli.constants import (
    DOWNLOADS_DIR,
    FORBIDDEN_MESSAGE,
    GREEN,
    RESET,
    SESSION_EXPIRED_MESSAGE,
    SHARE_FORBIDDEN_MESSAGE,
    UPLOAD_FORBIDDEN_MESSAGE,
)
from cli.utils import format_file_size
from client.auth_api import AuthApi
from client.files_api import FileStoreApi, can_view_content
from client.lifecycle import LifecycleState, SessionLifecycleController
from client.outcome import ClientError, Forbidden, Ok, Outcome, raise_for_outcome
from client.session_store import SessionStore
from client.share_links import LinkSnapshot, ShareLinkRegistry
from client.signer import RequestSigner
from client.token_validator import is_live
from client.transport import AuthenticatedTransport
from common.exceptions import AuthExpired, ClientRequestError, PermissionDenied, TransportError
from common.logging_config import get_logger

logger = get_logger(__name__)


class AppClient:
    """Runs CLI actions and turns their outcomes into messages."""

    def __init__(self, config: Config, http_client: Optional[httpx.AsyncClient] = None):
        """
        Initialize the client and route from the stored session.

        Args:
            config: Configuration instance
            http_client: Optional httpx client (tests pass one with a MockTransport)
        """
        self.config = config
        self.store = SessionStore(config.get_session_path(), config.get_app_url())
        session = self.store.get()
        self.transport = AuthenticatedTransport(
            session,
            signer=RequestSigner(session),
            timeout=config.get_timeout(),
            verify=config.get_verify_tls(),
            http_client=http_client,
        )
        self.auth = AuthApi(self.transport, config.get_auth_url())
        self.files = FileStoreApi(self.transport, config.get_app_url())
        self.links = ShareLinkRegistry(self.transport, config.get_app_url())
        self.lifecycle = SessionLifecycleController(self.store, self.auth)
        self.snapshot = LinkSnapshot()
        self.known_files: list[str] = []
        self.lifecycle.on_entry()
        logger.info(
            f"Initialized AppClient [app_url={config.get_app_url()}, state={self.lifecycle.state.value}]"
        )

    def _format_error(self, outcome: Outcome, forbidden_message: str = FORBIDDEN_MESSAGE) -> str:
        """
        Map a failure outcome to a user-friendly message.

        Args:
            outcome: Failure outcome
            forbidden_message: Message for 403 responses

        Returns:
            User-friendly error message
        """
        if isinstance(outcome, Forbidden):
            return forbidden_message
        if isinstance(outcome, ClientError):
            return outcome.message
        return outcome.detail

    async def _guarded(
        self,
        action: Callable[[], Awaitable[str]],
        forbidden_message: str = FORBIDDEN_MESSAGE,
    ) -> str:
        """
        Run an authenticated action and turn raised failures into messages.

        Missing or expired credentials route to login.
        """
        try:
            self.lifecycle.require_authenticated()
            return await action()
        except AuthExpired as e:
            logger.warning(f"Authentication required: {e}")
            self.lifecycle.route_to_login()
            return f"Error: {SESSION_EXPIRED_MESSAGE}"
        except PermissionDenied:
            return f"Error: {forbidden_message}"
        except ClientRequestError as e:
            return f"Error: {e.message}"
        except TransportError as e:
            return f"Error: {e}"

    async def register(self, username: str, password: str) -> str:
        try:
            outcome = await self.lifecycle.register(username, password)
        except OSError as e:
            logger.error(f"Could not save session: {e}")
            return f"Registration succeeded, but the session could not be saved: {e}"
        if isinstance(outcome, Ok):
            return f"Registration successful!\nLogged in as {username}. Session saved."
        return f"Registration failed: {self._format_error(outcome)}"

    async def login(self, username: str, password: str) -> str:
        try:
            outcome = await self.lifecycle.login(username, password)
        except OSError as e:
            logger.error(f"Could not save session: {e}")
            return f"Login failed: Could not save session: {e}"
        if isinstance(outcome, Ok):
            return "Login successful!\nSession saved."
        return f"Login failed: {self._format_error(outcome)}"

    def logout(self) -> str:
        self.snapshot = LinkSnapshot()
        try:
            self.lifecycle.logout()
        except OSError as e:
            logger.error(f"Could not remove stored session: {e}")
            return f"Logged out, but the stored session could not be removed: {e}"
        return "Logged out."

    def status(self) -> str:
        if self.lifecycle.state is LifecycleState.AUTHENTICATED:
            if not is_live(self.store.get().bearer_token):
                return "Logged in, but the session token has expired. Please log in again."
            return "Logged in (session is live)."
        return "Not logged in. Please run: login <username> <password>"

    async def list_files(self) -> str:
        async def action() -> str:
            names = raise_for_outcome(await self.files.list_files())
            self.known_files = list(names)
            if not names:
                return "No files stored."
            lines = [f"Found {len(names)} file(s):"]
            for name in names:
                marker = " [viewable]" if can_view_content(name) else ""
                lines.append(f"  - {name}{marker}")
            return '\n'.join(lines)

        return await self._guarded(action)

    async def read_file(self, filename: str) -> str:
        async def action() -> str:
            try:
                outcome = await self.files.read_file(filename)
            except ValueError as e:
                return f"Error: {e}"
            return raise_for_outcome(outcome)

        return await self._guarded(action)

    async def download(self, filename: str, output_path: Optional[str] = None) -> str:
        async def action() -> str:
            output_file, error = self._normalize_download_path(output_path or "", filename)
            if error:
                return f"Error: {error}"

            downloaded = raise_for_outcome(await self.files.download_file(filename))
            try:
                output_file.parent.mkdir(parents=True, exist_ok=True)
                output_file.write_bytes(downloaded.content)
            except IOError as e:
                return f"Error writing file: {e}"
            return (
                f"Downloaded: {filename} ({format_file_size(len(downloaded.content))}, {downloaded.content_type})\n"
                f"Saved to: {output_file.absolute()}"
            )

        return await self._guarded(action)

    async def upload(self, local_path: str, remote_name: Optional[str] = None) -> str:
        async def action() -> str:
            path = Path(local_path).expanduser()
            if not path.is_file():
                return f"Error: File not found: {local_path}"
            try:
                contents = path.read_text(encoding='utf-8')
            except UnicodeDecodeError:
                return f"Error: Only text files can be uploaded: {local_path}"
            except IOError as e:
                return f"Error reading file: {e}"

            name = remote_name or path.name
            outcome = await self.files.upload_file(name, contents)
            if isinstance(outcome, Ok):
                return f"File uploaded: {name} ({format_file_size(len(contents.encode('utf-8')))})"
            if isinstance(outcome, Forbidden):
                return UPLOAD_FORBIDDEN_MESSAGE
            return f"File upload failed: {self._format_error(outcome)}"

        return await self._guarded(action)

    async def share(self, filename: str) -> str:
        async def action() -> str:
            outcome = await self.links.create(filename)
            # The held listing no longer matches the server; 'links' refetches.
            self.snapshot.invalidate()
            link_id = raise_for_outcome(outcome)
            return (
                f"Shareable link created: {link_id}\n"
                f"URL: {GREEN}{self.links.share_url(link_id)}{RESET}"
            )

        return await self._guarded(action, SHARE_FORBIDDEN_MESSAGE)

    async def show_links(self, filename: str) -> str:
        async def action() -> str:
            note = ""
            try:
                self.snapshot.replace(raise_for_outcome(await self.links.list_all()))
            except TransportError as e:
                if self.snapshot.stale:
                    raise
                logger.warning(f"Link listing failed, showing last listing: {e}")
                note = " (last known listing, server unreachable)"

            matching = self.snapshot.for_file(filename)
            if not matching:
                return f"No share links for {filename}{note}."
            lines = [f"{len(matching)} share link(s) for {filename}{note}:"]
            for link_id in matching:
                lines.append(f"  - {link_id}  {self.links.share_url(link_id)}")
            return '\n'.join(lines)

        return await self._guarded(action)

    async def revoke(self, link_id: str) -> str:
        async def action() -> str:
            raise_for_outcome(await self.links.revoke(link_id))
            self.snapshot.discard(link_id)

            refreshed = await self.links.list_all()
            if isinstance(refreshed, Ok):
                self.snapshot.replace(refreshed.payload)
            else:
                logger.warning(f"Could not refresh share links after revoke: {refreshed}")

            if self.snapshot.stale:
                return "Link deleted successfully\nWarning: share link list could not be refreshed."
            return "Link deleted successfully"

        return await self._guarded(action)

    async def open_link(self, link_id: str, output_path: Optional[str] = None) -> str:
        outcome = await self.links.fetch_shared(link_id)
        if not isinstance(outcome, Ok):
            if isinstance(outcome, ClientError) and outcome.status == 404:
                return "Error: Share link not found."
            return f"Error: {self._format_error(outcome)}"

        body = outcome.payload
        output_file, error = self._normalize_download_path(output_path or "", link_id)
        if error:
            return f"Error: {error}"
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            output_file.write_bytes(body.content)
        except IOError as e:
            return f"Error writing file: {e}"
        return f"Fetched shared file ({format_file_size(len(body.content))})\nSaved to: {output_file.absolute()}"

    def _normalize_download_path(self, output_path: str, filename: str) -> tuple[Path, str | None]:
        """
        Normalize download path, which must stay inside the downloads/ directory.

        Args:
            output_path: Output path (must start with downloads/ prefix if provided)
            filename: Original filename for default naming

        Returns:
            Tuple of (normalized_path_object, error_message)
            error_message is None if validation succeeds
        """
        base_dir = (Path.cwd() / DOWNLOADS_DIR).resolve()

        if not output_path:
            candidate = base_dir / filename
        else:
            path_str = output_path.strip()
            prefix = f"{DOWNLOADS_DIR}/"
            if not path_str.startswith(prefix):
                return Path(), f"Download output path must start with '{prefix}' - did you mean '{prefix}{path_str}'?"
            candidate = base_dir / path_str[len(prefix):]
            if candidate.is_dir():
                candidate = candidate / filename

        try:
            resolved = candidate.resolve()
            resolved.relative_to(base_dir)
        except (OSError, RuntimeError, ValueError):
            return Path(), f"Invalid path: '{output_path or filename}' is outside downloads directory"
        return resolved, None

    async def aclose(self) -> None:
        """Close the HTTP session."""
        await self.transport.aclose()
