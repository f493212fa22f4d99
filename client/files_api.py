"""File store operations on the app server."""

from dataclasses import dataclass
from urllib.parse import quote

from client.outcome import NetworkOrServerError, Ok, Outcome, map_outcome
from client.transport import AuthenticatedTransport
from common.constants import FILES_PATH, URI_COMPONENT_SAFE, VIEWABLE_EXTENSIONS
from common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DownloadedFile:
    """Binary file payload with the content type reported by the server."""

    name: str
    content: bytes
    content_type: str


def encode_path_segment(value: str) -> str:
    """Percent-encode one path segment the way encodeURIComponent does."""
    return quote(value, safe=URI_COMPONENT_SAFE)


def can_view_content(file_name: str) -> bool:
    """Only plain text files can be shown inline."""
    return file_name.lower().endswith(VIEWABLE_EXTENSIONS)


class FileStoreApi:
    """Signed calls against /files."""

    def __init__(self, transport: AuthenticatedTransport, app_url: str):
        self.transport = transport
        self.app_url = app_url.rstrip('/')

    def file_url(self, file_name: str) -> str:
        return f"{self.app_url}{FILES_PATH}/{encode_path_segment(file_name)}"

    async def list_files(self) -> Outcome:
        """List file names, in server order."""
        outcome = await self.transport.call('GET', self.app_url + FILES_PATH)
        if isinstance(outcome, Ok):
            if not isinstance(outcome.payload, list) or not all(isinstance(n, str) for n in outcome.payload):
                logger.error("File listing is not a list of names")
                return NetworkOrServerError(detail="Malformed response from server")
        return outcome

    async def read_file(self, file_name: str) -> Outcome:
        """
        Fetch the text content of a viewable file.

        Raises:
            ValueError: If the file type cannot be viewed inline
        """
        if not can_view_content(file_name):
            raise ValueError("File extension is not supported for viewing. Please download the file.")
        return await self.transport.call('GET', self.file_url(file_name), expect='text')

    async def download_file(self, file_name: str) -> Outcome:
        """Fetch raw file bytes and content type."""
        outcome = await self.transport.call('GET', self.file_url(file_name), expect='binary')
        return map_outcome(
            outcome,
            lambda body: DownloadedFile(name=file_name, content=body.content, content_type=body.content_type),
        )

    async def upload_file(self, file_name: str, contents: str) -> Outcome:
        """Store contents under file_name as the multipart field 'contents'."""
        logger.info(f"Uploading {file_name} ({len(contents)} chars)")
        return await self.transport.call(
            'PUT', self.file_url(file_name), form={'contents': contents}, expect='none'
        )
