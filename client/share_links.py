"""Client view of the share links held by the server.

The server lists every link of the user in one mapping; scoping to a file
happens here. Listings are snapshots: any create or revoke makes them stale.
A listing requested before a revoke's response arrives may still contain the
revoked link, because completion order of independent calls is not ordered.
"""

import json
from typing import Mapping, Optional

from pydantic import ValidationError

from client.files_api import encode_path_segment
from client.outcome import NetworkOrServerError, Ok, Outcome, map_outcome
from client.schemas import AddLinkRequest, ShareLink
from client.transport import AuthenticatedTransport
from common.constants import LINK_PATH, LINKS_PATH
from common.logging_config import get_logger

logger = get_logger(__name__)


def filter_for_file(file_name: str, links: Mapping[str, ShareLink]) -> dict[str, ShareLink]:
    """
    Select the links that point at one file.

    Args:
        file_name: File of interest
        links: Full mapping of link id to ShareLink

    Returns:
        Matching entries in the source mapping's iteration order
    """
    return {link_id: link for link_id, link in links.items() if link.file_name == file_name}


def parse_link_id(body: str) -> str:
    """The server answers with a JSON string; plain text is accepted too."""
    text = body.strip()
    try:
        value = json.loads(text)
    except ValueError:
        return text
    return value if isinstance(value, str) else text


class LinkSnapshot:
    """Locally held copy of a link listing."""

    def __init__(self, links: Optional[Mapping[str, ShareLink]] = None):
        self.links: dict[str, ShareLink] = dict(links or {})
        self.stale = links is None

    def replace(self, links: Mapping[str, ShareLink]) -> None:
        self.links = dict(links)
        self.stale = False

    def discard(self, link_id: str) -> None:
        """Drop a revoked link; the snapshot must be refetched before it is trusted."""
        self.links.pop(link_id, None)
        self.stale = True

    def invalidate(self) -> None:
        self.stale = True

    def for_file(self, file_name: str) -> dict[str, ShareLink]:
        return filter_for_file(file_name, self.links)


class ShareLinkRegistry:
    """Create, list and revoke share links through the signed transport."""

    def __init__(self, transport: AuthenticatedTransport, app_url: str):
        self.transport = transport
        self.app_url = app_url.rstrip('/')

    def link_url(self, link_id: str) -> str:
        return f"{self.app_url}{LINK_PATH}/{encode_path_segment(link_id)}"

    def share_url(self, link_id: str) -> str:
        """Public URL a recipient opens to fetch the shared file."""
        return self.link_url(link_id)

    async def create(self, file_name: str) -> Outcome:
        """
        Create a link for file_name.

        The listing is not refreshed; callers refetch with list_all.

        Returns:
            Ok(link_id) on success
        """
        logger.info(f"Creating share link for {file_name}")
        body = AddLinkRequest(file_name=file_name).model_dump()
        outcome = await self.transport.call('PUT', self.app_url + LINK_PATH, json=body, expect='text')
        return map_outcome(outcome, parse_link_id)

    async def list_all(self) -> Outcome:
        """
        Fetch every link of the user across all files.

        Returns:
            Ok(dict of link id to ShareLink)
        """
        outcome = await self.transport.call('GET', self.app_url + LINKS_PATH)
        if not isinstance(outcome, Ok):
            return outcome

        payload = outcome.payload
        if not isinstance(payload, dict):
            logger.error("Link listing is not a mapping")
            return NetworkOrServerError(detail="Malformed response from server")

        try:
            links = {
                link_id: ShareLink.model_validate({**entry, 'id': link_id})
                for link_id, entry in payload.items()
            }
        except (TypeError, ValidationError) as e:
            logger.error(f"Malformed link entry: {e}")
            return NetworkOrServerError(detail="Malformed response from server")

        logger.debug(f"Fetched {len(links)} share link(s)")
        return Ok(links)

    async def revoke(self, link_id: str) -> Outcome:
        """
        Delete a link.

        On success callers discard the id from any held snapshot and refetch.
        """
        logger.info(f"Revoking share link {link_id}")
        return await self.transport.call('DELETE', self.link_url(link_id), expect='none')

    async def fetch_shared(self, link_id: str) -> Outcome:
        """Open a share link without credentials, as a recipient would."""
        return await self.transport.call('GET', self.link_url(link_id), expect='binary', authenticated=False)

