"""HTTP transport that attaches both authentication factors to each call."""

import uuid
from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

import httpx
from pydantic import ValidationError

from client.outcome import ClientError, Forbidden, NetworkOrServerError, Ok, Outcome
from client.schemas import ErrorBody
from client.session_store import Session
from client.signer import RequestSigner
from common.constants import AUTHORIZATION_HEADER, HASH_HEADER, TIMESTAMP_HEADER
from common.exceptions import GENERIC_ERROR_MESSAGE, SigningError
from common.logging_config import get_logger

logger = get_logger(__name__)

Expect = Literal['json', 'text', 'binary', 'none']


@dataclass(frozen=True)
class BinaryBody:
    """Raw response body together with its content type."""

    content: bytes
    content_type: str


class AuthenticatedTransport:
    """Async HTTP client that signs requests and classifies responses."""

    def __init__(
        self,
        session: Session,
        signer: Optional[RequestSigner] = None,
        timeout: float = 30,
        verify: Union[bool, str] = True,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the transport.

        Args:
            session: Shared session holding the bearer token and private key
            signer: Request signer bound to the same session
            timeout: Request timeout in seconds
            verify: TLS verification flag or CA bundle path
            http_client: Pre-built httpx client (tests pass one with a MockTransport)
        """
        self.session = session
        self.signer = signer or RequestSigner(session)
        self.http = http_client or httpx.AsyncClient(timeout=timeout, verify=verify)

    def build_headers(self, method: str, url: str) -> dict[str, str]:
        """
        Build the authentication headers for one call.

        The session is read once so the token and key come from the same state.

        Raises:
            SigningError: If the session holds no private key
        """
        token, private_key = self.session.snapshot()
        if not private_key:
            raise SigningError("No private key in session")

        signed = self.signer.sign_request(method, url, private_key=private_key)
        headers = {
            HASH_HEADER: signed.signature,
            TIMESTAMP_HEADER: signed.timestamp,
        }
        if token:
            headers[AUTHORIZATION_HEADER] = f'Bearer {token}'
        return headers

    async def call(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        form: Optional[dict[str, str]] = None,
        expect: Expect = 'json',
        authenticated: bool = True,
    ) -> Outcome:
        """
        Perform one HTTP call and classify the response.

        Args:
            method: HTTP method
            url: Absolute URL; this exact string is signed
            json: JSON body
            form: Multipart form fields
            expect: How to parse a 2xx body
            authenticated: Attach bearer, Hash and Timestamp headers

        Returns:
            Ok, ClientError, Forbidden or NetworkOrServerError

        Raises:
            SigningError: If authenticated and no private key is available
        """
        request_id = str(uuid.uuid4())
        headers = self.build_headers(method, url) if authenticated else {}

        kwargs: dict[str, Any] = {}
        if json is not None:
            headers['Content-Type'] = 'application/json'
            kwargs['json'] = json
        if form is not None:
            kwargs['files'] = {name: (None, value) for name, value in form.items()}

        logger.debug(f"Making request: {method} {url} [request_id={request_id}]")

        try:
            response = await self.http.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Network error: {method} {url} error={type(e).__name__}: {e} [request_id={request_id}]")
            return NetworkOrServerError(detail=f"Cannot reach server: {type(e).__name__}")

        logger.debug(
            f"Response received: {method} {url} status={response.status_code} [request_id={request_id}]"
        )
        return self.classify(response, expect)

    def classify(self, response: httpx.Response, expect: Expect = 'json') -> Outcome:
        """
        Map an HTTP response to an Outcome.

        Args:
            response: Received response
            expect: How to parse a 2xx body

        Returns:
            Outcome variant for the status code
        """
        status = response.status_code

        if 200 <= status < 300:
            try:
                return Ok(self._parse_body(response, expect))
            except ValueError as e:
                logger.error(f"Malformed response body: status={status} error={e}")
                return NetworkOrServerError(detail="Malformed response from server", status=status)

        if status == 403:
            logger.warning("Forbidden: status=403")
            return Forbidden()

        if 400 <= status < 500:
            server_message = self._error_message(response)
            logger.warning(f"Client error: status={status} error={server_message}")
            return ClientError(
                status=status,
                message=server_message or GENERIC_ERROR_MESSAGE,
                server_message=server_message,
            )

        logger.error(f"Server error: status={status}")
        return NetworkOrServerError(status=status)

    def _parse_body(self, response: httpx.Response, expect: Expect) -> Any:
        if expect == 'json':
            return response.json()
        if expect == 'text':
            return response.text
        if expect == 'binary':
            content_type = response.headers.get('Content-Type', 'application/octet-stream')
            return BinaryBody(content=response.content, content_type=content_type)
        return None

    def _error_message(self, response: httpx.Response) -> Optional[str]:
        try:
            return ErrorBody.model_validate_json(response.content).error
        except ValidationError:
            return None

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self.http.aclose()
