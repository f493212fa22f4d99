"""Register and login calls against the auth server."""

from pydantic import ValidationError

from client.outcome import ClientError, NetworkOrServerError, Ok, Outcome
from client.schemas import Credentials, LoginResponse
from client.transport import AuthenticatedTransport
from common.constants import LOGIN_PATH, REGISTER_PATH
from common.exceptions import GENERIC_ERROR_MESSAGE
from common.logging_config import get_logger

logger = get_logger(__name__)


class AuthApi:
    """Unauthenticated account endpoints."""

    def __init__(self, transport: AuthenticatedTransport, auth_url: str):
        self.transport = transport
        self.auth_url = auth_url.rstrip('/')

    async def register(self, username: str, password: str) -> Outcome:
        """
        Create a new account.

        Args:
            username: Requested username
            password: Account password

        Returns:
            Ok(None) on success, otherwise a failure outcome with a user message
        """
        logger.info(f"Attempting to register user: {username}")
        body = Credentials(username=username, password=password).model_dump()
        outcome = await self.transport.call(
            'POST', self.auth_url + REGISTER_PATH, json=body, expect='none', authenticated=False
        )

        if isinstance(outcome, ClientError):
            if outcome.status == 422:
                message = "Username contains invalid characters"
            elif outcome.status in (400, 409) and outcome.server_message:
                message = f"Problem creating account: {outcome.server_message}"
            else:
                message = GENERIC_ERROR_MESSAGE
            logger.warning(f"Registration failed for user: {username} status={outcome.status}")
            return ClientError(outcome.status, message, outcome.server_message)

        return outcome

    async def login(self, username: str, password: str) -> Outcome:
        """
        Log in and obtain a bearer token and private key.

        Args:
            username: Username
            password: Password

        Returns:
            Ok(LoginResponse) on success, otherwise a failure outcome
        """
        logger.info(f"Attempting to login user: {username}")
        body = Credentials(username=username, password=password).model_dump()
        outcome = await self.transport.call(
            'POST', self.auth_url + LOGIN_PATH, json=body, expect='json', authenticated=False
        )

        if isinstance(outcome, ClientError):
            if outcome.status == 400 and outcome.server_message:
                message = f"Problem logging in: {outcome.server_message}"
            else:
                message = GENERIC_ERROR_MESSAGE
            logger.warning(f"Login failed for user: {username} status={outcome.status}")
            return ClientError(outcome.status, message, outcome.server_message)

        if isinstance(outcome, Ok):
            try:
                return Ok(LoginResponse.model_validate(outcome.payload))
            except ValidationError as e:
                logger.error(f"Malformed login response: {e.error_count()} error(s)")
                return NetworkOrServerError(detail="Malformed response from server")

        return outcome
