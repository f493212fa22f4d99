"""Exception taxonomy shared by the client core and the CLI."""

from typing import Optional


GENERIC_ERROR_MESSAGE = "An error occurred. Please try again later."


class SealDriveError(Exception):
    """
    Base exception class for all client-side errors.
    """
    pass


class AuthExpired(SealDriveError):
    """
    Raised when the bearer token is missing, expired or cannot be decoded.
    """
    pass


class SigningError(AuthExpired):
    """
    Raised when a request cannot be signed because no usable private key is
    held in the session. Callers treat it exactly like AuthExpired.
    """
    pass


class ClientRequestError(SealDriveError):
    """
    Raised for 4xx responses other than 403.
    """

    def __init__(self, status: int, message: Optional[str] = None):
        self.status = status
        self.message = message or GENERIC_ERROR_MESSAGE
        super().__init__(self.message)


class PermissionDenied(SealDriveError):
    """
    Raised for 403 responses.
    """
    pass


class TransportError(SealDriveError):
    """
    Raised for network failures and unclassified server responses.
    """
    pass
