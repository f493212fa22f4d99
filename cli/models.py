"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class RegisterCommand:
    """Register a new user account."""

    username: str
    password: str
    command: Literal["register"] = "register"


@dataclass(frozen=True)
class LoginCommand:
    """Login with username and password."""

    username: str
    password: str
    command: Literal["login"] = "login"


@dataclass(frozen=True)
class LogoutCommand:
    """Clear the stored session."""

    command: Literal["logout"] = "logout"


@dataclass(frozen=True)
class StatusCommand:
    """Report session state."""

    command: Literal["status"] = "status"


@dataclass(frozen=True)
class ListCommand:
    """List files."""

    command: Literal["list"] = "list"


@dataclass(frozen=True)
class ReadCommand:
    """Show text content of a file."""

    filename: str
    command: Literal["read"] = "read"


@dataclass(frozen=True)
class DownloadCommand:
    """Download file by filename."""

    filename: str
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file."""

    local_path: str
    remote_name: str | None = None
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class ShareCommand:
    """Create a share link for a file."""

    filename: str
    command: Literal["share"] = "share"


@dataclass(frozen=True)
class LinksCommand:
    """Show share links of a file."""

    filename: str
    command: Literal["links"] = "links"


@dataclass(frozen=True)
class RevokeCommand:
    """Delete a share link."""

    link_id: str
    command: Literal["revoke"] = "revoke"


@dataclass(frozen=True)
class OpenLinkCommand:
    """Fetch a shared file through its link."""

    link_id: str
    output_path: str | None = None
    command: Literal["open-link"] = "open-link"


CommandRequest = (
    RegisterCommand
    | LoginCommand
    | LogoutCommand
    | StatusCommand
    | ListCommand
    | ReadCommand
    | DownloadCommand
    | UploadCommand
    | ShareCommand
    | LinksCommand
    | RevokeCommand
    | OpenLinkCommand
)
