"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.app_client import AppClient
from cli.config import Config, CONFIG_DIR_NAME
from cli.models import (
    CommandRequest,
    DownloadCommand,
    LinksCommand,
    ListCommand,
    LoginCommand,
    LogoutCommand,
    OpenLinkCommand,
    ReadCommand,
    RegisterCommand,
    RevokeCommand,
    ShareCommand,
    StatusCommand,
    UploadCommand,
)

logger = get_logger(__name__)


_client: Optional[AppClient] = None


def get_client() -> AppClient:
    """
    Get or create global AppClient instance.

    Returns:
        AppClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new AppClient instance")
        config = Config(Path.home() / CONFIG_DIR_NAME / 'config.json')
        _client = AppClient(config)
    return _client


async def handle_register(cmd: RegisterCommand, client: Optional[AppClient] = None) -> str:
    """
    Handle 'register' command.

    Args:
        cmd: RegisterCommand with username and password
        client: Optional AppClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()
    return await client.register(cmd.username, cmd.password)


async def handle_login(cmd: LoginCommand, client: Optional[AppClient] = None) -> str:
    """
    Handle 'login' command.

    Args:
        cmd: LoginCommand with username and password
        client: Optional AppClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    if client is None:
        client = get_client()
    return await client.login(cmd.username, cmd.password)


async def handle_logout(cmd: LogoutCommand, client: Optional[AppClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.logout()


async def handle_status(cmd: StatusCommand, client: Optional[AppClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.status()


async def handle_list(cmd: ListCommand, client: Optional[AppClient] = None) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand
        client: Optional AppClient for dependency injection (testing)

    Returns:
        Formatted list of files
    """
    logger.info("Executing list command")
    if client is None:
        client = get_client()
    result = await client.list_files()
    logger.debug("List command completed")
    return result


async def handle_read(cmd: ReadCommand, client: Optional[AppClient] = None) -> str:
    if client is None:
        client = get_client()
    return await client.read_file(cmd.filename)


async def handle_download(cmd: DownloadCommand, client: Optional[AppClient] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with filename and optional output_path
        client: Optional AppClient for dependency injection (testing)

    Returns:
        Success or error message with download results
    """
    logger.info(f"Executing download command: filename={cmd.filename} output_path={cmd.output_path}")
    if client is None:
        client = get_client()
    result = await client.download(cmd.filename, cmd.output_path)
    logger.debug("Download command completed")
    return result


async def handle_upload(cmd: UploadCommand, client: Optional[AppClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with local_path and optional remote_name
        client: Optional AppClient for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing upload command: local_path={cmd.local_path}")
    if client is None:
        client = get_client()
    return await client.upload(cmd.local_path, cmd.remote_name)


async def handle_share(cmd: ShareCommand, client: Optional[AppClient] = None) -> str:
    if client is None:
        client = get_client()
    return await client.share(cmd.filename)


async def handle_links(cmd: LinksCommand, client: Optional[AppClient] = None) -> str:
    if client is None:
        client = get_client()
    return await client.show_links(cmd.filename)


async def handle_revoke(cmd: RevokeCommand, client: Optional[AppClient] = None) -> str:
    if client is None:
        client = get_client()
    return await client.revoke(cmd.link_id)


async def handle_open_link(cmd: OpenLinkCommand, client: Optional[AppClient] = None) -> str:
    if client is None:
        client = get_client()
    return await client.open_link(cmd.link_id, cmd.output_path)


HANDLERS = {
    RegisterCommand: handle_register,
    LoginCommand: handle_login,
    LogoutCommand: handle_logout,
    StatusCommand: handle_status,
    ListCommand: handle_list,
    ReadCommand: handle_read,
    DownloadCommand: handle_download,
    UploadCommand: handle_upload,
    ShareCommand: handle_share,
    LinksCommand: handle_links,
    RevokeCommand: handle_revoke,
    OpenLinkCommand: handle_open_link,
}


async def dispatch_command(cmd_obj: CommandRequest, client: Optional[AppClient] = None) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return await handler(cmd_obj, client=client)
