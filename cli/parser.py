"""Command parser for CLI input."""

import shlex

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


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name, args = tokens[0], tokens[1:]

    if command_name == "register":
        username, password = _exactly(args, 2, "register requires exactly 2 arguments: <username> <password>")
        return RegisterCommand(username=username, password=password)
    elif command_name == "login":
        username, password = _exactly(args, 2, "login requires exactly 2 arguments: <username> <password>")
        return LoginCommand(username=username, password=password)
    elif command_name == "logout":
        _exactly(args, 0, "logout takes no arguments")
        return LogoutCommand()
    elif command_name == "status":
        _exactly(args, 0, "status takes no arguments")
        return StatusCommand()
    elif command_name == "list":
        _exactly(args, 0, "list takes no arguments")
        return ListCommand()
    elif command_name == "read":
        (filename,) = _exactly(args, 1, "read requires exactly 1 argument: <filename>")
        return ReadCommand(filename=filename)
    elif command_name == "download":
        filename, output_path = _one_or_two(args, "download requires <filename> [output_path]")
        return DownloadCommand(filename=filename, output_path=output_path)
    elif command_name == "upload":
        local_path, remote_name = _one_or_two(args, "upload requires <local_path> [remote_name]")
        return UploadCommand(local_path=local_path, remote_name=remote_name)
    elif command_name == "share":
        (filename,) = _exactly(args, 1, "share requires exactly 1 argument: <filename>")
        return ShareCommand(filename=filename)
    elif command_name == "links":
        (filename,) = _exactly(args, 1, "links requires exactly 1 argument: <filename>")
        return LinksCommand(filename=filename)
    elif command_name == "revoke":
        (link_id,) = _exactly(args, 1, "revoke requires exactly 1 argument: <link_id>")
        return RevokeCommand(link_id=link_id)
    elif command_name == "open-link":
        link_id, output_path = _one_or_two(args, "open-link requires <link_id> [output_path]")
        return OpenLinkCommand(link_id=link_id, output_path=output_path)
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _exactly(args: list[str], count: int, message: str) -> list[str]:
    if len(args) != count:
        raise ParseError(message)
    return args


def _one_or_two(args: list[str], message: str) -> tuple[str, str | None]:
    if not 1 <= len(args) <= 2:
        raise ParseError(message)
    return args[0], (args[1] if len(args) > 1 else None)
