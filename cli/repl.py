"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import dispatch_command, get_client
from cli.completer import SealDriveCompleter
from cli.constants import (
    HELP_TEXT,
    LOGGED_OUT_PROMPT_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.parser import ParseError, parse_command


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    """Display SealDrive logo and welcome text."""
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


async def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    client = get_client()
    completer = SealDriveCompleter()
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=completer, history=history, style=STYLE
    )

    clear_screen()
    show_welcome()
    print(client.status())

    try:
        while True:
            prompt_text = PROMPT_TEXT if client.lifecycle.is_authenticated else LOGGED_OUT_PROMPT_TEXT
            try:
                user_input = await session.prompt_async([("class:prompt", prompt_text)])

                if not user_input.strip():
                    continue

                if user_input.strip() == "exit":
                    print("Goodbye!")
                    break

                if user_input.strip() == "help":
                    print(HELP_TEXT)
                    continue

                if user_input.strip() == "clear":
                    clear_screen()
                    show_welcome()
                    continue

                cmd_obj = parse_command(user_input)
                result = await dispatch_command(cmd_obj, client=client)
                completer.update_files(client.known_files)
                print(result)

            except ParseError as e:
                print(f"Error: {e}")
            except KeyboardInterrupt:
                continue
            except EOFError:
                print("\nGoodbye!")
                break
    finally:
        await client.aclose()
