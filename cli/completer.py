"""Custom completer for SealDrive CLI with remote file name completion."""

from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, FILE_COMMANDS


class SealDriveCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Remote file name completion for file commands, from the last listing
    """

    def __init__(self):
        self.known_files: list[str] = []

    def update_files(self, names: Iterable[str]) -> None:
        """Remember file names from the latest 'list' output."""
        self.known_files = sorted(set(names))

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        For the first token, completes command names.
        For the first argument of file commands, completes known file names.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        if command not in FILE_COMMANDS:
            return

        argument_index = len(tokens) if is_typing_new_token else len(tokens) - 1
        if argument_index != 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_files(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_files(self, partial: str) -> Iterable[Completion]:
        """Complete remote file names; hint at 'list' when none are known."""
        if not self.known_files:
            if not partial:
                yield Completion(
                    "",
                    start_position=0,
                    display="(no files known - run 'list' first)",
                )
            return

        partial_lower = partial.lower()
        for name in self.known_files:
            if name.lower().startswith(partial_lower):
                yield Completion(name, start_position=-len(partial))
