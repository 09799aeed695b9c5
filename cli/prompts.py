"""Interactive prompts.

One question at a time on stdin. There is no timeout; the wizard waits for
the user. With assume_defaults every question resolves immediately to its
default, which lets the wizard run unattended.
"""

from typing import Callable


class PromptAborted(Exception):
    """stdin closed while a question was pending."""


class Prompter:
    """Text and yes/no questions with pre-filled defaults."""

    def __init__(
        self,
        input_fn: Callable[[str], str] | None = None,
        assume_defaults: bool = False,
    ) -> None:
        self._input = input_fn
        self.assume_defaults = assume_defaults

    def _read(self, prompt: str) -> str:
        # Looked up per call so tests can patch builtins.input
        reader = self._input or input
        try:
            return reader(prompt).strip()
        except EOFError as e:
            raise PromptAborted("No terminal input available") from e

    def ask_text(self, message: str, default: str = "") -> str:
        """Ask for a value. An empty answer takes the default."""
        if self.assume_defaults:
            print(f"  {message} [{default}]: {default}")
            return default
        if default:
            answer = self._read(f"  {message} [{default}]: ")
            return answer or default
        return self._read(f"  {message}: ")

    def ask_yes_no(self, message: str) -> bool:
        """Yes/no question. An empty answer declines."""
        if self.assume_defaults:
            print(f"  {message} [y/N]: n")
            return False
        answer = self._read(f"  {message} [y/N]: ").lower()
        return answer in ("y", "yes")
