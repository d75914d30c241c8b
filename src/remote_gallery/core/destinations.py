"""Destination choosers standing in for the native save dialog."""

from pathlib import Path
from typing import Callable, Optional, Union

CANCEL_ANSWERS = {"q", "quit", "n", "no"}


class FixedDestinationChooser:
    """Always saves the suggested name inside one directory."""

    def __init__(self, directory: Union[str, Path] = "."):
        self._directory = Path(directory)

    def choose(self, suggested_name: str) -> Optional[str]:
        self._directory.mkdir(parents=True, exist_ok=True)
        return str(self._directory / suggested_name)


class ConsoleDestinationChooser:
    """
    Asks on the terminal where to save.

    An empty answer accepts the suggested name, ``q`` (or end of input)
    cancels, anything else is taken as the path.
    """

    def __init__(
        self,
        directory: Union[str, Path] = ".",
        input_func: Optional[Callable[[str], str]] = None,
    ):
        self._directory = Path(directory)
        self._input = input_func or input

    def choose(self, suggested_name: str) -> Optional[str]:
        default = self._directory / suggested_name
        try:
            answer = self._input(f"Save ZIP as [{default}] (q to skip): ").strip()
        except EOFError:
            return None
        if answer.lower() in CANCEL_ANSWERS:
            return None
        return str(Path(answer) if answer else default)
