"""Human-facing input/output, injected into the session."""

import logging
from abc import ABC, abstractmethod

from secure_rps.common.errors import InvalidMove
from secure_rps.game.rules import Move, parse_move

logger = logging.getLogger(__name__)


class ConsoleIO(ABC):
    """Line-based input and text output for one player."""

    @abstractmethod
    def read_line(self, prompt: str) -> str:
        ...

    @abstractmethod
    def show(self, text: str = "") -> None:
        ...


class TerminalIO(ConsoleIO):
    """ConsoleIO on stdin/stdout."""

    def read_line(self, prompt: str) -> str:
        return input(prompt)

    def show(self, text: str = "") -> None:
        print(text)


def prompt_move(io: ConsoleIO) -> Move:
    """Ask until a valid move is typed."""
    io.show()
    while True:
        text = io.read_line("Enter your move: ")
        try:
            return parse_move(text)
        except InvalidMove:
            logger.debug("[GAME] Rejected input %r", text)
            io.show("Invalid input.")
