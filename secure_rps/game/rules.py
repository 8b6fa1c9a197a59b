"""Rock/paper/scissors moves, input parsing and the winner rule."""

import re
from enum import IntEnum
from typing import Optional

from secure_rps.common.errors import InvalidMove


class Move(IntEnum):
    IDLE = 0
    ROCK = 1
    PAPER = 2
    SCISSORS = 3


_MOVE_INPUTS = [
    (re.compile(r"r(ock)?"), Move.ROCK),
    (re.compile(r"p(aper)?"), Move.PAPER),
    (re.compile(r"s(cissors)?"), Move.SCISSORS),
]


def parse_move(text: str) -> Move:
    """
    Map "r"/"rock", "p"/"paper", "s"/"scissors" (any case) to a Move.

    :raises InvalidMove: for anything else
    """
    lowered = text.strip().lower()
    for pattern, move in _MOVE_INPUTS:
        if pattern.fullmatch(lowered):
            return move
    raise InvalidMove(text)


def get_winner(first: int, second: int) -> Optional[int]:
    """
    Index of the winning player (0 or 1), or None on a tie.

    Each move beats the one numbered directly below it, and rock beats scissors:
        3 - 2 = 1, 2 - 1 = 1, 1 - 3 = -2
    """
    for move in (first, second):
        if move not in (Move.ROCK, Move.PAPER, Move.SCISSORS):
            raise ValueError(f"Not a playable move: {move}")
    if first == second:
        return None
    if first - second in (1, -2):
        return 0
    return 1
