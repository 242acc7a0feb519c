"""Tic-tac-toe board shared by the game servers and players."""

from __future__ import annotations

import re
from typing import Optional

PORT = 8080
DEFAULT_HOST = "127.0.0.1"
PIECES = ("X", "O")
EMPTY = " "

_SEPARATOR = "-----------------"
_HEADER = "|R\\C| 1 | 2 | 3 |"
_IP_FIELD = re.compile(r"\s*([+-]?\d+)")
_MOVE = re.compile(r"\s*([+-]?\d+)(?!\d)\s*([+-]?\d+)")


class Board:
    """A 3x3 grid addressed with 1-based row and column numbers."""

    def __init__(self):
        self._cells = [[EMPTY] * 3 for _ in range(3)]

    @staticmethod
    def _check(row: int, column: int) -> None:
        if not (1 <= row <= 3 and 1 <= column <= 3):
            raise ValueError(f"cell ({row}, {column}) is off the board")

    def __getitem__(self, position: tuple[int, int]) -> str:
        row, column = position
        self._check(row, column)
        return self._cells[row - 1][column - 1]

    def is_free(self, row: int, column: int) -> bool:
        """Return True if the cell holds no piece."""
        return self[row, column] == EMPTY

    def place(self, row: int, column: int, piece: str) -> None:
        """Put a piece on a free cell."""
        if piece not in PIECES:
            raise ValueError(f"unknown piece {piece!r}")
        if not self.is_free(row, column):
            raise ValueError(f"the cell ({row}, {column}) is already occupied")
        self._cells[row - 1][column - 1] = piece

    def is_full(self) -> bool:
        return all(cell != EMPTY for line in self._cells for cell in line)

    def _lines(self):
        cells = self._cells
        yield from cells
        yield from ([cells[r][c] for r in range(3)] for c in range(3))
        yield [cells[i][i] for i in range(3)]
        yield [cells[i][2 - i] for i in range(3)]

    def winner(self) -> Optional[str]:
        """Return the piece holding a full row, column or diagonal, if any."""
        for line in self._lines():
            first = line[0]
            if first != EMPTY and all(cell == first for cell in line):
                return first
        return None

    def clear(self) -> None:
        for line in self._cells:
            line[:] = [EMPTY] * 3

    def render(self, prefix: str = "") -> str:
        """Draw the board as sent to players, followed by ``prefix``."""
        parts = ["", _SEPARATOR, _HEADER, _SEPARATOR]
        for number, line in enumerate(self._cells, start=1):
            parts.append(f"| {number} | {line[0]} | {line[1]} | {line[2]} |")
            parts.append(_SEPARATOR)
        parts.extend(["", prefix])
        return "\n".join(parts)


def other_piece(piece: str) -> str:
    """Return the opponent's piece."""
    if piece not in PIECES:
        raise ValueError(f"unknown piece {piece!r}")
    return "O" if piece == "X" else "X"


def validate_ip(ip_addr: str) -> bool:
    """Reject a dotted address whose leading numeric fields exceed 255."""
    pos = 0
    for index in range(4):
        if index:
            if not ip_addr.startswith(".", pos):
                break
            pos += 1
        found = _IP_FIELD.match(ip_addr, pos)
        if found is None:
            break
        if int(found.group(1)) > 255:
            return False
        pos = found.end()
    return True


def parse_move(request: str) -> tuple[int, int]:
    """Read ``"<row> <column>"`` from a move request."""
    found = _MOVE.match(request)
    if found is None:
        raise ValueError(f"not a move: {request!r}")
    return int(found.group(1)), int(found.group(2))