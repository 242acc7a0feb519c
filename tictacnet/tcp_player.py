"""Terminal player for the TCP tic-tac-toe server."""

from __future__ import annotations

import socket
import sys
from collections import deque
from typing import Callable, Optional, Sequence, TextIO

from tictacnet.board import DEFAULT_HOST, PIECES, PORT, validate_ip
from tictacnet.game import REFUSED, WELCOME_X

STATUS_REQUEST = "What's my status?\n"
MATCH_REQUEST = "Match status?\n"
PROMPT = "Enter <row> <column> where you want to place your piece: "
INVALID_ROW = "Invalid row. Please enter a number between 1 and 3.\n"
INVALID_COLUMN = "Invalid column. Please enter a number between 1 and 3.\n"
USAGE = "Usage: ./executable <server-ip>"

_RECV_SIZE = 1024


class _Tokens:
    """Whitespace-separated words read lazily from a text stream."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._pending: deque[str] = deque()

    def next(self) -> Optional[str]:
        while not self._pending:
            line = self._stream.readline()
            if not line:
                return None
            self._pending.extend(line.split())
        return self._pending.popleft()


def _as_int(token: str) -> Optional[int]:
    try:
        return int(token)
    except ValueError:
        return None


def split_turn_marker(response: str) -> tuple[str, Optional[str]]:
    """Split the trailing piece that says whose turn it is off a message."""
    if response and response[-1] in PIECES:
        return response[:-1], response[-1]
    return response, None


def _receive(conn: socket.socket) -> str:
    return conn.recv(_RECV_SIZE).decode("utf-8", errors="replace")


def _ask_move(tokens: _Tokens, say: Callable[[str], None]) -> Optional[tuple[int, int]]:
    while True:
        say(PROMPT)
        row_token = tokens.next()
        column_token = tokens.next()
        if row_token is None or column_token is None:
            return None
        row = _as_int(row_token)
        column = _as_int(column_token)
        if row is None or not 1 <= row <= 3:
            say(INVALID_ROW)
            continue
        if column is None or not 1 <= column <= 3:
            say(INVALID_COLUMN)
            continue
        return row, column


def play(conn: socket.socket, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
    """Play matches over ``conn`` with moves read from ``stdin``."""
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    tokens = _Tokens(stdin)

    def say(text: str) -> None:
        stdout.write(text)
        stdout.flush()

    conn.sendall(STATUS_REQUEST.encode())
    response = _receive(conn)
    if not response:
        return
    say(response)
    if response == WELCOME_X:
        conn.sendall(MATCH_REQUEST.encode())
        response = _receive(conn)
        if not response:
            return
        say(response)
        piece = "X"
    else:
        piece = "O"

    turn = "X"
    while True:
        if piece == turn:
            move = _ask_move(tokens, say)
            if move is None:
                return
            row, column = move
            conn.sendall(f"{row} {column}\0".encode())
        response = _receive(conn)
        if not response:
            return
        text, marker = split_turn_marker(response)
        if marker is not None:
            turn = marker
        say(text)
        if marker is not None or not text.endswith(" "):
            continue

        answer = tokens.next()
        if answer is None or answer.lower() not in ("yes", "no"):
            return
        conn.sendall(answer.encode())
        if answer.lower() == "no":
            say("Thanks for playing\n")
            return
        reply = _receive(conn)
        if not reply:
            return
        say(reply)
        if reply == REFUSED:
            say("Anyways, Thanks for playing\n")
            return
        turn = "X"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Connect to the server named on the command line and play."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) > 1:
        print(USAGE)
        return 0
    host = DEFAULT_HOST
    if args:
        if not validate_ip(args[0]):
            print("Invalid IP address.")
            return 1
        host = args[0]
    try:
        socket.inet_pton(socket.AF_INET, host)
    except OSError:
        print("Invalid address or address not supported", file=sys.stderr)
        return 1
    try:
        conn = socket.create_connection((host, PORT))
    except OSError:
        print("Connection failed")
        return 1
    with conn:
        play(conn, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())