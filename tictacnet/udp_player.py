"""Terminal player for the UDP tic-tac-toe server."""

from __future__ import annotations

import socket
import sys
from typing import Callable, Iterator, Optional, Sequence, TextIO

from tictacnet.board import DEFAULT_HOST, PORT, validate_ip
from tictacnet.game import REFUSED, WELCOME_X
from tictacnet.tcp_player import (
    INVALID_COLUMN,
    INVALID_ROW,
    PROMPT,
    USAGE,
    split_turn_marker,
)

STATUS_REQUEST = "What's my status?"
MATCH_REQUEST = "Match status?"

_RECV_SIZE = 1024


def _words(stream: TextIO) -> Iterator[str]:
    for line in stream:
        yield from line.split()


def _as_int(token: str) -> Optional[int]:
    try:
        return int(token)
    except ValueError:
        return None


def _ask_move(words: Iterator[str], say: Callable[[str], None]) -> Optional[tuple[int, int]]:
    while True:
        say(PROMPT)
        row_token = next(words, None)
        column_token = next(words, None)
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


def play(
    sock: socket.socket,
    server_address: tuple,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> None:
    """Play matches against the server with moves read from ``stdin``."""
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout
    words = _words(stdin)
    address = server_address

    def say(text: str) -> None:
        stdout.write(text)
        stdout.flush()

    def send(text: str) -> None:
        sock.sendto(text.encode(), address)

    def receive(size: int = _RECV_SIZE) -> str:
        nonlocal address
        data, address = sock.recvfrom(size)
        return data.decode("utf-8", errors="replace")

    send(STATUS_REQUEST)
    response = receive(_RECV_SIZE - 1)
    say("response on client side:\n")
    say(response)
    if response == WELCOME_X:
        send(MATCH_REQUEST)
        say(receive(_RECV_SIZE - 1))
        piece = "X"
    else:
        piece = "O"

    turn = "X"
    while True:
        own_turn = piece == turn
        if own_turn:
            move = _ask_move(words, say)
            if move is None:
                return
            row, column = move
            send(f"{row} {column}\0")
        response = receive()
        if not response:
            return
        text, marker = split_turn_marker(response)
        if marker is not None:
            turn = marker
        say(text)
        if marker is not None or not text.endswith(" "):
            continue

        answer = next(words, None)
        if answer is None:
            return
        answer += turn if own_turn else "O"
        lowered = answer.lower()
        if not (lowered.startswith("yes") or lowered.startswith("no")):
            return
        send(answer)
        if lowered.startswith("no"):
            say("Thanks for playing\n")
            return
        reply = receive()
        say(reply)
        if reply == REFUSED:
            say("Anyways, Thanks for playing\n")
            return
        turn = "X"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Play against the server named on the command line."""
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
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        play(sock, (host, PORT), sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())