"""Tic-tac-toe referee for two players talking over UDP datagrams."""

from __future__ import annotations

import socket
import sys
from typing import Optional, Sequence

from tictacnet.board import DEFAULT_HOST, PORT, other_piece, validate_ip
from tictacnet.game import (
    MATCH_READY,
    REFUSED,
    REMATCH_FIRST,
    REMATCH_SECOND,
    WELCOME_O,
    WELCOME_X,
    Game,
    Outcome,
    rematch_decision,
)

STATUS_REQUEST = "What's my status?"
MATCH_REQUEST = "Match status?"
USAGE = "Usage: ./executable <server-ip>"

_REQUEST_SIZE = 9
_HELLO_SIZE = 1024

Address = tuple


def get_sender(response: str) -> tuple[str, Optional[str]]:
    """Split a rematch answer at its first piece letter.

    Returns the text before the letter and the letter itself, or the whole
    text and None when no piece letter is present.
    """
    for index, char in enumerate(response):
        if char in ("X", "O"):
            return response[:index], char
    return response, None


class UdpGameServer:
    """Waits for two players, referees their matches and rematches."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = PORT):
        self.game = Game()
        self._p1: Optional[Address] = None
        self._p2: Optional[Address] = None
        self._sock: Optional[socket.socket] = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._sock.bind((host, port))
        except OSError:
            self._sock.close()
            raise

    @property
    def address(self) -> tuple[str, int]:
        """The address the server receives on."""
        return self._socket.getsockname()

    @property
    def _socket(self) -> socket.socket:
        if self._sock is None:
            raise RuntimeError("the server is closed")
        return self._sock

    def __enter__(self) -> "UdpGameServer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def _receive(self, size: int) -> tuple[str, Address]:
        data, sender = self._socket.recvfrom(size)
        print(f"Number of bytes received: {len(data)}", flush=True)
        return data.decode("utf-8", errors="replace").split("\0", 1)[0], sender

    def _send(self, text: str, address: Address) -> None:
        self._socket.sendto(text.encode(), address)

    def serve(self) -> None:
        """Greet both players, then play matches until a rematch is declined."""
        try:
            self._handshake()
            while self.play_game():
                pass
        finally:
            self.close()

    def _handshake(self) -> None:
        request, self._p1 = self._receive(_HELLO_SIZE)
        print(f"Player 1's request 1: {request}", flush=True)
        if request == STATUS_REQUEST:
            self._send(WELCOME_X, self._p1)
            print("Player 1 connected! Waiting for Player 2...", flush=True)

        request, self._p1 = self._receive(_HELLO_SIZE)
        print(f"Player 1's request 2: {request}", flush=True)
        if request == MATCH_REQUEST:
            request, self._p2 = self._receive(_HELLO_SIZE)
            print(f"Player 2's request: {request}", flush=True)
            if request == STATUS_REQUEST:
                self._send(self.game.board.render(WELCOME_O), self._p2)
                print("Both players are here", flush=True)
            self._send(self.game.board.render(MATCH_READY), self._p1)

    def _address_for(self, piece: str) -> Address:
        address = self._p1 if piece == "X" else self._p2
        if address is None:
            raise RuntimeError(f"player {piece} has not joined")
        return address

    def play_game(self) -> bool:
        """Play one match; return True if both players want a rematch."""
        print("Starting a new game", flush=True)
        game = self.game
        while True:
            mover = game.turn
            print(f"turn: {mover}", flush=True)
            request, sender = self._receive(_REQUEST_SIZE)
            print(f"request: {request}", flush=True)
            try:
                result = game.apply_move(request)
            except ValueError as error:
                print(f"ignoring move: {error}", flush=True)
                continue
            if result.outcome is Outcome.WON:
                targets = {"X": self._address_for("X"), "O": self._address_for("O")}
            else:
                opponent = other_piece(mover)
                targets = {mover: sender, opponent: self._address_for(opponent)}
            for piece, reply in result.replies.items():
                self._send(reply, targets[piece])
            if result.finished:
                return self.handle_post_match()

    def handle_post_match(self) -> bool:
        """Collect both rematch answers; start over or part ways."""
        self.game.reset()
        p1 = self._address_for("X")
        p2 = self._address_for("O")

        raw1, first_from = self._receive(_REQUEST_SIZE)
        response1, sender = get_sender(raw1)
        print(f"Sender: {sender or ''}", flush=True)
        if sender == "X":
            p1 = first_from
        else:
            p2 = first_from
        print(f"response1: {response1}", flush=True)

        raw2, second_from = self._receive(_REQUEST_SIZE)
        response2, sender = get_sender(raw2)
        print(f"Sender: {sender or ''}", flush=True)
        if sender == "O":
            p2 = second_from
        else:
            p1 = second_from
        print(f"response2: {response2}", flush=True)

        play_again, notify = rematch_decision(response1, response2)
        if play_again:
            board = self.game.board
            self._send(board.render(REMATCH_FIRST), p1)
            self._send(board.render(REMATCH_SECOND), p2)
            return True
        if notify == 1:
            self._send(REFUSED, first_from)
        elif notify == 2:
            self._send(REFUSED, second_from)
        self.close()
        return False


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the server on the address given on the command line."""
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
        server = UdpGameServer(host, PORT)
    except OSError:
        print("Failed to bind socket")
        return 1
    print(f"Server is running on port {PORT}...", flush=True)
    with server:
        server.serve()
    return 0


if __name__ == "__main__":
    sys.exit(main())