"""Tic-tac-toe referee for two players connected over TCP."""

from __future__ import annotations

import socket
import sys
from typing import Optional, Sequence

from tictacnet.board import DEFAULT_HOST, PORT, validate_ip
from tictacnet.game import (
    MATCH_READY,
    REFUSED,
    REMATCH_FIRST,
    REMATCH_SECOND,
    WELCOME_O,
    WELCOME_X,
    Game,
    rematch_decision,
)

STATUS_REQUEST = "What's my status?\n"
MATCH_REQUEST = "Match status?\n"
USAGE = "Usage: ./executable <server-ip>"

_REQUEST_SIZE = 9
_HELLO_SIZE = 1024


def _receive(conn: socket.socket, size: int) -> str:
    """Read one message; text after a NUL byte is dropped."""
    data = conn.recv(size)
    return data.decode("utf-8", errors="replace").split("\0", 1)[0]


class TcpGameServer:
    """Listens for two players, referees their matches and rematches."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = PORT):
        self.game = Game()
        self._players: list[socket.socket] = []
        self._listener: Optional[socket.socket] = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._listener.bind((host, port))
            self._listener.listen(2)
        except OSError:
            self._listener.close()
            raise

    @property
    def address(self) -> tuple[str, int]:
        """The address the server listens on."""
        if self._listener is None:
            raise RuntimeError("the server is closed")
        return self._listener.getsockname()

    def __enter__(self) -> "TcpGameServer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Close both player connections and the listening socket."""
        for conn in self._players:
            conn.close()
        self._players = []
        if self._listener is not None:
            self._listener.close()
            self._listener = None

    def serve(self) -> None:
        """Accept both players, then play matches until one declines a rematch."""
        try:
            self._accept_players()
            while self.play_game():
                pass
        finally:
            self.close()

    def _accept_players(self) -> None:
        if self._listener is None:
            raise RuntimeError("the server is closed")
        first, _ = self._listener.accept()
        self._players.append(first)
        print("Player 1 connected! Waiting for Player 2", flush=True)
        request = _receive(first, _HELLO_SIZE)
        print(f"Player 1's request: {request}", flush=True)
        if request == STATUS_REQUEST:
            first.sendall(WELCOME_X.encode())

        second, _ = self._listener.accept()
        self._players.append(second)
        print("Player 2 connected!", flush=True)
        request = _receive(second, _HELLO_SIZE - 1)
        print(f"Player 2's request: {request}", flush=True)
        if request == STATUS_REQUEST:
            second.sendall(self.game.board.render(WELCOME_O).encode())

        request = _receive(first, _HELLO_SIZE - 1)
        print(f"Player 1's request: {request}", flush=True)
        if request == MATCH_REQUEST:
            first.sendall(self.game.board.render(MATCH_READY).encode())

    def _socket_for(self, piece: str) -> socket.socket:
        if len(self._players) != 2:
            raise RuntimeError("both players must be connected")
        return self._players[0 if piece == "X" else 1]

    def play_game(self) -> bool:
        """Play one match; return True if both players want a rematch."""
        print("Starting a new game", flush=True)
        game = self.game
        while True:
            mover = game.turn
            print(f"turn: {mover}", flush=True)
            request = _receive(self._socket_for(mover), _REQUEST_SIZE)
            if not request:
                raise ConnectionError(f"player {mover} disconnected")
            print(f"request: {request}", flush=True)
            result = game.apply_move(request)
            for piece, reply in result.replies.items():
                self._socket_for(piece).sendall(reply.encode())
            if result.finished:
                return self.handle_post_match()

    def handle_post_match(self) -> bool:
        """Collect both rematch answers; start over or part ways."""
        self.game.reset()
        first = self._socket_for("X")
        second = self._socket_for("O")
        response1 = _receive(first, _REQUEST_SIZE)
        response2 = _receive(second, _REQUEST_SIZE)
        print(f"response1: {response1}", flush=True)
        print(f"response2: {response2}", flush=True)

        play_again, notify = rematch_decision(response1, response2)
        if play_again:
            board = self.game.board
            first.sendall(board.render(REMATCH_FIRST).encode())
            second.sendall(board.render(REMATCH_SECOND).encode())
            return True
        if notify is not None:
            self._players[notify - 1].sendall(REFUSED.encode())
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
        server = TcpGameServer(host, PORT)
    except OSError:
        print("Failed to bind socket")
        return 1
    print(f"Server is listening on port {PORT}...", flush=True)
    with server:
        server.serve()
    return 0


if __name__ == "__main__":
    sys.exit(main())