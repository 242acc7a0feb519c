import socket
import threading
from types import SimpleNamespace

import pytest

from tictacnet.board import Board
from tictacnet.game import (
    MATCH_READY,
    REFUSED,
    REMATCH_FIRST,
    REMATCH_SECOND,
    WELCOME_O,
    WELCOME_X,
)
from tictacnet.tcp_server import TcpGameServer, main

STATUS = b"What's my status?\n"


def _read(sock):
    return sock.recv(4096).decode()


def _move(sock, row, column):
    sock.sendall(f"{row} {column}\0".encode())


@pytest.fixture
def match():
    server = TcpGameServer("127.0.0.1", 0)
    errors = []

    def run():
        try:
            server.serve()
        except Exception as exc:  # recorded for the test to inspect
            errors.append(exc)

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    address = server.address
    p1 = socket.create_connection(address, timeout=5)
    p1.sendall(STATUS)
    first = _read(p1)
    p2 = socket.create_connection(address, timeout=5)
    p2.sendall(STATUS)
    second = _read(p2)
    p1.sendall(b"Match status?\n")
    third = _read(p1)
    yield SimpleNamespace(
        server=server, thread=thread, errors=errors, p1=p1, p2=p2,
        hello=(first, second, third),
    )
    p1.close()
    p2.close()
    thread.join(5)


def _play_x_win(m):
    moves = [(m.p1, 1, 1), (m.p2, 2, 1), (m.p1, 1, 2), (m.p2, 2, 2), (m.p1, 1, 3)]
    replies = []
    for sock, row, column in moves:
        _move(sock, row, column)
        replies.append((_read(m.p1), _read(m.p2)))
    return replies


def test_handshake_messages(match):
    first, second, third = match.hello
    assert first == WELCOME_X
    assert second == Board().render(WELCOME_O)
    assert third == Board().render(MATCH_READY)


def test_normal_move_replies(match):
    _move(match.p1, 1, 1)
    board = Board()
    board.place(1, 1, "X")
    assert _read(match.p1) == board.render("Waiting for your opponent...\nO")
    assert _read(match.p2) == board.render("It's your turn now!\nO")


def test_occupied_cell_is_reported_to_mover(match):
    _move(match.p1, 1, 1)
    _read(match.p1)
    _read(match.p2)
    _move(match.p2, 1, 1)
    board = Board()
    board.place(1, 1, "X")
    assert _read(match.p2) == board.render("The cell (1, 1) is already occupied\nO")


def test_win_then_both_decline(match):
    replies = _play_x_win(match)
    board = Board()
    for row, column, piece in [(1, 1, "X"), (2, 1, "O"), (1, 2, "X"), (2, 2, "O"), (1, 3, "X")]:
        board.place(row, column, piece)
    last_p1, last_p2 = replies[-1]
    assert last_p1 == board.render("You won!\nWant to play again? ")
    assert last_p2 == board.render("Player X won the game!\nWant to play again? ")
    match.p1.sendall(b"no")
    match.p2.sendall(b"no")
    match.thread.join(5)
    assert not match.thread.is_alive()
    assert match.errors == []
    assert match.p1.recv(100) == b""


def test_rematch_refused_notifies_willing_player(match):
    _play_x_win(match)
    match.p1.sendall(b"yes")
    match.p2.sendall(b"no")
    assert _read(match.p1) == REFUSED
    match.thread.join(5)
    assert not match.thread.is_alive()


def test_rematch_accepted_starts_fresh_game(match):
    _play_x_win(match)
    match.p1.sendall(b"YES")
    match.p2.sendall(b"yes")
    assert _read(match.p1) == Board().render(REMATCH_FIRST)
    assert _read(match.p2) == Board().render(REMATCH_SECOND)
    _move(match.p1, 2, 2)
    board = Board()
    board.place(2, 2, "X")
    assert _read(match.p1) == board.render("Waiting for your opponent...\nO")


def test_disconnect_mid_game_raises(match):
    match.p1.close()
    match.thread.join(5)
    assert not match.thread.is_alive()
    assert len(match.errors) == 1
    assert isinstance(match.errors[0], ConnectionError)


def test_address_reports_bound_port():
    with TcpGameServer("127.0.0.1", 0) as server:
        host, port = server.address
    assert host == "127.0.0.1"
    assert port > 0


def test_main_rejects_extra_arguments(capsys):
    assert main(["127.0.0.1", "extra"]) == 0
    assert "Usage: ./executable <server-ip>" in capsys.readouterr().out


def test_main_rejects_large_ip_field(capsys):
    assert main(["300.0.0.1"]) == 1
    assert "Invalid IP address." in capsys.readouterr().out


def test_main_rejects_unparsable_address(capsys):
    assert main(["not-an-address"]) == 1
    assert "Invalid address or address not supported" in capsys.readouterr().err