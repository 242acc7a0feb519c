import io
import socket
import threading

import pytest

from tictacnet.board import Board
from tictacnet.game import MATCH_READY, REFUSED, WELCOME_O, WELCOME_X
from tictacnet.tcp_player import INVALID_ROW
from tictacnet.udp_player import main, play


@pytest.fixture
def link():
    fake = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    fake.settimeout(5)
    fake.bind(("127.0.0.1", 0))
    player = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    player.settimeout(5)
    yield fake, player
    fake.close()
    player.close()


def _start(player, fake, text):
    out = io.StringIO()
    thread = threading.Thread(
        target=play,
        args=(player, fake.getsockname(), io.StringIO(text), out),
        daemon=True,
    )
    thread.start()
    return thread, out


def _greet_as_x(fake):
    data, addr = fake.recvfrom(1024)
    assert data == b"What's my status?"
    fake.sendto(WELCOME_X.encode(), addr)
    data, addr = fake.recvfrom(1024)
    assert data == b"Match status?"
    fake.sendto(Board().render(MATCH_READY).encode(), addr)
    return addr


def test_first_player_wins_and_declines(link):
    fake, player = link
    thread, out = _start(player, fake, "1 1\nno\n")
    addr = _greet_as_x(fake)
    data, addr = fake.recvfrom(1024)
    assert data == b"1 1\x00"
    fake.sendto(Board().render("You won!\nWant to play again? ").encode(), addr)
    data, _ = fake.recvfrom(1024)
    assert data == b"noX"
    thread.join(5)
    text = out.getvalue()
    assert text.startswith("response on client side:\n" + WELCOME_X)
    assert text.endswith("Thanks for playing\n")


def test_second_player_accepts_but_is_refused(link):
    fake, player = link
    thread, out = _start(player, fake, "yes\n")
    data, addr = fake.recvfrom(1024)
    assert data == b"What's my status?"
    fake.sendto(Board().render(WELCOME_O).encode(), addr)
    fake.sendto(Board().render("Player X won the game!\nWant to play again? ").encode(), addr)
    data, addr = fake.recvfrom(1024)
    assert data == b"yesO"
    fake.sendto(REFUSED.encode(), addr)
    thread.join(5)
    assert not thread.is_alive()
    assert out.getvalue().endswith(REFUSED + "Anyways, Thanks for playing\n")


def test_invalid_row_asks_again(link):
    fake, player = link
    thread, out = _start(player, fake, "5 1\n1 1\nno\n")
    _greet_as_x(fake)
    data, addr = fake.recvfrom(1024)
    assert data == b"1 1\x00"
    fake.sendto(Board().render("You won!\nWant to play again? ").encode(), addr)
    assert fake.recvfrom(1024)[0] == b"noX"
    thread.join(5)
    assert INVALID_ROW in out.getvalue()


def test_turn_marker_hands_the_move_back(link):
    fake, player = link
    thread, out = _start(player, fake, "1 1\n2 2\nmaybe\n")
    _greet_as_x(fake)
    data, addr = fake.recvfrom(1024)
    assert data == b"1 1\x00"
    fake.sendto(Board().render("Waiting for your opponent...\nO").encode(), addr)
    fake.sendto(Board().render("It's your turn now!\nX").encode(), addr)
    data, addr = fake.recvfrom(1024)
    assert data == b"2 2\x00"
    fake.sendto(Board().render("You won!\nWant to play again? ").encode(), addr)
    thread.join(5)
    assert not thread.is_alive()
    text = out.getvalue()
    assert "Waiting for your opponent...\nO" not in text
    assert "Waiting for your opponent...\n" in text
    assert "Thanks for playing" not in text


def test_main_rejects_extra_arguments(capsys):
    assert main(["127.0.0.1", "extra"]) == 0
    assert "Usage: ./executable <server-ip>" in capsys.readouterr().out


def test_main_rejects_bad_address(capsys):
    assert main(["1.2.3.999"]) == 1
    assert "Invalid IP address." in capsys.readouterr().out