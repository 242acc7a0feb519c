import io
import socket
import threading
import time

import pytest

from tictacnet.board import Board
from tictacnet.game import MATCH_READY, REFUSED, WELCOME_O, WELCOME_X
from tictacnet.tcp_player import main, play, split_turn_marker

STATUS = b"What's my status?\n"
MATCH = b"Match status?\n"
PROMPT = "Enter <row> <column> where you want to place your piece: "


def _run_fake_server(sock, steps, received):
    previous_send = False
    try:
        for kind, payload in steps:
            if kind == "send":
                if previous_send:
                    time.sleep(0.1)
                sock.sendall(payload.encode())
                previous_send = True
            else:
                data = b""
                while len(data) < len(payload):
                    chunk = sock.recv(len(payload) - len(data))
                    if not chunk:
                        break
                    data += chunk
                received.append(data)
                previous_send = False
    finally:
        sock.close()


def _play_against(steps, stdin_text):
    player_side, server_side = socket.socketpair()
    player_side.settimeout(5)
    server_side.settimeout(5)
    received = []
    thread = threading.Thread(
        target=_run_fake_server, args=(server_side, steps, received), daemon=True
    )
    thread.start()
    out = io.StringIO()
    try:
        play(player_side, io.StringIO(stdin_text), out)
    finally:
        player_side.close()
    thread.join(5)
    return out.getvalue(), received


@pytest.mark.parametrize(
    "response, expected",
    [
        ("Waiting for your opponent...\nO", ("Waiting for your opponent...\n", "O")),
        ("It's your turn now!\nX", ("It's your turn now!\n", "X")),
        ("Want to play again? ", ("Want to play again? ", None)),
        ("", ("", None)),
    ],
)
def test_split_turn_marker(response, expected):
    assert split_turn_marker(response) == expected


def test_player_x_wins_and_declines():
    board = Board()
    board.place(1, 1, "X")
    steps = [
        ("expect", STATUS),
        ("send", WELCOME_X),
        ("expect", MATCH),
        ("send", Board().render(MATCH_READY)),
        ("expect", b"1 1\0"),
        ("send", board.render("You won!\nWant to play again? ")),
        ("expect", b"no"),
    ]
    out, received = _play_against(steps, "1 1\nno\n")
    assert received == [STATUS, MATCH, b"1 1\0", b"no"]
    assert out.startswith(WELCOME_X)
    assert out.endswith("Want to play again? Thanks for playing\n")


def test_out_of_range_input_is_asked_again():
    steps = [
        ("expect", STATUS),
        ("send", WELCOME_X),
        ("expect", MATCH),
        ("send", Board().render(MATCH_READY)),
        ("expect", b"1 1\0"),
        ("send", Board().render("You won!\nWant to play again? ")),
        ("expect", b"no"),
    ]
    out, received = _play_against(steps, "5 1\n2 9\n1 1\nno\n")
    assert "Invalid row. Please enter a number between 1 and 3.\n" in out
    assert "Invalid column. Please enter a number between 1 and 3.\n" in out
    assert out.count(PROMPT) == 3
    assert received[2] == b"1 1\0"


def test_occupied_cell_keeps_the_turn():
    steps = [
        ("expect", STATUS),
        ("send", WELCOME_X),
        ("expect", MATCH),
        ("send", Board().render(MATCH_READY)),
        ("expect", b"1 1\0"),
        ("send", Board().render("The cell (1, 1) is already occupied\nX")),
        ("expect", b"2 2\0"),
        ("send", Board().render("You won!\nWant to play again? ")),
        ("expect", b"no"),
    ]
    out, received = _play_against(steps, "1 1\n2 2\nno\n")
    assert received == [STATUS, MATCH, b"1 1\0", b"2 2\0", b"no"]
    assert "already occupied\nEnter <row>" in out


def test_player_o_waits_then_rematch_is_refused():
    steps = [
        ("expect", STATUS),
        ("send", Board().render(WELCOME_O)),
        ("send", Board().render("It's your turn now!\nO")),
        ("expect", b"2 2\0"),
        ("send", Board().render("The game ended in a Tie\nWant to play again? ")),
        ("expect", b"yes"),
        ("send", REFUSED),
    ]
    out, received = _play_against(steps, "2 2\nyes\n")
    assert received == [STATUS, b"2 2\0", b"yes"]
    assert "It's your turn now!\nEnter <row>" in out
    assert out.endswith(REFUSED + "Anyways, Thanks for playing\n")


def test_closed_connection_ends_play():
    steps = [
        ("expect", STATUS),
        ("send", WELCOME_X),
        ("expect", MATCH),
    ]
    out, received = _play_against(steps, "1 1\n")
    assert received == [STATUS, MATCH]
    assert PROMPT not in out


def test_main_rejects_extra_arguments(capsys):
    assert main(["127.0.0.1", "extra"]) == 0
    assert "Usage: ./executable <server-ip>" in capsys.readouterr().out


def test_main_rejects_large_ip_field(capsys):
    assert main(["1.2.3.999"]) == 1
    assert "Invalid IP address." in capsys.readouterr().out