"""Turn-by-turn rules of a tic-tac-toe match as the server referees it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from tictacnet.board import Board, other_piece, parse_move

WELCOME_X = "Welcome to TIC-TAC-TOE, you are X. Waiting for another player...\n"
WELCOME_O = "Welcome to TIC-TAC-TOE, you are O. You're Player 2.\nPlayer 1 is going first.\n"
MATCH_READY = "2 players are connected.\nIt's your turn. Go ahead!\n"
REFUSED = "Sorry, the other player refused to play\n"
REMATCH_FIRST = "It's your turn now!\n"
REMATCH_SECOND = "Waiting for Player 1\n"

_OCCUPIED_LEN = len("The cell (a, b) is already occupied\nc")
_WAITING_LEN = len("Waiting for your opponent...\nc")
_YOUR_TURN_LEN = len("It's your turn now!\nc")
_TIE = "The game ended in a Tie\nWant to play again? "
_YOU_WON = "You won!\nWant to play again? "


class Outcome(Enum):
    OCCUPIED = "occupied"
    MOVED = "moved"
    TIE = "tie"
    WON = "won"


@dataclass(frozen=True)
class MoveResult:
    """What a move did, with the reply for each piece in sending order."""

    outcome: Outcome
    mover: str
    row: int
    column: int
    replies: dict = field(default_factory=dict)
    winner: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.outcome in (Outcome.TIE, Outcome.WON)


class Game:
    """One match: X moves first, turns alternate until a win or a tie."""

    def __init__(self):
        self.board = Board()
        self.turn = "X"
        self.finished = False

    def apply_move(self, request: str) -> MoveResult:
        """Play the move in ``request`` for the piece whose turn it is."""
        if self.finished:
            raise RuntimeError("the game is over")
        row, column = parse_move(request)
        mover = self.turn
        board = self.board
        if not board.is_free(row, column):
            text = f"The cell ({row}, {column}) is already occupied\n{mover}"[:_OCCUPIED_LEN]
            return MoveResult(Outcome.OCCUPIED, mover, row, column, {mover: board.render(text)})

        board.place(row, column, mover)
        opponent = other_piece(mover)
        self.turn = opponent
        winner = board.winner()

        if winner is not None:
            self.finished = True
            loser = other_piece(winner)
            replies = {
                winner: board.render(_YOU_WON),
                loser: board.render(f"Player {winner} won the game!\nWant to play again? "),
            }
            ordered = {piece: replies[piece] for piece in ("X", "O")}
            return MoveResult(Outcome.WON, mover, row, column, ordered, winner)

        if board.is_full():
            self.finished = True
            replies = {mover: board.render(_TIE), opponent: board.render(_TIE)}
            return MoveResult(Outcome.TIE, mover, row, column, replies)

        waiting = f"Waiting for your opponent...\n{opponent}"[:_WAITING_LEN]
        your_turn = f"It's your turn now!\n{opponent}"[:_YOUR_TURN_LEN]
        replies = {mover: board.render(waiting), opponent: board.render(your_turn)}
        return MoveResult(Outcome.MOVED, mover, row, column, replies)

    def reset(self) -> None:
        """Clear the board for a rematch; X moves first again."""
        self.board.clear()
        self.turn = "X"
        self.finished = False


def rematch_decision(response1: str, response2: str) -> tuple[bool, Optional[int]]:
    """Decide on a rematch from both players' answers.

    Returns ``(play_again, notify)`` where ``notify`` is the player number
    (1 or 2) who said yes while the other said no, or None.
    """
    first = response1.lower()
    second = response2.lower()
    if first == "yes" and second == "yes":
        return True, None
    if first == "yes" and second == "no":
        return False, 1
    if first == "no" and second == "yes":
        return False, 2
    return False, None