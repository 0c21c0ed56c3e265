"""Shared pytest fixtures used across the test suite."""

import pytest

from scoresheet_ocr.errors import OracleFailure
from scoresheet_ocr.oracle import PythonChessOracle
from scoresheet_ocr.session import GameSession

# 1.e4 e5 2.Nf3 Nc6 3.Bc4 Bc5, White may castle short
ITALIAN = ["e4", "e5", "Nf3", "Nc6", "Bc4", "Bc5"]

# 1.e4 d5 2.Bc4 Nf6, White's bishop can take on d5
BISHOP_TAKES_D5 = ["e4", "d5", "Bc4", "Nf6"]

# White: Kh1 Nb1 Pa3 Pd2, Black: Kh8 Pc3. Nxc3 is the only knight move.
KNIGHT_TAKES_C3_FEN = "7k/8/8/8/8/P1p5/3P4/1N5K w - - 0 1"

FOOLS_MATE = ["f3", "e5", "g4", "Qh4#"]

STALEMATE_FEN = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"


def _played(moves: list[str]) -> GameSession:
    session = GameSession()
    for move in moves:
        assert session.commit(move), move
    return session


@pytest.fixture
def session() -> GameSession:
    return GameSession()


@pytest.fixture
def italian() -> GameSession:
    return _played(ITALIAN)


@pytest.fixture
def bishop_takes_d5() -> GameSession:
    return _played(BISHOP_TAKES_D5)


@pytest.fixture
def mated() -> GameSession:
    return _played(FOOLS_MATE)


class UndoFailsOracle(PythonChessOracle):
    """Rules engine that plays moves but cannot take them back."""

    def undo_last_move(self) -> None:
        raise OracleFailure("board refused to take back the move")
