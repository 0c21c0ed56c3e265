"""Tests for the python-chess backed oracle."""

import pytest

from scoresheet_ocr.errors import IllegalMove, OracleFailure
from scoresheet_ocr.oracle import PythonChessOracle, san_key

from conftest import FOOLS_MATE, ITALIAN, STALEMATE_FEN


def _oracle(moves: list[str], fen: str | None = None) -> PythonChessOracle:
    oracle = PythonChessOracle(fen)
    for move in moves:
        oracle.apply_move(move)
    return oracle


class TestSanKey:
    def test_strips_suffixes(self) -> None:
        assert san_key("Qh4#") == "Qh4"
        assert san_key("Bxf7+!?") == "Bxf7"
        assert san_key("e8=Q+") == "e8Q"
        assert san_key("O-O") == "O-O"


class TestApplyMove:
    def test_start_position(self) -> None:
        oracle = PythonChessOracle()
        assert len(oracle.legal_moves()) == 20
        assert "Nf3" in oracle.legal_moves()
        assert oracle.side_to_move() == "white"

    def test_returns_canonical_san(self) -> None:
        oracle = PythonChessOracle()
        assert oracle.apply_move("Nf3+") == "Nf3"
        assert oracle.side_to_move() == "black"

    def test_illegal_move(self) -> None:
        oracle = PythonChessOracle()
        with pytest.raises(IllegalMove) as info:
            oracle.apply_move("e5")
        assert info.value.move == "e5"
        assert oracle.fen() == PythonChessOracle().fen()

    def test_rejects_lenient_spellings(self) -> None:
        oracle = _oracle(ITALIAN)
        assert "O-O" in oracle.legal_moves()
        for text in ("0-0", "Ke1g1", "e1g1", "", "o-o"):
            with pytest.raises(IllegalMove):
                oracle.apply_move(text)

    def test_promotion_without_equals(self) -> None:
        oracle = PythonChessOracle("8/4P3/8/8/8/8/8/k6K w - - 0 1")
        assert oracle.apply_move("e8Q") == "e8=Q"

    def test_undo(self) -> None:
        oracle = PythonChessOracle()
        start = oracle.fen()
        oracle.apply_move("e4")
        oracle.undo_last_move()
        assert oracle.fen() == start

    def test_undo_without_moves(self) -> None:
        with pytest.raises(OracleFailure):
            PythonChessOracle().undo_last_move()

    def test_reset_to_custom_start(self) -> None:
        oracle = PythonChessOracle(STALEMATE_FEN)
        oracle.reset()
        assert oracle.fen() == STALEMATE_FEN


class TestGameEnd:
    def test_checkmate(self) -> None:
        oracle = _oracle(FOOLS_MATE)
        assert oracle.is_checkmate()
        assert oracle.is_game_over()
        assert not oracle.is_draw()
        assert oracle.legal_moves() == []

    def test_stalemate(self) -> None:
        oracle = PythonChessOracle(STALEMATE_FEN)
        assert oracle.is_draw()
        assert oracle.is_game_over()
        assert not oracle.is_checkmate()

    def test_in_progress(self) -> None:
        oracle = _oracle(ITALIAN)
        assert not oracle.is_game_over()
        assert not oracle.is_draw()
