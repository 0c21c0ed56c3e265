"""
Chess rules oracle.

Everything chess-specific (move generation, legality, check and game end)
comes from python-chess; this module only adapts it to move text.
"""

import re
from typing import Optional, Protocol

import chess

from scoresheet_ocr.errors import IllegalMove, OracleFailure

_ANNOTATION_RE = re.compile(r"[+#]?[?!]*$")


def san_key(text: str) -> str:
    """Move text with check marks, annotations and the promotion ``=`` removed."""
    return _ANNOTATION_RE.sub("", text).replace("=", "")


class ChessOracle(Protocol):
    def apply_move(self, text: str) -> str: ...
    def undo_last_move(self) -> None: ...
    def legal_moves(self) -> list[str]: ...
    def is_game_over(self) -> bool: ...
    def is_checkmate(self) -> bool: ...
    def is_draw(self) -> bool: ...
    def side_to_move(self) -> str: ...
    def fen(self) -> str: ...
    def reset(self) -> None: ...


class PythonChessOracle:
    """
    ChessOracle over a ``chess.Board``.

    Move text must spell one of the position's legal moves in SAN. Check
    marks, annotations and ``=`` are ignored on both sides, but spellings
    python-chess would quietly forgive (``0-0``, ``Ng1f3``, ``e2e4``) are
    rejected so that OCR mistakes surface instead of being absorbed.
    """

    def __init__(self, start_fen: Optional[str] = None):
        self.start_fen = start_fen or chess.STARTING_FEN
        self.board = chess.Board(self.start_fen)

    def _legal(self) -> list[tuple[str, chess.Move]]:
        try:
            return [(self.board.san(move), move) for move in self.board.legal_moves]
        except (ValueError, IndexError) as exc:
            raise OracleFailure(f"cannot enumerate moves in {self.board.fen()}: {exc}") from exc

    def apply_move(self, text: str) -> str:
        """Play ``text`` and return its canonical SAN; raise IllegalMove otherwise."""
        key = san_key(text)
        if key:
            for san, move in self._legal():
                if san_key(san) == key:
                    self.board.push(move)
                    return san
        raise IllegalMove(text, self.board.fen())

    def undo_last_move(self) -> None:
        if not self.board.move_stack:
            raise OracleFailure("undo requested with no move played")
        self.board.pop()

    def legal_moves(self) -> list[str]:
        return [san for san, _ in self._legal()]

    def is_game_over(self) -> bool:
        return self.board.is_game_over()

    def is_checkmate(self) -> bool:
        return self.board.is_checkmate()

    def is_draw(self) -> bool:
        b = self.board
        return (
            b.is_stalemate()
            or b.is_insufficient_material()
            or b.is_seventyfive_moves()
            or b.is_fivefold_repetition()
            or b.can_claim_draw()
        )

    def side_to_move(self) -> str:
        return "white" if self.board.turn == chess.WHITE else "black"

    def fen(self) -> str:
        return self.board.fen()

    def reset(self) -> None:
        self.board.set_fen(self.start_fen)
