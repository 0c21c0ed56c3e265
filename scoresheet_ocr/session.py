"""The single authoritative position for one scoresheet being transcribed."""

import logging
from typing import Optional, Sequence, Union

from scoresheet_ocr.errors import IllegalMove
from scoresheet_ocr.oracle import ChessOracle, PythonChessOracle
from scoresheet_ocr.schema import ResolvedMove

log = logging.getLogger("scoresheet_ocr.session")


class GameSession:
    """
    Committed move history on top of a chess oracle.

    ``probe`` asks whether a move would be legal without leaving any trace;
    ``commit`` plays it for good and records the oracle's SAN for it. The
    oracle's position always equals the start position plus ``history`` in
    order.
    """

    def __init__(self, oracle: Optional[ChessOracle] = None, start_fen: Optional[str] = None):
        self.oracle = oracle or PythonChessOracle(start_fen)
        self._history: list[str] = []

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(self._history)

    @property
    def fen(self) -> str:
        return self.oracle.fen()

    @property
    def side_to_move(self) -> str:
        return self.oracle.side_to_move()

    def probe(self, token: str) -> bool:
        try:
            self.oracle.apply_move(token)
        except IllegalMove:
            return False
        # OracleFailure from the revert propagates
        self.oracle.undo_last_move()
        return True

    def legal_moves(self) -> list[str]:
        return self.oracle.legal_moves()

    def commit(self, token: str) -> bool:
        try:
            san = self.oracle.apply_move(token)
        except IllegalMove as exc:
            log.debug("Rejected commit: %s", exc)
            return False
        self._history.append(san)
        return True

    def undo_last(self) -> Optional[str]:
        """Take back the latest committed move; None when nothing was committed."""
        if not self._history:
            return None
        self.oracle.undo_last_move()
        return self._history.pop()

    def reset(self) -> None:
        self.oracle.reset()
        self._history.clear()

    def replay_through(
        self,
        moves: Sequence[Union[ResolvedMove, str]],
        upto_index: int,
    ) -> list[int]:
        """
        Rebuild the position from scratch with ``moves[0..upto_index]``.

        Entries without move text are skipped. Returns the indices the oracle
        refused, which stay out of the history.
        """
        if upto_index >= len(moves):
            raise IndexError(f"replay index {upto_index} out of range for {len(moves)} moves")

        self.reset()
        rejected: list[int] = []
        for i in range(upto_index + 1):
            entry = moves[i]
            text = entry.move if isinstance(entry, ResolvedMove) else entry
            if not text:
                continue
            if not self.commit(text):
                rejected.append(i)
        if rejected:
            log.info("Replay through ply %d skipped illegal plies %s", upto_index, rejected)
        return rejected

    # ── Game status ──

    def is_game_over(self) -> bool:
        return self.oracle.is_game_over()

    def is_checkmate(self) -> bool:
        return self.oracle.is_checkmate()

    def is_draw(self) -> bool:
        return self.oracle.is_draw()

    def result(self) -> str:
        if self.is_checkmate():
            return "0-1" if self.side_to_move == "white" else "1-0"
        if self.is_draw():
            return "1/2-1/2"
        return "*"

