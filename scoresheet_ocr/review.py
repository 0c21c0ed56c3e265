"""Reviewer context: one scoresheet's resolved moves plus the game that backs them."""

import logging
from typing import Iterable, Optional

from scoresheet_ocr.normalizer import clean_token
from scoresheet_ocr.oracle import ChessOracle
from scoresheet_ocr.resolver import blocked, resolve
from scoresheet_ocr.schema import RecognizedToken, ResolvedMove, Source, Tier
from scoresheet_ocr.session import GameSession

log = logging.getLogger("scoresheet_ocr.review")


class ReviewSession:
    """
    Holds the ResolvedMove list for a single document and the GameSession
    it was resolved against.

    Ply ``i`` is only resolved while plies ``0..i-1`` are all on the board.
    Once a ply stays unplayed, every later ply is ``manual-required`` with
    no legal moves until a correction and ``resolve_from`` repair the game.

    Corrections rebuild the position only up to the corrected ply; later
    plies keep their earlier classification until ``resolve_from`` is
    called for them.
    """

    def __init__(self, start_fen: Optional[str] = None, oracle: Optional[ChessOracle] = None):
        self.start_fen = start_fen
        self.game = GameSession(oracle=oracle, start_fen=start_fen)
        self.moves: list[ResolvedMove] = []
        self._tokens: list[RecognizedToken] = []
        self._corrected: set[int] = set()

    @property
    def next_ply(self) -> int:
        """Index of the ply the live position is waiting for."""
        return len(self.game.history)

    def transcribe(self, tokens: Iterable[RecognizedToken]) -> list[ResolvedMove]:
        """Resolve a full pass from the start position, committing each resolved ply."""
        self.game.reset()
        self._tokens = list(tokens)
        self._corrected.clear()
        self.moves = [self._resolve_ply(i, tok) for i, tok in enumerate(self._tokens)]
        failed = sum(1 for m in self.moves if m.confidence is Tier.FAILED)
        log.info("Transcribed %d plies, %d need manual correction", len(self.moves), failed)
        return self.moves

    def _resolve_ply(self, index: int, token: RecognizedToken) -> ResolvedMove:
        if self.next_ply != index:
            return blocked(token)
        resolved = resolve(token, self.game)
        if resolved.source is not Source.MANUAL_REQUIRED:
            self.game.commit(resolved.move)
        return resolved

    def correct(self, index: int, text: str) -> ResolvedMove:
        """
        Replace ply ``index`` with reviewer text and replay the game through it.
        Plies after ``index`` are left as they are.
        """
        self._check_index(index)
        corrected = self.moves[index].model_copy(update={
            "move": clean_token(text),
            "confidence": Tier.HIGH,
            "needs_review": False,
        })
        self.moves[index] = corrected
        self._corrected.add(index)
        rejected = self.game.replay_through(self.moves, index)
        if index in rejected:
            log.warning("Correction %r at ply %d is illegal in the replayed position", text, index)
        return corrected

    def resolve_from(self, index: int) -> list[ResolvedMove]:
        """
        Re-resolve plies ``index..end`` from their recognized text.
        Reviewer corrections in that range are kept and replayed as written.
        """
        self._check_index(index)
        if index == 0:
            self.game.reset()
        else:
            self.game.replay_through(self.moves, index - 1)
        for i in range(index, len(self.moves)):
            if i not in self._corrected:
                self.moves[i] = self._resolve_ply(i, self._tokens[i])
            elif self.next_ply == i:
                self.game.commit(self.moves[i].move)
        if self.next_ply < len(self.moves):
            log.info("Game stops at ply %d, later plies need correction first", self.next_ply)
        return self.moves[index:]

    def legal_moves_at(self, index: int) -> list[str]:
        """
        Legal moves before ply ``index``, without touching the live position.
        Empty when an earlier ply could not be played.
        """
        if index < 0 or index > len(self.moves):
            raise IndexError(f"ply {index} out of range for {len(self.moves)} moves")
        scratch = GameSession(start_fen=self.start_fen)
        if index > 0:
            scratch.replay_through(self.moves, index - 1)
        if len(scratch.history) != index:
            return []
        return scratch.legal_moves()

    def discard(self) -> None:
        self.game.reset()
        self.moves = []
        self._tokens = []
        self._corrected.clear()

    @property
    def pending_review(self) -> int:
        return sum(1 for m in self.moves if m.needs_review)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self.moves):
            raise IndexError(f"ply {index} out of range for {len(self.moves)} moves")
