"""Exceptions raised while resolving recognized moves."""


class ScoresheetError(Exception):
    """Base class for errors raised by scoresheet_ocr."""


class IllegalMove(ScoresheetError):
    """The oracle rejected a move for the current position."""

    def __init__(self, move: str, fen: str | None = None):
        self.move = move
        self.fen = fen
        detail = f"illegal move {move!r}"
        if fen:
            detail += f" in {fen}"
        super().__init__(detail)


class NoLegalMoves(ScoresheetError):
    """Fuzzy matching was asked to pick from an empty move list."""


class OracleFailure(ScoresheetError):
    """The rules engine misbehaved; the session no longer mirrors its history."""
