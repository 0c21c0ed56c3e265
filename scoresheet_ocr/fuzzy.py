"""Edit-distance matching of a token against the legal move list."""

from typing import NamedTuple, Sequence

from rapidfuzz.distance import Levenshtein

from scoresheet_ocr.errors import NoLegalMoves


class FuzzyMatch(NamedTuple):
    move: str
    distance: int


def levenshtein(a: str, b: str) -> int:
    """Insertions, deletions and substitutions all cost 1."""
    return Levenshtein.distance(a, b)


def closest_match(token: str, candidates: Sequence[str]) -> FuzzyMatch:
    """
    Closest candidate to ``token`` ignoring case.
    Ties go to the earliest candidate. Raises NoLegalMoves when there is
    nothing to compare against.
    """
    if not candidates:
        raise NoLegalMoves(f"no candidates to match {token!r} against")

    needle = token.lower()
    best = None
    for candidate in candidates:
        distance = levenshtein(needle, candidate.lower())
        if best is None or distance < best.distance:
            best = FuzzyMatch(candidate, distance)
            if distance == 0:
                break
    return best
