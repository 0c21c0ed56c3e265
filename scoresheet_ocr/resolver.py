"""
Move resolution
===============
Turns one recognized token into a classified ResolvedMove by trying, in
order and stopping at the first success:

  1. direct          the cleaned text is already legal
  2. castling-fix    O/0 and dash variants of castling
  3. disambiguation  readings from the confusion table
  4. fuzzy-match     nearest legal move within a small edit distance
  5. manual          nothing fit; hand the legal move list to the reviewer

Resolution only probes the session. Committing accepted moves is up to the
caller (see ``review.ReviewSession``).
"""

import logging
import re
from typing import Optional

from scoresheet_ocr import config
from scoresheet_ocr.confusion import generate_candidates
from scoresheet_ocr.errors import NoLegalMoves
from scoresheet_ocr.fuzzy import closest_match
from scoresheet_ocr.normalizer import clean_token
from scoresheet_ocr.schema import RecognizedToken, ResolvedMove, Source, Tier
from scoresheet_ocr.session import GameSession

log = logging.getLogger("scoresheet_ocr.resolver")

_DASHES = "-−–—"
CASTLING_RE = re.compile(rf"^[O0][{_DASHES}][O0](?:[{_DASHES}][O0])?[+#]?$")
_DASH_TRANS = str.maketrans({d: "-" for d in _DASHES})


def castling_variants(token: str) -> tuple[str, ...]:
    """Both canonical castling spellings for a loosely written castle, else ()."""
    if not CASTLING_RE.match(token):
        return ()
    dashed = token.translate(_DASH_TRANS)
    return (dashed.replace("0", "O"), dashed.replace("O", "0"))


# ── Strategies ───────────────────────────────────────────────────────────────

def _try_direct(cleaned: str, token: RecognizedToken, session: GameSession) -> Optional[ResolvedMove]:
    if not session.probe(cleaned):
        return None
    confident = token.confidence > config.HIGH_CONFIDENCE_THRESHOLD
    return ResolvedMove(
        original=token.text,
        move=cleaned,
        confidence=Tier.HIGH if confident else Tier.MEDIUM,
        needs_review=not confident,
        source=Source.DIRECT,
        index=token.index,
    )


def _try_castling(cleaned: str, token: RecognizedToken, session: GameSession) -> Optional[ResolvedMove]:
    for variant in castling_variants(cleaned):
        if session.probe(variant):
            return _medium(token, variant, Source.CASTLING_FIX)
    return None


def _try_confusions(cleaned: str, token: RecognizedToken, session: GameSession) -> Optional[ResolvedMove]:
    for candidate in generate_candidates(cleaned):
        if session.probe(candidate):
            return _medium(token, candidate, Source.DISAMBIGUATION)
    return None


def _try_fuzzy(
    cleaned: str,
    token: RecognizedToken,
    legal_moves: list[str],
) -> Optional[ResolvedMove]:
    try:
        match = closest_match(cleaned, legal_moves)
    except NoLegalMoves:
        return None
    if match.distance > config.FUZZY_MAX_DISTANCE:
        return None
    return ResolvedMove(
        original=token.text,
        move=match.move,
        confidence=Tier.LOW,
        needs_review=True,
        source=Source.FUZZY_MATCH,
        suggestion=match.move,
        index=token.index,
    )


def _manual(cleaned: str, token: RecognizedToken, legal_moves: list[str]) -> ResolvedMove:
    return ResolvedMove(
        original=token.text,
        move=cleaned,
        confidence=Tier.FAILED,
        needs_review=True,
        source=Source.MANUAL_REQUIRED,
        legal_moves=legal_moves,
        index=token.index,
    )


def _medium(token: RecognizedToken, move: str, source: Source) -> ResolvedMove:
    return ResolvedMove(
        original=token.text,
        move=move,
        confidence=Tier.MEDIUM,
        needs_review=True,
        source=source,
        index=token.index,
    )


# ── Entry points ─────────────────────────────────────────────────────────────

def resolve(token: RecognizedToken, session: GameSession) -> ResolvedMove:
    """Classify ``token`` against the session's current committed position."""
    cleaned = clean_token(token.text)

    if not cleaned:
        log.debug("Blank token at %s", token.index)
        return _manual(cleaned, token, session.legal_moves())

    result = (
        _try_direct(cleaned, token, session)
        or _try_castling(cleaned, token, session)
        or _try_confusions(cleaned, token, session)
    )
    if result is None:
        legal_moves = session.legal_moves()
        result = _try_fuzzy(cleaned, token, legal_moves) or _manual(cleaned, token, legal_moves)

    log.debug("Resolved %r -> %r via %s (%s)", token.text, result.move, result.source.value, result.confidence.value)
    return result


def blocked(token: RecognizedToken) -> ResolvedMove:
    """
    Manual entry for a ply whose position is unknown because an earlier ply
    was never played. No legal moves are offered for it.
    """
    log.debug("Ply %s blocked behind an unresolved ply", token.index)
    return _manual(clean_token(token.text), token, [])


def resolve_text(
    text: str,
    confidence: float,
    session: GameSession,
    index: Optional[int] = None,
) -> ResolvedMove:
    return resolve(RecognizedToken(text=text, confidence=confidence, index=index), session)
