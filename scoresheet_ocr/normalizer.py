"""Cleaning raw recognizer text into move-shaped tokens."""

import re

from scoresheet_ocr.schema import RecognizedToken

_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_PUNCT = ".,;"

MOVE_NUMBER_RE = re.compile(r"(?:(?<=\s)|^)\d+\.+")
MOVE_TOKEN_RE = re.compile(
    r"^(?:[KQRBN]?[a-h]?[1-8]?x?[a-h][1-8](?:=[QRBN])?[+#]?"
    r"|[O0]-[O0](?:-[O0])?[+#]?)$"
)


def clean_token(raw: str | None) -> str:
    """
    Canonicalize one recognized cell.
    Whitespace is removed entirely (``"N f3"`` -> ``"Nf3"``) and a single
    trailing ``.``, ``,`` or ``;`` is dropped.
    """
    if not raw:
        return ""
    text = _WHITESPACE_RE.sub("", raw.strip())
    if text and text[-1] in _TRAILING_PUNCT:
        text = text[:-1]
    return text


def extract_move_tokens(text: str) -> list[str]:
    """Pull move-shaped tokens out of whole-page text, in reading order."""
    if not text:
        return []
    stripped = MOVE_NUMBER_RE.sub(" ", text)
    cleaned = (clean_token(tok) for tok in stripped.split())
    return [tok for tok in cleaned if MOVE_TOKEN_RE.match(tok)]


def tokens_from_page(text: str, confidence: float) -> list[RecognizedToken]:
    """Wrap page-level moves as tokens sharing the page's aggregate confidence."""
    return [
        RecognizedToken(text=tok, confidence=confidence, index=i)
        for i, tok in enumerate(extract_move_tokens(text))
    ]
