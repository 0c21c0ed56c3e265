"""Scoresheet OCR: turns recognized handwriting into legal chess moves."""

from scoresheet_ocr.schema import RecognizedToken, ResolvedMove, Source, Tier
from scoresheet_ocr.session import GameSession
from scoresheet_ocr.resolver import resolve, resolve_text
from scoresheet_ocr.review import ReviewSession

__all__ = [
    "RecognizedToken",
    "ResolvedMove",
    "Source",
    "Tier",
    "GameSession",
    "resolve",
    "resolve_text",
    "ReviewSession",
]
