"""
Chess Scoresheet OCR → resolved moves
=====================================
Resolves recognized scoresheet text into legal chess moves and prints a
review report. Input can be a scoresheet image (recognized by the vision
model), a text file holding whole-page recognizer output, or moves given
directly on the command line.

Usage:
    python -m scoresheet_ocr.main --image scoresheet.jpg
    python -m scoresheet_ocr.main --text page.txt --confidence 0.7
    python -m scoresheet_ocr.main --tokens e4 e5 Nf3 8c5
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from scoresheet_ocr import config
from scoresheet_ocr.normalizer import tokens_from_page
from scoresheet_ocr.review import ReviewSession
from scoresheet_ocr.schema import RecognizedToken, ResolvedMove, Tier, side_for_ply

_MARKS = {
    Tier.HIGH: "✓",
    Tier.MEDIUM: "~",
    Tier.LOW: "?",
    Tier.FAILED: "✗",
}


def print_report(moves: list[ResolvedMove]) -> None:
    """Print a human-readable resolution report to stdout."""
    flagged: list[str] = []

    for i, m in enumerate(moves):
        label = f"{i // 2 + 1}. {side_for_ply(i)}"
        line = f"  {_MARKS[m.confidence]} {label}: {m.move or '<blank>'}"
        if m.original != m.move:
            line += f"  (read {m.original!r}, {m.source.value})"
        print(line)
        if m.needs_review:
            flagged.append(line)
        if m.legal_moves is not None:
            print(f"      legal: {' '.join(m.legal_moves[:10])}{' ...' if len(m.legal_moves) > 10 else ''}")

    by_tier = {tier: sum(1 for m in moves if m.confidence is tier) for tier in Tier}
    print(f"\n── Summary ──")
    print(f"  Plies resolved:   {len(moves)}")
    for tier in Tier:
        print(f"  {tier.value:<16}  {by_tier[tier]}")

    if flagged:
        print(f"\n── Needs Review ──")
        for line in flagged:
            print(line)


def _load_tokens(args) -> list[RecognizedToken]:
    if args.image:
        image_path = Path(args.image)
        if not image_path.exists():
            print(f"[ERROR] Image not found: {image_path}")
            sys.exit(1)
        if image_path.suffix.lower() not in config.SUPPORTED_EXTENSIONS:
            print(f"[ERROR] Unsupported image format: {image_path.suffix}")
            print(f"        Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}")
            sys.exit(1)
        from scoresheet_ocr import recognizer
        return recognizer.extract_tokens(str(image_path))

    confidence = args.confidence
    if confidence is None:
        confidence = config.DEFAULT_PAGE_CONFIDENCE

    if args.text:
        text_path = Path(args.text)
        if not text_path.exists():
            print(f"[ERROR] Text file not found: {text_path}")
            sys.exit(1)
        return tokens_from_page(text_path.read_text(encoding="utf-8"), confidence)

    return [RecognizedToken(text=t, confidence=confidence, index=i) for i, t in enumerate(args.tokens)]


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Chess Scoresheet OCR → resolved moves",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  python -m scoresheet_ocr.main --image scoresheet.jpg
  python -m scoresheet_ocr.main --text page.txt --confidence 0.7
  python -m scoresheet_ocr.main --tokens e4 e5 Nf3 8c5 --json
        """,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--image", "-i", help="Path to the chess scoresheet image")
    source.add_argument("--text", "-t", help="Path to whole-page recognizer text")
    source.add_argument("--tokens", nargs="+", help="Recognized moves, one per ply")
    parser.add_argument(
        "--confidence", "-c",
        type=float,
        default=None,
        help=f"Confidence for --text/--tokens input (default: {config.DEFAULT_PAGE_CONFIDENCE})",
    )
    parser.add_argument("--fen", default=None, help="Starting position (default: standard start)")
    parser.add_argument("--json", action="store_true", help="Print resolved moves as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every resolution step")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format=config.LOG_FORMAT,
    )

    tokens = _load_tokens(args)
    review = ReviewSession(args.fen)
    moves = review.transcribe(tokens)

    if args.json:
        print(json.dumps([m.model_dump(mode="json") for m in moves], indent=2))
        return

    print("=" * 60)
    print("  Chess Scoresheet OCR → resolved moves")
    print("=" * 60)
    print_report(moves)
    print(f"\n[✓] Final position: {review.game.fen}")
    print(f"    Result: {review.game.result()}")


if __name__ == "__main__":
    main()
