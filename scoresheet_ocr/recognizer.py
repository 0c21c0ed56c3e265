"""
Scoresheet recognition through a Groq-hosted vision model.

This is the upstream producer for the resolver: one image in, one
RecognizedToken per ply out. No correction happens here.
"""

import base64
import logging
from pathlib import Path

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_groq import ChatGroq
from langsmith import traceable

from scoresheet_ocr import config, prompts
from scoresheet_ocr.schema import ChessMove, RecognizedToken, Scoresheet

log = logging.getLogger("scoresheet_ocr.recognizer")

_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tiff": "image/tiff",
}


class RecognitionError(RuntimeError):
    """The vision model call failed or returned nothing usable."""


def encode_image(image_path: str) -> str:
    with open(image_path, "rb") as f:
        return base64.b64encode(f.read()).decode("utf-8")


def get_image_media_type(image_path: str) -> str:
    return _MIME_TYPES.get(Path(image_path).suffix.lower(), "image/jpeg")


def create_llm() -> ChatGroq:
    """Instantiate the Groq vision LLM using config settings."""
    return ChatGroq(model_name=config.MODEL_NAME, temperature=0)


def rows_to_tokens(rows: list[ChessMove]) -> list[RecognizedToken]:
    """
    Flatten scoresheet rows into plies, White then Black.

    Blank cells inside the game become empty tokens so ply parity survives;
    a blank Black cell on the final row is the end of the game and is dropped.
    """
    tokens: list[RecognizedToken] = []
    ordered = sorted(rows, key=lambda r: r.move_number)
    for n, row in enumerate(ordered):
        cells = [(row.white, row.white_confidence), (row.black, row.black_confidence)]
        if n == len(ordered) - 1 and not row.black:
            cells = cells[:1]
        for text, confidence in cells:
            tokens.append(RecognizedToken(
                text=text or "",
                confidence=confidence if text else 0.0,
                index=len(tokens),
            ))
    return tokens


@traceable
def extract_tokens(image_path: str) -> list[RecognizedToken]:
    """Send the scoresheet image to the LLM once and return one token per ply."""
    image_b64 = encode_image(image_path)
    media_type = get_image_media_type(image_path)

    llm = create_llm().with_structured_output(Scoresheet).with_config({"run_name": "extract_tokens"})

    messages = [
        SystemMessage(content=prompts.SYSTEM_PROMPT),
        HumanMessage(
            content=[
                {"type": "text", "text": prompts.USER_PROMPT},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{media_type};base64,{image_b64}"},
                },
            ]
        ),
    ]

    try:
        result: Scoresheet = llm.invoke(messages)
    except Exception as e:
        log.error("LLM extraction failed: %s", e)
        raise RecognitionError(str(e)) from e

    if result is None:
        raise RecognitionError("model returned no scoresheet")

    tokens = rows_to_tokens(result.moves)
    log.info("Recognized %d rows, %d plies from %s", len(result.moves), len(tokens), image_path)
    return tokens
