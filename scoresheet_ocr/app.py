import logging
import os
import shutil
from pathlib import Path

import uvicorn
from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from scoresheet_ocr import config, recognizer
from scoresheet_ocr.errors import OracleFailure
from scoresheet_ocr.normalizer import tokens_from_page
from scoresheet_ocr.review import ReviewSession
from scoresheet_ocr.schema import (
    CorrectionRequest,
    PageTextRequest,
    ResolveFromRequest,
    ReviewResponse,
    TranscribeRequest,
)

log = logging.getLogger("scoresheet_ocr.app")

# Initialize FastAPI
app = FastAPI(
    title="Scoresheet OCR API",
    description="Resolves recognized scoresheet moves into legal chess moves for review.",
    version="1.0.0",
)

# ── Middleware ───────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One document under review at a time
REVIEW = ReviewSession()


def _start_review(start_fen: str | None) -> ReviewSession:
    global REVIEW
    try:
        REVIEW = ReviewSession(start_fen)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid start position: {e}")
    return REVIEW


def _snapshot(review: ReviewSession) -> dict:
    return ReviewResponse(
        moves=review.moves,
        fen=review.game.fen,
        history=list(review.game.history),
        needs_review=review.pending_review,
        result=review.game.result(),
    ).model_dump(mode="json")


def _run(review: ReviewSession, action):
    """Apply ``action`` to the review, mapping engine errors onto HTTP errors."""
    try:
        action()
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OracleFailure as e:
        log.exception("Rules engine failure, discarding review session")
        review.discard()
        raise HTTPException(status_code=500, detail=str(e))
    return _snapshot(review)


@app.get("/")
def read_root():
    return {"message": "Scoresheet OCR API is running. See /docs"}


# ── API Endpoints ────────────────────────────────────────────────────────────

@app.get("/health")
def health_check():
    """Health check endpoint to verify service status."""
    return {
        "status": "healthy",
        "model": config.MODEL_NAME,
        "recognizer_available": bool(config.GROQ_API_KEY),
    }


@app.post("/api/upload")
async def upload_image(file: UploadFile = File(...)):
    """
    1. Upload Image
    2. Recognize cells (LLM)
    3. Resolve and return the reviewed moves
    """
    suffix = Path(file.filename or "").suffix.lower()
    if suffix not in config.SUPPORTED_EXTENSIONS:
        raise HTTPException(status_code=415, detail=f"Unsupported image format: {suffix or 'none'}")

    temp_dir = Path("temp_uploads")
    temp_dir.mkdir(exist_ok=True)
    file_path = temp_dir / Path(file.filename).name

    try:
        with open(file_path, "wb") as buffer:
            shutil.copyfileobj(file.file, buffer)

        log.info("Processing image: %s", file_path)
        tokens = recognizer.extract_tokens(str(file_path))
    except recognizer.RecognitionError as e:
        raise HTTPException(status_code=502, detail=str(e))
    finally:
        if file_path.exists():
            os.remove(file_path)

    review = _start_review(None)
    return _run(review, lambda: review.transcribe(tokens))


@app.post("/api/transcribe", response_model=ReviewResponse)
def transcribe(request: TranscribeRequest):
    """Resolve per-cell recognizer output for a new document."""
    review = _start_review(request.start_fen)
    return _run(review, lambda: review.transcribe(request.tokens))


@app.post("/api/transcribe-text", response_model=ReviewResponse)
def transcribe_text(request: PageTextRequest):
    """Resolve moves pulled out of whole-page recognizer text."""
    confidence = request.confidence
    if confidence is None:
        confidence = config.DEFAULT_PAGE_CONFIDENCE
    review = _start_review(request.start_fen)
    tokens = tokens_from_page(request.text, confidence)
    return _run(review, lambda: review.transcribe(tokens))


@app.post("/api/correct", response_model=ReviewResponse)
def correct_move(request: CorrectionRequest):
    """Apply a reviewer correction and replay the game through that ply."""
    return _run(REVIEW, lambda: REVIEW.correct(request.index, request.move))


@app.post("/api/resolve-from", response_model=ReviewResponse)
def resolve_from(request: ResolveFromRequest):
    """Re-resolve every ply from ``index`` on against the current game."""
    return _run(REVIEW, lambda: REVIEW.resolve_from(request.index))


@app.get("/api/legal-moves")
def legal_moves(index: int | None = None):
    """Legal moves before ply ``index`` (default: the live position)."""
    if index is None:
        return {"index": REVIEW.next_ply, "legal_moves": REVIEW.game.legal_moves()}
    try:
        moves = REVIEW.legal_moves_at(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"index": index, "legal_moves": moves}


@app.post("/api/reset", response_model=ReviewResponse)
def reset():
    """Discard the whole pass and return to the start position."""
    return _run(REVIEW, REVIEW.discard)


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    port = int(os.getenv("PORT", 8000))
    log.info("Starting Scoresheet OCR API on port %d...", port)
    uvicorn.run("scoresheet_ocr.app:app", host="0.0.0.0", port=port, reload=True)
