from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

# --- Core Domain Models ---

class Tier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    FAILED = "failed"


class Source(str, Enum):
    DIRECT = "direct"
    CASTLING_FIX = "castling-fix"
    DISAMBIGUATION = "disambiguation"
    FUZZY_MATCH = "fuzzy-match"
    MANUAL_REQUIRED = "manual-required"


class RecognizedToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = Field("", description="Raw text returned by the recognizer.")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Recognizer confidence in [0, 1].")
    index: Optional[int] = Field(None, description="Cell ordinal on the sheet, or sequence ordinal in page text.")


class ResolvedMove(BaseModel):
    model_config = ConfigDict(frozen=True)

    original: str = Field(..., description="Text as it came from the recognizer.")
    move: str = Field("", description="Resolved SAN, or the cleaned token when unresolved.")
    confidence: Tier
    needs_review: bool
    source: Source
    suggestion: Optional[str] = None
    legal_moves: Optional[List[str]] = Field(None, description="Only set for manual-required entries.")
    index: Optional[int] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "ResolvedMove":
        if self.confidence is not Tier.HIGH and not self.needs_review:
            raise ValueError(f"{self.confidence.value} moves must be flagged for review")
        manual = self.source is Source.MANUAL_REQUIRED
        if manual != (self.legal_moves is not None):
            raise ValueError("legal_moves is set exactly for manual-required entries")
        return self


def side_for_ply(index: int) -> str:
    """Side that played ply ``index`` counted from the first move of the sheet."""
    return "white" if index % 2 == 0 else "black"


# --- Recognizer Output ---

class ChessMove(BaseModel):
    move_number: int = Field(..., description="The move number (e.g., 1, 2, ...)")
    white: str | None = Field(None, description="White's move exactly as written, or null if empty.")
    black: str | None = Field(None, description="Black's move exactly as written, or null if empty.")
    white_confidence: float = Field(1.0, ge=0.0, le=1.0, description="How legible White's cell is, 0 to 1.")
    black_confidence: float = Field(1.0, ge=0.0, le=1.0, description="How legible Black's cell is, 0 to 1.")


class Scoresheet(BaseModel):
    moves: list[ChessMove] = Field(..., description="List of all chess moves found on the scoresheet.")


# --- API Request/Response Models ---

class TranscribeRequest(BaseModel):
    tokens: List[RecognizedToken]
    start_fen: Optional[str] = None


class PageTextRequest(BaseModel):
    text: str
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    start_fen: Optional[str] = None


class CorrectionRequest(BaseModel):
    index: int = Field(..., ge=0)
    move: str


class ResolveFromRequest(BaseModel):
    index: int = Field(..., ge=0)


class ReviewResponse(BaseModel):
    moves: List[ResolvedMove]
    fen: str
    history: List[str]
    needs_review: int
    result: str
