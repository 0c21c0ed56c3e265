
import logging
import os
from dotenv import load_dotenv

load_dotenv(override=True)

log = logging.getLogger("scoresheet_ocr")

# Recognizer Config
MODEL_NAME = os.getenv("SCORESHEET_MODEL", "meta-llama/llama-4-scout-17b-16e-instruct")
SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff"}
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

# Tracing
LANGCHAIN_TRACING_V2 = os.getenv("LANGCHAIN_TRACING_V2", "false").lower() == "true"
LANGCHAIN_PROJECT = os.getenv("LANGCHAIN_PROJECT", "ChessSheetOCR")

# Resolution
HIGH_CONFIDENCE_THRESHOLD = float(os.getenv("SCORESHEET_HIGH_CONFIDENCE", "0.9"))
FUZZY_MAX_DISTANCE = int(os.getenv("SCORESHEET_FUZZY_MAX_DISTANCE", "2"))
# Whole-page recognition only reports one aggregate score
DEFAULT_PAGE_CONFIDENCE = float(os.getenv("SCORESHEET_PAGE_CONFIDENCE", "0.5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"

if not GROQ_API_KEY:
    log.warning("GROQ_API_KEY is not set; image recognition will be unavailable.")
