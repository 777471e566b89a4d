# config.py
import os
from pathlib import Path

# ---------- Project Paths ----------
BASE_DIR = Path(__file__).resolve().parent
LOG_DIR = BASE_DIR / "logs"
LOG_FILE = LOG_DIR / "app.log"

AI_CACHE_FILE = BASE_DIR / "resume_ai_cache.json"

# ---------- MongoDB ----------
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "resume_screener_db")

CANDIDATE_COLLECTION = "candidates"

# ---------- AI Analysis ----------
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip("'\"")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")

AZURE_OPENAI_API_KEY = os.getenv("AZURE_OPENAI_API_KEY", "")
AZURE_OPENAI_ENDPOINT = os.getenv("AZURE_OPENAI_ENDPOINT", "")
AZURE_OPENAI_DEPLOYMENT = os.getenv("AZURE_OPENAI_DEPLOYMENT", OPENAI_MODEL)
AZURE_OPENAI_API_VERSION = os.getenv("AZURE_OPENAI_API_VERSION", "2024-02-01")

USE_AI = os.getenv("USE_AI", "1").lower() in ("1", "true", "yes")

AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "5"))
AI_PROMPT_CHARS = 3000
AI_MIN_TEXT_LENGTH = 50  # shorter texts go straight to the heuristics

# ---------- Processing ----------
MIN_TEXT_LENGTH = 10
EARLIEST_YEAR = 1950  # years before this, or after next year, are not dates
WORKER_COUNT = 3
SKILL_DISPLAY_LIMIT = 8

SUPPORTED_EXTENSIONS = {".pdf", ".docx", ".txt", ".png", ".jpg", ".jpeg"}
