import os

from dotenv import load_dotenv

load_dotenv()

OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY") or os.getenv("OPENAI_API_KEY", "")
OPENROUTER_BASE_URL = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")

HTTP_TIMEOUT = float(os.getenv("THESISGEN_HTTP_TIMEOUT", "120"))
LOG_LEVEL = os.getenv("THESISGEN_LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("THESISGEN_PORT", "8001"))

MIN_CHAPTERS = 1
MAX_CHAPTERS = 6
