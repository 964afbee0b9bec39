import os

from dotenv import load_dotenv
from openai import OpenAI

from config import require_env

load_dotenv()

API_KEY = require_env("OPENROUTER_API_KEY")
DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "google/gemini-2.5-flash")

MAX_OUTPUT_TOKENS = int(os.getenv("MAX_OUTPUT_TOKENS", "8192"))
MAX_RATE_LIMIT_RETRIES = 3
RETRY_BACKOFF_SECONDS = 2.0
MAX_EXTRACTION_RETRIES = 1
DOCUMENT_FETCH_TIMEOUT_SECONDS = 60

client = OpenAI(base_url="https://openrouter.ai/api/v1", api_key=API_KEY)
