# quizwiz/core/config.py
import os
from typing import Dict

from dotenv import load_dotenv

load_dotenv()

DB_URL = os.getenv("DATABASE_URL", "sqlite:///./dev_quizwiz.db")

# Any OpenAI-compatible provider works (Groq by default)
LLM_API_KEY = (
    os.getenv("LLM_API_KEY")
    or os.getenv("GROQ_API_KEY")
    or os.getenv("OPENAI_API_KEY")
)
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.groq.com/openai/v1")
LLM_MODEL = os.getenv("LLM_MODEL", "llama-3.1-8b-instant")
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "3"))

# Upper bound for one rubric grading round trip, retries included
GRADING_TIMEOUT_SECONDS = float(os.getenv("GRADING_TIMEOUT_SECONDS", "8.0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Strategy used for english "text" answers, keyed by question type.
# A question's own evaluation_strategy always wins over this table.
ENGLISH_TEXT_POLICY: Dict[str, str] = {
    "fill_in_blank": "exact",
    "free_text": "partial_credit",
    "spelling": "spelling_strict",
}
DEFAULT_ENGLISH_TEXT_STRATEGY = "partial_credit"
