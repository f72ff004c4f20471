import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Chunking defaults
DEFAULT_CHUNK_SIZE = 4000  # Characters per chunk
DEFAULT_OVERLAP_SIZE = 200  # Characters carried into the next chunk
DEFAULT_MAX_CONCURRENCY = 3  # Chunks in flight per batch
DEFAULT_PRESERVE_EQUATIONS = True
DEFAULT_ENABLE_MATH_DETECTION = True

# A break point must fall past this fraction of the chunk size
MIN_BREAK_RATIO = 0.7
BREAK_SEPARATORS = ("\n\n", "\n", ". ", "! ", "? ")

# Scheduling
BATCH_DELAY_SECONDS = 1.0

# Merging
MAX_QUIZ_QUESTIONS = 15

# Estimation
BASE_SECONDS_PER_CHUNK = 3
FEATURE_COMPLEXITY_MULTIPLIER = 1.5
SIZE_COMPLEXITY_MULTIPLIER = 1.3
LARGE_DOCUMENT_CHARACTERS = 10000
LARGE_DOCUMENT_CHUNKS = 5

# LLM backend configuration
LLM_MODEL = os.getenv("LLM_MODEL", "gemini-2.5-pro")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LLM_TEMPERATURE = 0.2
LLM_MAX_OUTPUT_TOKENS = 8192

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
