"""
S3 Prefix Purge - Configuration Module

Central configuration consumed by the CLI and the purge pipeline. Uses
environment variables for deployment-specific values with sensible defaults.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file with explicit path search so it works regardless of CWD
_ENV_FILE_LOADED = None
_ENV_SEARCH_PATHS = [
    Path(__file__).resolve().parent.parent / ".env",  # repo root
]

for _candidate in _ENV_SEARCH_PATHS:
    if _candidate.is_file():
        load_dotenv(_candidate)
        _ENV_FILE_LOADED = str(_candidate)
        break
else:
    load_dotenv()  # fallback to dotenv default CWD search

# S3 Configuration (AWS or any S3-compatible endpoint)
S3 = {
    "ENDPOINT": os.getenv("S3_ENDPOINT"),            # None means AWS
    "REGION": os.getenv("S3_REGION", "eu-west-1"),
    "BUCKET": os.getenv("S3_BUCKET", ""),
    "MAX_DELETE_BATCH": 1000,                        # DeleteObjects limit per request
    "MAX_ATTEMPTS": int(os.getenv("S3_MAX_ATTEMPTS", "5")),
}

# Purge settings
PURGE = {
    "BATCH_SIZE": int(os.getenv("PURGE_BATCH_SIZE", "1000")),
    "MAX_WORKERS": int(os.getenv("PURGE_MAX_WORKERS", "16")),  # In-flight delete requests
}

# Logging settings
LOGGING = {
    "DIR": Path(os.environ["LOG_DIR"]) if os.getenv("LOG_DIR") else None,
    "LEVEL": os.getenv("LOG_LEVEL", "INFO").upper(),
    "FORMAT": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    "DATE_FORMAT": "%Y-%m-%d %H:%M:%S",
}
