"""
Process configuration, read once from the environment (and ``.env``).

The upstream base URL is a deployment setting; tool callers cannot change it.
"""

import os

from dotenv import load_dotenv

load_dotenv()

CHANNEL3_BASE_URL = os.environ.get(
    "CHANNEL3_BASE_URL", "https://api.trychannel3.com/v0"
).rstrip("/")

SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.environ.get("SERVER_PORT", "8000"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

DEFAULT_SEARCH_LIMIT = 20
