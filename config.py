"""
Runtime configuration for the Cost Optimizer API.

Values come from the environment (a local .env file is honoured).
"""
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


# ---------- Database ----------

DATABASE_URL: str = os.getenv("DATABASE_URL", "")
DATABASE_NAME: str = os.getenv("DATABASE_NAME", "cost_optimizer")
EXPENSE_COLLECTION: str = os.getenv("EXPENSE_COLLECTION", "expense")
# Server selection timeout; bounds how long startup waits on an unreachable server
DATABASE_TIMEOUT_MS: int = int(os.getenv("DATABASE_TIMEOUT_MS", "5000"))

# ---------- Server ----------

PORT: int = int(os.getenv("PORT", "8000"))

_raw_origins = os.getenv("CORS_ORIGINS", "*")
CORS_ORIGINS: List[str] = [o.strip() for o in _raw_origins.split(",") if o.strip()] or ["*"]

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ---------- Analytics ----------

# Trailing window for the monthly trend, in calendar months
TREND_MONTHS: int = int(os.getenv("TREND_MONTHS", "6"))
