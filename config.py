# config.py
# Role: Environment-aware configuration for the portfolio tracker.
#       Values are read once at import time; a local .env file is honoured.

import os

from dotenv import load_dotenv

load_dotenv()

# Base directory of the project (where this module lives)
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# Default SQLite file: <project_root>/database/portfolio.db
DEFAULT_DB_PATH = os.path.join(BASE_DIR, "database", "portfolio.db")

# Any SQLAlchemy URL works; SQLite is the local default
DATABASE_URL = os.environ.get(
    "PORTFOLIO_DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}"
).strip()

# error | warning | info | debug ("warn" accepted as an alias)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "info").strip().lower()

# Browser origins allowed to call the API (the local dev frontends)
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:3002",
    "http://localhost:3005",
]

_cors_env = os.environ.get("CORS_ORIGINS", "")
if _cors_env.strip():
    CORS_ORIGINS = [o.strip() for o in _cors_env.split(",") if o.strip()]
else:
    CORS_ORIGINS = list(DEFAULT_CORS_ORIGINS)

HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "5001"))
