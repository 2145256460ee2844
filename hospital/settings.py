from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# SQLite file in the project root unless overridden
DB_PATH = Path(__file__).resolve().parents[1] / "hospital.sqlite"
DATABASE_URL = os.getenv("HOSPITAL_DATABASE_URL", f"sqlite:///{DB_PATH}")


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


DB_ECHO = _flag("HOSPITAL_DB_ECHO")
LOG_LEVEL = os.getenv("HOSPITAL_LOG_LEVEL", "INFO").upper()
SEED_ON_STARTUP = _flag("HOSPITAL_SEED_ON_STARTUP")

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
