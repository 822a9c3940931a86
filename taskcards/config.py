from pathlib import Path
import os

from dotenv import load_dotenv

# Load environment variables from the repo root .env (if present).
REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")

# Store connection; anything SQLAlchemy accepts.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskcards.db")

_cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
CORS_ORIGINS = [origin.strip() for origin in _cors_origins.split(",") if origin.strip()]

_assignees = os.getenv("TASK_ASSIGNEES", "Hina,Togawa")
ASSIGNEES = [name.strip() for name in _assignees.split(",") if name.strip()] or ["Hina"]
DEFAULT_ASSIGNEE = ASSIGNEES[0]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE", "")
