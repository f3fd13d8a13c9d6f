"""total-recall configuration."""
import os
from pathlib import Path


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def expand_path(path: str) -> Path:
    """Expand a leading ``~`` to the user's home directory."""
    return Path(path).expanduser()


def projects_dir_for(claude_dir: str | Path) -> Path:
    """Return the per-project session root inside a Claude directory."""
    return expand_path(str(claude_dir)) / "projects"


# Claude data locations
CLAUDE_DIR = expand_path(os.getenv("TOTAL_RECALL_CLAUDE_DIR", "~/.claude"))
CLAUDE_PROJECTS_DIR = projects_dir_for(CLAUDE_DIR)

# Session summaries
SESSION_FILE_SUFFIX = ".jsonl"
PREVIEW_MAX_CHARS = _env_int("TOTAL_RECALL_PREVIEW_MAX_CHARS", 200)

# Scan cadence (0 disables periodic rescans)
STARTUP_SCAN_DELAY_SECONDS = _env_int("TOTAL_RECALL_STARTUP_SCAN_DELAY_SECONDS", 0)
RESCAN_INTERVAL_SECONDS = _env_int("TOTAL_RECALL_RESCAN_INTERVAL_SECONDS", 0)

# Observability
OTEL_ENABLED = _env_bool("TOTAL_RECALL_OTEL_ENABLED", False)
OTEL_ENDPOINT = os.getenv("TOTAL_RECALL_OTEL_ENDPOINT", "http://localhost:4318")
OTEL_SERVICE_NAME = os.getenv("TOTAL_RECALL_OTEL_SERVICE_NAME", "total-recall")
PROM_PORT = _env_int("TOTAL_RECALL_PROM_PORT", 9464)

# Server settings
HOST = os.getenv("TOTAL_RECALL_HOST", "127.0.0.1")
PORT = _env_int("TOTAL_RECALL_PORT", 8000)

# CORS
FRONTEND_ORIGIN = os.getenv("TOTAL_RECALL_FRONTEND_ORIGIN", "http://localhost:3000")
