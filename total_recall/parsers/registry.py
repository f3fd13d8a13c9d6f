"""Session parser registry for supported log formats."""
from __future__ import annotations

from pathlib import Path

from total_recall import config
from total_recall.models import Session
from total_recall.parsers.sessions import parse_session_summary


def is_session_file(path: Path) -> bool:
    return path.suffix.lower() == config.SESSION_FILE_SUFFIX


def parse_session_file(path: Path) -> Session | None:
    """Parse a session file by delegating to the matching format parser.

    Only Claude Code ``.jsonl`` transcripts are recognised; anything else
    yields ``None``. ``OSError`` from the underlying parser propagates.
    """
    if is_session_file(path):
        return parse_session_summary(path)
    return None
