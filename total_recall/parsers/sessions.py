"""Summarise a single Claude Code JSONL session log into a Session model."""
from __future__ import annotations

import logging
import os
import unicodedata
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from total_recall import config
from total_recall.models import Session
from total_recall.parsers.entries import LogEntry
from total_recall.path_codec import decode_project_path

logger = logging.getLogger("total_recall.parsers")

ELLIPSIS = "..."


def sanitize_preview(text: str, max_chars: int | None = None) -> str:
    """Replace control characters with spaces, trim, and cap the length."""
    limit = config.PREVIEW_MAX_CHARS if max_chars is None else max_chars
    cleaned = "".join(" " if unicodedata.category(ch) == "Cc" else ch for ch in text).strip()
    if len(cleaned) > limit:
        return cleaned[:limit] + ELLIPSIS
    return cleaned


def _parse_line(raw: bytes) -> Optional[LogEntry]:
    try:
        return LogEntry.model_validate_json(raw)
    except (ValidationError, UnicodeDecodeError):
        return None


class _SummaryBuilder:
    """Accumulates first-match-wins fields across the entries of one file."""

    def __init__(self) -> None:
        self.project_path = ""
        self.slug: Optional[str] = None
        self.git_branch: Optional[str] = None
        self.agent_id: Optional[str] = None
        self.first_message: Optional[datetime] = None
        self.last_message: Optional[datetime] = None
        self.message_count = 0
        self.preview_text = ""
        self.is_agent = False

    def add(self, entry: LogEntry) -> None:
        self.message_count += 1

        if not self.project_path and entry.cwd:
            self.project_path = entry.cwd
        if self.slug is None and entry.slug:
            self.slug = entry.slug
        if self.git_branch is None and entry.gitBranch:
            self.git_branch = entry.gitBranch
        if self.agent_id is None and entry.agentId:
            self.agent_id = entry.agentId

        if entry.isSidechain:
            self.is_agent = True

        # Arrival order, not chronological order.
        if self.first_message is None:
            self.first_message = entry.timestamp
        self.last_message = entry.timestamp

        if not self.preview_text and entry.is_user_authored() and entry.message is not None:
            self.preview_text = sanitize_preview(entry.message.text())


def parse_session_summary(path: Path) -> Session | None:
    """Parse one session log.

    Returns ``None`` when no line in the file validates. Errors opening or
    reading the file propagate as ``OSError`` so callers can skip the file.
    """
    builder = _SummaryBuilder()
    with path.open("rb") as handle:
        file_size = os.fstat(handle.fileno()).st_size
        for raw in handle:
            if not raw.strip():
                continue
            entry = _parse_line(raw)
            if entry is None:
                continue
            builder.add(entry)

    if builder.first_message is None:
        logger.debug("No valid entries in %s", path)
        return None

    project_path = builder.project_path or decode_project_path(path.parent.name)

    return Session(
        id=path.stem,
        projectPath=project_path,
        slug=builder.slug,
        gitBranch=builder.git_branch,
        agentId=builder.agent_id,
        firstMessage=builder.first_message,
        lastMessage=builder.last_message or builder.first_message,
        messageCount=builder.message_count,
        previewText=builder.preview_text,
        isAgent=builder.is_agent,
        filePath=str(path),
        fileSize=file_size,
    )
