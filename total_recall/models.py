"""Pydantic models for discovered projects and session summaries."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict

from total_recall.date_utils import MIN_TIMESTAMP, format_duration
from total_recall.path_codec import decode_project_path, display_name_for


# ── Session summary ────────────────────────────────────────────────

class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str  # log file stem; this is what `claude --resume` expects
    projectPath: str = ""
    slug: Optional[str] = None
    gitBranch: Optional[str] = None
    agentId: Optional[str] = None
    firstMessage: datetime
    lastMessage: datetime
    messageCount: int = 0
    previewText: str = ""
    isAgent: bool = False
    filePath: str = ""
    fileSize: int = 0

    def display_label(self) -> str:
        if self.slug:
            return self.slug
        if self.agentId:
            return f"agent-{self.agentId}"
        return self.id[:8]

    def resume_command(self) -> str:
        return f"claude --resume {self.id}"

    def duration(self) -> timedelta:
        return self.lastMessage - self.firstMessage

    def duration_str(self) -> str:
        return format_duration(self.duration())


# ── Project summary ────────────────────────────────────────────────

class Project(BaseModel):
    model_config = ConfigDict(frozen=True)

    encodedPath: str  # directory name under ~/.claude/projects
    decodedPath: str = ""
    displayName: str = ""
    sessionCount: int = 0
    totalMessages: int = 0
    lastActivity: datetime = MIN_TIMESTAMP

    @classmethod
    def from_encoded(cls, encoded_path: str, **fields) -> "Project":
        decoded = decode_project_path(encoded_path)
        return cls(
            encodedPath=encoded_path,
            decodedPath=decoded,
            displayName=display_name_for(decoded),
            **fields,
        )


# ── Scan bookkeeping ───────────────────────────────────────────────

class ScanStatus(BaseModel):
    root: str = ""
    scannedAt: Optional[datetime] = None
    durationMs: float = 0.0
    projectCount: int = 0
    sessionCount: int = 0
    filesParsed: int = 0
    filesSkipped: int = 0
    emptyFiles: int = 0
    agentSessionsExcluded: int = 0
    directoriesSkipped: int = 0
