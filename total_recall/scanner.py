"""Walk the Claude projects directory and aggregate session summaries."""
from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from total_recall.date_utils import MIN_TIMESTAMP
from total_recall.models import Project, ScanStatus, Session
from total_recall.observability import record_file_skipped, record_scan, start_span
from total_recall.parsers.registry import is_session_file, parse_session_file

logger = logging.getLogger("total_recall.scanner")


class ScanError(RuntimeError):
    """The projects root exists but cannot be listed."""


@dataclass
class _ScanCounters:
    files_parsed: int = 0
    files_skipped: int = 0
    empty_files: int = 0
    agent_sessions_excluded: int = 0
    directories_skipped: int = 0


@dataclass(frozen=True)
class ProjectScan:
    """Immutable result of one scan; replaced wholesale on the next one."""

    projects: tuple[Project, ...] = ()
    sessions: dict[str, tuple[Session, ...]] = field(default_factory=dict)
    status: ScanStatus = field(default_factory=ScanStatus)


def load_project_sessions(project_dir: Path, counters: _ScanCounters | None = None) -> list[Session]:
    """Summarise every log file directly inside ``project_dir``.

    Agent (sidechain) sessions are parsed and then dropped. Unreadable files
    are skipped. Raises ``OSError`` if the directory itself cannot be listed.
    """
    counters = counters if counters is not None else _ScanCounters()
    sessions: list[Session] = []

    with os.scandir(project_dir) as entries:
        children = [Path(entry.path) for entry in entries if entry.is_file()]

    for path in children:
        if not is_session_file(path):
            continue
        try:
            session = parse_session_file(path)
        except OSError as exc:
            counters.files_skipped += 1
            record_file_skipped("unreadable")
            logger.debug("Skipping unreadable session file %s: %s", path, exc)
            continue

        counters.files_parsed += 1
        if session is None:
            counters.empty_files += 1
            continue
        if session.isAgent:
            counters.agent_sessions_excluded += 1
            continue
        sessions.append(session)

    sessions.sort(key=lambda s: s.lastMessage, reverse=True)
    return sessions


def _summarise_project(encoded_path: str, sessions: list[Session]) -> Project:
    return Project.from_encoded(
        encoded_path,
        sessionCount=len(sessions),
        totalMessages=sum(s.messageCount for s in sessions),
        lastActivity=max((s.lastMessage for s in sessions), default=MIN_TIMESTAMP),
    )


def scan_projects(projects_dir: Path) -> ProjectScan:
    """Build the project/session aggregate for ``projects_dir``.

    A missing root yields an empty scan. A root that exists but cannot be
    read raises :class:`ScanError`. Everything below the root is best-effort.
    """
    started = time.perf_counter()
    counters = _ScanCounters()

    with start_span("total_recall.scan", {"root": str(projects_dir)}):
        if not projects_dir.exists():
            logger.info("Projects directory %s does not exist; nothing to scan", projects_dir)
            return ProjectScan(status=_status(projects_dir, started, counters, (), {}))

        try:
            with os.scandir(projects_dir) as entries:
                project_dirs = sorted(
                    (Path(entry.path) for entry in entries if entry.is_dir()),
                    key=lambda p: p.name,
                )
        except OSError as exc:
            record_scan("error", (time.perf_counter() - started) * 1000, projects=0, sessions=0)
            raise ScanError(f"Cannot read projects directory {projects_dir}: {exc}") from exc

        projects: list[Project] = []
        sessions_by_project: dict[str, tuple[Session, ...]] = {}

        for project_dir in project_dirs:
            encoded_path = project_dir.name
            if not encoded_path:
                continue
            try:
                sessions = load_project_sessions(project_dir, counters)
            except OSError as exc:
                counters.directories_skipped += 1
                record_file_skipped("unlistable_directory")
                logger.warning("Skipping unreadable project directory %s: %s", project_dir, exc)
                continue

            if not sessions:
                continue

            projects.append(_summarise_project(encoded_path, sessions))
            sessions_by_project[encoded_path] = tuple(sessions)

        projects.sort(key=lambda p: p.lastActivity, reverse=True)
        status = _status(projects_dir, started, counters, projects, sessions_by_project)

    record_scan("success", status.durationMs, projects=status.projectCount, sessions=status.sessionCount)
    logger.info(
        "Scanned %s: %d projects, %d sessions (%d files, %d skipped) in %.1fms",
        projects_dir,
        status.projectCount,
        status.sessionCount,
        status.filesParsed,
        status.filesSkipped,
        status.durationMs,
    )
    return ProjectScan(projects=tuple(projects), sessions=sessions_by_project, status=status)


def _status(
    root: Path,
    started: float,
    counters: _ScanCounters,
    projects,
    sessions_by_project: dict[str, tuple[Session, ...]],
) -> ScanStatus:
    return ScanStatus(
        root=str(root),
        scannedAt=datetime.now(timezone.utc),
        durationMs=round((time.perf_counter() - started) * 1000, 3),
        projectCount=len(projects),
        sessionCount=sum(len(s) for s in sessions_by_project.values()),
        filesParsed=counters.files_parsed,
        filesSkipped=counters.files_skipped,
        emptyFiles=counters.empty_files,
        agentSessionsExcluded=counters.agent_sessions_excluded,
        directoriesSkipped=counters.directories_skipped,
    )
