"""Session store: owns the latest scan and answers lookups against it."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from total_recall import config
from total_recall.models import Project, ScanStatus, Session
from total_recall.scanner import ProjectScan, scan_projects

logger = logging.getLogger("total_recall")


class SessionStore:
    """Discovers Claude Code projects and sessions under a projects root.

    ``scan()`` builds a complete :class:`ProjectScan` before publishing it in
    a single assignment, so readers see either the previous snapshot or the
    new one and never a mix. Nothing else mutates the store.
    """

    def __init__(self, projects_dir: Path):
        self.projects_dir = projects_dir
        self._snapshot = ProjectScan()
        self._scanned = False
        self._scan_lock = asyncio.Lock()

    def scan(self) -> ScanStatus:
        """Rescan the projects root. Raises ``ScanError`` if it is unreadable."""
        snapshot = scan_projects(self.projects_dir)
        self._snapshot = snapshot
        self._scanned = True
        return snapshot.status

    async def ascan(self) -> ScanStatus:
        """Run :meth:`scan` off the event loop so an interactive shell stays responsive.

        Overlapping callers queue on a lock, so snapshots publish in start order.
        """
        async with self._scan_lock:
            return await asyncio.to_thread(self.scan)

    @property
    def has_scanned(self) -> bool:
        return self._scanned

    @property
    def status(self) -> ScanStatus:
        return self._snapshot.status

    def projects(self) -> list[Project]:
        return list(self._snapshot.projects)

    def get_project(self, encoded_path: str) -> Optional[Project]:
        for project in self._snapshot.projects:
            if project.encodedPath == encoded_path:
                return project
        return None

    def sessions_for(self, encoded_path: str) -> Optional[list[Session]]:
        sessions = self._snapshot.sessions.get(encoded_path)
        return list(sessions) if sessions is not None else None

    def find_session(self, session_id: str) -> Optional[Session]:
        snapshot = self._snapshot
        for project in snapshot.projects:
            for session in snapshot.sessions.get(project.encodedPath, ()):
                if session.id == session_id:
                    return session
        return None

    def total_session_count(self) -> int:
        return sum(len(sessions) for sessions in self._snapshot.sessions.values())


# Global instance over the configured Claude projects directory
session_store = SessionStore(config.CLAUDE_PROJECTS_DIR)
