"""API router for individual sessions and scan control."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from total_recall.models import ScanStatus, Session
from total_recall.scanner import ScanError
from total_recall.session_store import session_store

logger = logging.getLogger("total_recall")

sessions_router = APIRouter(prefix="/api/sessions", tags=["sessions"])
scan_router = APIRouter(prefix="/api/scan", tags=["scan"])


class SessionDetail(Session):
    displayLabel: str = ""
    resumeCommand: str = ""
    durationText: str = ""

    @classmethod
    def from_session(cls, session: Session) -> "SessionDetail":
        return cls(
            **session.model_dump(),
            displayLabel=session.display_label(),
            resumeCommand=session.resume_command(),
            durationText=session.duration_str(),
        )


@sessions_router.get("/count")
def count_sessions():
    return {"total": session_store.total_session_count()}


@sessions_router.get("/{session_id}", response_model=SessionDetail)
def get_session(session_id: str):
    session = session_store.find_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return SessionDetail.from_session(session)


@scan_router.get("", response_model=ScanStatus)
def get_scan_status():
    return session_store.status


@scan_router.post("", response_model=ScanStatus)
async def trigger_scan():
    """Rescan the projects directory and return the new status."""
    try:
        return await session_store.ascan()
    except ScanError as e:
        logger.error("Scan failed: %s", e)
        raise HTTPException(status_code=503, detail=str(e))
