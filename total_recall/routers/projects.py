"""API router for discovered projects."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from total_recall.models import Project, Session
from total_recall.session_store import session_store

projects_router = APIRouter(prefix="/api/projects", tags=["projects"])


@projects_router.get("", response_model=list[Project])
def list_projects():
    """List projects, most recently active first."""
    return session_store.projects()


@projects_router.get("/{encoded_path}", response_model=Project)
def get_project(encoded_path: str):
    project = session_store.get_project(encoded_path)
    if not project:
        raise HTTPException(status_code=404, detail=f"Project {encoded_path} not found")
    return project


@projects_router.get("/{encoded_path}/sessions", response_model=list[Session])
def list_project_sessions(encoded_path: str):
    """List a project's resumable sessions, most recent first."""
    sessions = session_store.sessions_for(encoded_path)
    if sessions is None:
        raise HTTPException(status_code=404, detail=f"Project {encoded_path} not found")
    return sessions
