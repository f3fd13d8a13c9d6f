"""Command-line entry point for listing and resuming Claude Code sessions.

Usage:
  total-recall projects
  total-recall sessions jwst-cosmos
  total-recall resume 3f1c2a9e-...
  total-recall --claude-dir /mnt/backup/.claude projects --json
  total-recall serve --port 8000
"""
from __future__ import annotations

import argparse
import json
import logging
import shlex
import sys
from typing import Optional

from total_recall import __version__, config
from total_recall.date_utils import format_display
from total_recall.models import Project
from total_recall.scanner import ScanError
from total_recall.session_store import SessionStore

logger = logging.getLogger("total_recall")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="total-recall", description="Browse and resume Claude Code sessions")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--claude-dir", default=None, help=f"Claude directory (default: {config.CLAUDE_DIR})")
    sub = parser.add_subparsers(dest="command", required=True)

    projects = sub.add_parser("projects", help="List projects with resumable sessions")
    projects.add_argument("--json", action="store_true")

    sessions = sub.add_parser("sessions", help="List sessions of one project")
    sessions.add_argument("project", help="Encoded directory name or display name")
    sessions.add_argument("--json", action="store_true")

    resume = sub.add_parser("resume", help="Print the resume command for a session")
    resume.add_argument("session_id")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=config.HOST)
    serve.add_argument("--port", type=int, default=config.PORT)
    return parser


def _resolve_project(store: SessionStore, key: str) -> Optional[Project]:
    project = store.get_project(key)
    if project:
        return project
    # Display names are not unique; the most recently active match wins.
    for candidate in store.projects():
        if candidate.displayName == key:
            return candidate
    return None


def _print_projects(store: SessionStore, as_json: bool) -> int:
    projects = store.projects()
    if as_json:
        print(json.dumps([p.model_dump(mode="json") for p in projects], indent=2))
        return 0
    for project in projects:
        print(
            f"{format_display(project.lastActivity):>11}  {project.sessionCount:>4} sessions  "
            f"{project.displayName:<30} {project.decodedPath}"
        )
    print(f"\n{len(projects)} projects, {store.total_session_count()} sessions")
    return 0


def _print_sessions(store: SessionStore, key: str, as_json: bool) -> int:
    project = _resolve_project(store, key)
    sessions = store.sessions_for(project.encodedPath) if project else None
    if project is None or sessions is None:
        print(f"Project not found: {key}", file=sys.stderr)
        return 1
    if as_json:
        print(json.dumps([s.model_dump(mode="json") for s in sessions], indent=2))
        return 0
    print(f"{project.displayName} ({project.decodedPath})")
    for session in sessions:
        branch = f" [{session.gitBranch}]" if session.gitBranch else ""
        print(
            f"  {format_display(session.lastMessage):>11}  {session.duration_str():>7}  "
            f"{session.messageCount:>5} msgs  {session.display_label()}{branch}"
        )
        if session.previewText:
            print(f"      {session.previewText}")
    return 0


def _print_resume(store: SessionStore, session_id: str) -> int:
    session = store.find_session(session_id)
    if session is None:
        print(f"Session not found: {session_id}", file=sys.stderr)
        return 1
    print(f"cd {shlex.quote(session.projectPath)} && {session.resume_command()}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    if args.command == "serve":
        import uvicorn

        uvicorn.run("total_recall.main:app", host=args.host, port=args.port)
        return 0

    projects_dir = config.projects_dir_for(args.claude_dir) if args.claude_dir else config.CLAUDE_PROJECTS_DIR
    store = SessionStore(projects_dir)
    try:
        store.scan()
    except ScanError as exc:
        print(f"Scan failed: {exc}", file=sys.stderr)
        return 2

    if args.command == "projects":
        return _print_projects(store, args.json)
    if args.command == "sessions":
        return _print_sessions(store, args.project, args.json)
    return _print_resume(store, args.session_id)
