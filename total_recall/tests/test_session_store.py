import asyncio
import json
import tempfile
import time
import unittest
from pathlib import Path
from unittest.mock import patch

from total_recall import session_store as store_module
from total_recall.models import ScanStatus
from total_recall.scanner import ProjectScan, ScanError
from total_recall.session_store import SessionStore


def _write_session(root: Path, project: str, name: str, text: str, timestamp: str) -> None:
    path = root / project / name
    path.parent.mkdir(parents=True, exist_ok=True)
    line = {"type": "user", "timestamp": timestamp, "message": {"role": "user", "content": text}}
    path.write_text(json.dumps(line) + "\n", encoding="utf-8")


class SessionStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.root = Path(tmpdir.name)
        self.store = SessionStore(self.root)

    def test_empty_before_first_scan(self) -> None:
        self.assertFalse(self.store.has_scanned)
        self.assertEqual(self.store.projects(), [])
        self.assertIsNone(self.store.sessions_for("-p-a"))
        self.assertEqual(self.store.total_session_count(), 0)

    def test_scan_exposes_projects_and_sessions(self) -> None:
        _write_session(self.root, "-p-a", "s1.jsonl", "one", "2026-01-01T00:00:00Z")
        _write_session(self.root, "-p-a", "s2.jsonl", "two", "2026-01-02T00:00:00Z")
        _write_session(self.root, "-p-b", "s3.jsonl", "three", "2026-01-03T00:00:00Z")

        status = self.store.scan()

        self.assertTrue(self.store.has_scanned)
        self.assertEqual(status.projectCount, 2)
        self.assertEqual([p.encodedPath for p in self.store.projects()], ["-p-b", "-p-a"])
        self.assertEqual([s.id for s in self.store.sessions_for("-p-a")], ["s2", "s1"])
        self.assertIsNone(self.store.sessions_for("-p-missing"))
        self.assertEqual(self.store.total_session_count(), 3)
        self.assertEqual(self.store.get_project("-p-b").sessionCount, 1)
        self.assertIsNone(self.store.get_project("-p-missing"))
        self.assertEqual(self.store.find_session("s3").previewText, "three")
        self.assertIsNone(self.store.find_session("nope"))

    def test_rescan_replaces_snapshot(self) -> None:
        _write_session(self.root, "-p-a", "s1.jsonl", "one", "2026-01-01T00:00:00Z")
        self.store.scan()
        before = self.store.projects()

        (self.root / "-p-a" / "s1.jsonl").unlink()
        _write_session(self.root, "-p-c", "s9.jsonl", "nine", "2026-01-09T00:00:00Z")
        self.store.scan()

        self.assertEqual([p.encodedPath for p in before], ["-p-a"])
        self.assertEqual([p.encodedPath for p in self.store.projects()], ["-p-c"])
        self.assertIsNone(self.store.sessions_for("-p-a"))

    def test_returned_lists_do_not_alias_the_snapshot(self) -> None:
        _write_session(self.root, "-p-a", "s1.jsonl", "one", "2026-01-01T00:00:00Z")
        self.store.scan()

        self.store.projects().clear()
        self.store.sessions_for("-p-a").clear()

        self.assertEqual(len(self.store.projects()), 1)
        self.assertEqual(len(self.store.sessions_for("-p-a")), 1)

    def test_failed_scan_keeps_previous_snapshot(self) -> None:
        _write_session(self.root, "-p-a", "s1.jsonl", "one", "2026-01-01T00:00:00Z")
        self.store.scan()

        with patch.object(store_module, "scan_projects", side_effect=ScanError("denied")):
            with self.assertRaises(ScanError):
                self.store.scan()

        self.assertEqual([p.encodedPath for p in self.store.projects()], ["-p-a"])


class SessionStoreAsyncTests(unittest.IsolatedAsyncioTestCase):
    async def test_ascan_runs_a_full_scan(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        root = Path(tmpdir.name)
        _write_session(root, "-p-a", "s1.jsonl", "one", "2026-01-01T00:00:00Z")
        store = SessionStore(root)

        status = await store.ascan()

        self.assertEqual(status.sessionCount, 1)
        self.assertEqual(store.total_session_count(), 1)

    async def test_overlapping_scans_publish_in_start_order(self) -> None:
        store = SessionStore(Path("/unused"))
        started: list[str] = []
        durations = iter([0.3, 0.05])

        def slow_scan(projects_dir: Path) -> ProjectScan:
            label = f"scan-{len(started)}"
            started.append(label)
            time.sleep(next(durations))
            return ProjectScan(status=ScanStatus(root=label))

        with patch.object(store_module, "scan_projects", side_effect=slow_scan):
            first = asyncio.create_task(store.ascan())
            second = asyncio.create_task(store.ascan())
            statuses = await asyncio.gather(first, second)

        self.assertEqual([s.root for s in statuses], ["scan-0", "scan-1"])
        self.assertEqual(store.status.root, "scan-1")
