import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from total_recall.cli import main


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        self.claude_dir = Path(tmpdir.name)
        path = self.claude_dir / "projects" / "-home-u-webapp" / "abc12345-0000.jsonl"
        path.parent.mkdir(parents=True)
        line = {
            "type": "user",
            "timestamp": "2026-02-16T10:00:00Z",
            "cwd": "/home/u/web app",
            "message": {"role": "user", "content": "add login page"},
        }
        path.write_text(json.dumps(line) + "\n", encoding="utf-8")

    def _run(self, *argv: str, claude_dir: Path | None = None) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(["--claude-dir", str(claude_dir or self.claude_dir), *argv])
        return code, out.getvalue(), err.getvalue()

    def test_projects_json(self) -> None:
        code, out, _ = self._run("projects", "--json")
        self.assertEqual(code, 0)
        payload = json.loads(out)
        self.assertEqual(payload[0]["encodedPath"], "-home-u-webapp")
        self.assertEqual(payload[0]["sessionCount"], 1)

    def test_sessions_by_display_name(self) -> None:
        code, out, _ = self._run("sessions", "webapp")
        self.assertEqual(code, 0)
        self.assertIn("abc12345", out)
        self.assertIn("add login page", out)

    def test_sessions_unknown_project(self) -> None:
        code, _, err = self._run("sessions", "nope")
        self.assertEqual(code, 1)
        self.assertIn("Project not found", err)

    def test_resume_prints_command(self) -> None:
        code, out, _ = self._run("resume", "abc12345-0000")
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "cd '/home/u/web app' && claude --resume abc12345-0000")

    def test_missing_claude_dir_lists_nothing(self) -> None:
        code, out, _ = self._run("projects", claude_dir=self.claude_dir / "absent")
        self.assertEqual(code, 0)
        self.assertIn("0 projects", out)

