import unittest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

from pydantic import ValidationError

from total_recall import models
from total_recall.date_utils import MIN_TIMESTAMP
from total_recall.models import Project, Session

_START = datetime(2026, 2, 16, 10, 0, tzinfo=timezone.utc)


def _session(**overrides) -> Session:
    fields = {
        "id": "0f8fad5b-d9cb-469f-a165-70867728950e",
        "firstMessage": _START,
        "lastMessage": _START,
    }
    fields.update(overrides)
    return Session(**fields)


class SessionModelTests(unittest.TestCase):
    def test_display_label_prefers_slug_then_agent_then_id_prefix(self) -> None:
        self.assertEqual(_session(slug="twinkly-singing-nova", agentId="a1").display_label(), "twinkly-singing-nova")
        self.assertEqual(_session(agentId="a1").display_label(), "agent-a1")
        self.assertEqual(_session().display_label(), "0f8fad5b")

    def test_resume_command_uses_session_id(self) -> None:
        self.assertEqual(_session(id="abc").resume_command(), "claude --resume abc")

    def test_duration_strings(self) -> None:
        cases = [
            (timedelta(seconds=30), "< 1m"),
            (timedelta(minutes=12, seconds=59), "12m"),
            (timedelta(hours=2, minutes=5), "2h 5m"),
        ]
        for delta, expected in cases:
            with self.subTest(delta=delta):
                session = _session(lastMessage=_START + delta)
                self.assertEqual(session.duration(), delta)
                self.assertEqual(session.duration_str(), expected)


class ProjectModelTests(unittest.TestCase):
    def test_from_encoded_decodes_and_names_project(self) -> None:
        with patch.object(models, "decode_project_path", return_value="/home/u/Projects/jwst-cosmos"):
            project = Project.from_encoded("-home-u-Projects-jwst-cosmos")

        self.assertEqual(project.decodedPath, "/home/u/Projects/jwst-cosmos")
        self.assertEqual(project.displayName, "jwst-cosmos")
        self.assertEqual(project.sessionCount, 0)
        self.assertEqual(project.lastActivity, MIN_TIMESTAMP)


class FrozenModelTests(unittest.TestCase):
    def test_published_models_reject_mutation(self) -> None:
        project = Project(encodedPath="-p-a", sessionCount=1)
        session = _session()

        with self.assertRaises(ValidationError):
            project.sessionCount = 99
        with self.assertRaises(ValidationError):
            session.previewText = "changed"
        self.assertEqual(project.sessionCount, 1)
        self.assertEqual(session.previewText, "")
