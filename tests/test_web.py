"""
Tests for the Flask web API.
"""

import pytest

from goaltracker import __version__
from goaltracker.core.engine import Engine, Pipeline
from goaltracker.web import server
from goaltracker.web.server import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


@pytest.fixture
def payload(transcript_text, tracker_rows, goal_info_text):
    return {
        "student_name": "Amari Jones",
        "transcript_text": transcript_text,
        "tracker_rows": tracker_rows,
        "goal_info_text": goal_info_text,
    }


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ok", "version": __version__}


class TestGenerate:
    """Tests for POST /api/generate."""

    def test_generate(self, client, payload):
        resp = client.post("/api/generate", json=payload)
        data = resp.get_json()

        assert resp.status_code == 200
        assert data["status"] == "success"
        assert data["report_text"].startswith("**Notes for Week 4**")
        assert data["goal_info"]["meeting_date"] == "5/12/25"
        assert data["tracker"]["computation"]["notes"] == "finished early, did extra"
        assert len(data["transcript"]["behaviors"]) == 4

    def test_tracker_text(self, client, payload):
        del payload["tracker_rows"]
        payload["tracker_text"] = "Name\tAmari Jones\nLexia\t3 units"
        resp = client.post("/api/generate", json=payload)
        assert resp.status_code == 200
        assert "Reading\n3 units\nIncomplete" in resp.get_json()["report_text"]

    def test_overrides(self, client, payload):
        payload["completion_overrides"] = {"writing": True}
        resp = client.post("/api/generate", json=payload)
        assert "Writing\n15 min typing.com\nDone" in resp.get_json()["report_text"]

    def test_missing_name(self, client, payload):
        payload["student_name"] = " "
        resp = client.post("/api/generate", json=payload)
        assert resp.status_code == 400
        assert "student name" in resp.get_json()["error"]

    def test_missing_document(self, client, payload):
        del payload["transcript_text"]
        resp = client.post("/api/generate", json=payload)
        assert resp.status_code == 400
        assert "1:1 Transcript" in resp.get_json()["error"]

    def test_bad_override_subject(self, client, payload):
        payload["completion_overrides"] = {"science": True}
        resp = client.post("/api/generate", json=payload)
        assert resp.status_code == 400

    def test_override_must_be_boolean(self, client, payload):
        """Verify a string flag like "false" is rejected rather than read as true."""
        payload["completion_overrides"] = {"writing": "false"}
        resp = client.post("/api/generate", json=payload)
        assert resp.status_code == 400
        assert "writing" in resp.get_json()["error"]

    def test_override_false_marks_incomplete(self, client, payload):
        payload["completion_overrides"] = {"reading": False}
        resp = client.post("/api/generate", json=payload)
        assert resp.status_code == 200
        assert resp.get_json()["tracker"]["reading"]["complete"] is False

    def test_body_must_be_object(self, client):
        resp = client.post("/api/generate", json=["x"])
        assert resp.status_code == 400
        assert "JSON object" in resp.get_json()["error"]

    def test_non_string_name(self, client, payload):
        payload["student_name"] = 42
        resp = client.post("/api/generate", json=payload)
        assert resp.status_code == 400
        assert "student_name" in resp.get_json()["error"]

    def test_malformed_tracker_rows(self, client, payload):
        payload["tracker_rows"] = {"Name": "Amari Jones"}
        resp = client.post("/api/generate", json=payload)
        assert resp.status_code == 400

    def test_unknown_ruleset(self, client, payload):
        payload["ruleset"] = "no_such_ruleset"
        resp = client.post("/api/generate", json=payload)
        assert resp.status_code == 400

    def test_pipeline_error(self, client, payload, monkeypatch):
        """Verify a failing pass is a 500 with no report."""
        def explode(ctx):
            raise RuntimeError("boom")

        engine = Engine()
        engine.register_pipeline(Pipeline(id="default", name="broken", passes=[explode]))
        monkeypatch.setattr(server, "get_engine", lambda: engine)

        resp = client.post("/api/generate", json=payload)
        data = resp.get_json()
        assert resp.status_code == 500
        assert data["report_text"] is None
        assert data["status"] == "error"
