"""CLI tests via click's CliRunner."""

import json

import pytest
from click.testing import CliRunner

from reelnotify.cli import build_event, main
from reelnotify.notifications.events import EventKind


@pytest.fixture
def job_file(temp_dir, probe_file_obj):
    path = temp_dir / "job.json"
    path.write_text(
        json.dumps(
            {
                "job_id": "job-9",
                "job_started_at": "2024-05-01T12:00:00+00:00",
                "library_name": "TV",
                "file_obj": probe_file_obj,
                "original_file_obj": {"file_size": 1600},
            }
        )
    )
    return path


class TestBuildEvent:
    def test_from_file_obj(self, probe_file_obj):
        event = build_event(
            {"job_id": 12, "file_obj": probe_file_obj, "original_file_obj": {"file_size": 1600}},
            "succeeded",
        )
        assert event.kind == EventKind.SUCCEEDED
        assert event.job_id == "12"
        assert event.file.original_size_mb == 1600.0
        assert len(event.file.streams) == 4

    def test_from_file_context(self):
        event = build_event(
            {"file": {"path": "/media/Movie.Title.1999.mkv", "size_mb": 700}},
            "started",
            library_name="Movies",
        )
        assert event.file.size_mb == 700
        assert event.library_name == "Movies"
        assert event.job_id is None


class TestCli:
    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0

    def test_preview(self, job_file, temp_dir):
        result = CliRunner().invoke(
            main,
            ["preview", "--kind", "started", "--job", str(job_file), "--config", str(temp_dir / "none.yaml")],
        )
        assert result.exit_code == 0, result.output
        assert "Show Name (2020)" in result.output
        assert "Season 01" in result.output

    def test_notify_rejects_bad_webhook(self, job_file, temp_dir):
        result = CliRunner().invoke(
            main,
            [
                "notify",
                "--kind",
                "started",
                "--job",
                str(job_file),
                "--webhook",
                "https://example.com/not-a-webhook",
                "--config",
                str(temp_dir / "none.yaml"),
                "--state-file",
                str(temp_dir / "messages.json"),
            ],
        )
        assert result.exit_code == 1
        assert "Validation error" in result.output
        assert not (temp_dir / "messages.json").exists()

    def test_notify_bad_snapshot(self, temp_dir):
        bad = temp_dir / "job.json"
        bad.write_text("{")
        result = CliRunner().invoke(
            main,
            ["notify", "--kind", "failed", "--job", str(bad), "--config", str(temp_dir / "none.yaml")],
        )
        assert result.exit_code == 1
        assert "Could not read job snapshot" in result.output
