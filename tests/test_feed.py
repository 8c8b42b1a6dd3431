"""Tests for feed loading and saving."""

import json
import re
from datetime import datetime

import pytest

from crewboard.domain.models import JobStatus
from crewboard.feed import FeedError, load_feed, parse_feed, save_feed


def sample_document():
    return {
        "crews": [
            {"id": "alpha", "name": "Alpha Crew", "color": "#3B82F6", "capacity": 4},
            {"id": "beta"},
        ],
        "assignments": [
            {
                "id": "asg-1",
                "job_id": "job-1",
                "crew_id": "alpha",
                "start": "2025-01-20T08:00:00",
                "end": "2025-01-21T17:00:00",
                "priority": 8,
                "status": "in_progress",
                "job_number": "J-2025-0001",
                "estimated_hours": 16,
            },
            {"id": "asg-2", "job_id": "job-2"},
        ],
    }


class TestParseFeed:
    """Tests for parse_feed."""

    def test_parses_records(self):
        feed = parse_feed(sample_document())

        assert [c.id for c in feed.crews] == ["alpha", "beta"]
        assert feed.crews[1].name == "beta"
        assert feed.crews[1].capacity == 1

        first, second = feed.assignments
        assert first.start == datetime(2025, 1, 20, 8)
        assert first.priority == 8
        assert first.status is JobStatus.IN_PROGRESS
        assert first.estimated_hours == 16.0
        assert second.crew_id is None
        assert second.start is None
        assert second.status is JobStatus.SCHEDULED

    def test_malformed_range_kept(self):
        document = sample_document()
        document["assignments"][0]["end"] = "2025-01-19T08:00:00"

        assignment = parse_feed(document).assignments[0]
        assert assignment.is_malformed

    @pytest.mark.parametrize(
        "patch,where",
        [
            ({"id": None}, "assignments[0]"),
            ({"priority": 11}, "assignments[0]"),
            ({"status": "lost"}, "assignments[0]"),
            ({"start": "next tuesday"}, "assignments[0].start"),
            ({"start": 20250120}, "assignments[0].start"),
        ],
    )
    def test_invalid_assignment(self, patch, where):
        document = sample_document()
        document["assignments"][0].update(patch)

        with pytest.raises(FeedError, match=re.escape(where)):
            parse_feed(document)

    def test_invalid_crew(self):
        document = sample_document()
        document["crews"][0]["capacity"] = "many"

        with pytest.raises(FeedError, match=r"crews\[0\]"):
            parse_feed(document)

    @pytest.mark.parametrize("flag", ["false", 0, None])
    def test_is_active_must_be_boolean(self, flag):
        document = sample_document()
        document["crews"][1]["is_active"] = flag

        with pytest.raises(FeedError, match=r"crews\[1\]: is_active"):
            parse_feed(document)

    def test_inactive_crew(self):
        document = sample_document()
        document["crews"][1]["is_active"] = False

        assert not parse_feed(document).crews[1].is_active

    @pytest.mark.parametrize("document", [[], {"crews": {}}, {"assignments": "x"}])
    def test_invalid_document(self, document):
        with pytest.raises(FeedError):
            parse_feed(document)

    def test_feed_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_feed("nope")


class TestFeedFiles:
    """Tests for load_feed and save_feed."""

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "feed.json"
        path.write_text(json.dumps(sample_document()))

        feed = load_feed(path)
        save_feed(feed, tmp_path / "out.json")
        reloaded = load_feed(tmp_path / "out.json")

        assert reloaded.assignments == feed.assignments
        assert reloaded.crews == feed.crews

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "feed.json"
        path.write_text("{not json")

        with pytest.raises(FeedError, match="invalid JSON"):
            load_feed(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_feed(tmp_path / "absent.json")
