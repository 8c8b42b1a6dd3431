"""JSON assignment feed loading and saving.

A feed document holds the crew roster and the (already filtered)
assignments for the board:

    {
      "crews": [{"id": "alpha", "name": "Alpha Crew", "color": "#3B82F6",
                 "capacity": 4, "is_active": true}],
      "assignments": [{"id": "asg-1", "job_id": "job-1", "crew_id": "alpha",
                       "start": "2025-01-20T08:00:00",
                       "end": "2025-01-21T17:00:00", "priority": 6}]
    }
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from crewboard.domain.models import DEFAULT_CREW_COLOR, Assignment, Crew, JobStatus
from crewboard.domain.week import to_local_naive


class FeedError(ValueError):
    """Raised when a feed document is structurally invalid."""


@dataclass
class Feed:
    """Crew roster plus assignment feed."""

    crews: list[Crew] = field(default_factory=list)
    assignments: list[Assignment] = field(default_factory=list)


def _parse_instant(value: Any, where: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise FeedError(f"{where}: expected an ISO-8601 string, got {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise FeedError(f"{where}: {e}") from e
    return to_local_naive(parsed)


def _require(record: dict, key: str, where: str) -> Any:
    value = record.get(key)
    if value is None or value == "":
        raise FeedError(f"{where}: missing required field '{key}'")
    return value


def parse_crew(record: Any, index: int) -> Crew:
    where = f"crews[{index}]"
    if not isinstance(record, dict):
        raise FeedError(f"{where}: expected an object")
    crew_id = str(_require(record, "id", where))
    try:
        capacity = int(record.get("capacity", 1))
    except (TypeError, ValueError) as e:
        raise FeedError(f"{where}: {e}") from e

    is_active = record.get("is_active", True)
    if not isinstance(is_active, bool):
        raise FeedError(f"{where}: is_active must be true or false, got {is_active!r}")

    return Crew(
        id=crew_id,
        name=str(record.get("name") or crew_id),
        color=record.get("color") or DEFAULT_CREW_COLOR,
        capacity=capacity,
        is_active=is_active,
    )


def parse_assignment(record: Any, index: int) -> Assignment:
    where = f"assignments[{index}]"
    if not isinstance(record, dict):
        raise FeedError(f"{where}: expected an object")
    try:
        status = JobStatus(record.get("status", JobStatus.SCHEDULED.value))
        priority = int(record.get("priority", 5))
        completion = int(record.get("completion_percentage", 0))
        hours = record.get("estimated_hours")
        estimated_hours = float(hours) if hours is not None else None
    except (TypeError, ValueError) as e:
        raise FeedError(f"{where}: {e}") from e

    if not 0 <= priority <= 10:
        raise FeedError(f"{where}: priority {priority} outside 0-10")

    crew_id = record.get("crew_id")
    return Assignment(
        id=str(_require(record, "id", where)),
        job_id=str(_require(record, "job_id", where)),
        crew_id=str(crew_id) if crew_id is not None else None,
        start=_parse_instant(record.get("start"), f"{where}.start"),
        end=_parse_instant(record.get("end"), f"{where}.end"),
        priority=priority,
        status=status,
        completion_percentage=completion,
        color=record.get("color") or DEFAULT_CREW_COLOR,
        job_number=str(record.get("job_number", "")),
        title=str(record.get("title", "")),
        customer_name=str(record.get("customer_name", "")),
        estimated_hours=estimated_hours,
    )


def parse_feed(data: Any) -> Feed:
    """Build a Feed from a decoded JSON document.

    Raises:
        FeedError: If the document or one of its records is invalid.
    """
    if not isinstance(data, dict):
        raise FeedError("Feed document must be a JSON object")
    crews = data.get("crews", [])
    assignments = data.get("assignments", [])
    if not isinstance(crews, list) or not isinstance(assignments, list):
        raise FeedError("'crews' and 'assignments' must be lists")
    return Feed(
        crews=[parse_crew(r, i) for i, r in enumerate(crews)],
        assignments=[parse_assignment(r, i) for i, r in enumerate(assignments)],
    )


def load_feed(path: Union[str, Path]) -> Feed:
    """Load a feed document from a JSON file."""
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise FeedError(f"{path}: invalid JSON ({e})") from e
    return parse_feed(data)


def _format_instant(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def dump_feed(feed: Feed) -> dict:
    """Convert a Feed back to a JSON-serializable document."""
    return {
        "crews": [
            {
                "id": c.id,
                "name": c.name,
                "color": c.color,
                "capacity": c.capacity,
                "is_active": c.is_active,
            }
            for c in feed.crews
        ],
        "assignments": [
            {
                "id": a.id,
                "job_id": a.job_id,
                "crew_id": a.crew_id,
                "start": _format_instant(a.start),
                "end": _format_instant(a.end),
                "priority": a.priority,
                "status": a.status.value,
                "completion_percentage": a.completion_percentage,
                "color": a.color,
                "job_number": a.job_number,
                "title": a.title,
                "customer_name": a.customer_name,
                "estimated_hours": a.estimated_hours,
            }
            for a in feed.assignments
        ],
    }


def save_feed(feed: Feed, path: Union[str, Path]) -> None:
    Path(path).write_text(json.dumps(dump_feed(feed), indent=2) + "\n")
