"""Command-line interface for the crew scheduling board."""

import argparse
import logging
import sys
from datetime import date, datetime, time, timedelta
from typing import Optional

from crewboard.domain.models import Assignment, Crew, JobStatus
from crewboard.domain.store import InMemoryAssignmentStore, UnknownJobError
from crewboard.domain.week import WeekWindow
from crewboard.feed import Feed, FeedError, load_feed, save_feed
from crewboard.output.pdf_generator import PDFGenerator
from crewboard.output.text_report import BoardReportGenerator
from crewboard.scheduling.board import ScheduleBoard
from crewboard.validation.conflicts import ConflictConfig

logger = logging.getLogger(__name__)


def create_sample_crews() -> list[Crew]:
    """Create the sample crew roster."""
    return [
        Crew(id="alpha", name="Alpha Crew", color="#3B82F6", capacity=4),
        Crew(id="bravo", name="Bravo Crew", color="#10B981", capacity=3),
        Crew(id="charlie", name="Charlie Crew", color="#F59E0B", capacity=5),
    ]


def create_sample_assignments(week: WeekWindow) -> list[Assignment]:
    """Create sample job assignments for a week, including a few conflicts."""
    monday = week.dates[1]

    def at(day_offset: int, hour: int, minute: int = 0) -> datetime:
        return datetime.combine(monday + timedelta(days=day_offset), time(hour, minute))

    customers = [
        "Henderson Residence", "Oak Park HOA", "Riverside Plaza", "Miller Family",
        "Summit Offices", "Lakeview Condos", "Garcia Residence", "Northgate Mall",
    ]
    specs = [
        # (crew, start, end, priority, title)
        ("alpha", at(0, 8), at(1, 17), 8, "Paver patio install"),
        ("alpha", at(1, 9), at(1, 15), 5, "Walkway repair"),
        ("alpha", at(3, 8), at(3, 12), 4, "Site walkthrough"),
        ("alpha", at(3, 12), at(3, 17), 6, "Retaining wall"),
        ("bravo", at(0, 8), at(2, 17), 7, "Driveway replacement"),
        ("bravo", at(2, 13), at(3, 17), 9, "Parking lot sealing"),
        ("charlie", at(-2, 8), at(1, 17), 6, "Commercial plaza phase 1"),
        (None, None, None, 3, "Fire pit estimate"),
    ]

    assignments = []
    for i, (crew_id, start, end, priority, title) in enumerate(specs):
        assignments.append(
            Assignment(
                id=f"asg-{i + 1:03d}",
                job_id=f"job-{i + 1:03d}",
                crew_id=crew_id,
                start=start,
                end=end,
                priority=priority,
                status=JobStatus.SCHEDULED if crew_id else JobStatus.APPROVED,
                job_number=f"J-{week.start.year}-{i + 1:04d}",
                title=title,
                customer_name=customers[i % len(customers)],
            )
        )
    return assignments


def print_board(board: ScheduleBoard) -> None:
    """Print the board report to stdout."""
    print(BoardReportGenerator().generate_to_string(board))


def build_board(
    feed: Feed,
    week_anchor: Optional[date] = None,
    buffer_minutes: int = 0,
) -> ScheduleBoard:
    week = WeekWindow.for_date(week_anchor) if week_anchor else WeekWindow.current()
    return ScheduleBoard(
        crews=feed.crews,
        assignments=feed.assignments,
        week=week,
        conflict_config=ConflictConfig(back_to_back_buffer=timedelta(minutes=buffer_minutes)),
    )


def run_board(
    feed_path: str,
    week_anchor: Optional[date] = None,
    buffer_minutes: int = 0,
    pdf_path: Optional[str] = None,
    report_path: Optional[str] = None,
) -> int:
    """Show the week board for a feed file."""
    feed = load_feed(feed_path)
    board = build_board(feed, week_anchor, buffer_minutes)
    print_board(board)

    if report_path:
        BoardReportGenerator().generate(board, report_path)
        print(f"\nReport written to {report_path}")
    if pdf_path:
        PDFGenerator().generate(board, pdf_path)
        print(f"\nPDF written to {pdf_path}")

    return 0


def run_move(
    feed_path: str,
    job_id: str,
    crew_id: str,
    target_date: date,
    output_path: Optional[str] = None,
) -> int:
    """Reassign a job with a full drag/drop gesture and save the result."""
    feed = load_feed(feed_path)
    store = InMemoryAssignmentStore(feed.assignments, feed.crews)
    board = ScheduleBoard(
        crews=feed.crews,
        assignments=store.assignments,
        week=WeekWindow.for_date(target_date),
        commit=store.commit,
    )

    if board.get_crew(crew_id) is None:
        print(f"Error: unknown crew {crew_id}", file=sys.stderr)
        return 1

    assignment = store.get_by_job(job_id)
    payload = board.drag.start_drag(assignment, assignment.crew_id)
    board.drag.drag_enter(crew_id, target_date)
    outcome = board.drag.drop(crew_id, target_date, payload.to_json())

    board.set_assignments(store.assignments)
    updated = outcome.updated
    print(
        f"Moved {updated.label} from {outcome.previous.crew_id or 'unassigned'} "
        f"to {crew_id}: {updated.start:%a %b %d %H:%M} - {updated.end:%H:%M}"
    )
    for conflict in board.conflict_result.conflicts:
        if conflict.involves(updated.id):
            print(f"  {conflict}")

    destination = output_path or feed_path
    save_feed(Feed(crews=feed.crews, assignments=store.assignments), destination)
    print(f"Feed written to {destination}")
    return 0


def run_demo(pdf_path: Optional[str] = None, buffer_minutes: int = 0) -> int:
    """Run the board on sample crews and jobs."""
    week = WeekWindow.current()
    feed = Feed(crews=create_sample_crews(), assignments=create_sample_assignments(week))
    board = build_board(feed, week.start.date(), buffer_minutes)
    print_board(board)

    if pdf_path:
        print(f"\nGenerating PDF: {pdf_path}")
        PDFGenerator().generate(board, pdf_path)
        print("  PDF created successfully!")
    return 0


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Crewboard - Crew Scheduling Calendar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                             Show a sample week board
  %(prog)s demo --pdf week.pdf              Also render the board as PDF

  %(prog)s board feed.json                  Show the current week of a feed
  %(prog)s board feed.json --week 2025-01-22
  %(prog)s board feed.json --buffer-minutes 30

  %(prog)s move feed.json job-001 bravo 2025-01-23
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Show a board with sample data")
    demo_parser.add_argument("--pdf", type=str, help="Output PDF file path")
    demo_parser.add_argument(
        "--buffer-minutes", "-b",
        type=int,
        default=0,
        help="Back-to-back warning buffer in minutes (default: 0)",
    )

    board_parser = subparsers.add_parser("board", help="Show the week board for a feed")
    board_parser.add_argument("feed", type=str, help="Feed JSON file")
    board_parser.add_argument(
        "--week", "-w",
        type=_parse_date,
        help="Any date inside the week to show (default: this week)",
    )
    board_parser.add_argument(
        "--buffer-minutes", "-b",
        type=int,
        default=0,
        help="Back-to-back warning buffer in minutes (default: 0)",
    )
    board_parser.add_argument("--pdf", type=str, help="Output PDF file path")
    board_parser.add_argument("--report", type=str, help="Output text report path")

    move_parser = subparsers.add_parser("move", help="Reassign a job to a crew and day")
    move_parser.add_argument("feed", type=str, help="Feed JSON file")
    move_parser.add_argument("job_id", type=str, help="Job to move")
    move_parser.add_argument("crew_id", type=str, help="Destination crew")
    move_parser.add_argument("date", type=_parse_date, help="Destination day (YYYY-MM-DD)")
    move_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Where to write the updated feed (default: overwrite input)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.debug("Running command %s", args.command)

    try:
        if args.command == "demo":
            return run_demo(args.pdf, args.buffer_minutes)
        elif args.command == "board":
            return run_board(
                args.feed,
                args.week,
                args.buffer_minutes,
                args.pdf,
                args.report,
            )
        elif args.command == "move":
            return run_move(args.feed, args.job_id, args.crew_id, args.date, args.output)
        else:
            parser.print_help()
            return 1
    except (FeedError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except UnknownJobError as e:
        print(f"Error: unknown job {e.args[0]}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
