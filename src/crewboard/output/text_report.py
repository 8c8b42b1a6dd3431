"""Plain-text report of a schedule board.

This module renders the visible week as text:
- Week header and per-crew lanes with each job block's column span and row
- Unscheduled jobs
- Conflicts grouped by crew
"""

from pathlib import Path
from typing import Union

from crewboard.domain.week import DAYS_PER_WEEK
from crewboard.scheduling.board import ScheduleBoard


class BoardReportGenerator:
    """Generates a text report of a schedule board.

    Example:
        >>> text = BoardReportGenerator().generate_to_string(board)
        >>> print(text)
    """

    def generate(self, board: ScheduleBoard, output_path: Union[str, Path]) -> str:
        """Generate the report and save it to a file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(board)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(self, board: ScheduleBoard) -> str:
        return self._generate_content(board)

    def _generate_content(self, board: ScheduleBoard) -> str:
        lines = []
        week = board.week
        column_width = board.layout.column_width

        lines.append("=" * 80)
        lines.append(f"CREW SCHEDULE - {week.range_label}")
        lines.append("=" * 80)
        lines.append("")

        day_header = " ".join(f"{d.strftime('%a %d'):^8}" for d in week.dates)
        lines.append(f"{'Crew':<16} {day_header}")
        lines.append("-" * 80)

        for crew in board.active_crews:
            lane = [a for a in board.lane(crew.id) if a.is_scheduled]
            positions = board.lane_positions(crew.id)
            utilization = board.crew_utilization(crew.id)
            lines.append(f"{crew.name[:16]:<16} {len(lane)} jobs, {utilization}% utilized")

            ordered = sorted(lane, key=lambda a: (positions[a.id].top, positions[a.id].left))
            for assignment in ordered:
                position = positions[assignment.id]
                first_col = int(position.left // column_width)
                cols = max(1, int(round(position.width / column_width)))
                last_col = min(DAYS_PER_WEEK, first_col + cols)
                cells = []
                for col in range(DAYS_PER_WEEK):
                    cells.append("########" if first_col <= col < last_col else "   .    ")
                row = int(position.top // board.layout.row_height)
                name = f"{assignment.label[:11]} r{row}"
                lines.append(f"  {name:<14} {' '.join(cells)}")
            lines.append("")

        unscheduled = board.unassigned
        if unscheduled:
            lines.append("-" * 80)
            lines.append(f"UNSCHEDULED ({len(unscheduled)})")
            lines.append("-" * 80)
            for assignment in unscheduled:
                reason = "no crew" if assignment.crew_id is None else "no valid dates"
                lines.append(f"  {assignment.label:<20} {assignment.title[:40]:<40} ({reason})")
            lines.append("")

        result = board.conflict_result
        lines.append("-" * 80)
        lines.append(
            f"CONFLICTS: {result.total_conflicts} "
            f"({result.error_count} errors, {result.warning_count} warnings)"
        )
        lines.append("-" * 80)
        for crew_id, conflicts in result.by_crew().items():
            crew = board.get_crew(crew_id)
            lines.append(f"{crew.name if crew else crew_id}:")
            for conflict in conflicts:
                lines.append(f"  {conflict}")

        lines.append("")
        lines.append("=" * 80)
        return "\n".join(lines)
