"""PDF generation for the weekly crew board.

This module creates printable PDF boards showing:
- One lane per crew across the seven day columns of the week
- Job blocks placed and stacked exactly as on screen
- Conflict markers on blocks, and a conflict summary page
"""

from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Union

from crewboard.scheduling.board import ScheduleBoard
from crewboard.validation.conflicts import ConflictSeverity

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    ConflictSeverity.ERROR: (0.86, 0.15, 0.15),  # Red
    ConflictSeverity.WARNING: (0.96, 0.62, 0.04),  # Amber
    "grid": (0.8, 0.8, 0.8),
    "today": (1.0, 0.98, 0.85),
    "lane": (0.97, 0.97, 0.97),
}


def _hex_to_rgb(value: str) -> tuple[float, float, float]:
    """Convert '#RRGGBB' to an RGB tuple, falling back to gray."""
    value = value.lstrip("#")
    if len(value) != 6:
        return (0.5, 0.5, 0.5)
    try:
        return tuple(int(value[i : i + 2], 16) / 255.0 for i in (0, 2, 4))
    except ValueError:
        return (0.5, 0.5, 0.5)


class PDFGenerator:
    """Generates printable PDF crew boards.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(board, "week.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        name_column_width: float = 110,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.name_column_width = name_column_width

    def generate(
        self,
        board: ScheduleBoard,
        output_path: Union[str, Path],
        include_summary: bool = True,
    ) -> None:
        """Generate the PDF board and save it to a file."""
        try:
            from reportlab.lib.pagesizes import letter, landscape
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        c = canvas.Canvas(str(output_path), pagesize=landscape(letter))
        self._draw_board_pages(c, board)
        if include_summary:
            self._draw_summary_page(c, board)
        c.save()

    def generate_to_buffer(
        self,
        board: ScheduleBoard,
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate the PDF board and return it as a bytes buffer."""
        try:
            from reportlab.lib.pagesizes import letter, landscape
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )

        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=landscape(letter))
        self._draw_board_pages(c, board)
        if include_summary:
            self._draw_summary_page(c, board)
        c.save()
        buffer.seek(0)
        return buffer

    @property
    def _grid_left(self) -> float:
        return self.margin + self.name_column_width

    @property
    def _column_width(self) -> float:
        return (self.page_width - self.margin - self._grid_left) / 7

    def _draw_board_pages(self, c, board: ScheduleBoard) -> None:
        """Draw crew lanes, starting a new page when a lane does not fit."""
        scale = self._column_width / board.layout.column_width
        header_height = 70
        top = self.page_height - self.margin - header_height
        bottom = self.margin + 30

        crews = board.active_crews
        page_num = 1
        self._draw_page_frame(c, board, page_num)
        y = top

        for crew in crews:
            lane_height = max(36.0, board.lane_height(crew.id) * scale + 8)
            if y - lane_height < bottom and y != top:
                c.showPage()
                page_num += 1
                self._draw_page_frame(c, board, page_num)
                y = top
            self._draw_lane(c, board, crew.id, y, lane_height, scale)
            y -= lane_height

        c.showPage()

    def _draw_page_frame(self, c, board: ScheduleBoard, page_num: int) -> None:
        """Draw title, day headers and legend for a board page."""
        week = board.week
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Crew Schedule - {week.range_label}",
        )

        result = board.conflict_result
        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 35,
            f"{len(board.active_crews)} crews, {len(board.assignments)} jobs, "
            f"{result.error_count} conflicts, {result.warning_count} warnings",
        )

        header_y = self.page_height - self.margin - 60
        today_col = week.column_for(date.today())
        if today_col is not None:
            c.setFillColorRGB(*COLORS["today"])
            c.rect(
                self._grid_left + today_col * self._column_width,
                header_y - 5,
                self._column_width,
                16,
                fill=1,
                stroke=0,
            )

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 9)
        for i, day in enumerate(week.dates):
            x = self._grid_left + i * self._column_width
            c.drawCentredString(
                x + self._column_width / 2,
                header_y,
                day.strftime("%a %b %d"),
            )

        self._draw_legend(c, self.margin, self.margin + 10)

        c.setFont("Helvetica", 9)
        c.drawCentredString(self.page_width / 2, self.margin - 10, f"Page {page_num}")

    def _draw_lane(
        self,
        c,
        board: ScheduleBoard,
        crew_id: str,
        y_top: float,
        height: float,
        scale: float,
    ) -> None:
        """Draw one crew lane with its job blocks."""
        crew = board.get_crew(crew_id)
        y = y_top - height

        c.setFillColorRGB(*COLORS["lane"])
        c.rect(self._grid_left, y, self._column_width * 7, height, fill=1, stroke=0)

        # Day column separators
        c.setStrokeColorRGB(*COLORS["grid"])
        c.setLineWidth(0.5)
        for i in range(8):
            x = self._grid_left + i * self._column_width
            c.line(x, y, x, y_top)
        c.line(self.margin, y, self.page_width - self.margin, y)

        # Crew name and utilization
        c.setFillColorRGB(*_hex_to_rgb(crew.color if crew else "#6B7280"))
        c.circle(self.margin + 4, y_top - 12, 3, fill=1, stroke=0)
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 9)
        c.drawString(self.margin + 12, y_top - 15, (crew.name if crew else crew_id)[:18])
        c.setFont("Helvetica", 7)
        c.drawString(
            self.margin + 12,
            y_top - 25,
            f"{board.crew_utilization(crew_id)}% utilized",
        )

        result = board.conflict_result
        positions = board.lane_positions(crew_id)
        lane = [a for a in board.lane(crew_id) if a.is_scheduled]
        grid_right = self._grid_left + self._column_width * 7

        for assignment in sorted(lane, key=lambda a: positions[a.id].z_index):
            position = positions[assignment.id]
            bx = self._grid_left + position.left * scale
            bw = min(position.width * scale, grid_right - bx)
            bh = board.layout.block_height * scale
            by = y_top - 4 - position.top * scale - bh

            c.setFillColorRGB(*_hex_to_rgb(assignment.color))
            c.rect(bx + 1, by, bw - 2, bh, fill=1, stroke=0)

            severity = result.highest_severity(assignment.id)
            if severity is not None:
                c.setStrokeColorRGB(*COLORS[severity])
                c.setLineWidth(1.5)
                c.rect(bx + 1, by, bw - 2, bh, fill=0, stroke=1)

            c.setFillColorRGB(1, 1, 1)
            c.setFont("Helvetica-Bold", 7)
            c.drawString(bx + 4, by + bh - 9, assignment.label[:20])
            c.setFont("Helvetica", 6)
            if bh > 20:
                c.drawString(bx + 4, by + bh - 17, assignment.customer_name[:24])

    def _draw_legend(self, c, x: float, y: float) -> None:
        """Draw legend for conflict markers."""
        c.setFont("Helvetica-Bold", 8)
        c.setFillColorRGB(0, 0, 0)
        c.drawString(x, y, "Legend:")

        items = [
            (ConflictSeverity.ERROR, "Conflict"),
            (ConflictSeverity.WARNING, "Back-to-back"),
        ]

        c.setFont("Helvetica", 7)
        current_x = x + 45
        for key, label in items:
            c.setStrokeColorRGB(*COLORS[key])
            c.setLineWidth(1.5)
            c.rect(current_x, y - 2, 12, 10, fill=0, stroke=1)
            c.setFillColorRGB(0, 0, 0)
            c.drawString(current_x + 15, y, label)
            current_x += 80

    def _draw_summary_page(self, c, board: ScheduleBoard) -> None:
        """Draw conflict summary grouped by crew."""
        c.setFont("Helvetica-Bold", 16)
        c.drawString(
            self.margin,
            self.page_height - self.margin - 20,
            f"Scheduling Conflicts - {board.week.range_label}",
        )

        result = board.conflict_result
        y = self.page_height - self.margin - 50
        c.setFont("Helvetica", 10)
        c.drawString(
            self.margin,
            y,
            f"{result.total_conflicts} conflicts detected: "
            f"{result.error_count} errors, {result.warning_count} warnings",
        )
        y -= 25

        for crew_id, conflicts in result.by_crew().items():
            if y < self.margin + 40:
                c.showPage()
                y = self.page_height - self.margin - 20
            crew = board.get_crew(crew_id)
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 11)
            c.drawString(self.margin, y, crew.name if crew else crew_id)
            y -= 15

            c.setFont("Helvetica", 9)
            for conflict in conflicts:
                if y < self.margin + 20:
                    c.showPage()
                    y = self.page_height - self.margin - 20
                    c.setFont("Helvetica", 9)
                c.setFillColorRGB(*COLORS[conflict.severity])
                c.rect(self.margin + 10, y - 2, 8, 8, fill=1, stroke=0)
                c.setFillColorRGB(0, 0, 0)
                c.drawString(self.margin + 25, y, conflict.message)
                y -= 13
            y -= 8

        c.showPage()
