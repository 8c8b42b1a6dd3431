"""Output generation for crew boards (text report, PDF)."""

from crewboard.output.pdf_generator import PDFGenerator
from crewboard.output.text_report import BoardReportGenerator

__all__ = [
    "BoardReportGenerator",
    "PDFGenerator",
]
