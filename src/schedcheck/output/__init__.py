"""Output generation for schedule reports (text, PDF)."""

from schedcheck.output.pdf_generator import PDFGenerator
from schedcheck.output.text_generator import TextReportGenerator

__all__ = [
    "PDFGenerator",
    "TextReportGenerator",
]
