"""PDF generation for schedule reports.

This module creates printable PDF reports showing:
- Per-employee hours, weekends, preference match and violations
- A shift-by-day coverage grid with gaps and overtime
- Summary statistics and data warnings
"""

from io import BytesIO
from pathlib import Path
from typing import Union

from schedcheck.domain.policies import HoursStatus
from schedcheck.engine import EmployeeReport, ScheduleReport

# Color definitions (RGB tuples, 0-1 scale)
COLORS = {
    HoursStatus.INSUFFICIENT: (0.95, 0.6, 0.6),  # Red
    HoursStatus.OPTIMAL: (0.6, 0.85, 0.6),  # Green
    HoursStatus.EXCESSIVE: (1.0, 0.85, 0.5),  # Amber
    "covered": (0.85, 0.95, 0.85),
    "understaffed": (0.98, 0.8, 0.8),
    "header": (0.85, 0.85, 0.9),
}


class PDFGenerator:
    """Generates printable PDF schedule reports.

    Example:
        >>> generator = PDFGenerator()
        >>> generator.generate(report, "report.pdf")
    """

    def __init__(
        self,
        page_width: float = 792,  # Letter landscape width (11")
        page_height: float = 612,  # Letter landscape height (8.5")
        margin: float = 36,  # 0.5 inch margins
        days_per_page: int = 14,
    ):
        self.page_width = page_width
        self.page_height = page_height
        self.margin = margin
        self.days_per_page = days_per_page

    def generate(
        self,
        report: ScheduleReport,
        output_path: Union[str, Path],
        include_summary: bool = True,
    ) -> None:
        """Generate PDF report and save to file.

        Args:
            report: The evaluated schedule.
            output_path: Path to save the PDF.
            include_summary: Whether to include the summary page.
        """
        canvas, pagesize = self._load_reportlab()
        c = canvas.Canvas(str(output_path), pagesize=pagesize)
        self._draw(c, report, include_summary)
        c.save()

    def generate_to_buffer(
        self,
        report: ScheduleReport,
        include_summary: bool = True,
    ) -> BytesIO:
        """Generate PDF and return as bytes buffer."""
        canvas, pagesize = self._load_reportlab()
        buffer = BytesIO()
        c = canvas.Canvas(buffer, pagesize=pagesize)
        self._draw(c, report, include_summary)
        c.save()
        buffer.seek(0)
        return buffer

    def _load_reportlab(self):
        try:
            from reportlab.lib.pagesizes import landscape, letter
            from reportlab.pdfgen import canvas
        except ImportError:
            raise ImportError(
                "reportlab is required for PDF generation. "
                "Install with: pip install reportlab"
            )
        return canvas, landscape(letter)

    def _draw(self, c, report: ScheduleReport, include_summary: bool) -> None:
        if include_summary:
            self._draw_summary_page(c, report)
        self._draw_employee_pages(c, report)
        self._draw_coverage_pages(c, report)

    def _draw_header(self, c, title: str, subtitle: str) -> float:
        """Draw page header and return the y position below it."""
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 16)
        c.drawString(self.margin, self.page_height - self.margin - 20, title)
        c.setFont("Helvetica", 10)
        c.drawString(self.margin, self.page_height - self.margin - 35, subtitle)
        return self.page_height - self.margin - 60

    def _range_text(self, report: ScheduleReport) -> str:
        return (
            f"{report.start.strftime('%b %d, %Y')} - {report.end.strftime('%b %d, %Y')} "
            f"({report.num_days} days)"
        )

    def _draw_page_number(self, c, page_num: int, total_pages: int) -> None:
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica", 9)
        c.drawCentredString(
            self.page_width / 2,
            self.margin - 10,
            f"Page {page_num} of {total_pages}",
        )

    def _draw_summary_page(self, c, report: ScheduleReport) -> None:
        y = self._draw_header(c, "Schedule Summary", self._range_text(report))
        summary = report.get_summary()

        c.setFont("Helvetica-Bold", 12)
        c.drawString(self.margin, y, "Overview")
        y -= 20

        stats = [
            f"Employees: {summary['employees']}",
            f"Shifts: {summary['shifts']}",
            f"Total Hours: {summary['total_hours']:.2f}",
            f"Violations: {summary['total_violations']} "
            f"({summary['non_compliant_employees']} employees)",
            f"Understaffed Slots: {summary['understaffed_slots']} "
            f"(gap {summary['total_gap']})",
            f"Overtime Available: {summary['total_overtime']}",
            f"Average Preference Match: {summary['avg_preference_match']:.2f}%",
        ]
        c.setFont("Helvetica", 10)
        for stat in stats:
            c.drawString(self.margin + 20, y, stat)
            y -= 15

        if report.warnings:
            y -= 15
            c.setFont("Helvetica-Bold", 12)
            c.drawString(self.margin, y, f"Data Warnings ({len(report.warnings)})")
            y -= 18
            c.setFont("Helvetica", 8)
            for warning in report.warnings:
                if y < self.margin + 20:
                    c.drawString(self.margin + 20, y, "...")
                    break
                c.drawString(self.margin + 20, y, str(warning)[:140])
                y -= 11

        c.showPage()

    def _draw_employee_pages(self, c, report: ScheduleReport) -> None:
        """Draw the per-employee table, one row per employee."""
        row_height = 18
        header_height = 60
        footer_height = 40
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = max(1, int(usable_height / row_height) - 1)

        columns = [
            ("Employee", 150),
            ("Days", 40),
            ("Leave", 40),
            ("Hours", 55),
            ("Per period", 200),
            ("Weekends", 60),
            ("Pref. %", 55),
            ("Violations", 70),
        ]

        employees = report.employees
        total_pages = max(1, (len(employees) + rows_per_page - 1) // rows_per_page)
        for page_index in range(total_pages):
            page_rows = employees[page_index * rows_per_page : (page_index + 1) * rows_per_page]
            y = self._draw_header(c, "Employee Hours & Compliance", self._range_text(report))

            x = self.margin
            c.setFillColorRGB(*COLORS["header"])
            c.rect(self.margin, y - 4, sum(w for _, w in columns), row_height, fill=1, stroke=0)
            c.setFillColorRGB(0, 0, 0)
            c.setFont("Helvetica-Bold", 8)
            for title, width in columns:
                c.drawString(x + 2, y + 2, title)
                x += width

            for employee in page_rows:
                y -= row_height
                self._draw_employee_row(c, employee, columns, y, row_height)

            self._draw_page_number(c, page_index + 1, total_pages)
            c.showPage()

    def _draw_employee_row(
        self,
        c,
        employee: EmployeeReport,
        columns: list[tuple[str, int]],
        y: float,
        row_height: float,
    ) -> None:
        widths = [w for _, w in columns]
        x = self.margin
        c.setFont("Helvetica", 8)
        c.setFillColorRGB(0, 0, 0)

        cells = [
            employee.name[:28],
            str(employee.days_worked),
            str(employee.leave_days),
            f"{employee.total_hours:.2f}",
        ]
        for text, width in zip(cells, widths[:4]):
            c.drawString(x + 2, y + 2, text)
            x += width

        # Per-period hours, colored by status band
        period_width = widths[4]
        if employee.hours_per_bucket:
            cell_width = period_width / len(employee.hours_per_bucket)
            for hours, status in zip(employee.hours_per_bucket, employee.hours_status):
                c.setFillColorRGB(*COLORS[status])
                c.rect(x + 1, y - 2, cell_width - 2, row_height - 4, fill=1, stroke=0)
                c.setFillColorRGB(0, 0, 0)
                c.drawCentredString(x + cell_width / 2, y + 2, f"{hours:g}")
                x += cell_width
        else:
            x += period_width

        c.drawString(x + 2, y + 2, f"{employee.free_weekends}/{employee.required_free_weekends}")
        x += widths[5]
        c.drawString(x + 2, y + 2, f"{employee.preference_match:.2f}")
        x += widths[6]

        if employee.violations:
            c.setFillColorRGB(0.8, 0.1, 0.1)
        c.drawString(x + 2, y + 2, str(len(employee.violations)))
        c.setFillColorRGB(0, 0, 0)

    def _coverage_pages(self, report: ScheduleReport) -> list[tuple[list, list]]:
        """Split the coverage grid into (days, shift rows) pages.

        Days are chunked by ``days_per_page``; shift rows that do not fit
        below the header continue on further pages for the same days.
        """
        header_height = 60
        footer_height = 40
        row_height = 30
        usable_height = self.page_height - 2 * self.margin - header_height - footer_height
        rows_per_page = max(1, int(usable_height / row_height))

        pages = []
        for i in range(0, len(report.days), self.days_per_page):
            days = report.days[i : i + self.days_per_page]
            for j in range(0, len(report.shifts), rows_per_page):
                pages.append((days, report.shifts[j : j + rows_per_page]))
        return pages

    def _draw_coverage_pages(self, c, report: ScheduleReport) -> None:
        """Draw the coverage grid: shifts as rows, days as columns."""
        if not report.shifts or not report.days:
            return

        label_width = 110
        row_height = 30
        grid_width = self.page_width - 2 * self.margin - label_width

        pages = self._coverage_pages(report)
        for page_index, (days, shift_reports) in enumerate(pages):
            y = self._draw_header(
                c,
                "Shift Coverage (scheduled / ideal)",
                self._range_text(report),
            )
            cell_width = grid_width / len(days)
            x0 = self.margin + label_width

            c.setFont("Helvetica-Bold", 7)
            for i, day in enumerate(days):
                c.drawCentredString(x0 + (i + 0.5) * cell_width, y + 8, day.strftime("%a"))
                c.drawCentredString(x0 + (i + 0.5) * cell_width, y - 1, day.strftime("%m/%d"))

            for shift_report in shift_reports:
                y -= row_height
                c.setFillColorRGB(0, 0, 0)
                c.setFont("Helvetica-Bold", 8)
                c.drawString(self.margin, y + row_height / 2, shift_report.shift_id[:20])
                c.setFont("Helvetica", 7)
                c.drawString(self.margin, y + row_height / 2 - 9, shift_report.label)

                for i, day in enumerate(days):
                    cell = report.coverage_for(shift_report.shift_id, day)
                    if cell is None:
                        continue
                    cx = x0 + i * cell_width
                    color = COLORS["covered"] if cell.is_covered else COLORS["understaffed"]
                    c.setFillColorRGB(*color)
                    c.setStrokeColorRGB(0.7, 0.7, 0.7)
                    c.rect(cx, y, cell_width, row_height - 2, fill=1, stroke=1)

                    c.setFillColorRGB(0, 0, 0)
                    c.setFont("Helvetica", 8)
                    c.drawCentredString(
                        cx + cell_width / 2,
                        y + row_height / 2,
                        f"{cell.scheduled}/{cell.ideal}",
                    )
                    if cell.overtime_available:
                        c.setFont("Helvetica", 6)
                        c.drawCentredString(
                            cx + cell_width / 2,
                            y + 4,
                            f"OT {cell.overtime_available}",
                        )

            self._draw_page_number(c, page_index + 1, len(pages))
            c.showPage()
