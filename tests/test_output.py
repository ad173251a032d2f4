"""Tests for text and PDF report output."""

from datetime import date, time

import pytest

from schedcheck.domain.models import (
    DAY_OFF,
    Employee,
    LeaveRecord,
    Rules,
    Shift,
    Weekday,
)
from schedcheck.engine import ScheduleEngine
from schedcheck.output.pdf_generator import PDFGenerator
from schedcheck.output.text_generator import TextReportGenerator


@pytest.fixture
def report():
    """A four-week report with one violation and one warning."""
    shifts = [
        Shift(
            id="day",
            start=time(7, 0),
            end=time(15, 0),
            lunch_break_minutes=30,
            ideal_counts={d: 2 for d in Weekday},
            is_overtime_active=True,
        ),
        Shift(id="night", start=time(23, 0), end=time(7, 0), ideal_counts={d: 1 for d in Weekday}),
    ]
    roster = [
        Employee(
            id="E1",
            name="Alice",
            fixed_shifts={d: [DAY_OFF if d.is_weekend else "day"] for d in Weekday},
            shift_preferences=[1, 2],
        ),
        Employee(
            id="E2",
            name="Bob",
            fixed_shifts={d: ["night"] for d in Weekday},
            manual_shifts={date(2024, 1, 3): "ghost"},
            leave=[
                LeaveRecord(
                    id="L1",
                    start_date=date(2024, 1, 20),
                    end_date=date(2024, 1, 21),
                    leave_type="Sick",
                    hours_per_day=8,
                )
            ],
        ),
    ]
    rules = Rules(
        max_consecutive_shifts=5,
        min_weekends_off_per_period=1,
        min_hours_per_two_weeks=70,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 28),
    )
    return ScheduleEngine().evaluate(roster, shifts, rules)


class TestTextReportGenerator:
    """Tests for TextReportGenerator."""

    def test_sections_present(self, report):
        text = TextReportGenerator().generate_to_string(report)

        assert "SCHEDULE REPORT - 2024-01-01 to 2024-01-28" in text
        assert "EMPLOYEE HOURS" in text
        assert "COMPLIANCE VIOLATIONS" in text
        assert "SHIFT COVERAGE" in text
        assert "DATA WARNINGS (1)" in text
        assert text.rstrip().endswith("=" * 80)

    def test_lists_employees_and_violations(self, report):
        text = TextReportGenerator().generate_to_string(report)

        assert "Alice" in text
        assert "Bob" in text
        assert "max_consecutive_shifts" in text
        assert "ghost" in text

    def test_generate_writes_file(self, report, tmp_path):
        path = tmp_path / "report.txt"

        content = TextReportGenerator().generate(report, path)

        assert path.read_text() == content


class TestPDFGenerator:
    """Tests for PDFGenerator."""

    def test_generate_to_buffer(self, report):
        pytest.importorskip("reportlab")

        buffer = PDFGenerator().generate_to_buffer(report)

        assert buffer.read(4) == b"%PDF"

    def test_generate_writes_file(self, report, tmp_path):
        pytest.importorskip("reportlab")
        path = tmp_path / "report.pdf"

        PDFGenerator().generate(report, path, include_summary=False)

        assert path.exists()
        assert path.stat().st_size > 0

    def test_long_range_paginates(self, report):
        pytest.importorskip("reportlab")

        buffer = PDFGenerator(days_per_page=7).generate_to_buffer(report)

        assert len(buffer.getvalue()) > 0

    def test_many_shifts_continue_on_next_page(self):
        """Thirty shift rows do not fit one page; none may be dropped."""
        shifts = [
            Shift(id=f"s{n:02d}", start=time(n % 24, 0), end=time((n + 4) % 24, 0))
            for n in range(30)
        ]
        rules = Rules(start_date=date(2024, 1, 1), end_date=date(2024, 1, 28))
        report = ScheduleEngine().evaluate([], shifts, rules)

        pages = PDFGenerator()._coverage_pages(report)

        assert len(pages) == 6
        for days in (report.days[:14], report.days[14:]):
            rows = [s.shift_id for d, page in pages if d == days for s in page]
            assert rows == [s.id for s in shifts]

    def test_many_shifts_render(self):
        pytest.importorskip("reportlab")
        shifts = [
            Shift(id=f"s{n:02d}", start=time(n % 24, 0), end=time((n + 4) % 24, 0))
            for n in range(30)
        ]
        rules = Rules(start_date=date(2024, 1, 1), end_date=date(2024, 1, 7))
        report = ScheduleEngine().evaluate([], shifts, rules)

        buffer = PDFGenerator().generate_to_buffer(report, include_summary=False)

        assert buffer.read(4) == b"%PDF"
