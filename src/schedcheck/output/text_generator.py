"""Plain-text output for schedule reports.

This module creates text output to review:
- Per-employee hours by period and their status bands
- Compliance violations grouped by employee
- Shift coverage gaps and available overtime
- Data warnings raised while resolving the schedule
"""

from collections import defaultdict
from pathlib import Path
from typing import Union

from schedcheck.domain.policies import HoursStatus
from schedcheck.engine import ScheduleReport

STATUS_MARKS = {
    HoursStatus.INSUFFICIENT: "-",
    HoursStatus.OPTIMAL: "",
    HoursStatus.EXCESSIVE: "+",
}


class TextReportGenerator:
    """Generates human-readable text reports.

    Example:
        >>> generator = TextReportGenerator()
        >>> print(generator.generate_to_string(report))
    """

    def __init__(self, width: int = 80):
        self.width = width

    def generate(
        self,
        report: ScheduleReport,
        output_path: Union[str, Path],
    ) -> str:
        """Generate text output and save to file.

        Args:
            report: The evaluated schedule.
            output_path: Path to save the text file.

        Returns:
            The generated text content.
        """
        content = self._generate_content(report)
        Path(output_path).write_text(content)
        return content

    def generate_to_string(self, report: ScheduleReport) -> str:
        """Generate text output and return as string."""
        return self._generate_content(report)

    def _rule(self, char: str = "-") -> str:
        return char * self.width

    def _section(self, lines: list[str], title: str) -> None:
        lines.append(self._rule())
        lines.append(title)
        lines.append(self._rule())

    def _generate_content(self, report: ScheduleReport) -> str:
        lines = []
        summary = report.get_summary()

        lines.append(self._rule("="))
        lines.append(
            f"SCHEDULE REPORT - {report.start.isoformat()} to {report.end.isoformat()}"
        )
        lines.append(self._rule("="))
        lines.append("")

        lines.append(f"Days: {summary['days']}")
        lines.append(f"Employees: {summary['employees']}")
        lines.append(f"Shifts: {summary['shifts']}")
        lines.append(f"Total Hours: {summary['total_hours']:.2f}")
        lines.append(
            f"Violations: {summary['total_violations']} "
            f"({summary['non_compliant_employees']} non-compliant employees)"
        )
        lines.append(
            f"Understaffed Slots: {summary['understaffed_slots']} "
            f"(total gap {summary['total_gap']}, overtime available "
            f"{summary['total_overtime']})"
        )
        lines.append(f"Average Preference Match: {summary['avg_preference_match']:.2f}%")
        lines.append("")

        self._section(lines, f"EMPLOYEE HOURS (per {report.period_days}-day period)")
        lines.append(
            f"{'Name':<22} {'Days':>4} {'Leave':>5} {'Hours':>8} "
            f"{'Weekends':>8} {'Pref %':>7}  Periods"
        )
        for employee in report.employees:
            periods = " ".join(
                f"{hours:g}{STATUS_MARKS[status]}"
                for hours, status in zip(employee.hours_per_bucket, employee.hours_status)
            )
            weekends = f"{employee.free_weekends}/{employee.required_free_weekends}"
            lines.append(
                f"{employee.name[:22]:<22} {employee.days_worked:>4} "
                f"{employee.leave_days:>5} {employee.total_hours:>8.2f} "
                f"{weekends:>8} {employee.preference_match:>7.2f}  {periods}"
            )
        lines.append("")
        lines.append("  '-' below minimum, '+' above 125% of minimum")
        lines.append("")

        self._section(lines, "COMPLIANCE VIOLATIONS")
        violations = report.all_violations()
        if not violations:
            lines.append("None")
        else:
            by_employee = defaultdict(list)
            for violation in violations:
                by_employee[violation.employee_id].append(violation)
            for employee in report.employees:
                found = by_employee.get(employee.employee_id)
                if not found:
                    continue
                lines.append(f"\n{employee.name} ({len(found)}):")
                for violation in found:
                    lines.append(
                        f"  {violation.day.isoformat()} "
                        f"[{violation.violation_type.value}] {violation.message}"
                    )
        lines.append("")

        self._section(lines, "SHIFT COVERAGE")
        for shift_report in report.shifts:
            gaps = [c for c in shift_report.coverage if c.gap > 0]
            lines.append(
                f"\n{shift_report.shift_id} {shift_report.label} "
                f"(ranked first by {shift_report.preference_popularity:.2f}%)"
            )
            lines.append(
                f"  Understaffed days: {len(gaps)}, total gap {shift_report.total_gap}, "
                f"overtime available {shift_report.total_overtime}"
            )
            for cell in gaps:
                bar = "#" * cell.scheduled + "." * cell.gap
                lines.append(
                    f"    {cell.day.strftime('%a %Y-%m-%d')}: {bar} "
                    f"({cell.scheduled}/{cell.ideal}, OT {cell.overtime_available})"
                )
        lines.append("")

        if report.warnings:
            self._section(lines, f"DATA WARNINGS ({len(report.warnings)})")
            for warning in report.warnings:
                lines.append(str(warning))
            lines.append("")

        lines.append(self._rule("="))
        lines.append("END OF REPORT")
        lines.append(self._rule("="))

        return "\n".join(lines)
