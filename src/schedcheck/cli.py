"""Command-line interface for the schedcheck schedule evaluation tool."""

import argparse
import json
import logging
import sys
from datetime import date, time, timedelta
from typing import Optional

from schedcheck.domain.calendar import to_utc_date
from schedcheck.domain.integrity import ConfigurationError
from schedcheck.domain.models import (
    DAY_OFF,
    Employee,
    LeaveRecord,
    OvertimeEntry,
    Rules,
    Shift,
    Weekday,
)
from schedcheck.engine import ScheduleEngine, ScheduleReport
from schedcheck.output.pdf_generator import PDFGenerator
from schedcheck.output.text_generator import TextReportGenerator
from schedcheck.snapshot import SnapshotError, load_snapshot

logger = logging.getLogger(__name__)


def create_sample_shifts(start_date: Optional[date] = None) -> list[Shift]:
    """Create a day, evening and night shift with weekday staffing targets."""
    start_date = start_date or date.today()
    weekday_counts = {d: 3 for d in Weekday if not d.is_weekend}
    weekend_counts = {Weekday.SATURDAY: 2, Weekday.SUNDAY: 2}

    return [
        Shift(
            id="day",
            start=time(7, 0),
            end=time(15, 0),
            lunch_break_minutes=30,
            ideal_counts={**weekday_counts, **weekend_counts},
            is_overtime_active=True,
        ),
        Shift(
            id="evening",
            start=time(15, 0),
            end=time(23, 0),
            lunch_break_minutes=30,
            ideal_counts={d: 2 for d in Weekday},
        ),
        Shift(
            id="night",
            start=time(23, 0),
            end=time(7, 0),
            lunch_break_minutes=30,
            ideal_counts={d: 1 for d in Weekday},
            overtime_entries=[OvertimeEntry(day=start_date + timedelta(days=2), quantity=1)],
        ),
    ]


def create_sample_roster(
    count: int = 10,
    shifts: Optional[list[Shift]] = None,
    start_date: Optional[date] = None,
) -> list[Employee]:
    """Create sample employees for testing.

    Args:
        count: Number of employees to create.
        shifts: Shift list the fixed patterns refer to.
        start_date: First scheduled day; leave and manual overrides are
            placed relative to it.
    """
    shifts = shifts or create_sample_shifts(start_date)
    start_date = start_date or date.today()

    names = [
        "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry",
        "Ivy", "Jack", "Kate", "Leo", "Mia", "Noah", "Olivia", "Paul",
        "Quinn", "Rose", "Sam", "Tina", "Uma", "Victor", "Wendy", "Xavier",
    ]

    roster = []
    for i in range(count):
        name = names[i % len(names)]
        if i >= len(names):
            name = f"{name}{i // len(names) + 1}"

        home = shifts[i % len(shifts)]

        # Five working days, two rotating days off
        first_off = Weekday((i * 2) % 7)
        days_off = {first_off, Weekday((first_off + 1) % 7)}
        fixed = {
            d: [DAY_OFF if d in days_off else home.id]
            for d in Weekday
        }

        # Some employees work every day and break the streak rule
        if i % 7 == 3:
            fixed = {d: [home.id] for d in Weekday}

        manual = {}
        if i % 4 == 1:
            manual[start_date + timedelta(days=1)] = shifts[(i + 1) % len(shifts)].id

        leave = []
        if i % 5 == 2:
            leave.append(
                LeaveRecord(
                    id=f"L{i + 1:03d}",
                    start_date=start_date + timedelta(days=3),
                    end_date=start_date + timedelta(days=5),
                    leave_type="Vacation",
                    hours_per_day=7.5,
                )
            )

        # Every third employee prefers a shift other than their own
        preferences = [None] * len(shifts)
        preferences[(i if i % 3 else i + 1) % len(shifts)] = 1

        roster.append(
            Employee(
                id=f"E{i + 1:03d}",
                name=name,
                fixed_shifts=fixed,
                manual_shifts=manual,
                leave=leave,
                shift_preferences=preferences,
            )
        )

    return roster


def print_report(report: ScheduleReport) -> None:
    """Print a short console summary of a report."""
    summary = report.get_summary()

    print(f"\n{'=' * 60}")
    print(f"Schedule: {report.start} to {report.end} ({summary['days']} days)")
    print(f"{'=' * 60}")
    print(f"  Employees: {summary['employees']}")
    print(f"  Total Hours: {summary['total_hours']:.2f}")
    print(f"  Understaffed Slots: {summary['understaffed_slots']} "
          f"(gap {summary['total_gap']}, overtime {summary['total_overtime']})")
    print(f"  Avg Preference Match: {summary['avg_preference_match']:.2f}%")

    print("\nEmployees:")
    for employee in report.employees:
        status = "OK" if employee.is_compliant else f"{len(employee.violations)} violations"
        hours = ", ".join(f"{h:g}" for h in employee.hours_per_bucket)
        print(f"  {employee.name:<12} {employee.total_hours:>7.2f}h [{hours}]  "
              f"weekends {employee.free_weekends}/{employee.required_free_weekends}  "
              f"pref {employee.preference_match:.2f}%  {status}")

    violations = report.all_violations()
    if violations:
        print(f"\n  Compliance: FAILED ({len(violations)} violations)")
        for violation in violations[:10]:
            print(f"    - {violation}")
        if len(violations) > 10:
            print(f"    ... and {len(violations) - 10} more violations")
    else:
        print("\n  Compliance: PASSED")

    if report.warnings:
        print(f"\n  Data warnings: {len(report.warnings)}")
        for warning in report.warnings[:5]:
            print(f"    - {warning}")


def run_demo(
    employee_count: int = 10,
    days: int = 28,
    output_path: Optional[str] = None,
) -> ScheduleReport:
    """Evaluate a generated sample roster and print the results."""
    start_date = date.today()
    # Start on a Monday so full weeks line up with the hours periods
    start_date -= timedelta(days=start_date.weekday())
    end_date = start_date + timedelta(days=days - 1)

    print(f"Evaluating demo roster of {employee_count} employees over {days} days...")

    shifts = create_sample_shifts(start_date)
    roster = create_sample_roster(employee_count, shifts, start_date)
    rules = Rules(
        max_consecutive_shifts=5,
        min_rest_hours_between_shifts=10,
        min_weekends_off_per_period=1,
        min_hours_per_week=30,
        min_hours_per_two_weeks=70,
        min_days_off_after_max=2,
        start_date=start_date,
        end_date=end_date,
    )

    report = ScheduleEngine().evaluate(roster, shifts, rules)
    print_report(report)

    if output_path:
        print(f"\nGenerating PDF: {output_path}")
        PDFGenerator().generate(report, output_path)
        print("  PDF created successfully!")
    return report


def run_report(
    snapshot_path: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
    as_json: bool = False,
    text_path: Optional[str] = None,
    pdf_path: Optional[str] = None,
) -> ScheduleReport:
    """Evaluate a snapshot file and print or export the report."""
    snapshot = load_snapshot(snapshot_path)
    report = ScheduleEngine().evaluate(
        snapshot.roster,
        snapshot.shifts,
        snapshot.rules,
        to_utc_date(start) if start else None,
        to_utc_date(end) if end else None,
    )

    if as_json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_report(report)

    if text_path:
        TextReportGenerator().generate(report, text_path)
        logger.info("Text report written to %s", text_path)
    if pdf_path:
        PDFGenerator().generate(report, pdf_path)
        logger.info("PDF report written to %s", pdf_path)
    return report


def run_day(snapshot_path: str, day: str) -> None:
    """Print who is working or on leave on one day."""
    snapshot = load_snapshot(snapshot_path)
    target = to_utc_date(day)
    entries = ScheduleEngine().day_roster(snapshot.roster, snapshot.shifts, target)

    print(f"{target.strftime('%A, %B %d, %Y')}")
    if not entries:
        print("  Nobody is scheduled.")
        return

    working = [e for e in entries if not e.on_leave]
    on_leave = [e for e in entries if e.on_leave]
    for shift in snapshot.shifts:
        names = [e.name for e in working if e.shift_id == shift.id]
        if names:
            print(f"  {shift.id} ({shift.label}): {', '.join(names)}")
    if on_leave:
        print("  On leave:")
        for entry in on_leave:
            print(f"    {entry.name} - {entry.label}")


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="schedcheck - Schedule coverage and compliance evaluation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo                          Evaluate a 10-employee sample roster
  %(prog)s demo --count 20 --days 14     Larger roster, two weeks
  %(prog)s demo --output report.pdf      Generate PDF output

  %(prog)s report list.json              Evaluate a saved list
  %(prog)s report list.json --json       Print the report as JSON
  %(prog)s report list.json --start 2024-01-01 --end 2024-01-28

  %(prog)s day list.json 2024-01-08      Who is in on a given day
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    demo_parser = subparsers.add_parser("demo", help="Evaluate a generated sample roster")
    demo_parser.add_argument(
        "--count", "-c",
        type=int,
        default=10,
        help="Number of employees to generate (default: 10)",
    )
    demo_parser.add_argument(
        "--days", "-d",
        type=int,
        default=28,
        help="Number of days to evaluate (default: 28)",
    )
    demo_parser.add_argument(
        "--output", "-o",
        type=str,
        help="Output PDF file path",
    )

    report_parser = subparsers.add_parser("report", help="Evaluate a list snapshot file")
    report_parser.add_argument("snapshot", help="Path to the list JSON file")
    report_parser.add_argument("--start", "-s", type=str, help="First day (YYYY-MM-DD)")
    report_parser.add_argument("--end", "-e", type=str, help="Last day (YYYY-MM-DD)")
    report_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full report as JSON",
    )
    report_parser.add_argument("--text", "-t", type=str, help="Output text report path")
    report_parser.add_argument("--pdf", "-p", type=str, help="Output PDF file path")

    day_parser = subparsers.add_parser("day", help="Show who is in on one day")
    day_parser.add_argument("snapshot", help="Path to the list JSON file")
    day_parser.add_argument("date", help="Day to show (YYYY-MM-DD)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "demo":
            run_demo(args.count, args.days, args.output)
            return 0
        elif args.command == "report":
            run_report(args.snapshot, args.start, args.end, args.json, args.text, args.pdf)
            return 0
        elif args.command == "day":
            run_day(args.snapshot, args.date)
            return 0
        else:
            parser.print_help()
            return 1
    except (ConfigurationError, SnapshotError, ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
