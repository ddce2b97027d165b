"""Local filtering, sorting and aggregation over joined attendance records.

The store cannot filter on fields of joined relations (course and student
live on the enrollment, the date on the lesson), so those predicates run
here over the already-fetched superset.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from ..common.datetime_utils import end_of_day, parse_optional_date, start_of_day
from ..core.enums import AttendanceStatus, SortField, SortOrder
from ..core.exceptions import ValidationError
from .model import AttendanceDetail, AttendanceFilter, AttendanceStats, LessonSummary, RosterEntry


def _predicates(f: AttendanceFilter) -> List[Callable[[AttendanceDetail], bool]]:
    preds: List[Callable[[AttendanceDetail], bool]] = []

    if f.course_id is not None:
        preds.append(lambda d: d.enrollment is not None and d.enrollment.course_id == f.course_id)
    if f.student_id is not None:
        preds.append(lambda d: d.enrollment is not None and d.enrollment.student_id == f.student_id)
    if f.lesson_id is not None:
        preds.append(lambda d: d.record.lesson_id == f.lesson_id)
    if f.status is not None:
        preds.append(lambda d: d.record.status == f.status)

    # A record without a lesson has no date and never matches a date bound.
    if f.date_from is not None:
        lower = start_of_day(f.date_from)
        preds.append(lambda d: d.lesson_date is not None and d.lesson_date >= lower)
    if f.date_to is not None:
        upper = end_of_day(f.date_to)
        preds.append(lambda d: d.lesson_date is not None and d.lesson_date <= upper)

    return preds


def apply_filter(records: Iterable[AttendanceDetail], f: AttendanceFilter) -> List[AttendanceDetail]:
    preds = _predicates(f)
    return [r for r in records if all(pred(r) for pred in preds)]


def _text(value: Optional[str]) -> str:
    return (value or "").casefold()


_TEXT_KEYS: Mapping[SortField, Callable[[AttendanceDetail], str]] = {
    SortField.STUDENT: lambda d: _text(d.student.full_name if d.student else None),
    SortField.COURSE: lambda d: _text(d.course.name if d.course else None),
    SortField.LESSON: lambda d: _text(d.lesson.title if d.lesson else None),
    SortField.STATUS: lambda d: d.record.status.value,
}


def sort_records(
    records: Sequence[AttendanceDetail],
    field: SortField = SortField.DATE,
    order: SortOrder = SortOrder.DESC,
) -> List[AttendanceDetail]:
    """Stable sort for the report table.

    Equal keys keep their input order in both directions. Records with no
    lesson date go last whichever way dates are ordered.
    """

    reverse = order == SortOrder.DESC

    if field == SortField.DATE:
        dated = [r for r in records if r.lesson_date is not None]
        undated = [r for r in records if r.lesson_date is None]
        return sorted(dated, key=lambda r: r.lesson_date, reverse=reverse) + undated

    return sorted(records, key=_TEXT_KEYS[field], reverse=reverse)


def count_statuses(statuses: Iterable[Optional[str]]) -> AttendanceStats:
    """Count by status. Unknown or null statuses count only toward ``total``."""

    counts = {s: 0 for s in AttendanceStatus}
    total = 0
    for status in statuses:
        total += 1
        try:
            counts[AttendanceStatus(status)] += 1
        except ValueError:
            continue

    return AttendanceStats(
        present=counts[AttendanceStatus.PRESENT],
        absent=counts[AttendanceStatus.ABSENT],
        late=counts[AttendanceStatus.LATE],
        excused=counts[AttendanceStatus.EXCUSED],
        total=total,
    )


def summarize_roster(roster: Sequence[RosterEntry]) -> LessonSummary:
    """Per-lesson counts; a student's status is their first (only) attendance entry."""

    statuses = [e.current_status for e in roster]
    return LessonSummary(
        total_students=len(roster),
        marked=sum(1 for e in roster if e.is_marked),
        present=statuses.count(AttendanceStatus.PRESENT),
        absent=statuses.count(AttendanceStatus.ABSENT),
        late=statuses.count(AttendanceStatus.LATE),
        excused=statuses.count(AttendanceStatus.EXCUSED),
    )


@dataclass(frozen=True)
class ReportQuery:
    filter: AttendanceFilter
    sort: SortField = SortField.DATE
    order: SortOrder = SortOrder.DESC


def _optional_id(args: Mapping[str, str], key: str) -> Optional[int]:
    value = (args.get(key) or "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Invalid {key}: {value!r}")


def parse_report_query(args: Mapping[str, str]) -> ReportQuery:
    """Map ``course, student, lesson, status, from, to, sort, order`` query parameters.

    Unknown sort fields fall back to date; an unknown order falls back to desc.
    """

    status_s = (args.get("status") or "").strip()
    try:
        status = AttendanceStatus(status_s) if status_s else None
    except ValueError:
        raise ValidationError(f"Unknown attendance status: {status_s!r}")

    try:
        sort = SortField((args.get("sort") or SortField.DATE.value).strip())
    except ValueError:
        sort = SortField.DATE
    try:
        order = SortOrder((args.get("order") or SortOrder.DESC.value).strip())
    except ValueError:
        order = SortOrder.DESC

    return ReportQuery(
        filter=AttendanceFilter(
            course_id=_optional_id(args, "course"),
            student_id=_optional_id(args, "student"),
            lesson_id=_optional_id(args, "lesson"),
            status=status,
            date_from=parse_optional_date(args.get("from")),
            date_to=parse_optional_date(args.get("to")),
        ),
        sort=sort,
        order=order,
    )
