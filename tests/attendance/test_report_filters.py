from __future__ import annotations

from datetime import date, datetime

import pytest

from src.tutoring_admin.tutoring_admin.attendance.filters import (
    apply_filter,
    count_statuses,
    parse_report_query,
    sort_records,
    summarize_roster,
)
from src.tutoring_admin.tutoring_admin.attendance.model import (
    AttendanceDetail,
    AttendanceFilter,
    AttendanceRecord,
    RosterEntry,
)
from src.tutoring_admin.tutoring_admin.core.enums import AttendanceStatus, EnrollmentStatus, SortField, SortOrder
from src.tutoring_admin.tutoring_admin.core.exceptions import ValidationError
from src.tutoring_admin.tutoring_admin.courses.model import Course
from src.tutoring_admin.tutoring_admin.enrollments.model import Enrollment
from src.tutoring_admin.tutoring_admin.lessons.model import Lesson
from src.tutoring_admin.tutoring_admin.students.model import Student


def _detail(
    attendance_id: int,
    *,
    student: str = "Dana",
    course: str = "Algebra",
    lesson_title: str = "Lesson",
    when: datetime | None = datetime(2026, 3, 2, 16, 0),
    status: AttendanceStatus = AttendanceStatus.PRESENT,
    course_id: int = 10,
    student_id: int = 20,
    lesson_id: int = 30,
) -> AttendanceDetail:
    enrollment = Enrollment(
        enrollment_id=100 + attendance_id,
        user_id=1,
        student_id=student_id,
        course_id=course_id,
        status=EnrollmentStatus.ACTIVE,
    )
    lesson = None
    if when is not None:
        lesson = Lesson(lesson_id=lesson_id, user_id=1, course_id=course_id, title=lesson_title, lesson_date=when)
    return AttendanceDetail(
        record=AttendanceRecord(
            attendance_id=attendance_id,
            user_id=1,
            enrollment_id=enrollment.enrollment_id,
            lesson_id=lesson_id,
            status=status,
            marked_at=datetime(2026, 3, 2, 17, 0),
        ),
        enrollment=enrollment,
        student=Student(student_id=student_id, user_id=1, full_name=student, email=f"{student.lower()}@example.com"),
        course=Course(course_id=course_id, user_id=1, name=course, color="#000000"),
        lesson=lesson,
    )


def _ids(records):
    return [r.record.attendance_id for r in records]


def test_filter_is_conjunctive():
    records = [
        _detail(1, course_id=10, status=AttendanceStatus.PRESENT),
        _detail(2, course_id=10, status=AttendanceStatus.ABSENT),
        _detail(3, course_id=11, status=AttendanceStatus.PRESENT),
    ]

    out = apply_filter(records, AttendanceFilter(course_id=10, status=AttendanceStatus.PRESENT))
    assert _ids(out) == [1]


def test_empty_filter_returns_everything_in_order():
    records = [_detail(3), _detail(1), _detail(2)]
    assert _ids(apply_filter(records, AttendanceFilter())) == [3, 1, 2]


def test_date_to_includes_the_whole_day():
    records = [
        _detail(1, when=datetime(2026, 3, 2, 23, 59, 59, 500000)),
        _detail(2, when=datetime(2026, 3, 3, 0, 0)),
        _detail(3, when=datetime(2026, 3, 1, 8, 0)),
    ]

    out = apply_filter(records, AttendanceFilter(date_from=date(2026, 3, 2), date_to=date(2026, 3, 2)))
    assert _ids(out) == [1]


def test_records_without_a_lesson_fail_any_date_bound():
    records = [_detail(1, when=None), _detail(2)]

    assert _ids(apply_filter(records, AttendanceFilter(date_from=date(2000, 1, 1)))) == [2]
    assert _ids(apply_filter(records, AttendanceFilter(date_to=date(2100, 1, 1)))) == [2]
    assert _ids(apply_filter(records, AttendanceFilter(course_id=10))) == [1, 2]


def test_sort_by_student_ignores_case():
    records = [_detail(1, student="carl"), _detail(2, student="Bob"), _detail(3, student="avi")]

    assert _ids(sort_records(records, SortField.STUDENT, SortOrder.ASC)) == [3, 2, 1]
    assert _ids(sort_records(records, SortField.STUDENT, SortOrder.DESC)) == [1, 2, 3]


def test_sort_is_stable_for_equal_keys_in_both_directions():
    records = [_detail(1, course="Same"), _detail(2, course="Same"), _detail(3, course="Other")]

    assert _ids(sort_records(records, SortField.COURSE, SortOrder.ASC)) == [3, 1, 2]
    assert _ids(sort_records(records, SortField.COURSE, SortOrder.DESC)) == [1, 2, 3]


def test_sort_by_date_defaults_to_newest_first_with_undated_last():
    records = [
        _detail(1, when=datetime(2026, 3, 1, 10, 0)),
        _detail(2, when=None),
        _detail(3, when=datetime(2026, 3, 5, 10, 0)),
    ]

    assert _ids(sort_records(records)) == [3, 1, 2]
    assert _ids(sort_records(records, SortField.DATE, SortOrder.ASC)) == [1, 3, 2]


def test_sort_by_status_and_lesson():
    records = [
        _detail(1, status=AttendanceStatus.PRESENT, lesson_title="b"),
        _detail(2, status=AttendanceStatus.ABSENT, lesson_title="A"),
        _detail(3, status=AttendanceStatus.LATE, lesson_title="c"),
    ]

    assert _ids(sort_records(records, SortField.STATUS, SortOrder.ASC)) == [2, 3, 1]
    assert _ids(sort_records(records, SortField.LESSON, SortOrder.ASC)) == [2, 1, 3]


def test_count_statuses_counts_unknown_only_in_total():
    stats = count_statuses(["present", "present", "late", None, "bogus", "excused", "absent"])

    assert stats.as_dict() == {"present": 2, "absent": 1, "late": 1, "excused": 1, "total": 7}


def test_count_statuses_empty():
    assert count_statuses([]).total == 0


def test_summarize_roster():
    def entry(eid: int, status: AttendanceStatus | None) -> RosterEntry:
        enrollment = Enrollment(enrollment_id=eid, user_id=1, student_id=eid, course_id=1, status=EnrollmentStatus.ACTIVE)
        attendance = ()
        if status is not None:
            attendance = (
                AttendanceRecord(
                    attendance_id=eid,
                    user_id=1,
                    enrollment_id=eid,
                    lesson_id=1,
                    status=status,
                    marked_at=datetime(2026, 3, 2, 17, 0),
                ),
            )
        return RosterEntry(enrollment=enrollment, student=None, attendance=attendance)

    summary = summarize_roster(
        [entry(1, AttendanceStatus.PRESENT), entry(2, AttendanceStatus.LATE), entry(3, None), entry(4, AttendanceStatus.PRESENT)]
    )

    assert summary.total_students == 4
    assert summary.marked == 3
    assert summary.present == 2
    assert summary.late == 1
    assert summary.absent == 0
    assert summary.excused == 0


def test_parse_report_query_defaults():
    q = parse_report_query({})

    assert q.filter == AttendanceFilter()
    assert q.sort == SortField.DATE
    assert q.order == SortOrder.DESC


def test_parse_report_query_reads_all_parameters():
    q = parse_report_query(
        {
            "course": "3",
            "student": "4",
            "lesson": "5",
            "status": "late",
            "from": "2026-03-01",
            "to": "2026-03-31",
            "sort": "student",
            "order": "asc",
        }
    )

    assert q.filter == AttendanceFilter(
        course_id=3,
        student_id=4,
        lesson_id=5,
        status=AttendanceStatus.LATE,
        date_from=date(2026, 3, 1),
        date_to=date(2026, 3, 31),
    )
    assert q.sort == SortField.STUDENT
    assert q.order == SortOrder.ASC


def test_parse_report_query_unknown_sort_falls_back():
    q = parse_report_query({"sort": "shoe-size", "order": "sideways"})

    assert q.sort == SortField.DATE
    assert q.order == SortOrder.DESC


@pytest.mark.parametrize(
    "args",
    [
        {"status": "asleep"},
        {"course": "abc"},
        {"from": "03/01/2026"},
    ],
)
def test_parse_report_query_rejects_bad_values(args):
    with pytest.raises(ValidationError):
        parse_report_query(args)


def test_date_sort_directions_are_exact_reverses():
    records = [_detail(i, when=datetime(2026, 3, i, 9, 0)) for i in (4, 1, 3, 2)]

    asc = _ids(sort_records(records, SortField.DATE, SortOrder.ASC))
    desc = _ids(sort_records(records, SortField.DATE, SortOrder.DESC))

    assert asc == [1, 2, 3, 4]
    assert desc == list(reversed(asc))


def test_date_to_boundary_at_midnight():
    records = [_detail(1, when=datetime(2026, 3, 2, 0, 0)), _detail(2, when=datetime(2026, 3, 3, 0, 0, 1))]

    assert _ids(apply_filter(records, AttendanceFilter(date_to=date(2026, 3, 2)))) == [1]
