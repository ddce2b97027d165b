from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.invalidation import ContextInvalidator, ViewInvalidator
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.service import CourseService
from .database.connection import DatabaseConnection, DBConfig
from .emails.mysql_email_log_repository import MySQLEmailLogRepository
from .emails.service import EmailService
from .emails.transport import EmailTransport, ResendEmailTransport
from .enrollments.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollments.service import EnrollmentService
from .lessons.mysql_lesson_repository import MySQLLessonRepository
from .lessons.service import LessonService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    student_service: StudentService
    course_service: CourseService
    lesson_service: LessonService
    enrollment_service: EnrollmentService
    attendance_service: AttendanceService
    email_service: EmailService


def build_services(
    *,
    students,
    courses,
    lessons,
    enrollments,
    attendance,
    email_logs,
    transport: EmailTransport,
    invalidator: ViewInvalidator,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    return Container(
        student_service=StudentService(students, invalidator),
        course_service=CourseService(courses, invalidator),
        lesson_service=LessonService(lessons, invalidator),
        enrollment_service=EnrollmentService(enrollments, students, invalidator),
        attendance_service=AttendanceService(attendance, lessons, invalidator),
        email_service=EmailService(email_logs, students, transport, invalidator),
    )


def build_container(
    *,
    db_config: dict,
    resend_api_key: Optional[str] = None,
    resend_from_email: Optional[str] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        students=MySQLStudentRepository(conn),
        courses=MySQLCourseRepository(conn),
        lessons=MySQLLessonRepository(conn),
        enrollments=MySQLEnrollmentRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        email_logs=MySQLEmailLogRepository(conn),
        transport=ResendEmailTransport(resend_api_key, resend_from_email),
        invalidator=ContextInvalidator(),
    )
