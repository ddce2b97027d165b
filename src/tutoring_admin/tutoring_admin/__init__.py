"""Tutoring administration package.

Organized by feature modules (students, courses, lessons, enrollments,
attendance, emails) with a thin Flask controller layer over service and
repository layers.
"""
