"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_COURSE_COLOR = "#6366f1"
DEFAULT_LESSON_DURATION_MINUTES = 60
MIN_LESSON_DURATION_MINUTES = 15
MAX_LESSON_DURATION_MINUTES = 480
DEFAULT_UPCOMING_LIMIT = 5
DEFAULT_FROM_EMAIL = "onboarding@resend.dev"
