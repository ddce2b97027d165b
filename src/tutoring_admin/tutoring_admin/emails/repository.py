from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import EmailStatus
from .model import EmailLog


class EmailLogRepository(Protocol):
    def create(self, *, user_id: int, student_id: int, subject: str, body: str, status: EmailStatus) -> int:
        raise NotImplementedError

    def list_for_student(self, student_id: int) -> Sequence[EmailLog]:
        """Newest first."""

        raise NotImplementedError
