from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Student, StudentInput


class StudentRepository(Protocol):
    def list_all(self) -> Sequence[Student]:
        """Newest first."""

        raise NotImplementedError

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def create(self, *, user_id: int, data: StudentInput) -> int:
        raise NotImplementedError

    def update(self, *, student_id: int, data: StudentInput, updated_at: datetime) -> bool:
        raise NotImplementedError

    def delete(self, *, student_id: int) -> bool:
        raise NotImplementedError
