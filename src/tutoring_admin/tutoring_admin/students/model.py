from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    student_id: int
    user_id: int
    full_name: str
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class StudentInput:
    """Validated form payload for create/update."""

    full_name: str
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None
