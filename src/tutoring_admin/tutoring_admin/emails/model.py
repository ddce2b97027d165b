from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EmailStatus


@dataclass(frozen=True)
class EmailLog:
    """Append-only audit row for one outbound email attempt."""

    email_log_id: int
    user_id: int
    student_id: int
    subject: str
    body: str
    status: EmailStatus
    sent_at: Optional[datetime] = None


@dataclass(frozen=True)
class SendEmailResult:
    success: bool
    error: Optional[str] = None
