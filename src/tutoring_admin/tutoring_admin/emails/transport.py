from __future__ import annotations

import logging
from typing import Optional, Protocol

import resend

from ..core.constants import DEFAULT_FROM_EMAIL
from ..core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)

_HTML_TEMPLATE = """<!DOCTYPE html>
<html dir="rtl" lang="he">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>
    * {{ direction: rtl !important; text-align: right !important; }}
    body {{ font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; background-color: #f5f5f5; margin: 0; padding: 20px; }}
    .container {{ max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 30px; }}
    .content {{ color: #333333; line-height: 1.6; }}
    .content p, .content ul, .content ol {{ margin: 0 0 16px 0; }}
    .content ul, .content ol {{ padding-right: 20px; padding-left: 0; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="content" dir="rtl">
      {body}
    </div>
  </div>
</body>
</html>
"""


def render_html(body: str) -> str:
    """Wrap a rich-text body in the right-to-left email layout."""
    return _HTML_TEMPLATE.format(body=body)


class EmailTransport(Protocol):
    def send(self, *, to: str, subject: str, body: str) -> None:
        """Deliver the message or raise EmailDeliveryError."""

        raise NotImplementedError


class ResendEmailTransport(EmailTransport):
    def __init__(self, api_key: Optional[str], from_email: Optional[str] = None):
        self._api_key = api_key
        self._from_email = from_email or DEFAULT_FROM_EMAIL

    def send(self, *, to: str, subject: str, body: str) -> None:
        if not self._api_key:
            raise EmailDeliveryError(
                "RESEND_API_KEY is not configured. Please add it to your environment variables."
            )

        resend.api_key = self._api_key
        try:
            resend.Emails.send(
                {
                    "from": self._from_email,
                    "to": [to],
                    "subject": subject,
                    "html": render_html(body),
                }
            )
        except Exception as e:
            logger.error("Resend error: %s", e)
            raise EmailDeliveryError(str(e) or "Failed to send email") from e
