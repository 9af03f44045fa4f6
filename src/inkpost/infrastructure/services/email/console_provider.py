"""Email provider that writes messages to the log instead of sending them.

Used in development when no SMTP host is configured.
"""

from inkpost.core.logging import get_logger
from inkpost.infrastructure.services.email.email_provider import EmailProvider

logger = get_logger(__name__)


class ConsoleEmailProvider(EmailProvider):
    """Log outgoing mail to the console."""

    async def send_email(
        self,
        to: str,
        subject: str,
        html_body: str,
        text_body: str,
        from_email: str,
        from_name: str,
        reply_to: str | None = None,
    ) -> bool:
        logger.info(
            f"[EMAIL] {subject}\n"
            f"From: {from_name} <{from_email}>\n"
            f"To: {to}\n"
            f"Body:\n{text_body}\n"
            f"{'=' * 80}"
        )
        return True

    async def check_connection(self) -> tuple[bool, str | None]:
        return True, None
