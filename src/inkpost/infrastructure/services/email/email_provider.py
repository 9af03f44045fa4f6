"""Mail transport interface.

Inkpost sends four kinds of account mail: welcome, verification link,
password reset link and password-changed notice. ``EmailService`` renders
them and hands the result to one of these transports.
"""

from abc import ABC, abstractmethod


class EmailProvider(ABC):
    """Delivers an already rendered message.

    Implementations: ``SMTPProvider`` when ``INKPOST_SMTP_HOST`` is set,
    ``ConsoleEmailProvider`` otherwise.
    """

    @abstractmethod
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
        """Deliver one message to a single account holder.

        Returns:
            True if the transport accepted the message, False if it declined.

        Raises:
            Exception: Transport errors may propagate. ``EmailService.send``
                logs them and reports the send as failed, so they never
                reach an auth operation.
        """

    @abstractmethod
    async def check_connection(self) -> tuple[bool, str | None]:
        """Check that the transport is reachable without sending anything.

        Returns:
            ``(True, None)`` when reachable, else ``(False, reason)``.
        """
