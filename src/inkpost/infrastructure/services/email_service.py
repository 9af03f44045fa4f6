"""Email service for sending transactional emails.

Renders the built-in templates and hands the result to an EmailProvider.
Sending is best-effort: every failure is logged and reported as ``False``,
never raised, so a broken mail server cannot fail an auth operation.
"""

from dataclasses import dataclass
from datetime import timedelta

from inkpost.core.config import Settings
from inkpost.core.logging import get_logger
from inkpost.core.timeutil import utcnow
from inkpost.infrastructure.services.email import templates
from inkpost.infrastructure.services.email.console_provider import ConsoleEmailProvider
from inkpost.infrastructure.services.email.email_provider import EmailProvider
from inkpost.infrastructure.services.email.smtp_provider import SMTPProvider, SMTPSettings
from inkpost.infrastructure.services.email.template_renderer import TemplateRenderer

logger = get_logger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    """A rendered message ready for delivery."""

    to: str
    subject: str
    text: str
    html: str


def humanize_duration(value: timedelta) -> str:
    """Render a lifetime such as ``1 hour`` or ``24 hours`` for email copy."""
    seconds = int(value.total_seconds())
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size and seconds % size == 0 and not (unit == "day" and seconds < 2 * 86400):
            count = seconds // size
            return f"{count} {unit}{'s' if count != 1 else ''}"
    return f"{seconds} seconds"


class EmailService:
    """Service for sending emails."""

    def __init__(
        self,
        provider: EmailProvider,
        settings: Settings,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        """Initialize the email service.

        Args:
            provider: Transport used to deliver messages.
            settings: Application settings (sender identity, frontend URL).
            renderer: Template renderer. A new one is created if omitted.
        """
        self.provider = provider
        self.settings = settings
        self.renderer = renderer or TemplateRenderer()

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        """Build the service with SMTP if configured, else the console provider."""
        if settings.smtp_host:
            provider: EmailProvider = SMTPProvider(SMTPSettings.from_settings(settings))
        else:
            provider = ConsoleEmailProvider()
        return cls(provider, settings)

    async def send(self, message: EmailMessage) -> bool:
        """Deliver a message.

        Returns:
            True if the provider accepted the message, False on any failure.
        """
        try:
            sent = await self.provider.send_email(
                to=message.to,
                subject=message.subject,
                html_body=message.html,
                text_body=message.text,
                from_email=self.settings.email_from_address,
                from_name=self.settings.email_from_name,
            )
        except Exception as e:
            logger.error(
                "Failed to send email",
                to=message.to,
                subject=message.subject,
                error=str(e),
            )
            return False

        if sent:
            logger.info("Email sent", to=message.to, subject=message.subject)
        else:
            logger.warning("Email provider rejected message", to=message.to)
        return sent

    def render(self, template: dict[str, str], to: str, **variables: str) -> EmailMessage:
        """Render one of the built-in templates into a message."""
        variables = {
            "app_name": self.settings.app_name,
            "frontend_url": self.settings.frontend_url,
            **variables,
        }
        subject = self.renderer.render(template["subject"], variables, html=False)
        # The HTML layout titles the page with the subject
        variables["title"] = subject
        return EmailMessage(
            to=to,
            subject=subject,
            text=self.renderer.render(template["text"], variables, html=False),
            html=self.renderer.render(template["html"], variables),
        )

    async def _send_template(self, template: dict[str, str], to: str, **variables: str) -> bool:
        try:
            message = self.render(template, to, **variables)
        except Exception as e:
            logger.error("Failed to render email", to=to, error=str(e))
            return False
        return await self.send(message)

    async def send_welcome_email(self, to: str, name: str) -> bool:
        return await self._send_template(templates.WELCOME, to, name=name)

    async def send_verification_email(self, to: str, name: str, verification_url: str) -> bool:
        """Send the link that confirms ownership of ``to``."""
        return await self._send_template(
            templates.VERIFICATION,
            to,
            name=name,
            url=verification_url,
            expires_in=humanize_duration(self.settings.email_verification_lifetime),
        )

    async def send_password_reset_email(self, to: str, name: str, reset_url: str) -> bool:
        """Send the single-use password reset link."""
        return await self._send_template(
            templates.PASSWORD_RESET,
            to,
            name=name,
            url=reset_url,
            expires_in=humanize_duration(self.settings.password_reset_lifetime),
        )

    async def send_password_changed_email(self, to: str, name: str) -> bool:
        return await self._send_template(
            templates.PASSWORD_CHANGED,
            to,
            name=name,
            changed_at=utcnow().strftime("%Y-%m-%d %H:%M UTC"),
        )
