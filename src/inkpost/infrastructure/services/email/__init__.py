"""Email providers and template rendering."""

from inkpost.infrastructure.services.email.console_provider import ConsoleEmailProvider
from inkpost.infrastructure.services.email.email_provider import EmailProvider
from inkpost.infrastructure.services.email.smtp_provider import SMTPProvider, SMTPSettings
from inkpost.infrastructure.services.email.template_renderer import TemplateRenderer

__all__ = [
    "ConsoleEmailProvider",
    "EmailProvider",
    "SMTPProvider",
    "SMTPSettings",
    "TemplateRenderer",
]
