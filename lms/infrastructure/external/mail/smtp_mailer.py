"""Templated transactional mail over SMTP (aiosmtplib + Jinja2).

Templates live in lms/templates/mail as <name>.html, addressed by the
hyphenated name used by callers (e.g. "question-reply" ->
question_reply.html). When SMTP_HOST is unset, mail is logged and skipped.
"""

from __future__ import annotations

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Any

import aiosmtplib
from jinja2 import Environment, PackageLoader, TemplateNotFound, select_autoescape

from lms.core.config import Settings, get_settings
from lms.domain.exceptions import MailDeliveryException

logger = logging.getLogger(__name__)


def _template_file(template: str) -> str:
    return f"{template.replace('-', '_')}.html"


class MailTemplateRenderer:
    """Renders mail templates from the lms package."""

    def __init__(self, env: Environment | None = None) -> None:
        self._env = env or Environment(
            loader=PackageLoader("lms", "templates/mail"),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, template: str, data: dict[str, Any]) -> str:
        """Render template with data. Raises KeyError if the template does not exist."""
        try:
            tpl = self._env.get_template(_template_file(template))
        except TemplateNotFound as e:
            raise KeyError(f"Unknown mail template: {template}") from e
        return tpl.render(**data)


class SmtpMailer:
    """IMailer sending HTML mail via aiosmtplib."""

    def __init__(
        self,
        settings: Settings | None = None,
        renderer: MailTemplateRenderer | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.renderer = renderer or MailTemplateRenderer()

    def _build_message(self, to: str, subject: str, html: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = formataddr(
            (self.settings.smtp_from_name, self.settings.smtp_from_email)
        )
        message["To"] = to
        message["Message-ID"] = make_msgid()
        message.attach(MIMEText(html, "html", "utf-8"))
        return message

    async def send(
        self, to: str, subject: str, template: str, data: dict[str, Any]
    ) -> None:
        """Render and send. Raises MailDeliveryException if SMTP fails."""
        html = self.renderer.render(template, data)
        if not self.settings.smtp_configured:
            logger.warning(
                "SMTP not configured; skipping '%s' mail to %s", subject, to
            )
            return
        message = self._build_message(to, subject, html)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.settings.smtp_host,
                port=self.settings.smtp_port,
                username=self.settings.smtp_username,
                password=(
                    self.settings.smtp_password.get_secret_value()
                    if self.settings.smtp_password
                    else None
                ),
                start_tls=self.settings.smtp_use_tls,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Failed to send '%s' mail to %s: %s", subject, to, e)
            raise MailDeliveryException(to, str(e)) from e
        logger.info("Mail '%s' sent to %s (template=%s)", subject, to, template)
