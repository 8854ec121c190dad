"""Mail: SMTP delivery of Jinja2-rendered templates."""

from lms.infrastructure.external.mail.smtp_mailer import MailTemplateRenderer, SmtpMailer

__all__ = ["MailTemplateRenderer", "SmtpMailer"]
