import logging
import re
from typing import List, Optional

from shared.core.exceptions import ValidationError
from shared.utils.app_status_code import AppStatusCode
from shared.utils.email_client import EmailClient
from shared.core.config import settings

logger = logging.getLogger(__name__)


EMAIL_TEMPLATES = {
    "contract_full": (
        "<p>Le contrat {total_hours}h de {client_name} débuté le "
        "{created_date} est expiré</p>"
        "<p>Heures utilisées : {used_hours}h</p>"
    ),
}


class EmailHelper:
    """Send templated emails via EmailClient."""

    def __init__(self, mailer: Optional[EmailClient] = None):
        self.mailer = mailer
        if self.mailer is None and settings.SMTP_HOST:
            self.mailer = EmailClient(
                smtp_host=settings.SMTP_HOST,
                smtp_port=settings.SMTP_PORT,
                username=settings.SMTP_USERNAME,
                password=settings.SMTP_PASSWORD,
                use_ssl=settings.SMTP_USE_SSL,
            )

    @property
    def is_configured(self) -> bool:
        return self.mailer is not None

    def render(self, template_code: str, context: dict) -> str:
        template = EMAIL_TEMPLATES.get(template_code)
        if template is None:
            raise ValidationError(
                f"Email template '{template_code}' not found", AppStatusCode.INVALID_INPUT)
        try:
            return template.format(**context)
        except KeyError as e:
            raise ValidationError(
                f"Missing template variable: {e}", AppStatusCode.INVALID_INPUT)

    def send_email(
        self,
        template_code: str,
        recipients: List[str],
        subject: str,
        context: dict,
    ) -> bool:
        """Render template_code with context and send it; False if not sent."""
        if not self.is_configured:
            logger.warning("SMTP not configured, email '%s' skipped", subject)
            return False

        html_body = self.render(template_code, context)
        text_body = self._strip_html_tags(html_body)

        return self.mailer.send_email(
            sender=settings.EMAIL_SENDER,
            recipients=recipients,
            subject=subject,
            text_body=text_body,
            html_body=html_body,
        )

    @staticmethod
    def _strip_html_tags(html: str) -> str:
        """Basic HTML to plain text converter."""
        return re.sub("<.*?>", "", (html or "").replace("</p><p>", "\n"))
