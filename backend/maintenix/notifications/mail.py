"""Assignment emails delivered through the Resend HTTP API.

Bodies are rendered from Jinja2 templates (HTML + plain text). Delivery
failures raise; callers decide whether a failed email matters (the
assignment notifier treats it as best-effort).
"""

from pathlib import Path
from typing import Protocol

import httpx
import structlog
from jinja2 import Environment, FileSystemLoader, select_autoescape

from maintenix.core.config import Settings

logger = structlog.get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


class NotificationSender(Protocol):
    """Capability used by the assignment notifier to reach a responsible."""

    async def send_assignment(
        self,
        *,
        to: str,
        name: str,
        machine_name: str,
        priority_label: str,
        category_label: str,
        shift_label: str,
        problem_description: str,
        action_url: str,
    ) -> None: ...


class ResendMailSender:
    """NotificationSender that posts emails to Resend."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        from_name: str,
        app_name: str,
        api_url: str = "https://api.resend.com/emails",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._from = f"{from_name} <{from_email}>"
        self._app_name = app_name
        self._api_url = api_url
        self._timeout = timeout
        self._transport = transport
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ResendMailSender":
        return cls(
            api_key=settings.resend_api_key,
            from_email=settings.mail_from_email,
            from_name=settings.mail_from_name,
            app_name=settings.mail_app_name,
            api_url=settings.resend_api_url,
        )

    def render_assignment(self, **context: str) -> tuple[str, str]:
        """Render (html, text) bodies for an assignment email."""
        html = self.env.get_template("assignment.html").render(app_name=self._app_name, **context)
        text = self.env.get_template("assignment.txt").render(app_name=self._app_name, **context)
        return html, text

    async def send_assignment(
        self,
        *,
        to: str,
        name: str,
        machine_name: str,
        priority_label: str,
        category_label: str,
        shift_label: str,
        problem_description: str,
        action_url: str,
    ) -> None:
        if not self._api_key:
            raise RuntimeError("RESEND_API_KEY is not configured")

        html, text = self.render_assignment(
            name=name,
            machine_name=machine_name,
            priority=priority_label,
            category=category_label,
            shift=shift_label,
            problem_description=problem_description,
            action_url=action_url,
        )
        payload = {
            "from": self._from,
            "to": [to],
            "subject": f"{self._app_name} - New maintenance assignment",
            "html": html,
            "text": text,
        }

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.post(
                self._api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        response.raise_for_status()

        logger.info(
            "assignment_email_sent",
            to=to,
            status_code=response.status_code,
            message_id=_message_id(response),
        )


def _message_id(response: httpx.Response) -> str | None:
    """Provider message id, None when the accepted response carries no JSON body."""
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("id") if isinstance(body, dict) else None
