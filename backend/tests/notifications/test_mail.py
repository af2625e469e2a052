"""Unit tests for ResendMailSender.

HTTP goes through httpx.MockTransport; no email leaves the test.
"""

import json

import httpx
import pytest

from maintenix.core.config import Settings
from maintenix.notifications.mail import ResendMailSender

pytestmark = pytest.mark.unit

ASSIGNMENT = {
    "to": "ana@example.com",
    "name": "Ana Souza",
    "machine_name": "Extruder <DS>",
    "priority_label": "High",
    "category_label": "Electrical",
    "shift_label": "Second",
    "problem_description": "Motor overheating",
    "action_url": "http://app.test/machines/m1/maintenance-records/r1",
}


@pytest.fixture
def captured() -> list[httpx.Request]:
    return []


@pytest.fixture
def make_sender(captured):
    def _make(status_code: int = 200, api_key: str = "re_test") -> ResendMailSender:
        def handler(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return httpx.Response(status_code, json={"id": "email-123"})

        return ResendMailSender(
            api_key=api_key,
            from_email="no-reply@maintenix.app",
            from_name="Maintenix",
            app_name="Maintenix",
            api_url="https://resend.test/emails",
            transport=httpx.MockTransport(handler),
        )

    return _make


async def test_send_assignment_posts_to_resend(make_sender, captured):
    await make_sender().send_assignment(**ASSIGNMENT)

    assert len(captured) == 1
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "https://resend.test/emails"
    assert request.headers["Authorization"] == "Bearer re_test"

    payload = json.loads(request.content)
    assert payload["from"] == "Maintenix <no-reply@maintenix.app>"
    assert payload["to"] == ["ana@example.com"]
    assert payload["subject"] == "Maintenix - New maintenance assignment"
    assert "Motor overheating" in payload["text"]
    assert ASSIGNMENT["action_url"] in payload["html"]


async def test_send_assignment_raises_on_provider_error(make_sender):
    with pytest.raises(httpx.HTTPStatusError):
        await make_sender(status_code=500).send_assignment(**ASSIGNMENT)


async def test_send_assignment_requires_api_key(make_sender, captured):
    with pytest.raises(RuntimeError):
        await make_sender(api_key="").send_assignment(**ASSIGNMENT)
    assert captured == []


def test_render_assignment_escapes_html_only(make_sender):
    html, text = make_sender().render_assignment(
        name="Ana",
        machine_name="Extruder <DS>",
        priority="High",
        category="-",
        shift="-",
        problem_description="Motor overheating",
        action_url="http://app.test/r/1",
    )

    assert "Extruder &lt;DS&gt;" in html
    assert "Extruder <DS>" in text
    assert "Priority: High" in text
    assert "Hello Ana" in html


def test_from_settings():
    settings = Settings(
        resend_api_key="re_live",
        mail_from_email="ops@plant.example",
        mail_from_name="Plant Ops",
        mail_app_name="Maintenix",
    )

    sender = ResendMailSender.from_settings(settings)

    assert sender._from == "Plant Ops <ops@plant.example>"
    assert sender._api_key == "re_live"


@pytest.mark.parametrize("content", [b"", b"OK", b"[]"])
async def test_send_assignment_accepts_response_without_json_id(captured, content):
    """An accepted email is not reported as failed when the body carries no message id."""

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(202, content=content)

    sender = ResendMailSender(
        api_key="re_test",
        from_email="no-reply@maintenix.app",
        from_name="Maintenix",
        app_name="Maintenix",
        api_url="https://resend.test/emails",
        transport=httpx.MockTransport(handler),
    )

    await sender.send_assignment(**ASSIGNMENT)

    assert len(captured) == 1
