"""
Transactional email senders.

Resend (JSON API, bearer key) and Mailgun (form API, basic auth) are
supported. Each send is a single attempt bounded by the configured timeout.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from workflow_helper.config import Settings
from workflow_helper.errors import ConfigurationError, UpstreamServiceError

logger = logging.getLogger(__name__)


@dataclass
class EmailResult:
    """Provider acknowledgement of an accepted message"""
    provider: str
    message_id: Optional[str]


class EmailSender:
    """Base class for HTTP email providers."""

    provider = "base"

    def __init__(
        self,
        from_email: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.from_email = from_email
        self.timeout = timeout
        self._transport = transport

    def _client(self, **kwargs) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport, **kwargs)

    async def send(self, to: str, subject: str, html: str) -> EmailResult:
        raise NotImplementedError

    def _check_response(self, response: httpx.Response) -> dict:
        if response.is_success:
            try:
                return response.json()
            except ValueError:
                return {}

        logger.error(f"{self.provider} API error: {response.status_code} {response.text[:500]}")
        raise UpstreamServiceError(
            message="Could not send the instructions email. Please try again.",
            detail=f"{self.provider} API request failed: {response.status_code} - {response.text}",
        )

    def _transport_error(self, exc: httpx.HTTPError) -> UpstreamServiceError:
        logger.error(f"{self.provider} request failed: {exc!r}")
        return UpstreamServiceError(
            message="Could not send the instructions email. Please try again.",
            detail=f"{self.provider} transport error: {exc!r}",
        )


class ResendEmailSender(EmailSender):
    """Resend: POST {base}/emails with a JSON body."""

    provider = "resend"

    def __init__(self, api_key: str, from_email: str, base_url: str = "https://api.resend.com", **kwargs):
        super().__init__(from_email, **kwargs)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    async def send(self, to: str, subject: str, html: str) -> EmailResult:
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self.base_url}/emails",
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json={
                        "from": self.from_email,
                        "to": [to],  # Resend expects an array of recipients
                        "subject": subject,
                        "html": html,
                    },
                )
        except httpx.HTTPError as e:
            raise self._transport_error(e) from e

        data = self._check_response(response)
        logger.info(f"Resend accepted message {data.get('id')}")
        return EmailResult(provider=self.provider, message_id=data.get("id"))


class MailgunEmailSender(EmailSender):
    """Mailgun: POST {base}/{domain}/messages with form fields."""

    provider = "mailgun"

    def __init__(
        self,
        api_key: str,
        domain: str,
        from_email: str,
        base_url: str = "https://api.mailgun.net/v3",
        **kwargs,
    ):
        super().__init__(from_email, **kwargs)
        self.api_key = api_key
        self.domain = domain
        self.base_url = base_url.rstrip("/")

    async def send(self, to: str, subject: str, html: str) -> EmailResult:
        try:
            async with self._client(auth=("api", self.api_key)) as client:
                response = await client.post(
                    f"{self.base_url}/{self.domain}/messages",
                    data={
                        "from": self.from_email,
                        "to": to,
                        "subject": subject,
                        "html": html,
                    },
                )
        except httpx.HTTPError as e:
            raise self._transport_error(e) from e

        data = self._check_response(response)
        logger.info(f"Mailgun accepted message {data.get('id')}")
        return EmailResult(provider=self.provider, message_id=data.get("id"))


def build_email_sender(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> EmailSender:
    """Provider selected by settings.email_provider."""
    common = {"timeout": settings.http_timeout_seconds, "transport": transport}

    if settings.email_provider == "resend":
        return ResendEmailSender(
            api_key=settings.resend_api_key,
            from_email=settings.from_email,
            base_url=settings.resend_base_url,
            **common,
        )
    if settings.email_provider == "mailgun":
        return MailgunEmailSender(
            api_key=settings.mailgun_api_key,
            domain=settings.mailgun_domain,
            from_email=settings.from_email,
            base_url=settings.mailgun_base_url,
            **common,
        )
    raise ConfigurationError(f"Unknown email provider: {settings.email_provider}")
