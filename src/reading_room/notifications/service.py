"""Outbound text delivery.

Providers:
1. Twilio (WhatsApp sandbox by default, plain SMS with an empty channel prefix)
2. Console (development: log instead of sending)

Delivery problems never raise; they come back as a failed ``NotificationResult``
so callers can tell "student missing" apart from "message not delivered".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from twilio.rest import Client

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


class Notifier(Protocol):
    def send(self, to: str, body: str) -> NotificationResult:
        raise NotImplementedError


def format_recipient(mobile: str, *, country_code: str = "", channel_prefix: str = "") -> str:
    number = mobile.replace(" ", "").replace("-", "")
    if not number.startswith("+"):
        number = f"{country_code}{number}"
    return f"{channel_prefix}{number}"


def _check(to: str, body: str) -> Optional[NotificationResult]:
    if not to:
        logger.error("No phone number provided")
        return NotificationResult(success=False, error="No phone number provided")
    if not body:
        logger.error("No message provided")
        return NotificationResult(success=False, error="No message provided")
    return None


class TwilioNotifier(Notifier):
    def __init__(
        self,
        *,
        account_sid: Optional[str],
        auth_token: Optional[str],
        from_: str,
        country_code: str = "",
        channel_prefix: str = "",
        client: Any = None,
    ):
        self._account_sid = account_sid
        self._auth_token = auth_token
        self._from = from_
        self._country_code = country_code
        self._channel_prefix = channel_prefix
        self._client = client

    def _get_client(self):
        # Built on first use so a missing credential surfaces as a failed send.
        if self._client is None:
            self._client = Client(self._account_sid, self._auth_token)
        return self._client

    def send(self, to: str, body: str) -> NotificationResult:
        invalid = _check(to, body)
        if invalid:
            return invalid

        recipient = format_recipient(str(to), country_code=self._country_code, channel_prefix=self._channel_prefix)
        try:
            sent = self._get_client().messages.create(from_=self._from, to=recipient, body=body)
        except Exception as e:
            logger.error("Twilio send to %s failed: %s", recipient, e)
            return NotificationResult(success=False, error=str(e))

        logger.info("Message sent via Twilio to %s: %s", recipient, sent.sid)
        return NotificationResult(success=True, message=f"Message sent (SID: {sent.sid})")


class ConsoleNotifier(Notifier):
    def send(self, to: str, body: str) -> NotificationResult:
        invalid = _check(to, body)
        if invalid:
            return invalid

        logger.info("[console] to=%s body=%s", to, body)
        return NotificationResult(success=True, message="Message logged to console")


def build_notifier(settings: Any) -> Notifier:
    provider = str(getattr(settings, "NOTIFY_PROVIDER", "console")).lower()
    if provider == "twilio":
        return TwilioNotifier(
            account_sid=getattr(settings, "TWILIO_ACCOUNT_SID", None),
            auth_token=getattr(settings, "TWILIO_AUTH_TOKEN", None),
            from_=getattr(settings, "TWILIO_FROM", "whatsapp:+14155238886"),
            country_code=getattr(settings, "NOTIFY_COUNTRY_CODE", ""),
            channel_prefix=getattr(settings, "NOTIFY_CHANNEL_PREFIX", ""),
        )
    if provider != "console":
        logger.warning("Unknown NOTIFY_PROVIDER %r, falling back to console", provider)
    return ConsoleNotifier()
