"""Notifications sent after a service request is stored."""

import logging
from datetime import datetime, timezone

import requests

from portal.core.config import Settings
from portal.schemas.request import RequestRead

logger = logging.getLogger(__name__)


class RequestNotifier:
    """Receives every newly created request. The base class does nothing."""

    def notify(self, request: RequestRead) -> None:
        return None


class WebhookNotifier(RequestNotifier):
    """POST each new request to an automation webhook (e.g. Zapier).

    Delivery is best effort: one attempt, failures are logged and never
    reach the caller.
    """

    def __init__(self, url: str, timeout: float = 5.0):
        self.url = url
        self.timeout = timeout

    def build_payload(self, request: RequestRead) -> dict:
        payload = request.model_dump(mode="json", by_alias=True)
        payload["partner"] = {"id": request.partner_id, "name": request.partner_name}
        payload["timestamp"] = datetime.now(timezone.utc).isoformat()
        return payload

    def notify(self, request: RequestRead) -> None:
        try:
            resp = requests.post(self.url, json=self.build_payload(request), timeout=self.timeout)
        except requests.RequestException:
            logger.exception("Error sending request %s to webhook", request.id)
            return

        if not resp.ok:
            logger.error(
                "Webhook rejected request %s: %s %s", request.id, resp.status_code, resp.reason
            )


def build_notifier(settings: Settings) -> RequestNotifier:
    if settings.WEBHOOK_URL:
        return WebhookNotifier(settings.WEBHOOK_URL, timeout=settings.WEBHOOK_TIMEOUT)
    return RequestNotifier()
