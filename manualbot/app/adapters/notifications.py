"""Administrator notification sinks."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class LoggingNotificationSink:
    """Writes notifications to the log. Default when no webhook is configured."""

    async def notify(self, recipients: list[str], payload: dict[str, Any]) -> None:
        logger.info(
            "Notification for %d recipients: %s",
            len(recipients),
            payload.get("summary", ""),
            extra={"structured": {"recipients": recipients, **payload}},
        )


class WebhookNotificationSink:
    """POSTs notifications as JSON to a chat webhook (e.g. Slack incoming webhook)."""

    def __init__(
        self,
        webhook_url: str,
        client: httpx.AsyncClient | None = None,
        timeout_s: float = 3.0,
    ) -> None:
        self._webhook_url = webhook_url
        self._client = client
        self._timeout_s = timeout_s

    async def notify(self, recipients: list[str], payload: dict[str, Any]) -> None:
        """Send one POST per notification.

        Raises:
            httpx.HTTPError: On network or HTTP errors
        """
        body = {
            "text": payload.get("summary", ""),
            "recipients": recipients,
            "payload": payload,
        }

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout_s)
            close_client = True

        try:
            response = await client.post(self._webhook_url, json=body)
            response.raise_for_status()
        finally:
            if close_client:
                await client.aclose()
