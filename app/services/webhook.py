# app/services/webhook.py

from typing import Any, Optional

import requests
from pydantic import ValidationError

from app.core.logger import logger
from app.schemas.chat import WebhookPayload, WebhookReply
from app.utils.errors import ForwardError


class WebhookClient:
    """Single-attempt JSON POST to the workflow engine's webhook."""

    def __init__(self, url: str, timeout: float):
        self.url = url
        self.timeout = timeout

    def forward(self, payload: WebhookPayload) -> Optional[Any]:
        """
        POST the payload and return the decoded JSON body, or None when the
        body is empty or not JSON. Raises ForwardError on network errors,
        timeouts and non-2xx statuses. Never retries.
        """
        headers = {"Content-Type": "application/json"}
        try:
            res = requests.post(
                self.url,
                headers=headers,
                json=payload.model_dump(by_alias=True),
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise ForwardError(f"Webhook timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise ForwardError(f"Webhook unreachable: {e}") from e

        logger.info(f"Webhook response status: {res.status_code}")
        if not 200 <= res.status_code < 300:
            raise ForwardError(f"Webhook returned {res.status_code}: {res.text[:500]}")

        try:
            return res.json()
        except ValueError:
            logger.warning("Webhook answered with a non-JSON body, treating as no reply")
            return None


def parse_reply(body: Any) -> Optional[str]:
    # Anything other than an object carrying a non-empty string "response" means no reply
    if not isinstance(body, dict):
        return None
    try:
        reply = WebhookReply.model_validate(body)
    except ValidationError:
        logger.warning("Webhook reply has an unexpected shape, ignoring it")
        return None
    return reply.response or None
