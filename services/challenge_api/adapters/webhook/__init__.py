"""
Webhook sink: POSTs each submission row as JSON to a Google Apps Script
web app, which appends it to the cohort spreadsheet.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class WebhookSink:
    """
    Fire-and-forget JSON POST.

    The body is the flat row plus a `sheet` key naming the challenge-day tab,
    so one Apps Script deployment can serve every day.
    A non-2xx response is raised as an error; there is no retry.
    """

    name = "webhook"

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not url:
            raise ValueError("WebhookSink requires SHEETS_WEBHOOK_URL")
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def append(self, tab: str, row: Dict[str, Any]) -> None:
        payload = {"sheet": tab, **row}

        # Apps Script answers a POST with a redirect to the script output
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            response = await client.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )

        if response.is_error:
            raise httpx.HTTPStatusError(
                f"HTTP error: {response.status_code}",
                request=response.request,
                response=response,
            )

        logger.info(f"✓ Sent {row.get('submissionId', '')} to spreadsheet webhook")
