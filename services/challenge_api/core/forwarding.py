# services/challenge_api/core/forwarding.py
from __future__ import annotations

import logging
from typing import Any, Dict

from challenge_api.adapters.base import SubmissionSink
from challenge_api.core.alerts import send_forward_failure_alert
from challenge_api.models import Submission
from challenge_api.settings import Settings

logger = logging.getLogger(__name__)


class LogSink:
    """Sink used when no spreadsheet is configured: the row only goes to the log."""

    name = "log"

    async def append(self, tab: str, row: Dict[str, Any]) -> None:
        logger.info(f"📊 [{tab}] submission {row.get('submissionId', '')} (log sink, not forwarded)")


def build_sink(settings: Settings) -> SubmissionSink:
    """
    Pick the submission sink from SUBMISSION_SINK.

    Falls back to LogSink when the selected sink is missing its settings,
    so a half-configured deploy still accepts homework.
    """
    kind = (settings.submission_sink or "log").lower()

    if kind == "webhook":
        if not settings.sheets_webhook_url:
            logger.warning("SUBMISSION_SINK=webhook but SHEETS_WEBHOOK_URL is empty; using log sink")
            return LogSink()
        from challenge_api.adapters.webhook import WebhookSink

        return WebhookSink(settings.sheets_webhook_url, timeout=settings.forward_timeout_seconds)

    if kind == "sheets":
        sa_json = settings.resolved_google_sa_json()
        if not sa_json or not settings.sheets_spreadsheet_id:
            logger.warning("SUBMISSION_SINK=sheets needs GOOGLE_SA_JSON and SHEETS_SPREADSHEET_ID; using log sink")
            return LogSink()
        from challenge_api.adapters.sheets import SheetsSink

        return SheetsSink(google_sa_json=sa_json, spreadsheet_id=settings.sheets_spreadsheet_id)

    if kind == "log":
        return LogSink()

    raise ValueError(f"Unknown SUBMISSION_SINK: {settings.submission_sink}")


def log_fallback(submission: Submission) -> None:
    logger.info("📊 Logging submission locally as fallback:")
    logger.info("-------------------------------------------")
    for line in submission.fallback_lines():
        logger.info(line)
    logger.info("-------------------------------------------")


async def forward_submission(sink: SubmissionSink, submission: Submission) -> bool:
    """
    Best-effort forward of one submission to the sink.

    Never raises: a failure is logged, the row is dumped to the log as a
    fallback, and an alert email goes out if configured. The caller still
    reports success to the user.

    Returns:
        True if the sink accepted the row.
    """
    row = submission.to_sheet()
    logger.info(f"📊 Sending {submission.submission_id} to {sink.name} sink...")

    try:
        await sink.append(submission.TAB, row)
        return True
    except Exception as e:
        error = str(e) or e.__class__.__name__
        logger.error(f"❌ Error forwarding submission {submission.submission_id}: {error}")
        log_fallback(submission)

    try:
        await send_forward_failure_alert(sink=sink.name, error=error, row=row)
    except Exception:
        logger.exception("Alert email for failed forward raised")
    return False
