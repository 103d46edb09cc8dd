# services/challenge_api/core/alerts.py
from __future__ import annotations

import html
import json
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any, Dict, List, Optional

import aiosmtplib

from challenge_api.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def alerts_enabled(settings: Settings) -> bool:
    return bool(settings.smtp_user and settings.smtp_password and settings.get_alert_recipients())


async def send_email(
    *,
    to_email: str,
    subject: str,
    body_html: str,
    smtp_host: str,
    smtp_port: int,
    smtp_user: str,
    smtp_password: str,
    from_email: str,
    from_name: str,
    cc_emails: Optional[List[str]] = None,
    timeout: float = 60.0,
) -> bool:
    """
    Send an HTML email via SMTP with STARTTLS.
    Returns True on success, False on failure.
    """
    try:
        msg = MIMEMultipart()
        msg['From'] = f"{from_name} <{from_email}>"
        msg['To'] = to_email
        msg['Subject'] = subject

        clean_cc: List[str] = []
        if cc_emails:
            clean_cc = sorted(
                {
                    addr.strip()
                    for addr in cc_emails
                    if addr and addr.strip() and addr.strip().lower() != to_email.lower()
                }
            )
            if clean_cc:
                msg["Cc"] = ", ".join(clean_cc)

        msg.attach(MIMEText(body_html, 'html'))

        await aiosmtplib.send(
            msg,
            hostname=smtp_host,
            port=smtp_port,
            username=smtp_user,
            password=smtp_password,
            start_tls=True,
            timeout=timeout,
            recipients=[to_email] + clean_cc,
        )

        logger.info(f"✓ Alert email sent to {to_email}")
        return True

    except Exception as e:
        logger.error(f"✗ Alert email send failed to {to_email}: {e}")
        return False


def build_forward_failure_body(*, sink: str, error: str, row: Dict[str, Any]) -> str:
    return (
        "<p><b>Homework submission could not be forwarded</b></p>"
        f"<p><b>Sink:</b> {html.escape(sink)}</p>"
        f"<p><b>Error:</b> {html.escape(error)}</p>"
        "<p><b>Submission</b></p>"
        f"<pre>{html.escape(json.dumps(row, indent=2, ensure_ascii=False, default=str))}</pre>"
    )


async def send_forward_failure_alert(*, sink: str, error: str, row: Dict[str, Any]) -> bool:
    """
    Email ALERT_EMAILS about a submission that did not reach the spreadsheet.
    Uses TO = first, CC = rest. No-op (False) when alerts are not configured.
    """
    settings = get_settings()
    if not alerts_enabled(settings):
        return False

    recipients = settings.get_alert_recipients()
    subject = f"ALERT: homework submission {row.get('submissionId', '')} not forwarded"

    return await send_email(
        to_email=recipients[0],
        subject=subject,
        body_html=build_forward_failure_body(sink=sink, error=error, row=row),
        smtp_host=settings.smtp_host,
        smtp_port=settings.smtp_port,
        smtp_user=settings.smtp_user,
        smtp_password=settings.smtp_password,
        from_email=settings.smtp_from_email or settings.smtp_user,
        from_name=settings.smtp_from_name,
        cc_emails=recipients[1:] or None,
        timeout=settings.forward_timeout_seconds,
    )
