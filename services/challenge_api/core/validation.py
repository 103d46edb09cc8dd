"""
Validation utilities for homework submissions.
Every validator returns an error message, or None when the value is fine,
so routes can collect field-level errors in one pass.
"""
import re
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

USERNAME_RE = re.compile(r"[a-zA-Z0-9_]{2,}")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

NOTES_MAX_LENGTH = 500
LINK_MIN_LENGTH = 5


def validate_username(username: Optional[str]) -> Optional[str]:
    if not username or not USERNAME_RE.fullmatch(username):
        return "Username must be at least 2 characters (letters, numbers, underscores only)"
    return None


def validate_email(email: Optional[str]) -> Optional[str]:
    if not email or not EMAIL_RE.fullmatch(email):
        return "Please enter a valid email address"
    return None


def validate_notes(notes: Optional[str]) -> Optional[str]:
    if notes and len(notes) > NOTES_MAX_LENGTH:
        return f"Notes must be {NOTES_MAX_LENGTH} characters or less"
    return None


def link_validator(message: str) -> Callable[[Optional[str]], Optional[str]]:
    """
    Build a validator for a pasted link field (doc, store, profile).

    The forms accept anything that looks like a pasted link; only a minimum
    length is enforced, not URL syntax.
    """
    def _validate(value: Optional[str]) -> Optional[str]:
        if not value or len(value) < LINK_MIN_LENGTH:
            return message
        return None

    return _validate


def validate_url(url: Optional[str]) -> Optional[str]:
    """Strict absolute http(s) URL check, used for the day 1 worksheet link."""
    if not url:
        return "Worksheet link is required"
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return "Please enter a valid URL"
    return None


def min_length_validator(min_length: int, message: str) -> Callable[[Optional[str]], Optional[str]]:
    def _validate(value: Optional[str]) -> Optional[str]:
        if not value or len(value) < min_length:
            return message
        return None

    return _validate


def split_worksheet_rows(rows: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], int]:
    """
    Separate worksheet rows into complete rows and a count of half-filled ones.

    Rules:
    - a row is complete when both text columns are non-blank
    - a row with exactly one non-blank column is incomplete
    - fully blank rows are ignored (the form always sends spare rows)

    Returns:
        (complete_rows, incomplete_count)
    """
    complete: List[Dict[str, Any]] = []
    incomplete = 0

    for row in rows:
        cant = (row.get("cantBecause") or "").strip()
        easier = (row.get("neverEasierBecause") or "").strip()
        if cant and easier:
            complete.append(row)
        elif cant or easier:
            incomplete += 1

    return complete, incomplete


def validate_worksheet_rows(rows: Optional[List[Dict[str, Any]]]) -> Optional[str]:
    if not rows:
        return "Please complete at least one reframe"

    complete, incomplete = split_worksheet_rows(rows)
    if incomplete:
        return "Please complete both columns for each row you fill out"
    if not complete:
        return "Please complete at least one reframe"
    return None


def collect_errors(checks: Dict[str, Optional[str]]) -> Dict[str, str]:
    """
    Drop the passing checks from a {field: message-or-None} map.

    Example:
        errors = collect_errors({
            "username": validate_username(body.username),
            "email": validate_email(body.email),
        })
    """
    return {field: message for field, message in checks.items() if message is not None}
