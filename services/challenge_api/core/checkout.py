# services/challenge_api/core/checkout.py
"""
Checkout completion detection.

The embedded checkout widget does not document its completion message, so
the landing page relays every window message it sees and we classify it
here. The rules are intentionally loose; a false positive only costs one
RSVP on the counter.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

_COMPLETE_EVENTS = ("checkout.completed", "checkout_completed")
_COMPLETE_STATUSES = ("completed", "success")
_COMPLETE_SUBSTRINGS = ("checkout-complete", "checkout_complete", "completed", "success")


def _str_contains(value: Any, needle: str) -> bool:
    return isinstance(value, str) and needle in value


def is_checkout_complete(data: Any) -> bool:
    """
    Return True when a relayed window message signals a finished checkout.

    Object messages match on any of the known type/event/status flags.
    String messages match on a few substrings. Everything else is False.
    """
    if isinstance(data, dict):
        return (
            data.get("type") == "whop-checkout-complete"
            or data.get("event") in _COMPLETE_EVENTS
            or data.get("whopCheckoutComplete") is True
            or data.get("status") in _COMPLETE_STATUSES
            or (data.get("type") == "whop" and data.get("action") == "checkout-complete")
            or data.get("checkoutComplete") is True
            or data.get("completed") is True
            or _str_contains(data.get("type"), "complete")
            or _str_contains(data.get("event"), "complete")
        )

    if isinstance(data, str):
        return any(s in data for s in _COMPLETE_SUBSTRINGS)

    return False


class CheckoutTracker:
    """
    Remembers which checkout sessions were already counted, so a widget that
    fires several completion messages bumps the RSVP counter once.

    Bounded and time-limited; process memory only.
    """

    def __init__(self, maxsize: int = 10_000, ttl: float = 24 * 3600):
        self._seen: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl)

    def first_completion(self, checkout_id: Optional[str]) -> bool:
        """
        Record a completion. Returns False if this checkout id was seen before.
        Completions without an id are always counted.
        """
        if not checkout_id:
            return True
        if checkout_id in self._seen:
            logger.info(f"Checkout {checkout_id} already counted")
            return False
        self._seen[checkout_id] = True
        return True

    def clear(self) -> None:
        self._seen.clear()
