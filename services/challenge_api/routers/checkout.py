"""
Checkout completion callback.

The landing page relays window messages from the embedded checkout widget
here; a completion counts as one RSVP.
"""
from fastapi import APIRouter, Depends, Header, HTTPException, status
from typing import Annotated, Optional
import hmac
import logging

from challenge_api.core.checkout import is_checkout_complete
from challenge_api.schemas import CheckoutEventIn, CheckoutEventOut
from challenge_api.settings import get_settings
from challenge_api.state import AppState, get_state

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/checkout", tags=["checkout"])

State = Annotated[AppState, Depends(get_state)]


def require_checkout_secret(
    x_checkout_secret: Annotated[Optional[str], Header()] = None,
) -> None:
    """Enforce X-Checkout-Secret when CHECKOUT_EVENT_SECRET is configured."""
    expected = get_settings().checkout_event_secret
    if not expected:
        return
    if not x_checkout_secret or not hmac.compare_digest(x_checkout_secret, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid checkout secret")


@router.post(
    "/events",
    response_model=CheckoutEventOut,
    dependencies=[Depends(require_checkout_secret)],
)
async def checkout_event(event: CheckoutEventIn, state: State):
    """Classify a relayed checkout message; count a completion once per checkoutId."""
    completed = is_checkout_complete(event.data)
    if not completed:
        logger.debug(f"🔍 Checkout message ignored (origin={event.origin})")
        return {"completed": False, "counted": False, "count": state.read_count()}

    if not state.checkout_tracker.first_completion(event.checkout_id):
        return {"completed": True, "counted": False, "count": state.read_count()}

    count = state.increment_count()
    logger.info(f"✅ Checkout completed (origin={event.origin})! RSVP count: {count}")
    return {"completed": True, "counted": True, "count": count}
