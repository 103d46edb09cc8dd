"""
RSVP counter endpoints for the landing page.
"""
from fastapi import APIRouter, Depends
from typing import Annotated
import logging

from challenge_api.schemas import RsvpCountOut, RsvpIncrementOut
from challenge_api.state import AppState, get_state

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/rsvp", tags=["rsvp"])

State = Annotated[AppState, Depends(get_state)]


@router.get("", response_model=RsvpCountOut)
async def get_rsvp_count(state: State):
    """Current RSVP count (polled by the landing page)."""
    return {"count": state.read_count()}


@router.post("", response_model=RsvpIncrementOut)
async def increment_rsvp(state: State):
    """Add one RSVP."""
    count = state.increment_count()
    logger.info(f"📝 RSVP incremented! New count: {count}")
    return {"count": count, "success": True}
