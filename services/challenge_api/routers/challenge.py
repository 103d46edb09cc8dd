# services/challenge_api/routers/challenge.py
from __future__ import annotations

from fastapi import APIRouter

from challenge_api.core.challenge import CHALLENGE_DAYS, CHALLENGE_NAME, time_left
from challenge_api.schemas import ChallengeOut, CountdownOut
from challenge_api.settings import get_settings

router = APIRouter(prefix="/api", tags=["challenge"])


@router.get("/countdown", response_model=CountdownOut)
async def countdown():
    """Time left until the challenge starts."""
    return time_left(get_settings().challenge_start)


@router.get("/challenge/days", response_model=ChallengeOut)
async def challenge_days():
    return {
        "name": CHALLENGE_NAME,
        "days": [
            {"day": d.day, "title": d.title, "submit_path": d.submit_path, "final": d.final}
            for d in CHALLENGE_DAYS
        ],
    }
