# services/challenge_api/core/challenge.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

CHALLENGE_NAME = "Whop University 5 Day Challenge"


@dataclass(frozen=True)
class ChallengeDay:
    day: int
    title: str
    submit_path: str
    final: bool = False


CHALLENGE_DAYS: List[ChallengeDay] = [
    ChallengeDay(1, "Never Been Easier", "/api/homework/submit"),
    ChallengeDay(2, "Market Research", "/api/homework/submit-day2"),
    ChallengeDay(3, "One-Page Doc", "/api/homework/submit-day3"),
    ChallengeDay(4, "Launch Your Store", "/api/homework/submit-day4"),
    ChallengeDay(5, "Share Your Profile", "/api/homework/submit-day5", final=True),
]


def _as_utc(value: datetime) -> datetime:
    # naive datetimes are treated as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def time_left(target: datetime, now: Optional[datetime] = None) -> Dict[str, object]:
    """
    Break the time until `target` into days/hours/minutes/seconds.

    Once the target has passed everything is 0 and `started` is True.
    """
    target = _as_utc(target)
    now = _as_utc(now or datetime.now(timezone.utc))

    remaining = int((target - now).total_seconds())
    started = remaining <= 0
    if started:
        remaining = 0

    days, rest = divmod(remaining, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)

    return {
        "target": target.isoformat().replace("+00:00", "Z"),
        "started": started,
        "days": days,
        "hours": hours,
        "minutes": minutes,
        "seconds": seconds,
    }
