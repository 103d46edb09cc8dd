"""
Pydantic schemas for API request/response validation.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .homework import (
    DocLinkSubmissionIn,
    MarketResearchSubmissionIn,
    ProfileLinkSubmissionIn,
    StoreLinkSubmissionIn,
    SubmissionOut,
    ValidationErrorOut,
    WorksheetRowIn,
    WorksheetSubmissionIn,
)

# ============ RSVP Schemas ============


class RsvpCountOut(BaseModel):
    """Current RSVP count."""
    count: int = Field(..., ge=0)


class RsvpIncrementOut(RsvpCountOut):
    success: bool = True


# ============ Checkout Schemas ============


class CheckoutEventIn(BaseModel):
    """
    A window message relayed from the embedded checkout widget.

    `data` is whatever the widget posted, any JSON value. Only objects and
    strings can signal a completion.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data: Any = None
    origin: Optional[str] = None
    checkout_id: Optional[str] = Field(
        None,
        alias="checkoutId",
        max_length=200,
        description="Client-side id of the checkout session, used to count it once",
    )


class CheckoutEventOut(BaseModel):
    completed: bool
    counted: bool
    count: int


# ============ Challenge Schemas ============


class CountdownOut(BaseModel):
    target: str
    started: bool
    days: int = Field(..., ge=0)
    hours: int = Field(..., ge=0, le=23)
    minutes: int = Field(..., ge=0, le=59)
    seconds: int = Field(..., ge=0, le=59)


class ChallengeDayOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day: int
    title: str
    submit_path: str = Field(..., serialization_alias="submitPath")
    final: bool = False


class ChallengeOut(BaseModel):
    name: str
    days: List[ChallengeDayOut]


__all__ = [
    "ChallengeDayOut",
    "ChallengeOut",
    "CheckoutEventIn",
    "CheckoutEventOut",
    "CountdownOut",
    "DocLinkSubmissionIn",
    "MarketResearchSubmissionIn",
    "ProfileLinkSubmissionIn",
    "RsvpCountOut",
    "RsvpIncrementOut",
    "StoreLinkSubmissionIn",
    "SubmissionOut",
    "ValidationErrorOut",
    "WorksheetRowIn",
    "WorksheetSubmissionIn",
]
