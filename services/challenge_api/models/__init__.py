from __future__ import annotations

from .submission import (
    STATUS_COMPLETE,
    STATUS_PENDING,
    DocLinkSubmission,
    MarketResearchSubmission,
    ProfileLinkSubmission,
    StoreLinkSubmission,
    Submission,
    WorksheetRow,
    WorksheetSubmission,
    new_submission_id,
    utc_iso,
)

# Every submission type, in challenge-day order
SUBMISSION_TYPES = [
    WorksheetSubmission,
    MarketResearchSubmission,
    DocLinkSubmission,
    StoreLinkSubmission,
    ProfileLinkSubmission,
]
