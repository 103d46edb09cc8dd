"""
Homework submission endpoints, one per challenge day.

Every route follows the same contract:
- 400 {success: false, message: "Validation failed", errors: {...}} on bad input
- 200 {success: true, message, submissionId} once accepted
- 500 {success: false, message} on anything unexpected
Forwarding to the spreadsheet is best-effort and never fails the request.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from typing import Annotated, Dict
import logging

from challenge_api.adapters.base import SubmissionSink
from challenge_api.core.forwarding import forward_submission
from challenge_api.core.validation import (
    collect_errors,
    link_validator,
    min_length_validator,
    split_worksheet_rows,
    validate_email,
    validate_notes,
    validate_url,
    validate_username,
    validate_worksheet_rows,
)
from challenge_api.models import (
    DocLinkSubmission,
    MarketResearchSubmission,
    ProfileLinkSubmission,
    StoreLinkSubmission,
    Submission,
    WorksheetRow,
    WorksheetSubmission,
)
from challenge_api.schemas import (
    DocLinkSubmissionIn,
    MarketResearchSubmissionIn,
    ProfileLinkSubmissionIn,
    StoreLinkSubmissionIn,
    SubmissionOut,
    WorksheetSubmissionIn,
)
from challenge_api.state import get_sink

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/homework", tags=["homework"])

# DI alias
Sink = Annotated[SubmissionSink, Depends(get_sink)]

SUBMITTED_MESSAGE = "Homework submitted successfully!"
COMPLETED_MESSAGE = "Congratulations! You've completed the 5 Day Challenge!"
FAILED_MESSAGE = "Failed to submit homework. Please try again."

validate_doc_link = link_validator("Please paste your one-page doc link")
validate_store_link = link_validator("Please paste your store link")
validate_profile_link = link_validator("Please paste your profile/socials link")
validate_market = min_length_validator(3, "Please describe your market")
validate_why_profitable = min_length_validator(10, "Please explain why this market is profitable")
validate_problem = min_length_validator(10, "Please describe the problem your audience has")
validate_desired_outcome = min_length_validator(10, "Please describe what outcome they want")

_RESPONSES = {
    400: {"description": "Validation failed"},
    500: {"description": "Unexpected error"},
}


def validation_failed(errors: Dict[str, str]) -> JSONResponse:
    logger.info(f"❌ Validation errors: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


def submission_failed(path: str, e: Exception) -> JSONResponse:
    logger.error(f"❌ Submission error on {path}: {e}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": FAILED_MESSAGE},
    )


def _identity_checks(body) -> Dict[str, object]:
    return {
        "username": validate_username(body.username),
        "email": validate_email(body.email),
    }


async def _accept(sink: SubmissionSink, submission: Submission, message: str) -> dict:
    await forward_submission(sink, submission)
    logger.info(f"✅ Day {submission.day_number} homework submission successful for: {submission.username}")
    return {
        "success": True,
        "message": message,
        "submissionId": submission.submission_id,
    }


@router.post("/submit", response_model=SubmissionOut, responses=_RESPONSES)
async def submit_worksheet(body: WorksheetSubmissionIn, sink: Sink):
    """Day 1: reframes worksheet (rows), or a link to a filled-in copy."""
    try:
        logger.info("📝 POST /api/homework/submit - Processing submission...")

        rows = [r.model_dump(by_alias=True) for r in body.worksheet_data or []]
        checks = _identity_checks(body)
        if body.worksheet_link:
            checks["worksheetLink"] = validate_url(body.worksheet_link)
        if rows or not body.worksheet_link:
            checks["worksheet"] = validate_worksheet_rows(rows)
        checks["notes"] = validate_notes(body.notes)

        errors = collect_errors(checks)
        if errors:
            return validation_failed(errors)

        complete, _ = split_worksheet_rows(rows)
        submission = WorksheetSubmission(
            username=body.username,
            email=body.email,
            day_number=body.day or 1,
            notes=body.notes or "",
            worksheet_data=[WorksheetRow.from_api(r) for r in complete],
            worksheet_link=(body.worksheet_link or "").strip(),
        )
        return await _accept(sink, submission, SUBMITTED_MESSAGE)
    except Exception as e:
        return submission_failed("/api/homework/submit", e)


@router.post("/submit-day2", response_model=SubmissionOut, responses=_RESPONSES)
async def submit_market_research(body: MarketResearchSubmissionIn, sink: Sink):
    """Day 2: market research answers."""
    try:
        logger.info("📝 POST /api/homework/submit-day2 - Processing submission...")

        checks = _identity_checks(body)
        checks.update({
            "market": validate_market(body.market),
            "whyProfitable": validate_why_profitable(body.why_profitable),
            "problem": validate_problem(body.problem),
            "desiredOutcome": validate_desired_outcome(body.desired_outcome),
            "notes": validate_notes(body.notes),
        })
        errors = collect_errors(checks)
        if errors:
            return validation_failed(errors)

        submission = MarketResearchSubmission(
            username=body.username,
            email=body.email,
            day_number=body.day or 2,
            notes=body.notes or "",
            market=body.market,
            why_profitable=body.why_profitable,
            problem=body.problem,
            desired_outcome=body.desired_outcome,
            research_link=body.research_link or "",
        )
        return await _accept(sink, submission, SUBMITTED_MESSAGE)
    except Exception as e:
        return submission_failed("/api/homework/submit-day2", e)


@router.post("/submit-day3", response_model=SubmissionOut, responses=_RESPONSES)
async def submit_doc_link(body: DocLinkSubmissionIn, sink: Sink):
    """Day 3: one-page doc link."""
    try:
        logger.info("📝 POST /api/homework/submit-day3 - Processing submission...")

        checks = _identity_checks(body)
        checks["docLink"] = validate_doc_link(body.doc_link)
        checks["notes"] = validate_notes(body.notes)
        errors = collect_errors(checks)
        if errors:
            return validation_failed(errors)

        submission = DocLinkSubmission(
            username=body.username,
            email=body.email,
            day_number=body.day or 3,
            notes=body.notes or "",
            doc_link=body.doc_link,
        )
        return await _accept(sink, submission, SUBMITTED_MESSAGE)
    except Exception as e:
        return submission_failed("/api/homework/submit-day3", e)


@router.post("/submit-day4", response_model=SubmissionOut, responses=_RESPONSES)
async def submit_store_link(body: StoreLinkSubmissionIn, sink: Sink):
    """Day 4: store link."""
    try:
        logger.info("📝 POST /api/homework/submit-day4 - Processing submission...")

        checks = _identity_checks(body)
        checks["storeLink"] = validate_store_link(body.store_link)
        checks["notes"] = validate_notes(body.notes)
        errors = collect_errors(checks)
        if errors:
            return validation_failed(errors)

        submission = StoreLinkSubmission(
            username=body.username,
            email=body.email,
            day_number=body.day or 4,
            notes=body.notes or "",
            store_link=body.store_link,
        )
        return await _accept(sink, submission, SUBMITTED_MESSAGE)
    except Exception as e:
        return submission_failed("/api/homework/submit-day4", e)


@router.post("/submit-day5", response_model=SubmissionOut, responses=_RESPONSES)
async def submit_profile_link(body: ProfileLinkSubmissionIn, sink: Sink):
    """Day 5: profile/socials link. Marks the challenge complete."""
    try:
        logger.info("📝 POST /api/homework/submit-day5 - Processing submission...")

        checks = _identity_checks(body)
        checks["profileLink"] = validate_profile_link(body.profile_link)
        checks["notes"] = validate_notes(body.notes)
        errors = collect_errors(checks)
        if errors:
            return validation_failed(errors)

        submission = ProfileLinkSubmission(
            username=body.username,
            email=body.email,
            day_number=body.day or 5,
            notes=body.notes or "",
            profile_link=body.profile_link,
        )
        return await _accept(sink, submission, COMPLETED_MESSAGE)
    except Exception as e:
        return submission_failed("/api/homework/submit-day5", e)
