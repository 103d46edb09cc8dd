"""
Pydantic schemas for homework submissions.

Request bodies are deliberately lenient (every field optional) so that
missing or empty values reach the field validators in core.validation and
come back as field-level messages instead of schema errors.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class WorksheetRowIn(_CamelModel):
    """One row of the day 1 reframes worksheet."""
    cant_because: str = Field("", description="I can't ... because ...")
    reframed: bool = Field(False, description="Whether the belief was reframed")
    never_easier_because: str = Field("", description="It's never been easier because ...")


class _SubmissionIn(_CamelModel):
    username: Optional[str] = Field(None, description="Community username")
    email: Optional[str] = Field(None, description="Contact email")
    day: Optional[int] = Field(None, description="Challenge day; defaults to the route's day")
    notes: Optional[str] = Field(None, description="Optional notes (max 500 chars)")


class WorksheetSubmissionIn(_SubmissionIn):
    """Day 1. Either worksheet rows or a link to a filled-in worksheet."""
    worksheet_data: Optional[List[WorksheetRowIn]] = None
    worksheet_link: Optional[str] = None


class MarketResearchSubmissionIn(_SubmissionIn):
    """Day 2."""
    market: Optional[str] = None
    why_profitable: Optional[str] = None
    problem: Optional[str] = None
    desired_outcome: Optional[str] = None
    research_link: Optional[str] = None


class DocLinkSubmissionIn(_SubmissionIn):
    """Day 3."""
    doc_link: Optional[str] = None


class StoreLinkSubmissionIn(_SubmissionIn):
    """Day 4."""
    store_link: Optional[str] = None


class ProfileLinkSubmissionIn(_SubmissionIn):
    """Day 5."""
    profile_link: Optional[str] = None


class SubmissionOut(_CamelModel):
    success: bool = True
    message: str
    submission_id: Optional[str] = None


class ValidationErrorOut(BaseModel):
    success: bool = False
    message: str = "Validation failed"
    errors: Dict[str, str]
