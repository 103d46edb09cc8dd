# services/challenge_api/models/submission.py
from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List

STATUS_PENDING = "Pending Review"
STATUS_COMPLETE = "Challenge Complete"

_ID_ALPHABET = string.digits + string.ascii_lowercase


def utc_iso() -> str:
  return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def new_submission_id() -> str:
  """sub_<epoch millis>_<6 base36 chars>"""
  suffix = "".join(random.choices(_ID_ALPHABET, k=6))
  return f"sub_{int(time.time() * 1000)}_{suffix}"


@dataclass
class WorksheetRow:
  """One limiting belief and its reframe from the day 1 worksheet."""

  cant_because: str = ""
  reframed: bool = False
  never_easier_because: str = ""

  @classmethod
  def from_api(cls, data: Dict[str, Any]) -> "WorksheetRow":
    return cls(
      cant_because=(data.get("cantBecause") or "").strip(),
      reframed=bool(data.get("reframed", False)),
      never_easier_because=(data.get("neverEasierBecause") or "").strip(),
    )


@dataclass
class Submission:
  """
  Domain model for one homework submission, shared by every challenge day.

  `to_sheet()` produces the flat camelCase row that is forwarded to the
  spreadsheet; its keys are the column headers of the day's tab.
  """

  TAB: ClassVar[str] = ""

  username: str = ""
  email: str = ""
  day_number: int = 0
  notes: str = ""
  status: str = STATUS_PENDING
  submission_id: str = field(default_factory=new_submission_id)
  timestamp: str = field(default_factory=utc_iso)

  def extra_fields(self) -> Dict[str, Any]:
    return {}

  def to_sheet(self) -> Dict[str, Any]:
    row: Dict[str, Any] = {
      "timestamp": self.timestamp,
      "submissionId": self.submission_id,
      "dayNumber": self.day_number,
      "username": self.username,
      "email": self.email,
    }
    row.update(self.extra_fields())
    row["notes"] = self.notes
    row["status"] = self.status
    return row

  def fallback_lines(self) -> List[str]:
    """Human-readable dump used when the row could not be forwarded."""
    return [f"{key}: {value}" for key, value in self.to_sheet().items()]


@dataclass
class WorksheetSubmission(Submission):
  """Day 1: "Never Been Easier" reframes worksheet (rows or a link)."""

  TAB: ClassVar[str] = "day1_worksheet"

  worksheet_data: List[WorksheetRow] = field(default_factory=list)
  worksheet_link: str = ""

  def reframes_text(self) -> str:
    return "\n".join(
      f'{i}. "{row.cant_because}" → "{row.never_easier_because}"'
      for i, row in enumerate(self.worksheet_data, start=1)
    )

  def extra_fields(self) -> Dict[str, Any]:
    return {
      "reframes": self.reframes_text(),
      "reframeCount": len(self.worksheet_data),
      "worksheetLink": self.worksheet_link,
    }


@dataclass
class MarketResearchSubmission(Submission):
  """Day 2: market research answers."""

  TAB: ClassVar[str] = "day2_market_research"

  market: str = ""
  why_profitable: str = ""
  problem: str = ""
  desired_outcome: str = ""
  research_link: str = ""

  def extra_fields(self) -> Dict[str, Any]:
    return {
      "market": self.market,
      "whyProfitable": self.why_profitable,
      "problem": self.problem,
      "desiredOutcome": self.desired_outcome,
      "researchLink": self.research_link,
    }


@dataclass
class DocLinkSubmission(Submission):
  """Day 3: one-page doc link."""

  TAB: ClassVar[str] = "day3_doc"

  doc_link: str = ""

  def extra_fields(self) -> Dict[str, Any]:
    return {"docLink": self.doc_link}


@dataclass
class StoreLinkSubmission(Submission):
  """Day 4: store link."""

  TAB: ClassVar[str] = "day4_store"

  store_link: str = ""

  def extra_fields(self) -> Dict[str, Any]:
    return {"storeLink": self.store_link}


@dataclass
class ProfileLinkSubmission(Submission):
  """Day 5: profile/socials link. Completes the challenge."""

  TAB: ClassVar[str] = "day5_profile"

  profile_link: str = ""
  status: str = STATUS_COMPLETE

  def extra_fields(self) -> Dict[str, Any]:
    return {"profileLink": self.profile_link}
