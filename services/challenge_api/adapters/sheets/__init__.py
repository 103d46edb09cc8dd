# services/challenge_api/adapters/sheets/__init__.py
from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Dict, List, Optional

import gspread
from google.oauth2.service_account import Credentials

logger = logging.getLogger(__name__)

# ========== Sheet schema (HEADERS) ==========

_COMMON_HEAD = ["timestamp", "submissionId", "dayNumber", "username", "email"]
_COMMON_TAIL = ["notes", "status"]

HEADERS = {
    "day1_worksheet": _COMMON_HEAD + [
        "reframes",
        "reframeCount",
        "worksheetLink",
    ] + _COMMON_TAIL,
    "day2_market_research": _COMMON_HEAD + [
        "market",
        "whyProfitable",
        "problem",
        "desiredOutcome",
        "researchLink",
    ] + _COMMON_TAIL,
    "day3_doc": _COMMON_HEAD + ["docLink"] + _COMMON_TAIL,
    "day4_store": _COMMON_HEAD + ["storeLink"] + _COMMON_TAIL,
    "day5_profile": _COMMON_HEAD + ["profileLink"] + _COMMON_TAIL,
}

SHEET_TAB_ORDER = [
    "day1_worksheet",
    "day2_market_research",
    "day3_doc",
    "day4_store",
    "day5_profile",
]

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def extract_spreadsheet_id(value: str) -> str:
    """
    Accepts either spreadsheet_id OR full Google Sheets URL.
    Returns spreadsheet_id.
    """
    if not value:
        return ""
    s = value.strip()
    m = re.search(r"/spreadsheets/d/([a-zA-Z0-9-_]+)", s)
    if m:
        return m.group(1)
    return s


def sa_client_from_json_or_path(google_sa_json: str) -> gspread.Client:
    """
    Accepts either:
      - absolute/relative path to a service-account JSON file, OR
      - a literal JSON string.
    Returns an authorized gspread Client.
    """
    if not google_sa_json:
        raise ValueError("GOOGLE_SA_JSON is required (path to file or inline JSON).")

    # Try to treat as inline JSON first
    try:
        parsed = json.loads(google_sa_json)
        creds = Credentials.from_service_account_info(parsed, scopes=SCOPES)
        return gspread.authorize(creds)
    except json.JSONDecodeError:
        # Not JSON; treat as file path
        creds = Credentials.from_service_account_file(google_sa_json, scopes=SCOPES)
        return gspread.authorize(creds)


def align_row(header: List[str], data: Dict[str, Any]) -> List[Any]:
    """Order values by the sheet's header; unknown keys are dropped, missing ones blank."""
    return ["" if data.get(col) is None else data.get(col) for col in header]


class SheetsSink:
    """
    Appends submission rows straight into the cohort spreadsheet with a
    service account, one tab per challenge day.

    - Tabs are opened lazily and cached
    - Rows follow the SHEET'S CURRENT header order, so extra columns added
      by hand in the sheet are left alone
    - gspread is blocking, so calls run in a worker thread
    """

    name = "sheets"

    def __init__(
        self,
        google_sa_json: Optional[str],
        spreadsheet_id: Optional[str],
        client: Optional[gspread.Client] = None,
    ) -> None:
        if not spreadsheet_id or (client is None and not google_sa_json):
            raise ValueError("SheetsSink requires GOOGLE_SA_JSON and SHEETS_SPREADSHEET_ID")

        self.spreadsheet_id = extract_spreadsheet_id(spreadsheet_id)
        self._google_sa_json = google_sa_json
        self._client = client
        self._ss: Optional[gspread.Spreadsheet] = None
        self.ws: dict[str, gspread.Worksheet] = {}

    # ========== Worksheet helpers ==========

    def _spreadsheet(self) -> gspread.Spreadsheet:
        if self._ss is None:
            if self._client is None:
                self._client = sa_client_from_json_or_path(self._google_sa_json or "")
            self._ss = self._client.open_by_key(self.spreadsheet_id)
        return self._ss

    def _worksheet(self, tab: str) -> gspread.Worksheet:
        ws = self.ws.get(tab)
        if ws is not None:
            return ws

        ss = self._spreadsheet()
        try:
            ws = ss.worksheet(tab)
        except gspread.WorksheetNotFound:
            ws = ss.add_worksheet(title=tab, rows=1000, cols=len(HEADERS.get(tab, [])) + 2)
        self.ws[tab] = ws
        return ws

    def _header(self, tab: str) -> List[str]:
        ws = self._worksheet(tab)
        header = ws.row_values(1)
        if not header:
            header = HEADERS.get(tab, [])[:]
            if not header:
                raise ValueError(f"Unknown sheet tab: {tab}")
            ws.update("A1", [header])
        return header

    def append_sync(self, tab: str, row: Dict[str, Any]) -> None:
        """Append one row using the sheet's header order."""
        header = self._header(tab)
        self._worksheet(tab).append_row(align_row(header, row), value_input_option="USER_ENTERED")
        logger.info(f"Appended {row.get('submissionId', '')} to sheet tab '{tab}'")

    async def append(self, tab: str, row: Dict[str, Any]) -> None:
        await asyncio.to_thread(self.append_sync, tab, row)

    def ping(self) -> None:
        # Quick check - read the title
        _ = self._spreadsheet().title
