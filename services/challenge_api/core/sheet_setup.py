"""
Google Sheets setup for the 5 Day Challenge homework sheet.
Creates one tab per challenge day (or verifies its header row).

Run:
    challenge-api-init-sheets
Reads GOOGLE_SA_JSON / GOOGLE_SA_JSON_BASE64 and SHEETS_SPREADSHEET_ID.
"""
from __future__ import annotations

import sys
from typing import Dict

import gspread

from challenge_api.adapters.sheets import (
    HEADERS,
    SHEET_TAB_ORDER,
    extract_spreadsheet_id,
    sa_client_from_json_or_path,
)
from challenge_api.settings import get_settings

TAB_DESCRIPTIONS = {
    "day1_worksheet": "Day 1 reframes worksheet",
    "day2_market_research": "Day 2 market research",
    "day3_doc": "Day 3 one-page doc links",
    "day4_store": "Day 4 store links",
    "day5_profile": "Day 5 profile links (challenge complete)",
}


def _last_column(n: int) -> str:
    return gspread.utils.rowcol_to_a1(1, n).rstrip("1")


def ensure_tabs(spreadsheet: gspread.Spreadsheet, rows: int = 1000) -> Dict[str, str]:
    """
    Create missing tabs and fix header rows.

    Returns:
        {tab: "created" | "updated" | "ok"}
    """
    result: Dict[str, str] = {}

    for tab in SHEET_TAB_ORDER:
        headers = HEADERS[tab]
        header_range = f"A1:{_last_column(len(headers))}1"
        try:
            worksheet = spreadsheet.worksheet(tab)
        except gspread.WorksheetNotFound:
            worksheet = spreadsheet.add_worksheet(title=tab, rows=rows, cols=len(headers) + 2)
            worksheet.update(header_range, [headers])
            result[tab] = "created"
            continue

        existing = worksheet.row_values(1)
        if existing[: len(headers)] != headers:
            worksheet.update(header_range, [headers])
            result[tab] = "updated"
        else:
            result[tab] = "ok"

    return result


def main() -> int:
    settings = get_settings()
    spreadsheet_id = extract_spreadsheet_id(settings.sheets_spreadsheet_id)
    if not spreadsheet_id:
        print("✗ SHEETS_SPREADSHEET_ID is not set")
        return 1

    print("🔧 Initializing 5 Day Challenge homework sheet...")
    print(f"📄 Spreadsheet ID: {spreadsheet_id}\n")

    try:
        gc = sa_client_from_json_or_path(settings.resolved_google_sa_json())
        spreadsheet = gc.open_by_key(spreadsheet_id)
        print(f"✓ Connected to spreadsheet: '{spreadsheet.title}'\n")
    except Exception as e:
        print(f"✗ Failed to connect: {e}")
        return 1

    result = ensure_tabs(spreadsheet)
    for tab, outcome in result.items():
        marker = {"created": "✅ Created", "updated": "⚠️  Updated headers of", "ok": "✓ Verified"}[outcome]
        print(f"{marker} '{tab}' - {TAB_DESCRIPTIONS[tab]} ({len(HEADERS[tab])} columns)")

    created = sum(1 for v in result.values() if v == "created")
    updated = sum(1 for v in result.values() if v == "updated")
    print(f"\n📊 Summary: {created} created, {updated} updated, {len(result)} tabs total")
    print(f"   https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit")
    return 0


if __name__ == "__main__":
    sys.exit(main())
