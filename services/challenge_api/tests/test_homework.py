"""
Route tests for the homework submission endpoints.
"""
import pytest

from challenge_api.models import STATUS_COMPLETE, STATUS_PENDING
from challenge_api.state import get_state

from conftest import FailingSink


def _worksheet_rows():
    return [
        {"cantBecause": "I can't start a business", "reframed": True,
         "neverEasierBecause": "templates exist for everything"},
        {"cantBecause": "", "reframed": False, "neverEasierBecause": ""},
    ]


class TestDay1Worksheet:
    """POST /api/homework/submit"""

    def test_missing_email(self, client):
        """A missing email is reported under the `email` key."""
        resp = client.post("/api/homework/submit", json={
            "username": "jane_doe",
            "worksheetData": _worksheet_rows(),
        })
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert "email" in body["errors"]
        assert "username" not in body["errors"]

    def test_success(self, client, sink, valid_identity):
        resp = client.post("/api/homework/submit", json={
            **valid_identity,
            "day": 1,
            "worksheetData": _worksheet_rows(),
            "notes": "loved it",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Homework submitted successfully!"
        assert isinstance(body["submissionId"], str)
        assert body["submissionId"].startswith("sub_")

        assert len(sink.rows) == 1
        tab, row = sink.rows[0]
        assert tab == "day1_worksheet"
        assert row["submissionId"] == body["submissionId"]
        assert row["reframeCount"] == 1
        assert row["reframes"] == '1. "I can\'t start a business" → "templates exist for everything"'
        assert row["notes"] == "loved it"
        assert row["status"] == STATUS_PENDING

    def test_worksheet_link_instead_of_rows(self, client, sink, valid_identity):
        resp = client.post("/api/homework/submit", json={
            **valid_identity,
            "worksheetLink": "https://docs.google.com/spreadsheets/d/abc/edit",
        })
        assert resp.status_code == 200
        _, row = sink.rows[0]
        assert row["worksheetLink"] == "https://docs.google.com/spreadsheets/d/abc/edit"
        assert row["reframeCount"] == 0

    def test_invalid_worksheet_link(self, client, valid_identity):
        resp = client.post("/api/homework/submit", json={
            **valid_identity,
            "worksheetLink": "not a link",
        })
        assert resp.status_code == 400
        assert resp.json()["errors"] == {"worksheetLink": "Please enter a valid URL"}

    def test_no_worksheet(self, client, valid_identity):
        resp = client.post("/api/homework/submit", json=valid_identity)
        assert resp.status_code == 400
        assert resp.json()["errors"]["worksheet"] == "Please complete at least one reframe"

    def test_notes_too_long(self, client, valid_identity):
        resp = client.post("/api/homework/submit", json={
            **valid_identity,
            "worksheetData": _worksheet_rows(),
            "notes": "x" * 501,
        })
        assert resp.status_code == 400
        assert "notes" in resp.json()["errors"]

    def test_day_defaults_to_one(self, client, sink, valid_identity):
        client.post("/api/homework/submit", json={**valid_identity, "worksheetData": _worksheet_rows()})
        assert sink.rows[0][1]["dayNumber"] == 1

    def test_all_errors_reported_together(self, client):
        resp = client.post("/api/homework/submit", json={"username": "x", "email": "nope"})
        assert resp.status_code == 400
        assert set(resp.json()["errors"]) == {"username", "email", "worksheet"}


class TestDay2MarketResearch:
    """POST /api/homework/submit-day2"""

    def test_success(self, client, sink, valid_identity):
        resp = client.post("/api/homework/submit-day2", json={
            **valid_identity,
            "market": "fitness",
            "whyProfitable": "people spend on health every month",
            "problem": "no time to plan workouts",
            "desiredOutcome": "get fit in 20 minutes a day",
        })
        assert resp.status_code == 200
        tab, row = sink.rows[0]
        assert tab == "day2_market_research"
        assert row["market"] == "fitness"
        assert row["researchLink"] == ""
        assert row["dayNumber"] == 2

    def test_short_answers(self, client, valid_identity):
        resp = client.post("/api/homework/submit-day2", json={
            **valid_identity,
            "market": "ab",
            "whyProfitable": "money",
            "problem": "",
        })
        assert resp.status_code == 400
        assert set(resp.json()["errors"]) == {"market", "whyProfitable", "problem", "desiredOutcome"}


@pytest.mark.parametrize(
    "path, field, tab, message",
    [
        ("/api/homework/submit-day3", "docLink", "day3_doc", "Please paste your one-page doc link"),
        ("/api/homework/submit-day4", "storeLink", "day4_store", "Please paste your store link"),
        ("/api/homework/submit-day5", "profileLink", "day5_profile", "Please paste your profile/socials link"),
    ],
)
class TestLinkDays:
    """Days 3-5 each collect a single pasted link."""

    def test_missing_link(self, client, valid_identity, path, field, tab, message):
        resp = client.post(path, json=valid_identity)
        assert resp.status_code == 400
        assert resp.json()["errors"] == {field: message}

    def test_short_link(self, client, valid_identity, path, field, tab, message):
        resp = client.post(path, json={**valid_identity, field: "abc"})
        assert resp.status_code == 400
        assert field in resp.json()["errors"]

    def test_success(self, client, sink, valid_identity, path, field, tab, message):
        resp = client.post(path, json={**valid_identity, field: "https://example.com/me"})
        assert resp.status_code == 200
        assert resp.json()["submissionId"].startswith("sub_")
        assert sink.rows[0][0] == tab
        assert sink.rows[0][1][field] == "https://example.com/me"


class TestDay5:
    def test_completion_message_and_status(self, client, sink, valid_identity):
        resp = client.post("/api/homework/submit-day5", json={
            **valid_identity,
            "profileLink": "https://x.com/jane",
        })
        assert resp.json()["message"] == "Congratulations! You've completed the 5 Day Challenge!"
        assert sink.rows[0][1]["status"] == STATUS_COMPLETE
        assert sink.rows[0][1]["dayNumber"] == 5


class TestMalformedBodies:
    """Bodies the schema cannot parse get the same 400 shape."""

    def test_invalid_json(self, client):
        resp = client.post(
            "/api/homework/submit-day3",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["errors"]

    def test_wrong_field_type(self, client, valid_identity):
        resp = client.post("/api/homework/submit-day3", json={**valid_identity, "docLink": ["a", "b"]})
        assert resp.status_code == 400
        assert "docLink" in resp.json()["errors"]

    def test_body_not_an_object(self, client):
        resp = client.post("/api/homework/submit-day4", json=["jane"])
        assert resp.status_code == 400
        assert "body" in resp.json()["errors"]

    def test_trailing_newline_in_identity(self, client, sink):
        """A newline after an otherwise valid username/email is rejected, nothing is forwarded."""
        resp = client.post("/api/homework/submit-day3", json={
            "username": "jane\n",
            "email": "jane@example.com\n",
            "docLink": "https://docs.google.com/document/d/xyz",
        })
        assert resp.status_code == 400
        assert set(resp.json()["errors"]) == {"username", "email"}
        assert sink.rows == []

    def test_unknown_keys_ignored(self, client, valid_identity):
        resp = client.post("/api/homework/submit-day4", json={
            **valid_identity,
            "storeLink": "https://whop.com/store",
            "referrer": "twitter",
        })
        assert resp.status_code == 200


class TestForwardingFailures:
    def test_sink_failure_still_succeeds(self, client, app_state, valid_identity):
        """The spreadsheet being down must not fail the user's submission."""
        failing = FailingSink()
        app_state.sink = failing

        resp = client.post("/api/homework/submit-day3", json={
            **valid_identity,
            "docLink": "https://docs.google.com/document/d/xyz",
        })
        assert resp.status_code == 200
        assert resp.json()["success"] is True
        assert failing.calls == 1

    def test_unexpected_error_is_500(self, client, monkeypatch, valid_identity):
        from challenge_api.routers import homework

        async def boom(*args, **kwargs):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(homework, "forward_submission", boom)
        resp = client.post("/api/homework/submit-day4", json={
            **valid_identity,
            "storeLink": "https://whop.com/store",
        })
        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "message": "Failed to submit homework. Please try again.",
        }

    def test_state_sink_used(self, client, app_state):
        assert get_state() is app_state
