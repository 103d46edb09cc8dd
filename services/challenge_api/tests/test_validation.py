"""
Tests for validation functions.

Run with: pytest services/challenge_api/tests/test_validation.py -v
"""
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


class TestValidateUsername:
    """Tests for username validation."""

    def test_valid_usernames(self):
        """Letters, digits and underscores, 2+ chars, should pass."""
        assert validate_username("jo") is None
        assert validate_username("jane_doe_99") is None

    def test_too_short(self):
        assert validate_username("j") is not None

    def test_invalid_characters(self):
        """Spaces, dashes and dots are rejected."""
        assert validate_username("jane doe") is not None
        assert validate_username("jane-doe") is not None
        assert validate_username("jane.doe") is not None

    def test_missing(self):
        assert validate_username(None) is not None
        assert validate_username("") is not None

    def test_trailing_newline(self):
        """The whole value must match, not just up to a trailing newline."""
        assert validate_username("jane\n") is not None
        assert validate_username("\njane") is not None


class TestValidateEmail:
    """Tests for email validation."""

    def test_valid_email(self):
        assert validate_email("jane@example.com") is None
        assert validate_email("a.b+tag@sub.example.co") is None

    def test_invalid_email(self):
        assert validate_email("jane@example") == "Please enter a valid email address"
        assert validate_email("jane example@x.com") is not None
        assert validate_email("@example.com") is not None

    def test_missing_email(self):
        assert validate_email(None) is not None
        assert validate_email("") is not None

    def test_trailing_newline(self):
        assert validate_email("jane@example.com\n") is not None


class TestValidateNotes:
    """Notes are optional but capped at 500 characters."""

    def test_empty_notes(self):
        assert validate_notes(None) is None
        assert validate_notes("") is None

    def test_limit(self):
        assert validate_notes("x" * 500) is None
        assert validate_notes("x" * 501) == "Notes must be 500 characters or less"


class TestLinkValidators:
    """Pasted links only need a minimum length; full URLs are checked separately."""

    def test_link_min_length(self):
        validate = link_validator("Please paste your store link")
        assert validate("abcd") == "Please paste your store link"
        assert validate("abcde") is None
        assert validate(None) == "Please paste your store link"

    def test_validate_url(self):
        assert validate_url("https://docs.google.com/document/d/abc") is None
        assert validate_url("http://example.com") is None
        assert validate_url("docs.google.com/abc") == "Please enter a valid URL"
        assert validate_url("ftp://example.com/file") == "Please enter a valid URL"
        assert validate_url("") == "Worksheet link is required"

    def test_min_length_validator(self):
        validate = min_length_validator(10, "Too short")
        assert validate("123456789") == "Too short"
        assert validate("1234567890") is None


class TestWorksheetRows:
    """Tests for the day 1 worksheet rows."""

    def test_complete_rows(self):
        rows = [
            {"cantBecause": "I can't sell", "reframed": True, "neverEasierBecause": "AI writes copy"},
            {"cantBecause": "", "reframed": False, "neverEasierBecause": ""},
        ]
        complete, incomplete = split_worksheet_rows(rows)
        assert len(complete) == 1
        assert incomplete == 0
        assert validate_worksheet_rows(rows) is None

    def test_half_filled_row(self):
        """A row with only one column filled is an error."""
        rows = [
            {"cantBecause": "I can't code", "neverEasierBecause": "no-code tools"},
            {"cantBecause": "I have no time", "neverEasierBecause": "   "},
        ]
        assert validate_worksheet_rows(rows) == "Please complete both columns for each row you fill out"

    def test_only_blank_rows(self):
        rows = [{"cantBecause": " ", "neverEasierBecause": ""}] * 3
        assert validate_worksheet_rows(rows) == "Please complete at least one reframe"

    def test_missing_rows(self):
        assert validate_worksheet_rows(None) == "Please complete at least one reframe"
        assert validate_worksheet_rows([]) == "Please complete at least one reframe"


class TestCollectErrors:
    def test_drops_passing_checks(self):
        errors = collect_errors({
            "username": None,
            "email": "Please enter a valid email address",
            "notes": None,
        })
        assert errors == {"email": "Please enter a valid email address"}

    def test_no_errors(self):
        assert collect_errors({"username": None}) == {}
