# services/challenge_api/settings.py
from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field
import base64
from datetime import datetime, timezone
from typing import List, Optional
from pathlib import Path

class Settings(BaseSettings):
    # RSVP counter storage: "memory" | "json" | "sqlite"
    # memory resets on restart; that is the default for the landing page
    counter_backend: str = "memory"
    counter_file: str = "data/rsvp_count.json"
    db_url: str = "sqlite:///data/challenge.db"

    # How long GET /api/rsvp may serve a cached count (seconds). 0 disables.
    rsvp_cache_ttl_seconds: float = 2.0

    # Where homework submissions are forwarded: "webhook" | "sheets" | "log"
    submission_sink: str = "webhook"

    # Google Apps Script web app that appends rows to the cohort sheet
    sheets_webhook_url: str = ""
    forward_timeout_seconds: float = 10.0

    # Direct gspread access (SUBMISSION_SINK=sheets and the init-sheets CLI)
    google_sa_json: str = ""
    google_sa_json_base64: str = ""
    sheets_spreadsheet_id: str = ""

    # CORS settings
    allowed_origins: str = "http://localhost:3000,http://localhost:3001"

    # Landing page countdown target (4PM EST)
    challenge_start: datetime = datetime(2026, 1, 26, 21, 0, 0, tzinfo=timezone.utc)

    # Shared secret for POST /api/checkout/events. Empty = open endpoint.
    checkout_event_secret: str = ""

    # Requests per minute per client, per route
    rate_limit_read_per_minute: int = 100
    rate_limit_write_per_minute: int = 20

    # Email settings (forward-failure alerts)
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from_email: str = ""
    smtp_from_name: str = "5 Day Challenge"

    # Comma-separated alert recipients for sheet forwarding failures
    alert_emails: Optional[str] = Field(
        default=None,
        description="Comma-separated emails to alert when a submission could not be forwarded",
    )

    log_level: str = "INFO"

    model_config = ConfigDict(
        # Always load .env from the same folder as this settings.py
        env_file=str(Path(__file__).resolve().parent / ".env"),
        extra="ignore",
    )


    def resolved_google_sa_json(self) -> str:
        """
        Return the path to the service account JSON.
        If GOOGLE_SA_JSON_BASE64 is set, decode it to a temp file.
        Otherwise return GOOGLE_SA_JSON (a path or inline JSON).
        """
        if self.google_sa_json_base64:
            import tempfile

            decoded = base64.b64decode(self.google_sa_json_base64)
            temp_file = tempfile.NamedTemporaryFile(mode='w', delete=False, suffix='.json')
            temp_file.write(decoded.decode('utf-8'))
            temp_file.close()
            return temp_file.name

        return self.google_sa_json

    def get_origins_list(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        if not self.allowed_origins:
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def get_alert_recipients(self) -> List[str]:
        raw = (self.alert_emails or "").strip()
        return [x.strip() for x in raw.split(",") if x and x.strip()]


_settings_instance = None

def get_settings() -> Settings:
    """Singleton pattern for settings."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached instance so the next get_settings() re-reads the environment."""
    global _settings_instance
    _settings_instance = None
