"""5 Day Challenge homework and RSVP API."""

__version__ = "1.0.0"
