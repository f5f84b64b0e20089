"""Log redaction tests."""

from photoquest.middleware.logging import redact_secrets


def test_secrets_are_masked() -> None:
    event = redact_secrets(None, "info", {"event": "login_failed", "username": "alice", "password": "hunter22"})
    assert event["password"] == "***"
    assert event["username"] == "alice"


def test_events_without_secrets_untouched() -> None:
    event = {"event": "photo_approved", "pending_id": 3}
    assert redact_secrets(None, "info", dict(event)) == event
