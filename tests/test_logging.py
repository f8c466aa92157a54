"""Tests for log redaction."""

from knowledge_portal.logging import redact_secret, redact_sensitive


def test_redact_secret() -> None:
    assert redact_secret("short") == "***"
    assert redact_secret("tok_1234567890") == "tok_12...(14 chars)"


def test_redact_sensitive_masks_credentials_only() -> None:
    event = {
        "event": "lesson_loaded",
        "signed_video_playback_token": "tok_1234567890",
        "access_token": None,
        "lesson_id": "les_1",
    }

    result = redact_sensitive(None, "info", event)

    assert result["signed_video_playback_token"] == "tok_12...(14 chars)"
    assert result["access_token"] is None
    assert result["lesson_id"] == "les_1"
