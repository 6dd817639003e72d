from __future__ import annotations

from hubstate._redact import mask_voice_id, redact_for_log


def test_mask_voice_id_clips_voice_ids_only() -> None:
    voice_id = "amzn1.ask.account.AGHJKL1234567890QWERTY"
    assert mask_voice_id(voice_id) == voice_id[:30] + "..."
    assert mask_voice_id("web-guest-1") == "web-guest-1"


def test_redact_for_log_masks_identifiers() -> None:
    payload = {
        "userId": "amzn1.ask.account.AGHJKL1234567890QWERTY",
        "state": {"lastAction": "LIGHTS_ON", "note": "amzn1.ask.account.SECRETSECRETSECRET"},
        "mappings": {"amzn1.ask.account.AGHJKL1234567890QWERTY": "alexa-user-1"},
    }

    redacted = redact_for_log(payload)
    assert redacted["userId"].endswith("...")
    assert redacted["state"]["lastAction"] == "LIGHTS_ON"
    assert redacted["state"]["note"].endswith("...")
    assert list(redacted["mappings"].values()) == ["alexa-user-1"]
    assert "amzn1.ask.account.AGHJKL1234567890QWERTY" not in redacted["mappings"]


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_custom_prefix_is_honoured() -> None:
    voice_id = "voice." + "X" * 60
    assert mask_voice_id(voice_id, prefix="voice.") == voice_id[:30] + "..."
    assert mask_voice_id(voice_id) == voice_id

    redacted = redact_for_log({"mappings": {voice_id: "alexa-user-1"}, "note": voice_id}, prefix="voice.")
    assert redacted["note"] == voice_id[:30] + "..."
    assert list(redacted["mappings"]) == [voice_id[:30] + "..."]
