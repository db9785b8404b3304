from __future__ import annotations

from nest_exporter._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "Authorization": "Bearer c.secret",
        "accept": "application/json",
        "access_token": "c.secret",
        "expires_in": 315360000,
        "nested": {"client_secret": "shh", "code": "PIN123"},
    }

    redacted = redact_for_log(payload)
    assert redacted["Authorization"] == "<redacted>"
    assert redacted["access_token"] == "<redacted>"
    assert redacted["nested"]["client_secret"] == "<redacted>"
    assert redacted["nested"]["code"] == "<redacted>"
    assert redacted["accept"] == "application/json"
    assert redacted["expires_in"] == 315360000


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_masks_bearer_tokens_in_strings() -> None:
    redacted = redact_for_log(["HTTP 401: Bearer c.secret rejected"])
    assert redacted == ["HTTP 401: Bearer <redacted> rejected"]
