import base64

import pytest

from xsrf_guard import GuardConfig, MisconfiguredError, TokenGuard, ValidationResult

FIELD = "__xsrfprotect_tok"


def make_guard(clock=None, **overrides) -> TokenGuard:
    settings = {"secret_key": b"k1", "context_url": "/f", "user_data": "u1", "max_age": 3600}
    settings.update(overrides)
    if clock is None:
        return TokenGuard(GuardConfig(**settings))
    return TokenGuard(GuardConfig(**settings), clock=clock)


def test_round_trip_succeeds() -> None:
    guard = make_guard()
    token = guard.issue_token_value(now=1000)
    outcome = guard.validate({FIELD: token}, now=1000)
    assert outcome.result is ValidationResult.SUCCESS
    assert outcome.valid is True
    assert outcome.reason == "ok"
    assert guard.last_error is None


def test_round_trip_without_context_fields() -> None:
    guard = TokenGuard(GuardConfig(secret_key="plain-text-key"))
    token = guard.issue_token_value(now=50)
    assert guard.validate({FIELD: token}, now=50).result is ValidationResult.SUCCESS


def test_expiry_boundary_is_inclusive() -> None:
    guard = make_guard()
    token = guard.issue_token_value(now=1000)
    assert guard.validate({FIELD: token}, now=4600).result is ValidationResult.SUCCESS

    expired = guard.validate({FIELD: token}, now=4601)
    assert expired.result is ValidationResult.EXPIRED
    assert expired.reason == "token_expired"
    assert guard.last_error == "Token has expired"


def test_zero_max_age_only_accepts_same_second() -> None:
    guard = make_guard(max_age=0)
    token = guard.issue_token_value(now=1000)
    assert guard.validate({FIELD: token}, now=1000).valid
    assert guard.validate({FIELD: token}, now=1001).result is ValidationResult.EXPIRED


def test_flipping_any_signature_bit_is_invalid() -> None:
    guard = make_guard()
    decoded = bytearray(base64.b64decode(guard.issue_token_value(now=1000)))
    for index in range(64):
        tampered = bytearray(decoded)
        tampered[index] ^= 0x01
        token = base64.b64encode(bytes(tampered)).decode()
        outcome = guard.validate({FIELD: token}, now=1000)
        assert outcome.result is ValidationResult.INVALID
        assert outcome.reason == "invalid_signature"


def test_altered_timestamp_is_invalid_not_expired() -> None:
    guard = make_guard()
    signature = base64.b64decode(guard.issue_token_value(now=1000)).split(b":", 1)[0]
    for timestamp in (b"999", b"01000", b"1"):
        token = base64.b64encode(signature + b":" + timestamp).decode()
        assert guard.validate({FIELD: token}, now=1000).result is ValidationResult.INVALID


def test_missing_field_and_request() -> None:
    guard = make_guard()
    outcome = guard.validate({"test": "foobar"}, now=1000)
    assert outcome.result is ValidationResult.MISSING
    assert outcome.reason == "missing_token"
    assert guard.error() == "Missing token"

    assert guard.validate(None, now=1000).result is ValidationResult.MISSING
    assert guard.validate(["not", "a", "mapping"], now=1000).reason == "missing_request"


def test_malformed_tokens_are_invalid() -> None:
    guard = make_guard()
    cases = {
        "***": "token_decode_failed",
        "Zm9v": "malformed_token",
        base64.b64encode(b"abc:xyz").decode(): "malformed_token",
        "": "malformed_token",
    }
    for value, reason in cases.items():
        outcome = guard.validate({FIELD: value}, now=1000)
        assert outcome.result is ValidationResult.INVALID
        assert outcome.reason == reason

    assert guard.validate({FIELD: 12345}, now=1000).reason == "token_decode_failed"
    assert guard.validate({FIELD: ["a", "b"]}, now=1000).reason == "token_decode_failed"


def test_bytes_token_value_is_accepted() -> None:
    guard = make_guard()
    token = guard.issue_token_value(now=1000).encode()
    assert guard.validate({FIELD: token}, now=1000).valid


def test_cross_context_binding() -> None:
    issuing = make_guard(context_url="A")
    token = issuing.issue_token_value(now=1000)
    assert make_guard(context_url="B").validate({FIELD: token}, now=1000).result is ValidationResult.INVALID
    assert make_guard(context_url="A", user_data="other").validate({FIELD: token}, now=1000).result is ValidationResult.INVALID
    assert make_guard(context_url="A", secret_key=b"k2").validate({FIELD: token}, now=1000).result is ValidationResult.INVALID
    assert make_guard(context_url="A").validate({FIELD: token}, now=1000).valid


def test_other_frontend_with_same_key_accepts_token() -> None:
    token = make_guard().issue_token_value(now=1000)
    assert make_guard().validate({FIELD: token}, now=1200).valid


def test_missing_key_fails_issue_and_validation() -> None:
    guard = TokenGuard()
    with pytest.raises(MisconfiguredError):
        guard.issue_token_value(now=1000)
    with pytest.raises(MisconfiguredError):
        guard.render_field()

    outcome = guard.validate({FIELD: "anything"}, now=1000)
    assert outcome.result is ValidationResult.INVALID
    assert outcome.reason == "no_secret_key"
    assert guard.last_error == "No secret key has been set"


def test_key_check_precedes_request_check() -> None:
    assert TokenGuard().validate(None).reason == "no_secret_key"


def test_mutators_reconfigure_guard() -> None:
    guard = TokenGuard(clock=lambda: 1000)
    guard.set_key("k1")
    guard.set_url("/f")
    guard.set_user_data("u1")
    guard.set_timeout(10)
    guard.set_field_name("csrf")
    token = guard.issue_token_value()

    assert guard.config.secret_key == b"k1"
    assert guard.validate({"csrf": token}).valid
    assert guard.validate({FIELD: token}).result is ValidationResult.MISSING

    guard.set_stateful()
    assert guard.config.stateful is True
    guard.set_stateful(False)
    assert guard.config.stateful is False


def test_invalid_configuration_values() -> None:
    guard = make_guard()
    with pytest.raises(ValueError):
        guard.set_timeout(-1)
    with pytest.raises(ValueError):
        guard.set_field_name("")
    assert guard.config.max_age == 3600


def test_render_field_wraps_fresh_token() -> None:
    guard = make_guard(clock=lambda: 1000, field_name="tok'en")
    html = guard.render_field()
    assert html == (
        "<input type='hidden' name='tok&#x27;en' value='"
        "NTZmMDA3MDdlYmU3NjhmZDFiYzZjYjA3MjhlNGNkMDNmMjEwY2VhYjg5NWUxMDA1ODYxMzQwZThiMjY4ZTlmNjoxMDAw'>"
    )


def test_last_error_resets_after_success() -> None:
    guard = make_guard()
    guard.validate({}, now=1000)
    assert guard.last_error == "Missing token"
    guard.validate({FIELD: guard.issue_token_value(now=1000)}, now=1000)
    assert guard.last_error is None


def test_result_codes_match_wire_values() -> None:
    assert [int(r) for r in ValidationResult] == [0, 1, 2, 3, 4]
