"""
Property-based tests for response envelope parsing and error classification.
"""

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from agent_domains.exceptions import (
    AgentDomainsError,
    ApiError,
    InvalidResponseError,
    NetworkError,
    PaymentError,
    PaymentTransportError,
)
from agent_domains.responses import (
    PAYMENT_ERROR_KEYWORDS,
    classify_payment_transport_error,
    classify_transport_error,
    parse_envelope,
)

from fakes import err, ok, raw


NON_2XX = st.sampled_from([400, 401, 402, 403, 404, 409, 418, 422, 429, 500, 502, 503])

NEUTRAL_TEXT = st.text(
    alphabet="abcdefghjkmoqruvwxz -",
    min_size=1,
    max_size=40,
).filter(lambda s: s.strip())


class TestEnvelopeParsingProperty:
    """Property-based tests for success and error envelopes."""

    @given(
        status=st.integers(min_value=200, max_value=299),
        data=st.dictionaries(st.text(max_size=10), st.integers(), max_size=5),
    )
    @settings(max_examples=100)
    def test_success_envelope_returned(self, status: int, data: dict) -> None:
        """*For any* 2xx response with success true, the envelope SHALL be returned."""
        envelope = parse_envelope(ok(data, status=status))

        assert envelope["success"] is True
        assert envelope["data"] == data

    @given(
        status=NON_2XX,
        code=st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=30),
        message=st.text(min_size=1, max_size=80),
    )
    @settings(max_examples=100)
    def test_structured_error_carries_remote_code(
        self,
        status: int,
        code: str,
        message: str,
    ) -> None:
        """
        *For any* error envelope with a structured error, the raised error
        SHALL carry the remote code, message and the HTTP status.
        """
        with pytest.raises(ApiError) as exc_info:
            parse_envelope(err(code, message, status))

        error = exc_info.value
        assert error.code == code
        assert error.message == message
        assert error.status == status
        assert error.details == {"code": code, "message": message}

    @given(status=NON_2XX, message=st.text(min_size=1, max_size=80))
    @settings(max_examples=100)
    def test_string_error_becomes_unknown(self, status: int, message: str) -> None:
        """*For any* plain-string error, the code SHALL be unknown and the message the string."""
        response = httpx.Response(status, json={"success": False, "error": message})

        with pytest.raises(ApiError) as exc_info:
            parse_envelope(response)

        assert exc_info.value.code == "unknown"
        assert exc_info.value.message == message
        assert exc_info.value.status == status

    def test_empty_string_error_kept_as_message(self) -> None:
        response = httpx.Response(409, json={"success": False, "error": ""})

        with pytest.raises(ApiError) as exc_info:
            parse_envelope(response)

        assert exc_info.value.code == "unknown"
        assert exc_info.value.message == ""
        assert exc_info.value.status == 409

    @given(status=NON_2XX)
    @settings(max_examples=30)
    def test_missing_error_uses_defaults(self, status: int) -> None:
        """*For any* failed envelope without an error, defaults SHALL be used."""
        with pytest.raises(ApiError) as exc_info:
            parse_envelope(httpx.Response(status, json={"success": False}))

        assert exc_info.value.code == "unknown"
        assert exc_info.value.message == "Request failed"

    def test_partial_structured_error_fills_defaults(self) -> None:
        response = httpx.Response(400, json={"success": False, "error": {"code": "bad_tld"}})

        with pytest.raises(ApiError) as exc_info:
            parse_envelope(response)

        assert exc_info.value.code == "bad_tld"
        assert exc_info.value.message == "Request failed"

    @given(status=NON_2XX)
    @settings(max_examples=30)
    def test_non_2xx_with_success_true_is_error(self, status: int) -> None:
        """*For any* non-2xx status, success true SHALL NOT make the response succeed."""
        with pytest.raises(ApiError) as exc_info:
            parse_envelope(ok({"domain": "cool.dev"}, status=status))

        assert exc_info.value.status == status

    @given(
        status=st.sampled_from([200, 404, 500, 502, 504]),
        body=st.sampled_from(["<html>Bad Gateway</html>", "", "not json", "[1, 2, 3]", "null", "42"]),
    )
    @settings(max_examples=50)
    def test_non_object_body_is_invalid_response(self, status: int, body: str) -> None:
        """*For any* body that is not a JSON object, invalid_response SHALL be raised."""
        with pytest.raises(InvalidResponseError) as exc_info:
            parse_envelope(raw(body, status))

        error = exc_info.value
        assert error.code == "invalid_response"
        assert error.status == status
        assert error.message == f"Server returned non-JSON response (HTTP {status})"


class TestTransportErrorClassificationProperty:
    """Property-based tests for transport failure classification."""

    @given(reason=NEUTRAL_TEXT)
    @settings(max_examples=100)
    def test_plain_transport_failure_is_network_error(self, reason: str) -> None:
        """*For any* failure on the plain path, a network_error with status 0 SHALL result."""
        error = classify_transport_error(httpx.ConnectError(reason))

        assert isinstance(error, NetworkError)
        assert error.code == "network_error"
        assert error.status == 0
        assert error.message == f"Network request failed: {reason.strip()}"

    def test_empty_reason_becomes_unknown_error(self) -> None:
        error = classify_transport_error(RuntimeError())

        assert error.message == "Network request failed: Unknown error"

    @given(
        keyword=st.sampled_from(PAYMENT_ERROR_KEYWORDS),
        prefix=NEUTRAL_TEXT,
        upper=st.booleans(),
    )
    @settings(max_examples=100)
    def test_payment_keywords_classified_as_payment_error(
        self,
        keyword: str,
        prefix: str,
        upper: bool,
    ) -> None:
        """
        *For any* payment-path failure whose text contains a payment keyword
        in any case, a payment_error with status 402 SHALL result.
        """
        text = f"{prefix} {keyword.upper() if upper else keyword}"
        error = classify_payment_transport_error(RuntimeError(text))

        assert isinstance(error, PaymentError)
        assert error.code == "payment_error"
        assert error.status == 402
        assert error.message == f"Payment failed: {text.strip()}"

    @given(reason=NEUTRAL_TEXT)
    @settings(max_examples=100)
    def test_other_payment_path_failures_are_network_errors(self, reason: str) -> None:
        """*For any* payment-path failure without a keyword, a network_error SHALL result."""
        error = classify_payment_transport_error(httpx.ReadTimeout(reason))

        assert isinstance(error, NetworkError)
        assert error.status == 0

    def test_unanswerable_challenge_is_payment_error(self) -> None:
        error = classify_payment_transport_error(PaymentTransportError(
            "Payment required (HTTP 402) but no supported payment option was offered"
        ))

        assert isinstance(error, PaymentError)
        assert error.status == 402

    @given(
        code=st.text(min_size=1, max_size=20),
        status=st.integers(min_value=0, max_value=599),
    )
    @settings(max_examples=50)
    def test_classified_errors_pass_through(self, code: str, status: int) -> None:
        """*For any* already classified error, both classifiers SHALL return it unchanged."""
        original = AgentDomainsError(code=code, message="insufficient balance", status=status)

        assert classify_transport_error(original) is original
        assert classify_payment_transport_error(original) is original
