"""
Tests for response decoding and API error mapping.
"""
import json
from decimal import Decimal

import pytest

from exchanges.bitcoin_de import decode_response
from exchanges.errors import (
    ApiError,
    ApiErrorCode,
    DecodeError,
    HttpStatusError,
    InsufficientCredits,
    InvalidTradingPair,
    Maintenance,
    OrderNotFound,
    UnknownApiError,
    api_error_class,
)
from exchanges.responses import ApiResponse, ShowAccountInfoResponse, ShowRatesResponse

RATES_BODY = {
    "trading_pair": "btceur",
    "rates": {"rate_weighted": "57008.69", "rate_weighted_3h": "57100.1", "rate_weighted_12h": "56900"},
    "errors": [],
    "credits": 20,
}


class TestDecodeSuccess:
    """Test decoding of successful responses."""

    def test_typed_payload(self) -> None:
        result = decode_response(200, json.dumps(RATES_BODY), ShowRatesResponse)

        assert isinstance(result, ShowRatesResponse)
        assert result.trading_pair == "btceur"
        assert result.rates.rate_weighted == Decimal("57008.69")
        assert result.credits == 20
        assert result.errors == []

    def test_extra_fields_ignored(self) -> None:
        """New fields added by the API don't break decoding."""
        body = dict(RATES_BODY, brand_new_field={"x": 1})
        body["rates"] = dict(RATES_BODY["rates"], rate_weighted_24h="1")

        result = decode_response(200, json.dumps(body), ShowRatesResponse)

        assert result.rates.rate_weighted_3h == Decimal("57100.1")

    def test_missing_errors_key_is_success(self) -> None:
        body = {k: v for k, v in RATES_BODY.items() if k != "errors"}

        result = decode_response(200, json.dumps(body), ShowRatesResponse)

        assert result.errors == []

    def test_basic_success_response(self) -> None:
        result = decode_response(200, '{"errors": [], "credits": 5}', ApiResponse)

        assert result.credits == 5

    def test_account_info_balances(self) -> None:
        body = {
            "data": {
                "balances": {
                    "btc": {"total_amount": "1.5", "available_amount": "1.0", "reserved_amount": "0.5"},
                    "eth": {"total_amount": "10", "available_amount": "10", "reserved_amount": "0"},
                },
                "encrypted_information": {"bic_short": "HYVEDEMM", "bic_full": "HYVEDEMM488", "uid": "abc"},
            },
            "errors": [],
            "credits": 12,
        }

        result = decode_response(200, json.dumps(body), ShowAccountInfoResponse)

        assert result.data.balances["btc"].available_amount == Decimal("1.0")
        assert result.data.balances["eth"].reserved_amount == Decimal("0")
        assert result.data.encrypted_information.uid == "abc"

    def test_missing_required_field(self) -> None:
        """A payload without a required field is a DecodeError, not a partial success."""
        body = {"trading_pair": "btceur", "errors": [], "credits": 1}

        with pytest.raises(DecodeError):
            decode_response(200, json.dumps(body), ShowRatesResponse)

    def test_wrong_field_type(self) -> None:
        body = dict(RATES_BODY, rates={"rate_weighted": "not-a-number", "rate_weighted_3h": "1", "rate_weighted_12h": "1"})

        with pytest.raises(DecodeError):
            decode_response(200, json.dumps(body), ShowRatesResponse)

    @pytest.mark.parametrize("body", ["<html>bad gateway</html>", "", "{truncated", "[]", "42", "null"])
    def test_non_json_object_on_200(self, body: str) -> None:
        """Malformed bodies never decode into an empty success."""
        with pytest.raises(DecodeError):
            decode_response(200, body, ApiResponse)

    def test_decode_error_keeps_body(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            decode_response(200, "not json", ApiResponse)

        assert exc_info.value.body == "not json"


class TestDecodeApiErrors:
    """Test mapping of the errors array to typed exceptions."""

    def test_order_not_found(self) -> None:
        body = {"errors": [{"code": 13, "message": "Order not found", "field": "order_id"}], "credits": 9}

        with pytest.raises(OrderNotFound) as exc_info:
            decode_response(200, json.dumps(body), ApiResponse)

        error = exc_info.value
        assert error.code == 13
        assert error.message == "Order not found"
        assert error.field == "order_id"
        assert error.status == 200
        assert error.kind is ApiErrorCode.ORDER_NOT_FOUND

    def test_insufficient_credits(self) -> None:
        body = {"errors": [{"code": 22, "message": "Insufficient credits"}]}

        with pytest.raises(InsufficientCredits) as exc_info:
            decode_response(429, json.dumps(body), ApiResponse)

        assert exc_info.value.status == 429
        assert exc_info.value.field is None

    def test_invalid_trading_pair(self) -> None:
        body = {"errors": [{"code": 32, "message": "Invalid trading pair"}]}

        with pytest.raises(InvalidTradingPair):
            decode_response(400, json.dumps(body), ShowRatesResponse)

    def test_unknown_code(self) -> None:
        """Codes we don't know keep their raw code and message."""
        body = {"errors": [{"code": 999, "message": "Brand new failure"}]}

        with pytest.raises(UnknownApiError) as exc_info:
            decode_response(200, json.dumps(body), ApiResponse)

        assert exc_info.value.code == 999
        assert exc_info.value.message == "Brand new failure"
        assert exc_info.value.kind is None

    def test_first_error_decides_all_kept(self) -> None:
        errors = [{"code": 13, "message": "first"}, {"code": 22, "message": "second"}]

        with pytest.raises(OrderNotFound) as exc_info:
            decode_response(200, json.dumps({"errors": errors}), ApiResponse)

        assert exc_info.value.errors == errors

    def test_all_api_errors_share_base(self) -> None:
        body = {"errors": [{"code": 13, "message": "x"}]}

        with pytest.raises(ApiError):
            decode_response(200, json.dumps(body), ApiResponse)

    def test_errors_on_payload_with_other_fields(self) -> None:
        """A success-shaped body with a non-empty errors array is still a failure."""
        body = dict(RATES_BODY, errors=[{"code": 32, "message": "Invalid trading pair"}])

        with pytest.raises(InvalidTradingPair):
            decode_response(200, json.dumps(body), ShowRatesResponse)

    def test_string_code_accepted(self) -> None:
        body = {"errors": [{"code": "13", "message": "Order not found"}]}

        with pytest.raises(OrderNotFound):
            decode_response(200, json.dumps(body), ApiResponse)

    @pytest.mark.parametrize("entry", [{"message": "no code"}, {"code": "abc"}, {"code": True}, "oops"])
    def test_malformed_error_entry(self, entry: object) -> None:
        with pytest.raises(DecodeError):
            decode_response(200, json.dumps({"errors": [entry]}), ApiResponse)

    def test_errors_not_a_list(self) -> None:
        with pytest.raises(DecodeError):
            decode_response(200, json.dumps({"errors": "broken"}), ApiResponse)

    def test_error_class_table(self) -> None:
        assert api_error_class(13) is OrderNotFound
        assert api_error_class(22) is InsufficientCredits
        assert api_error_class(32) is InvalidTradingPair
        assert api_error_class(12345) is UnknownApiError
        for code in ApiErrorCode:
            assert api_error_class(code).code == code


class TestDecodeHttpStatus:
    """Test non-2xx responses without an errors array."""

    def test_plain_text_error(self) -> None:
        with pytest.raises(HttpStatusError) as exc_info:
            decode_response(503, "Service Unavailable", ApiResponse)

        assert exc_info.value.status == 503
        assert exc_info.value.body == "Service Unavailable"

    def test_json_without_errors(self) -> None:
        with pytest.raises(HttpStatusError):
            decode_response(500, '{"message": "internal"}', ApiResponse)

    def test_empty_body(self) -> None:
        with pytest.raises(HttpStatusError) as exc_info:
            decode_response(404, "", ApiResponse)

        assert exc_info.value.status == 404

    def test_errors_not_a_list_on_failure(self) -> None:
        """A failed call with an unreadable errors value keeps its HTTP status."""
        with pytest.raises(HttpStatusError) as exc_info:
            decode_response(503, '{"errors": "maintenance"}', ApiResponse)

        assert exc_info.value.status == 503
        assert exc_info.value.body == '{"errors": "maintenance"}'

    def test_error_entry_without_code_on_failure(self) -> None:
        with pytest.raises(HttpStatusError) as exc_info:
            decode_response(500, '{"errors": [{"message": "boom"}]}', ApiResponse)

        assert exc_info.value.status == 500

    def test_maintenance_code(self) -> None:
        body = {"errors": [{"code": 9999, "message": "Maintenance"}]}

        with pytest.raises(Maintenance) as exc_info:
            decode_response(503, json.dumps(body), ApiResponse)

        assert exc_info.value.kind is ApiErrorCode.MAINTENANCE
