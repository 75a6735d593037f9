"""
Tests for the Azure Functions HTTP backend.
"""
import json
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, patch

import azure.functions as func
import pytest

import function_app
from exchanges.errors import DecodeError, HttpStatusError, OrderNotFound, TransportFailure
from exchanges.responses import (
    CreateOrderResponse,
    ShowAccountInfoResponse,
    ShowRatesResponse,
    ShowWithdrawalMinNetworkFeeResponse,
)


def _request(
    method: str = "GET",
    url: str = "/api/accountInfo",
    route_params: Optional[Dict[str, str]] = None,
    body: bytes = b"",
) -> func.HttpRequest:
    return func.HttpRequest(method=method, url=url, headers={}, params={}, route_params=route_params or {}, body=body)


def _json(response: func.HttpResponse) -> Dict[str, Any]:
    return json.loads(response.get_body())


class TestAccountInfo:
    """Test the accountInfo route."""

    def test_success(self, mock_client):
        mock_client.show_account_info.return_value = ShowAccountInfoResponse.model_validate({
            "data": {"balances": {"btc": {"total_amount": "1.5", "available_amount": "1", "reserved_amount": "0.5"}}},
            "errors": [],
            "credits": 18,
        })

        response = function_app.handle_account_info(_request())

        assert response.status_code == 200
        body = _json(response)
        assert body["status"] == "success"
        assert body["result"]["data"]["balances"]["btc"]["available_amount"] == "1"
        assert body["result"]["credits"] == 18

    def test_api_error_is_502(self, mock_client):
        mock_client.show_account_info.side_effect = OrderNotFound(13, "Order not found", field="order_id", status=200)

        response = function_app.handle_account_info(_request())

        assert response.status_code == 502
        assert _json(response) == {"status": "error", "code": 13, "message": "Order not found", "field": "order_id"}

    def test_http_status_error_is_502(self, mock_client):
        mock_client.show_account_info.side_effect = HttpStatusError(503, "Service Unavailable")

        response = function_app.handle_account_info(_request())

        assert response.status_code == 502
        assert "503" in _json(response)["message"]

    def test_transport_failure_is_504(self, mock_client):
        mock_client.show_account_info.side_effect = TransportFailure("Request timed out", timeout=True)

        response = function_app.handle_account_info(_request())

        assert response.status_code == 504

    def test_decode_error_is_500(self, mock_client):
        mock_client.show_account_info.side_effect = DecodeError("Response is not valid JSON", body="<html>")

        response = function_app.handle_account_info(_request())

        assert response.status_code == 500
        assert _json(response)["message"] == "showAccountInfo failed: DecodeError"

    def test_missing_credentials_is_500_without_secret(self, mock_get_client):
        mock_get_client.side_effect = ValueError("Environment variable 'API_SECRET' is not set")

        response = function_app.handle_account_info(_request())

        assert response.status_code == 500
        assert "API_SECRET" not in response.get_body().decode()


class TestRates:
    """Test the rates route."""

    def test_success(self, mock_client):
        mock_client.show_rates.return_value = ShowRatesResponse.model_validate({
            "trading_pair": "btceur",
            "rates": {"rate_weighted": "57008.69", "rate_weighted_3h": "57100.1", "rate_weighted_12h": "56900"},
            "errors": [],
            "credits": 20,
        })

        response = function_app.handle_rates(_request(url="/api/rates/BTCEUR", route_params={"trading_pair": "BTCEUR"}))

        assert response.status_code == 200
        assert _json(response)["result"]["rates"]["rate_weighted"] == "57008.69"
        called_pair = mock_client.show_rates.call_args[0][0]
        assert called_pair.api_value == "btceur"

    def test_unknown_pair_is_400(self, mock_client):
        response = function_app.handle_rates(_request(url="/api/rates/foo", route_params={"trading_pair": "foo"}))

        assert response.status_code == 400
        assert _json(response)["error"] == "Unknown trading pair: foo"
        mock_client.show_rates.assert_not_called()


class TestMinNetworkFee:
    """Test the withdrawals/minNetworkFee route."""

    def test_success(self, mock_client):
        mock_client.show_withdrawal_min_network_fee.return_value = ShowWithdrawalMinNetworkFeeResponse.model_validate(
            {"min_network_fee": "0.00005", "errors": [], "credits": 11}
        )

        response = function_app.handle_min_network_fee(_request(route_params={"currency": "btc"}))

        assert response.status_code == 200
        assert _json(response)["result"]["min_network_fee"] == "0.00005"
        mock_client.show_withdrawal_min_network_fee.assert_called_once_with("btc")

    def test_currency_is_stripped(self, mock_client):
        mock_client.show_withdrawal_min_network_fee.return_value = ShowWithdrawalMinNetworkFeeResponse.model_validate(
            {"min_network_fee": "0.001", "errors": [], "credits": 11}
        )

        response = function_app.handle_min_network_fee(_request(route_params={"currency": " btc "}))

        assert response.status_code == 200
        mock_client.show_withdrawal_min_network_fee.assert_called_once_with("btc")

    def test_unknown_currency_is_400(self, mock_client):
        response = function_app.handle_min_network_fee(_request(route_params={"currency": "doge"}))

        assert response.status_code == 400
        mock_client.show_withdrawal_min_network_fee.assert_not_called()


class TestCreateOrder:
    """Test the orders route."""

    def test_dry_run_does_not_place_order(self, mock_client, order_body):
        with patch('function_app.DRY_RUN_MODE', True):
            response = function_app.handle_create_order(_request(method="POST", url="/api/orders", body=order_body))

        assert response.status_code == 200
        body = _json(response)
        assert body["dry_run"] is True
        assert body["data"]["trading_pair"] == "btceur"
        mock_client.create_order.assert_not_called()

    def test_live_order(self, mock_client, order_body):
        mock_client.create_order.return_value = CreateOrderResponse(order_id="A1B2C3", credits=5)

        with patch('function_app.DRY_RUN_MODE', False):
            response = function_app.handle_create_order(_request(method="POST", url="/api/orders", body=order_body))

        assert response.status_code == 200
        assert _json(response)["order_id"] == "A1B2C3"
        kwargs = mock_client.create_order.call_args[1]
        assert kwargs["order_type"] == "buy"
        assert kwargs["max_amount_currency_to_trade"] == "0.5"
        assert kwargs["price"] == "57000"

    def test_invalid_json_is_400(self, mock_client):
        response = function_app.handle_create_order(_request(method="POST", body=b"{not json"))

        assert response.status_code == 400
        assert _json(response)["error"] == "Invalid JSON payload"

    def test_non_object_payload_is_400(self, mock_client):
        response = function_app.handle_create_order(_request(method="POST", body=b"[1, 2]"))

        assert response.status_code == 400

    def test_validation_error_is_400(self, mock_client):
        body = json.dumps({"trading_pair": "btceur", "type": "buy"}).encode()

        response = function_app.handle_create_order(_request(method="POST", body=body))

        assert response.status_code == 400
        assert _json(response)["error"] == "Missing required fields: max_amount_currency_to_trade, price"


@pytest.fixture
def mock_get_client():
    """Patch the client getter and disable the password check."""
    with patch('function_app.BACKEND_PASSWORD', ''):
        with patch('function_app.get_bitcoin_de_client') as mock_get:
            yield mock_get


@pytest.fixture
def mock_client(mock_get_client):
    client = MagicMock()
    mock_get_client.return_value = client
    return client


@pytest.fixture
def order_body():
    return json.dumps({
        "trading_pair": "btceur",
        "type": "buy",
        "max_amount_currency_to_trade": "0.5",
        "price": 57000,
    }).encode()
