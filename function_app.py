import azure.functions as func
import json
import logging
import os
from typing import Any, Dict, Optional
from validate import validate_currency, validate_order_params, validate_trading_pair
from exchanges import (
    ApiError,
    HttpStatusError,
    TransportFailure,
    TradingPair,
    get_bitcoin_de_client,
)

app = func.FunctionApp()

# Get password from environment (if empty, no password check needed)
BACKEND_PASSWORD = os.getenv("BACKEND_PASSWORD", "")
DRY_RUN_MODE = os.getenv("DRY_RUN_MODE", "true").lower() == "true"


def check_password(req: func.HttpRequest) -> tuple[bool, Optional[str]]:
    """
    Check if the request has the correct password.

    Args:
        req: HTTP request object

    Returns:
        Tuple of (is_valid, error_message)
    """
    # If no password is configured, allow all requests
    if not BACKEND_PASSWORD:
        return True, None

    auth_header = req.headers.get('Authorization')
    if auth_header and auth_header.startswith('Bearer '):
        if auth_header[7:] == BACKEND_PASSWORD:
            return True, None

    if req.headers.get('X-Backend-Password') == BACKEND_PASSWORD:
        return True, None

    if req.params.get('password') == BACKEND_PASSWORD:
        return True, None

    return False, "Unauthorized: Invalid or missing password"


def _json_response(body: Dict[str, Any], status_code: int) -> func.HttpResponse:
    return func.HttpResponse(json.dumps(body), status_code=status_code, mimetype="application/json")


def _error_response(e: Exception, action: str) -> func.HttpResponse:
    """Map a client exception to an HTTP response without leaking credentials."""
    if isinstance(e, ApiError):
        logging.warning(f"{action} rejected by Bitcoin.de: code={e.code} message={e.message}")
        return _json_response({"status": "error", "code": e.code, "message": e.message, "field": e.field}, 502)
    if isinstance(e, HttpStatusError):
        logging.error(f"{action} failed: upstream HTTP {e.status}")
        return _json_response({"status": "error", "message": f"Bitcoin.de returned HTTP {e.status}"}, 502)
    if isinstance(e, TransportFailure):
        logging.error(f"{action} failed: {e}")
        return _json_response({"status": "error", "message": f"Bitcoin.de unreachable: {e}"}, 504)

    logging.exception(f"{action} failed:")
    return _json_response({"status": "error", "message": f"{action} failed: {type(e).__name__}"}, 500)


def _unauthorized(req: func.HttpRequest) -> Optional[func.HttpResponse]:
    password_valid, password_error = check_password(req)
    if password_valid:
        return None
    logging.warning(f"Password check failed: {password_error}")
    return _json_response({"error": password_error}, 401)


def handle_account_info(req: func.HttpRequest) -> func.HttpResponse:
    logging.info('Account info request received')

    denied = _unauthorized(req)
    if denied is not None:
        return denied

    try:
        result = get_bitcoin_de_client().show_account_info()
    except Exception as e:
        return _error_response(e, "showAccountInfo")

    return _json_response({"status": "success", "result": result.model_dump(mode="json", by_alias=True)}, 200)


def handle_rates(req: func.HttpRequest) -> func.HttpResponse:
    trading_pair = req.route_params.get('trading_pair', '')
    logging.info(f'Rates request received for {trading_pair}')

    denied = _unauthorized(req)
    if denied is not None:
        return denied

    pair_valid, pair_error = validate_trading_pair(trading_pair)
    if not pair_valid:
        return _json_response({"error": pair_error}, 400)

    try:
        result = get_bitcoin_de_client().show_rates(TradingPair.from_str(trading_pair))
    except Exception as e:
        return _error_response(e, "showRates")

    return _json_response({"status": "success", "result": result.model_dump(mode="json", by_alias=True)}, 200)


def handle_min_network_fee(req: func.HttpRequest) -> func.HttpResponse:
    currency = req.route_params.get('currency', '').strip()
    logging.info(f'Minimum network fee request received for {currency}')

    denied = _unauthorized(req)
    if denied is not None:
        return denied

    currency_valid, currency_error = validate_currency(currency)
    if not currency_valid:
        return _json_response({"error": currency_error}, 400)

    try:
        result = get_bitcoin_de_client().show_withdrawal_min_network_fee(currency)
    except Exception as e:
        return _error_response(e, "showWithdrawalMinNetworkFee")

    return _json_response({"status": "success", "result": result.model_dump(mode="json", by_alias=True)}, 200)


def handle_create_order(req: func.HttpRequest) -> func.HttpResponse:
    logging.info('Create order request received')

    denied = _unauthorized(req)
    if denied is not None:
        return denied

    try:
        req_body: Dict[str, Any] = req.get_json()
    except ValueError as e:
        logging.error(f"Invalid JSON payload: {e}")
        return _json_response({"error": "Invalid JSON payload"}, 400)

    if not isinstance(req_body, dict):
        return _json_response({"error": "Payload must be a JSON object"}, 400)

    payload_valid, payload_error = validate_order_params(req_body)
    if not payload_valid:
        logging.error(f"Payload validation failed: {payload_error}")
        return _json_response({"error": payload_error}, 400)

    data = {key: req_body[key] for key in ("trading_pair", "type", "max_amount_currency_to_trade", "price")}

    if DRY_RUN_MODE:
        logging.info("DRY RUN MODE: Skipping actual order placement")
        return _json_response({
            "status": "success",
            "message": "Order validated (DRY RUN - no order placed)",
            "dry_run": True,
            "data": data
        }, 200)

    try:
        result = get_bitcoin_de_client().create_order(
            trading_pair=TradingPair.from_str(data["trading_pair"]),
            order_type=data["type"],
            max_amount_currency_to_trade=str(data["max_amount_currency_to_trade"]),
            price=str(data["price"]),
        )
    except Exception as e:
        return _error_response(e, "createOrder")

    logging.info(f"Order placed: {result.order_id} ({data['type']} {data['max_amount_currency_to_trade']} "
                 f"{data['trading_pair']} @ {data['price']})")
    return _json_response({"status": "success", "order_id": result.order_id, "data": data}, 200)


@app.route(route="accountInfo", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def accountInfo(req: func.HttpRequest) -> func.HttpResponse:
    return handle_account_info(req)


@app.route(route="rates/{trading_pair}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def rates(req: func.HttpRequest) -> func.HttpResponse:
    return handle_rates(req)


@app.route(route="withdrawals/minNetworkFee/{currency}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def minNetworkFee(req: func.HttpRequest) -> func.HttpResponse:
    return handle_min_network_fee(req)


@app.route(route="orders", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
def orders(req: func.HttpRequest) -> func.HttpResponse:
    return handle_create_order(req)
