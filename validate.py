from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Set
import logging

from exchanges.enums import Currency, OrderType, TradingPair

# Required fields for an order request
REQUIRED_ORDER_FIELDS: Set[str] = {"trading_pair", "type", "max_amount_currency_to_trade", "price"}


def validate_trading_pair(value: Any) -> tuple[bool, Optional[str]]:
    """
    Check that a value names a known trading pair (case-insensitive).

    Args:
        value: Trading pair, e.g. "btceur"

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(value, str) or not value.strip():
        return False, "Trading pair must be a non-empty string"

    try:
        TradingPair.from_str(value)
    except ValueError:
        logging.debug(f"Rejected unknown trading pair: {value}")
        return False, f"Unknown trading pair: {value}"

    return True, None


def validate_currency(value: Any) -> tuple[bool, Optional[str]]:
    """
    Check that a value names a known currency (case-insensitive).

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(value, str) or not value.strip():
        return False, "Currency must be a non-empty string"

    if value.strip().upper() not in Currency.__members__:
        return False, f"Unknown currency: {value}"

    return True, None


def _positive_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def validate_order_params(payload: Dict[str, Any]) -> tuple[bool, Optional[str]]:
    """
    Validate the fields of an order request.

    Args:
        payload: Order fields (trading_pair, type, max_amount_currency_to_trade, price)

    Returns:
        Tuple of (is_valid, error_message)
    """
    # Check for required fields
    missing_fields = REQUIRED_ORDER_FIELDS - payload.keys()
    if missing_fields:
        return False, f"Missing required fields: {', '.join(sorted(missing_fields))}"

    pair_valid, pair_error = validate_trading_pair(payload.get("trading_pair"))
    if not pair_valid:
        return False, pair_error

    order_type = payload.get("type")
    if not isinstance(order_type, str) or order_type.lower() not in [t.value for t in OrderType]:
        return False, "Field 'type' must be 'buy' or 'sell'"

    if _positive_decimal(payload.get("max_amount_currency_to_trade")) is None:
        return False, "Field 'max_amount_currency_to_trade' must be a positive number"

    if _positive_decimal(payload.get("price")) is None:
        return False, "Field 'price' must be a positive number"

    return True, None
