"""
Error types for the Bitcoin.de Trading API client.

Every failure of a signed call surfaces as a subclass of ``BitcoinDeError``:

- ``TransportFailure``: the HTTP exchange itself failed (connection, DNS,
  TLS, timeout). A retry must go through the client again so it gets a
  fresh nonce and signature.
- ``ApiError``: the API rejected the call. Known error codes map to their
  own subclass (``OrderNotFound``, ``InsufficientCredits``, ...), anything
  else becomes ``UnknownApiError`` with the raw code and message preserved.
- ``HttpStatusError``: non-2xx response without a parseable error body.
- ``DecodeError``: the response body was not the expected JSON shape.
- ``SigningError``: the request could not be signed (bad header values).
"""
from enum import IntEnum
from typing import Any, Dict, List, Optional, Type


class ApiErrorCode(IntEnum):
    """Numeric error codes returned in the ``errors`` array."""

    MISSING_HEADER = 1
    INACTIVE_API_KEY = 2
    WRONG_SIGNATURE = 3
    MISSING_POST_PARAMETER = 4
    MISSING_GET_PARAMETER = 5
    INVALID_NONCE = 6
    UNKNOWN_API_METHOD = 7
    PERMISSION_DENIED = 8
    TRADING_PAIR_NOT_TRADABLE = 9
    INVALID_ORDER_TYPE = 10
    INVALID_AMOUNT = 11
    INVALID_PRICE = 12
    ORDER_NOT_FOUND = 13
    TRADE_NOT_FOUND = 14
    WITHDRAWAL_NOT_FOUND = 15
    DEPOSIT_NOT_FOUND = 16
    ADDRESS_NOT_FOUND = 17
    AMOUNT_TOO_LOW = 18
    AMOUNT_TOO_HIGH = 19
    PRICE_TOO_LOW = 20
    PRICE_TOO_HIGH = 21
    INSUFFICIENT_CREDITS = 22
    INSUFFICIENT_VOLUME = 23
    INVALID_PAYMENT_OPTION = 24
    INVALID_RATING = 25
    INVALID_ORDER_ID = 26
    INVALID_TRADE_ID = 27
    INVALID_WITHDRAWAL_ID = 28
    INVALID_DEPOSIT_ID = 29
    INVALID_ADDRESS_ID = 30
    INVALID_CURRENCY = 31
    INVALID_TRADING_PAIR = 32
    INVALID_ORDER_PAYMENT_OPTIONS = 33
    INVALID_ACCOUNT_LEDGER_TYPE = 34
    INVALID_TRUST_LEVEL = 35
    INVALID_TRADE_STATE = 36
    INVALID_ORDER_STATE = 37
    INVALID_WITHDRAWAL_STATE = 38
    INVALID_DEPOSIT_STATE = 39
    INVALID_PAYMENT_METHOD = 40
    INVALID_WITHDRAWAL_REJECT_REASON = 41
    INVALID_DEPOSIT_REJECT_REASON = 42
    INVALID_ADDRESS_POOL_STATE = 43
    INVALID_OUTGOING_ADDRESS_STATE = 44
    ADDRESS_POOL_IS_EMPTY = 45
    NO_NEW_ADDRESS_CREATED = 46
    INVALID_RECIPIENT_ADDRESS = 47
    INVALID_RECIPIENT_PURPOSE = 48
    INVALID_COMMENT = 49
    INVALID_NETWORK_FEE = 50
    INVALID_VOLUME_CURRENCY_TO_PAY_AFTER_FEE = 51
    INVALID_AMOUNT_CURRENCY_TO_TRADE_AFTER_FEE = 52
    INVALID_IS_PAID_FROM_CORRECT_BANK_ACCOUNT = 53
    PENDING_WITHDRAWAL_EXISTS = 54
    PENDING_DEPOSIT_EXISTS = 55
    PENDING_OUTGOING_ADDRESS_EXISTS = 56
    PENDING_ADDRESS_POOL_EXISTS = 57

    # System-level
    UNKNOWN_ERROR = 9998
    MAINTENANCE = 9999


class BitcoinDeError(Exception):
    """Base exception for all client errors."""


class TransportFailure(BitcoinDeError):
    """Network, TLS, DNS or timeout failure while talking to the API."""

    def __init__(self, message: str, *, cause: Optional[BaseException] = None, timeout: bool = False):
        super().__init__(message)
        self.cause = cause
        self.timeout = timeout


class SigningError(BitcoinDeError):
    """The request could not be turned into valid signed headers."""


class DecodeError(BitcoinDeError):
    """Response body is not valid JSON or does not match the expected payload."""

    def __init__(self, message: str, *, body: Optional[str] = None):
        super().__init__(message)
        self.body = body


class HttpStatusError(BitcoinDeError):
    """Non-2xx response that carried no parseable API error."""

    def __init__(self, status: int, body: str):
        super().__init__(f"HTTP {status}: {body[:200]}")
        self.status = status
        self.body = body


class MethodNotFound(BitcoinDeError, ValueError):
    """API method name is not in the method table."""

    def __init__(self, method_name: str):
        super().__init__(f"API method '{method_name}' not found in method settings")
        self.method_name = method_name


class MissingPathParameter(BitcoinDeError, ValueError):
    """A placeholder in the endpoint path had no value."""

    def __init__(self, parameter: str):
        super().__init__(f"Missing required path parameter: {parameter}")
        self.parameter = parameter


_API_ERRORS: Dict[int, Type["ApiError"]] = {}


class ApiError(BitcoinDeError):
    """
    Business-level rejection reported by the API.

    Attributes:
        code: Numeric error code from the response
        message: Error message from the response
        field: Offending request field, if the API named one
        status: HTTP status code of the response
        errors: All error entries of the response
    """

    code: int = 0

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.code:
            _API_ERRORS[cls.code] = cls

    def __init__(
        self,
        code: int,
        message: str,
        *,
        field: Optional[str] = None,
        status: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(f"API error {code}: {message}")
        self.code = code
        self.message = message
        self.field = field
        self.status = status
        self.errors = errors or []

    @property
    def kind(self) -> Optional[ApiErrorCode]:
        """The known error code, or None if the API sent one we don't know."""
        try:
            return ApiErrorCode(self.code)
        except ValueError:
            return None


class UnknownApiError(ApiError):
    """API error with a code not in ``ApiErrorCode``."""


# Authentication and request errors
class MissingHeader(ApiError):
    code = ApiErrorCode.MISSING_HEADER


class InactiveApiKey(ApiError):
    code = ApiErrorCode.INACTIVE_API_KEY


class WrongSignature(ApiError):
    code = ApiErrorCode.WRONG_SIGNATURE


class MissingPostParameter(ApiError):
    code = ApiErrorCode.MISSING_POST_PARAMETER


class MissingGetParameter(ApiError):
    code = ApiErrorCode.MISSING_GET_PARAMETER


class InvalidNonce(ApiError):
    code = ApiErrorCode.INVALID_NONCE


class UnknownApiMethod(ApiError):
    code = ApiErrorCode.UNKNOWN_API_METHOD


class PermissionDenied(ApiError):
    code = ApiErrorCode.PERMISSION_DENIED


# Not found / not tradable
class TradingPairNotTradable(ApiError):
    code = ApiErrorCode.TRADING_PAIR_NOT_TRADABLE


class InvalidOrderType(ApiError):
    code = ApiErrorCode.INVALID_ORDER_TYPE


class InvalidAmount(ApiError):
    code = ApiErrorCode.INVALID_AMOUNT


class InvalidPrice(ApiError):
    code = ApiErrorCode.INVALID_PRICE


class OrderNotFound(ApiError):
    code = ApiErrorCode.ORDER_NOT_FOUND


class TradeNotFound(ApiError):
    code = ApiErrorCode.TRADE_NOT_FOUND


class WithdrawalNotFound(ApiError):
    code = ApiErrorCode.WITHDRAWAL_NOT_FOUND


class DepositNotFound(ApiError):
    code = ApiErrorCode.DEPOSIT_NOT_FOUND


class AddressNotFound(ApiError):
    code = ApiErrorCode.ADDRESS_NOT_FOUND


# Order and trade validation
class AmountTooLow(ApiError):
    code = ApiErrorCode.AMOUNT_TOO_LOW


class AmountTooHigh(ApiError):
    code = ApiErrorCode.AMOUNT_TOO_HIGH


class PriceTooLow(ApiError):
    code = ApiErrorCode.PRICE_TOO_LOW


class PriceTooHigh(ApiError):
    code = ApiErrorCode.PRICE_TOO_HIGH


class InsufficientCredits(ApiError):
    code = ApiErrorCode.INSUFFICIENT_CREDITS


class InsufficientVolume(ApiError):
    code = ApiErrorCode.INSUFFICIENT_VOLUME


class InvalidPaymentOption(ApiError):
    code = ApiErrorCode.INVALID_PAYMENT_OPTION


class InvalidRating(ApiError):
    code = ApiErrorCode.INVALID_RATING


# Invalid identifiers and states
class InvalidOrderId(ApiError):
    code = ApiErrorCode.INVALID_ORDER_ID


class InvalidTradeId(ApiError):
    code = ApiErrorCode.INVALID_TRADE_ID


class InvalidWithdrawalId(ApiError):
    code = ApiErrorCode.INVALID_WITHDRAWAL_ID


class InvalidDepositId(ApiError):
    code = ApiErrorCode.INVALID_DEPOSIT_ID


class InvalidAddressId(ApiError):
    code = ApiErrorCode.INVALID_ADDRESS_ID


class InvalidCurrency(ApiError):
    code = ApiErrorCode.INVALID_CURRENCY


class InvalidTradingPair(ApiError):
    code = ApiErrorCode.INVALID_TRADING_PAIR


class InvalidOrderPaymentOptions(ApiError):
    code = ApiErrorCode.INVALID_ORDER_PAYMENT_OPTIONS


class InvalidAccountLedgerType(ApiError):
    code = ApiErrorCode.INVALID_ACCOUNT_LEDGER_TYPE


class InvalidTrustLevel(ApiError):
    code = ApiErrorCode.INVALID_TRUST_LEVEL


class InvalidTradeState(ApiError):
    code = ApiErrorCode.INVALID_TRADE_STATE


class InvalidOrderState(ApiError):
    code = ApiErrorCode.INVALID_ORDER_STATE


class InvalidWithdrawalState(ApiError):
    code = ApiErrorCode.INVALID_WITHDRAWAL_STATE


class InvalidDepositState(ApiError):
    code = ApiErrorCode.INVALID_DEPOSIT_STATE


class InvalidPaymentMethod(ApiError):
    code = ApiErrorCode.INVALID_PAYMENT_METHOD


class InvalidWithdrawalRejectReason(ApiError):
    code = ApiErrorCode.INVALID_WITHDRAWAL_REJECT_REASON


class InvalidDepositRejectReason(ApiError):
    code = ApiErrorCode.INVALID_DEPOSIT_REJECT_REASON


class InvalidAddressPoolState(ApiError):
    code = ApiErrorCode.INVALID_ADDRESS_POOL_STATE


class InvalidOutgoingAddressState(ApiError):
    code = ApiErrorCode.INVALID_OUTGOING_ADDRESS_STATE


# Address pool, withdrawals and deposits
class AddressPoolIsEmpty(ApiError):
    code = ApiErrorCode.ADDRESS_POOL_IS_EMPTY


class NoNewAddressCreated(ApiError):
    code = ApiErrorCode.NO_NEW_ADDRESS_CREATED


class InvalidRecipientAddress(ApiError):
    code = ApiErrorCode.INVALID_RECIPIENT_ADDRESS


class InvalidRecipientPurpose(ApiError):
    code = ApiErrorCode.INVALID_RECIPIENT_PURPOSE


class InvalidComment(ApiError):
    code = ApiErrorCode.INVALID_COMMENT


class InvalidNetworkFee(ApiError):
    code = ApiErrorCode.INVALID_NETWORK_FEE


class InvalidVolumeCurrencyToPayAfterFee(ApiError):
    code = ApiErrorCode.INVALID_VOLUME_CURRENCY_TO_PAY_AFTER_FEE


class InvalidAmountCurrencyToTradeAfterFee(ApiError):
    code = ApiErrorCode.INVALID_AMOUNT_CURRENCY_TO_TRADE_AFTER_FEE


class InvalidIsPaidFromCorrectBankAccount(ApiError):
    code = ApiErrorCode.INVALID_IS_PAID_FROM_CORRECT_BANK_ACCOUNT


class PendingWithdrawalExists(ApiError):
    code = ApiErrorCode.PENDING_WITHDRAWAL_EXISTS


class PendingDepositExists(ApiError):
    code = ApiErrorCode.PENDING_DEPOSIT_EXISTS


class PendingOutgoingAddressExists(ApiError):
    code = ApiErrorCode.PENDING_OUTGOING_ADDRESS_EXISTS


class PendingAddressPoolExists(ApiError):
    code = ApiErrorCode.PENDING_ADDRESS_POOL_EXISTS


# System-level errors
class UnspecifiedServerError(ApiError):
    """The API reported an error it did not specify further."""

    code = ApiErrorCode.UNKNOWN_ERROR


class Maintenance(ApiError):
    """The API is down for maintenance; retry later."""

    code = ApiErrorCode.MAINTENANCE


def api_error_class(code: int) -> Type[ApiError]:
    """Return the ApiError subclass registered for ``code`` (UnknownApiError if none)."""
    return _API_ERRORS.get(code, UnknownApiError)


def api_error_from_entries(errors: List[Dict[str, Any]], status: Optional[int] = None) -> ApiError:
    """
    Build the typed exception for an ``errors`` array.

    The first entry decides the exception class; all entries are kept on
    the exception.

    Raises:
        DecodeError: If the first entry has no integer ``code``
    """
    first = errors[0]
    if not isinstance(first, dict):
        raise DecodeError(f"Malformed error entry: {first!r}")

    code = first.get("code")
    # JSON booleans are ints in Python
    if isinstance(code, bool) or not isinstance(code, int):
        if isinstance(code, str) and code.isdigit():
            code = int(code)
        else:
            raise DecodeError(f"Error entry without integer code: {first!r}")

    message = first.get("message")
    if not isinstance(message, str):
        message = str(message) if message is not None else ""

    field = first.get("field")
    error_cls = api_error_class(code)
    return error_cls(code, message, field=field, status=status, errors=errors)
