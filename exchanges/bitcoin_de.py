"""
Bitcoin.de Trading API v4 client.

``TradingApiClient`` sends requests through a blocking transport
(requests), ``AsyncTradingApiClient`` through an async one (aiohttp). Both
expose the same operations; on the async client each operation returns an
awaitable.
"""
import json
import logging
import os
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union
from urllib.parse import quote

from pydantic import ValidationError

from .enums import Currency, OrderType, TradeRating, TradingPair
from .errors import DecodeError, HttpStatusError, MethodNotFound, MissingPathParameter, api_error_from_entries
from .methods import (
    API_BASE_URI,
    HTTP_METHOD_POST,
    METHOD_ADD_TO_ADDRESS_POOL,
    METHOD_ADD_TRADE_RATING,
    METHOD_CREATE_ORDER,
    METHOD_CREATE_WITHDRAWAL,
    METHOD_DELETE_ORDER,
    METHOD_DELETE_WITHDRAWAL,
    METHOD_EXECUTE_TRADE,
    METHOD_LIST_ADDRESS_POOL,
    METHOD_MARK_COINS_AS_RECEIVED,
    METHOD_MARK_COINS_AS_TRANSFERRED,
    METHOD_MARK_TRADE_AS_PAID,
    METHOD_MARK_TRADE_AS_PAYMENT_RECEIVED,
    METHOD_REMOVE_FROM_ADDRESS_POOL,
    METHOD_REQUEST_DEPOSIT_ADDRESS,
    METHOD_SETTINGS,
    METHOD_SHOW_ACCOUNT_INFO,
    METHOD_SHOW_ACCOUNT_LEDGER,
    METHOD_SHOW_DEPOSIT,
    METHOD_SHOW_DEPOSITS,
    METHOD_SHOW_MY_ORDER_DETAILS,
    METHOD_SHOW_MY_ORDERS,
    METHOD_SHOW_MY_ORDERS_ALL_PAIRS,
    METHOD_SHOW_MY_TRADE_DETAILS,
    METHOD_SHOW_MY_TRADES,
    METHOD_SHOW_MY_TRADES_ALL_PAIRS,
    METHOD_SHOW_ORDER_DETAILS,
    METHOD_SHOW_ORDERBOOK,
    METHOD_SHOW_ORDERBOOK_COMPACT,
    METHOD_SHOW_OUTGOING_ADDRESSES,
    METHOD_SHOW_PERMISSIONS,
    METHOD_SHOW_PUBLIC_TRADE_HISTORY,
    METHOD_SHOW_RATES,
    METHOD_SHOW_WITHDRAWAL,
    METHOD_SHOW_WITHDRAWAL_MIN_NETWORK_FEE,
    METHOD_SHOW_WITHDRAWALS,
    MethodSetting,
)
from .responses import (
    ApiResponse,
    CreateOrderResponse,
    CreateWithdrawalResponse,
    RequestDepositAddressResponse,
    ShowAccountInfoResponse,
    ShowAccountLedgerResponse,
    ShowDepositResponse,
    ShowDepositsResponse,
    ShowMyOrderDetailsResponse,
    ShowMyOrdersResponse,
    ShowMyTradeDetailsResponse,
    ShowMyTradesResponse,
    ShowOrderbookCompactResponse,
    ShowOrderbookResponse,
    ShowOrderDetailsResponse,
    ShowOutgoingAddressesResponse,
    ShowPermissionsResponse,
    ShowPublicTradeHistoryResponse,
    ShowRatesResponse,
    ShowWithdrawalMinNetworkFeeResponse,
    ShowWithdrawalResponse,
    ShowWithdrawalsResponse,
)
from .signing import (
    BitcoinDeAuthenticator,
    BitcoinDeCredentials,
    NonceGenerator,
    SignedRequest,
    encode_parameters,
    format_amount,
    format_parameter,
)
from .transport import DEFAULT_TIMEOUT, AiohttpTransport, AsyncHttpTransport, HttpTransport, RequestsTransport

T = TypeVar("T", bound=ApiResponse)

Amount = Union[Decimal, int, float, str]


def decode_response(status: int, body: str, model: Type[T]) -> T:
    """
    Turn a raw HTTP response into a typed payload or a typed exception.

    Args:
        status: HTTP status code
        body: Raw response body
        model: Pydantic model for the success payload

    Returns:
        Instance of ``model``

    Raises:
        ApiError: The response carried a non-empty ``errors`` array
        HttpStatusError: Non-2xx status without a parseable error body
        DecodeError: 2xx status with a body that is not the expected JSON
    """
    try:
        data = json.loads(body) if body else None
    except ValueError:
        data = None
        parse_failed = True
    else:
        parse_failed = False

    is_success = 200 <= status < 300

    errors = data.get("errors") if isinstance(data, dict) else None
    try:
        if errors is not None and not isinstance(errors, list):
            raise DecodeError(f"'errors' is not a list: {errors!r}", body=body)
        error = api_error_from_entries(errors, status=status) if errors else None
    except DecodeError:
        if is_success:
            raise
        # Unreadable error body on a failed call
        raise HttpStatusError(status, body or "")

    if error is not None:
        logging.warning(f"Bitcoin.de API error (HTTP {status}): code={error.code} message={error.message}")
        raise error

    if not is_success:
        raise HttpStatusError(status, body or "")

    if parse_failed:
        raise DecodeError("Response body is not valid JSON", body=body)
    if not isinstance(data, dict):
        raise DecodeError("Response body is not a JSON object", body=body)

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Unexpected {model.__name__} payload: {e}", body=body)


def _trading_pair(value: Union[TradingPair, str]) -> str:
    if isinstance(value, TradingPair):
        return value.api_value
    if not value:
        raise ValueError("trading_pair must not be empty")
    return str(value).lower()


def _currency(value: Union[Currency, str]) -> str:
    if isinstance(value, Currency):
        return value.api_value
    if not value:
        raise ValueError("currency must not be empty")
    return str(value).lower()


def _order_type(value: Union[OrderType, str]) -> OrderType:
    try:
        return OrderType(value.lower() if isinstance(value, str) else value)
    except ValueError:
        raise ValueError(f"Invalid order type: {value}. Must be 'buy' or 'sell'")


def _rating(value: Union[TradeRating, str]) -> TradeRating:
    try:
        return TradeRating(value.lower() if isinstance(value, str) else value)
    except ValueError:
        raise ValueError(f"Invalid rating: {value}. Must be 'positive', 'neutral' or 'negative'")


def _amount(value: Amount, name: str, allow_zero: bool = False) -> str:
    formatted = format_amount(value)
    amount = Decimal(formatted)
    if amount < 0 or (amount == 0 and not allow_zero):
        raise ValueError(f"{name} must be a positive number, got {value}")
    return formatted


def _identifier(value: Any, name: str) -> str:
    value = str(value).strip() if value is not None else ""
    if not value:
        raise ValueError(f"{name} must not be empty")
    return value


class _TradingOperations:
    """
    One method per API operation.

    Subclasses provide ``do_request(method_name, params, model)``; whatever
    it returns (a payload or an awaitable) is passed straight back.
    """

    def do_request(self, method_name: str, params: Dict[str, Any], model: Type[ApiResponse]) -> Any:
        raise NotImplementedError

    # Orders

    def show_orderbook(self, trading_pair: Union[TradingPair, str], order_type: Union[OrderType, str], **filters: Any):
        """
        Public orderbook for one side of a trading pair.

        Args:
            trading_pair: e.g. TradingPair.BTCEUR or "btceur"
            order_type: "buy" or "sell"
            **filters: Optional query filters (price, amount_currency_to_trade,
                only_kyc_full, payment_option, ...)
        """
        params = dict(filters, trading_pair=_trading_pair(trading_pair), type=_order_type(order_type))
        return self.do_request(METHOD_SHOW_ORDERBOOK, params, ShowOrderbookResponse)

    def show_order_details(self, trading_pair: Union[TradingPair, str], order_id: str):
        params = {"trading_pair": _trading_pair(trading_pair), "order_id": _identifier(order_id, "order_id")}
        return self.do_request(METHOD_SHOW_ORDER_DETAILS, params, ShowOrderDetailsResponse)

    def create_order(
        self,
        trading_pair: Union[TradingPair, str],
        order_type: Union[OrderType, str],
        max_amount_currency_to_trade: Amount,
        price: Amount,
        **filters: Any
    ):
        """
        Place a new order.

        Args:
            trading_pair: Trading pair of the order
            order_type: "buy" or "sell"
            max_amount_currency_to_trade: Maximum amount of the traded currency
            price: Price per unit in the paying currency
            **filters: Optional body fields (min_amount_currency_to_trade,
                end_datetime, new_order_for_remaining_amount, ...)

        Returns:
            CreateOrderResponse with the new order_id

        Raises:
            ValueError: If an argument is invalid
        """
        params = dict(
            filters,
            trading_pair=_trading_pair(trading_pair),
            type=_order_type(order_type),
            max_amount_currency_to_trade=_amount(max_amount_currency_to_trade, "max_amount_currency_to_trade"),
            price=_amount(price, "price"),
        )
        return self.do_request(METHOD_CREATE_ORDER, params, CreateOrderResponse)

    def delete_order(self, trading_pair: Union[TradingPair, str], order_id: str):
        params = {"trading_pair": _trading_pair(trading_pair), "order_id": _identifier(order_id, "order_id")}
        return self.do_request(METHOD_DELETE_ORDER, params, ApiResponse)

    def show_my_orders(self, trading_pair: Optional[Union[TradingPair, str]] = None, **filters: Any):
        """Own orders, for one trading pair or (if omitted) all of them."""
        if trading_pair is None:
            return self.do_request(METHOD_SHOW_MY_ORDERS_ALL_PAIRS, dict(filters), ShowMyOrdersResponse)
        params = dict(filters, trading_pair=_trading_pair(trading_pair))
        return self.do_request(METHOD_SHOW_MY_ORDERS, params, ShowMyOrdersResponse)

    def show_my_order_details(self, trading_pair: Union[TradingPair, str], order_id: str):
        params = {"trading_pair": _trading_pair(trading_pair), "order_id": _identifier(order_id, "order_id")}
        return self.do_request(METHOD_SHOW_MY_ORDER_DETAILS, params, ShowMyOrderDetailsResponse)

    # Trades

    def execute_trade(
        self,
        trading_pair: Union[TradingPair, str],
        order_id: str,
        order_type: Union[OrderType, str],
        amount_currency_to_trade: Amount,
        **filters: Any
    ):
        """
        Accept an order from the orderbook.

        Args:
            trading_pair: Trading pair of the order
            order_id: ID of the order to trade against
            order_type: "buy" or "sell" from the caller's point of view
            amount_currency_to_trade: Amount of the traded currency
        """
        params = dict(
            filters,
            trading_pair=_trading_pair(trading_pair),
            order_id=_identifier(order_id, "order_id"),
            type=_order_type(order_type),
            amount_currency_to_trade=_amount(amount_currency_to_trade, "amount_currency_to_trade"),
        )
        return self.do_request(METHOD_EXECUTE_TRADE, params, ApiResponse)

    def show_my_trades(self, trading_pair: Optional[Union[TradingPair, str]] = None, **filters: Any):
        """Own trades, for one trading pair or (if omitted) all of them."""
        if trading_pair is None:
            return self.do_request(METHOD_SHOW_MY_TRADES_ALL_PAIRS, dict(filters), ShowMyTradesResponse)
        params = dict(filters, trading_pair=_trading_pair(trading_pair))
        return self.do_request(METHOD_SHOW_MY_TRADES, params, ShowMyTradesResponse)

    def show_my_trade_details(self, trading_pair: Union[TradingPair, str], trade_id: str):
        params = {"trading_pair": _trading_pair(trading_pair), "trade_id": _identifier(trade_id, "trade_id")}
        return self.do_request(METHOD_SHOW_MY_TRADE_DETAILS, params, ShowMyTradeDetailsResponse)

    def mark_trade_as_paid(
        self, trading_pair: Union[TradingPair, str], trade_id: str, volume_currency_to_pay_after_fee: Amount
    ):
        params = {
            "trading_pair": _trading_pair(trading_pair),
            "trade_id": _identifier(trade_id, "trade_id"),
            "volume_currency_to_pay_after_fee": _amount(
                volume_currency_to_pay_after_fee, "volume_currency_to_pay_after_fee"
            ),
        }
        return self.do_request(METHOD_MARK_TRADE_AS_PAID, params, ApiResponse)

    def mark_trade_as_payment_received(
        self,
        trading_pair: Union[TradingPair, str],
        trade_id: str,
        volume_currency_to_pay_after_fee: Amount,
        rating: Union[TradeRating, str],
        is_paid_from_correct_bank_account: bool
    ):
        params = {
            "trading_pair": _trading_pair(trading_pair),
            "trade_id": _identifier(trade_id, "trade_id"),
            "volume_currency_to_pay_after_fee": _amount(
                volume_currency_to_pay_after_fee, "volume_currency_to_pay_after_fee"
            ),
            "rating": _rating(rating),
            "is_paid_from_correct_bank_account": bool(is_paid_from_correct_bank_account),
        }
        return self.do_request(METHOD_MARK_TRADE_AS_PAYMENT_RECEIVED, params, ApiResponse)

    def add_trade_rating(self, trading_pair: Union[TradingPair, str], trade_id: str, rating: Union[TradeRating, str]):
        params = {
            "trading_pair": _trading_pair(trading_pair),
            "trade_id": _identifier(trade_id, "trade_id"),
            "rating": _rating(rating),
        }
        return self.do_request(METHOD_ADD_TRADE_RATING, params, ApiResponse)

    def mark_coins_as_transferred(
        self, trading_pair: Union[TradingPair, str], trade_id: str, amount_currency_to_trade_after_fee: Amount
    ):
        params = {
            "trading_pair": _trading_pair(trading_pair),
            "trade_id": _identifier(trade_id, "trade_id"),
            "amount_currency_to_trade_after_fee": _amount(
                amount_currency_to_trade_after_fee, "amount_currency_to_trade_after_fee"
            ),
        }
        return self.do_request(METHOD_MARK_COINS_AS_TRANSFERRED, params, ApiResponse)

    def mark_coins_as_received(
        self,
        trading_pair: Union[TradingPair, str],
        trade_id: str,
        amount_currency_to_trade_after_fee: Amount,
        rating: Union[TradeRating, str]
    ):
        params = {
            "trading_pair": _trading_pair(trading_pair),
            "trade_id": _identifier(trade_id, "trade_id"),
            "amount_currency_to_trade_after_fee": _amount(
                amount_currency_to_trade_after_fee, "amount_currency_to_trade_after_fee"
            ),
            "rating": _rating(rating),
        }
        return self.do_request(METHOD_MARK_COINS_AS_RECEIVED, params, ApiResponse)

    # Account

    def show_account_info(self):
        """Balances and encrypted bank information of the account."""
        return self.do_request(METHOD_SHOW_ACCOUNT_INFO, {}, ShowAccountInfoResponse)

    def show_account_ledger(self, currency: Union[Currency, str], **filters: Any):
        params = dict(filters, currency=_currency(currency))
        return self.do_request(METHOD_SHOW_ACCOUNT_LEDGER, params, ShowAccountLedgerResponse)

    def show_permissions(self):
        return self.do_request(METHOD_SHOW_PERMISSIONS, {}, ShowPermissionsResponse)

    # Withdrawals

    def create_withdrawal(
        self, currency: Union[Currency, str], amount: Amount, address: str, network_fee: Amount, **filters: Any
    ):
        """
        Withdraw coins to an external address.

        Args:
            currency: Currency to withdraw
            amount: Amount to withdraw
            address: Recipient address
            network_fee: Network fee to pay (may be zero)
            **filters: Optional body fields (comment, recipient_purpose, ...)
        """
        params = dict(
            filters,
            currency=_currency(currency),
            amount=_amount(amount, "amount"),
            address=_identifier(address, "address"),
            network_fee=_amount(network_fee, "network_fee", allow_zero=True),
        )
        return self.do_request(METHOD_CREATE_WITHDRAWAL, params, CreateWithdrawalResponse)

    def delete_withdrawal(self, currency: Union[Currency, str], withdrawal_id: str):
        params = {"currency": _currency(currency), "withdrawal_id": _identifier(withdrawal_id, "withdrawal_id")}
        return self.do_request(METHOD_DELETE_WITHDRAWAL, params, ApiResponse)

    def show_withdrawal(self, currency: Union[Currency, str], withdrawal_id: str):
        params = {"currency": _currency(currency), "withdrawal_id": _identifier(withdrawal_id, "withdrawal_id")}
        return self.do_request(METHOD_SHOW_WITHDRAWAL, params, ShowWithdrawalResponse)

    def show_withdrawals(self, currency: Union[Currency, str], **filters: Any):
        params = dict(filters, currency=_currency(currency))
        return self.do_request(METHOD_SHOW_WITHDRAWALS, params, ShowWithdrawalsResponse)

    def show_withdrawal_min_network_fee(self, currency: Union[Currency, str]):
        params = {"currency": _currency(currency)}
        return self.do_request(METHOD_SHOW_WITHDRAWAL_MIN_NETWORK_FEE, params, ShowWithdrawalMinNetworkFeeResponse)

    # Deposits

    def request_deposit_address(self, currency: Union[Currency, str], comment: Optional[str] = None):
        params = {"currency": _currency(currency), "comment": comment}
        return self.do_request(METHOD_REQUEST_DEPOSIT_ADDRESS, params, RequestDepositAddressResponse)

    def show_deposit(self, currency: Union[Currency, str], deposit_id: str):
        params = {"currency": _currency(currency), "deposit_id": _identifier(deposit_id, "deposit_id")}
        return self.do_request(METHOD_SHOW_DEPOSIT, params, ShowDepositResponse)

    def show_deposits(self, currency: Union[Currency, str], **filters: Any):
        params = dict(filters, currency=_currency(currency))
        return self.do_request(METHOD_SHOW_DEPOSITS, params, ShowDepositsResponse)

    # Market data

    def show_orderbook_compact(self, trading_pair: Union[TradingPair, str]):
        params = {"trading_pair": _trading_pair(trading_pair)}
        return self.do_request(METHOD_SHOW_ORDERBOOK_COMPACT, params, ShowOrderbookCompactResponse)

    def show_public_trade_history(self, trading_pair: Union[TradingPair, str], since_tid: Optional[int] = None):
        params = {"trading_pair": _trading_pair(trading_pair), "since_tid": since_tid}
        return self.do_request(METHOD_SHOW_PUBLIC_TRADE_HISTORY, params, ShowPublicTradeHistoryResponse)

    def show_rates(self, trading_pair: Union[TradingPair, str]):
        """Weighted rates (overall, last 3h, last 12h) for a trading pair."""
        params = {"trading_pair": _trading_pair(trading_pair)}
        return self.do_request(METHOD_SHOW_RATES, params, ShowRatesResponse)

    # Address pool and outgoing addresses

    def add_to_address_pool(self, currency: Union[Currency, str], address: str, **filters: Any):
        params = dict(filters, currency=_currency(currency), address=_identifier(address, "address"))
        return self.do_request(METHOD_ADD_TO_ADDRESS_POOL, params, ApiResponse)

    def remove_from_address_pool(self, currency: Union[Currency, str], address: str):
        params = {"currency": _currency(currency), "address": _identifier(address, "address")}
        return self.do_request(METHOD_REMOVE_FROM_ADDRESS_POOL, params, ApiResponse)

    def list_address_pool(self, currency: Union[Currency, str], page: Optional[int] = None, **filters: Any):
        params = dict(filters, currency=_currency(currency), page=page)
        return self.do_request(METHOD_LIST_ADDRESS_POOL, params, ShowOutgoingAddressesResponse)

    def show_outgoing_addresses(self, currency: Union[Currency, str], page: Optional[int] = None):
        params = {"currency": _currency(currency), "page": page}
        return self.do_request(METHOD_SHOW_OUTGOING_ADDRESSES, params, ShowOutgoingAddressesResponse)


class _ClientBase(_TradingOperations):
    def __init__(
        self,
        credentials: BitcoinDeCredentials,
        base_url: str = API_BASE_URI,
        nonce_generator: Optional[NonceGenerator] = None
    ):
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.authenticator = BitcoinDeAuthenticator(credentials, nonce_generator)

    def build_request(self, method_name: str, params: Optional[Mapping[str, Any]] = None) -> Tuple[str, str, Optional[str]]:
        """
        Resolve a method name and its parameters into (http_method, url, body).

        Path placeholders are taken out of ``params``; the rest become the
        query string (GET, DELETE) or the form body (POST).

        Raises:
            MethodNotFound: Unknown method name
            MissingPathParameter: A path placeholder has no value
        """
        setting: Optional[MethodSetting] = METHOD_SETTINGS.get(method_name)
        if setting is None:
            raise MethodNotFound(method_name)

        remaining: Dict[str, Any] = dict(params or {})
        segments = []
        for segment in setting.path_segments:
            if segment.startswith(":"):
                name = segment[1:]
                value = remaining.pop(name, None)
                if value is None or value == "":
                    raise MissingPathParameter(name)
                segments.append(quote(format_parameter(value), safe=""))
            else:
                segments.append(segment)

        url = f"{self.base_url}/{'/'.join(segments)}"
        encoded = encode_parameters(remaining)

        if setting.http_method == HTTP_METHOD_POST:
            return setting.http_method, url, encoded or None

        if encoded:
            url = f"{url}?{encoded}"
        return setting.http_method, url, None

    def prepare_request(self, method_name: str, params: Optional[Mapping[str, Any]] = None) -> SignedRequest:
        """Build and sign a request without sending it."""
        http_method, url, body = self.build_request(method_name, params)
        return self.authenticator.sign_request(http_method, url, body)


class TradingApiClient(_ClientBase):
    """Blocking Bitcoin.de API client."""

    def __init__(
        self,
        credentials: BitcoinDeCredentials,
        transport: Optional[HttpTransport] = None,
        base_url: str = API_BASE_URI,
        nonce_generator: Optional[NonceGenerator] = None
    ):
        """
        Args:
            credentials: API key and secret
            transport: Blocking transport (RequestsTransport if omitted)
            base_url: API base URL, e.g. for a sandbox
            nonce_generator: Nonce source (shared per API key if omitted)
        """
        super().__init__(credentials, base_url, nonce_generator)
        self.transport = transport or RequestsTransport()

    def do_request(self, method_name: str, params: Optional[Mapping[str, Any]], model: Type[T]) -> T:
        """
        Sign, send and decode one API call.

        Raises:
            TransportFailure: The HTTP exchange failed
            ApiError: The API rejected the call
            HttpStatusError: Non-2xx status without an error body
            DecodeError: Malformed success response
        """
        request = self.prepare_request(method_name, params)
        logging.debug(f"{method_name}: {request.method} {request.url}")
        response = self.transport.execute(request.method, request.url, request.headers, request.body)
        logging.debug(f"{method_name}: HTTP {response.status}")
        return decode_response(response.status, response.body, model)

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            close()


class AsyncTradingApiClient(_ClientBase):
    """
    Async Bitcoin.de API client.

    Example:
        >>> async with AsyncTradingApiClient(credentials) as client:
        ...     rates = await client.show_rates(TradingPair.BTCEUR)
    """

    def __init__(
        self,
        credentials: BitcoinDeCredentials,
        transport: Optional[AsyncHttpTransport] = None,
        base_url: str = API_BASE_URI,
        nonce_generator: Optional[NonceGenerator] = None
    ):
        super().__init__(credentials, base_url, nonce_generator)
        self.transport = transport or AiohttpTransport()

    async def do_request(self, method_name: str, params: Optional[Mapping[str, Any]], model: Type[T]) -> T:
        request = self.prepare_request(method_name, params)
        logging.debug(f"{method_name}: {request.method} {request.url}")
        response = await self.transport.execute(request.method, request.url, request.headers, request.body)
        logging.debug(f"{method_name}: HTTP {response.status}")
        return decode_response(response.status, response.body, model)

    async def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "AsyncTradingApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


# Global client instance (loaded lazily)
_client: Optional[TradingApiClient] = None


def get_bitcoin_de_client() -> TradingApiClient:
    """
    Get or create the global TradingApiClient instance.

    Reads API_KEY and API_SECRET, plus the optional BITCOIN_DE_API_BASE_URL
    and BITCOIN_DE_TIMEOUT.

    Returns:
        TradingApiClient instance

    Raises:
        ValueError: If credentials are missing or the timeout is not a number
    """
    global _client

    if _client is None:
        credentials = BitcoinDeCredentials.from_env()
        base_url = os.getenv("BITCOIN_DE_API_BASE_URL", API_BASE_URI)

        timeout_value = os.getenv("BITCOIN_DE_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(timeout_value)
        except ValueError:
            raise ValueError(f"Invalid BITCOIN_DE_TIMEOUT: {timeout_value}")

        _client = TradingApiClient(credentials, transport=RequestsTransport(timeout=timeout), base_url=base_url)
        logging.info(f"Initialized Bitcoin.de client for API key {credentials.masked_key} ({base_url})")

    return _client


def verify_bitcoin_de_connection(client: Optional[TradingApiClient] = None) -> Dict[str, str]:
    """
    Verify API connectivity by fetching the account balances.

    Args:
        client: Client to use (the global one if omitted)

    Returns:
        Mapping of currency to available amount

    Raises:
        BitcoinDeError: If the request fails
    """
    client = client or get_bitcoin_de_client()
    logging.info("Verifying Bitcoin.de API connectivity...")

    info = client.show_account_info()

    balances: Dict[str, str] = {}
    for currency, amounts in sorted(info.data.balances.items()):
        balances[currency] = format_amount(amounts.available_amount)
        logging.info(f"  - {currency}: {balances[currency]} available")

    logging.info(f"Bitcoin.de API connection verified ({info.credits} credits left)")
    return balances
