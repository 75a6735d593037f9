"""
Endpoint table for the Bitcoin.de Trading API v4.

Each API method name maps to its HTTP verb and the path below the base
URI. Path segments starting with ``:`` are placeholders filled from the
call parameters; every other parameter goes into the query string (GET,
DELETE) or the form body (POST).
"""
from dataclasses import dataclass
from typing import Dict, Tuple

API_BASE_URI = "https://api.bitcoin.de/v4"

HTTP_METHOD_GET = "GET"
HTTP_METHOD_POST = "POST"
HTTP_METHOD_DELETE = "DELETE"

# Orders
METHOD_SHOW_ORDERBOOK = "showOrderbook"
METHOD_SHOW_ORDER_DETAILS = "showOrderDetails"
METHOD_CREATE_ORDER = "createOrder"
METHOD_DELETE_ORDER = "deleteOrder"
METHOD_SHOW_MY_ORDERS = "showMyOrders"
METHOD_SHOW_MY_ORDERS_ALL_PAIRS = "showMyOrdersAllPairs"
METHOD_SHOW_MY_ORDER_DETAILS = "showMyOrderDetails"
# Trades
METHOD_EXECUTE_TRADE = "executeTrade"
METHOD_SHOW_MY_TRADES = "showMyTrades"
METHOD_SHOW_MY_TRADES_ALL_PAIRS = "showMyTradesAllPairs"
METHOD_SHOW_MY_TRADE_DETAILS = "showMyTradeDetails"
METHOD_MARK_TRADE_AS_PAID = "markTradeAsPaid"
METHOD_MARK_TRADE_AS_PAYMENT_RECEIVED = "markTradeAsPaymentReceived"
METHOD_ADD_TRADE_RATING = "addTradeRating"
METHOD_MARK_COINS_AS_TRANSFERRED = "markCoinsAsTransferred"
METHOD_MARK_COINS_AS_RECEIVED = "markCoinsAsReceived"
# Account
METHOD_SHOW_ACCOUNT_INFO = "showAccountInfo"
METHOD_SHOW_ACCOUNT_LEDGER = "showAccountLedger"
METHOD_SHOW_PERMISSIONS = "showPermissions"
# Withdrawals
METHOD_CREATE_WITHDRAWAL = "createWithdrawal"
METHOD_DELETE_WITHDRAWAL = "deleteWithdrawal"
METHOD_SHOW_WITHDRAWAL = "showWithdrawal"
METHOD_SHOW_WITHDRAWALS = "showWithdrawals"
METHOD_SHOW_WITHDRAWAL_MIN_NETWORK_FEE = "showWithdrawalMinNetworkFee"
# Deposits
METHOD_REQUEST_DEPOSIT_ADDRESS = "requestDepositAddress"
METHOD_SHOW_DEPOSIT = "showDeposit"
METHOD_SHOW_DEPOSITS = "showDeposits"
# Market data
METHOD_SHOW_ORDERBOOK_COMPACT = "showOrderbookCompact"
METHOD_SHOW_PUBLIC_TRADE_HISTORY = "showPublicTradeHistory"
METHOD_SHOW_RATES = "showRates"
# Address pool / outgoing addresses
METHOD_ADD_TO_ADDRESS_POOL = "addToAddressPool"
METHOD_REMOVE_FROM_ADDRESS_POOL = "removeFromAddressPool"
METHOD_LIST_ADDRESS_POOL = "listAddressPool"
METHOD_SHOW_OUTGOING_ADDRESSES = "showOutgoingAddresses"


@dataclass(frozen=True)
class MethodSetting:
    """HTTP verb and path template of one API method."""

    http_method: str
    path_segments: Tuple[str, ...]

    @property
    def placeholders(self) -> Tuple[str, ...]:
        """Names of the path parameters, in path order."""
        return tuple(s[1:] for s in self.path_segments if s.startswith(":"))


METHOD_SETTINGS: Dict[str, MethodSetting] = {
    # GET /v4/:trading_pair/orderbook
    METHOD_SHOW_ORDERBOOK: MethodSetting(HTTP_METHOD_GET, (":trading_pair", "orderbook")),
    # GET /v4/:trading_pair/orders/public/details/:order_id
    METHOD_SHOW_ORDER_DETAILS: MethodSetting(
        HTTP_METHOD_GET, (":trading_pair", "orders", "public", "details", ":order_id")
    ),
    METHOD_CREATE_ORDER: MethodSetting(HTTP_METHOD_POST, (":trading_pair", "orders")),
    METHOD_DELETE_ORDER: MethodSetting(HTTP_METHOD_DELETE, (":trading_pair", "orders", ":order_id")),
    METHOD_SHOW_MY_ORDERS: MethodSetting(HTTP_METHOD_GET, (":trading_pair", "orders")),
    METHOD_SHOW_MY_ORDERS_ALL_PAIRS: MethodSetting(HTTP_METHOD_GET, ("orders",)),
    METHOD_SHOW_MY_ORDER_DETAILS: MethodSetting(HTTP_METHOD_GET, (":trading_pair", "orders", ":order_id")),

    METHOD_EXECUTE_TRADE: MethodSetting(HTTP_METHOD_POST, (":trading_pair", "trades", ":order_id")),
    METHOD_SHOW_MY_TRADES: MethodSetting(HTTP_METHOD_GET, (":trading_pair", "trades")),
    METHOD_SHOW_MY_TRADES_ALL_PAIRS: MethodSetting(HTTP_METHOD_GET, ("trades",)),
    METHOD_SHOW_MY_TRADE_DETAILS: MethodSetting(HTTP_METHOD_GET, (":trading_pair", "trades", ":trade_id")),
    METHOD_MARK_TRADE_AS_PAID: MethodSetting(
        HTTP_METHOD_POST, (":trading_pair", "trades", ":trade_id", "mark_trade_as_paid")
    ),
    METHOD_MARK_TRADE_AS_PAYMENT_RECEIVED: MethodSetting(
        HTTP_METHOD_POST, (":trading_pair", "trades", ":trade_id", "mark_trade_as_payment_received")
    ),
    METHOD_ADD_TRADE_RATING: MethodSetting(
        HTTP_METHOD_POST, (":trading_pair", "trades", ":trade_id", "add_trade_rating")
    ),
    METHOD_MARK_COINS_AS_TRANSFERRED: MethodSetting(
        HTTP_METHOD_POST, (":trading_pair", "trades", ":trade_id", "mark_coins_as_transferred")
    ),
    METHOD_MARK_COINS_AS_RECEIVED: MethodSetting(
        HTTP_METHOD_POST, (":trading_pair", "trades", ":trade_id", "mark_coins_as_received")
    ),

    METHOD_SHOW_ACCOUNT_INFO: MethodSetting(HTTP_METHOD_GET, ("account",)),
    METHOD_SHOW_ACCOUNT_LEDGER: MethodSetting(HTTP_METHOD_GET, (":currency", "account", "ledger")),
    METHOD_SHOW_PERMISSIONS: MethodSetting(HTTP_METHOD_GET, ("permissions",)),

    METHOD_CREATE_WITHDRAWAL: MethodSetting(HTTP_METHOD_POST, (":currency", "withdrawals")),
    METHOD_DELETE_WITHDRAWAL: MethodSetting(HTTP_METHOD_DELETE, (":currency", "withdrawals", ":withdrawal_id")),
    METHOD_SHOW_WITHDRAWAL: MethodSetting(HTTP_METHOD_GET, (":currency", "withdrawals", ":withdrawal_id")),
    METHOD_SHOW_WITHDRAWALS: MethodSetting(HTTP_METHOD_GET, (":currency", "withdrawals")),
    METHOD_SHOW_WITHDRAWAL_MIN_NETWORK_FEE: MethodSetting(
        HTTP_METHOD_GET, (":currency", "withdrawals", "min_network_fee")
    ),

    METHOD_REQUEST_DEPOSIT_ADDRESS: MethodSetting(HTTP_METHOD_POST, (":currency", "deposits", "new_address")),
    METHOD_SHOW_DEPOSIT: MethodSetting(HTTP_METHOD_GET, (":currency", "deposits", ":deposit_id")),
    METHOD_SHOW_DEPOSITS: MethodSetting(HTTP_METHOD_GET, (":currency", "deposits")),

    METHOD_SHOW_ORDERBOOK_COMPACT: MethodSetting(HTTP_METHOD_GET, (":trading_pair", "orderbook", "compact")),
    METHOD_SHOW_PUBLIC_TRADE_HISTORY: MethodSetting(HTTP_METHOD_GET, (":trading_pair", "trades", "history")),
    METHOD_SHOW_RATES: MethodSetting(HTTP_METHOD_GET, (":trading_pair", "rates")),

    METHOD_ADD_TO_ADDRESS_POOL: MethodSetting(HTTP_METHOD_POST, (":currency", "address_pool")),
    METHOD_REMOVE_FROM_ADDRESS_POOL: MethodSetting(HTTP_METHOD_DELETE, (":currency", "address_pool", ":address")),
    METHOD_LIST_ADDRESS_POOL: MethodSetting(HTTP_METHOD_GET, (":currency", "address_pool")),
    METHOD_SHOW_OUTGOING_ADDRESSES: MethodSetting(HTTP_METHOD_GET, (":currency", "outgoing_address")),
}
