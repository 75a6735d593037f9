"""
Pydantic models for Bitcoin.de Trading API v4 responses.

Unknown fields are ignored so new fields added by the API don't break
decoding. Amounts are parsed into Decimal, timestamps into datetime.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiResponse(BaseModel):
    """Fields every response carries. Also the payload of calls that return nothing else."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    errors: List[Dict[str, Any]] = Field(default_factory=list)
    credits: Optional[int] = None


class Page(BaseModel):
    current: int
    last: int


class TradingPartnerInformation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str
    is_kyc_full: Optional[bool] = None
    trust_level: Optional[str] = None
    depositor: Optional[str] = None
    iban: Optional[str] = None
    bank_name: Optional[str] = None
    bic: Optional[str] = None
    seat_of_bank: Optional[str] = None
    amount_trades: Optional[int] = None
    rating: Optional[int] = None


class OrderRequirements(BaseModel):
    model_config = ConfigDict(extra="ignore")

    min_trust_level: Optional[str] = None
    only_kyc_full: Optional[bool] = None
    seat_of_bank: Optional[List[str]] = None
    payment_option: Optional[int] = None


# Orders

class OrderbookEntry(BaseModel):
    """One public order from showOrderbook / showOrderDetails."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    order_id: str
    trading_pair: str
    order_type: str = Field(alias="type")
    max_amount_currency_to_trade: Decimal
    min_amount_currency_to_trade: Optional[Decimal] = None
    price: Decimal
    max_volume_currency_to_pay: Optional[Decimal] = None
    min_volume_currency_to_pay: Optional[Decimal] = None
    is_external_wallet_order: Optional[bool] = None
    order_requirements_fullfilled: Optional[bool] = None
    sepa_option: Optional[int] = None
    trading_partner_information: Optional[TradingPartnerInformation] = None
    order_requirements: Optional[OrderRequirements] = None


class ShowOrderbookResponse(ApiResponse):
    orders: List[OrderbookEntry]


class ShowOrderDetailsResponse(ApiResponse):
    order: OrderbookEntry


class MyOrderDetails(BaseModel):
    """One of the account's own orders."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    order_id: str
    trading_pair: str
    order_type: str = Field(alias="type")
    max_amount_currency_to_trade: Decimal
    min_amount_currency_to_trade: Optional[Decimal] = None
    price: Decimal
    max_volume_currency_to_pay: Optional[Decimal] = None
    min_volume_currency_to_pay: Optional[Decimal] = None
    is_external_wallet_order: Optional[bool] = None
    end_datetime: Optional[datetime] = None
    new_order_for_remaining_amount: Optional[bool] = None
    state: int
    sepa_option: Optional[int] = None
    order_requirements: Optional[OrderRequirements] = None
    trading_partner_information: Optional[TradingPartnerInformation] = None
    created_at: Optional[datetime] = None


class ShowMyOrdersResponse(ApiResponse):
    orders: List[MyOrderDetails]
    page: Optional[Page] = None


class ShowMyOrderDetailsResponse(ApiResponse):
    order: MyOrderDetails


class CreateOrderResponse(ApiResponse):
    order_id: str


# Trades

class MyTradeDetails(BaseModel):
    """One of the account's trades."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    trade_id: str
    trading_pair: str
    trade_type: str = Field(alias="type")
    amount_currency_to_trade: Decimal
    price: Decimal
    volume_currency_to_pay: Decimal
    amount_currency_to_trade_after_fee: Optional[Decimal] = None
    volume_currency_to_pay_after_fee: Optional[Decimal] = None
    fee_currency_to_pay: Optional[Decimal] = None
    fee_currency_to_trade: Optional[Decimal] = None
    is_external_wallet_trade: Optional[bool] = None
    new_order_id_for_remaining_amount: Optional[str] = None
    state: int
    is_trade_marked_as_paid: Optional[bool] = None
    trade_marked_as_paid_at: Optional[datetime] = None
    my_rating_for_trading_partner: Optional[str] = None
    trading_partner_information: Optional[TradingPartnerInformation] = None
    created_at: Optional[datetime] = None
    successfully_finished_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    payment_method: Optional[int] = None


class ShowMyTradesResponse(ApiResponse):
    trades: List[MyTradeDetails]
    page: Optional[Page] = None


class ShowMyTradeDetailsResponse(ApiResponse):
    trade: MyTradeDetails


# Account

class BalanceAmounts(BaseModel):
    total_amount: Decimal
    available_amount: Decimal
    reserved_amount: Decimal


class EncryptedInformation(BaseModel):
    bic_short: Optional[str] = None
    bic_full: Optional[str] = None
    uid: Optional[str] = None


class AccountInfoData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    balances: Dict[str, BalanceAmounts]
    encrypted_information: Optional[EncryptedInformation] = None


class ShowAccountInfoResponse(ApiResponse):
    data: AccountInfoData


class LedgerTradeDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    trade_id: str
    trading_pair: str
    price: Decimal
    is_external_wallet_trade: Optional[bool] = None
    primary_currency: Optional[Dict[str, Any]] = None
    secondary_currency: Optional[Dict[str, Any]] = None


class LedgerEntry(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    date: datetime
    entry_type: str = Field(alias="type")
    reference: str
    trade: Optional[LedgerTradeDetails] = None
    cashflow: Decimal
    balance: Decimal


class ShowAccountLedgerResponse(ApiResponse):
    account_ledger: List[LedgerEntry]
    page: Optional[Page] = None


class ShowPermissionsResponse(ApiResponse):
    permissions: List[str]


# Withdrawals

class WithdrawalDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    withdrawal_id: str
    address: str
    recipient_purpose: Optional[str] = None
    amount: Decimal
    network_fee: Optional[Decimal] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    state: int
    transferred_at: Optional[datetime] = None
    txid: Optional[str] = None


class ShowWithdrawalResponse(ApiResponse):
    withdrawal: WithdrawalDetails


class ShowWithdrawalsResponse(ApiResponse):
    withdrawals: List[WithdrawalDetails]
    page: Optional[Page] = None


class CreateWithdrawalResponse(ApiResponse):
    withdrawal_id: int


class ShowWithdrawalMinNetworkFeeResponse(ApiResponse):
    min_network_fee: Decimal


# Deposits

class DepositDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    deposit_id: int
    address: str
    recipient_purpose: Optional[str] = None
    amount: Decimal
    state: int
    txid: Optional[str] = None
    confirmations: Optional[int] = None
    created_at: Optional[datetime] = None


class ShowDepositResponse(ApiResponse):
    deposit: DepositDetails


class ShowDepositsResponse(ApiResponse):
    deposits: List[DepositDetails]
    page: Optional[Page] = None


class RequestDepositAddressResponse(ApiResponse):
    address: str
    recipient_purpose: Optional[str] = None


# Market data

class CompactOrder(BaseModel):
    price: Decimal
    amount_currency_to_trade: Decimal


class CompactOrderbook(BaseModel):
    bids: List[CompactOrder] = Field(default_factory=list)
    asks: List[CompactOrder] = Field(default_factory=list)


class ShowOrderbookCompactResponse(ApiResponse):
    trading_pair: str
    orders: CompactOrderbook


class PublicTrade(BaseModel):
    # unix timestamp on the wire
    date: datetime
    price: Decimal
    amount_currency_to_trade: Decimal
    tid: int


class ShowPublicTradeHistoryResponse(ApiResponse):
    trading_pair: str
    trades: List[PublicTrade]


class Rates(BaseModel):
    rate_weighted: Decimal
    rate_weighted_3h: Decimal
    rate_weighted_12h: Decimal


class ShowRatesResponse(ApiResponse):
    trading_pair: str
    rates: Rates


# Outgoing addresses / address pool

class OutgoingAddress(BaseModel):
    model_config = ConfigDict(extra="ignore")

    address_id: Optional[int] = None
    recipient_address: str
    recipient_purpose: Optional[str] = None
    comment: Optional[str] = None


class ShowOutgoingAddressesResponse(ApiResponse):
    """Outgoing addresses; listAddressPool returns the same shape."""

    outgoing_address: List[OutgoingAddress]
    page: Optional[Page] = None

