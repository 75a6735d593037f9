"""
Bitcoin.de Trading API v4 client package.

Signs, sends and decodes calls to the Bitcoin.de Trading API.
"""
from typing import Protocol, Dict, Optional, runtime_checkable


@runtime_checkable
class ExchangeAuthenticator(Protocol):
    """Protocol defining the interface for exchange authenticators."""

    def get_auth_headers(
        self,
        request_method: str,
        request_url: str,
        body: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Get HTTP headers for authenticated API request.

        Args:
            request_method: HTTP method (GET, POST, etc.)
            request_url: Full request URL
            body: Request body, if any

        Returns:
            Dictionary of HTTP authentication headers
        """
        ...


# Re-exports for easy imports
from .bitcoin_de import (
    AsyncTradingApiClient,
    TradingApiClient,
    decode_response,
    get_bitcoin_de_client,
    verify_bitcoin_de_connection,
)
from .enums import Currency, OrderType, TradeRating, TradingPair
from .errors import (
    ApiError,
    ApiErrorCode,
    BitcoinDeError,
    DecodeError,
    HttpStatusError,
    Maintenance,
    MethodNotFound,
    MissingPathParameter,
    SigningError,
    TransportFailure,
    UnknownApiError,
)
from .signing import BitcoinDeAuthenticator, BitcoinDeCredentials, NonceGenerator, SignedRequest
from .transport import AiohttpTransport, RequestsTransport, TransportResponse

__all__ = [
    'ExchangeAuthenticator',
    'AsyncTradingApiClient',
    'TradingApiClient',
    'decode_response',
    'get_bitcoin_de_client',
    'verify_bitcoin_de_connection',
    'Currency',
    'OrderType',
    'TradeRating',
    'TradingPair',
    'ApiError',
    'ApiErrorCode',
    'BitcoinDeError',
    'DecodeError',
    'HttpStatusError',
    'Maintenance',
    'MethodNotFound',
    'MissingPathParameter',
    'SigningError',
    'TransportFailure',
    'UnknownApiError',
    'BitcoinDeAuthenticator',
    'BitcoinDeCredentials',
    'NonceGenerator',
    'SignedRequest',
    'AiohttpTransport',
    'RequestsTransport',
    'TransportResponse',
]
