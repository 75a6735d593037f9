"""
Bitcoin.de API request signing.

Every private call carries three headers: the API key, a strictly
increasing nonce and an HMAC-SHA256 signature over

    METHOD#url#api_key#nonce#md5(body)

where ``url`` is the full request URL (query string included for GET and
DELETE) and ``body`` is the form-encoded POST body (empty otherwise).
"""
import hashlib
import hmac
import logging
import os
import threading
import time
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlencode

from .errors import SigningError

HEADER_API_KEY = "X-API-KEY"
HEADER_NONCE = "X-API-NONCE"
HEADER_SIGNATURE = "X-API-SIGNATURE"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

# md5 of the empty string, used for GET and DELETE
EMPTY_BODY_MD5 = hashlib.md5(b"").hexdigest()


@dataclass(frozen=True)
class BitcoinDeCredentials:
    """API key and secret for one Bitcoin.de account."""

    api_key: str
    api_secret: str

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ValueError("api_key must not be empty")
        if not self.api_secret:
            raise ValueError("api_secret must not be empty")

    def __repr__(self) -> str:
        return f"BitcoinDeCredentials(api_key='{self.masked_key}', api_secret='***')"

    @property
    def masked_key(self) -> str:
        """API key with everything but the first four characters hidden."""
        return f"{self.api_key[:4]}***"

    @classmethod
    def from_env(cls, key_var: str = "API_KEY", secret_var: str = "API_SECRET") -> "BitcoinDeCredentials":
        """
        Load credentials from environment variables.

        Args:
            key_var: Environment variable holding the API key
            secret_var: Environment variable holding the API secret

        Returns:
            BitcoinDeCredentials instance

        Raises:
            ValueError: If either variable is missing or empty
        """
        api_key = os.getenv(key_var)
        if not api_key:
            raise ValueError(f"Environment variable '{key_var}' is not set")

        api_secret = os.getenv(secret_var)
        if not api_secret:
            raise ValueError(f"Environment variable '{secret_var}' is not set")

        return cls(api_key=api_key.strip(), api_secret=api_secret.strip())


def _clock_microseconds() -> int:
    return time.time_ns() // 1000


class NonceGenerator:
    """
    Thread-safe source of strictly increasing nonces.

    Nonces are microseconds since the Unix epoch. If the clock has not
    moved (or went backwards) since the last nonce, the last value plus one
    is returned instead, so concurrent callers never share a nonce.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or _clock_microseconds
        self._lock = threading.Lock()
        self._last = 0

    def next(self) -> int:
        with self._lock:
            nonce = max(self._clock(), self._last + 1)
            self._last = nonce
            return nonce


# One nonce generator per API key, shared by every authenticator in the process
_nonce_generators: Dict[str, NonceGenerator] = {}
_nonce_generators_lock = threading.Lock()


def get_nonce_generator(api_key: str) -> NonceGenerator:
    """Get or create the shared NonceGenerator for an API key."""
    with _nonce_generators_lock:
        generator = _nonce_generators.get(api_key)
        if generator is None:
            generator = NonceGenerator()
            _nonce_generators[api_key] = generator
        return generator


def format_amount(value: Any) -> str:
    """
    Format a number in plain fixed-point notation.

    No exponent and no trailing zeros, so the string the API receives is
    the same one that was signed.

    Examples:
        >>> format_amount(Decimal("1.50"))
        '1.5'
        >>> format_amount(Decimal("1E+2"))
        '100'
        >>> format_amount(0.1)
        '0.1'

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValueError(f"Not an amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")

    formatted = format(amount.normalize(), "f")
    return "0" if formatted == "-0" else formatted


def format_parameter(value: Any) -> str:
    """Serialize one parameter value the way the API expects it."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, Enum):
        return getattr(value, "api_value", value.value)
    if isinstance(value, (Decimal, float, int)):
        return format_amount(value)
    return str(value)


def encode_parameters(params: Optional[Mapping[str, Any]]) -> str:
    """
    Form-encode parameters sorted by key.

    ``None`` values are skipped. Used for both query strings and POST
    bodies; the POST body hash is computed over exactly this string.
    """
    if not params:
        return ""
    items = [(key, format_parameter(value)) for key, value in sorted(params.items()) if value is not None]
    return urlencode(items)


def body_md5(body: Optional[str]) -> str:
    if not body:
        return EMPTY_BODY_MD5
    return hashlib.md5(body.encode("utf-8")).hexdigest()


def build_canonical_string(method: str, url: str, api_key: str, nonce: int, body: Optional[str] = None) -> str:
    """
    Build the string the signature is computed over.

    Args:
        method: HTTP method (case-insensitive)
        url: Full request URL, query string included for GET/DELETE
        api_key: API key sent in X-API-KEY
        nonce: Nonce sent in X-API-NONCE
        body: Form-encoded POST body, or None

    Returns:
        ``METHOD#url#api_key#nonce#md5(body)``
    """
    return f"{method.upper()}#{url}#{api_key}#{nonce}#{body_md5(body)}"


def sign(canonical: str, secret: str) -> str:
    """Lowercase hex HMAC-SHA256 of ``canonical`` keyed with ``secret``."""
    return hmac.new(secret.encode("utf-8"), canonical.encode("utf-8"), hashlib.sha256).hexdigest()


def build_auth_headers(api_key: str, nonce: int, signature: str) -> Dict[str, str]:
    """
    Assemble the authentication headers.

    Raises:
        SigningError: If the nonce is not a non-negative integer or a header
            value contains a line break
    """
    if isinstance(nonce, bool) or not isinstance(nonce, int) or nonce < 0:
        raise SigningError(f"Nonce must be a non-negative integer, got {nonce!r}")

    for name, value in ((HEADER_API_KEY, api_key), (HEADER_SIGNATURE, signature)):
        if "\r" in value or "\n" in value:
            raise SigningError(f"Header {name} contains a line break")

    return {
        HEADER_API_KEY: api_key,
        HEADER_NONCE: str(nonce),
        HEADER_SIGNATURE: signature,
    }


@dataclass(frozen=True)
class SignedRequest:
    """A request ready to hand to a transport."""

    method: str
    url: str
    nonce: int
    signature: str
    headers: Dict[str, str]
    body: Optional[str] = None


class BitcoinDeAuthenticator:
    """Sign Bitcoin.de API requests."""

    def __init__(self, credentials: BitcoinDeCredentials, nonce_generator: Optional[NonceGenerator] = None):
        """
        Initialize authenticator with credentials.

        Args:
            credentials: BitcoinDeCredentials instance
            nonce_generator: Nonce source (the shared one for the API key if omitted)
        """
        self.credentials = credentials
        self.nonce_generator = nonce_generator or get_nonce_generator(credentials.api_key)

    def sign_request(self, method: str, url: str, body: Optional[str] = None) -> SignedRequest:
        """
        Sign one request with a fresh nonce.

        Args:
            method: HTTP method
            url: Full request URL (query string included for GET/DELETE)
            body: Form-encoded POST body, or None

        Returns:
            SignedRequest with all headers set
        """
        method = method.upper()
        nonce = self.nonce_generator.next()
        canonical = build_canonical_string(method, url, self.credentials.api_key, nonce, body)
        signature = sign(canonical, self.credentials.api_secret)

        headers = build_auth_headers(self.credentials.api_key, nonce, signature)
        if body:
            headers["Content-Type"] = FORM_CONTENT_TYPE

        logging.debug(f"Signed {method} {url} (nonce {nonce})")
        return SignedRequest(method=method, url=url, nonce=nonce, signature=signature, headers=headers, body=body)

    def get_auth_headers(self, request_method: str, request_url: str, body: Optional[str] = None) -> Dict[str, str]:
        """
        Get HTTP headers for an authenticated Bitcoin.de API request.

        Args:
            request_method: HTTP method
            request_url: Full request URL
            body: Form-encoded POST body, or None

        Returns:
            Dictionary with X-API-KEY, X-API-NONCE and X-API-SIGNATURE
        """
        return self.sign_request(request_method, request_url, body).headers
