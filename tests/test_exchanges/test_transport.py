"""
Tests for the requests and aiohttp transports.
"""
import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock, Mock

import aiohttp
import pytest
import requests

from exchanges.bitcoin_de import decode_response
from exchanges.errors import DecodeError, TransportFailure
from exchanges.responses import ApiResponse
from exchanges.transport import DEFAULT_TIMEOUT, AiohttpTransport, RequestsTransport, TransportResponse

URL = "https://api.bitcoin.de/v4/btceur/orders"
HEADERS = {"X-API-KEY": "k", "X-API-NONCE": "1", "X-API-SIGNATURE": "s"}


class TestRequestsTransport:
    """Test the blocking transport."""

    def test_sends_request_as_given(self, mock_session: Mock) -> None:
        """Method, URL, headers and body are passed through unchanged."""
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.text = '{"errors": [], "credits": 10}'
        mock_session.request.return_value = mock_response

        transport = RequestsTransport(timeout=5, session=mock_session)
        result = transport.execute("POST", URL, HEADERS, "price=1&type=buy")

        mock_session.request.assert_called_once_with(
            "POST", URL, headers=HEADERS, data=b"price=1&type=buy", timeout=5
        )
        assert result == TransportResponse(status=200, body='{"errors": [], "credits": 10}')

    def test_no_body_for_get(self, mock_session: Mock) -> None:
        mock_session.request.return_value = MagicMock(status_code=200, text="{}")

        RequestsTransport(session=mock_session).execute("GET", URL, HEADERS, None)

        assert mock_session.request.call_args[1]["data"] is None
        assert mock_session.request.call_args[1]["timeout"] == DEFAULT_TIMEOUT

    def test_non_2xx_is_returned_not_raised(self, mock_session: Mock) -> None:
        """The transport does not interpret status codes."""
        mock_session.request.return_value = MagicMock(status_code=500, text="oops")

        result = RequestsTransport(session=mock_session).execute("GET", URL, HEADERS, None)

        assert result.status == 500
        assert result.body == "oops"

    def test_timeout(self, mock_session: Mock) -> None:
        mock_session.request.side_effect = requests.exceptions.ReadTimeout("read timed out")

        with pytest.raises(TransportFailure) as exc_info:
            RequestsTransport(timeout=1, session=mock_session).execute("GET", URL, HEADERS, None)

        assert exc_info.value.timeout is True
        assert isinstance(exc_info.value.cause, requests.exceptions.ReadTimeout)

    def test_connect_timeout_flagged_as_timeout(self, mock_session: Mock) -> None:
        mock_session.request.side_effect = requests.exceptions.ConnectTimeout("connect timed out")

        with pytest.raises(TransportFailure) as exc_info:
            RequestsTransport(session=mock_session).execute("GET", URL, HEADERS, None)

        assert exc_info.value.timeout is True

    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("dns failure"),
        requests.exceptions.SSLError("bad certificate"),
        requests.exceptions.TooManyRedirects("loop"),
    ])
    def test_network_errors(self, mock_session: Mock, error: Exception) -> None:
        mock_session.request.side_effect = error

        with pytest.raises(TransportFailure) as exc_info:
            RequestsTransport(session=mock_session).execute("GET", URL, HEADERS, None)

        assert exc_info.value.timeout is False
        assert exc_info.value.cause is error

    def test_close(self, mock_session: Mock) -> None:
        RequestsTransport(session=mock_session).close()

        mock_session.close.assert_called_once()


class TestAiohttpTransport:
    """Test the async transport."""

    @pytest.mark.asyncio
    async def test_sends_request_as_given(self) -> None:
        session = _mock_aiohttp_session(200, '{"errors": [], "credits": 3}')
        transport = AiohttpTransport(session=session)

        result = await transport.execute("POST", URL, HEADERS, "amount=1")

        session.request.assert_called_once_with("POST", URL, headers=HEADERS, data=b"amount=1")
        assert result == TransportResponse(status=200, body='{"errors": [], "credits": 3}')

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        session = _mock_aiohttp_session(200, "")
        session.request.side_effect = asyncio.TimeoutError()

        with pytest.raises(TransportFailure) as exc_info:
            await AiohttpTransport(session=session).execute("GET", URL, HEADERS, None)

        assert exc_info.value.timeout is True

    @pytest.mark.asyncio
    async def test_client_error(self) -> None:
        session = _mock_aiohttp_session(200, "")
        session.request.side_effect = aiohttp.ClientConnectionError("connection refused")

        with pytest.raises(TransportFailure) as exc_info:
            await AiohttpTransport(session=session).execute("GET", URL, HEADERS, None)

        assert exc_info.value.timeout is False
        assert isinstance(exc_info.value.cause, aiohttp.ClientError)

    @pytest.mark.asyncio
    async def test_context_manager_creates_and_closes_session(self) -> None:
        transport = AiohttpTransport(timeout=3)

        async with transport:
            assert transport._session is not None
            assert not transport._session.closed

        assert transport._session is None

    @pytest.mark.asyncio
    async def test_invalid_utf8_body_is_replaced(self) -> None:
        """A body that is not valid UTF-8 still comes back as text."""
        raw = b'\xff\xfe{"a":1}'
        session = _mock_aiohttp_session(200, "")
        response = session.request.return_value.__aenter__.return_value
        response.text = AsyncMock(side_effect=lambda errors="strict": raw.decode("utf-8", errors))

        result = await AiohttpTransport(session=session).execute("GET", URL, HEADERS, None)

        response.text.assert_awaited_once_with(errors="replace")
        assert result.body.endswith('{"a":1}')
        with pytest.raises(DecodeError):
            decode_response(result.status, result.body, ApiResponse)

    @pytest.mark.asyncio
    async def test_close_leaves_caller_session_open(self) -> None:
        session = _mock_aiohttp_session(200, "")
        transport = AiohttpTransport(session=session)

        await transport.close()

        session.close.assert_not_called()
        assert transport._session is session

    @pytest.mark.asyncio
    async def test_close_without_session(self) -> None:
        transport = AiohttpTransport()

        await transport.close()

        assert transport._session is None


def _mock_aiohttp_session(status: int, text: str) -> Any:
    """Build a ClientSession stand-in whose request() yields one response."""
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value=text)

    request_cm = MagicMock()
    request_cm.__aenter__ = AsyncMock(return_value=response)
    request_cm.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.closed = False
    session.request.return_value = request_cm
    session.close = AsyncMock()
    return session


@pytest.fixture
def mock_session() -> Mock:
    """Mock requests.Session."""
    return Mock(spec=requests.Session)
