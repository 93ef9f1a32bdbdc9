"""Tests for the error handler module."""

import asyncio
import unittest
from unittest.mock import patch, MagicMock, AsyncMock

from aiohttp import ClientConnectionError
from aiohttp.client_exceptions import ClientResponseError

from penny_trends.collector.error_handler import with_exponential_backoff
from penny_trends.exceptions import FetchExhausted, NetworkError


class MockRequestInfo:
    def __init__(self, url="http://example.com"):
        self.real_url = url


def response_error(status, message="error"):
    return ClientResponseError(
        request_info=MockRequestInfo(),
        history=(),
        status=status,
        message=message,
    )


class TestWithExponentialBackoff(unittest.TestCase):
    """Test cases for the with_exponential_backoff decorator."""

    URL = "https://www.reddit.com/r/pennystocks/new.json?limit=50"

    def test_successful_call(self):
        mock_func = AsyncMock(return_value={"data": {}})
        decorated_func = with_exponential_backoff()(mock_func)

        with patch('asyncio.sleep', AsyncMock()) as mock_sleep:
            result = asyncio.run(decorated_func(self.URL))

        mock_func.assert_called_once_with(self.URL)
        mock_sleep.assert_not_called()
        self.assertEqual(result, {"data": {}})

    def test_five_rate_limits_exhaust_retries(self):
        """Five 429s in a row: five attempts, doubling sleeps from 10s, then FetchExhausted."""
        mock_func = AsyncMock(side_effect=response_error(429, "Too Many Requests"))
        decorated_func = with_exponential_backoff(max_attempts=5, initial_backoff=10.0, backoff_factor=2.0)(mock_func)

        with patch('asyncio.sleep', AsyncMock()) as mock_sleep:
            with self.assertRaises(FetchExhausted) as ctx:
                asyncio.run(decorated_func(self.URL))

        self.assertEqual(mock_func.call_count, 5)
        delays = [call[0][0] for call in mock_sleep.call_args_list]
        self.assertEqual(delays, [10.0, 20.0, 40.0, 80.0])
        self.assertEqual(ctx.exception.attempts, 5)
        self.assertEqual(ctx.exception.url, self.URL)

    def test_rate_limit_then_success(self):
        mock_func = AsyncMock(side_effect=[response_error(429), response_error(429), "ok"])
        decorated_func = with_exponential_backoff()(mock_func)

        with patch('asyncio.sleep', AsyncMock()) as mock_sleep:
            result = asyncio.run(decorated_func(self.URL))

        self.assertEqual(result, "ok")
        self.assertEqual([call[0][0] for call in mock_sleep.call_args_list], [10.0, 20.0])

    def test_server_error_is_not_retried(self):
        mock_func = AsyncMock(side_effect=response_error(500, "Server error"))
        decorated_func = with_exponential_backoff()(mock_func)

        with patch('asyncio.sleep', AsyncMock()) as mock_sleep:
            with self.assertRaises(NetworkError) as ctx:
                asyncio.run(decorated_func(self.URL))

        mock_func.assert_called_once()
        mock_sleep.assert_not_called()
        self.assertEqual(ctx.exception.status, 500)
        self.assertIsInstance(ctx.exception.__cause__, ClientResponseError)

    def test_connection_error_is_not_retried(self):
        mock_func = AsyncMock(side_effect=ClientConnectionError("connection reset"))
        decorated_func = with_exponential_backoff()(mock_func)

        with patch('asyncio.sleep', AsyncMock()) as mock_sleep:
            with self.assertRaises(NetworkError):
                asyncio.run(decorated_func(self.URL))

        mock_func.assert_called_once()
        mock_sleep.assert_not_called()

    def test_timeout_is_not_retried(self):
        mock_func = AsyncMock(side_effect=asyncio.TimeoutError())
        decorated_func = with_exponential_backoff()(mock_func)

        with patch('asyncio.sleep', AsyncMock()):
            with self.assertRaises(NetworkError):
                asyncio.run(decorated_func(self.URL))

        mock_func.assert_called_once()

    def test_prometheus_integration(self):
        mock_exporter = MagicMock()
        mock_func = AsyncMock(side_effect=[response_error(429), "ok"])
        decorated_func = with_exponential_backoff(prometheus_exporter=mock_exporter)(mock_func)

        with patch('asyncio.sleep', AsyncMock()):
            asyncio.run(decorated_func(self.URL))

        mock_exporter.record_api_error.assert_called_once_with("429")


if __name__ == "__main__":
    unittest.main()
