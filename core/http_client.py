"""
Base REST API Client

Shared aiohttp plumbing for the per-venue API clients:
- Session lifecycle via async context manager
- Optional API-key header
- One bounded-timeout GET per call, no retries
- Mapping of failures onto ExchangeTransportError / ExchangeProtocolError
- Row-by-row validation of venue payloads through pydantic models

Usage:
    class OKXAPIClient(BaseAPIClient):
        exchange = "okx"
        API_KEY_HEADER = "OK-ACCESS-KEY"

    async with OKXAPIClient(config) as client:
        data = await client._get("/api/v5/market/tickers", {"instType": "SPOT"})
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Type, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from core.config import VenueConfig
from core.exceptions import ExchangeProtocolError, ExchangeTransportError
from core.logging import get_logger, log_api_request, log_api_response


ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseAPIClient:
    """
    Async HTTP client base for a single exchange.

    Attributes:
        exchange: Venue identifier used in logs and errors
        API_KEY_HEADER: Header carrying the API key (when configured)
        config: Explicit venue configuration
        session: aiohttp ClientSession (None outside the context manager)
        logger: Logger instance (injectable)

    Notes:
        - Does not retry: a fresh query cycle is the retry mechanism
        - Timeouts are treated exactly like connection errors
    """

    exchange: str = "unknown"
    API_KEY_HEADER: Optional[str] = None

    def __init__(self, config: VenueConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or get_logger(f"exchanges.{self.exchange}.api_client")
        self.session: Optional[aiohttp.ClientSession] = None

    # ============================================
    # Context Manager for Session Management
    # ============================================

    async def __aenter__(self):
        self.session = aiohttp.ClientSession()
        self.logger.debug(f"{self.__class__.__name__} session created")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug(f"{self.__class__.__name__} session closed")

    # ============================================
    # HTTP Request Handler
    # ============================================

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": "Mozilla/5.0",
        }
        if self.API_KEY_HEADER and self.config.api_key:
            headers[self.API_KEY_HEADER] = self.config.api_key
        return headers

    async def _get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        base_url: Optional[str] = None
    ) -> Any:
        """
        Make a single GET request and return the decoded JSON body.

        Args:
            path: API endpoint path (e.g., "/api/v3/ticker/price")
            params: Optional query parameters
            base_url: Override for the configured base URL (Binance futures)

        Returns:
            Decoded JSON response

        Raises:
            RuntimeError: If the session was not opened with 'async with'
            ExchangeTransportError: Timeout or connection failure
            ExchangeProtocolError: Non-200 status or a body that is not JSON
        """
        if not self.session:
            raise RuntimeError("Client session not initialized. Use 'async with' statement.")

        url = f"{base_url or self.config.base_url}{path}"
        log_api_request(self.exchange, path, params, log=self.logger)
        started = time.monotonic()

        try:
            async with self.session.get(
                url,
                params=params,
                headers=self._headers(),
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            ) as resp:
                log_api_response(self.exchange, path, resp.status, time.monotonic() - started, log=self.logger)

                if resp.status != 200:
                    text = await resp.text()
                    raise ExchangeProtocolError(self.exchange, f"GET {path} failed: {text[:200]}", status=resp.status)

                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise ExchangeProtocolError(self.exchange, f"GET {path} returned invalid JSON: {e}")

        except asyncio.TimeoutError:
            raise ExchangeTransportError(self.exchange, f"Timeout after {self.config.timeout}s on {path}")

        except aiohttp.ClientError as e:
            raise ExchangeTransportError(self.exchange, f"Request failed on {path}: {e}")

    # ============================================
    # Payload Validation
    # ============================================

    def _parse_envelope(self, model: Type[ModelT], data: Any, path: str) -> ModelT:
        """Validate a response envelope, raising a protocol error on mismatch."""
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ExchangeProtocolError(
                self.exchange, f"Unexpected payload shape on {path}: {e.error_count()} error(s)"
            )

    def _parse_rows(self, model: Type[ModelT], rows: Any, path: str) -> List[ModelT]:
        """
        Validate a list of rows, skipping the ones that do not fit the model.

        Raises:
            ExchangeProtocolError: If `rows` is not a list at all
        """
        if not isinstance(rows, list):
            raise ExchangeProtocolError(
                self.exchange, f"Expected a list on {path}, got {type(rows).__name__}"
            )

        parsed = []
        skipped = 0
        for row in rows:
            try:
                parsed.append(model.model_validate(row))
            except ValidationError:
                skipped += 1

        if skipped:
            self.logger.debug(f"{self.exchange} {path}: skipped {skipped} malformed row(s)")

        return parsed

    async def ping(self, path: str, base_url: Optional[str] = None) -> bool:
        """Lightweight reachability probe used by health checks."""
        try:
            await self._get(path, base_url=base_url)
            return True
        except (ExchangeTransportError, ExchangeProtocolError) as e:
            self.logger.warning(f"Health check failed: {e}")
            return False
