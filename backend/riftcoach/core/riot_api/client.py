"""Riot API HTTP client with retry logic, error mapping and authentication."""

import asyncio
from typing import Optional, Dict, Any, List, Union
import httpx
import structlog

from riftcoach.core.config import get_global_settings
from .errors import (
    RiotAPIError,
    RateLimitError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ServiceUnavailableError,
    BadRequestError,
)
from .models import MatchDTO, TimelineDTO
from .endpoints import RiotAPIEndpoints
from .constants import Region, QueueType

logger = structlog.get_logger(__name__)


class RiotAPIClient:
    """Match-v5 client with retries and status-to-error mapping."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        region: Optional[Region] = None,
        max_retries: int = 3,
        backoff_base: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Riot API client.

        Args:
            api_key: Riot API key (uses config if None)
            region: Default region for regional endpoints
            max_retries: Retries for 429 and 5xx responses and network errors
            backoff_base: Seconds multiplied by 2**attempt between retries
            transport: Optional httpx transport (used by tests)
        """
        settings = get_global_settings()
        self.api_key = api_key or settings.riot_api_key
        self.region = region or Region(settings.riot_region)
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.endpoints = RiotAPIEndpoints(self.region)

        self._transport = transport
        self.session: Optional[httpx.AsyncClient] = None
        self._session_lock = asyncio.Lock()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def start_session(self) -> None:
        """Start the httpx session."""
        if self.session is None or self.session.is_closed:
            async with self._session_lock:
                if self.session is None or self.session.is_closed:
                    headers = {
                        "X-Riot-Token": self.api_key,
                        "Accept": "application/json",
                        "User-Agent": "RiftCoach/1.0",
                    }
                    timeout = httpx.Timeout(
                        connect=5.0, read=25.0, write=10.0, pool=30.0
                    )
                    limits = httpx.Limits(
                        max_keepalive_connections=20, max_connections=20
                    )
                    self.session = httpx.AsyncClient(
                        headers=headers,
                        timeout=timeout,
                        limits=limits,
                        transport=self._transport,
                    )

                    logger.info(
                        "Riot API client session started",
                        region=self._enum_str(self.region),
                        api_key_prefix="[REDACTED]" if self.api_key else "None",
                    )

    async def close(self) -> None:
        """Close the httpx session."""
        if self.session and not self.session.is_closed:
            await self.session.aclose()
            logger.info("Riot API client session closed")

    def _raise_client_error_if_needed(self, status: int) -> None:
        """Raise specific RiotAPIError subclass for client errors."""
        if status == 400:
            raise BadRequestError("Invalid request parameters", status_code=status)
        elif status == 401:
            raise AuthenticationError("Invalid API key", status_code=status)
        elif status == 403:
            raise ForbiddenError("Access forbidden", status_code=status)
        elif status == 404:
            raise NotFoundError("Resource not found", status_code=status)

    def _handle_rate_limit(self, headers: httpx.Headers, attempt: int) -> float:
        """Return seconds to wait before retrying a 429, or raise when out of retries."""
        try:
            retry_after = float(headers.get("Retry-After", 1))
        except ValueError:
            retry_after = 1.0
        if attempt < self.max_retries:
            return retry_after
        raise RateLimitError(
            "Rate limit exceeded", status_code=429, retry_after=retry_after
        )

    def _handle_server_error(self, status: int, attempt: int) -> float:
        """Return backoff for a 5xx, or raise when out of retries."""
        if attempt < self.max_retries:
            return self.backoff_base * 2**attempt
        if status == 503:
            raise ServiceUnavailableError("Service unavailable", status_code=status)
        raise RiotAPIError(f"Server error {status}", status_code=status)

    def _retry_delay(self, response: httpx.Response, attempt: int) -> Optional[float]:
        """
        Map a non-200 response to a retry delay.

        Returns:
            Seconds to sleep before retrying, or None when the status is not retryable

        Raises:
            RiotAPIError: For non-retryable errors or when retries are exhausted
        """
        status = response.status_code
        self._raise_client_error_if_needed(status)
        if status == 429:
            return self._handle_rate_limit(response.headers, attempt)
        if status >= 500:
            return self._handle_server_error(status, attempt)
        raise RiotAPIError(f"Unexpected status {status}", status_code=status)

    async def _make_request(
        self, url: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Make a GET request with retry logic.

        Args:
            url: Request URL
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            RiotAPIError: For API errors
        """
        await self.start_session()
        if self.session is None:
            raise RiotAPIError("Session not initialized")

        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.session.get(url, params=params)
            except httpx.RequestError as e:
                last_error = e
                logger.debug(
                    "Riot API request failed", url=url, attempt=attempt, error=str(e)
                )
                if attempt < self.max_retries:
                    await asyncio.sleep(self.backoff_base * 2**attempt)
                continue

            if response.status_code == 200:
                return response.json()

            delay = self._retry_delay(response, attempt)
            logger.debug(
                "Retrying Riot API request",
                url=url,
                status_code=response.status_code,
                attempt=attempt,
                delay=delay,
            )
            await asyncio.sleep(delay)

        raise RiotAPIError(f"Request failed: {last_error}")

    @staticmethod
    def _enum_str(value: Union[Region, str]) -> str:
        """Extract string value from enum or return as-is."""
        return value.value if isinstance(value, Region) else value

    # Match endpoints
    async def get_match_ids(
        self,
        puuid: str,
        count: int = 20,
        queue: Optional[QueueType] = None,
        start: int = 0,
        region: Optional[Region] = None,
    ) -> List[str]:
        """Get the most recent match ids for a player, newest first."""
        url = self.endpoints.match_ids_by_puuid(puuid, region)
        params = self.endpoints.match_ids_params(start, count, queue)
        response = await self._make_request(url, params=params)

        if not isinstance(response, list):
            raise RiotAPIError(
                f"Expected list response for match ids, got {type(response).__name__}"
            )
        return [str(match_id) for match_id in response]

    async def get_match(
        self, match_id: str, region: Optional[Region] = None
    ) -> MatchDTO:
        """Get match details by match ID."""
        url = self.endpoints.match_by_id(match_id, region)
        response = await self._make_request(url)
        return MatchDTO.model_validate(response)

    async def get_match_timeline(
        self, match_id: str, region: Optional[Region] = None
    ) -> TimelineDTO:
        """Get the per-minute timeline of a match."""
        url = self.endpoints.match_timeline(match_id, region)
        response = await self._make_request(url)
        return TimelineDTO.model_validate(response)
