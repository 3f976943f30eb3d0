# 📄 File: plant_health/shared/infrastructure/external_apis/api_client.py

# 🧭 Purpose (Layman Explanation):
# A small, careful messenger for talking to outside services (like the AI that diagnoses plants):
# it sends the request, waits a fixed amount of time at most, and reports clearly when the
# other side answers with an error.

# 🧪 Purpose (Technical Summary):
# Generic async JSON HTTP client on aiohttp with an explicit total timeout, single-attempt
# requests (no retries), upstream status/body capture on non-2xx responses, and call timing
# logs. Exceptions are normalised to ExternalAPIError.

# 🔗 Dependencies:
# - aiohttp: Async HTTP client
# - plant_health.shared.utils.logging: external call logging

# 🔄 Connected Modules / Calls From:
# Used by: OpenAI vision diagnosis oracle, remote diagnosis worker oracle
# Lifecycle: created and closed by the application lifespan

import asyncio
import time
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientSession, ClientTimeout

from plant_health.shared.core.exceptions import ExternalAPIError
from plant_health.shared.utils.logging import get_logger

logger = get_logger(__name__)


class APIClient:
    """
    Generic async HTTP client for external API integrations.

    Features:
    - One attempt per call, bounded by an explicit total timeout
    - Bearer authentication when an API key is configured
    - Upstream status code and body preserved on failures
    - Request timing logs
    """

    def __init__(
        self,
        base_url: str,
        api_name: str,
        api_key: Optional[str] = None,
        timeout: int = 60,
    ):
        """Initialize API client with configuration."""
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.api_name = api_name
        self.timeout = timeout

        self.session: Optional[ClientSession] = None

        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
        }

    async def initialize(self):
        """Create the underlying aiohttp session."""
        if self.session is not None:
            return

        self.session = ClientSession(
            timeout=ClientTimeout(total=self.timeout),
            headers=self._get_default_headers(),
        )
        logger.info(f"API client initialized for {self.api_name}")

    def _get_default_headers(self) -> Dict[str, str]:
        """Get default headers for requests."""
        headers = {
            'User-Agent': f'PlantHealthAPI/1.0 ({self.api_name}-client)',
            'Accept': 'application/json',
            'Content-Type': 'application/json',
        }
        if self.api_key:
            headers['Authorization'] = f'Bearer {self.api_key}'
        return headers

    def _build_url(self, endpoint: str) -> str:
        endpoint = endpoint.lstrip('/')
        return f"{self.base_url}/{endpoint}" if endpoint else self.base_url

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Make a single HTTP request and decode the JSON body.

        Raises:
            ExternalAPIError: Non-2xx status (with status and body), timeout or
                connection failure
        """
        if self.session is None:
            await self.initialize()

        url = self._build_url(endpoint)
        started = time.perf_counter()
        self.stats['total_requests'] += 1

        try:
            async with self.session.request(method, url, json=data, headers=headers) as response:
                body = await response.text()
                duration_ms = (time.perf_counter() - started) * 1000

                if response.status >= 400:
                    self.stats['failed_requests'] += 1
                    logger.log_external_call(
                        self.api_name, f"{method} {endpoint}", duration_ms,
                        status='error', status_code=response.status,
                    )
                    raise ExternalAPIError(
                        f"{self.api_name} API error: {response.status} - {body}",
                        api_name=self.api_name,
                        api_status_code=response.status,
                        api_response=body,
                    )

                self.stats['successful_requests'] += 1
                logger.log_external_call(
                    self.api_name, f"{method} {endpoint}", duration_ms, status_code=response.status,
                )

                try:
                    return await response.json(content_type=None)
                except ValueError:
                    return {'raw_response': body}

        except asyncio.TimeoutError as e:
            self.stats['failed_requests'] += 1
            raise ExternalAPIError(
                f"Timeout after {self.timeout}s calling {self.api_name}: {method} {url}",
                api_name=self.api_name,
            ) from e
        except aiohttp.ClientError as e:
            self.stats['failed_requests'] += 1
            raise ExternalAPIError(
                f"Connection error for {self.api_name}: {e}",
                api_name=self.api_name,
            ) from e

    async def post(
        self,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Make POST request with a JSON body."""
        return await self._make_request('POST', endpoint, data, headers)

    async def close(self):
        """Close the client session and cleanup resources."""
        if self.session:
            await self.session.close()
            self.session = None
            logger.info(f"API client closed for {self.api_name}")
