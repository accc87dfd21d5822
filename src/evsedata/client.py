"""HTTP client for the ich-tanke-strom.ch open data on data.geo.admin.ch."""

import logging

import httpx

from . import config
from .decoding import UpstreamFaultError, decode_feed, decode_status_feed
from .models import ChargingStation, OperatorStatus

logger = logging.getLogger(__name__)


class EVSERestClient:
    """
    Fetches the EVSE data and status feeds.

    Transport failures and non-2xx responses raise UpstreamFaultError. No
    retries are attempted; that is left to the caller.
    """

    def __init__(
        self,
        base_url: str = config.BASE_URL,
        timeout: float = config.HTTP_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": config.USER_AGENT, "Accept-Encoding": "gzip"},
            follow_redirects=True,
        )

    async def fetch_json(self, endpoint: str) -> bytes:
        """GET an endpoint and return the raw response body."""
        try:
            response = await self._client.get(endpoint)
        except httpx.HTTPError as e:
            raise UpstreamFaultError(f"Request to {endpoint} failed: {e}", url=endpoint) from e

        if response.is_error:
            raise UpstreamFaultError(
                f"Unexpected HTTP status {response.status_code} from {response.url}",
                url=str(response.url),
                status_code=response.status_code,
            )

        logger.debug(f"Fetched {len(response.content)} bytes from {response.url}")
        return response.content

    async def get_evse_data(self) -> list[ChargingStation]:
        """Fetch and decode the station feed (not deduplicated)."""
        return decode_feed(await self.fetch_json(config.DATA_ENDPOINT))

    async def get_evse_statuses(self) -> list[OperatorStatus]:
        """Fetch and decode the status feed."""
        return decode_status_feed(await self.fetch_json(config.STATUS_ENDPOINT))

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
