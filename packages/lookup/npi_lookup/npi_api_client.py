import aiohttp
import asyncio
import logging
from typing import Optional

from pydantic import ValidationError

from npi_common.config import Settings, get_settings
from npi_common.errors import LookupTimeoutError, UpstreamError
from npi_common.models import RawProviderRecord

logger = logging.getLogger(__name__)


class NPIClient:
    """Single-attempt client for the NPPES NPI Registry API."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(total=self.settings.npi_request_timeout)

    def session(self) -> aiohttp.ClientSession:
        """Open a session for one batch of lookups."""
        return aiohttp.ClientSession()

    async def fetch_provider(
        self,
        npi: str,
        session: aiohttp.ClientSession,
    ) -> Optional[RawProviderRecord]:
        """
        Fetch the registry record for one NPI.

        One attempt, bounded by the configured timeout. No retries.

        Returns:
            The first matching record, or None if the registry returned none

        Raises:
            LookupTimeoutError: the registry did not answer in time
            UpstreamError: non-2xx status, transport failure or malformed payload
        """
        params = {
            "number": npi,
            "version": self.settings.npi_api_version,
        }
        try:
            async with session.get(
                self.settings.npi_api_url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            ) as resp:
                resp.raise_for_status()
                data = await resp.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise LookupTimeoutError(detail=f"NPI {npi}") from e
        except aiohttp.ClientResponseError as e:
            raise UpstreamError(detail=f"HTTP error! Status: {e.status}") from e
        except aiohttp.ClientError as e:
            raise UpstreamError(detail=str(e)) from e
        except ValueError as e:
            # body was not JSON
            raise UpstreamError(detail=f"Invalid JSON: {e}") from e

        return self._first_result(npi, data)

    def _first_result(self, npi: str, data) -> Optional[RawProviderRecord]:
        if not isinstance(data, dict):
            raise UpstreamError(detail=f"Unexpected payload type {type(data).__name__}")

        results = data.get("results") or []
        if not isinstance(results, list):
            raise UpstreamError(detail="'results' is not a list")
        if not results:
            logger.debug("No registry results for NPI %s", npi)
            return None

        try:
            return RawProviderRecord.model_validate(results[0])
        except ValidationError as e:
            raise UpstreamError(detail=f"Malformed result: {e}") from e
