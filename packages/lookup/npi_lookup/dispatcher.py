"""
Batch lookup of NPI numbers.

Validates a comma-delimited list of candidate NPIs, looks each one up
concurrently and returns one DisplayRecord per valid identifier, in input
order. A failed lookup only affects its own record.
"""

import aiohttp
import asyncio
import logging
from typing import List, Optional

from npi_common.config import get_settings
from npi_common.errors import (
    InternalError,
    LookupTimeoutError,
    NoValidInputError,
    NotFoundError,
    UpstreamError,
)
from npi_common.models import DisplayRecord
from npi_lookup.normalizer import normalize_record
from npi_lookup.npi_api_client import NPIClient

logger = logging.getLogger(__name__)

NPI_LENGTH = 10


def is_valid_npi(candidate: str) -> bool:
    """True for exactly ten ASCII decimal digits."""
    return len(candidate) == NPI_LENGTH and candidate.isascii() and candidate.isdigit()


def parse_npi_list(raw: str, max_npis: Optional[int] = None) -> List[str]:
    """
    Split, trim and filter candidate NPIs.

    Invalid candidates are dropped silently; survivors keep their original
    order and are truncated to ``max_npis`` (the configured
    ``npi_max_per_request`` when omitted). Duplicates are kept.
    """
    if max_npis is None:
        max_npis = get_settings().npi_max_per_request
    candidates = (part.strip() for part in raw.split(","))
    return [npi for npi in candidates if is_valid_npi(npi)][:max_npis]


async def lookup_one(
    npi: str,
    client: NPIClient,
    session: aiohttp.ClientSession,
) -> DisplayRecord:
    """Look up a single NPI, turning any per-record failure into an error record."""
    try:
        raw = await client.fetch_provider(npi, session)
        return normalize_record(npi, raw)
    except NotFoundError as e:
        logger.warning("NPI %s not found in registry", npi)
        return DisplayRecord.failure(npi, e.message)
    except LookupTimeoutError as e:
        logger.warning("Registry request for NPI %s timed out", npi)
        return DisplayRecord.failure(npi, e.message)
    except UpstreamError as e:
        logger.error("Error processing NPI %s: %s", npi, e.detail)
        return DisplayRecord.failure(npi, e.message)


async def lookup_npis(
    raw: str,
    client: Optional[NPIClient] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> List[DisplayRecord]:
    """
    Look up every valid NPI in a comma-delimited string.

    Args:
        raw: Candidate NPIs, e.g. ``"1417005489, 1306849806"``
        client: Registry client; a default one is built from settings if omitted
        session: Reuse an open aiohttp session instead of opening one per batch

    Returns:
        One DisplayRecord per valid NPI, in input order

    Raises:
        NoValidInputError: no candidate was a 10-digit NPI (nothing is fetched)
        InternalError: anything unexpected escaped per-record handling
    """
    client = client or NPIClient()
    npis = parse_npi_list(raw, client.settings.npi_max_per_request)
    if not npis:
        raise NoValidInputError()

    logger.info("Looking up %d NPI(s)", len(npis))
    try:
        if session is not None:
            return await _gather(npis, client, session)
        async with client.session() as own_session:
            return await _gather(npis, client, own_session)
    except Exception as e:
        logger.exception("General error in NPI lookup")
        raise InternalError() from e


async def _gather(
    npis: List[str],
    client: NPIClient,
    session: aiohttp.ClientSession,
) -> List[DisplayRecord]:
    tasks = [lookup_one(npi, client, session) for npi in npis]
    # every sibling settles before the session can be closed
    outcomes = await asyncio.gather(*tasks, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return list(outcomes)
