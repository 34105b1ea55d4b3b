"""
Reshape raw NPI registry results into flat display records.

Everything in this module is pure: the same raw record always produces the
same :class:`DisplayRecord`, and nothing here performs I/O.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, TypeVar

from npi_common.errors import NotFoundError
from npi_common.models import (
    DisplayRecord,
    RawAddress,
    RawBasic,
    RawProviderRecord,
    RawTaxonomy,
)

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

SEX_LABELS = {"F": "Female", "M": "Male"}

# en-US, independent of the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

T = TypeVar("T")

# Selection policies: the first predicate matching any entry wins, in order.
TAXONOMY_PREFERENCE: List[Callable[[RawTaxonomy], bool]] = [
    lambda t: t.primary is True,
    lambda t: True,
]

ADDRESS_PREFERENCE: List[Callable[[RawAddress], bool]] = [
    lambda a: a.address_purpose == "LOCATION",
    lambda a: a.address_purpose == "MAILING",
    lambda a: True,
]


def _or_na(value: Optional[str]) -> str:
    return value if value else NOT_AVAILABLE


def select_by_preference(
    entries: Sequence[T],
    preference: Sequence[Callable[[T], bool]],
    placeholder: T,
) -> T:
    """Return the first entry matching the earliest predicate, else ``placeholder``."""
    for predicate in preference:
        match = next((entry for entry in entries if predicate(entry)), None)
        if match is not None:
            return match
    return placeholder


def select_taxonomy(taxonomies: Sequence[RawTaxonomy]) -> RawTaxonomy:
    """Primary taxonomy, else the first one, else an empty placeholder."""
    return select_by_preference(taxonomies, TAXONOMY_PREFERENCE, RawTaxonomy())


def select_address(addresses: Sequence[RawAddress]) -> RawAddress:
    """Practice location, else mailing address, else the first one, else empty."""
    return select_by_preference(addresses, ADDRESS_PREFERENCE, RawAddress())


def compose_name(basic: RawBasic, is_individual: bool) -> str:
    if not is_individual:
        return _or_na(basic.organization_name)

    if not (basic.name_prefix or basic.first_name or basic.last_name):
        return NOT_AVAILABLE
    middle = f"{basic.middle_name} " if basic.middle_name else ""
    return (
        f"{basic.name_prefix or ''} {basic.first_name or ''} {middle}{basic.last_name or ''}"
    ).strip()


def map_sex(code: Optional[str], is_individual: bool = True) -> str:
    """Map the registry sex code; unknown codes pass through unchanged."""
    if not is_individual or not code:
        return NOT_AVAILABLE
    return SEX_LABELS.get(code, code)


def format_address(address: RawAddress) -> str:
    """
    Format an address as ``"street 1, street 2, city, STATE POSTAL"``.

    Only addresses with a first street line are formatted; anything else
    renders as ``"N/A"``. Missing parts are skipped.
    """
    if not address.address_1:
        return NOT_AVAILABLE

    parts = [address.address_1]
    if address.address_2:
        parts.append(address.address_2)
    if address.city:
        parts.append(address.city)

    if address.state and address.postal_code:
        parts.append(f"{address.state} {address.postal_code}")
    elif address.state:
        parts.append(address.state)
    elif address.postal_code:
        parts.append(address.postal_code)

    return ", ".join(parts)


def format_last_updated(value: Optional[str], npi: str = "") -> str:
    """Render ``2021-03-15`` as ``March 15, 2021``; fall back to the raw value."""
    if not value:
        return NOT_AVAILABLE
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        logger.warning("Could not parse last_updated %r for NPI %s", value, npi)
        return value
    return f"{MONTH_NAMES[parsed.month - 1]} {parsed.day}, {parsed.year}"


def normalize_record(npi: str, raw: Optional[RawProviderRecord]) -> DisplayRecord:
    """
    Build the display record for one registry result.

    Args:
        npi: The identifier that was looked up, echoed into the record
        raw: The first registry result, or None if the registry had none

    Returns:
        A fully populated DisplayRecord

    Raises:
        NotFoundError: if ``raw`` is None
    """
    if raw is None:
        raise NotFoundError()

    is_individual = raw.is_individual
    basic = raw.basic
    taxonomy = select_taxonomy(raw.taxonomies)
    address = select_address(raw.addresses)

    return DisplayRecord(
        npi=npi,
        name=compose_name(basic, is_individual),
        entity_type="Individual" if is_individual else "Organization",
        sex=map_sex(basic.sex, is_individual),
        specialty=_or_na(taxonomy.desc),
        license=_or_na(taxonomy.license),
        license_state=_or_na(taxonomy.state),
        phone=_or_na(address.telephone_number),
        fax=_or_na(address.fax_number),
        address=format_address(address),
        last_updated=format_last_updated(basic.last_updated, npi),
    )
