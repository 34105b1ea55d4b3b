import asyncio
import json
import logging
import sys
from typing import List

from npi_common.config import get_settings
from npi_common.errors import InvalidInputError, NPILookupError
from npi_common.models import DisplayRecord
from npi_lookup.dispatcher import lookup_npis

USAGE = "Usage: python -m npi_lookup <npi>[,<npi>...] [<npi> ...] [--json]"

FIELD_LABELS = [
    ("name", "👤 Name"),
    ("entity_type", "🏷️  Entity Type"),
    ("sex", "⚧  Sex"),
    ("specialty", "🩺 Specialty"),
    ("license", "📝 License Number"),
    ("license_state", "📍 License State"),
    ("address", "🏥 Address"),
    ("phone", "📞 Phone"),
    ("fax", "📠 Fax"),
    ("last_updated", "📅 Last Updated"),
]


def print_record(record: DisplayRecord) -> None:
    print(f"\n🆔 NPI #: {record.npi}")
    if record.is_error:
        print(f"❌ {record.error}")
        return
    for field, label in FIELD_LABELS:
        print(f"{label}: {getattr(record, field)}")


def print_results(records: List[DisplayRecord], as_json: bool = False) -> None:
    if as_json:
        print(json.dumps({"results": [r.to_json_dict() for r in records]}, indent=2))
        return

    print(f"\n{'='*60}")
    print(f"NPI LOOKUP - {len(records)} RECORD(S)")
    print(f"{'='*60}")
    for record in records:
        print_record(record)
    print(f"\n{'='*60}\n")


async def main(argv: List[str]) -> int:
    """
    CLI entry point for NPI lookups.

    Usage:
        python -m npi_lookup 1417005489,1306849806 --json
    """
    as_json = "--json" in argv
    args = [a for a in argv if a != "--json"]
    if not args:
        print("❌ Please provide at least one NPI number.")
        print(USAGE)
        return 1

    if not as_json:
        print("🔍 Fetching data...")
    try:
        records = await lookup_npis(",".join(args))
    except InvalidInputError as e:
        print(f"❌ {e.message}")
        print(USAGE)
        return 1
    except NPILookupError as e:
        print(f"❌ Lookup failed: {e.message}")
        return 1

    print_results(records, as_json=as_json)
    return 1 if any(r.is_error for r in records) else 0


def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        sys.exit(asyncio.run(main(sys.argv[1:])))
    except KeyboardInterrupt:
        print("\n⚠️  Lookup interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    run()
