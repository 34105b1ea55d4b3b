"""Main entry point for the NPI lookup API service."""

import logging

import uvicorn

from npi_common.config import get_settings


def main():
    """Start the API under uvicorn."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        "Starting NPI Lookup API on http://%s:%s", settings.api_host, settings.api_port
    )
    uvicorn.run(
        "npi_lookup_api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
