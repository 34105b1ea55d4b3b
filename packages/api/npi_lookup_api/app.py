import logging
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from npi_common.errors import InvalidInputError, MethodNotAllowedError, NPILookupError
from npi_common.models import ErrorResponse, LookupResponse
from npi_lookup.dispatcher import lookup_npis

logger = logging.getLogger(__name__)

LOOKUP_PATH = "/api/fetchNpi"

app = FastAPI(
    title="NPI Lookup API",
    description="Look up provider records in the NPPES NPI Registry",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(NPILookupError)
async def npi_lookup_error_handler(request: Request, exc: NPILookupError):
    """Render every lookup error as ``{"error": message}`` at its status."""
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Routing errors (unknown path, any non-GET verb) use the same ``{"error": ...}`` body."""
    if exc.status_code == MethodNotAllowedError.http_status:
        message = MethodNotAllowedError.message
    else:
        message = str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True, "service": "npi-lookup-api"}


@app.get(
    LOOKUP_PATH,
    response_model=LookupResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def fetch_npi(
    request: Request,
    npi: Optional[str] = Query(None, description="Comma-separated list of 10-digit NPIs"),
):
    """
    Look up up to 10 NPIs.

    Invalid identifiers are dropped; every valid one gets a record, in the
    order given. Per-NPI failures come back as records with an ``error``.
    """
    # a repeated ?npi= is not a single string
    if not npi or len(request.query_params.getlist("npi")) > 1:
        raise InvalidInputError()

    records = await lookup_npis(npi)
    return LookupResponse(results=records)

