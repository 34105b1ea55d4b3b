"""
Error taxonomy for NPI lookups.

Every error carries a fixed, user-safe ``message`` and the ``http_status`` it
maps to. Batch-level errors (invalid input, wrong method, internal failure)
are raised out of the dispatcher; per-record errors (not found, timeout,
upstream failure) are caught per identifier and turned into error records.
"""


class NPILookupError(Exception):
    """Base class for all lookup errors."""

    message = "Internal server error"
    http_status = 500

    def __init__(self, message=None, detail=None):
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(self.message)


class InvalidInputError(NPILookupError):
    """Missing or malformed ``npi`` parameter. 400."""

    message = "Missing or invalid NPI parameter"
    http_status = 400


class NoValidInputError(InvalidInputError):
    """No candidate survived syntactic validation. 400."""

    message = "No valid NPI numbers provided"


class MethodNotAllowedError(NPILookupError):
    message = "Method not allowed"
    http_status = 405


class NotFoundError(NPILookupError):
    """The registry returned zero results for an identifier."""

    message = "Not found"
    http_status = 404


class LookupTimeoutError(NPILookupError):
    """The registry did not answer within the per-lookup deadline."""

    message = "Request timed out"
    http_status = 504


class UpstreamError(NPILookupError):
    """Non-2xx status, transport failure or malformed payload from the registry."""

    message = "Failed to retrieve provider data"
    http_status = 502


class InternalError(NPILookupError):
    message = "Internal server error"
    http_status = 500
