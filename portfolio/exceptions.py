"""
    Centralized exception handling for the FastAPI application.
"""
from typing import Optional
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
import logging

log = logging.getLogger(__name__)

class ConfigurationError(Exception):
    """Raised at startup when required settings are missing or malformed."""

class APIException(Exception):
    """Base class for API exceptions."""
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.detail)

class ImageNotFoundException(APIException):
    """Exception for when an image is not in the repository directory."""
    def __init__(self, name: str):
        super().__init__(status_code=404, detail=f"File '{name}' not found.")

class InvalidImageException(APIException):
    """Exception for uploads rejected by validation."""
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class MissingParameterException(APIException):
    """Exception for a required form field or query parameter that was not sent."""
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail)

class GitHubAPIException(APIException):
    """Exception for non-2xx responses and transport failures from GitHub."""
    def __init__(self, detail: str, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        super().__init__(status_code=500, detail=detail)

class StaleRevisionException(APIException):
    """The revision hash sent with a write no longer matches the stored file."""
    def __init__(self, name: str, detail: Optional[str] = None):
        self.name = name
        message = f"File '{name}' was changed by another writer; refresh and retry."
        if detail:
            message = f"{message} ({detail})"
        super().__init__(status_code=409, detail=message)

class ContentNotFoundException(APIException):
    """Exception for a content record that does not exist."""
    def __init__(self, collection: str, item_id: str):
        super().__init__(status_code=404, detail=f"Item '{item_id}' not found in {collection}.")

class DynamoDBException(APIException):
    """Exception for DynamoDB failures."""
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=detail)

class UnauthorizedException(APIException):
    """Exception for requests to admin routes without a valid token."""
    def __init__(self, detail: str = "Admin token required."):
        super().__init__(status_code=401, detail=detail)

async def api_exception_handler(request: Request, exc: APIException):
    """Handles API exceptions."""
    log.error(f"API Exception: {exc.detail}", exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
    )

async def http_exception_handler(request: Request, exc: HTTPException):
    """Handles FastAPI HTTP exceptions."""
    log.error(f"HTTP Exception: {exc.detail}", exc_info=exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
    )

async def generic_exception_handler(request: Request, exc: Exception):
    """Handles all other exceptions."""
    log.error(f"Unhandled Exception: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred."},
    )

def add_exception_handlers(app):
    """Adds exception handlers to the FastAPI app."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
