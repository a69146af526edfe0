"""
MODULE_DESCRIPTION: Exception Handlers - Consistent JSON Error Responses

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Global exception handlers registered on the FastAPI application in
api.main. Every error leaves the API as JSON with a `detail` field.

HTTP Status Codes:
    - 400 Bad Request: ValueError (includes InvalidInputError from the
      encryption pipeline)
    - 401 Unauthorized: authentication failures
    - 403 Forbidden: role checks
    - 404 Not Found: unknown resources
    - 422 Unprocessable Entity: request validation errors
    - 4xx/5xx from the BaaS: BaaSError keeps the BaaS status; transport
      failures surface as 502
    - 500 Internal Server Error: anything unexpected

===================================================================================
INTEGRATION WITH FASTAPI
===================================================================================

Registration in main.py:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(BaaSError, baas_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

===================================================================================
"""

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Standard imports
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.baas.client import BaaSError
from api.helpers import traceback_json_response

# Import debug functions from utils
from api.utils.debug import print__debug, print__http_error_debug

# ==============================================================================
# EXCEPTION HANDLERS
# ==============================================================================


async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors with proper 422 status code.

    Response Format:
        {
            "detail": "Validation error",
            "errors": [{"loc": ["body", "field"], "msg": "...", "type": "..."}]
        }
    """
    print__debug(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content=jsonable_encoder({"detail": "Validation error", "errors": exc.errors()}),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions, with request context tracing for 401 errors."""
    if exc.status_code == 401:
        print__http_error_debug(f"🚨 HTTP 401 UNAUTHORIZED: {exc.detail}")
        print__http_error_debug(f"🚨 HTTP 401 TRACE: Request URL: {request.url}")
        print__http_error_debug(f"🚨 HTTP 401 TRACE: Request method: {request.method}")
        client_ip = request.client.host if request.client else "unknown"
        print__http_error_debug(f"🚨 HTTP 401 CLIENT: IP address: {client_ip}")
    elif exc.status_code >= 400:
        print__http_error_debug(
            f"🚨 HTTP {exc.status_code} ERROR: {exc.detail} ({request.method} {request.url})"
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def baas_error_handler(request: Request, exc: BaaSError):
    """Surface BaaS failures with their status code and message."""
    print__http_error_debug(
        f"🚨 BaaS ERROR {exc.status_code} on {request.method} {request.url}: {exc.message}"
    )
    content = {"detail": exc.message}
    if exc.code:
        content["code"] = exc.code
    return JSONResponse(status_code=exc.status_code, content=content)


async def value_error_handler(_request: Request, exc: ValueError):
    """Handle ValueError exceptions as 400 Bad Request."""
    print__debug(f"ValueError: {str(exc)}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def general_exception_handler(_request: Request, exc: Exception):
    """Handle unexpected exceptions with 500 Internal Server Error.

    Includes the traceback only when DEBUG_TRACEBACK=1.
    """
    print__debug(f"Unexpected error: {type(exc).__name__}: {str(exc)}")
    debug_response = traceback_json_response(exc, 500)
    if debug_response:
        return debug_response
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
