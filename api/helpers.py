"""
MODULE_DESCRIPTION: API Helper Functions - Error Response Formatting and RPC Results

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Small helpers shared by the route modules:

    traceback_json_response(e, status_code)
        Debug-mode JSON response carrying the full traceback when
        DEBUG_TRACEBACK=1, otherwise None so the caller falls back to a safe
        production response.

    unwrap_rpc_result(result, default_error)
        Database functions called over RPC report business failures in-band
        as {"success": false, "error": "..."}. This turns those into
        HTTPException(400) and passes successful results through.

Security Warning:
    Only enable DEBUG_TRACEBACK=1 in development environments. Tracebacks
    expose internal code structure and file paths.

===================================================================================
"""

# API helper functions for error handling and response formatting
import os
import traceback

from fastapi import HTTPException
from fastapi.responses import JSONResponse


# ==============================================================================
# ERROR RESPONSE HELPERS
# ==============================================================================


def traceback_json_response(e, status_code=500):
    """Create a JSON response with traceback information when in debug mode.

    Args:
        e: The exception that occurred
        status_code: HTTP status code for the response (default: 500)

    Returns:
        JSONResponse with detail and traceback if DEBUG_TRACEBACK=1,
        None otherwise.
    """
    if os.environ.get("DEBUG_TRACEBACK") == "1":
        tb_str = "".join(traceback.format_exception(type(e), e, e.__traceback__))
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(e), "traceback": tb_str},
        )

    # Debug mode disabled - return None so caller can handle fallback
    return None


# ==============================================================================
# RPC RESULT HELPERS
# ==============================================================================


def unwrap_rpc_result(result, default_error="Operation failed"):
    """Raise HTTPException(400) for an in-band RPC failure, else return the result."""
    if isinstance(result, dict) and result.get("success") is False:
        raise HTTPException(
            status_code=400,
            detail=result.get("error") or result.get("message") or default_error,
        )
    return result
