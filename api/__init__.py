"""
API package for the Comfy CMS backend.

This package contains the FastAPI application, the BaaS gateway and the
chat message encryption pipeline.
"""

__version__ = "1.0.0"

# Don't import anything during package initialization to avoid import errors
# that could prevent the API server from starting.
# Individual modules will import what they need when they need it.

__all__ = []
