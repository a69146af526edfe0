"""
Dependencies package for the API server.

This package contains FastAPI dependencies for authentication and role
authorization in the Comfy CMS API.
"""

# Import authentication dependencies
from .auth import get_current_user, require_cms_user, require_psicologo_user

# Export all dependencies for easier access
__all__ = ["get_current_user", "require_cms_user", "require_psicologo_user"]
