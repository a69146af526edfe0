"""
Routes package for the API server.

This package contains FastAPI route handlers for health checks, chats and
messages, the encryption self-test, psychologist presence and the CMS
content endpoints of the Comfy CMS API.
"""

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Routes module initialization
from .root import router as root_router
from .health import router as health_router
from .chat import router as chat_router
from .messages import router as messages_router
from .debug import router as debug_router
from .psicologos import router as psicologos_router
from .contacts import router as contacts_router
from .references import router as references_router
from .posts import router as posts_router
from .storage import router as storage_router
from .admin import router as admin_router

# Export all routers for easy import
__all__ = [
    "root_router",
    "health_router",
    "chat_router",
    "messages_router",
    "debug_router",
    "psicologos_router",
    "contacts_router",
    "references_router",
    "posts_router",
    "storage_router",
    "admin_router",
]
