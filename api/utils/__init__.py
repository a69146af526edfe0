"""
Utility functions package for the API server.

This package contains the environment-gated debug print helpers used across
the Comfy CMS API.
"""

# Debug utilities
from .debug import (
    print__admin_debug,
    print__baas_debug,
    print__chat_messages_debug,
    print__contacts_debug,
    print__debug,
    print__encryption_debug,
    print__http_error_debug,
    print__posts_debug,
    print__psicologos_debug,
    print__references_debug,
    print__startup_debug,
    print__storage_debug,
    print__token_debug,
)

__all__ = [
    "print__admin_debug",
    "print__baas_debug",
    "print__chat_messages_debug",
    "print__contacts_debug",
    "print__debug",
    "print__encryption_debug",
    "print__http_error_debug",
    "print__posts_debug",
    "print__psicologos_debug",
    "print__references_debug",
    "print__startup_debug",
    "print__storage_debug",
    "print__token_debug",
]
