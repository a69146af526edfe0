"""
BaaS gateway package.

Async client for the hosted Supabase REST, RPC, auth and storage APIs, plus
the factory that owns the process-wide instance.
"""

from .client import BaaSClient, BaaSError, build_filter_params
from .factory import (
    cleanup_baas_client,
    get_baas_client,
    get_global_baas_client,
    initialize_baas_client,
)

__all__ = [
    "BaaSClient",
    "BaaSError",
    "build_filter_params",
    "cleanup_baas_client",
    "get_baas_client",
    "get_global_baas_client",
    "initialize_baas_client",
]
