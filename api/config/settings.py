"""
MODULE_DESCRIPTION: API Configuration Settings - Global State and Application Constants

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

This module is the central configuration hub for the Comfy CMS API. It reads
every environment-driven setting once, at import time, and holds the small
amount of process-wide shared state the API needs.

The module manages:
    - Application startup tracking (uptime)
    - Backend-as-a-service (Supabase) connection settings
    - JWT verification settings
    - Chat encryption shared secret
    - Profile cache storage and per-user locks

===================================================================================
ENVIRONMENT VARIABLES
===================================================================================

    SUPABASE_URL                 Base URL of the BaaS project
    SUPABASE_ANON_KEY            Public (anon) API key, sent as `apikey`
    SUPABASE_SERVICE_ROLE_KEY    Service-role key for privileged RPCs
    SUPABASE_JWT_SECRET          HS256 secret for local JWT verification
                                 (when unset, tokens are checked against
                                 the BaaS /auth/v1/user endpoint)
    SUPABASE_JWT_AUDIENCE        Expected `aud` claim (default: authenticated)
    CHAT_ENCRYPTION_KEY          Shared secret mixed into every chat key
    POSTS_BUCKET_NAME            Storage bucket for post files (default: posts)
    PROFILE_CACHE_TIMEOUT        Seconds a looked-up profile stays cached (60)
    BAAS_TIMEOUT                 HTTP timeout for BaaS calls in seconds (15)
    BAAS_RETRY_ATTEMPTS          Attempts for transient BaaS failures (3)
    CORS_ALLOWED_ORIGINS         Comma-separated list of allowed origins
    DEBUG_TRACEBACK              "1" includes tracebacks in 500 responses

===================================================================================
"""

import os

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

# Constants
try:
    from pathlib import Path

    BASE_DIR = Path(__file__).resolve().parents[2]
except NameError:
    BASE_DIR = Path(os.getcwd()).parents[0]

import asyncio
import time
from collections import defaultdict

# ==============================================================================
# CONFIGURATION AND CONSTANTS
# ==============================================================================

# =======================================================================
# APPLICATION LIFECYCLE TRACKING
# =======================================================================

# Application start, used by /health for uptime reporting
start_time = time.time()

# Reported by / and /health
API_VERSION = "1.0.0"

# =======================================================================
# BACKEND-AS-A-SERVICE (SUPABASE)
# =======================================================================

SUPABASE_URL = os.environ.get("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")

# HTTP timeout (seconds) for every BaaS request
BAAS_TIMEOUT = float(os.environ.get("BAAS_TIMEOUT", "15"))

# Attempts for transport errors and 5xx answers (1 = no retry)
BAAS_RETRY_ATTEMPTS = int(os.environ.get("BAAS_RETRY_ATTEMPTS", "3"))

# Storage bucket holding uploaded post files
POSTS_BUCKET_NAME = os.environ.get("POSTS_BUCKET_NAME", "posts")

# =======================================================================
# JWT AUTHENTICATION
# =======================================================================

# When empty, tokens are validated remotely through the BaaS auth endpoint
SUPABASE_JWT_SECRET = os.environ.get("SUPABASE_JWT_SECRET", "")
SUPABASE_JWT_AUDIENCE = os.environ.get("SUPABASE_JWT_AUDIENCE", "authenticated")
JWT_ALGORITHMS = ["HS256"]

# =======================================================================
# CHAT ENCRYPTION
# =======================================================================

# Mixed into every per-chat key. Changing it makes stored messages unreadable.
CHAT_ENCRYPTION_KEY = os.environ.get(
    "CHAT_ENCRYPTION_KEY", "chave_chat_comfy_secret_2025"
)

# =======================================================================
# ROLES AND DOMAIN VALUES
# =======================================================================

ROLE_APP = "app"
ROLE_CMS = "cms"
ROLE_PSICOLOGO = "psicologo"

CHAT_STATUSES = ("novo_chat", "a_decorrer", "follow_up", "encerrado")

POST_CATEGORIES = (
    "Vídeo",
    "Podcast",
    "Artigo",
    "Livro",
    "Áudio",
    "Shorts",
    "Leitura",
)
DEFAULT_POST_CATEGORY = "Vídeo"
DEFAULT_TAG_COLOR = "#3B82F6"

# =======================================================================
# PROFILE CACHE
# =======================================================================

# Profile lookups for role checks are cached this many seconds
PROFILE_CACHE_TIMEOUT = int(os.environ.get("PROFILE_CACHE_TIMEOUT", "60"))

# user_id -> (profile dict, cached_at timestamp)
_profile_cache = {}

# Per-user locks so concurrent requests for one user hit the BaaS once
_profile_locks = defaultdict(asyncio.Lock)
