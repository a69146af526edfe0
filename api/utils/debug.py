import os
import sys

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()


# ==============================================================================
# DEBUG FUNCTIONS
# ==============================================================================
def _emit(env_var: str, tag: str, msg: str) -> None:
    if os.environ.get(env_var, "0") == "1":
        print(f"[{tag}] {msg}")
        sys.stdout.flush()


def print__debug(msg: str) -> None:
    """Print DEBUG messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    _emit("DEBUG", "DEBUG", msg)


def print__token_debug(msg: str) -> None:
    """Print print__token_debug messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__token_debug", "print__token_debug", msg)


def print__startup_debug(msg: str) -> None:
    """Print application startup/shutdown messages when debug mode is enabled."""
    _emit("print__startup_debug", "print__startup_debug", msg)


def print__baas_debug(msg: str) -> None:
    """Print BaaS (Supabase REST/RPC/storage) call messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__baas_debug", "print__baas_debug", msg)


def print__encryption_debug(msg: str) -> None:
    """Print chat encryption pipeline messages when debug mode is enabled.

    Never pass key material or plaintext bodies here, only ids and lengths.

    Args:
        msg: The message to print
    """
    _emit("print__encryption_debug", "print__encryption_debug", msg)


def print__chat_messages_debug(msg: str) -> None:
    """Print print__chat_messages_debug messages when debug mode is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__chat_messages_debug", "print__chat_messages_debug", msg)


def print__contacts_debug(msg: str) -> None:
    """Print contacts CRUD messages when debug mode is enabled."""
    _emit("print__contacts_debug", "print__contacts_debug", msg)


def print__references_debug(msg: str) -> None:
    """Print references CRUD messages when debug mode is enabled."""
    _emit("print__references_debug", "print__references_debug", msg)


def print__psicologos_debug(msg: str) -> None:
    """Print psychologist status/listing messages when debug mode is enabled."""
    _emit("print__psicologos_debug", "print__psicologos_debug", msg)


def print__posts_debug(msg: str) -> None:
    """Print posts and reading tags messages when debug mode is enabled."""
    _emit("print__posts_debug", "print__posts_debug", msg)


def print__admin_debug(msg: str) -> None:
    """Print admin operation messages when debug mode is enabled."""
    _emit("print__admin_debug", "print__admin_debug", msg)


def print__storage_debug(msg: str) -> None:
    _emit("print__storage_debug", "print__storage_debug", msg)


def print__http_error_debug(msg: str) -> None:
    """Print HTTP error tracing (401s with request context) when debug mode is enabled.

    Args:
        msg: The message to print
    """
    _emit("print__http_error_debug", "print__http_error_debug", msg)
