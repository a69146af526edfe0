"""
MODULE_DESCRIPTION: Chat Key Derivation - Deterministic Per-Chat AES Keys

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Maps a chat identifier (plus the deployment-wide shared secret) to a 256-bit
symmetric key. The mapping is deterministic across processes and restarts so
that historical messages remain decryptable; distinct chat identifiers yield
distinct keys.

Derivation:
    HKDF-SHA256(
        input key material = shared secret,
        salt               = b"comfy-chat-key-v1",
        info               = b"comfy-chat:" + chat_id,
        length             = 32,
    )

The shared secret is read from CHAT_ENCRYPTION_KEY (see api.config.settings).

===================================================================================
"""

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from api.encryption.errors import InvalidInputError

# ==============================================================================
# CONSTANTS
# ==============================================================================

KEY_LENGTH = 32
KEY_SALT = b"comfy-chat-key-v1"
KEY_INFO_PREFIX = b"comfy-chat:"


# ==============================================================================
# KEY DERIVATION
# ==============================================================================


def derive_chat_key(chat_id: str, secret: str) -> bytes:
    """Derive the AES-256 key for a chat.

    Args:
        chat_id: Identifier of the chat that scopes the key. Must be non-empty.
        secret: Deployment-wide shared secret.

    Returns:
        32 raw key bytes.

    Raises:
        InvalidInputError: If chat_id is None, not a string, or blank.
    """
    if not isinstance(chat_id, str) or not chat_id.strip():
        raise InvalidInputError("Chat ID is required to derive an encryption key")

    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=KEY_SALT,
        info=KEY_INFO_PREFIX + chat_id.encode("utf-8"),
    )
    return hkdf.derive((secret or "").encode("utf-8"))
