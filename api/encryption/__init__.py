"""
Chat message encryption package.

Key derivation, the AES-GCM cipher primitive, the encryption service and the
display/send adapters used by the chat routes.
"""

from .adapters import EncryptedChat, MessageDisplayAdapter, MessageSendAdapter
from .cipher import AesGcmCipher
from .errors import (
    DecryptionFailedError,
    EncryptionFailedError,
    InvalidInputError,
    MessageEncryptionError,
)
from .keys import derive_chat_key
from .service import (
    UNDECRYPTABLE_MARKER,
    MessageEncryptionService,
    get_encryption_service,
)

__all__ = [
    "AesGcmCipher",
    "DecryptionFailedError",
    "EncryptedChat",
    "EncryptionFailedError",
    "InvalidInputError",
    "MessageDisplayAdapter",
    "MessageEncryptionError",
    "MessageEncryptionService",
    "MessageSendAdapter",
    "UNDECRYPTABLE_MARKER",
    "derive_chat_key",
    "get_encryption_service",
]
