"""
MODULE_DESCRIPTION: Message Encryption Service - Storage and Display Pipeline

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Composes key derivation (api.encryption.keys) and the cipher primitive
(api.encryption.cipher) into the operations the chat routes use:

    encrypt_message(content, chat_id)          -> envelope
    decrypt_message(ciphertext, chat_id)       -> plaintext
    is_encrypted(content)                      -> bool, no key needed
    process_message_for_storage(content, id)   -> always an envelope
    process_message_for_display(content, id)   -> plaintext, legacy plaintext,
                                                  or a marked placeholder

===================================================================================
KEY CACHE
===================================================================================

Derived keys are cached per service instance, keyed by chat identifier. The
application holds one service per process (get_encryption_service), so the
cache lives as long as the process. Writes are idempotent: two concurrent
derivations for the same chat produce the same bytes.

===================================================================================
FAILURE HANDLING
===================================================================================

    - InvalidInputError propagates from every operation (missing chat id).
    - EncryptionFailedError propagates from the encrypt path.
    - DecryptionFailedError propagates from decrypt_message but is absorbed
      by process_message_for_display, which returns
      UNDECRYPTABLE_MARKER + " " + <raw content> instead.

===================================================================================
"""

import os
from typing import Dict, Optional

from api.config.settings import CHAT_ENCRYPTION_KEY
from api.encryption.cipher import AesGcmCipher, looks_like_envelope
from api.encryption.errors import DecryptionFailedError, MessageEncryptionError
from api.encryption.keys import derive_chat_key
from api.utils.debug import print__encryption_debug

# ==============================================================================
# CONSTANTS
# ==============================================================================

UNDECRYPTABLE_MARKER = "[mensagem não pôde ser desencriptada]"
SELF_TEST_CHAT_ID = "test-chat-123"


# ==============================================================================
# SERVICE
# ==============================================================================


class MessageEncryptionService:
    """Encrypts chat messages for storage and decrypts them for display."""

    def __init__(self, secret: Optional[str] = None, cipher: Optional[AesGcmCipher] = None):
        self._secret = CHAT_ENCRYPTION_KEY if secret is None else secret
        self._cipher = cipher or AesGcmCipher()
        self._key_cache: Dict[str, bytes] = {}

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def get_chat_key(self, chat_id: str) -> bytes:
        key = self._key_cache.get(chat_id)
        if key is None:
            key = derive_chat_key(chat_id, self._secret)
            self._key_cache[chat_id] = key
            print__encryption_debug(
                f"🔑 Derived key for chat {chat_id} (cache size: {len(self._key_cache)})"
            )
        return key

    def clear_key_cache(self) -> None:
        self._key_cache.clear()

    # ------------------------------------------------------------------
    # Primitive operations
    # ------------------------------------------------------------------

    def encrypt_message(self, content: str, chat_id: str) -> str:
        key = self.get_chat_key(chat_id)
        envelope = self._cipher.encrypt(content, key)
        print__encryption_debug(
            f"🔒 Encrypted message for chat {chat_id} ({len(content)} chars -> {len(envelope)} chars)"
        )
        return envelope

    def decrypt_message(self, ciphertext: str, chat_id: str) -> str:
        key = self.get_chat_key(chat_id)
        return self._cipher.decrypt(ciphertext, key)

    @staticmethod
    def is_encrypted(content) -> bool:
        """True when content carries the envelope prefix written by encrypt_message."""
        return looks_like_envelope(content)

    # ------------------------------------------------------------------
    # Pipeline operations
    # ------------------------------------------------------------------

    def process_message_for_storage(self, content: str, chat_id: str) -> str:
        """Return the representation to persist. Always encrypts."""
        return self.encrypt_message(content, chat_id)

    def process_message_for_display(self, content: str, chat_id: str) -> str:
        """Return the text to render for a stored message body.

        Legacy plaintext is returned unchanged. Envelopes that fail to open are
        returned as ``UNDECRYPTABLE_MARKER + " " + content`` so the view can
        still render something.
        """
        if not self.is_encrypted(content):
            # still reject a missing chat id before passing plaintext through
            self.get_chat_key(chat_id)
            return content

        try:
            return self.decrypt_message(content, chat_id)
        except DecryptionFailedError as exc:
            print__encryption_debug(
                f"⚠️ Could not decrypt message in chat {chat_id}: {exc}"
            )
            return f"{UNDECRYPTABLE_MARKER} {content}"

    # ------------------------------------------------------------------
    # Self test
    # ------------------------------------------------------------------

    def run_self_test(self, chat_id: str = SELF_TEST_CHAT_ID) -> dict:
        """Exercise the pipeline end to end and report each check.

        Returns:
            {"success": bool, "tests": [{"name": str, "passed": bool, "error"?: str}]}
        """
        tests = []

        def check(name, fn):
            try:
                passed = bool(fn())
                entry = {"name": name, "passed": passed}
                if not passed:
                    entry["error"] = "Unexpected result"
            except MessageEncryptionError as exc:
                entry = {"name": name, "passed": False, "error": str(exc)}
            tests.append(entry)

        sample = "Olá! Como você está hoje?"

        check(
            "Key generation",
            lambda: self.get_chat_key(chat_id) == derive_chat_key(chat_id, self._secret)
            and len(self.get_chat_key(chat_id)) == 32,
        )
        check(
            "Simple encryption/decryption",
            lambda: self.decrypt_message(self.encrypt_message(sample, chat_id), chat_id)
            == sample,
        )
        check(
            "Encryption detection",
            lambda: self.is_encrypted(self.encrypt_message(sample, chat_id))
            and not self.is_encrypted(sample),
        )
        check(
            "Storage/display pipeline",
            lambda: self.process_message_for_display(
                self.process_message_for_storage(sample, chat_id), chat_id
            )
            == sample,
        )
        accented = "Ação, coração, não, pão, João, Conceição! 😊"
        check(
            "Special characters",
            lambda: self.decrypt_message(self.encrypt_message(accented, chat_id), chat_id)
            == accented,
        )

        success = all(test["passed"] for test in tests)
        print__encryption_debug(
            f"{'✅' if success else '❌'} Encryption self-test for {chat_id}: "
            f"{sum(t['passed'] for t in tests)}/{len(tests)} passed"
        )
        return {"success": success, "tests": tests}


# ==============================================================================
# PROCESS-WIDE INSTANCE
# ==============================================================================

_ENCRYPTION_SERVICE: Optional[MessageEncryptionService] = None


def get_encryption_service() -> MessageEncryptionService:
    """Return the process-wide service, creating it on first use.

    Also usable as a FastAPI dependency.
    """
    global _ENCRYPTION_SERVICE
    if _ENCRYPTION_SERVICE is None:
        _ENCRYPTION_SERVICE = MessageEncryptionService()
        print__encryption_debug(
            f"✅ Message encryption service created (custom secret: {os.environ.get('CHAT_ENCRYPTION_KEY') is not None})"
        )
    return _ENCRYPTION_SERVICE
