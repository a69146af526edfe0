"""
MODULE_DESCRIPTION: Message Display and Send Adapters - UI-Facing Encryption Boundary

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Thin wrappers around MessageEncryptionService used by every route that
produces or consumes chat message bodies:

    MessageDisplayAdapter.process_incoming_message(message, chat_id)
        Returns a copy of a message record with its content decrypted for
        display. A failure never aborts a render: the raw record is returned.

    MessageSendAdapter.process_outgoing_message(content, chat_id)
        Returns the representation to persist. If encryption fails the
        plaintext is returned (degraded mode) so the send is never blocked.
        InvalidInputError is a caller bug and propagates.

    EncryptedChat(chat_id)
        Both adapters bound to a single chat, plus detection and a round-trip
        probe for the chat.

===================================================================================
"""

from typing import Optional

from api.encryption.errors import EncryptionFailedError, MessageEncryptionError
from api.encryption.service import MessageEncryptionService, get_encryption_service
from api.utils.debug import print__encryption_debug


# ==============================================================================
# DISPLAY ADAPTER
# ==============================================================================


class MessageDisplayAdapter:
    def __init__(self, service: Optional[MessageEncryptionService] = None):
        self.service = service or get_encryption_service()

    def process_incoming_message(self, message: dict, chat_id: str) -> dict:
        try:
            content = self.service.process_message_for_display(
                message.get("content"), chat_id
            )
        except MessageEncryptionError as exc:
            print__encryption_debug(
                f"❌ Display processing failed for message {message.get('id')} in chat {chat_id}: {exc}"
            )
            return message
        return {**message, "content": content}

    def process_incoming_messages(self, messages, chat_id: str) -> list:
        return [self.process_incoming_message(m, chat_id) for m in messages]

    def process_preview(self, content, chat_id: str):
        """Decrypt a single content value (chat list previews). None stays None."""
        if content is None:
            return None
        return self.process_incoming_message({"content": content}, chat_id)["content"]


# ==============================================================================
# SEND ADAPTER
# ==============================================================================


class MessageSendAdapter:
    def __init__(self, service: Optional[MessageEncryptionService] = None):
        self.service = service or get_encryption_service()

    def process_outgoing_message(self, content: str, chat_id: str) -> str:
        try:
            return self.service.process_message_for_storage(content, chat_id)
        except EncryptionFailedError as exc:
            # degraded mode: message is stored unencrypted
            print__encryption_debug(
                f"⚠️ DEGRADED MODE: storing plaintext for chat {chat_id} after encryption failure: {exc}"
            )
            return content


# ==============================================================================
# PER-CHAT BINDING
# ==============================================================================


class EncryptedChat:
    """Display and send adapters bound to one chat."""

    def __init__(self, chat_id: str, service: Optional[MessageEncryptionService] = None):
        self.chat_id = chat_id
        self.service = service or get_encryption_service()
        self.display = MessageDisplayAdapter(self.service)
        self.send = MessageSendAdapter(self.service)

    def process_incoming_message(self, message: dict) -> dict:
        return self.display.process_incoming_message(message, self.chat_id)

    def process_outgoing_message(self, content: str) -> str:
        return self.send.process_outgoing_message(content, self.chat_id)

    def is_message_encrypted(self, content) -> bool:
        return self.service.is_encrypted(content)

    def test_encryption(self, test_message: str = "Mensagem de teste 🔐") -> dict:
        """Round-trip a message through this chat's key."""
        try:
            stored = self.service.process_message_for_storage(test_message, self.chat_id)
            shown = self.service.process_message_for_display(stored, self.chat_id)
        except MessageEncryptionError as exc:
            return {"success": False, "chat_id": self.chat_id, "error": str(exc)}
        return {
            "success": shown == test_message and self.is_message_encrypted(stored),
            "chat_id": self.chat_id,
            "original": test_message,
            "encrypted": stored,
            "decrypted": shown,
        }
