"""
MODULE_DESCRIPTION: Message Encryption Errors - Failure Taxonomy for the Chat Pipeline

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Every failure raised by the chat encryption pipeline derives from
MessageEncryptionError so callers can catch the whole family at once.

Error Categories:
    - InvalidInputError: the chat identifier is missing or empty. Fatal to the
      calling operation. Also a ValueError, so the API's ValueError handler
      turns it into a 400 response.
    - EncryptionFailedError: the cipher failed while producing an envelope.
      The send adapter recovers by storing the plaintext (degraded mode).
    - DecryptionFailedError: an envelope could not be opened (wrong key,
      tampered or malformed data). process_message_for_display recovers by
      returning a marked placeholder.

===================================================================================
"""


# ==============================================================================
# EXCEPTION HIERARCHY
# ==============================================================================


class MessageEncryptionError(Exception):
    """Base class for every chat encryption failure."""


class InvalidInputError(MessageEncryptionError, ValueError):
    """Raised when a chat identifier is missing or empty."""


class EncryptionFailedError(MessageEncryptionError):
    """Raised when plaintext could not be turned into a cipher envelope."""


class DecryptionFailedError(MessageEncryptionError):
    """Raised when a cipher envelope could not be opened or verified."""
