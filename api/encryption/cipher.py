"""
MODULE_DESCRIPTION: Cipher Primitive - AES-256-GCM Envelopes for Chat Messages

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Authenticated symmetric encryption of short UTF-8 strings. The output is a
self-describing text envelope that can be stored in the messages.content
column as-is:

    enc:v1:<base64 nonce>:<base64 ciphertext+tag>

    - enc:v1:   version marker, lets readers tell ciphertext from legacy
                plaintext without a key
    - nonce     12 random bytes (16 base64 characters), fresh per call
    - payload   AES-GCM ciphertext with the 16 byte tag appended

Integrity:
    Both base64 segments must be canonical (re-encoding the decoded bytes must
    give back the exact segment), so any single-character change to an envelope
    fails either the structural checks or the GCM tag verification.

===================================================================================
"""

import base64
import binascii
import os
import re

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from api.encryption.errors import DecryptionFailedError, EncryptionFailedError

# ==============================================================================
# ENVELOPE FORMAT
# ==============================================================================

ENVELOPE_PREFIX = "enc:v1:"
NONCE_BYTES = 12
TAG_BYTES = 16

# 12 byte nonce -> 16 base64 chars, payload holds at least the 16 byte tag
ENVELOPE_PATTERN = re.compile(
    r"enc:v1:(?P<nonce>[A-Za-z0-9+/]{16}):(?P<payload>[A-Za-z0-9+/]{22,}={0,2})"
)


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _b64decode_canonical(segment: str) -> bytes:
    """Decode a base64 segment, rejecting anything that does not re-encode identically."""
    try:
        raw = base64.b64decode(segment, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecryptionFailedError("Envelope contains invalid base64") from exc
    if _b64encode(raw) != segment:
        raise DecryptionFailedError("Envelope contains non-canonical base64")
    return raw


# ==============================================================================
# CIPHER
# ==============================================================================


class AesGcmCipher:
    """AES-256-GCM encrypt/decrypt pair producing text envelopes."""

    def encrypt(self, plaintext: str, key: bytes) -> str:
        try:
            nonce = os.urandom(NONCE_BYTES)
            sealed = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
        except Exception as exc:
            raise EncryptionFailedError(
                f"Could not encrypt message: {type(exc).__name__}"
            ) from exc
        return f"{ENVELOPE_PREFIX}{_b64encode(nonce)}:{_b64encode(sealed)}"

    def decrypt(self, ciphertext: str, key: bytes) -> str:
        if not isinstance(ciphertext, str):
            raise DecryptionFailedError("Envelope must be a string")

        match = ENVELOPE_PATTERN.fullmatch(ciphertext)
        if not match:
            raise DecryptionFailedError("Malformed cipher envelope")

        nonce = _b64decode_canonical(match.group("nonce"))
        sealed = _b64decode_canonical(match.group("payload"))
        if len(nonce) != NONCE_BYTES or len(sealed) < TAG_BYTES:
            raise DecryptionFailedError("Malformed cipher envelope")

        try:
            plain = AESGCM(key).decrypt(nonce, sealed, None)
        except InvalidTag as exc:
            raise DecryptionFailedError(
                "Authentication tag mismatch (wrong key or tampered data)"
            ) from exc
        except ValueError as exc:
            # invalid key length
            raise DecryptionFailedError(str(exc)) from exc

        try:
            return plain.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionFailedError("Decrypted payload is not valid UTF-8") from exc


def looks_like_envelope(content) -> bool:
    """Key-less check used by is_encrypted.

    Only the version prefix is inspected. Anything after it is validated by
    decrypt, so a damaged envelope is reported as undecryptable instead of
    being shown as legacy plaintext.
    """
    return isinstance(content, str) and content.startswith(ENVELOPE_PREFIX)
