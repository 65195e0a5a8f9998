"""Card number cipher.

Card numbers are stored as base64(nonce || ciphertext || tag) produced by
AES-GCM, so tampering with any stored byte is detected on decryption.
The key is process-wide: the cipher is built once on first use and never
rebuilt, a key of the wrong length stops the application at startup.
"""

import base64
import binascii
import logging
import os
import threading

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from fastapi import Depends

from bankcards.config import Config, get_config
from bankcards.errors.encryption import EncryptionError

logger = logging.getLogger(__name__)


class CardNumberCipher:
    KEY_LENGTH = 16
    # AESGCM always appends a full 128-bit tag
    SUPPORTED_TAG_LENGTH = 16
    PLACEHOLDER = "****"

    def __init__(
        self,
        key: str | bytes | None,
        nonce_length: int = 12,
        tag_length: int = 16,
        charset: str = "utf-8",
        masking_pattern: str = "**** **** **** {}",
    ):
        if isinstance(key, str):
            key = key.encode(charset)
        if key is None or len(key) != self.KEY_LENGTH:
            raise EncryptionError(
                f"Encryption key must be {self.KEY_LENGTH} bytes long"
            )
        if tag_length != self.SUPPORTED_TAG_LENGTH:
            raise EncryptionError(
                f"Authentication tag must be {self.SUPPORTED_TAG_LENGTH} bytes long"
            )
        self._aead = AESGCM(key)
        self.nonce_length = nonce_length
        self.tag_length = tag_length
        self.charset = charset
        self.masking_pattern = masking_pattern
        logger.info("CardNumberCipher initialized with AES-GCM, %d-byte nonce", nonce_length)

    @classmethod
    def from_config(cls, config: Config) -> "CardNumberCipher":
        return cls(
            key=config.encryption_key,
            nonce_length=config.nonce_length,
            tag_length=config.tag_length,
            charset=config.charset,
            masking_pattern=config.masking_pattern,
        )

    def encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(self.nonce_length)
        try:
            sealed = self._aead.encrypt(nonce, plaintext.encode(self.charset), None)
        except (ValueError, TypeError, AttributeError, UnicodeEncodeError):
            raise EncryptionError("Encryption failed") from None
        return base64.b64encode(nonce + sealed).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        try:
            raw = base64.b64decode(ciphertext, validate=True)
            if len(raw) < self.nonce_length + self.tag_length:
                raise ValueError("ciphertext is truncated")
            nonce, sealed = raw[: self.nonce_length], raw[self.nonce_length :]
            return self._aead.decrypt(nonce, sealed, None).decode(self.charset)
        except (InvalidTag, ValueError, TypeError, binascii.Error):
            # UnicodeDecodeError is a ValueError
            raise EncryptionError("Decryption failed") from None

    def mask(self, plaintext: str | None) -> str:
        if plaintext is None or len(plaintext) < 4:
            return self.masking_pattern.format(self.PLACEHOLDER)
        return self.masking_pattern.format(plaintext[-4:])

    def mask_from_ciphertext(self, ciphertext: str | None) -> str:
        """Decrypt and mask. Never raises, an unreadable number is shown as the placeholder."""
        try:
            return self.mask(self.decrypt(ciphertext))  # type: ignore[arg-type]
        except EncryptionError:
            logger.warning("Stored card number could not be decrypted, masking placeholder")
            return self.mask(None)


_cipher: CardNumberCipher | None = None
_cipher_lock = threading.Lock()


def get_card_cipher(config: Config = Depends(get_config)) -> CardNumberCipher:
    """Process-wide cipher, built from the key material on first use."""
    global _cipher
    if _cipher is None:
        with _cipher_lock:
            if _cipher is None:
                _cipher = CardNumberCipher.from_config(config)
    return _cipher
