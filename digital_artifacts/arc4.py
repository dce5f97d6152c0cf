"""ARC4 keystream cipher.

Encryption and decryption are the same XOR operation. The keystream position
advances with every call to :meth:`ARC4.crypt`, so one instance handles one
message.
"""

from __future__ import annotations

from cryptography.hazmat.decrepit.ciphers.algorithms import ARC4 as _ARC4Algorithm
from cryptography.hazmat.primitives.ciphers import Cipher

from .conversions import bytes_to_single_byte_text, hex_to_bytes, single_byte_text_to_bytes


class ARC4:
    """Stateful ARC4 cipher keyed with raw key bytes (5 to 256 bytes)."""

    def __init__(self, key: bytes) -> None:
        if not key:
            raise ValueError("ARC4 key must not be empty")
        self._cipher = Cipher(_ARC4Algorithm(bytes(key)), mode=None).decryptor()

    def crypt(self, data: bytes) -> bytes:
        """XOR *data* with the next ``len(data)`` keystream bytes."""

        return self._cipher.update(bytes(data))

    def decode_string(self, text: str, input_encoding: str = "hex") -> str:
        """Decrypt a textual ciphertext and return single-byte text.

        ``input_encoding`` is ``"hex"`` for hex digits or ``"binary"`` for text
        where every character is one ciphertext byte.
        """

        if input_encoding == "hex":
            ciphertext = hex_to_bytes(text)
        elif input_encoding == "binary":
            ciphertext = single_byte_text_to_bytes(text)
        else:
            raise ValueError(f"Unsupported input encoding: {input_encoding}")
        return bytes_to_single_byte_text(self.crypt(ciphertext))


def arc4_crypt(key: bytes, data: bytes) -> bytes:
    """One-shot ARC4 encryption/decryption."""

    return ARC4(key).crypt(data)
