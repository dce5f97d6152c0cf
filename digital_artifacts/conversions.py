"""Byte and text conversion primitives shared by every decoder.

Bitcoin tooling juggles three textual views of the same bytes: hex digits,
decoded UTF-8 text and "single-byte" text where every character stands for one
raw byte (code points 0-255, the Latin-1 mapping). The helpers here convert
between them without any protocol knowledge.
"""

from __future__ import annotations

import base64
import binascii


class ConversionError(ValueError):
    """Raised when a byte/text conversion cannot be performed."""


class EmptyInputError(ConversionError):
    """Raised when a hex string is empty."""


class MalformedHexError(ConversionError):
    """Raised when a hex string has odd length or non-hex digits."""


SINGLE_BYTE_ENCODING = "latin-1"


def hex_to_bytes(hex_string: str) -> bytes:
    """Convert a string of hex digits (two per byte) into bytes."""

    if not hex_string:
        raise EmptyInputError("Input string is empty. Hex string expected.")
    if len(hex_string) % 2:
        raise MalformedHexError(f"Hex string has odd length {len(hex_string)}")
    try:
        return binascii.unhexlify(hex_string)
    except (binascii.Error, ValueError) as exc:
        raise MalformedHexError(f"Invalid hex string: {hex_string[:16]}...") from exc


def bytes_to_hex(data: bytes | bytearray | list[int]) -> str:
    """Render each byte as exactly two lowercase hex digits."""

    return bytes(data).hex()


def utf8_bytes_to_utf16_string(data: bytes) -> str:
    """Decode UTF-8 bytes into a native string.

    Python strings are sequences of code points, so characters outside the
    basic multilingual plane come back as a single character.
    """

    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ConversionError(f"Invalid UTF-8 data: {exc.reason}") from exc


def utf16_string_to_utf8_bytes(text: str) -> bytes:
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ConversionError(f"Text cannot be encoded as UTF-8: {exc.reason}") from exc


def bytes_to_single_byte_text(data: bytes) -> str:
    """Map every byte to the character with the same code point (0-255)."""

    return bytes(data).decode(SINGLE_BYTE_ENCODING)


def single_byte_text_to_bytes(text: str) -> bytes:
    """Inverse of :func:`bytes_to_single_byte_text`."""

    try:
        return text.encode(SINGLE_BYTE_ENCODING)
    except UnicodeEncodeError as exc:
        raise ConversionError(
            f"Character {text[exc.start]!r} at position {exc.start} is not a single byte"
        ) from exc


def single_byte_text_to_base64(text: str) -> str:
    return base64.b64encode(single_byte_text_to_bytes(text)).decode("ascii")


def base64_to_single_byte_text(data: str) -> str:
    try:
        raw = base64.b64decode(data.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ConversionError("Invalid base64 data") from exc
    return bytes_to_single_byte_text(raw)
