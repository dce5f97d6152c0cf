from __future__ import annotations

import pytest

from digital_artifacts.conversions import (
    ConversionError,
    EmptyInputError,
    MalformedHexError,
    base64_to_single_byte_text,
    bytes_to_hex,
    bytes_to_single_byte_text,
    hex_to_bytes,
    single_byte_text_to_base64,
    single_byte_text_to_bytes,
    utf16_string_to_utf8_bytes,
    utf8_bytes_to_utf16_string,
)
from digital_artifacts.script import OP_FALSE, OP_IF, OP_PUSHBYTES_3

HANDSHAKE_UTF8 = bytes([111, 98, 240, 159, 164, 157, 99, 112, 102, 112])  # 'ob🤝cpfp'


def test_single_byte_text_to_base64_encodes_ascii() -> None:
    assert single_byte_text_to_base64("Hello World") == "SGVsbG8gV29ybGQ="


def test_single_byte_text_to_base64_encodes_utf8_bytes_as_characters() -> None:
    text = bytes_to_single_byte_text(HANDSHAKE_UTF8)

    assert single_byte_text_to_base64(text) == "b2Lwn6SdY3BmcA=="
    assert base64_to_single_byte_text("b2Lwn6SdY3BmcA==") == text


def test_base64_to_single_byte_text_rejects_garbage() -> None:
    with pytest.raises(ConversionError):
        base64_to_single_byte_text("not base64!")


def test_bytes_to_single_byte_text_maps_each_byte() -> None:
    text = bytes_to_single_byte_text(HANDSHAKE_UTF8)

    assert text == "obð\u009f¤\u009dcpfp"
    assert len(text) == len(HANDSHAKE_UTF8)
    assert single_byte_text_to_bytes(text) == HANDSHAKE_UTF8


def test_single_byte_text_to_bytes_rejects_wide_characters() -> None:
    with pytest.raises(ConversionError):
        single_byte_text_to_bytes("ob🤝")


def test_utf16_string_to_utf8_bytes() -> None:
    assert utf16_string_to_utf8_bytes("ob🤝cpfp") == HANDSHAKE_UTF8


def test_utf8_bytes_to_utf16_string_decodes_four_byte_sequences() -> None:
    assert utf8_bytes_to_utf16_string(HANDSHAKE_UTF8) == "ob🤝cpfp"


@pytest.mark.parametrize("text", ["", "stamp:", "ob🤝cpfp", "Ünïcødé ✓ 𝄞"])
def test_utf_round_trip(text: str) -> None:
    assert utf8_bytes_to_utf16_string(utf16_string_to_utf8_bytes(text)) == text


def test_utf8_bytes_to_utf16_string_rejects_invalid_utf8() -> None:
    with pytest.raises(ConversionError):
        utf8_bytes_to_utf16_string(b"\xf0\x9f\xa4")


def test_hex_to_bytes_converts_simple_hex() -> None:
    # orange from the Bitcoin logo
    assert hex_to_bytes("ff9900") == bytes([255, 153, 0])


def test_hex_to_bytes_converts_inscription_mark() -> None:
    assert hex_to_bytes("0063036f7264") == bytes([OP_FALSE, OP_IF, OP_PUSHBYTES_3, 0x6F, 0x72, 0x64])


def test_hex_to_bytes_rejects_empty_string() -> None:
    with pytest.raises(EmptyInputError, match="Input string is empty. Hex string expected."):
        hex_to_bytes("")


@pytest.mark.parametrize("value", ["abc", "zz", "0g", "00 11"])
def test_hex_to_bytes_rejects_malformed_hex(value: str) -> None:
    with pytest.raises(MalformedHexError):
        hex_to_bytes(value)


def test_bytes_to_hex() -> None:
    assert bytes_to_hex(bytes([0x01, 0xAB, 0x3F])) == "01ab3f"
    assert bytes_to_hex(bytes([OP_FALSE, OP_IF, OP_PUSHBYTES_3, 0x6F, 0x72, 0x64])) == "0063036f7264"
    assert bytes_to_hex(b"") == ""
    assert bytes_to_hex(b"\x00") == "00"


def test_bytes_to_hex_pads_single_digits() -> None:
    assert bytes_to_hex([0x1, 0x2, 0xA]) == "01020a"
    assert bytes_to_hex([]) == ""


def test_hex_round_trips() -> None:
    data = bytes(range(256))

    assert hex_to_bytes(bytes_to_hex(data)) == data
    assert bytes_to_hex(hex_to_bytes("deadbeef00")) == "deadbeef00"
