from __future__ import annotations

import pytest

from digital_artifacts.script import (
    OP_CHECKMULTISIG,
    OP_PUSHBYTES_33,
    OP_PUSHDATA1,
    OP_PUSHDATA2,
    ScriptError,
    extract_pubkeys,
    iter_script,
)

PUBKEY_A = "03c46b73fe2ff939bea5d0a577950dc8876e863bed11c887d681417dfd70533e51"
PUBKEY_B = "039036c8182c70770f8f6bd702a25c7179bfff1ccb3a844297a717226b88b976cc"
PUBKEY_C = "020202020202020202020202020202020202020202020202020202020202020202"


def _multisig(*pubkeys: str, threshold: int = 1) -> str:
    pushes = "".join(f"{OP_PUSHBYTES_33:02x}{key}" for key in pubkeys)
    return f"{0x50 + threshold:02x}{pushes}{0x50 + len(pubkeys):02x}ae"


def test_extract_pubkeys_returns_keys_in_script_order() -> None:
    pubkeys = extract_pubkeys(_multisig(PUBKEY_A, PUBKEY_B, PUBKEY_C))

    assert [key.hex() for key in pubkeys] == [PUBKEY_A, PUBKEY_B, PUBKEY_C]


def test_extract_pubkeys_ignores_non_key_pushes() -> None:
    script = "51" + "0401020304" + f"21{PUBKEY_A}" + "52ae"

    assert [key.hex() for key in extract_pubkeys(script)] == [PUBKEY_A]


def test_extract_pubkeys_with_no_keys_is_empty() -> None:
    assert extract_pubkeys("6a0474657374") == []


def test_extract_pubkeys_rejects_truncated_push() -> None:
    with pytest.raises(ScriptError):
        extract_pubkeys("5121" + PUBKEY_A[:40])


def test_iter_script_handles_pushdata_opcodes() -> None:
    payload_one = b"a" * 80
    payload_two = b"b" * 300
    script = (
        bytes([OP_PUSHDATA1, len(payload_one)])
        + payload_one
        + bytes([OP_PUSHDATA2])
        + len(payload_two).to_bytes(2, "little")
        + payload_two
        + bytes([OP_CHECKMULTISIG])
    )

    instructions = list(iter_script(script))

    assert [instruction.data for instruction in instructions] == [payload_one, payload_two, None]
    assert instructions[-1].opcode == OP_CHECKMULTISIG
    assert not instructions[-1].is_push


def test_iter_script_rejects_truncated_length() -> None:
    with pytest.raises(ScriptError):
        list(iter_script(bytes([OP_PUSHDATA2, 0x01])))
