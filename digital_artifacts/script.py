"""Bitcoin script walking and multisig public-key extraction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .conversions import hex_to_bytes

logger = logging.getLogger(__name__)

OP_FALSE = 0x00
OP_PUSHBYTES_3 = 0x03
OP_PUSHBYTES_33 = 0x21
OP_PUSHDATA1 = 0x4C
OP_PUSHDATA2 = 0x4D
OP_PUSHDATA4 = 0x4E
OP_1NEGATE = 0x4F
OP_1 = 0x51
OP_16 = 0x60
OP_IF = 0x63
OP_ENDIF = 0x68
OP_CHECKMULTISIG = 0xAE

ORD_ENVELOPE_MARKER = b"ord"
COMPRESSED_PUBKEY_LENGTH = 33


class ScriptError(ValueError):
    """Raised when a script cannot be parsed."""


@dataclass(frozen=True)
class ScriptInstruction:
    """One parsed script element; ``data`` is ``None`` for non-push opcodes."""

    opcode: int
    data: Optional[bytes] = None

    @property
    def is_push(self) -> bool:
        return self.data is not None


def iter_script(script: bytes) -> Iterator[ScriptInstruction]:
    """Yield the instructions of *script* in order."""

    pos = 0
    length = len(script)
    while pos < length:
        op = script[pos]
        pos += 1
        if op > OP_PUSHDATA4:
            yield ScriptInstruction(op)
            continue

        if op < OP_PUSHDATA1:
            data_len = op
        elif op == OP_PUSHDATA1:
            data_len = _read_length(script, pos, 1)
            pos += 1
        elif op == OP_PUSHDATA2:
            data_len = _read_length(script, pos, 2)
            pos += 2
        else:
            data_len = _read_length(script, pos, 4)
            pos += 4

        end = pos + data_len
        if end > length:
            raise ScriptError(f"Push of {data_len} bytes at offset {pos} runs past end of script")
        yield ScriptInstruction(op, bytes(script[pos:end]))
        pos = end


def _read_length(script: bytes, pos: int, size: int) -> int:
    if pos + size > len(script):
        raise ScriptError(f"Truncated push length at offset {pos}")
    return int.from_bytes(script[pos : pos + size], "little")


def extract_pubkeys(script_hex: str) -> List[bytes]:
    """Return every 33-byte push of a multisig script, in script order.

    Threshold and key-count opcodes as well as ``OP_CHECKMULTISIG`` are not
    pushes and are skipped. Fewer than two keys is not an error here.
    """

    script = hex_to_bytes(script_hex)
    pubkeys = [
        instruction.data
        for instruction in iter_script(script)
        if instruction.data is not None and len(instruction.data) == COMPRESSED_PUBKEY_LENGTH
    ]
    logger.debug("Extracted %d public keys from %d-byte script", len(pubkeys), len(script))
    return pubkeys
