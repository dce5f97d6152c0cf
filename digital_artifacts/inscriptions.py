"""Decoding helpers for ord-style inscription envelopes.

An inscription lives in the tapscript of a script-path spend::

    OP_FALSE OP_IF "ord" <tag> <value> ... OP_0 <body> <body> ... OP_ENDIF

Tag/value pairs come first; an empty push separates them from the body, whose
pushes are concatenated. This decoder is forgiving: a malformed witness or
envelope simply contributes no inscription.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

from .conversions import ConversionError, hex_to_bytes
from .model import InscriptionArtifact, Transaction
from .script import (
    OP_1,
    OP_16,
    OP_1NEGATE,
    OP_ENDIF,
    OP_FALSE,
    OP_IF,
    ORD_ENVELOPE_MARKER,
    ScriptError,
    ScriptInstruction,
    iter_script,
)

logger = logging.getLogger(__name__)

ANNEX_TAG = 0x50

TAG_CONTENT_TYPE = 1
TAG_METAPROTOCOL = 7
TAG_CONTENT_ENCODING = 9


def parse(transaction: Transaction) -> List[InscriptionArtifact]:
    """Extract every inscription envelope from the inputs of *transaction*."""

    artifacts: List[InscriptionArtifact] = []
    for input_index, tx_input in enumerate(transaction.vin):
        tapscript = _extract_tapscript(tx_input.witness or [])
        if tapscript is None:
            continue
        try:
            envelopes = list(_iter_envelopes(tapscript))
        except ScriptError as exc:
            logger.debug("Unparseable tapscript in %s input %d: %s", transaction.txid, input_index, exc)
            continue

        for pushes in envelopes:
            inscription_id = f"{transaction.txid}i{len(artifacts)}"
            artifacts.append(_build_artifact(inscription_id, input_index, pushes))
    return artifacts


def _extract_tapscript(witness: Sequence[str]) -> Optional[bytes]:
    """Return the script of a script-path spend, skipping a trailing annex."""

    items = list(witness)
    if len(items) >= 2:
        last = _hex_to_bytes_safe(items[-1])
        if last and last[0] == ANNEX_TAG:
            items = items[:-1]
    if len(items) < 2:
        return None
    script = _hex_to_bytes_safe(items[-2])
    return script or None


def _iter_envelopes(script: bytes) -> Iterator[List[bytes]]:
    instructions = list(iter_script(script))
    index = 0
    while index < len(instructions):
        if _is_envelope_start(instructions, index):
            pushes, index = _read_envelope(instructions, index + 3)
            if pushes is not None:
                yield pushes
            continue
        index += 1


def _is_envelope_start(instructions: Sequence[ScriptInstruction], index: int) -> bool:
    if index + 2 >= len(instructions):
        return False
    first, second, third = instructions[index : index + 3]
    return (
        first.opcode == OP_FALSE
        and second.opcode == OP_IF
        and third.data == ORD_ENVELOPE_MARKER
    )


def _read_envelope(
    instructions: Sequence[ScriptInstruction], start: int
) -> tuple[Optional[List[bytes]], int]:
    """Collect pushes up to ``OP_ENDIF``; returns ``None`` for invalid envelopes."""

    pushes: List[bytes] = []
    for index in range(start, len(instructions)):
        instruction = instructions[index]
        if instruction.opcode == OP_ENDIF:
            return pushes, index + 1
        if instruction.data is not None:
            pushes.append(instruction.data)
        elif OP_1 <= instruction.opcode <= OP_16:
            pushes.append(bytes([instruction.opcode - OP_1 + 1]))
        elif instruction.opcode == OP_1NEGATE:
            pushes.append(b"\x81")
        else:
            return None, index + 1
    return None, len(instructions)


def _parse_payload(pushes: Sequence[bytes]) -> tuple[Dict[int, List[bytes]], bytes]:
    fields: Dict[int, List[bytes]] = {}
    body = b""
    index = 0
    while index < len(pushes):
        tag = pushes[index]
        if not tag:
            body = b"".join(pushes[index + 1 :])
            break
        if index + 1 >= len(pushes):
            # A trailing tag without value is ignored.
            break
        tag_number = int.from_bytes(tag, "little")
        fields.setdefault(tag_number, []).append(pushes[index + 1])
        index += 2
    return fields, body


def _build_artifact(inscription_id: str, input_index: int, pushes: Sequence[bytes]) -> InscriptionArtifact:
    fields, body = _parse_payload(pushes)
    return InscriptionArtifact(
        inscription_id=inscription_id,
        input_index=input_index,
        content_type=_field_text(fields, TAG_CONTENT_TYPE),
        content_encoding=_field_text(fields, TAG_CONTENT_ENCODING),
        metaprotocol=_field_text(fields, TAG_METAPROTOCOL),
        body=body,
        fields=fields,
    )


def _field_text(fields: Dict[int, List[bytes]], tag: int) -> Optional[str]:
    values = fields.get(tag)
    if not values:
        return None
    try:
        return values[0].decode("utf-8")
    except UnicodeDecodeError:
        return None


def _hex_to_bytes_safe(value: Any) -> bytes:
    """Safely convert a hex-like string to bytes, ignoring failures."""

    if not isinstance(value, str):
        return b""
    try:
        return hex_to_bytes(value)
    except ConversionError:
        return b""
