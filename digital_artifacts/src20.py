"""Decoder for SRC-20 tokens hidden in bare multisig public keys.

SRC-20 (Bitcoin Stamps) transactions carry their token JSON inside fake
compressed public keys of 1-of-3 multisig outputs. Recovering it takes the
following steps:

1. The ARC4 key is the txid of the first input, as raw bytes in the order the
   txid is written. It must NOT be reversed into internal byte order.
2. The first two public keys of every multisig output are collected in output
   order. Each key loses its first byte (sign) and last byte (nonce), leaving
   31 data bytes, kept as 62 hex digits.
3. The hex digits are concatenated and ARC4-decrypted. The cipher's string
   interface hex-decodes its input.
4. The plaintext starts with a two-byte big-endian length, followed by that
   many bytes of UTF-8 text; the rest is zero padding.
5. The text must contain ``stamp:``; the token JSON is what follows it.

Example (documented fixture, tx ``50aeb772...6236ae1``): the keys
``03c46b73...533e51``, ``039036c8...b976cc``, ``02dc054e...e16be3`` and
``02932b35...97e5ca`` decrypt to ``0045 7374616d703a7b...7d 0000...``, which reads
``stamp:{"p":"src-20","op":"transfer","tick":"STEVE","amt":"100000000"}``.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .arc4 import ARC4
from .conversions import (
    bytes_to_hex,
    hex_to_bytes,
    single_byte_text_to_bytes,
    utf8_bytes_to_utf16_string,
)
from .model import Src20Artifact, Transaction, TransactionContractError, TxOutput
from .script import extract_pubkeys

logger = logging.getLogger(__name__)

MULTISIG_SCRIPT_TYPE = "multisig"
STAMP_PREFIX = "stamp:"
KEYS_PER_OUTPUT = 2
LENGTH_PREFIX_HEX_DIGITS = 4


class Src20DecodeError(ValueError):
    """Internal reason why a transaction did not yield an SRC-20 payload."""


def collect_ciphertext_hex(outputs: Iterable[TxOutput]) -> str:
    """Concatenate the 31-byte fragments of every multisig output as hex."""

    fragments: List[str] = []
    for index, output in enumerate(outputs):
        if output.scriptpubkey_type != MULTISIG_SCRIPT_TYPE:
            continue
        pubkeys = extract_pubkeys(output.scriptpubkey)
        if len(pubkeys) < KEYS_PER_OUTPUT:
            raise Src20DecodeError(
                f"multisig output {index} has {len(pubkeys)} public keys, need {KEYS_PER_OUTPUT}"
            )
        for pubkey in pubkeys[:KEYS_PER_OUTPUT]:
            # Drop the sign byte and the nonce byte.
            fragments.append(bytes_to_hex(pubkey)[2:64])
    return "".join(fragments)


def _unwrap_payload(decrypted_hex: str) -> str:
    if len(decrypted_hex) < LENGTH_PREFIX_HEX_DIGITS:
        raise Src20DecodeError("decrypted data is shorter than the length prefix")
    expected_length = int(decrypted_hex[:LENGTH_PREFIX_HEX_DIGITS], 16)
    data_hex = decrypted_hex[LENGTH_PREFIX_HEX_DIGITS : LENGTH_PREFIX_HEX_DIGITS + expected_length * 2]
    if len(data_hex) != expected_length * 2:
        raise Src20DecodeError(
            f"length prefix declares {expected_length} bytes, only {len(data_hex) // 2} available"
        )
    return utf8_bytes_to_utf16_string(hex_to_bytes(data_hex))


def _decode(transaction: Transaction) -> str:
    arc4_key = hex_to_bytes(transaction.vin[0].txid)

    ciphertext_hex = collect_ciphertext_hex(transaction.vout)
    if not ciphertext_hex:
        raise Src20DecodeError("no multisig outputs")

    decrypted = ARC4(arc4_key).decode_string(ciphertext_hex)
    decrypted_hex = bytes_to_hex(single_byte_text_to_bytes(decrypted))

    result = _unwrap_payload(decrypted_hex)
    if not result or STAMP_PREFIX not in result:
        raise Src20DecodeError(f"payload lacks the {STAMP_PREFIX!r} marker")
    return result.replace(STAMP_PREFIX, "", 1)


def decode_src20_transaction(transaction: Transaction) -> Optional[str]:
    """Return the SRC-20 JSON text of *transaction*, or ``None``.

    Every structural problem (malformed hex, missing keys, bad length prefix,
    invalid UTF-8, missing marker) results in ``None``. A transaction without
    inputs is a caller error and raises :class:`TransactionContractError`.
    """

    if not transaction.vin:
        raise TransactionContractError(f"transaction {transaction.txid} has no inputs")
    try:
        return _decode(transaction)
    except Exception as exc:
        logger.debug("No SRC-20 payload in %s: %s", transaction.txid, exc)
        return None


def parse(transaction: Transaction) -> Optional[Src20Artifact]:
    value = decode_src20_transaction(transaction)
    if value is None:
        return None
    return Src20Artifact(transaction_id=transaction.txid, value=value)
