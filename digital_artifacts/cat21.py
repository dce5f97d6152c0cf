"""Decoder for CAT-21 mints: transactions with a lock-time of exactly 21."""

from __future__ import annotations

from typing import Optional

from .model import Cat21Artifact, Transaction

CAT21_LOCKTIME = 21


def parse(transaction: Transaction) -> Optional[Cat21Artifact]:
    if transaction.locktime != CAT21_LOCKTIME:
        return None
    return Cat21Artifact(transaction_id=transaction.txid, block_id=transaction.status.block_hash)
