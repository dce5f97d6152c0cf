"""Command-line interface for decoding digital artifacts.

Transactions come either from an Esplora-compatible explorer or from local JSON
files in the same shape; the artifacts found are printed as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Sequence

from .config import ConfigurationError, load_explorer_config, set_default_config_path
from .esplora_client import (
    BLOCK_TXS_PAGE_SIZE,
    EsploraClient,
    ExplorerError,
    ExplorerTransportError,
)
from .model import Artifact, ArtifactError, Transaction
from .parser import DigitalArtifactParser

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

COMPACT_JSON_SEPARATORS = (",", ":")


class CLIError(RuntimeError):
    """Raised when CLI arguments are invalid."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decode inscriptions, SRC-20 and CAT-21 artifacts")
    parser.add_argument("--config", default=None, help="Path to a YAML config file")
    parser.add_argument("--api-url", default=None, help="Esplora API base URL (overrides config)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    decode_tx_parser = subparsers.add_parser(
        "decode-tx", help="fetch transactions from the explorer and decode them"
    )
    decode_tx_parser.add_argument("txids", nargs="+", help="Transaction ids to decode")

    decode_file_parser = subparsers.add_parser(
        "decode-file", help="decode transaction JSON (one object or a list) from a file"
    )
    decode_file_parser.add_argument("path", help="Path to the JSON file, or - for stdin")

    decode_block_parser = subparsers.add_parser(
        "decode-block", help="decode every transaction of a block"
    )
    decode_block_parser.add_argument("block_hash", help="Block hash")
    decode_block_parser.add_argument(
        "--include-empty",
        action="store_true",
        help="Also print transactions without artifacts",
    )
    return parser


def _client_from_args(args: argparse.Namespace) -> EsploraClient:
    overrides: dict[str, Any] = {}
    if args.api_url:
        overrides["base_url"] = args.api_url
    return EsploraClient(load_explorer_config(overrides=overrides))


def _render(transaction: Transaction, artifacts: Iterable[Artifact]) -> str:
    return json.dumps(
        {
            "txid": transaction.txid,
            "artifacts": [artifact.to_dict() for artifact in artifacts],
        },
        separators=COMPACT_JSON_SEPARATORS,
        ensure_ascii=False,
    )


def _load_transactions_file(path: str) -> list[Transaction]:
    try:
        raw = sys.stdin.read() if path == "-" else Path(path).read_text()
    except OSError as exc:
        raise CLIError(f"cannot read {path}: {exc}") from exc
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CLIError(f"{path} does not contain valid JSON: {exc}") from exc
    items = decoded if isinstance(decoded, list) else [decoded]
    return [Transaction.from_dict(item) for item in items]


def cmd_decode_tx(args: argparse.Namespace, artifact_parser: DigitalArtifactParser) -> None:
    client = _client_from_args(args)
    for txid in args.txids:
        transaction = Transaction.from_dict(client.get_transaction(txid))
        print(_render(transaction, artifact_parser.parse(transaction)))


def cmd_decode_file(args: argparse.Namespace, artifact_parser: DigitalArtifactParser) -> None:
    for transaction in _load_transactions_file(args.path):
        print(_render(transaction, artifact_parser.parse(transaction)))


def cmd_decode_block(args: argparse.Namespace, artifact_parser: DigitalArtifactParser) -> None:
    client = _client_from_args(args)
    block = client.get_block(args.block_hash)
    if not isinstance(block, dict) or "tx_count" not in block:
        raise CLIError(f"explorer returned no tx_count for block {args.block_hash}")
    tx_count = int(block["tx_count"])
    found = 0
    for start_index in range(0, tx_count, BLOCK_TXS_PAGE_SIZE):
        for item in client.get_block_transactions(args.block_hash, start_index):
            transaction = Transaction.from_dict(item)
            artifacts = artifact_parser.parse(transaction)
            found += len(artifacts)
            if artifacts or args.include_empty:
                print(_render(transaction, artifacts))
    logger.info("Decoded %d transactions, %d artifacts found", tx_count, found)


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    if args.config:
        set_default_config_path(args.config)

    artifact_parser = DigitalArtifactParser()
    try:
        if args.command == "decode-tx":
            cmd_decode_tx(args, artifact_parser)
        elif args.command == "decode-file":
            cmd_decode_file(args, artifact_parser)
        elif args.command == "decode-block":
            cmd_decode_block(args, artifact_parser)
        else:  # pragma: no cover - argparse enforces choices
            raise CLIError(f"Unknown command: {args.command}")
    except KeyboardInterrupt:  # pragma: no cover - interactive use
        logger.info("Interrupted by user")
    except (
        CLIError,
        ConfigurationError,
        ArtifactError,
        ExplorerError,
        ExplorerTransportError,
    ) as exc:
        parser.exit(1, f"error: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
