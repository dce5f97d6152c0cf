"""Domain models for transactions and the artifacts decoded from them.

Transactions mirror the JSON shape returned by Esplora-style block explorers
(``txid``, ``locktime``, ``vin``, ``vout``, ``status``). Artifacts form a tagged
union: every variant carries a ``type`` discriminant plus only its own fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .conversions import (
    bytes_to_single_byte_text,
    single_byte_text_to_base64,
    utf8_bytes_to_utf16_string,
)


class ArtifactError(RuntimeError):
    """Base class for errors raised by the artifact decoders."""


class TransactionFormatError(ArtifactError):
    """Raised when transaction JSON does not have the expected shape."""


class TransactionContractError(ArtifactError):
    """Raised when a transaction violates a decoder precondition."""


@dataclass(frozen=True)
class TxInput:
    txid: str
    vout: int = 0
    witness: Optional[Tuple[str, ...]] = None
    is_coinbase: bool = False

    def __post_init__(self) -> None:
        if self.witness is not None:
            object.__setattr__(self, "witness", tuple(self.witness))


@dataclass(frozen=True)
class TxOutput:
    scriptpubkey: str
    scriptpubkey_type: str
    value: Optional[int] = None


@dataclass(frozen=True)
class TxStatus:
    """Confirmation status; ``block_hash`` is ``None`` while unconfirmed."""

    confirmed: bool = False
    block_hash: Optional[str] = None
    block_height: Optional[int] = None


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction view consumed by every decoder."""

    txid: str
    locktime: int
    vin: Tuple[TxInput, ...]
    vout: Tuple[TxOutput, ...]
    status: TxStatus = field(default_factory=TxStatus)

    def __post_init__(self) -> None:
        object.__setattr__(self, "vin", tuple(self.vin))
        object.__setattr__(self, "vout", tuple(self.vout))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Transaction":
        """Build a transaction from Esplora JSON."""

        if not isinstance(data, Mapping):
            raise TransactionFormatError("Transaction JSON must be an object")
        try:
            vin = tuple(
                TxInput(
                    txid=str(item.get("txid", "")),
                    vout=int(item.get("vout") or 0),
                    witness=tuple(item["witness"]) if item.get("witness") else None,
                    is_coinbase=bool(item.get("is_coinbase", False)),
                )
                for item in data.get("vin", [])
            )
            vout = tuple(
                TxOutput(
                    scriptpubkey=str(item["scriptpubkey"]),
                    scriptpubkey_type=str(item.get("scriptpubkey_type", "")),
                    value=item.get("value"),
                )
                for item in data.get("vout", [])
            )
            status_json = data.get("status") or {}
            status = TxStatus(
                confirmed=bool(status_json.get("confirmed", "block_hash" in status_json)),
                block_hash=status_json.get("block_hash"),
                block_height=status_json.get("block_height"),
            )
            return cls(
                txid=str(data["txid"]),
                locktime=int(data.get("locktime", 0)),
                vin=vin,
                vout=vout,
                status=status,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise TransactionFormatError(f"Malformed transaction JSON: {exc}") from exc


@dataclass(frozen=True)
class Src20Artifact:
    """SRC-20 token payload recovered from multisig public keys."""

    transaction_id: str
    value: str
    type: str = field(default="Src20", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "transactionId": self.transaction_id, "value": self.value}


@dataclass(frozen=True)
class Cat21Artifact:
    """CAT-21 mint marker (lock-time 21)."""

    transaction_id: str
    block_id: Optional[str]
    type: str = field(default="Cat21", init=False)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "transactionId": self.transaction_id, "blockId": self.block_id}


@dataclass(frozen=True)
class InscriptionArtifact:
    """An ord-style inscription found in a witness envelope.

    ``fields`` maps each envelope tag to the values pushed for it, in order;
    ``body`` is the concatenation of every push after the body separator.
    """

    inscription_id: str
    input_index: int
    content_type: Optional[str]
    content_encoding: Optional[str]
    metaprotocol: Optional[str]
    body: bytes
    fields: Dict[int, List[bytes]] = field(default_factory=dict)
    type: str = field(default="Inscription", init=False)

    def get_content(self) -> str:
        """Return the body decoded as UTF-8 text."""

        return utf8_bytes_to_utf16_string(self.body)

    def get_data(self) -> str:
        """Return the body as base64."""

        return single_byte_text_to_base64(bytes_to_single_byte_text(self.body))

    def get_data_uri(self) -> str:
        content_type = self.content_type or "application/octet-stream"
        return f"data:{content_type};base64,{self.get_data()}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "inscriptionId": self.inscription_id,
            "inputIndex": self.input_index,
            "contentType": self.content_type,
            "contentLength": len(self.body),
        }
        if self.content_encoding is not None:
            data["contentEncoding"] = self.content_encoding
        if self.metaprotocol is not None:
            data["metaprotocol"] = self.metaprotocol
        data["dataUri"] = self.get_data_uri()
        return data


Artifact = Union[InscriptionArtifact, Src20Artifact, Cat21Artifact]
