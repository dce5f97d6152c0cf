"""Digital artifact extraction for Bitcoin transactions."""

from .arc4 import ARC4, arc4_crypt
from .conversions import (
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
from .model import (
    Artifact,
    ArtifactError,
    Cat21Artifact,
    InscriptionArtifact,
    Src20Artifact,
    Transaction,
    TransactionContractError,
    TransactionFormatError,
    TxInput,
    TxOutput,
    TxStatus,
)
from .parser import DigitalArtifactParser, parse_transaction
from .script import ScriptError, extract_pubkeys
from .src20 import decode_src20_transaction

__all__ = [
    "ARC4",
    "arc4_crypt",
    "ConversionError",
    "EmptyInputError",
    "MalformedHexError",
    "base64_to_single_byte_text",
    "bytes_to_hex",
    "bytes_to_single_byte_text",
    "hex_to_bytes",
    "single_byte_text_to_base64",
    "single_byte_text_to_bytes",
    "utf16_string_to_utf8_bytes",
    "utf8_bytes_to_utf16_string",
    "Artifact",
    "ArtifactError",
    "Cat21Artifact",
    "InscriptionArtifact",
    "Src20Artifact",
    "Transaction",
    "TransactionContractError",
    "TransactionFormatError",
    "TxInput",
    "TxOutput",
    "TxStatus",
    "DigitalArtifactParser",
    "parse_transaction",
    "ScriptError",
    "extract_pubkeys",
    "decode_src20_transaction",
]
