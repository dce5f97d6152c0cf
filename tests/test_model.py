from __future__ import annotations

import pytest

from digital_artifacts.model import InscriptionArtifact, Transaction, TransactionFormatError, TxInput

ESPLORA_TX = {
    "txid": "50aeb77245a9483a5b077e4e7506c331dc2f628c22046e7d2b4c6ad6c6236ae1",
    "version": 2,
    "locktime": 21,
    "vin": [
        {
            "txid": "9a4b2c1d" * 8,
            "vout": 1,
            "witness": ["aa" * 64],
            "is_coinbase": False,
            "sequence": 4294967293,
        },
        {"txid": "1f" * 32, "vout": 0, "is_coinbase": False},
    ],
    "vout": [
        {
            "scriptpubkey": "0014" + "11" * 20,
            "scriptpubkey_asm": "OP_0 OP_PUSHBYTES_20 1111111111111111111111111111111111111111",
            "scriptpubkey_type": "v0_p2wpkh",
            "value": 546,
        }
    ],
    "status": {"confirmed": True, "block_height": 840000, "block_hash": "00" * 32},
}


def test_from_dict_reads_esplora_shape() -> None:
    transaction = Transaction.from_dict(ESPLORA_TX)

    assert transaction.txid == ESPLORA_TX["txid"]
    assert transaction.locktime == 21
    assert [tx_input.vout for tx_input in transaction.vin] == [1, 0]
    assert transaction.vin[0].witness == ("aa" * 64,)
    assert transaction.vin[1].witness is None
    assert transaction.vout[0].scriptpubkey_type == "v0_p2wpkh"
    assert transaction.vout[0].value == 546
    assert transaction.status.confirmed is True
    assert transaction.status.block_hash == "00" * 32
    assert transaction.status.block_height == 840000


def test_transaction_collections_are_immutable() -> None:
    witness = ["aa" * 64]
    transaction = Transaction(
        txid="ab" * 32,
        locktime=0,
        vin=[TxInput(txid="cd" * 32, witness=witness)],
        vout=[],
    )
    witness.append("bb")

    assert transaction.vin[0].witness == ("aa" * 64,)
    assert isinstance(transaction.vin, tuple)
    assert isinstance(transaction.vout, tuple)


def test_from_dict_treats_missing_status_as_unconfirmed() -> None:
    data = dict(ESPLORA_TX)
    data["status"] = {"confirmed": False}

    transaction = Transaction.from_dict(data)

    assert transaction.status.confirmed is False
    assert transaction.status.block_hash is None


@pytest.mark.parametrize(
    "data",
    [
        {"locktime": 0, "vin": [], "vout": []},
        {"txid": "ab", "vin": [], "vout": [{"scriptpubkey_type": "multisig"}]},
        {"txid": "ab", "locktime": "soon", "vin": [], "vout": []},
        ["not", "an", "object"],
    ],
)
def test_from_dict_rejects_malformed_json(data: object) -> None:
    with pytest.raises(TransactionFormatError):
        Transaction.from_dict(data)  # type: ignore[arg-type]


def test_inscription_data_uri_defaults_content_type() -> None:
    inscription = InscriptionArtifact(
        inscription_id="abi0",
        input_index=0,
        content_type=None,
        content_encoding=None,
        metaprotocol=None,
        body=b"\x00\x01",
    )

    assert inscription.get_data() == "AAE="
    assert inscription.get_data_uri() == "data:application/octet-stream;base64,AAE="
