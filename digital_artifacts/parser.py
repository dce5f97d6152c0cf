"""Unified parser combining every supported artifact decoder.

The decoders are independent and authoritative over their own artifact kind.
Their results are merged in a fixed order: the CAT-21 artifact first, then the
inscriptions in envelope order, then the SRC-20 artifact.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, TypeVar

from . import cat21, inscriptions, src20
from .model import (
    Artifact,
    Cat21Artifact,
    InscriptionArtifact,
    Src20Artifact,
    Transaction,
    TransactionContractError,
)

logger = logging.getLogger(__name__)

InscriptionDecoder = Callable[[Transaction], List[InscriptionArtifact]]
Src20Decoder = Callable[[Transaction], Optional[Src20Artifact]]
Cat21Decoder = Callable[[Transaction], Optional[Cat21Artifact]]

T = TypeVar("T")


class DigitalArtifactParser:
    """Run the inscription, SRC-20 and CAT-21 decoders and merge their output."""

    def __init__(
        self,
        inscription_decoder: InscriptionDecoder = inscriptions.parse,
        src20_decoder: Src20Decoder = src20.parse,
        cat21_decoder: Cat21Decoder = cat21.parse,
    ) -> None:
        self.inscription_decoder = inscription_decoder
        self.src20_decoder = src20_decoder
        self.cat21_decoder = cat21_decoder

    def parse(self, transaction: Transaction) -> List[Artifact]:
        """Return ``[cat21?, *inscriptions, src20?]`` for *transaction*."""

        artifacts: List[Artifact] = list(
            self._run("inscription", self.inscription_decoder, transaction, default=[])
        )
        parsed_src20 = self._run("src20", self.src20_decoder, transaction, default=None)
        parsed_cat = self._run("cat21", self.cat21_decoder, transaction, default=None)

        if parsed_src20 is not None:
            artifacts.append(parsed_src20)

        # cats are first
        if parsed_cat is not None:
            artifacts.insert(0, parsed_cat)

        logger.debug("Parsed %d artifacts from %s", len(artifacts), transaction.txid)
        return artifacts

    def parse_transactions(self, transactions: Iterable[Transaction]) -> List[List[Artifact]]:
        return [self.parse(transaction) for transaction in transactions]

    @staticmethod
    def _run(name: str, decoder: Callable[[Transaction], T], transaction: Transaction, *, default: T) -> T:
        try:
            return decoder(transaction)
        except TransactionContractError:
            raise
        except Exception as exc:
            logger.warning(
                "%s decoder failed for %s: %s",
                name,
                transaction.txid,
                exc,
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            return default


_default_parser = DigitalArtifactParser()


def parse_transaction(transaction: Transaction) -> List[Artifact]:
    """Parse *transaction* with the default decoders."""

    return _default_parser.parse(transaction)
