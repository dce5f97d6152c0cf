"""REST client for Esplora-compatible block explorers (mempool.space, blockstream).

Each helper maps to one endpoint and returns the parsed JSON consumed by
:meth:`Transaction.from_dict`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests
from requests import RequestException, Response

from .config import ExplorerConfig, load_explorer_config

logger = logging.getLogger(__name__)

# Esplora pages block transactions in chunks of 25.
BLOCK_TXS_PAGE_SIZE = 25


class ExplorerError(RuntimeError):
    """Raised when the explorer answers with an HTTP error."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Explorer error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ExplorerTransportError(RuntimeError):
    """Raised when the explorer is unreachable or returns malformed data."""


class EsploraClient:
    """Read-only client for the Esplora REST API."""

    def __init__(self, config: ExplorerConfig) -> None:
        self.config = config
        self._session = requests.Session()

    @classmethod
    def from_env(cls) -> "EsploraClient":
        """Instantiate a client using environment variables or config file."""

        return cls(load_explorer_config())

    def _get(self, path: str) -> Response:
        url = f"{self.config.base_url}{path}"
        logger.debug("GET %s", url)
        try:
            response = self._session.get(url, timeout=self.config.timeout)
        except RequestException as exc:
            logger.error(
                "Explorer connection failed: %s",
                exc,
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            raise ExplorerTransportError(
                f"Explorer connection failed for {url}. Check DIGITAL_ARTIFACTS_API_URL "
                "(or ~/.digital-artifacts.yaml) and your network connection."
            ) from exc
        if not response.ok:
            logger.error("Explorer HTTP error %s from %s", response.status_code, response.url)
            raise ExplorerError(response.status_code, response.text.strip() or response.reason or "")
        return response

    def _get_json(self, path: str) -> Any:
        response = self._get(path)
        try:
            return response.json()
        except ValueError as exc:
            logger.debug("Explorer JSON parse error: %s", response.text, exc_info=True)
            raise ExplorerTransportError("Explorer returned malformed JSON") from exc

    def get_transaction(self, txid: str) -> Dict[str, Any]:
        return self._get_json(f"/tx/{txid}")

    def get_block(self, block_hash: str) -> Dict[str, Any]:
        """Return the block summary, including ``tx_count``."""

        return self._get_json(f"/block/{block_hash}")

    def get_block_transactions(self, block_hash: str, start_index: int = 0) -> List[Dict[str, Any]]:
        """Return one page of transactions starting at *start_index*."""

        if start_index % BLOCK_TXS_PAGE_SIZE:
            raise ValueError(f"start_index must be a multiple of {BLOCK_TXS_PAGE_SIZE}")
        return self._get_json(f"/block/{block_hash}/txs/{start_index}")
