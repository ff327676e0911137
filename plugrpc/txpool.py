"""The txpool_ namespace: the node keeps no visible transaction pool."""

from __future__ import annotations

import logging
from typing import Any

from plugrpc.rpc_types import encode_uint64

logger = logging.getLogger(__name__)


class TxPoolAPI:
    """Information about the transaction pool, which is always empty."""

    def content(self) -> dict[str, dict[str, Any]]:
        """Return the pending and queued transactions, grouped by sender and nonce."""
        logger.debug("txpool_content")
        return {"pending": {}, "queued": {}}

    def inspect(self) -> dict[str, dict[str, Any]]:
        """Return a textual summary of the pending and queued transactions."""
        logger.debug("txpool_inspect")
        return {"pending": {}, "queued": {}}

    def status(self) -> dict[str, str]:
        """Return the number of pending and queued transactions as hex quantities."""
        logger.debug("txpool_status")
        return {"pending": encode_uint64(0), "queued": encode_uint64(0)}