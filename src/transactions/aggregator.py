"""Concatenates configurator output in a fixed domain order."""

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence

from .pending import PendingTransaction

logger = logging.getLogger(__name__)


class TransactionAggregator:
    """
    Collects pending transactions per domain and flattens them in order.

    The domain order is fixed when the aggregator is created and is the
    authoritative cross-domain ordering of a run, e.g.
    ``["send_uln", "receive_uln", "endpoint"]``. Within a domain the order in
    which transactions were added is preserved, including across multiple
    add() calls for the same domain.
    """

    def __init__(self, domain_order: Sequence[str]):
        if len(set(domain_order)) != len(domain_order):
            raise ValueError(f"Duplicate domains in order: {list(domain_order)}")

        self.domain_order: List[str] = list(domain_order)
        self._by_domain: Dict[str, List[PendingTransaction]] = OrderedDict(
            (domain, []) for domain in self.domain_order
        )

    def add(self, domain: str, transactions: Iterable[PendingTransaction]) -> None:
        """
        Add a configurator's transactions to a domain.

        Raises:
            KeyError: If the domain is not part of the fixed order
        """
        if domain not in self._by_domain:
            raise KeyError(
                f"Unknown domain '{domain}'. Expected one of {self.domain_order}"
            )

        added = list(transactions)
        self._by_domain[domain].extend(added)
        logger.debug(f"Aggregated {len(added)} transactions for domain {domain}")

    def count(self, domain: Optional[str] = None) -> int:
        if domain is not None:
            return len(self._by_domain[domain])
        return sum(len(txs) for txs in self._by_domain.values())

    def transactions(self) -> List[PendingTransaction]:
        """All transactions, domain by domain in the fixed order."""
        return [tx for domain in self.domain_order for tx in self._by_domain[domain]]
