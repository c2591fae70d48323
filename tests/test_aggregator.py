"""Tests for fixed-order transaction aggregation."""

import sys
import os
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from omnigraph import Point
from transactions import PendingTransaction, TransactionAggregator


def _txs(domain, count, network_id=1):
    return [
        PendingTransaction(point=Point(network_id, domain), payload=f"{domain}-{i}")
        for i in range(count)
    ]


class TestTransactionAggregator:
    """Test domain ordering."""

    def test_domain_order_wins_over_insertion_order(self):
        aggregator = TransactionAggregator(["uln", "endpoint"])

        aggregator.add("endpoint", _txs("endpoint", 2))
        aggregator.add("uln", _txs("uln", 2))

        payloads = [t.payload for t in aggregator.transactions()]
        assert payloads == ["uln-0", "uln-1", "endpoint-0", "endpoint-1"]

    def test_order_within_domain_preserved_across_adds(self):
        aggregator = TransactionAggregator(["uln"])
        first, second = _txs("uln", 3)[:2], _txs("uln", 3)[2:]

        aggregator.add("uln", first)
        aggregator.add("uln", second)

        assert [t.payload for t in aggregator.transactions()] == ["uln-0", "uln-1", "uln-2"]

    def test_counts(self):
        aggregator = TransactionAggregator(["a", "b", "c"])
        aggregator.add("a", _txs("a", 2))
        aggregator.add("c", _txs("c", 1))

        assert aggregator.count() == 3
        assert aggregator.count("b") == 0
        assert aggregator.count("a") == 2

    def test_empty(self):
        aggregator = TransactionAggregator(["a", "b"])
        aggregator.add("a", [])
        assert aggregator.transactions() == []

    def test_unknown_domain(self):
        aggregator = TransactionAggregator(["a"])
        with pytest.raises(KeyError, match="Unknown domain"):
            aggregator.add("b", _txs("b", 1))

    def test_duplicate_domains_rejected(self):
        with pytest.raises(ValueError):
            TransactionAggregator(["a", "a"])
