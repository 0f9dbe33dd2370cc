# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

import importlib
import logging

"""
fabledger - Financial ledger analytics for fabrication-shop ERPs

Derived financial views over transactions, sales orders, quotes, cheques and
general expenses that have already been fetched from the persistence layer.

Key Entry Points:
- fabledger.analysis.LedgerAggregator - Aging, period flows, balances, ratios
- fabledger.core.ledger.Ledger - Validated transaction container with queries
- fabledger.reporting.* - Dashboard, financial, margin and cheque reports

Example Usage:
    ```python
    from datetime import date

    from fabledger.analysis import LedgerAggregator
    from fabledger.core.primitives import Granularity

    aggregator = LedgerAggregator()
    flows = aggregator.aggregate_by_period(
        transactions,
        granularity=Granularity.MONTH,
        window_size=12,
        reference_date=date(2025, 6, 30),
    )
    print(flows[-1].net)
    ```
"""

# Libraries never configure handlers; applications decide where logs go.
logging.getLogger(__name__).addHandler(logging.NullHandler())


# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "analysis",
    "core",
    "reporting",
    "utils",
]


_LAZY_MODULES = {
    "analysis": "fabledger.analysis",
    "core": "fabledger.core",
    "reporting": "fabledger.reporting",
    "utils": "fabledger.utils",
}


def __getattr__(name: str):
    module_path = _LAZY_MODULES.get(name)
    if module_path is None:
        raise AttributeError(f"module 'fabledger' has no attribute '{name}'")
    module = importlib.import_module(module_path)
    globals()[name] = module
    return module
