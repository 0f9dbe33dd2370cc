# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Transaction records, the pandas-backed ledger and its query layer.
"""

from .ledger import Ledger
from .mapper import FlowDirectionMapper
from .queries import LedgerQueries
from .records import (
    Cheque,
    GeneralExpense,
    Quote,
    Sale,
    Transaction,
    parse_transactions,
)
from .settings import LedgerSettings

__all__ = [
    "Cheque",
    "FlowDirectionMapper",
    "GeneralExpense",
    "Ledger",
    "LedgerQueries",
    "LedgerSettings",
    "Quote",
    "Sale",
    "Transaction",
    "parse_transactions",
]
