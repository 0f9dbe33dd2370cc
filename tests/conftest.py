# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for fabledger testing.

Builders create records with sensible defaults so each test only spells out
the fields it is about.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import pytest

from fabledger.core.ledger import Cheque, GeneralExpense, Ledger, Quote, Sale, Transaction
from fabledger.core.primitives import Currency, GlobalSettings, TransactionType

PAYMENT_METHOD = UUID("00000000-0000-0000-0000-0000000000aa")

# Fixed "today" used across tests
REFERENCE_DATE = date(2025, 3, 15)


def make_transaction(
    type: TransactionType = TransactionType.INCOME,
    amount="100",
    on=date(2025, 3, 1),
    currency: Currency = Currency.LOCAL,
    client_id: Optional[UUID] = None,
    supplier_id: Optional[UUID] = None,
    order_id: Optional[UUID] = None,
    concept: str = "",
) -> Transaction:
    """
    Create a transaction for testing.

    Example:
        >>> make_transaction(TransactionType.EXPENSE, "40").signed_amount
        Decimal('-40')
    """
    return Transaction(
        type=type,
        amount=Decimal(str(amount)),
        date=on,
        payment_method_id=PAYMENT_METHOD,
        currency=currency,
        client_id=client_id,
        supplier_id=supplier_id,
        order_id=order_id,
        concept=concept,
    )


def make_sale(
    total="1000",
    collected="0",
    order_date=date(2025, 3, 1),
    status: str = "PENDING",
    currency: Currency = Currency.LOCAL,
    delivery_date=None,
    material_cost="0",
    expense_total="0",
    number: str = "V-0001",
    actual_delivery_date=None,
    client_name: str = "Taller Norte",
    client_id: Optional[UUID] = None,
) -> Sale:
    return Sale(
        number=number,
        client_name=client_name,
        order_date=order_date,
        total=Decimal(str(total)),
        collected=Decimal(str(collected)),
        status=status,
        currency=currency,
        delivery_date=delivery_date,
        actual_delivery_date=actual_delivery_date,
        material_cost=Decimal(str(material_cost)),
        expense_total=Decimal(str(expense_total)),
        client_id=client_id,
    )


def make_quote(
    number: str = "P-0001",
    client_name: str = "Aberturas Sur",
    total="1000",
    sold_total="0",
    expense_total="0",
    status: str = "PENDING",
    issue_date=date(2025, 2, 1),
) -> Quote:
    return Quote(
        number=number,
        client_name=client_name,
        issue_date=issue_date,
        total=Decimal(str(total)),
        sold_total=Decimal(str(sold_total)),
        expense_total=Decimal(str(expense_total)),
        status=status,
    )


def make_cheque(
    number: str = "0001",
    amount="500",
    due_date=date(2025, 3, 20),
    issue_date=date(2025, 1, 1),
    status: str = "CARTERA",
    currency: Currency = Currency.LOCAL,
) -> Cheque:
    return Cheque(
        number=number,
        bank="Banco Nación",
        issue_date=issue_date,
        due_date=due_date,
        amount=Decimal(str(amount)),
        status=status,
        currency=currency,
    )


def make_general_expense(amount="50", on=date(2025, 3, 5), description="Electricity"):
    return GeneralExpense(
        description=description, amount=Decimal(str(amount)), date=on
    )


@pytest.fixture
def reference_date():
    """The fixed 'today' most tests measure against."""
    return REFERENCE_DATE


@pytest.fixture
def sample_settings():
    """Create default global settings for testing."""
    return GlobalSettings()


@pytest.fixture
def sample_ledger():
    """Create an empty ledger for testing."""
    return Ledger()


@pytest.fixture
def transaction_factory():
    return make_transaction


@pytest.fixture
def sale_factory():
    return make_sale


@pytest.fixture
def quote_factory():
    return make_quote


@pytest.fixture
def cheque_factory():
    return make_cheque


@pytest.fixture
def expense_factory():
    return make_general_expense


@pytest.fixture
def client_ids():
    """Two stable client ids, in ascending order."""
    return (
        UUID("10000000-0000-0000-0000-000000000001"),
        UUID("10000000-0000-0000-0000-000000000002"),
    )


@pytest.fixture
def mixed_transactions(transaction_factory):
    """One of every transaction type in March 2025, local currency."""
    amounts = {
        TransactionType.INCOME: "1000",
        TransactionType.ADVANCE: "300",
        TransactionType.WORK_PAYMENT: "200",
        TransactionType.EXPENSE: "150",
        TransactionType.SUPPLIER_PAYMENT: "400",
        TransactionType.GENERAL_EXPENSE: "50",
        TransactionType.TRANSFER: "700",
        TransactionType.ADJUSTMENT: "25",
    }
    return [
        transaction_factory(t, amount, on=datetime(2025, 3, 1 + i, 10, 0))
        for i, (t, amount) in enumerate(amounts.items())
    ]
