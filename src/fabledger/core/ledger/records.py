# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Record models for everything the ledger consumes.

Records arrive from the data-fetch layer as loosely typed rows. Constructing
one of these models is the validation boundary: missing fields, negative
amounts, unknown type or currency codes and unexpected columns all raise
`pydantic.ValidationError` here, so the aggregators downstream can assume
well-formed input.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Optional
from uuid import NAMESPACE_URL, UUID, uuid4, uuid5

from pydantic import Field, TypeAdapter, field_validator, model_validator

from ..primitives import (
    ChequeStatus,
    Currency,
    FlowDirection,
    Model,
    NonNegativeDecimal,
    OrderStatus,
    QuoteStatus,
    TransactionType,
    ValidationMixin,
    coerce_source_code,
)
from .mapper import FlowDirectionMapper


# Payment method attributed to overhead booked outside the transaction log
GENERAL_EXPENSE_PAYMENT_METHOD = uuid5(NAMESPACE_URL, "fabledger:general-expense")


def _to_datetime(value: Any) -> Any:
    """Promote bare dates to midnight datetimes; leave everything else to pydantic."""
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return datetime.datetime.combine(value, datetime.time.min)
    return value


def _to_naive_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    """Store every instant as naive UTC so records from different zones compare."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return value


class Transaction(Model):
    """
    Immutable record of a single money movement.

    Attributes:
        id: Unique identifier for auditability
        type: One of the eight transaction kinds; decides the sign of the amount
        amount: Non-negative magnitude; direction comes from `type`
        currency: LOCAL or USD
        date: When the movement happened
        payment_method_id: Payment method used (cash, transfer, cheque...)
        client_id: Client involved, for income-like movements
        supplier_id: Supplier involved, for purchases
        order_id: Sales order the movement is attached to
        concept: Short free-text description
        exchange_rate: Rate recorded at the time for USD movements
    """

    type: TransactionType
    amount: NonNegativeDecimal
    date: datetime.datetime
    payment_method_id: UUID
    currency: Currency = Currency.LOCAL
    client_id: Optional[UUID] = None
    supplier_id: Optional[UUID] = None
    order_id: Optional[UUID] = None
    concept: str = Field(default="", max_length=200)
    exchange_rate: Optional[Decimal] = Field(default=None, gt=0)
    id: UUID = Field(default_factory=uuid4)

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, v: Any) -> Any:
        return coerce_source_code(TransactionType, v)

    @field_validator("currency", mode="before")
    @classmethod
    def _coerce_currency(cls, v: Any) -> Any:
        return coerce_source_code(Currency, v)

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Any:
        return _to_datetime(v)

    @field_validator("date", mode="after")
    @classmethod
    def _normalize_tz(cls, v: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
        return _to_naive_utc(v)

    @property
    def direction(self) -> FlowDirection:
        return FlowDirectionMapper.direction(self.type)

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign its type contributes to net flow (0 for neutral types)."""
        return FlowDirectionMapper.signed_amount(self.type, self.amount)


class Sale(Model):
    """
    A confirmed sales order (venta / obra) and what has been collected on it.

    `outstanding` is never clamped: a negative value means the client paid
    more than the order total.
    """

    number: str
    client_name: str
    order_date: datetime.datetime
    total: NonNegativeDecimal
    collected: NonNegativeDecimal = Decimal("0")
    status: OrderStatus = OrderStatus.PENDING
    currency: Currency = Currency.LOCAL
    delivery_date: Optional[datetime.datetime] = None
    actual_delivery_date: Optional[datetime.datetime] = None
    material_cost: NonNegativeDecimal = Decimal("0")
    expense_total: NonNegativeDecimal = Decimal("0")
    client_id: Optional[UUID] = None
    id: UUID = Field(default_factory=uuid4)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v: Any) -> Any:
        return coerce_source_code(OrderStatus, v)

    @field_validator("currency", mode="before")
    @classmethod
    def _coerce_currency(cls, v: Any) -> Any:
        return coerce_source_code(Currency, v)

    @field_validator("order_date", "delivery_date", "actual_delivery_date", mode="before")
    @classmethod
    def _coerce_dates(cls, v: Any) -> Any:
        return _to_datetime(v)

    @field_validator("order_date", "delivery_date", "actual_delivery_date", mode="after")
    @classmethod
    def _normalize_tz(cls, v: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
        return _to_naive_utc(v)

    @property
    def outstanding(self) -> Decimal:
        return self.total - self.collected

    @property
    def total_cost(self) -> Decimal:
        return self.material_cost + self.expense_total


class Quote(Model, ValidationMixin):
    """A quote (presupuesto) with the sales and expenses later booked against it."""

    number: str
    client_name: str
    issue_date: datetime.datetime
    total: NonNegativeDecimal
    sold_total: NonNegativeDecimal = Decimal("0")
    expense_total: NonNegativeDecimal = Decimal("0")
    status: QuoteStatus = QuoteStatus.PENDING
    currency: Currency = Currency.LOCAL
    valid_until: Optional[datetime.datetime] = None
    id: UUID = Field(default_factory=uuid4)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v: Any) -> Any:
        return coerce_source_code(QuoteStatus, v)

    @field_validator("currency", mode="before")
    @classmethod
    def _coerce_currency(cls, v: Any) -> Any:
        return coerce_source_code(Currency, v)

    @field_validator("issue_date", "valid_until", mode="before")
    @classmethod
    def _coerce_dates(cls, v: Any) -> Any:
        return _to_datetime(v)

    @field_validator("issue_date", "valid_until", mode="after")
    @classmethod
    def _normalize_tz(cls, v: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
        return _to_naive_utc(v)

    @model_validator(mode="after")
    def _check_validity_window(self) -> "Quote":
        self.validate_date_ordering(
            self.issue_date, self.valid_until, "issue_date", "valid_until"
        )
        return self


class Cheque(Model, ValidationMixin):
    """A postdated cheque received from a client and tracked until it clears."""

    number: str = Field(min_length=1, max_length=20)
    bank: str = Field(min_length=1, max_length=100)
    issue_date: datetime.datetime
    due_date: datetime.datetime
    amount: NonNegativeDecimal
    status: ChequeStatus = ChequeStatus.IN_PORTFOLIO
    currency: Currency = Currency.LOCAL
    client_id: Optional[UUID] = None
    id: UUID = Field(default_factory=uuid4)

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, v: Any) -> Any:
        return coerce_source_code(ChequeStatus, v)

    @field_validator("currency", mode="before")
    @classmethod
    def _coerce_currency(cls, v: Any) -> Any:
        return coerce_source_code(Currency, v)

    @field_validator("issue_date", "due_date", mode="before")
    @classmethod
    def _coerce_dates(cls, v: Any) -> Any:
        return _to_datetime(v)

    @field_validator("issue_date", "due_date", mode="after")
    @classmethod
    def _normalize_tz(cls, v: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
        return _to_naive_utc(v)

    @model_validator(mode="after")
    def _check_due_after_issue(self) -> "Cheque":
        self.validate_date_ordering(
            self.issue_date, self.due_date, "issue_date", "due_date"
        )
        return self


class GeneralExpense(Model):
    """An overhead expense (gasto general) recorded outside the transaction log."""

    description: str
    amount: NonNegativeDecimal
    date: datetime.datetime
    currency: Currency = Currency.LOCAL
    category: Optional[str] = None
    id: UUID = Field(default_factory=uuid4)

    @field_validator("currency", mode="before")
    @classmethod
    def _coerce_currency(cls, v: Any) -> Any:
        return coerce_source_code(Currency, v)

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Any:
        return _to_datetime(v)

    @field_validator("date", mode="after")
    @classmethod
    def _normalize_tz(cls, v: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
        return _to_naive_utc(v)

    def to_transaction(
        self, payment_method_id: UUID = GENERAL_EXPENSE_PAYMENT_METHOD
    ) -> Transaction:
        """Express this expense as a GENERAL_EXPENSE transaction."""
        return Transaction(
            type=TransactionType.GENERAL_EXPENSE,
            amount=self.amount,
            currency=self.currency,
            date=self.date,
            payment_method_id=payment_method_id,
            concept=self.description[:200],
            id=self.id,
        )


_TRANSACTION_LIST = TypeAdapter(List[Transaction])


def parse_transactions(rows: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    """
    Validate raw rows into Transaction records.

    Raises:
        pydantic.ValidationError: On the first malformed row batch; the error
            locations carry the row index.
    """
    return _TRANSACTION_LIST.validate_python(list(rows))
