# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum
from typing import Dict


class SourceCodeEnum(str, Enum):
    """
    String enum that also accepts the codes used by the source ERP.

    The REST layer that feeds this library emits Spanish codes ("INGRESO",
    "PESOS", ...). Subclasses declare a `_source_codes()` mapping and lookup by
    either form resolves to the same member. Unknown codes still fail, which
    keeps the set closed.
    """

    @classmethod
    def _source_codes(cls) -> Dict[str, str]:
        return {}

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            canonical = cls._source_codes().get(value.upper())
            if canonical is not None:
                return cls(canonical)
            for member in cls:
                if member.value == value.upper():
                    return member
        return None


class TransactionType(SourceCodeEnum):
    """
    Closed set of transaction kinds recorded by the business.

    The type alone decides the sign of a transaction when computing net flow:
    - INCOME, ADVANCE, WORK_PAYMENT -> inflow (adds)
    - EXPENSE, SUPPLIER_PAYMENT, GENERAL_EXPENSE -> outflow (subtracts)
    - TRANSFER, ADJUSTMENT -> neutral, excluded from income and expense totals
    """

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    ADVANCE = "ADVANCE"
    WORK_PAYMENT = "WORK_PAYMENT"
    SUPPLIER_PAYMENT = "SUPPLIER_PAYMENT"
    GENERAL_EXPENSE = "GENERAL_EXPENSE"
    TRANSFER = "TRANSFER"
    ADJUSTMENT = "ADJUSTMENT"

    @classmethod
    def _source_codes(cls) -> Dict[str, str]:
        return {
            "INGRESO": "INCOME",
            "EGRESO": "EXPENSE",
            "ANTICIPO": "ADVANCE",
            "PAGO_OBRA": "WORK_PAYMENT",
            "PAGO_PROVEEDOR": "SUPPLIER_PAYMENT",
            "GASTO_GENERAL": "GENERAL_EXPENSE",
            "TRANSFERENCIA": "TRANSFER",
            "AJUSTE": "ADJUSTMENT",
        }


class FlowDirection(str, Enum):
    """Direction a transaction type contributes to net flow."""

    INFLOW = "Inflow"
    OUTFLOW = "Outflow"
    NEUTRAL = "Neutral"


class Currency(SourceCodeEnum):
    """Currencies the business operates in (local peso and US dollar)."""

    LOCAL = "LOCAL"
    USD = "USD"

    @classmethod
    def _source_codes(cls) -> Dict[str, str]:
        return {"PESOS": "LOCAL", "ARS": "LOCAL", "DOLARES": "USD"}


class Granularity(str, Enum):
    """Bucket size for period aggregation."""

    DAY = "day"
    MONTH = "month"

    @property
    def freq(self) -> str:
        """pandas Period frequency alias for this granularity."""
        return "D" if self is Granularity.DAY else "M"


class AgingBucket(str, Enum):
    """
    Age classification of an outstanding balance.

    Values are stable identifiers; `label` is the display range.
    """

    CURRENT = "current"
    DAYS_31_60 = "31_60"
    DAYS_61_90 = "61_90"
    DAYS_90_PLUS = "90_plus"

    @property
    def label(self) -> str:
        return _AGING_LABELS[self]


_AGING_LABELS = {
    AgingBucket.CURRENT: "0-30",
    AgingBucket.DAYS_31_60: "31-60",
    AgingBucket.DAYS_61_90: "61-90",
    AgingBucket.DAYS_90_PLUS: "90+",
}


class OrderStatus(SourceCodeEnum):
    """Lifecycle of a sales order (venta / obra)."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    IN_PRODUCTION = "IN_PRODUCTION"
    READY_FOR_DELIVERY = "READY_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    INVOICED = "INVOICED"
    COLLECTED = "COLLECTED"
    CANCELLED = "CANCELLED"

    @classmethod
    def _source_codes(cls) -> Dict[str, str]:
        return {
            "PENDIENTE": "PENDING",
            "CONFIRMADO": "CONFIRMED",
            "EN_PROCESO": "IN_PROGRESS",
            "EN_PRODUCCION": "IN_PRODUCTION",
            "LISTO_ENTREGA": "READY_FOR_DELIVERY",
            "ENTREGADO": "DELIVERED",
            "FACTURADO": "INVOICED",
            "COBRADO": "COLLECTED",
            "CANCELADO": "CANCELLED",
        }

    @property
    def is_completed(self) -> bool:
        """Delivered orders count toward project profitability."""
        return self in (
            OrderStatus.DELIVERED,
            OrderStatus.INVOICED,
            OrderStatus.COLLECTED,
        )


class QuoteStatus(SourceCodeEnum):
    """Lifecycle of a quote (presupuesto)."""

    PENDING = "PENDING"
    SENT = "SENT"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"
    CONVERTED = "CONVERTED"

    @classmethod
    def _source_codes(cls) -> Dict[str, str]:
        return {
            "PENDIENTE": "PENDING",
            "ENVIADO": "SENT",
            "APROBADO": "APPROVED",
            "RECHAZADO": "REJECTED",
            "VENCIDO": "EXPIRED",
            "CONVERTIDO": "CONVERTED",
        }


class ChequeStatus(SourceCodeEnum):
    """Lifecycle of a postdated cheque held by the business."""

    IN_PORTFOLIO = "IN_PORTFOLIO"
    DEPOSITED = "DEPOSITED"
    CLEARED = "CLEARED"
    REJECTED = "REJECTED"
    ENDORSED = "ENDORSED"
    VOIDED = "VOIDED"

    @classmethod
    def _source_codes(cls) -> Dict[str, str]:
        return {
            "CARTERA": "IN_PORTFOLIO",
            "DEPOSITADO": "DEPOSITED",
            "COBRADO": "CLEARED",
            "RECHAZADO": "REJECTED",
            "ENDOSADO": "ENDORSED",
            "ANULADO": "VOIDED",
        }


class MarginStatus(str, Enum):
    """Sign of a gross margin."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    BREAK_EVEN = "break_even"


class DueStatus(str, Enum):
    """Proximity of a due date relative to a reference date."""

    OVERDUE = "overdue"
    DUE_SOON = "due_soon"
    OK = "ok"


class Trend(str, Enum):
    """Direction of a projected cash flow."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
