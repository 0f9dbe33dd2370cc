# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Report builders over already-fetched records.

Each report takes its records at construction and returns an immutable
pydantic result from `generate()`.
"""

from .base import BaseReport
from .cheques import ChequePortfolio, ChequePortfolioReport, ChequeRow
from .dashboard import DashboardReport, DashboardSummary
from .financial_reports import (
    CategoryAmount,
    CounterpartyTotal,
    FinancialReport,
    FinancialReportResult,
    ProjectProfitability,
    flows_to_frame,
)
from .margins import MarginReport, MarginReportResult, MarginSummary, QuoteMargin
from .performance import (
    PerformanceReport,
    PerformanceReportResult,
    PerformanceSummary,
    ProjectPerformance,
)

__all__ = [
    "BaseReport",
    "CategoryAmount",
    "ChequePortfolio",
    "ChequePortfolioReport",
    "ChequeRow",
    "CounterpartyTotal",
    "DashboardReport",
    "DashboardSummary",
    "FinancialReport",
    "FinancialReportResult",
    "MarginReport",
    "MarginReportResult",
    "MarginSummary",
    "PerformanceReport",
    "PerformanceReportResult",
    "PerformanceSummary",
    "ProjectPerformance",
    "ProjectProfitability",
    "QuoteMargin",
    "flows_to_frame",
]
