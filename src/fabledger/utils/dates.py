# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Date helpers driven by an explicit reference date.

Nothing here reads the clock: callers pass the "today" they want, which keeps
every derived view reproducible.
"""

from __future__ import annotations

import datetime
from typing import Dict, NamedTuple, Union

import pandas as pd
from dateutil.relativedelta import relativedelta

from ..core.primitives.enums import DueStatus

DateLike = Union[datetime.date, datetime.datetime, pd.Timestamp, str]


class DateRange(NamedTuple):
    start: datetime.date
    end: datetime.date


def to_naive_timestamp(value: DateLike) -> pd.Timestamp:
    """
    Normalize a date-like value to a timezone-naive Timestamp.

    Timezone-aware values are converted to UTC first so that values from
    different zones compare correctly.
    """
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def to_date(value: DateLike) -> datetime.date:
    return to_naive_timestamp(value).date()


def elapsed_days(reference_date: DateLike, earlier: DateLike) -> int:
    """Whole days from `earlier` to `reference_date`, floored (negative if in the future)."""
    delta = to_naive_timestamp(reference_date) - to_naive_timestamp(earlier)
    return delta.days


def days_until(due_date: DateLike, reference_date: DateLike) -> int:
    """Calendar days from the reference day to the due day (negative when past due)."""
    return (to_date(due_date) - to_date(reference_date)).days


def due_status(
    due_date: DateLike, reference_date: DateLike, soon_days: int = 3
) -> DueStatus:
    """
    Classify a due date as overdue, due soon (within `soon_days`) or fine.
    """
    remaining = days_until(due_date, reference_date)
    if remaining < 0:
        return DueStatus.OVERDUE
    if remaining <= soon_days:
        return DueStatus.DUE_SOON
    return DueStatus.OK


def date_ranges(reference_date: DateLike) -> Dict[str, DateRange]:
    """Standard filter ranges ending on the reference day."""
    today = to_date(reference_date)
    return {
        "today": DateRange(today, today),
        "last_7_days": DateRange(today - datetime.timedelta(days=7), today),
        "last_30_days": DateRange(today - datetime.timedelta(days=30), today),
        "this_month": DateRange(today.replace(day=1), today),
        "this_year": DateRange(today.replace(month=1, day=1), today),
    }


def month_start(value: DateLike, months_offset: int = 0) -> datetime.date:
    """First day of the month containing `value`, shifted by `months_offset` months."""
    first = to_date(value).replace(day=1)
    return first + relativedelta(months=months_offset)


def format_date(value: DateLike, fmt: str = "%d/%m/%Y") -> str:
    return to_naive_timestamp(value).strftime(fmt)


def format_period(start: DateLike, end: DateLike) -> str:
    """Human-readable range, day-first as used on the business's reports."""
    return f"{format_date(start)} - {format_date(end)}"
