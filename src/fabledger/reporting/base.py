# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Base reporting classes.

Reports combine already-fetched records with the LedgerAggregator and
LedgerQueries into presentation-ready result models. They hold no state
beyond their inputs and settings.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Type, TypeVar

from ..analysis.aggregator import LedgerAggregator
from ..core.primitives import GlobalSettings

T = TypeVar("T")


class BaseReport(ABC):
    """
    Abstract base class for all report builders.

    Subclasses receive their records in `__init__` and produce an immutable
    result from `generate()`.
    """

    def __init__(self, settings: Optional[GlobalSettings] = None):
        self.settings = settings or GlobalSettings()
        self.aggregator = LedgerAggregator(self.settings)

    @property
    def places(self) -> int:
        return self.settings.reporting.decimal_precision

    @staticmethod
    def _require(records: Iterable[Any], record_type: Type[T], name: str) -> List[T]:
        """Materialize `records`, rejecting anything that is not a `record_type`."""
        items = list(records)
        for item in items:
            if not isinstance(item, record_type):
                raise TypeError(
                    f"{name} must contain {record_type.__name__} objects, "
                    f"got {type(item).__name__}"
                )
        return items

    @abstractmethod
    def generate(self, **kwargs) -> Any:
        """
        Build the report output.

        Implementations delegate arithmetic to the aggregator and queries
        and only assemble and filter here.
        """
        pass
