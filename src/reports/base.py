from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, timedelta

from domain.models import Budget, Transaction, week_start
from domain.schemas import ReportRequest, ReportResponse


@dataclass(frozen=True)
class ReportSpec:
    name: str
    description: str


@dataclass(frozen=True)
class ReportData:
    """Snapshot a report computes over."""

    transactions: list[Transaction]
    budget: Budget
    as_of: date


def trailing_weeks(as_of: date, weeks: int) -> list[tuple[date, date]]:
    """`weeks` Monday-start windows ending with the one containing `as_of`, oldest first."""
    windows = []
    for back in range(weeks - 1, -1, -1):
        start = week_start(as_of - timedelta(weeks=back))
        windows.append((start, start + timedelta(days=6)))
    return windows


class Report(ABC):
    name: str
    description: str = ""

    @abstractmethod
    def run(self, request: ReportRequest, data: ReportData) -> ReportResponse:
        raise NotImplementedError

    def spec(self) -> ReportSpec:
        return ReportSpec(name=self.name, description=self.description)
