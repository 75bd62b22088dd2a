from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from application.savings import expenses_between
from domain.schemas import ReportRequest, ReportResponse, SavingTrend
from reports.base import Report, ReportData, trailing_weeks
from reports.registry import register_report

WEEKS = 8
MIN_POINTS = 4


def is_improving(weekly_totals: Sequence[Decimal]) -> bool:
    """Recent two-week average spend below the earliest two-week average."""
    if len(weekly_totals) < MIN_POINTS:
        return False
    recent = (weekly_totals[-1] + weekly_totals[-2]) / 2
    earliest = (weekly_totals[0] + weekly_totals[1]) / 2
    return recent < earliest


@register_report
class SavingTrendReport(Report):
    name = "analytics.trend"
    description = "Eight weeks of expense totals and whether spending is trending down."

    def run(self, request: ReportRequest, data: ReportData) -> ReportResponse:
        weekly = {}
        for start, end in trailing_weeks(data.as_of, WEEKS):
            weekly[f"{start:%m/%d}"] = expenses_between(data.transactions, start, min(end, data.as_of))
        trend = SavingTrend(
            weekly_expenses=weekly,
            improving=is_improving(list(weekly.values())),
            average_target=data.budget.target_amount,
        )
        return ReportResponse(
            request_id=request.request_id,
            report=self.name,
            result=trend.model_dump(by_alias=True),
        )
