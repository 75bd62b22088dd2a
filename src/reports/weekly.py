from __future__ import annotations

from application.savings import expenses_between
from domain.schemas import ReportRequest, ReportResponse, WeeklyAnalysis
from reports.base import Report, ReportData, trailing_weeks
from reports.registry import register_report

WEEKS = 4


@register_report
class WeeklyAnalysisReport(Report):
    name = "analytics.weekly"
    description = "Expense totals for the four Monday-start weeks ending with the current week, oldest first."

    def run(self, request: ReportRequest, data: ReportData) -> ReportResponse:
        weekly = {}
        for start, end in trailing_weeks(data.as_of, WEEKS):
            label = f"{start:%m/%d}~{end:%m/%d}"
            weekly[label] = expenses_between(data.transactions, start, min(end, data.as_of))
        analysis = WeeklyAnalysis(weekly_expenses=weekly)
        return ReportResponse(
            request_id=request.request_id,
            report=self.name,
            result=analysis.model_dump(by_alias=True),
        )
