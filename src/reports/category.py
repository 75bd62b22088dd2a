from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from application.classifier import classify
from domain.models import SpendingCategory
from domain.schemas import CategoryAnalysis, ReportRequest, ReportResponse
from reports.base import Report, ReportData
from reports.registry import register_report

LOOKBACK = timedelta(weeks=4)


@register_report
class CategoryAnalysisReport(Report):
    name = "analytics.category"
    description = "Expenses of the last four weeks bucketed into the six spending categories."

    def run(self, request: ReportRequest, data: ReportData) -> ReportResponse:
        since = data.as_of - LOOKBACK
        totals = {category: Decimal("0") for category in SpendingCategory}
        for txn in data.transactions:
            if txn.is_expense and txn.posted_on >= since:
                totals[classify(txn.description)] += txn.amount
        analysis = CategoryAnalysis(category_expenses={c.value: total for c, total in totals.items()})
        return ReportResponse(
            request_id=request.request_id,
            report=self.name,
            result=analysis.model_dump(by_alias=True),
        )
