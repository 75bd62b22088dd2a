from __future__ import annotations

import logging
import time
import uuid
from datetime import date, datetime
from typing import Optional

from application.savings import Clock
from domain.models import DEFAULT_WEEKLY_TARGET, Budget
from domain.schemas import CategoryAnalysis, ReportRequest, ReportResponse, SavingTrend, WeeklyAnalysis
from infrastructure.persistence.store import BudgetStore, TransactionStore
from reports.base import ReportData, ReportSpec
from reports.registry import ReportRegistry

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Runs registered reports over a fresh transaction/budget snapshot."""

    def __init__(
        self,
        registry: ReportRegistry,
        transactions: TransactionStore,
        budget: BudgetStore,
        clock: Clock = datetime.now,
    ):
        self._registry = registry
        self._transactions = transactions
        self._budget = budget
        self._clock = clock

    def list_reports(self) -> list[ReportSpec]:
        return self._registry.list_specs()

    def run(self, report_name: str, as_of: Optional[date] = None) -> ReportResponse:
        now = self._clock()
        request = ReportRequest(
            request_id=f"rpt_{uuid.uuid4().hex[:12]}",
            report=report_name,
            as_of=as_of or now.date(),
        )
        logger.info("AnalyticsService running report=%s request_id=%s", report_name, request.request_id)
        t = time.perf_counter()
        try:
            report = self._registry.get_report(report_name)
            data = ReportData(
                transactions=self._transactions.list_all(),
                budget=self._budget.get() or Budget.default(now),
                as_of=request.as_of,
            )
            response = report.run(request, data)
        except Exception as exc:
            logger.exception("AnalyticsService failed report=%s", report_name)
            response = ReportResponse(
                request_id=request.request_id,
                report=report_name,
                ok=False,
                errors=[str(exc) or exc.__class__.__name__],
            )
        logger.info(
            "AnalyticsService finished report=%s in %.3fs ok=%s",
            report_name,
            time.perf_counter() - t,
            response.ok,
        )
        return response

    def get_weekly_analysis(self, as_of: Optional[date] = None) -> WeeklyAnalysis:
        response = self.run("analytics.weekly", as_of)
        return WeeklyAnalysis.model_validate(response.result) if response.ok else WeeklyAnalysis()

    def get_category_analysis(self, as_of: Optional[date] = None) -> CategoryAnalysis:
        response = self.run("analytics.category", as_of)
        return CategoryAnalysis.model_validate(response.result) if response.ok else CategoryAnalysis()

    def get_saving_trend(self, as_of: Optional[date] = None) -> SavingTrend:
        response = self.run("analytics.trend", as_of)
        if response.ok:
            return SavingTrend.model_validate(response.result)
        return SavingTrend(average_target=DEFAULT_WEEKLY_TARGET)
