from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from domain.models import MissionType, Stage
from domain.schemas import (
    BudgetView,
    CategoryAnalysis,
    CharacterView,
    MissionProgress,
    MissionView,
    ResetResult,
    SavingStatus,
    SavingTrend,
    TransactionCreate,
    TransactionView,
    WeeklyAnalysis,
)
from infrastructure.config import AppConfig
from infrastructure.persistence.store import RecordNotFoundError, StaleRecordError
from interface.cli import Services, build_services

logger = logging.getLogger(__name__)


def create_app(services: Optional[Services] = None, config: Optional[AppConfig] = None) -> FastAPI:
    config = config or AppConfig.from_env()
    services = services or build_services(config)
    engine = services.engine
    ledger = services.ledger
    analytics = services.analytics

    app = FastAPI(title="SavePet API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RecordNotFoundError)
    def not_found(_: Request, exc: RecordNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(StaleRecordError)
    def conflict(_: Request, exc: StaleRecordError) -> JSONResponse:
        logger.warning("Concurrent update rejected: %s", exc)
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    def bad_request(_: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # ---- transactions ----
    @app.get("/api/transactions")
    def list_transactions() -> list[TransactionView]:
        return [TransactionView.from_model(t) for t in ledger.list_transactions()]

    @app.post("/api/transactions")
    def create_transaction(payload: TransactionCreate) -> TransactionView:
        return TransactionView.from_model(ledger.record(payload))

    @app.delete("/api/transactions/reset")
    def reset_transactions() -> dict[str, Any]:
        removed = ledger.reset_transactions()
        return {"message": "거래 내역이 초기화되었습니다.", "deleted": removed}

    @app.delete("/api/transactions/{txn_id}")
    def delete_transaction(txn_id: int) -> dict[str, str]:
        ledger.delete(txn_id)
        return {"message": "거래가 삭제되었습니다."}

    @app.get("/api/transactions/daily/{day}")
    def daily_transactions(day: date) -> list[TransactionView]:
        return [TransactionView.from_model(t) for t in ledger.transactions_on(day)]

    # ---- budget ----
    @app.get("/api/budget/current")
    def current_budget() -> BudgetView:
        return BudgetView.from_model(ledger.current_budget())

    @app.post("/api/budget/set")
    def set_budget(amount: Decimal = Query(ge=0)) -> BudgetView:
        return BudgetView.from_model(ledger.set_budget(amount))

    # ---- character ----
    @app.get("/api/character")
    def get_character() -> CharacterView:
        return engine.describe(engine.get_or_create_character())

    @app.post("/api/character/add-experience")
    def add_experience(amount: Decimal = Query()) -> CharacterView:
        return engine.describe(engine.add_saving_experience(amount))

    @app.post("/api/character/check-weekly")
    def check_weekly() -> CharacterView:
        return engine.describe(engine.check_weekly_savings())

    @app.post("/api/character/check-daily")
    def check_daily() -> CharacterView:
        return engine.describe(engine.check_daily_savings())

    @app.post("/api/character/check-saving")
    def check_saving() -> CharacterView:
        return engine.describe(engine.check_saving_achievement())

    @app.get("/api/character/saving-status")
    def saving_status() -> SavingStatus:
        return engine.get_current_saving_status()

    @app.delete("/api/character/reset")
    def reset_character() -> dict[str, Any]:
        removed = engine.reset_character_data()
        return {"message": f"캐릭터 {removed}개가 초기화되었습니다.", "deleted": removed}

    # ---- missions ----
    @app.get("/api/missions")
    def list_missions(stage: Optional[Stage] = None) -> list[MissionView]:
        stage = stage or engine.get_or_create_character().stage
        return [MissionView.from_model(m) for m in engine.missions.get_current_missions(stage)]

    @app.get("/api/missions/progress")
    def mission_progress() -> MissionProgress:
        return engine.missions.get_mission_progress(engine.get_or_create_character().stage)

    @app.post("/api/missions/{stage}/{mission_type}/complete")
    def complete_mission(stage: Stage, mission_type: MissionType) -> MissionView:
        engine.get_or_create_character()
        mission = engine.missions.complete_mission(stage, mission_type)
        if mission is None:
            raise HTTPException(status_code=404, detail=f"No {mission_type.value} mission for stage {stage.value}")
        return MissionView.from_model(mission)

    # ---- analytics ----
    @app.get("/api/analytics/reports")
    def list_reports() -> list[dict[str, str]]:
        return [{"name": spec.name, "description": spec.description} for spec in analytics.list_reports()]

    @app.get("/api/analytics/weekly")
    def weekly_analysis() -> WeeklyAnalysis:
        return analytics.get_weekly_analysis()

    @app.get("/api/analytics/category")
    def category_analysis() -> CategoryAnalysis:
        return analytics.get_category_analysis()

    @app.get("/api/analytics/trend")
    def saving_trend() -> SavingTrend:
        return analytics.get_saving_trend()

    # ---- reset ----
    @app.delete("/api/reset/all")
    def reset_all() -> ResetResult:
        return engine.reset_all()

    return app
