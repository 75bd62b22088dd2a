from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from application.analytics import AnalyticsService
from application.engine import SavePetEngine
from application.ledger import LedgerService
from application.savings import Clock
from domain.schemas import BudgetView, TransactionCreate, TransactionView
from infrastructure.config import AppConfig
from infrastructure.persistence.db_manager import DatabaseManager
from infrastructure.persistence.memory_store import build_memory_stores
from infrastructure.persistence.sqlite_store import build_sqlite_stores
from infrastructure.persistence.store import Stores
from reports.registry import registry

logger = logging.getLogger(__name__)


@dataclass
class Services:
    engine: SavePetEngine
    ledger: LedgerService
    analytics: AnalyticsService


def build_stores(config: AppConfig) -> Stores:
    if config.store == "memory":
        return build_memory_stores()
    return build_sqlite_stores(DatabaseManager(config.db_path))


def build_services(
    config: Optional[AppConfig] = None,
    stores: Optional[Stores] = None,
    clock: Clock = datetime.now,
) -> Services:
    config = config or AppConfig.from_env()
    stores = stores or build_stores(config)
    logger.info("Building services store=%s", config.store)
    return Services(
        engine=SavePetEngine(stores, clock=clock, character_name=config.character_name),
        ledger=LedgerService(stores.transactions, stores.budget, clock=clock),
        analytics=AnalyticsService(registry, stores.transactions, stores.budget, clock=clock),
    )


def _amount(raw: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}") from exc


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="savepet", description="SavePet savings character")
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("status", help="current saving status")
    sub.add_parser("character", help="show (or hatch) the character")
    sub.add_parser("check-weekly", help="award experience for this week's savings")
    sub.add_parser("check-daily", help="award experience for today's savings")
    sub.add_parser("check-saving", help="award the weekly achievement bonus")
    add_exp = sub.add_parser("add-exp", help="add experience for a saved amount")
    add_exp.add_argument("amount", type=_amount)
    budget = sub.add_parser("set-budget", help="set the weekly budget target")
    budget.add_argument("amount", type=_amount)
    for kind in ("income", "expense"):
        txn = sub.add_parser(kind, help=f"record an {kind}")
        txn.add_argument("amount", type=_amount)
        txn.add_argument("description", nargs="?", default="")
    for report in ("weekly", "category", "trend"):
        sub.add_parser(report, help=f"{report} analytics")
    sub.add_parser("reset", help="delete all data")
    return parser


def run(argv: Optional[Sequence[str]] = None, services: Optional[Services] = None) -> str:
    args = _parser().parse_args(argv)
    services = services or build_services()
    engine = services.engine
    command = args.command or "status"

    if command == "status":
        out = engine.get_current_saving_status()
    elif command == "character":
        out = engine.describe(engine.get_or_create_character())
    elif command == "check-weekly":
        out = engine.describe(engine.check_weekly_savings())
    elif command == "check-daily":
        out = engine.describe(engine.check_daily_savings())
    elif command == "check-saving":
        out = engine.describe(engine.check_saving_achievement())
    elif command == "add-exp":
        out = engine.describe(engine.add_saving_experience(args.amount))
    elif command == "set-budget":
        out = BudgetView.from_model(services.ledger.set_budget(args.amount))
    elif command in ("income", "expense"):
        txn = services.ledger.record(
            TransactionCreate(type=command, amount=args.amount, description=args.description)
        )
        out = TransactionView.from_model(txn)
    elif command == "weekly":
        out = services.analytics.get_weekly_analysis()
    elif command == "category":
        out = services.analytics.get_category_analysis()
    elif command == "trend":
        out = services.analytics.get_saving_trend()
    else:
        out = engine.reset_all()
    return out.model_dump_json(indent=2, by_alias=True)


def main(argv: Optional[Sequence[str]] = None) -> None:
    print(run(argv))


if __name__ == "__main__":
    main()
