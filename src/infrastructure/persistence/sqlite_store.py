from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from domain.models import (
    Budget,
    Character,
    Mission,
    MissionType,
    Stage,
    Transaction,
    TransactionType,
)
from infrastructure.persistence.db_manager import DatabaseManager
from infrastructure.persistence.store import (
    BudgetStore,
    CharacterStore,
    MissionStore,
    RecordNotFoundError,
    StaleRecordError,
    Stores,
    TransactionStore,
)


def _dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _iso(value: Optional[datetime | date]) -> Optional[str]:
    return value.isoformat() if value else None


class SqliteTransactionStore(TransactionStore):
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            type=TransactionType(row["type"]),
            amount=Decimal(row["amount"]),
            description=row["description"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def list_all(self) -> list[Transaction]:
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM transactions ORDER BY created_at DESC, id DESC"
            ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def list_for_day(self, day: date) -> list[Transaction]:
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM transactions WHERE substr(created_at, 1, 10) = ? ORDER BY created_at DESC, id DESC",
                (day.isoformat(),),
            ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def add(self, txn: Transaction) -> Transaction:
        with self._db.transaction() as conn:
            cur = conn.execute(
                """INSERT INTO transactions(type, amount, description, created_at)
                   VALUES (?, ?, ?, ?)""",
                (txn.type.value, str(txn.amount), txn.description, txn.created_at.isoformat()),
            )
            new_id = cur.lastrowid
        return Transaction(
            id=new_id,
            type=txn.type,
            amount=txn.amount,
            description=txn.description,
            created_at=txn.created_at,
        )

    def delete(self, txn_id: int) -> None:
        with self._db.transaction() as conn:
            cur = conn.execute("DELETE FROM transactions WHERE id = ?", (txn_id,))
            if cur.rowcount == 0:
                raise RecordNotFoundError(f"Transaction not found: {txn_id}")

    def delete_all(self) -> int:
        with self._db.transaction() as conn:
            return conn.execute("DELETE FROM transactions").rowcount


class SqliteBudgetStore(BudgetStore):
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Budget:
        return Budget(
            id=row["id"],
            period=row["period"],
            target_amount=Decimal(row["target_amount"]),
            start_date=date.fromisoformat(row["start_date"]),
            end_date=date.fromisoformat(row["end_date"]),
            updated_at=date.fromisoformat(row["updated_at"]),
            version=row["version"],
        )

    def get(self) -> Optional[Budget]:
        with self._db.transaction() as conn:
            row = conn.execute("SELECT * FROM budget WHERE id = ?", (1,)).fetchone()
        return self._row_to_model(row) if row else None

    def save(self, budget: Budget) -> Budget:
        params = (
            budget.period,
            str(budget.target_amount),
            budget.start_date.isoformat(),
            budget.end_date.isoformat(),
            budget.updated_at.isoformat(),
        )
        with self._db.transaction() as conn:
            if budget.version == 0:
                cur = conn.execute(
                    """INSERT OR IGNORE INTO budget(id, period, target_amount, start_date, end_date, updated_at, version)
                       VALUES (1, ?, ?, ?, ?, ?, 1)""",
                    params,
                )
            else:
                cur = conn.execute(
                    """UPDATE budget
                       SET period = ?, target_amount = ?, start_date = ?, end_date = ?, updated_at = ?,
                           version = version + 1
                       WHERE id = 1 AND version = ?""",
                    params + (budget.version,),
                )
            if cur.rowcount == 0:
                raise StaleRecordError(f"Budget version {budget.version} is stale")
            row = conn.execute("SELECT * FROM budget WHERE id = 1").fetchone()
        return self._row_to_model(row)


class SqliteCharacterStore(CharacterStore):
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Character:
        return Character(
            id=row["id"],
            name=row["name"],
            level=row["level"],
            experience=row["experience"],
            stage=Stage(row["stage"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            last_evolution_at=_dt(row["last_evolution_at"]),
            version=row["version"],
        )

    def get_latest(self) -> Optional[Character]:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM characters ORDER BY created_at DESC, id DESC LIMIT 1"
            ).fetchone()
        return self._row_to_model(row) if row else None

    def save(self, character: Character) -> Character:
        with self._db.transaction() as conn:
            if character.id is None:
                cur = conn.execute(
                    """INSERT INTO characters(name, level, experience, stage, created_at, last_evolution_at, version)
                       VALUES (?, ?, ?, ?, ?, ?, 1)""",
                    (
                        character.name,
                        character.level,
                        character.experience,
                        character.stage.value,
                        character.created_at.isoformat(),
                        _iso(character.last_evolution_at),
                    ),
                )
                char_id = cur.lastrowid
            else:
                char_id = character.id
                cur = conn.execute(
                    """UPDATE characters
                       SET name = ?, level = ?, experience = ?, stage = ?, last_evolution_at = ?,
                           version = version + 1
                       WHERE id = ? AND version = ?""",
                    (
                        character.name,
                        character.level,
                        character.experience,
                        character.stage.value,
                        _iso(character.last_evolution_at),
                        char_id,
                        character.version,
                    ),
                )
                if cur.rowcount == 0:
                    exists = conn.execute("SELECT 1 FROM characters WHERE id = ?", (char_id,)).fetchone()
                    if exists is None:
                        raise RecordNotFoundError(f"Character not found: {char_id}")
                    raise StaleRecordError(f"Character {char_id} version {character.version} is stale")
            row = conn.execute("SELECT * FROM characters WHERE id = ?", (char_id,)).fetchone()
        return self._row_to_model(row)

    def delete_all(self) -> int:
        with self._db.transaction() as conn:
            return conn.execute("DELETE FROM characters").rowcount


class SqliteMissionStore(MissionStore):
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Mission:
        return Mission(
            id=row["id"],
            stage=Stage(row["stage"]),
            mission_type=MissionType(row["mission_type"]),
            description=row["description"],
            target_amount=Decimal(row["target_amount"]),
            completed=bool(row["completed"]),
            completed_at=_dt(row["completed_at"]),
        )

    def count(self) -> int:
        with self._db.transaction() as conn:
            return conn.execute("SELECT COUNT(*) FROM missions").fetchone()[0]

    def add(self, mission: Mission) -> Mission:
        with self._db.transaction() as conn:
            cur = conn.execute(
                """INSERT INTO missions(stage, mission_type, description, target_amount, completed, completed_at)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    mission.stage.value,
                    mission.mission_type.value,
                    mission.description,
                    str(mission.target_amount),
                    int(mission.completed),
                    _iso(mission.completed_at),
                ),
            )
            row = conn.execute("SELECT * FROM missions WHERE id = ?", (cur.lastrowid,)).fetchone()
        return self._row_to_model(row)

    def save(self, mission: Mission) -> Mission:
        with self._db.transaction() as conn:
            cur = conn.execute(
                """UPDATE missions
                   SET description = ?, target_amount = ?, completed = ?, completed_at = ?
                   WHERE id = ?""",
                (
                    mission.description,
                    str(mission.target_amount),
                    int(mission.completed),
                    _iso(mission.completed_at),
                    mission.id,
                ),
            )
            if cur.rowcount == 0:
                raise RecordNotFoundError(f"Mission not found: {mission.id}")
            row = conn.execute("SELECT * FROM missions WHERE id = ?", (mission.id,)).fetchone()
        return self._row_to_model(row)

    def list_for_stage(self, stage: Stage) -> list[Mission]:
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM missions WHERE stage = ? ORDER BY id ASC", (stage.value,)
            ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def find(self, stage: Stage, mission_type: MissionType) -> Optional[Mission]:
        with self._db.transaction() as conn:
            row = conn.execute(
                "SELECT * FROM missions WHERE stage = ? AND mission_type = ?",
                (stage.value, mission_type.value),
            ).fetchone()
        return self._row_to_model(row) if row else None

    def list_completed(self) -> list[Mission]:
        with self._db.transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM missions WHERE completed = 1 ORDER BY id ASC"
            ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def delete_all(self) -> int:
        with self._db.transaction() as conn:
            return conn.execute("DELETE FROM missions").rowcount


def build_sqlite_stores(db: DatabaseManager) -> Stores:
    db.initialize()
    return Stores(
        transactions=SqliteTransactionStore(db),
        budget=SqliteBudgetStore(db),
        characters=SqliteCharacterStore(db),
        missions=SqliteMissionStore(db),
    )
