from __future__ import annotations

import os
from dataclasses import dataclass, field

from domain.models import DEFAULT_CHARACTER_NAME


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class AppConfig:
    store: str = "sqlite"
    db_path: str = "savepet.db"
    character_name: str = DEFAULT_CHARACTER_NAME
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])

    @classmethod
    def from_env(cls) -> "AppConfig":
        store = os.getenv("SAVEPET_STORE", "sqlite").strip().lower()
        if store not in ("memory", "sqlite"):
            raise ValueError(f"SAVEPET_STORE must be 'memory' or 'sqlite', got {store!r}")
        return cls(
            store=store,
            db_path=os.getenv("SAVEPET_DB_PATH", "savepet.db"),
            character_name=os.getenv("SAVEPET_CHARACTER_NAME", DEFAULT_CHARACTER_NAME),
            cors_origins=_split_csv(os.getenv("SAVEPET_CORS_ORIGINS", "http://localhost:3000")),
        )
