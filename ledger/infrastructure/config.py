from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    duckdb_path: str
    tx_max_attempts: int
    allow_multiple_roles: bool
    log_level: str
    debug: bool


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        duckdb_path=os.environ.get("DUCKDB_PATH", ":memory:"),
        tx_max_attempts=max(1, int(os.environ.get("LEDGER_TX_MAX_ATTEMPTS", "5"))),
        allow_multiple_roles=_env_bool("LEDGER_ALLOW_MULTIPLE_ROLES", "true"),
        log_level=os.environ.get("LEDGER_LOG_LEVEL", "INFO").upper(),
        debug=_env_bool("API_DEBUG", "false"),
    )
