from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class DatabaseConfig:
    host: str
    port: int
    database: str
    user: str
    password: str

    @property
    def dsn(self) -> str:
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass(frozen=True)
class AppConfig:
    db_dsn: str
    db_pool_min_size: int = 1
    db_pool_max_size: int = 4
    recalc_concurrency: int = 1
    log_level: str = "INFO"


def load_config() -> AppConfig:
    """Load application config from environment variables.

    Loads .env file if present in the current directory. Without DATABASE_URL
    the DSN is assembled from the PG* variables when PGHOST is set. The
    recalculation concurrency never exceeds the connection pool size.
    """
    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    pool_min = max(1, int(os.environ.get("DB_POOL_MIN_SIZE", "1")))
    pool_max = max(pool_min, int(os.environ.get("DB_POOL_MAX_SIZE", "4")))
    concurrency = int(os.environ.get("RECALC_CONCURRENCY", "1"))

    db_dsn = os.environ.get("DATABASE_URL", "")
    if not db_dsn and os.environ.get("PGHOST"):
        db_dsn = DatabaseConfig(
            host=os.environ["PGHOST"],
            port=int(os.environ.get("PGPORT", "5432")),
            database=os.environ.get("PGDATABASE", "forecastscore"),
            user=os.environ.get("PGUSER", "postgres"),
            password=os.environ.get("PGPASSWORD", ""),
        ).dsn

    return AppConfig(
        db_dsn=db_dsn,
        db_pool_min_size=pool_min,
        db_pool_max_size=pool_max,
        recalc_concurrency=min(max(1, concurrency), pool_max),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
