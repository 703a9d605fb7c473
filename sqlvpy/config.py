"""
Configuration settings for sqlvpy.

Uses Pydantic Settings to load environment variables for the database
connection, the connection pool, record generation and benchmark defaults.
An invalid value (e.g. a non-integer ``NUM_RECORDS``) raises a
``pydantic.ValidationError`` when the settings are first loaded.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sqlvpy.domain.models import SMALLINT_MAX, SMALLINT_MIN

Candidate = Annotated[int, Field(ge=SMALLINT_MIN, le=SMALLINT_MAX)]
RecordCount = Annotated[int, Field(ge=0)]


class Settings(BaseSettings):
    # Database
    db_host: str = Field("127.0.0.1", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("password", alias="DB_PASSWORD")
    db_name: str = Field("testing", alias="DB_NAME")
    db_table: str = Field("testdata", alias="DB_TABLE")

    # Connection pool
    db_pool_min_size: int = Field(1, alias="DB_POOL_MIN_SIZE", ge=0)
    db_pool_max_size: int = Field(50, alias="DB_POOL_MAX_SIZE", ge=1)
    db_pool_max_lifetime: float = Field(5.0, alias="DB_POOL_MAX_LIFETIME", gt=0)

    # Application
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Population
    num_records: int = Field(100_000, alias="NUM_RECORDS", ge=0)
    rng_seed: Optional[int] = Field(None, alias="RNG_SEED")

    # Benchmark defaults
    benchmark_candidates: List[Candidate] = Field([1, 3, 5, 7], alias="BENCHMARK_CANDIDATES")
    benchmark_record_counts: List[RecordCount] = Field(
        [50, 100, 1_000, 5_000, 10_000, 50_000, 100_000], alias="BENCHMARK_RECORD_COUNTS"
    )
    benchmark_runs: int = Field(1, alias="BENCHMARK_RUNS", ge=1)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def dsn(self) -> str:
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
