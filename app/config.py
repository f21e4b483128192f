# app/config.py

from pydantic_settings import BaseSettings
from functools import lru_cache


EXCEL_MIME_TYPES = [
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Movimientos API"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    frontend_url: str = "http://localhost:3000"

    # Supabase
    supabase_url: str
    supabase_key: str

    # Tables
    movements_table: str = "TbMovimientos"
    ledger_table: str = "TbGastos"
    concepts_table: str = "TbConceptos"

    # Upload limits
    max_upload_bytes: int = 5 * 1024 * 1024
    allowed_mime_types: list[str] = EXCEL_MIME_TYPES + ["application/octet-stream"]

    # Parsing: reject rows with unparseable amounts/dates instead of defaulting
    strict_parsing: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
