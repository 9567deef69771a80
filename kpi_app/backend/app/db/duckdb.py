"""DuckDB FastAPI 依賴注入模組（每請求一條連線）。"""

from __future__ import annotations

from typing import Generator

from kpi_app.backend.app.core.config import get_app_settings
from kpi_app.storage.duckdb_client import DuckDBClient
from kpi_app.storage.schema import initialize_duckdb


def get_duckdb_client() -> Generator[DuckDBClient, None, None]:
    """
    提供可讀寫的 DuckDB 連線給 API（每個請求一條連線，用完關閉）。
    每日 KPI 與目標都需要寫入，因此不採唯讀模式。
    """
    client = DuckDBClient(db_path=get_app_settings().storage.duckdb_path, read_only=False)
    try:
        client.connect()  # 提前建立，若錯誤可及早拋出
        yield client
    finally:
        client.close()


def bootstrap_schema(db_path: str | None = None) -> None:
    """啟動時確保資料夾與資料表存在。"""
    with DuckDBClient(db_path=db_path or get_app_settings().storage.duckdb_path) as client:
        initialize_duckdb(client)
