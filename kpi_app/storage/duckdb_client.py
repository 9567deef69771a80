"""KPI 資料庫（DuckDB 檔案）的連線與查詢封裝。"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Sequence

import duckdb
from duckdb import DuckDBPyConnection

from kpi_app.config.settings import settings
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)

Params = Sequence[Any] | None

MEMORY_PATH = ":memory:"


class DuckDBClient:
    """
    單一 KPI 資料庫檔案的連線。

    - 可寫連線會先建立資料夾；唯讀連線遇到不存在的檔案直接由 duckdb 拋錯。
    - 查詢結果一律以 list[dict] 回傳，缺值（NULL）交給 models 層正規化。
    """

    def __init__(self, db_path: str | None = None, read_only: bool = False) -> None:
        self.db_path = db_path or settings.storage.duckdb_path
        self.read_only = read_only
        self._conn: DuckDBPyConnection | None = None

    @property
    def is_file(self) -> bool:
        return self.db_path != MEMORY_PATH

    def connect(self) -> DuckDBPyConnection:
        if self._conn is None:
            if self.is_file and not self.read_only:
                folder = os.path.dirname(self.db_path)
                if folder:
                    os.makedirs(folder, exist_ok=True)
            logger.debug("開啟 KPI 資料庫：%s (read_only=%s)", self.db_path, self.read_only)
            self._conn = duckdb.connect(self.db_path, read_only=self.read_only)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "DuckDBClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[DuckDBPyConnection]:
        """BEGIN / COMMIT；區塊內拋錯則 ROLLBACK 後原樣拋出。"""
        conn = self.connect()
        conn.execute("BEGIN TRANSACTION")
        try:
            yield conn
        except Exception:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")

    # ------------------------------
    # 讀寫
    # ------------------------------
    def execute(self, sql: str, parameters: Params = None) -> None:
        self.connect().execute(sql, parameters or [])

    def execute_all(self, statements: Iterable[str]) -> int:
        """在同一交易內依序執行多條指令（建表用），回傳執行筆數。"""
        count = 0
        with self.transaction() as conn:
            for statement in statements:
                conn.execute(statement)
                count += 1
        return count

    def fetch_one(self, sql: str, parameters: Params = None) -> tuple | None:
        """取第一列，供 INSERT ... RETURNING 使用。"""
        return self.connect().execute(sql, parameters or []).fetchone()

    def fetch_rows(self, sql: str, parameters: Params = None) -> List[Dict[str, Any]]:
        """經由 pandas 取回所有列；DATE 欄位會是 Timestamp，NULL 可能是 NaN / NA。"""
        df = self.connect().execute(sql, parameters or []).fetch_df()
        if df.empty:
            return []
        return df.to_dict(orient="records")
