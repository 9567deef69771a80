"""每日 KPI 資料存取層（daily_kpi）。"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from kpi_app.models.records import COUNTER_FIELDS, DailyRecord, to_int
from kpi_app.storage.duckdb_client import DuckDBClient

_SELECT_COLUMNS = ", ".join(("user_id", "date") + COUNTER_FIELDS + ("notes",))


class DailyKpiRepository:
    """每日 KPI 的讀寫封裝；同一 (user_id, date) 僅保留一筆。"""

    def __init__(self, client: DuckDBClient) -> None:
        self.client = client

    # ----------------------
    # 小工具
    # ----------------------
    def _to_records(self, rows: List[Dict[str, Any]]) -> List[DailyRecord]:
        return [DailyRecord.from_row(row) for row in rows]

    # ==========================================================
    # 寫入
    # ==========================================================
    def upsert_daily_record(self, user_id: int, record_date: date, fields: Mapping[str, Any]) -> None:
        """
        整筆覆寫該日紀錄（不做部分更新）。
        未提供的數值欄位寫入 0，notes 寫入空字串。
        """
        columns = ("user_id", "date") + COUNTER_FIELDS + ("notes",)
        values: List[Any] = [user_id, record_date]
        values.extend(to_int(fields.get(name)) for name in COUNTER_FIELDS)
        values.append(fields.get("notes") or "")
        placeholders = ", ".join("?" for _ in columns)
        self.client.execute(
            f"INSERT OR REPLACE INTO daily_kpi ({', '.join(columns)}) VALUES ({placeholders})",
            values,
        )

    # ==========================================================
    # 讀取
    # ==========================================================
    def fetch_records_in_range(self, user_id: int, start: date, end_inclusive: date) -> List[DailyRecord]:
        """取得 start <= date <= end_inclusive 的紀錄，依日期遞增。"""
        rows = self.client.fetch_rows(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM daily_kpi
            WHERE user_id = ? AND date >= ? AND date <= ?
            ORDER BY date
            """,
            [user_id, start, end_inclusive],
        )
        return self._to_records(rows)

    def get_daily_record(self, user_id: int, record_date: date) -> Optional[DailyRecord]:
        rows = self.client.fetch_rows(
            f"SELECT {_SELECT_COLUMNS} FROM daily_kpi WHERE user_id = ? AND date = ?",
            [user_id, record_date],
        )
        records = self._to_records(rows)
        return records[0] if records else None
