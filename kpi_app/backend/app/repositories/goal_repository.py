"""週目標資料存取層（kpi_goals）。"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from kpi_app.models.records import GOAL_COUNT_FIELDS, GOAL_RATE_FIELDS, KpiGoal, to_float, to_int
from kpi_app.storage.duckdb_client import DuckDBClient

_GOAL_COLUMNS = ("user_id", "week_start") + GOAL_COUNT_FIELDS + GOAL_RATE_FIELDS


class GoalRepository:
    """週目標的新增與查詢。"""

    def __init__(self, client: DuckDBClient) -> None:
        self.client = client

    def insert_goal(self, user_id: int, goal: Mapping[str, Any]) -> int:
        """新增一筆目標，回傳自動編號。"""
        values = [user_id, goal["week_start"]]
        values.extend(to_int(goal.get(name)) for name in GOAL_COUNT_FIELDS)
        values.extend(to_float(goal.get(name)) for name in GOAL_RATE_FIELDS)
        placeholders = ", ".join("?" for _ in _GOAL_COLUMNS)
        row = self.client.fetch_one(
            f"INSERT INTO kpi_goals ({', '.join(_GOAL_COLUMNS)}) VALUES ({placeholders}) RETURNING id",
            values,
        )
        return int(row[0])

    def get_latest_goal(self, user_id: int) -> Optional[KpiGoal]:
        """依 week_start 取最新的一筆目標；同週多筆時取最後寫入者。"""
        rows = self.client.fetch_rows(
            f"""
            SELECT id, {', '.join(_GOAL_COLUMNS)}
            FROM kpi_goals
            WHERE user_id = ?
            ORDER BY week_start DESC, id DESC
            LIMIT 1
            """,
            [user_id],
        )
        return KpiGoal.from_row(rows[0]) if rows else None
