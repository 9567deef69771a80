"""KPI 領域模型（每日紀錄 / 週目標），含讀取時的一次性正規化。"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional

import pandas as pd
from pydantic import BaseModel

# 每日累加型指標（counter）；ongoing_projects 為快照型（gauge），不加總
SUMMABLE_FIELDS: tuple[str, ...] = (
    "emails_sent_manual",
    "emails_sent_outsource",
    "valid_emails_manual",
    "valid_emails_outsource",
    "replies_received",
    "meetings_scheduled",
    "deals_closed",
    "projects_created",
    "slide_views",
    "video_views",
)
GAUGE_FIELD = "ongoing_projects"
COUNTER_FIELDS: tuple[str, ...] = SUMMABLE_FIELDS + (GAUGE_FIELD,)

GOAL_COUNT_FIELDS: tuple[str, ...] = (
    "emails_manual_target",
    "emails_outsource_target",
    "valid_emails_manual_target",
    "valid_emails_outsource_target",
    "reply_target",
    "meetings_target",
    "deals_target",
    "projects_target",
    "ongoing_projects_target",
    "slide_views_target",
    "video_views_target",
)
GOAL_RATE_FIELDS: tuple[str, ...] = (
    "reply_rate_target",
    "meeting_rate_target",
    "deal_rate_target",
    "project_rate_target",
    "slide_view_rate_target",
    "video_view_rate_target",
)


def _is_missing(value: Any) -> bool:
    # DuckDB -> pandas 時，含 NULL 的整數欄位會變成 NaN 或 pd.NA
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def to_int(value: Any) -> int:
    """缺值（None / NaN）視為 0。"""
    if _is_missing(value):
        return 0
    return int(value)


def to_float(value: Any) -> float:
    if _is_missing(value):
        return 0.0
    return float(value)


def to_date(value: Any) -> date:
    """將 DuckDB / pandas / 字串日期轉為 naive date。"""
    if isinstance(value, datetime):  # pandas.Timestamp 亦為 datetime 子類別
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


class DailyRecord(BaseModel):
    """單一使用者單日的 KPI 紀錄。"""

    date: date
    emails_sent_manual: int = 0
    emails_sent_outsource: int = 0
    valid_emails_manual: int = 0
    valid_emails_outsource: int = 0
    replies_received: int = 0
    meetings_scheduled: int = 0
    deals_closed: int = 0
    projects_created: int = 0
    ongoing_projects: int = 0
    slide_views: int = 0
    video_views: int = 0
    notes: str = ""
    user_id: Optional[int] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "DailyRecord":
        """由資料列建立紀錄；所有數值欄位在此統一補 0。"""
        payload: dict[str, Any] = {name: to_int(row.get(name)) for name in COUNTER_FIELDS}
        payload["date"] = to_date(row["date"])
        notes = row.get("notes")
        payload["notes"] = "" if _is_missing(notes) else str(notes)
        if not _is_missing(row.get("user_id")):
            payload["user_id"] = int(row["user_id"])
        return cls(**payload)


class KpiGoal(BaseModel):
    """週目標。"""

    id: Optional[int] = None
    user_id: Optional[int] = None
    week_start: date
    emails_manual_target: int = 0
    emails_outsource_target: int = 0
    valid_emails_manual_target: int = 0
    valid_emails_outsource_target: int = 0
    reply_target: int = 0
    reply_rate_target: float = 0
    meetings_target: int = 0
    meeting_rate_target: float = 0
    deals_target: int = 0
    deal_rate_target: float = 0
    projects_target: int = 0
    project_rate_target: float = 0
    ongoing_projects_target: int = 0
    slide_views_target: int = 0
    slide_view_rate_target: float = 0
    video_views_target: int = 0
    video_view_rate_target: float = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "KpiGoal":
        payload: dict[str, Any] = {name: to_int(row.get(name)) for name in GOAL_COUNT_FIELDS}
        payload.update({name: to_float(row.get(name)) for name in GOAL_RATE_FIELDS})
        payload["week_start"] = to_date(row["week_start"])
        for key in ("id", "user_id"):
            if not _is_missing(row.get(key)):
                payload[key] = int(row[key])
        return cls(**payload)
