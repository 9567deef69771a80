"""每日 KPI / 週彙總 API 模型定義。"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from kpi_app.models.records import DailyRecord

# 分母為 0 時為整數 0；否則為小數點後兩位的 Decimal（JSON 輸出為 "15.00"）
Rate = Union[int, Decimal]


class DailyKpiIn(BaseModel):
    """每日 KPI 提交內容（未填欄位視為 0）。"""
    date: date
    emails_sent_manual: Optional[int] = Field(default=None, ge=0)
    emails_sent_outsource: Optional[int] = Field(default=None, ge=0)
    valid_emails_manual: Optional[int] = Field(default=None, ge=0)
    valid_emails_outsource: Optional[int] = Field(default=None, ge=0)
    replies_received: Optional[int] = Field(default=None, ge=0)
    meetings_scheduled: Optional[int] = Field(default=None, ge=0)
    deals_closed: Optional[int] = Field(default=None, ge=0)
    projects_created: Optional[int] = Field(default=None, ge=0)
    ongoing_projects: Optional[int] = Field(default=None, ge=0)
    slide_views: Optional[int] = Field(default=None, ge=0)
    video_views: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class WeeklyTotals(BaseModel):
    """週合計；ongoing_projects 為最後一天的快照值。"""
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


class WeeklySummary(BaseModel):
    """週彙總（每次請求即時計算，不落地）。"""
    daily_data: List[DailyRecord] = []
    totals: WeeklyTotals = WeeklyTotals()
    reply_rate: Rate = 0
    meeting_rate: Rate = 0
    deal_rate: Rate = 0
    project_rate: Rate = 0
    slide_view_rate: Rate = 0
    video_view_rate: Rate = 0
