"""週目標 API 模型定義。"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class KpiGoalIn(BaseModel):
    """週目標設定內容（未填目標為 0）。"""
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


class GoalSavedResponse(BaseModel):
    id: int
    message: str
