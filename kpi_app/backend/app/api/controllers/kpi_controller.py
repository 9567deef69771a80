"""KPI 控制器，負責整理每日 KPI / 週彙總 / 週目標的 API 回應。"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import BackgroundTasks

from kpi_app.backend.app.schemas.goals import GoalSavedResponse, KpiGoalIn
from kpi_app.backend.app.schemas.kpi import DailyKpiIn, MessageResponse, WeeklySummary
from kpi_app.backend.app.services.daily_kpi_service import DailyKpiService
from kpi_app.backend.app.services.goal_service import GoalService
from kpi_app.backend.app.services.weekly_summary_service import WeeklySummaryService


class KpiController:
    """將服務層結果轉為回應模型；查無資料時回傳空物件。"""

    def __init__(
        self,
        daily_service: DailyKpiService,
        weekly_service: WeeklySummaryService,
        goal_service: GoalService,
    ) -> None:
        self.daily_service = daily_service
        self.weekly_service = weekly_service
        self.goal_service = goal_service

    # -------------------------
    # 每日 KPI
    # -------------------------
    def save_daily_kpi(
        self, user_id: int, kpi: DailyKpiIn, background: Optional[BackgroundTasks] = None
    ) -> MessageResponse:
        self.daily_service.submit(user_id, kpi, background)
        return MessageResponse(message="Daily KPI saved successfully")

    def get_daily_kpi(self, user_id: int, record_date: str) -> Dict[str, Any]:
        record = self.daily_service.get_for_date(user_id, record_date)
        return record.model_dump(mode="json") if record else {}

    # -------------------------
    # 週彙總
    # -------------------------
    def get_weekly_summary(self, user_id: int, week_start: str) -> WeeklySummary:
        return self.weekly_service.get_weekly_summary(user_id, week_start)

    # -------------------------
    # 週目標
    # -------------------------
    def save_goals(self, user_id: int, goals: KpiGoalIn) -> GoalSavedResponse:
        goal_id = self.goal_service.save(user_id, goals)
        return GoalSavedResponse(id=goal_id, message="Goals saved successfully")

    def get_current_goals(self, user_id: int) -> Dict[str, Any]:
        goal = self.goal_service.get_current(user_id)
        return goal.model_dump(mode="json") if goal else {}
