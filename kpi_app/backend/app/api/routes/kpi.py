"""每日 KPI / 週彙總 / 週目標 API 路由。"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from kpi_app.backend.app.api.controllers.kpi_controller import KpiController
from kpi_app.backend.app.api.dependencies.auth import get_current_user_id
from kpi_app.backend.app.api.dependencies.kpi import get_kpi_controller
from kpi_app.backend.app.schemas.goals import GoalSavedResponse, KpiGoalIn
from kpi_app.backend.app.schemas.kpi import DailyKpiIn, MessageResponse, WeeklySummary

router = APIRouter(
    tags=["kpi"],
    responses={401: {"description": "Missing user identity"}},
)


@router.post(
    "/daily-kpi",
    response_model=MessageResponse,
    summary="提交每日 KPI",
    description="整筆覆寫當日紀錄（同一天再次提交會取代先前內容），成功後於回應送出後再轉送 Webhook 通知。",
)
def save_daily_kpi(
    kpi: DailyKpiIn,
    background: BackgroundTasks,
    user_id: int = Depends(get_current_user_id),
    controller: KpiController = Depends(get_kpi_controller),
) -> MessageResponse:
    return controller.save_daily_kpi(user_id, kpi, background)


@router.get(
    "/daily-kpi/{record_date}",
    summary="單日 KPI",
    description="回傳指定日期的紀錄；查無資料時回傳空物件。",
)
def read_daily_kpi(
    record_date: str,
    user_id: int = Depends(get_current_user_id),
    controller: KpiController = Depends(get_kpi_controller),
) -> Dict[str, Any]:
    return controller.get_daily_kpi(user_id, record_date)


@router.get(
    "/weekly-summary",
    response_model=WeeklySummary,
    summary="週彙總（query 形式）",
    description="week_start 起 7 天（含）的合計與轉換率。",
)
def read_weekly_summary_query(
    week_start: str = Query(..., description="週起始日 YYYY-MM-DD"),
    user_id: int = Depends(get_current_user_id),
    controller: KpiController = Depends(get_kpi_controller),
) -> WeeklySummary:
    return controller.get_weekly_summary(user_id, week_start)


@router.get(
    "/weekly-summary/{week_start}",
    response_model=WeeklySummary,
    summary="週彙總",
    description="week_start 起 7 天（含）的合計與轉換率；分母為 0 的轉換率回傳 0。",
)
def read_weekly_summary(
    week_start: str,
    user_id: int = Depends(get_current_user_id),
    controller: KpiController = Depends(get_kpi_controller),
) -> WeeklySummary:
    return controller.get_weekly_summary(user_id, week_start)


@router.post(
    "/kpi-goals",
    response_model=GoalSavedResponse,
    summary="設定週目標",
)
def save_goals(
    goals: KpiGoalIn,
    user_id: int = Depends(get_current_user_id),
    controller: KpiController = Depends(get_kpi_controller),
) -> GoalSavedResponse:
    return controller.save_goals(user_id, goals)


@router.get(
    "/kpi-goals/current",
    summary="目前週目標",
    description="回傳 week_start 最新的一筆目標；未設定時回傳空物件。",
)
def read_current_goals(
    user_id: int = Depends(get_current_user_id),
    controller: KpiController = Depends(get_kpi_controller),
) -> Dict[str, Any]:
    return controller.get_current_goals(user_id)
