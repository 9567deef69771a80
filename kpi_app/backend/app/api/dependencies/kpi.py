"""FastAPI 依賴：Repository → Service → Controller 的組裝。"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from kpi_app.backend.app.api.controllers.integration_controller import IntegrationController
from kpi_app.backend.app.api.controllers.kpi_controller import KpiController
from kpi_app.backend.app.core.config import get_app_settings
from kpi_app.backend.app.db.duckdb import get_duckdb_client
from kpi_app.backend.app.repositories.daily_kpi_repository import DailyKpiRepository
from kpi_app.backend.app.repositories.goal_repository import GoalRepository
from kpi_app.backend.app.services.analysis_service import AnalysisService
from kpi_app.backend.app.services.daily_kpi_service import DailyKpiService
from kpi_app.backend.app.services.goal_service import GoalService
from kpi_app.backend.app.services.notification_service import WebhookNotifier
from kpi_app.backend.app.services.weekly_summary_service import WeeklySummaryService
from kpi_app.storage.duckdb_client import DuckDBClient


def get_daily_kpi_repository(
    client: Annotated[DuckDBClient, Depends(get_duckdb_client)]
) -> DailyKpiRepository:
    """測試或更換資料來源時覆寫這個依賴即可。"""
    return DailyKpiRepository(client)


def get_goal_repository(client: Annotated[DuckDBClient, Depends(get_duckdb_client)]) -> GoalRepository:
    return GoalRepository(client)


def get_notifier() -> WebhookNotifier:
    return WebhookNotifier(get_app_settings().notifier)


def get_analysis_service() -> AnalysisService:
    return AnalysisService(get_app_settings().analysis)


def get_weekly_summary_service(
    repo: Annotated[DailyKpiRepository, Depends(get_daily_kpi_repository)]
) -> WeeklySummaryService:
    return WeeklySummaryService(repo)


def get_daily_kpi_service(
    repo: Annotated[DailyKpiRepository, Depends(get_daily_kpi_repository)],
    notifier: Annotated[WebhookNotifier, Depends(get_notifier)],
) -> DailyKpiService:
    return DailyKpiService(repo, notifier)


def get_goal_service(repo: Annotated[GoalRepository, Depends(get_goal_repository)]) -> GoalService:
    return GoalService(repo)


def get_kpi_controller(
    daily_service: Annotated[DailyKpiService, Depends(get_daily_kpi_service)],
    weekly_service: Annotated[WeeklySummaryService, Depends(get_weekly_summary_service)],
    goal_service: Annotated[GoalService, Depends(get_goal_service)],
) -> KpiController:
    """建立並回傳 KpiController。"""
    return KpiController(daily_service, weekly_service, goal_service)


def get_integration_controller(
    analysis: Annotated[AnalysisService, Depends(get_analysis_service)],
    notifier: Annotated[WebhookNotifier, Depends(get_notifier)],
) -> IntegrationController:
    return IntegrationController(analysis, notifier)
