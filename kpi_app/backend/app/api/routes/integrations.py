"""外部整合 API 路由（文字生成分析 / Webhook 測試）。"""

from __future__ import annotations

from typing import Dict, Optional

from fastapi import APIRouter, Depends

from kpi_app.backend.app.api.controllers.integration_controller import IntegrationController
from kpi_app.backend.app.api.dependencies.auth import get_current_user_id
from kpi_app.backend.app.api.dependencies.kpi import get_integration_controller
from kpi_app.backend.app.schemas.analysis import (
    EmailImprovementRequest,
    NotificationTestRequest,
    NotificationTestResponse,
    WeeklyAnalysisRequest,
)

router = APIRouter(
    tags=["integrations"],
    dependencies=[Depends(get_current_user_id)],
)


@router.post("/gpts/analyze-weekly", summary="週績效分析")
def analyze_weekly(
    body: WeeklyAnalysisRequest,
    controller: IntegrationController = Depends(get_integration_controller),
) -> Dict[str, str]:
    return controller.analyze_weekly(body)


@router.post("/gpts/improve-email", summary="開發信改善建議")
def improve_email(
    body: EmailImprovementRequest,
    controller: IntegrationController = Depends(get_integration_controller),
) -> Dict[str, str]:
    return controller.improve_email(body)


@router.post("/discord/test", response_model=NotificationTestResponse, summary="Webhook 測試通知")
def send_test_notification(
    body: Optional[NotificationTestRequest] = None,
    controller: IntegrationController = Depends(get_integration_controller),
) -> NotificationTestResponse:
    return controller.send_test_notification(body)
