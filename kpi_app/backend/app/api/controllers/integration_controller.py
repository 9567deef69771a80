"""外部整合控制器（文字生成分析、Webhook 測試通知）。"""

from __future__ import annotations

from typing import Dict, Optional

import requests

from kpi_app.backend.app.core.errors import (
    AnalysisUnavailableError,
    NotificationFailedError,
    NotifierNotConfiguredError,
)
from kpi_app.backend.app.schemas.analysis import (
    EmailImprovementRequest,
    NotificationTestRequest,
    NotificationTestResponse,
    WeeklyAnalysisRequest,
)
from kpi_app.backend.app.services.analysis_service import AnalysisService
from kpi_app.backend.app.services.notification_service import WebhookNotifier
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TEST_MESSAGE = "テスト通知: KPIトラッカーから送信"


class IntegrationController:
    def __init__(self, analysis: AnalysisService, notifier: WebhookNotifier) -> None:
        self.analysis = analysis
        self.notifier = notifier

    def analyze_weekly(self, body: WeeklyAnalysisRequest) -> Dict[str, str]:
        try:
            return self.analysis.analyze_weekly_performance(body.weekly_data, body.goals)
        except AnalysisUnavailableError as exc:
            raise AnalysisUnavailableError("Analysis failed") from exc

    def improve_email(self, body: EmailImprovementRequest) -> Dict[str, str]:
        try:
            return self.analysis.suggest_email_improvement(body.template, body.reply_rate)
        except AnalysisUnavailableError as exc:
            raise AnalysisUnavailableError("Suggestion failed") from exc

    def send_test_notification(self, body: Optional[NotificationTestRequest]) -> NotificationTestResponse:
        """測試端點需要回報送達結果，因此直接呼叫 deliver 而非 fire-and-forget 的 send。"""
        if not self.notifier.is_configured():
            raise NotifierNotConfiguredError("Discord webhook not configured")
        try:
            self.notifier.deliver((body.message if body else None) or DEFAULT_TEST_MESSAGE)
        except requests.RequestException as exc:
            logger.error("測試通知失敗：%s", exc)
            raise NotificationFailedError("Failed to send notification") from exc
        return NotificationTestResponse(success=True, message="Notification sent")
