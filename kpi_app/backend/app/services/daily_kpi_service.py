"""每日 KPI 服務：整筆覆寫當日紀錄，並排入通知。"""

from __future__ import annotations

from datetime import date
from typing import Optional, Union

from fastapi import BackgroundTasks

from kpi_app.backend.app.core.dates import parse_calendar_date
from kpi_app.backend.app.core.errors import StoreUnavailableError
from kpi_app.backend.app.repositories.daily_kpi_repository import DailyKpiRepository
from kpi_app.backend.app.schemas.kpi import DailyKpiIn
from kpi_app.backend.app.services.notification_service import WebhookNotifier
from kpi_app.models.records import DailyRecord
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)


class DailyKpiService:
    """每日 KPI 的寫入與單日查詢。"""

    def __init__(self, repository: DailyKpiRepository, notifier: Optional[WebhookNotifier] = None) -> None:
        self.repository = repository
        self.notifier = notifier

    def submit(self, user_id: int, kpi: DailyKpiIn, background: Optional[BackgroundTasks] = None) -> None:
        """
        寫入成功後才送通知。
        有 background 時通知排到回應送出之後執行，請求不等待 Webhook。
        """
        payload = kpi.model_dump()
        context = {"user_id": user_id, "record_date": kpi.date}
        try:
            self.repository.upsert_daily_record(user_id, kpi.date, payload)
        except Exception as exc:
            logger.error("每日 KPI 寫入失敗：%s", exc, extra=context)
            raise StoreUnavailableError("Failed to save daily KPI") from exc

        logger.info("每日 KPI 已儲存：user=%s date=%s", user_id, kpi.date, extra=context)
        if self.notifier is None:
            return
        if background is not None:
            background.add_task(self.notifier.send_daily_kpi_notification, user_id, payload)
        else:
            self.notifier.send_daily_kpi_notification(user_id, payload)

    def get_for_date(self, user_id: int, record_date: Union[str, date]) -> Optional[DailyRecord]:
        target = parse_calendar_date(record_date)
        try:
            return self.repository.get_daily_record(user_id, target)
        except Exception as exc:
            logger.error("每日 KPI 讀取失敗：%s", exc, extra={"user_id": user_id, "record_date": target})
            raise StoreUnavailableError("Failed to fetch daily KPI") from exc
