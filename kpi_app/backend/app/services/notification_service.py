"""聊天 Webhook 通知（fire-and-forget：送達失敗只記錄，不影響原請求）。"""

from __future__ import annotations

from typing import Any, Mapping, Optional

import requests

from kpi_app.config.settings import NotifierSettings
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)

# 訊息中顯示的欄位與標籤（依序）
_DAILY_LABELS: tuple[tuple[str, str], ...] = (
    ("emails_sent_manual", "送信(手動)"),
    ("emails_sent_outsource", "送信(外注)"),
    ("valid_emails_manual", "有効(手動)"),
    ("valid_emails_outsource", "有効(外注)"),
    ("replies_received", "返信"),
    ("meetings_scheduled", "商談"),
    ("deals_closed", "成約"),
    ("projects_created", "案件化"),
    ("ongoing_projects", "進行中"),
    ("slide_views", "資料閲覧"),
    ("video_views", "動画視聴"),
)


def format_daily_kpi_message(user_id: int, payload: Mapping[str, Any]) -> str:
    """將每日提交內容整理為單行訊息。"""
    parts = [f"{label}:{payload.get(key) or 0}" for key, label in _DAILY_LABELS]
    return f"📊 日次KPI [user {user_id}] {payload.get('date')} | " + " / ".join(parts)


class WebhookNotifier:
    """以 {"content": message} 格式推送至聊天 Webhook。"""

    def __init__(self, settings: NotifierSettings) -> None:
        self.webhook_url: Optional[str] = settings.webhook_url
        self.timeout = settings.timeout

    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    def deliver(self, message: str) -> None:
        """實際送出；失敗時拋出 requests 例外（供測試端點回報錯誤）。"""
        response = requests.post(self.webhook_url, json={"content": message}, timeout=self.timeout)
        response.raise_for_status()

    def send(self, message: str) -> bool:
        """送出訊息；未設定或失敗時回傳 False。"""
        if not self.is_configured():
            logger.debug("Webhook 未設定，略過通知")
            return False
        try:
            self.deliver(message)
        except requests.RequestException as exc:
            logger.error("Webhook 通知失敗：%s", exc)
            return False
        return True

    def send_daily_kpi_notification(self, user_id: int, payload: Mapping[str, Any]) -> bool:
        return self.send(format_daily_kpi_message(user_id, payload))
