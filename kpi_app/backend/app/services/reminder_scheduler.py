"""定時提醒（每日輸入提醒、週五回顧提醒）。"""

from __future__ import annotations

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from kpi_app.backend.app.services.notification_service import WebhookNotifier
from kpi_app.config.settings import Settings
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)


def daily_reminder_message(public_url: str) -> str:
    return f"📊 今日の営業KPIを入力してください！\n{public_url.rstrip('/')}/daily-input"


def weekly_review_message(public_url: str) -> str:
    return f"📈 週次レビューの時間です！今週の振り返りを行いましょう。\n{public_url.rstrip('/')}/weekly-review"


def send_reminder(notifier: WebhookNotifier, settings: Settings, kind: str) -> bool:
    """立即送出提醒；kind 為 daily / weekly。"""
    if kind == "daily":
        message = daily_reminder_message(settings.app.public_url)
    elif kind == "weekly":
        message = weekly_review_message(settings.app.public_url)
    else:
        raise ValueError(f"不支援的提醒類型：{kind}")
    logger.info("送出 %s 提醒", kind)
    return notifier.send(message)


def build_reminder_scheduler(settings: Settings, notifier: WebhookNotifier) -> BackgroundScheduler:
    """建立（尚未啟動的）排程器。"""
    tz = settings.app.timezone
    scheduler = BackgroundScheduler(timezone=tz)

    scheduler.add_job(
        send_reminder,
        CronTrigger.from_crontab(settings.scheduler.daily_reminder_cron, timezone=tz),
        args=[notifier, settings, "daily"],
        id="daily_kpi_reminder",
        name="Daily KPI input reminder",
        replace_existing=True,
    )
    scheduler.add_job(
        send_reminder,
        CronTrigger.from_crontab(settings.scheduler.weekly_review_cron, timezone=tz),
        args=[notifier, settings, "weekly"],
        id="weekly_review_reminder",
        name="Weekly review reminder",
        replace_existing=True,
    )
    return scheduler
