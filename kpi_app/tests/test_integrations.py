"""Webhook 通知、文字生成分析與提醒排程的單元測試。"""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest
import requests
from fastapi import BackgroundTasks
from fastapi.testclient import TestClient
from openai import OpenAIError

from kpi_app.backend.app.api.dependencies.kpi import (
    get_analysis_service,
    get_daily_kpi_repository,
    get_goal_repository,
    get_notifier,
)
from kpi_app.backend.app.core.errors import AnalysisUnavailableError
from kpi_app.backend.app.main import create_app
from kpi_app.backend.app.schemas.kpi import DailyKpiIn
from kpi_app.backend.app.services import notification_service
from kpi_app.backend.app.services.analysis_service import AnalysisService
from kpi_app.backend.app.services.daily_kpi_service import DailyKpiService
from kpi_app.backend.app.services.notification_service import WebhookNotifier, format_daily_kpi_message
from kpi_app.backend.app.services.reminder_scheduler import build_reminder_scheduler, send_reminder
from kpi_app.config.settings import AnalysisSettings, NotifierSettings, SchedulerSettings, Settings

WEBHOOK = "https://chat.example.com/api/webhooks/1/abc"
USER = {"X-User-Id": "1"}


class FakeResponse:
    def __init__(self, status: int = 204) -> None:
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")


class FakeCompletions:
    def __init__(self, content: str = "", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_openai(completions: FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


# ----------------------------------------------------------------------
# WebhookNotifier
# ----------------------------------------------------------------------
def test_send_posts_content_payload(monkeypatch) -> None:
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResponse()

    monkeypatch.setattr(notification_service.requests, "post", fake_post)
    notifier = WebhookNotifier(NotifierSettings(webhook_url=WEBHOOK, timeout=3))

    assert notifier.send("hello") is True
    assert calls == [(WEBHOOK, {"content": "hello"}, 3)]


def test_send_without_webhook_is_noop(monkeypatch) -> None:
    def fail_post(*args, **kwargs):  # pragma: no cover
        raise AssertionError("不應呼叫")

    monkeypatch.setattr(notification_service.requests, "post", fail_post)

    assert WebhookNotifier(NotifierSettings()).send("hello") is False


def test_send_swallows_transport_errors(monkeypatch) -> None:
    def broken_post(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(notification_service.requests, "post", broken_post)

    assert WebhookNotifier(NotifierSettings(webhook_url=WEBHOOK)).send("hello") is False


def test_daily_message_is_single_line() -> None:
    message = format_daily_kpi_message(1, {"date": date(2024, 9, 2), "replies_received": 3, "deals_closed": None})

    assert "\n" not in message
    assert "2024-09-02" in message
    assert "返信:3" in message
    assert "成約:0" in message


def test_daily_kpi_saved_even_if_webhook_fails(monkeypatch) -> None:
    """通知失敗不影響每日 KPI 提交結果。"""

    class MemoryRepo:
        def __init__(self) -> None:
            self.saved = []

        def upsert_daily_record(self, user_id, record_date, fields) -> None:
            self.saved.append((user_id, record_date))

    def broken_post(*args, **kwargs):
        raise requests.Timeout("timeout")

    monkeypatch.setattr(notification_service.requests, "post", broken_post)
    repo = MemoryRepo()
    app = create_app()
    app.dependency_overrides[get_daily_kpi_repository] = lambda: repo
    app.dependency_overrides[get_goal_repository] = lambda: None
    app.dependency_overrides[get_notifier] = lambda: WebhookNotifier(NotifierSettings(webhook_url=WEBHOOK))

    response = TestClient(app).post("/api/daily-kpi", json={"date": "2024-09-02"}, headers=USER)

    assert response.status_code == 200
    assert repo.saved == [(1, date(2024, 9, 2))]


def test_daily_notification_is_queued_not_sent_inline() -> None:
    """傳入 BackgroundTasks 時，submit 只排入通知，不在請求內等待 Webhook。"""

    class MemoryRepo:
        def upsert_daily_record(self, user_id, record_date, fields) -> None:
            pass

    class SlowNotifier:
        def __init__(self) -> None:
            self.calls = 0

        def send_daily_kpi_notification(self, user_id, payload) -> bool:
            self.calls += 1
            raise requests.Timeout("webhook took too long")

    notifier = SlowNotifier()
    background = BackgroundTasks()

    DailyKpiService(MemoryRepo(), notifier).submit(1, DailyKpiIn(date=date(2024, 9, 2)), background)

    assert notifier.calls == 0
    assert len(background.tasks) == 1
    task = background.tasks[0]
    assert task.func == notifier.send_daily_kpi_notification
    assert task.args[0] == 1
    assert task.args[1]["date"] == date(2024, 9, 2)


def test_discord_test_endpoint(monkeypatch) -> None:
    sent = []
    monkeypatch.setattr(
        notification_service.requests,
        "post",
        lambda url, json=None, timeout=None: sent.append(json) or FakeResponse(),
    )
    app = create_app()
    client = TestClient(app)

    app.dependency_overrides[get_notifier] = lambda: WebhookNotifier(NotifierSettings())
    assert client.post("/api/discord/test", json={}, headers=USER).status_code == 400

    app.dependency_overrides[get_notifier] = lambda: WebhookNotifier(NotifierSettings(webhook_url=WEBHOOK))
    response = client.post("/api/discord/test", json={"message": "ping"}, headers=USER)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Notification sent"}
    assert sent == [{"content": "ping"}]

    monkeypatch.setattr(
        notification_service.requests, "post", lambda url, json=None, timeout=None: FakeResponse(500)
    )
    response = client.post("/api/discord/test", json={}, headers=USER)
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to send notification"}


# ----------------------------------------------------------------------
# AnalysisService
# ----------------------------------------------------------------------
def test_analysis_requires_api_key() -> None:
    with pytest.raises(AnalysisUnavailableError):
        AnalysisService(AnalysisSettings()).analyze_weekly_performance({}, {})


def test_weekly_analysis_forwards_payload() -> None:
    completions = FakeCompletions(content="良好です")
    service = AnalysisService(AnalysisSettings(model="test-model"), client=_fake_openai(completions))

    result = service.analyze_weekly_performance({"reply_rate": "15.00"}, {"reply_target": 10})

    assert result == {"analysis": "良好です"}
    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert "15.00" in call["messages"][1]["content"]


def test_email_suggestion_wraps_upstream_errors() -> None:
    completions = FakeCompletions(error=OpenAIError("rate limited"))
    service = AnalysisService(AnalysisSettings(), client=_fake_openai(completions))

    with pytest.raises(AnalysisUnavailableError):
        service.suggest_email_improvement("こんにちは", 3.2)


def test_analysis_endpoints() -> None:
    app = create_app()
    client = TestClient(app)

    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(
        AnalysisSettings(), client=_fake_openai(FakeCompletions(content="- 件名を短く"))
    )
    response = client.post("/api/gpts/improve-email", json={"template": "hi", "replyRate": 2.5}, headers=USER)
    assert response.json() == {"suggestions": "- 件名を短く"}

    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(AnalysisSettings())
    response = client.post("/api/gpts/analyze-weekly", json={"weeklyData": {}, "goals": {}}, headers=USER)
    assert response.status_code == 500
    assert response.json() == {"error": "Analysis failed"}


# ----------------------------------------------------------------------
# 提醒排程
# ----------------------------------------------------------------------
def test_reminder_scheduler_registers_two_cron_jobs() -> None:
    settings = Settings(scheduler=SchedulerSettings(enabled=True))
    scheduler = build_reminder_scheduler(settings, WebhookNotifier(NotifierSettings()))

    job_ids = {job.id for job in scheduler.get_jobs()}

    assert job_ids == {"daily_kpi_reminder", "weekly_review_reminder"}


def test_send_reminder_messages(monkeypatch) -> None:
    sent = []
    monkeypatch.setattr(
        notification_service.requests,
        "post",
        lambda url, json=None, timeout=None: sent.append(json["content"]) or FakeResponse(),
    )
    settings = Settings()
    notifier = WebhookNotifier(NotifierSettings(webhook_url=WEBHOOK))

    assert send_reminder(notifier, settings, "daily") is True
    assert send_reminder(notifier, settings, "weekly") is True
    assert sent[0].endswith("/daily-input")
    assert sent[1].endswith("/weekly-review")
    with pytest.raises(ValueError):
        send_reminder(notifier, settings, "monthly")
