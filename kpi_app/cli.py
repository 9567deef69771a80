"""KPI 服務指令列介面。"""

from __future__ import annotations

from typing import Optional

import duckdb
import typer

from kpi_app.backend.app.core.config import get_app_settings
from kpi_app.backend.app.core.errors import KpiError
from kpi_app.backend.app.repositories.daily_kpi_repository import DailyKpiRepository
from kpi_app.backend.app.services.notification_service import WebhookNotifier
from kpi_app.backend.app.services.reminder_scheduler import send_reminder
from kpi_app.backend.app.services.weekly_summary_service import WeeklySummaryService
from kpi_app.storage.duckdb_client import DuckDBClient
from kpi_app.storage.schema import initialize_duckdb

app = typer.Typer(help="営業 KPI 工具：建表、週彙總查詢、手動提醒。")


@app.command("init-duckdb")
def init_duckdb(path: Optional[str] = typer.Option(None, help="自訂 DuckDB 檔案路徑")) -> None:
    """建立 DuckDB Schema。"""

    client = DuckDBClient(db_path=path)
    initialize_duckdb(client)
    client.close()


@app.command("weekly-summary")
def weekly_summary(
    user_id: int = typer.Argument(..., help="使用者 ID"),
    week_start: str = typer.Argument(..., help="週起始日 (YYYY-MM-DD)"),
    path: Optional[str] = typer.Option(None, help="自訂 DuckDB 檔案路徑"),
) -> None:
    """以 JSON 輸出指定週的彙總。"""

    try:
        with DuckDBClient(db_path=path, read_only=True) as client:
            summary = WeeklySummaryService(DailyKpiRepository(client)).get_weekly_summary(user_id, week_start)
    except duckdb.Error as exc:
        # 檔案不存在或被 API 以寫入模式鎖住
        typer.echo(f"Failed to fetch weekly data: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except KpiError as exc:
        typer.echo(exc.message, err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(summary.model_dump_json(indent=2))


@app.command("send-reminder")
def send_reminder_now(
    kind: str = typer.Option("daily", help="提醒類型：daily / weekly"),
) -> None:
    """立即送出提醒訊息。"""

    if kind not in ("daily", "weekly"):
        raise typer.BadParameter("kind 需為 daily 或 weekly")
    settings = get_app_settings()
    sent = send_reminder(WebhookNotifier(settings.notifier), settings, kind)
    if not sent:
        typer.echo("通知未送出（未設定 Webhook 或送達失敗）", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
