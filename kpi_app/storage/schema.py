"""DuckDB Schema 初始化工具（KPI 目標 / 每日 KPI / 週回顧）。"""

from __future__ import annotations

from typing import Iterable

from kpi_app.storage.duckdb_client import DuckDBClient
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)

SCHEMA_STATEMENTS: Iterable[str] = (
    # 0) 自動編號
    "CREATE SEQUENCE IF NOT EXISTS kpi_goals_id_seq START 1",
    "CREATE SEQUENCE IF NOT EXISTS weekly_reviews_id_seq START 1",
    # 1) 週目標（同一週可多次設定，取 week_start 最新者）
    """
    CREATE TABLE IF NOT EXISTS kpi_goals (
        id INTEGER PRIMARY KEY DEFAULT nextval('kpi_goals_id_seq'),
        user_id INTEGER NOT NULL,
        week_start DATE NOT NULL,
        emails_manual_target INTEGER DEFAULT 0,
        emails_outsource_target INTEGER DEFAULT 0,
        valid_emails_manual_target INTEGER DEFAULT 0,
        valid_emails_outsource_target INTEGER DEFAULT 0,
        reply_target INTEGER DEFAULT 0,
        reply_rate_target DOUBLE DEFAULT 0,
        meetings_target INTEGER DEFAULT 0,
        meeting_rate_target DOUBLE DEFAULT 0,
        deals_target INTEGER DEFAULT 0,
        deal_rate_target DOUBLE DEFAULT 0,
        projects_target INTEGER DEFAULT 0,
        project_rate_target DOUBLE DEFAULT 0,
        ongoing_projects_target INTEGER DEFAULT 0,
        slide_views_target INTEGER DEFAULT 0,
        slide_view_rate_target DOUBLE DEFAULT 0,
        video_views_target INTEGER DEFAULT 0,
        video_view_rate_target DOUBLE DEFAULT 0,
        created_at TIMESTAMP DEFAULT current_timestamp
    )
    """,
    # 2) 每日 KPI（每位使用者每天至多一筆，整筆覆寫）
    """
    CREATE TABLE IF NOT EXISTS daily_kpi (
        user_id INTEGER NOT NULL,
        date DATE NOT NULL,
        emails_sent_manual INTEGER DEFAULT 0,
        emails_sent_outsource INTEGER DEFAULT 0,
        valid_emails_manual INTEGER DEFAULT 0,
        valid_emails_outsource INTEGER DEFAULT 0,
        replies_received INTEGER DEFAULT 0,
        meetings_scheduled INTEGER DEFAULT 0,
        deals_closed INTEGER DEFAULT 0,
        projects_created INTEGER DEFAULT 0,
        ongoing_projects INTEGER DEFAULT 0,
        slide_views INTEGER DEFAULT 0,
        video_views INTEGER DEFAULT 0,
        notes VARCHAR,
        created_at TIMESTAMP DEFAULT current_timestamp,
        PRIMARY KEY (user_id, date)
    )
    """,
    # 3) 週回顧（目前僅建表）
    """
    CREATE TABLE IF NOT EXISTS weekly_reviews (
        id INTEGER PRIMARY KEY DEFAULT nextval('weekly_reviews_id_seq'),
        user_id INTEGER NOT NULL,
        week_start DATE NOT NULL,
        week_end DATE NOT NULL,
        achievements VARCHAR,
        challenges VARCHAR,
        improvements VARCHAR,
        notes VARCHAR,
        created_at TIMESTAMP DEFAULT current_timestamp
    )
    """,
)


def initialize_duckdb(client: DuckDBClient) -> None:
    """建立所有必要資料表。"""
    client.execute_all(SCHEMA_STATEMENTS)
    logger.info("DuckDB Schema 初始化完成：%s", client.db_path)
