"""設定讀取模組（YAML 為底、環境變數覆寫；涵蓋 API / 儲存 / 通知 / 分析 / 排程）。"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]
CONFIG_PATH = BASE_DIR / "config" / "settings.yaml"

_TRUTHY = ("1", "true", "yes")


# =========================
# 設定模型
# =========================
class APISettings(BaseModel):
    prefix: str = "/api"
    docs_url: str = "/docs"
    openapi_url: str = "/openapi.json"


class AppSettings(BaseModel):
    name: str = "営業 KPI トラッカー"
    environment: str = "development"
    timezone: str = "Asia/Tokyo"
    public_url: str = "https://your-app-url.com"


class StorageSettings(BaseModel):
    """儲存層設定（DuckDB）。"""
    duckdb_path: str = "./data/kpi_enhanced.duckdb"


class NotifierSettings(BaseModel):
    """聊天 Webhook 通知設定。"""
    webhook_url: Optional[str] = None
    timeout: int = 10  # 秒


class AnalysisSettings(BaseModel):
    """文字生成分析服務設定。"""
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    max_tokens: int = 800
    timeout: int = 60  # 秒


class SchedulerSettings(BaseModel):
    """提醒排程（cron 表示式，以 app.timezone 解讀）。"""
    enabled: bool = False
    daily_reminder_cron: str = "0 18 * * *"
    weekly_review_cron: str = "0 17 * * fri"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_format: bool = False
    use_localtime: bool = False
    file_enabled: bool = False
    file_path: str = "logs/kpi.log"
    file_level: Optional[str] = None
    max_bytes: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    console_level: Optional[str] = None


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    app: AppSettings = AppSettings()
    api: APISettings = APISettings()
    storage: StorageSettings = StorageSettings()
    notifier: NotifierSettings = NotifierSettings()
    analysis: AnalysisSettings = AnalysisSettings()
    scheduler: SchedulerSettings = SchedulerSettings()
    logging: LoggingSettings = LoggingSettings()


# =========================
# 載入與環境覆寫
# =========================
def _load_yaml_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
        return data if isinstance(data, dict) else {}


def _env(key: str, default: Any) -> Any:
    val = os.getenv(key)
    return default if val is None or val == "" else val


def _flag(key: str, default: Any) -> bool:
    return str(_env(key, default)).lower() in _TRUTHY


def _apply_env_overrides(cfg: Dict[str, Any]) -> Dict[str, Any]:
    # storage
    storage = cfg.setdefault("storage", {})
    storage["duckdb_path"] = _env("DUCKDB_PATH", storage.get("duckdb_path", StorageSettings().duckdb_path))

    # api
    api = cfg.setdefault("api", {})
    api["prefix"] = _env("API_PREFIX", api.get("prefix", "/api"))
    api["docs_url"] = _env("API_DOCS_URL", api.get("docs_url", "/docs"))
    api["openapi_url"] = _env("API_OPENAPI_URL", api.get("openapi_url", "/openapi.json"))

    # app
    app = cfg.setdefault("app", {})
    app["environment"] = _env("APP_ENV", app.get("environment", "development"))
    app["timezone"] = _env("APP_TIMEZONE", app.get("timezone", "Asia/Tokyo"))
    app["public_url"] = _env("APP_PUBLIC_URL", app.get("public_url", "https://your-app-url.com"))

    # notifier（沿用原服務的環境變數名稱）
    notifier = cfg.setdefault("notifier", {})
    notifier["webhook_url"] = _env("DISCORD_WEBHOOK_URL", notifier.get("webhook_url"))
    notifier["timeout"] = int(_env("NOTIFIER_TIMEOUT", notifier.get("timeout", 10)))

    # analysis
    analysis = cfg.setdefault("analysis", {})
    analysis["api_key"] = _env("OPENAI_API_KEY", analysis.get("api_key"))
    analysis["model"] = _env("OPENAI_MODEL", analysis.get("model", "gpt-4o-mini"))
    analysis["max_tokens"] = int(_env("OPENAI_MAX_TOKENS", analysis.get("max_tokens", 800)))
    analysis["timeout"] = int(_env("OPENAI_TIMEOUT", analysis.get("timeout", 60)))

    # scheduler
    sched = cfg.setdefault("scheduler", {})
    sched["enabled"] = _flag("SCHEDULER_ENABLED", sched.get("enabled", False))
    sched["daily_reminder_cron"] = _env("DAILY_REMINDER_CRON", sched.get("daily_reminder_cron", "0 18 * * *"))
    sched["weekly_review_cron"] = _env("WEEKLY_REVIEW_CRON", sched.get("weekly_review_cron", "0 17 * * fri"))

    # logging
    log = cfg.setdefault("logging", {})
    log["level"] = _env("LOG_LEVEL", log.get("level", "INFO"))
    log["json_format"] = _flag("LOG_JSON", log.get("json_format", False))
    log["use_localtime"] = _flag("LOG_LOCALTIME", log.get("use_localtime", False))
    log["file_enabled"] = _flag("LOG_FILE_ENABLED", log.get("file_enabled", False))
    log["file_path"] = _env("LOG_FILE_PATH", log.get("file_path", "logs/kpi.log"))
    log["file_level"] = _env("LOG_FILE_LEVEL", log.get("file_level", log.get("level", "INFO")))
    log["max_bytes"] = int(_env("LOG_MAX_BYTES", log.get("max_bytes", 10 * 1024 * 1024)))
    log["backup_count"] = int(_env("LOG_BACKUP_COUNT", log.get("backup_count", 5)))
    log["console_level"] = _env("LOG_CONSOLE_LEVEL", log.get("console_level", log.get("level", "INFO")))

    return cfg


@lru_cache
def get_settings() -> Settings:
    """取得設定，使用快取避免重複 IO。"""
    data = _load_yaml_config(CONFIG_PATH)
    merged = _apply_env_overrides(data)
    return Settings.model_validate(merged)


settings = get_settings()
