"""KPI 服務紀錄器：主控台與輪替檔案，可切換 JSON 輸出。"""

from __future__ import annotations

import json
import logging
import os
import time
from logging import Logger
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, List

from kpi_app.config.settings import settings

# 以 logger.info(..., extra={"user_id": 1}) 帶入的欄位，JSON 輸出時會攤平到最上層
CONTEXT_FIELDS = ("user_id", "record_date", "week_start", "job_id")

_TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(env)s | %(name)s | %(message)s"


class _ServiceContextFilter(logging.Filter):
    """每筆紀錄補上執行環境（app.environment），讓多環境共用的收集端可以分流。"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.env = settings.app.environment
        return True


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "env": getattr(record, "env", settings.app.environment),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = str(value)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _formatter() -> logging.Formatter:
    fmt: logging.Formatter
    if settings.logging.json_format:
        fmt = _JsonFormatter()
    else:
        fmt = logging.Formatter(fmt=_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    fmt.converter = time.localtime if settings.logging.use_localtime else time.gmtime
    return fmt


def _handlers() -> List[logging.Handler]:
    cfg = settings.logging
    console = logging.StreamHandler()
    console.setLevel(cfg.console_level or cfg.level)
    handlers: List[logging.Handler] = [console]

    if cfg.file_enabled:
        folder = os.path.dirname(cfg.file_path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        rotating = RotatingFileHandler(
            cfg.file_path,
            maxBytes=cfg.max_bytes,
            backupCount=cfg.backup_count,
            encoding="utf-8",
        )
        rotating.setLevel(cfg.file_level or cfg.level)
        handlers.append(rotating)

    context = _ServiceContextFilter()
    for handler in handlers:
        handler.setFormatter(_formatter())
        handler.addFilter(context)
    return handlers


def get_logger(name: str) -> Logger:
    """取得模組紀錄器；同名重複呼叫不會重複掛 handler。"""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(settings.logging.level)
    for handler in _handlers():
        logger.addHandler(handler)
    # 不向 root 傳遞，避免重複列印
    logger.propagate = False
    return logger
