"""FastAPI 服務入口。"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kpi_app.backend.app.api.routes.integrations import router as integrations_router
from kpi_app.backend.app.api.routes.kpi import router as kpi_router
from kpi_app.backend.app.core.config import get_app_settings
from kpi_app.backend.app.core.errors import KpiError
from kpi_app.backend.app.db.duckdb import bootstrap_schema
from kpi_app.backend.app.services.notification_service import WebhookNotifier
from kpi_app.backend.app.services.reminder_scheduler import build_reminder_scheduler
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """啟動時建表；若啟用排程則掛上提醒工作。"""
    settings = get_app_settings()
    bootstrap_schema()

    scheduler = None
    if settings.scheduler.enabled:
        scheduler = build_reminder_scheduler(settings, WebhookNotifier(settings.notifier))
        scheduler.start()
        logger.info("提醒排程已啟動")
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.shutdown(wait=False)


def _health() -> Dict[str, str]:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


def create_app() -> FastAPI:
    """建立 FastAPI 實例，註冊中介層、錯誤處理與路由。"""
    settings = get_app_settings()

    app = FastAPI(
        title=settings.app.name,
        version="0.1.0",
        docs_url=settings.api.docs_url,
        openapi_url=settings.api.openapi_url,
        lifespan=lifespan,
    )

    # CORS（目前全開）
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(KpiError)
    async def handle_kpi_error(request: Request, exc: KpiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    app.include_router(kpi_router, prefix=settings.api.prefix)
    app.include_router(integrations_router, prefix=settings.api.prefix)

    @app.get("/health", tags=["system"])
    def health_check() -> Dict[str, str]:
        """健康檢查端點。"""
        return _health()

    @app.get(f"{settings.api.prefix}/health", tags=["system"], include_in_schema=False)
    def api_health_check() -> Dict[str, str]:
        return _health()

    return app


app = create_app()
