"""分析與通知 API 模型定義。"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class WeeklyAnalysisRequest(BaseModel):
    """週績效分析請求（沿用前端 camelCase 欄位）。"""
    model_config = ConfigDict(populate_by_name=True)

    weekly_data: Any = Field(default=None, alias="weeklyData")
    goals: Any = None


class EmailImprovementRequest(BaseModel):
    """開發信改善建議請求。"""
    model_config = ConfigDict(populate_by_name=True)

    template: str = ""
    reply_rate: Any = Field(default=None, alias="replyRate")


class NotificationTestRequest(BaseModel):
    message: Optional[str] = None


class NotificationTestResponse(BaseModel):
    success: bool
    message: str
