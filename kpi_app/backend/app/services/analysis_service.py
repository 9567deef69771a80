"""文字生成分析服務（週績效分析、開發信改善建議）。"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from openai import OpenAI, OpenAIError

from kpi_app.backend.app.core.errors import AnalysisUnavailableError
from kpi_app.config.settings import AnalysisSettings
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)

WEEKLY_SYSTEM_PROMPT = (
    "あなたは営業マネージャーです。週次KPIと目標を比較し、"
    "良かった点・課題・来週の具体的なアクションを日本語で簡潔にまとめてください。"
)
EMAIL_SYSTEM_PROMPT = (
    "あなたはB2B営業メールの専門家です。与えられたテンプレートと返信率をもとに、"
    "返信率を上げるための改善案を箇条書きで提案してください。"
)


class AnalysisService:
    """包裝 OpenAI chat completions；回應內容不做結構檢查。"""

    def __init__(self, settings: AnalysisSettings, client: Optional[OpenAI] = None) -> None:
        self.settings = settings
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.settings.api_key:
                raise AnalysisUnavailableError("Analysis service is not configured")
            self._client = OpenAI(api_key=self.settings.api_key, timeout=self.settings.timeout)
        return self._client

    def _complete(self, system_prompt: str, user_content: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content},
                ],
                max_tokens=self.settings.max_tokens,
            )
        except OpenAIError as exc:
            logger.error("文字生成呼叫失敗：%s", exc)
            raise AnalysisUnavailableError("Analysis request failed") from exc
        return response.choices[0].message.content or ""

    def analyze_weekly_performance(self, weekly_data: Any, goals: Any) -> Dict[str, str]:
        content = (
            "## 週次実績\n"
            f"{json.dumps(weekly_data, ensure_ascii=False, default=str)}\n\n"
            "## 目標\n"
            f"{json.dumps(goals, ensure_ascii=False, default=str)}"
        )
        return {"analysis": self._complete(WEEKLY_SYSTEM_PROMPT, content)}

    def suggest_email_improvement(self, template: str, reply_rate: Any) -> Dict[str, str]:
        content = f"## 現在の返信率\n{reply_rate}%\n\n## テンプレート\n{template}"
        return {"suggestions": self._complete(EMAIL_SYSTEM_PROMPT, content)}
