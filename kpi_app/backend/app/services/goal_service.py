"""週目標服務。"""

from __future__ import annotations

from typing import Optional

from kpi_app.backend.app.core.errors import StoreUnavailableError
from kpi_app.backend.app.repositories.goal_repository import GoalRepository
from kpi_app.backend.app.schemas.goals import KpiGoalIn
from kpi_app.models.records import KpiGoal
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)


class GoalService:
    def __init__(self, repository: GoalRepository) -> None:
        self.repository = repository

    def save(self, user_id: int, goals: KpiGoalIn) -> int:
        try:
            goal_id = self.repository.insert_goal(user_id, goals.model_dump())
        except Exception as exc:
            logger.error("週目標寫入失敗：user=%s | %s", user_id, exc)
            raise StoreUnavailableError("Failed to save goals") from exc
        logger.info("週目標已儲存：user=%s week_start=%s id=%s", user_id, goals.week_start, goal_id)
        return goal_id

    def get_current(self, user_id: int) -> Optional[KpiGoal]:
        try:
            return self.repository.get_latest_goal(user_id)
        except Exception as exc:
            logger.error("週目標讀取失敗：user=%s | %s", user_id, exc)
            raise StoreUnavailableError("Failed to fetch goals") from exc
