"""週彙總服務：將一週內的每日紀錄彙整為合計與轉換率。"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Protocol, Union

from kpi_app.backend.app.core.dates import parse_calendar_date
from kpi_app.backend.app.core.errors import StoreUnavailableError
from kpi_app.backend.app.schemas.kpi import Rate, WeeklySummary, WeeklyTotals
from kpi_app.models.records import GAUGE_FIELD, SUMMABLE_FIELDS, DailyRecord
from kpi_app.utils.logging import get_logger

logger = get_logger(__name__)

WEEK_LENGTH_DAYS = 7
_TWO_PLACES = Decimal("0.01")


class DailyRecordStore(Protocol):
    """週彙總所需的紀錄儲存介面。"""

    def fetch_records_in_range(self, user_id: int, start: date, end_inclusive: date) -> List[DailyRecord]:
        ...

    def upsert_daily_record(self, user_id: int, record_date: date, fields: dict) -> None:
        ...


def parse_week_start(value: Union[str, date]) -> date:
    """週起始日；週結束日一律為 +6 天（含）。"""
    return parse_calendar_date(value)


def compute_rate(numerator: int, denominator: int) -> Rate:
    """百分比（四捨五入至小數兩位）；分母為 0 時回傳整數 0。"""
    if denominator == 0:
        return 0
    return (Decimal(numerator) * 100 / Decimal(denominator)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def summarize_records(records: Iterable[DailyRecord]) -> WeeklySummary:
    """
    純計算：
      - 十個累加型指標逐日加總
      - ongoing_projects 取日期最後一筆的快照（無資料為 0）
      - 六個轉換率各自判斷分母
    """
    ordered = sorted(records, key=lambda r: r.date)

    totals = {name: sum(getattr(r, name) for r in ordered) for name in SUMMABLE_FIELDS}
    totals[GAUGE_FIELD] = getattr(ordered[-1], GAUGE_FIELD) if ordered else 0
    t = WeeklyTotals(**totals)

    valid_emails = t.valid_emails_manual + t.valid_emails_outsource
    return WeeklySummary(
        daily_data=ordered,
        totals=t,
        reply_rate=compute_rate(t.replies_received, valid_emails),
        meeting_rate=compute_rate(t.meetings_scheduled, t.replies_received),
        deal_rate=compute_rate(t.deals_closed, t.meetings_scheduled),
        project_rate=compute_rate(t.projects_created, t.meetings_scheduled),
        slide_view_rate=compute_rate(t.slide_views, valid_emails),
        video_view_rate=compute_rate(t.video_views, valid_emails),
    )


class WeeklySummaryService:
    """週彙總（無副作用，可重入）。"""

    def __init__(self, store: DailyRecordStore) -> None:
        self.store = store

    def get_weekly_summary(self, user_id: int, week_start: Union[str, date]) -> WeeklySummary:
        start = parse_week_start(week_start)
        end = start + timedelta(days=WEEK_LENGTH_DAYS - 1)
        try:
            records = self.store.fetch_records_in_range(user_id, start, end)
        except Exception as exc:
            logger.error("週彙總讀取失敗：user=%s %s~%s | %s", user_id, start, end, exc)
            raise StoreUnavailableError("Failed to fetch weekly data") from exc

        logger.debug("週彙總：user=%s %s~%s 筆數=%s", user_id, start, end, len(records))
        return summarize_records(records)
