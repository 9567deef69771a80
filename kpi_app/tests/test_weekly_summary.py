"""週彙總計算與 WeeklySummaryService 的單元測試。"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import List

import pytest

from kpi_app.backend.app.core.errors import InvalidDateError, StoreUnavailableError
from kpi_app.backend.app.services.weekly_summary_service import (
    WeeklySummaryService,
    compute_rate,
    summarize_records,
)
from kpi_app.models.records import SUMMABLE_FIELDS, DailyRecord

WEEK_START = date(2024, 9, 2)


def _day1() -> DailyRecord:
    return DailyRecord(
        date=WEEK_START,
        valid_emails_manual=10,
        valid_emails_outsource=0,
        replies_received=2,
        meetings_scheduled=1,
        deals_closed=0,
        projects_created=0,
        ongoing_projects=3,
        slide_views=1,
        video_views=0,
    )


def _day2() -> DailyRecord:
    return DailyRecord(
        date=WEEK_START + timedelta(days=1),
        valid_emails_manual=5,
        valid_emails_outsource=5,
        replies_received=1,
        meetings_scheduled=1,
        deals_closed=1,
        projects_created=1,
        ongoing_projects=5,
        slide_views=2,
        video_views=1,
    )


class StubStore:
    """記錄呼叫參數的假儲存層。"""

    def __init__(self, records: List[DailyRecord] | None = None, error: Exception | None = None) -> None:
        self.records = records or []
        self.error = error
        self.calls: list[tuple] = []

    def fetch_records_in_range(self, user_id, start, end_inclusive):
        self.calls.append((user_id, start, end_inclusive))
        if self.error:
            raise self.error
        return [r for r in self.records if start <= r.date <= end_inclusive]

    def upsert_daily_record(self, user_id, record_date, fields):  # pragma: no cover
        raise AssertionError("週彙總不應寫入")


def test_two_day_week_totals_and_rates() -> None:
    """兩天資料的合計、快照與六個轉換率。"""

    summary = summarize_records([_day1(), _day2()])
    totals = summary.totals

    assert totals.valid_emails_manual + totals.valid_emails_outsource == 20
    assert totals.replies_received == 3
    assert totals.meetings_scheduled == 2
    assert totals.deals_closed == 1
    assert totals.projects_created == 1
    assert totals.ongoing_projects == 5
    assert totals.slide_views == 3
    assert totals.video_views == 1

    assert summary.reply_rate == Decimal("15.00")
    assert summary.meeting_rate == Decimal("66.67")
    assert summary.deal_rate == Decimal("50.00")
    assert summary.project_rate == Decimal("50.00")
    assert summary.slide_view_rate == Decimal("15.00")
    assert summary.video_view_rate == Decimal("5.00")
    assert str(summary.video_view_rate) == "5.00"


def test_empty_week_is_all_zero() -> None:
    """沒有紀錄時，合計與轉換率皆為 0，daily_data 為空。"""

    summary = summarize_records([])

    assert summary.daily_data == []
    assert all(value == 0 for value in summary.totals.model_dump().values())
    for rate in (
        summary.reply_rate,
        summary.meeting_rate,
        summary.deal_rate,
        summary.project_rate,
        summary.slide_view_rate,
        summary.video_view_rate,
    ):
        assert rate == 0
        assert type(rate) is int


def test_zero_meetings_gives_literal_zero_deal_and_project_rate() -> None:
    record = DailyRecord(date=WEEK_START, valid_emails_manual=4, replies_received=1)

    summary = summarize_records([record])

    assert summary.deal_rate == 0 and type(summary.deal_rate) is int
    assert summary.project_rate == 0 and type(summary.project_rate) is int
    assert summary.reply_rate == Decimal("25.00")


def test_zero_denominators_are_independent() -> None:
    """有效信件為 0 但有商談：信件類轉換率為 0，商談類照常計算。"""

    record = DailyRecord(date=WEEK_START, replies_received=4, meetings_scheduled=2, deals_closed=1, projects_created=2)

    summary = summarize_records([record])

    assert summary.reply_rate == 0
    assert summary.slide_view_rate == 0
    assert summary.video_view_rate == 0
    assert summary.meeting_rate == Decimal("50.00")
    assert summary.deal_rate == Decimal("50.00")
    assert summary.project_rate == Decimal("100.00")


def test_zero_replies_only_zeroes_meeting_rate() -> None:
    """回信為 0 但有有效信件與商談：只有 meeting_rate 走分母 0 的分支。"""

    record = DailyRecord(
        date=WEEK_START, valid_emails_manual=20, replies_received=0, meetings_scheduled=2, deals_closed=1, slide_views=5
    )

    summary = summarize_records([record])

    assert summary.meeting_rate == 0 and type(summary.meeting_rate) is int
    assert summary.reply_rate == Decimal("0.00")
    assert summary.deal_rate == Decimal("50.00")
    assert summary.slide_view_rate == Decimal("25.00")


def test_zero_numerator_with_denominator_is_decimal_zero() -> None:
    rate = compute_rate(0, 10)
    assert rate == Decimal("0.00")
    assert isinstance(rate, Decimal)


def test_ongoing_projects_uses_latest_date_even_if_unsorted() -> None:
    """快照取日期最後一筆，不受輸入順序影響。"""

    summary = summarize_records([_day2(), _day1()])

    assert summary.totals.ongoing_projects == 5
    assert [r.date for r in summary.daily_data] == [WEEK_START, WEEK_START + timedelta(days=1)]


def test_sum_treats_missing_fields_as_zero() -> None:
    rows = [
        {"date": "2024-09-02", "emails_sent_manual": 3, "replies_received": None},
        {"date": "2024-09-03", "emails_sent_manual": float("nan"), "replies_received": 2},
        {"date": "2024-09-04"},
    ]
    records = [DailyRecord.from_row(row) for row in rows]

    summary = summarize_records(records)

    assert summary.totals.emails_sent_manual == 3
    assert summary.totals.replies_received == 2
    for name in SUMMABLE_FIELDS:
        assert getattr(summary.totals, name) == sum(getattr(r, name) for r in records)


def test_service_fetches_inclusive_seven_day_window() -> None:
    store = StubStore([_day1(), DailyRecord(date=WEEK_START + timedelta(days=7), replies_received=99)])
    service = WeeklySummaryService(store)

    summary = service.get_weekly_summary(7, "2024-09-02")

    assert store.calls == [(7, WEEK_START, date(2024, 9, 8))]
    assert summary.totals.replies_received == 2


def test_service_is_idempotent() -> None:
    service = WeeklySummaryService(StubStore([_day1(), _day2()]))

    first = service.get_weekly_summary(1, WEEK_START)
    second = service.get_weekly_summary(1, WEEK_START)

    assert first == second


def test_invalid_week_start_raises_before_fetch() -> None:
    store = StubStore()
    service = WeeklySummaryService(store)

    with pytest.raises(InvalidDateError):
        service.get_weekly_summary(1, "2024-02-30")
    assert store.calls == []


@pytest.mark.parametrize("value", ["2024-W36-1", "20240902", "2024-9-2", "2024-09-02T00:00:00", ""])
def test_week_start_accepts_only_calendar_format(value) -> None:
    store = StubStore()

    with pytest.raises(InvalidDateError):
        WeeklySummaryService(store).get_weekly_summary(1, value)
    assert store.calls == []


def test_store_failure_is_reported_as_unavailable() -> None:
    service = WeeklySummaryService(StubStore(error=RuntimeError("database is locked")))

    with pytest.raises(StoreUnavailableError):
        service.get_weekly_summary(1, "2024-09-02")


def test_rates_serialize_as_fixed_point_strings_and_zero_as_number() -> None:
    record = DailyRecord(date=WEEK_START, valid_emails_manual=20, replies_received=3)

    payload = summarize_records([record]).model_dump(mode="json")

    assert payload["reply_rate"] == "15.00"
    assert payload["deal_rate"] == 0
