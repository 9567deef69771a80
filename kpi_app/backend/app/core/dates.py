"""日曆日期解析。"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Union

from kpi_app.backend.app.core.errors import InvalidDateError

_CALENDAR_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_calendar_date(value: Union[str, date]) -> date:
    """
    將 YYYY-MM-DD 解析為 naive date；ISO 週（2024-W36-1）與緊湊格式（20240902）一律拒絕。
    只做日曆日運算，不經過時區換算，避免跨時區造成前後差一天。
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        if not _CALENDAR_DATE.fullmatch(text):
            raise ValueError(text)
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidDateError(f"日期格式需為 YYYY-MM-DD：{value!r}") from exc
