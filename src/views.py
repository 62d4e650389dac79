"""Derived, display-only views over the match list.

Everything here is a pure function of the matches plus a clock value or a
calendar cursor, so the dashboard can recompute it on every rerun.
"""
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, List, NamedTuple

import pandas as pd
import pandera as pa
from pydantic import BaseModel

from src.models import Match, MatchStatus
from src.utils.constants import CALENDAR_CELLS
from src.validation import MatchFrameSchema

logger = logging.getLogger(__name__)

MATCH_COLUMNS = ["id", "date", "time", "club", "team", "result", "status"]


class MatchStats(BaseModel):
    total: int
    this_month: int
    won: int
    lost: int
    pending: int


class CalendarDay(NamedTuple):
    date: date
    is_current_month: bool


def matches_frame(matches: List[Match]) -> pd.DataFrame:
    """Build the table view of the matches and validate it."""
    df = pd.DataFrame(
        [{**m.model_dump(), "status": m.status.value} for m in matches],
        columns=MATCH_COLUMNS,
    )
    if df.empty:
        return df

    try:
        MatchFrameSchema.validate(df, lazy=True)
    except pa.errors.SchemaErrors as e:
        logger.warning(f"Match table validation issues found (non-critical): {len(e.failure_cases)} cases")
    return df


def _match_days(df: pd.DataFrame) -> pd.Series:
    return pd.to_datetime(df["date"], format="%Y-%m-%d", errors="coerce")


def kickoff_times(df: pd.DataFrame) -> pd.Series:
    """Combine date and time columns; a missing time means midnight."""
    clock = df["time"].fillna("").astype(str).str.strip().str.slice(0, 5)
    clock = clock.where(clock != "", "00:00")
    return pd.to_datetime(
        df["date"].astype(str) + " " + clock, format="%Y-%m-%d %H:%M", errors="coerce"
    )


def proximity_sort(matches: List[Match], now: datetime) -> List[Match]:
    """Order matches by how far their kick-off is from now, closest first.

    Ties keep their incoming order. Matches whose date or time cannot be
    parsed are put at the end.
    """
    if not matches:
        return []
    df = matches_frame(matches)
    distance = (kickoff_times(df) - pd.Timestamp(now)).abs()
    order = distance.sort_values(kind="mergesort", na_position="last").index
    return [matches[i] for i in order]


def monthly_stats(matches: List[Match], today: date) -> MatchStats:
    """Count all matches and those falling in today's month and year."""
    if not matches:
        return MatchStats(total=0, this_month=0, won=0, lost=0, pending=0)

    df = matches_frame(matches)
    days = _match_days(df)
    in_month = (days.dt.month == today.month) & (days.dt.year == today.year)
    statuses = df["status"].value_counts()
    return MatchStats(
        total=len(df),
        this_month=int(in_month.sum()),
        won=int(statuses.get(MatchStatus.WON.value, 0)),
        lost=int(statuses.get(MatchStatus.LOST.value, 0)),
        pending=int(statuses.get(MatchStatus.PENDING.value, 0)),
    )


def matches_per_month(matches: List[Match]) -> Dict[str, int]:
    """Number of matches per YYYY-MM, oldest month first."""
    if not matches:
        return {}
    days = _match_days(matches_frame(matches)).dropna()
    counts = days.dt.strftime("%Y-%m").value_counts().sort_index()
    return {month: int(n) for month, n in counts.items()}


def shift_month(cursor: date, offset: int) -> date:
    """First day of the month `offset` months away from the cursor's month."""
    index = cursor.year * 12 + (cursor.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def calendar_grid(cursor: date) -> List[CalendarDay]:
    """Six Monday-first weeks covering the cursor's month.

    Days before the 1st and after the last day of the month are filled in
    from the neighbouring months and flagged as not current.
    """
    first = cursor.replace(day=1)
    start = first - timedelta(days=first.weekday())
    grid = []
    for i in range(CALENDAR_CELLS):
        day = start + timedelta(days=i)
        grid.append(CalendarDay(day, day.year == first.year and day.month == first.month))
    return grid


def matches_by_date(matches: List[Match]) -> Dict[str, List[Match]]:
    """Group matches by their exact date string."""
    grouped = defaultdict(list)
    for m in matches:
        grouped[m.date].append(m)
    return dict(grouped)
