"""Monthly recap aggregation.

A recap is derived on demand from the activity and finance records dated
within one calendar month: an activity count, a per-category histogram,
income and expense totals, and a generated text summary. Nothing here writes
to the record store or keeps state between calls.
"""

import calendar
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR, date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Tuple

from starlette.concurrency import run_in_threadpool

from errors import InvalidPeriod
from schemas import RecapResponse

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class MonthPeriod:
    month: int
    year: int

    def __post_init__(self):
        if not (1 <= self.month <= 12 and MINYEAR <= self.year <= MAXYEAR):
            raise InvalidPeriod(self.month, self.year)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def contains(self, day: date) -> bool:
        return self.first_day <= day <= self.last_day

    @property
    def label(self) -> str:
        return f"{self.year}-{self.month:02d}"


def record_date(value) -> date:
    """Calendar date of a stored record, ignoring any time of day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def to_money(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() first so binary floats keep their shortest decimal form
    return Decimal(str(value))


@dataclass
class RecapFigures:
    period: MonthPeriod
    total_activities: int = 0
    activities_by_category: Dict[str, int] = field(default_factory=dict)
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense

    @property
    def top_category(self) -> str:
        """Most frequent category; ties go to the alphabetically first."""
        if not self.activities_by_category:
            return "-"
        return min(self.activities_by_category.items(), key=lambda kv: (-kv[1], kv[0]))[0]

    def summary_payload(self) -> Dict[str, Any]:
        """Input handed to the summarizer."""
        return {
            "month": self.period.month,
            "year": self.period.year,
            "total_activities": self.total_activities,
            "activities_by_category": dict(self.activities_by_category),
            "top_category": self.top_category,
            "total_income": self.total_income,
            "total_expense": self.total_expense,
            "net": self.net,
        }


def compute_figures(
    period: MonthPeriod,
    activities: Iterable[Dict[str, Any]],
    finances: Iterable[Dict[str, Any]],
) -> RecapFigures:
    """Aggregate the records that fall inside the period.

    Records outside the period are ignored. Categories with no records are
    left out of the histogram rather than reported as zero.
    """
    in_range_activities = [a for a in activities if period.contains(record_date(a["date"]))]
    in_range_finances = [f for f in finances if period.contains(record_date(f["date"]))]

    by_category = Counter(a["category"] for a in in_range_activities)

    return RecapFigures(
        period=period,
        total_activities=len(in_range_activities),
        activities_by_category=dict(by_category),
        total_income=sum((to_money(f.get("income")) for f in in_range_finances), ZERO),
        total_expense=sum((to_money(f.get("expense")) for f in in_range_finances), ZERO),
    )


class RecapAggregator:
    """Reads one period from the record stores and builds its recap.

    `activities` and `finances` need a `list(period)` method; `summarizer`
    needs an async `summarize(payload)` returning text.
    """

    def __init__(self, activities, finances, summarizer):
        self.activities = activities
        self.finances = finances
        self.summarizer = summarizer

    def _read(self, period: MonthPeriod) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        return self.activities.list(period), self.finances.list(period)

    async def load(self, period: MonthPeriod) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """One read of each record list, off the event loop."""
        return await run_in_threadpool(self._read, period)

    async def recap(self, month: int, year: int) -> RecapResponse:
        period = MonthPeriod(month, year)
        acts, fins = await self.load(period)
        return await self.recap_from(period, acts, fins)

    async def recap_from(
        self,
        period: MonthPeriod,
        acts: List[Dict[str, Any]],
        fins: List[Dict[str, Any]],
    ) -> RecapResponse:
        """Recap of records already read, so callers can reuse the same lists."""
        figures = compute_figures(period, acts, fins)
        summary = await self.summarizer.summarize(figures.summary_payload())
        logger.info(
            f"Recap {period.label}: {figures.total_activities} activities, "
            f"{len(fins)} finance entries"
        )
        return RecapResponse(
            month=period.month,
            year=period.year,
            total_activities=figures.total_activities,
            activities_by_category=figures.activities_by_category,
            total_income=figures.total_income,
            total_expense=figures.total_expense,
            net=figures.net,
            summary=summary,
        )
