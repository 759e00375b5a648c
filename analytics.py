"""
Analytics aggregation over expense records.

Nothing here is stored: every request rescans the collection. Reads are not
isolated from concurrent writes, so a summary may reflect a write that lands
mid-scan.
"""
from calendar import monthrange
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from config import TREND_MONTHS
from schemas import AnalyticsSummary, Expense, MonthlyTotal, utcnow
from store import ExpenseStore


def window_start(now: datetime, months: int = TREND_MONTHS) -> datetime:
    """``now`` moved back by ``months`` calendar months, clamping the day to the month's end."""
    year, month0 = divmod(now.year * 12 + (now.month - 1) - months, 12)
    month = month0 + 1
    day = min(now.day, monthrange(year, month)[1])
    return now.replace(year=year, month=month, day=day)


def savings_percentage(total_savings: float, total_expenses: float) -> float:
    if total_expenses <= 0:
        return 0.0
    return round(total_savings / total_expenses * 100, 2)


def summarize(records: Iterable[Expense], trend: Iterable[Mapping[str, Any]]) -> AnalyticsSummary:
    records = list(records)
    total_expenses = sum(e.amount for e in records)
    total_savings = sum(e.savings for e in records)

    # Only categories that actually have records show up
    breakdown: Dict[str, float] = {}
    for e in records:
        breakdown[e.category] = breakdown.get(e.category, 0.0) + e.amount

    monthly: List[MonthlyTotal] = sorted(
        (MonthlyTotal.model_validate(dict(row)) for row in trend),
        key=lambda m: (m.year, m.month),
    )

    return AnalyticsSummary(
        total_expenses=total_expenses,
        total_savings=total_savings,
        optimizable_count=sum(1 for e in records if e.optimizable),
        category_breakdown=breakdown,
        savings_percentage=savings_percentage(total_savings, total_expenses),
        monthly_trend=monthly,
        total_count=len(records),
    )


def compute_analytics(
    store: ExpenseStore,
    now: Optional[datetime] = None,
    months: int = TREND_MONTHS,
) -> AnalyticsSummary:
    """Build the analytics summary from the store's current contents."""
    since = window_start(now or utcnow(), months)
    records = store.get_all()
    trend = store.monthly_totals(since)
    return summarize(records, trend)
