"""
Historical spending pattern analysis.

Expenses are grouped into seven-day buckets anchored at the first record.
A record falling seven or more days after the current anchor opens a new
bucket anchored at that record's own date, so buckets follow the data
rather than calendar weeks and gaps between purchases shift the boundaries.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pennylog.models.expense import Expense, coerce_expenses
from pennylog.utils.formatters import format_currency, to_amount

logger = logging.getLogger(__name__)

MIN_RECORDS = 7
BUCKET_DAYS = 7
TREND_THRESHOLD = Decimal("10")

INSUFFICIENT_DATA_PREDICTION = "Need more data for analysis"


class Trend(str, Enum):
    STABLE = "stable"
    INCREASING = "increasing"
    DECREASING = "decreasing"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass
class PatternAnalysis:
    trend: Trend
    prediction: str
    patterns: List[str] = field(default_factory=list)
    weekly_totals: List[Decimal] = field(default_factory=list)
    average_weekly: Optional[Decimal] = None
    change_percentage: Optional[Decimal] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trend": self.trend.value,
            "prediction": self.prediction,
            "patterns": list(self.patterns),
            "weekly_totals": [to_amount(total) for total in self.weekly_totals],
            "average_weekly": to_amount(self.average_weekly),
            "change_percentage": to_amount(self.change_percentage),
        }


def bucket_weekly_totals(expenses: Sequence[Expense]) -> List[Decimal]:
    """Sum expenses into consecutive seven-day buckets, oldest first."""
    if not expenses:
        return []

    ordered = sorted(expenses, key=lambda exp: exp.date)
    weekly_totals: List[Decimal] = []
    anchor = ordered[0].date
    running = Decimal("0")

    for exp in ordered:
        if (exp.date - anchor).days >= BUCKET_DAYS:
            logger.debug(f"Closing bucket anchored at {anchor} with total {running}")
            weekly_totals.append(running)
            anchor = exp.date
            running = exp.amount
        else:
            running += exp.amount

    if running > 0:
        weekly_totals.append(running)
    return weekly_totals


def change_percentage(previous: Decimal, recent: Decimal) -> Optional[Decimal]:
    if previous == 0:
        return None
    return (recent - previous) / previous * 100


def classify_trend(weekly_totals: Sequence[Decimal]) -> Trend:
    """Compare the last two buckets; anything within +/-10% is stable."""
    if len(weekly_totals) < 2:
        return Trend.STABLE

    change = change_percentage(weekly_totals[-2], weekly_totals[-1])
    if change is None:
        return Trend.STABLE
    if change > TREND_THRESHOLD:
        return Trend.INCREASING
    if change < -TREND_THRESHOLD:
        return Trend.DECREASING
    return Trend.STABLE


def analyze_spending_patterns(
    expenses: Iterable[Any],
    currency_symbol: Optional[str] = None,
) -> PatternAnalysis:
    """
    Classify the week-over-week trend and predict next week's spend.

    Raises:
        ValidationError: when a record has a malformed date or amount.
    """
    records = coerce_expenses(expenses)
    if len(records) < MIN_RECORDS:
        return PatternAnalysis(trend=Trend.INSUFFICIENT_DATA, prediction=INSUFFICIENT_DATA_PREDICTION)

    weekly_totals = bucket_weekly_totals(records)
    trend = classify_trend(weekly_totals)

    if weekly_totals:
        average = sum(weekly_totals, Decimal("0")) / len(weekly_totals)
    else:
        average = Decimal("0")
    prediction = (
        f"Based on your spending pattern, expect to spend approximately "
        f"{format_currency(average, currency_symbol)} next week."
    )

    # most_common keeps first-seen order among equal counts
    most_frequent, _ = Counter(exp.category for exp in records).most_common(1)[0]
    patterns = [f"You spend most frequently on {most_frequent}"]

    change = None
    if len(weekly_totals) >= 2:
        change = change_percentage(weekly_totals[-2], weekly_totals[-1])

    logger.info(f"Pattern analysis: {len(weekly_totals)} buckets, trend={trend.value}")
    return PatternAnalysis(
        trend=trend,
        prediction=prediction,
        patterns=patterns,
        weekly_totals=weekly_totals,
        average_weekly=average,
        change_percentage=change,
    )
