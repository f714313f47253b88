from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pennylog.models.expense import coerce_expenses
from pennylog.utils.formatters import format_currency, to_amount, weekday_name

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
MAX_TIPS = 3
HIGH_DAILY_SPEND = Decimal("500")

EMPTY_WEEK_SUMMARY = "No expenses recorded this week."
EMPTY_WEEK_TIP = "Start tracking your daily expenses to get personalized insights!"

# (category, share of the weekly total it must exceed, tips), checked in order
CATEGORY_TIP_RULES: Tuple[Tuple[str, Decimal, Tuple[str, str]], ...] = (
    (
        "Food",
        Decimal("0.4"),
        (
            "Try cooking at home more often to reduce food delivery expenses.",
            "Consider meal prepping on weekends to save time and money.",
        ),
    ),
    (
        "Transport",
        Decimal("0.3"),
        (
            "Consider using public transport or carpooling to reduce travel costs.",
            "Plan your trips efficiently to minimize unnecessary rides.",
        ),
    ),
    (
        "Shopping",
        Decimal("0.5"),
        (
            "Create a shopping list before buying to avoid impulse purchases.",
            "Look for discounts and compare prices before making big purchases.",
        ),
    ),
    (
        "Entertainment",
        Decimal("0.2"),
        (
            "Look for free or low-cost entertainment alternatives like local events.",
            "Consider sharing subscription services with family or friends.",
        ),
    ),
)

HIGH_SPEND_TIPS = (
    "Set a daily spending limit to help control your expenses.",
    "Review your expenses weekly to identify areas for improvement.",
)

GENERIC_TIPS = (
    "You're doing well with balanced spending across categories!",
    "Keep tracking your expenses to maintain good financial habits.",
    "Consider setting monthly budgets for each spending category.",
)


@dataclass
class WeeklyInsight:
    """Summary, tips and breakdowns for one week of expenses."""

    summary: str
    tips: List[str]
    category_totals: Dict[str, Decimal] = field(default_factory=dict)
    daily_totals: Dict[str, Decimal] = field(default_factory=dict)
    total: Decimal = Decimal("0")
    transaction_count: int = 0
    average_per_day: Decimal = Decimal("0")
    top_category: Optional[str] = None
    top_category_percentage: int = 0
    highest_spending_day: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category_totals"] = {cat: to_amount(total) for cat, total in self.category_totals.items()}
        data["daily_totals"] = {day: to_amount(total) for day, total in self.daily_totals.items()}
        data["total"] = to_amount(self.total)
        data["average_per_day"] = to_amount(self.average_per_day)
        return data


def _first_max(totals: Dict[str, Decimal]) -> str:
    # max() keeps the first of equal maxima, i.e. insertion order
    return max(totals, key=totals.__getitem__)


def percentage_of(part: Decimal, total: Decimal) -> int:
    if total == 0:
        return 0
    return int((part / total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def generate_saving_tips(
    category_totals: Dict[str, Decimal],
    total: Decimal,
    avg_per_day: Decimal,
) -> List[str]:
    """
    Threshold-driven saving tips, most relevant first, capped at three.
    Falls back to generic encouragement when no threshold is crossed.
    """
    tips: List[str] = []
    for category, share, category_tips in CATEGORY_TIP_RULES:
        if category_totals.get(category, Decimal("0")) > total * share:
            tips.extend(category_tips)

    if avg_per_day > HIGH_DAILY_SPEND:
        tips.extend(HIGH_SPEND_TIPS)

    if not tips:
        tips.extend(GENERIC_TIPS)

    return tips[:MAX_TIPS]


def generate_weekly_insights(
    expenses: Iterable[Any],
    currency_symbol: Optional[str] = None,
) -> WeeklyInsight:
    """
    Build the weekly report for a batch of expenses.

    The caller selects the week; the batch is not checked against a date
    window. The daily average always divides by seven calendar days.

    Raises:
        ValidationError: when a record has a malformed date or amount.
    """
    records = coerce_expenses(expenses)
    if not records:
        return WeeklyInsight(summary=EMPTY_WEEK_SUMMARY, tips=[EMPTY_WEEK_TIP])

    category_totals: Dict[str, Decimal] = defaultdict(Decimal)
    daily_totals: Dict[str, Decimal] = defaultdict(Decimal)
    for exp in records:
        category_totals[exp.category] += exp.amount
        daily_totals[weekday_name(exp.date)] += exp.amount

    total = sum((exp.amount for exp in records), Decimal("0"))
    avg_per_day = total / DAYS_PER_WEEK

    top_category = _first_max(category_totals)
    top_percentage = percentage_of(category_totals[top_category], total)
    highest_day = _first_max(daily_totals)

    summary = (
        f"This week you spent {format_currency(total, currency_symbol)} "
        f"across {len(records)} transactions. "
        f"Your highest spending was on {top_category} ({top_percentage}% of total). "
        f"{highest_day} was your biggest spending day with "
        f"{format_currency(daily_totals[highest_day], currency_symbol)}."
    )
    logger.info(f"Weekly insights generated: total={total}, transactions={len(records)}, top={top_category}")

    return WeeklyInsight(
        summary=summary,
        tips=generate_saving_tips(category_totals, total, avg_per_day),
        category_totals=dict(category_totals),
        daily_totals=dict(daily_totals),
        total=total,
        transaction_count=len(records),
        average_per_day=avg_per_day,
        top_category=top_category,
        top_category_percentage=top_percentage,
        highest_spending_day=highest_day,
    )
