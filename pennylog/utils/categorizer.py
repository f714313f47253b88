"""
Scoring-based expense categorizer.

Each category accumulates points from its rule table entry:

- 3 per vendor pattern found in the note/vendor text
- 1 per keyword contained in the text
- 0.5 soft amount priors (small amounts lean Food, large ones Shopping/Bills)

The highest score wins, ties going to the category declared first. With no
positive score the expense falls back to ``Other``.
"""
from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Sequence

from pennylog.utils.rules import FALLBACK_CATEGORY, CategoryRule, get_category_rules

logger = logging.getLogger(__name__)

VENDOR_PATTERN_WEIGHT = 3.0
KEYWORD_WEIGHT = 1.0
AMOUNT_PRIOR_WEIGHT = 0.5

SMALL_AMOUNT_LIMIT = Decimal("50")
LARGE_AMOUNT_LIMIT = Decimal("1000")
SMALL_AMOUNT_CATEGORIES = ("Food",)
LARGE_AMOUNT_CATEGORIES = ("Shopping", "Bills")


def _as_decimal(amount: Any) -> Decimal:
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        value = None
    if value is None or not value.is_finite():
        logger.warning(f"Ignoring non-numeric amount {amount!r} while categorizing")
        return Decimal("0")
    return value


def score_categories(
    note: Optional[str],
    vendor: Optional[str],
    amount: Any,
    rules: Optional[Sequence[CategoryRule]] = None,
) -> Dict[str, float]:
    """Return the score of every category, in rule table order."""
    rules = rules if rules is not None else get_category_rules()
    text = f"{note or ''} {vendor or ''}".lower()

    scores: Dict[str, float] = {rule.name: 0.0 for rule in rules}

    for rule in rules:
        for pattern in rule.vendor_patterns:
            if pattern.search(text):
                scores[rule.name] += VENDOR_PATTERN_WEIGHT

    for rule in rules:
        for keyword in rule.keywords:
            if keyword in text:
                scores[rule.name] += KEYWORD_WEIGHT

    value = _as_decimal(amount)
    if Decimal("0") < value < SMALL_AMOUNT_LIMIT:
        prior_categories = SMALL_AMOUNT_CATEGORIES
    elif value > LARGE_AMOUNT_LIMIT:
        prior_categories = LARGE_AMOUNT_CATEGORIES
    else:
        prior_categories = ()
    for category in prior_categories:
        if category in scores:
            scores[category] += AMOUNT_PRIOR_WEIGHT

    return scores


def categorize(
    note: Optional[str],
    vendor: Optional[str],
    amount: Any,
    rules: Optional[Sequence[CategoryRule]] = None,
) -> str:
    """Infer a category for an expense from its note, vendor and amount.

    Args:
        note: Free text attached to the expense (may be a payment notification).
        vendor: Merchant or payment app name.
        amount: Expense amount; values that are not numbers count as 0.
        rules: Rule table to score against. Defaults to the process-wide table.

    Returns:
        One of the rule table categories, or ``Other`` when nothing scored.
    """
    scores = score_categories(note, vendor, amount, rules)

    best_category = FALLBACK_CATEGORY
    best_score = 0.0
    for category, score in scores.items():
        if score > best_score:
            best_category = category
            best_score = score

    logger.debug(f"Categorized {note!r}/{vendor!r} as {best_category} (score={best_score})")
    return best_category
