"""
Category rule table.

Keywords and vendor patterns live in a JSON file keyed by category. The file
is read once per process, its patterns compiled, and the result kept as an
immutable tuple so every classification reuses the same compiled table.

Declaration order in the file is significant: it is the order categories are
scored in, and therefore the tie-break order.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pennylog.core.config import settings
from pennylog.core.exceptions import RuleTableError

logger = logging.getLogger(__name__)

FALLBACK_CATEGORY = "Other"
CATEGORIES: Tuple[str, ...] = (
    "Food",
    "Transport",
    "Shopping",
    "Entertainment",
    "Health",
    "Bills",
    "Education",
)


@dataclass(frozen=True)
class CategoryRule:
    name: str
    keywords: Tuple[str, ...]
    vendor_patterns: Tuple[re.Pattern, ...]


def _unique_entries(values: Any, category: str, field: str, lower: bool = False) -> Tuple[str, ...]:
    if not isinstance(values, list):
        raise RuleTableError(f"'{field}' for category '{category}' must be a list")

    seen: Dict[str, None] = {}
    for value in values:
        if not isinstance(value, str) or not value.strip():
            raise RuleTableError(f"Empty or non-text entry in '{field}' for category '{category}'")
        value = value.strip()
        seen.setdefault(value.lower() if lower else value, None)
    return tuple(seen)


def build_category_rules(table: Dict[str, Any]) -> Tuple[CategoryRule, ...]:
    """Compile a decoded rule table into ordered ``CategoryRule`` entries."""
    if not isinstance(table, dict) or not table:
        raise RuleTableError("Category rule table must be a non-empty object")

    rules = []
    for category, spec in table.items():
        if category not in CATEGORIES:
            raise RuleTableError(f"Unknown category '{category}' in rule table")
        if not isinstance(spec, dict):
            raise RuleTableError(f"Rules for category '{category}' must be an object")

        keywords = _unique_entries(spec.get("keywords", []), category, "keywords", lower=True)
        patterns = []
        for raw in _unique_entries(spec.get("vendor_patterns", []), category, "vendor_patterns"):
            try:
                patterns.append(re.compile(raw, re.IGNORECASE))
            except re.error as e:
                raise RuleTableError(f"Invalid vendor pattern '{raw}' for category '{category}': {e}") from e

        rules.append(CategoryRule(name=category, keywords=keywords, vendor_patterns=tuple(patterns)))
    return tuple(rules)


def load_category_rules(path: Optional[str | Path] = None) -> Tuple[CategoryRule, ...]:
    rules_file = Path(path or settings.CATEGORY_RULES_JSON)
    try:
        with rules_file.open(encoding="utf-8") as fp:
            table = json.load(fp)
    except OSError as e:
        raise RuleTableError(f"Cannot read category rules from {rules_file}: {e}") from e
    except json.JSONDecodeError as e:
        raise RuleTableError(f"Malformed category rules in {rules_file}: {e}") from e

    rules = build_category_rules(table)
    logger.info(f"Loaded {len(rules)} category rules from {rules_file}")
    return rules


@lru_cache(maxsize=1)
def get_category_rules() -> Tuple[CategoryRule, ...]:
    """Process-wide rule table, loaded on first use."""
    return load_category_rules()
