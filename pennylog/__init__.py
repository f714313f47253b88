"""
pennylog
~~~~~~~~

Local, rule-based expense engine for the PennyLog tracker. It categorizes
free-text expenses and turns a batch of categorized expenses into weekly
insights and a short-term spending forecast. Everything here is a pure
transform over in-memory records, so the same helpers back the FastAPI
routes and any host that imports the package directly.
"""

from .core.exceptions import RuleTableError, ValidationError
from .models.expense import Expense, coerce_expenses
from .utils.categorizer import categorize, score_categories
from .utils.insights import WeeklyInsight, generate_weekly_insights
from .utils.patterns import PatternAnalysis, Trend, analyze_spending_patterns
from .utils.upi_parser import ParsedTransaction, parse_upi_notification

__all__ = [
    "Expense",
    "ParsedTransaction",
    "PatternAnalysis",
    "RuleTableError",
    "Trend",
    "ValidationError",
    "WeeklyInsight",
    "analyze_spending_patterns",
    "categorize",
    "coerce_expenses",
    "generate_weekly_insights",
    "parse_upi_notification",
    "score_categories",
]
