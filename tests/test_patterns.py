from datetime import date, timedelta
from decimal import Decimal

from pennylog.utils.patterns import (
    INSUFFICIENT_DATA_PREDICTION,
    Trend,
    analyze_spending_patterns,
    bucket_weekly_totals,
    classify_trend,
)
from pennylog.models.expense import coerce_expenses

START = date(2025, 11, 3)


def _expense(day_offset, amount, category="Food"):
    return {"amount": amount, "category": category, "date": (START + timedelta(days=day_offset)).isoformat()}


two_weeks_rising = [
    _expense(0, 100),
    _expense(2, 100, "Transport"),
    _expense(4, 100),
    _expense(7, 200),
    _expense(8, 150, "Transport"),
    _expense(10, 100, "Transport"),
    _expense(12, 50),
]


def test_fewer_than_seven_records_is_insufficient():
    analysis = analyze_spending_patterns(two_weeks_rising[:6])
    assert analysis.trend == Trend.INSUFFICIENT_DATA
    assert analysis.prediction == INSUFFICIENT_DATA_PREDICTION
    assert analysis.patterns == []
    assert analysis.weekly_totals == []


def test_increasing_trend_and_prediction():
    analysis = analyze_spending_patterns(two_weeks_rising, currency_symbol="₹")
    assert analysis.weekly_totals == [Decimal("300"), Decimal("500")]
    assert analysis.trend == Trend.INCREASING
    assert analysis.average_weekly == Decimal("400")
    assert analysis.prediction == "Based on your spending pattern, expect to spend approximately ₹400 next week."


def test_unsorted_input_is_sorted_without_mutation():
    shuffled = list(reversed(two_weeks_rising))
    snapshot = list(shuffled)
    analysis = analyze_spending_patterns(shuffled)
    assert analysis.weekly_totals == [Decimal("300"), Decimal("500")]
    assert shuffled == snapshot


def test_most_frequent_category_ties_keep_first_seen():
    expenses = two_weeks_rising + [_expense(13, 10, "Transport")]
    # Food and Transport both appear four times; Food is supplied first
    assert analyze_spending_patterns(expenses).patterns == ["You spend most frequently on Food"]


def test_anchor_moves_to_first_record_after_gap():
    records = coerce_expenses(
        [_expense(0, 10), _expense(6, 10), _expense(9, 10), _expense(15, 10), _expense(16, 10)]
    )
    # windows anchored at day 0, day 9 and day 16
    assert bucket_weekly_totals(records) == [Decimal("20"), Decimal("20"), Decimal("10")]


def test_trailing_zero_bucket_is_dropped():
    records = coerce_expenses([_expense(0, 10), _expense(8, 0)])
    assert bucket_weekly_totals(records) == [Decimal("10")]


def test_classify_trend_thresholds():
    assert classify_trend([Decimal("100")]) == Trend.STABLE
    assert classify_trend([Decimal("100"), Decimal("110")]) == Trend.STABLE
    assert classify_trend([Decimal("100"), Decimal("111")]) == Trend.INCREASING
    assert classify_trend([Decimal("100"), Decimal("89")]) == Trend.DECREASING
    assert classify_trend([Decimal("100"), Decimal("90")]) == Trend.STABLE


def test_zero_previous_bucket_is_stable():
    assert classify_trend([Decimal("0"), Decimal("250")]) == Trend.STABLE


def test_single_bucket_defaults_to_stable():
    expenses = [_expense(day, 20) for day in range(7)]
    analysis = analyze_spending_patterns(expenses)
    assert analysis.weekly_totals == [Decimal("140")]
    assert analysis.trend == Trend.STABLE
    assert analysis.change_percentage is None


def test_weekly_totals_are_never_negative():
    analysis = analyze_spending_patterns(two_weeks_rising)
    assert all(total >= 0 for total in analysis.weekly_totals)


def test_to_dict_uses_trend_value():
    data = analyze_spending_patterns(two_weeks_rising).to_dict()
    assert data["trend"] == "increasing"
    assert data["patterns"] == ["You spend most frequently on Food"]
