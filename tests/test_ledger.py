"""Tests for the ledger aggregator."""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from pocket_ledger.ledger import delete, filter_by_period, ledger_view, merge, search
from pocket_ledger.models import Expense, Income, Period, TransactionItem


NOW = datetime(2024, 3, 13, 18, 0)


def make_expense(name, amount, when, note="", emoji="🔖"):
    return Expense(emoji=emoji, name=name, amount=Decimal(amount), date=when, note=note)


def make_income(amount, when, note=""):
    return Income(amount=Decimal(amount), date=when, note=note)


@pytest.fixture
def expenses():
    return [
        make_expense("Food", "120", NOW - timedelta(hours=2), note="Lunch with team"),
        make_expense("Fuel", "900", NOW - timedelta(days=1)),
        make_expense("Groceries", "450", NOW - timedelta(days=20)),
    ]


@pytest.fixture
def incomes():
    return [
        make_income("50000", NOW - timedelta(days=12), note="March salary"),
        make_income("700", NOW - timedelta(hours=1), note="Refund"),
    ]


class TestMerge:
    """Tests for merging expenses and incomes."""

    def test_length_is_sum_of_inputs(self, expenses, incomes):
        assert len(merge(expenses, incomes)) == len(expenses) + len(incomes)

    def test_newest_first(self, expenses, incomes):
        """Test the ledger is sorted non-increasing by date."""
        dates = [item.date for item in merge(expenses, incomes)]
        assert dates == sorted(dates, reverse=True)

    def test_equal_dates_keep_merge_order(self):
        """Test ties keep expenses before incomes, each in input order."""
        first = make_expense("A", "1", NOW)
        second = make_expense("B", "2", NOW)
        income = make_income("3", NOW)

        ledger = merge([first, second], [income])

        assert [item.record for item in ledger] == [first, second, income]

    def test_undated_rows_lead(self):
        """Test rows without a date are placed first."""
        undated = make_expense("Unknown", "5", None)
        dated = make_income("10", NOW)

        ledger = merge([undated], [dated])

        assert ledger[0].record is undated
        assert ledger[1].record is dated

    def test_empty_inputs(self):
        assert merge([], []) == []

    def test_rows_wrap_original_records(self, expenses, incomes):
        ledger = merge(expenses, incomes)
        for item in ledger:
            assert any(item.record is record for record in [*expenses, *incomes])


class TestFilterByPeriod:
    """Tests for day / week / month filtering."""

    def test_day(self, expenses, incomes):
        today = filter_by_period(merge(expenses, incomes), Period.DAY, NOW)
        assert [item.title for item in today] == ["Income", "Food"]

    def test_week(self, expenses, incomes):
        week = filter_by_period(merge(expenses, incomes), Period.WEEK, NOW, first_weekday=0)
        assert [item.title for item in week] == ["Income", "Food", "Fuel"]

    def test_month(self, expenses, incomes):
        month = filter_by_period(merge(expenses, incomes), Period.MONTH, NOW)
        assert [item.title for item in month] == ["Income", "Food", "Fuel", "Income"]

    def test_idempotent(self, expenses, incomes):
        """Test filtering twice by the same day changes nothing."""
        once = filter_by_period(merge(expenses, incomes), Period.DAY, NOW)
        twice = filter_by_period(once, Period.DAY, NOW)
        assert twice == once

    def test_undated_rows_excluded(self):
        ledger = merge([make_expense("Unknown", "5", None)], [])
        for period in Period:
            assert filter_by_period(ledger, period, NOW) == []


class TestSearch:
    """Tests for free-text search."""

    def test_matches_title_case_insensitive(self, expenses, incomes):
        found = search(merge(expenses, incomes), "fOOd")
        assert [item.title for item in found] == ["Food"]

    def test_matches_note(self, expenses, incomes):
        found = search(merge(expenses, incomes), "team")
        assert [item.title for item in found] == ["Food"]

    def test_matches_income_title(self, expenses, incomes):
        found = search(merge(expenses, incomes), "income")
        assert len(found) == 2
        assert all(not item.is_expense for item in found)

    def test_no_match(self, expenses, incomes):
        assert search(merge(expenses, incomes), "rent") == []

    @pytest.mark.parametrize("query", ["", None])
    def test_empty_query_is_identity(self, expenses, incomes, query):
        """Test an empty query keeps the filtered ledger as is."""
        month = filter_by_period(merge(expenses, incomes), Period.MONTH, NOW)
        assert search(month, query) == month

    def test_ledger_view_composes(self, expenses, incomes):
        """Test the view is merge, then period filter, then search."""
        view = ledger_view(expenses, incomes, Period.MONTH, NOW, "salary")
        assert len(view) == 1
        assert view[0].note == "March salary"


class TestDelete:
    """Tests for deleting a ledger row by position."""

    def test_removes_exactly_one_record(self, expenses, incomes):
        ledger = merge(expenses, incomes)
        target = ledger[2]

        record, remaining = delete(ledger, 2)

        assert record is target.record
        assert len(remaining) == len(ledger) - 1
        assert all(item.record is not record for item in remaining)

    def test_others_keep_relative_order(self, expenses, incomes):
        ledger = merge(expenses, incomes)
        _, remaining = delete(ledger, 1)
        assert remaining == [ledger[0], *ledger[2:]]

    def test_input_not_mutated(self, expenses, incomes):
        ledger = merge(expenses, incomes)
        before = list(ledger)
        delete(ledger, 0)
        assert ledger == before

    @pytest.mark.parametrize("index", [-1, 5, 100])
    def test_out_of_range(self, expenses, incomes, index):
        with pytest.raises(IndexError):
            delete(merge(expenses, incomes), index)

    def test_delete_from_empty_ledger(self):
        with pytest.raises(IndexError):
            delete([], 0)

    def test_delete_returns_income_record(self):
        income = make_income("10", NOW)
        record, remaining = delete([TransactionItem.of(income)], 0)
        assert record is income
        assert remaining == []
