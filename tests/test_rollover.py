"""Tests for the monthly carry-forward engine."""

from datetime import date, datetime

from factories import TODAY, expense, income

from zerobudget import rollover
from zerobudget.models import (
    Category,
    CategoryMonthBudget,
    CategoryType,
    Transaction,
    TransactionType,
)
from zerobudget.money import Money

JUNE = date(2024, 6, 1)
JULY = date(2024, 7, 1)
AUGUST = date(2024, 8, 1)


def entry(
    category: Category, month: date, budgeted: str, carried: str = "0"
) -> CategoryMonthBudget:
    return CategoryMonthBudget(
        category_id=category.id,
        month=month,
        budgeted_amount=Money(budgeted),
        available_from_previous=Money(carried),
    )


class TestTransactionFiltering:
    """Tests for month and category filtering."""

    def test_transactions_in_month_inclusive_bounds(self) -> None:
        """Test first and last day of the month are included."""
        txs = [
            expense("1", date(2024, 6, 30)),
            expense("2", date(2024, 7, 1)),
            expense("3", date(2024, 7, 31)),
            expense("4", date(2024, 8, 1)),
        ]

        result = rollover.transactions_in_month(JULY, txs)

        assert [t.amount for t in result] == [Money("2"), Money("3")]

    def test_late_evening_on_last_day_counts(self) -> None:
        """Test the end of the month is inclusive to the second."""
        late = Transaction(datetime(2024, 7, 31, 23, 59, 59), Money("5"), TransactionType.EXPENSE)

        assert rollover.transactions_in_month(JULY, [late]) == [late]

    def test_transactions_for_category(self) -> None:
        """Test only the category's transactions are returned."""
        rent = Category("Rent")
        food = Category("Food")
        txs = [expense("10", date(2024, 7, 2), rent), expense("20", date(2024, 7, 3), food)]

        result = rollover.transactions_for_category(rent, JULY, txs)

        assert len(result) == 1
        assert result[0].category_id == rent.id


    def test_july_filter_boundaries(self) -> None:
        """Test a July filter over four dates around the month edges."""
        txs = [
            expense("1", date(2024, 6, 30)),
            expense("1", date(2024, 7, 1)),
            expense("1", date(2024, 7, 15)),
            expense("1", date(2024, 8, 1)),
        ]

        assert len(rollover.transactions_in_month(date(2024, 7, 20), txs)) == 2


class TestSpending:
    """Tests for spending aggregation."""

    def test_actual_spending_ignores_income(self) -> None:
        """Test refunds recorded as income do not reduce spending."""
        food = Category("Food")
        txs = [
            expense("30", date(2024, 7, 2), food),
            expense("20", date(2024, 7, 9), food),
            income("15", date(2024, 7, 10), food),
            expense("99", date(2024, 6, 30), food),
        ]

        assert rollover.actual_spending(food, JULY, txs) == Money("50")

    def test_spending_by_category_skips_uncategorized(self) -> None:
        """Test uncategorized expenses are not keyed."""
        food = Category("Food")
        txs = [expense("30", date(2024, 7, 2), food), expense("5", date(2024, 7, 2))]

        assert rollover.spending_by_category(JULY, txs) == {food.id: Money("30")}

    def test_income_and_expense_totals(self) -> None:
        """Test month totals."""
        txs = [
            income("1000", date(2024, 7, 1)),
            expense("200", date(2024, 7, 5)),
            expense("50", date(2024, 7, 6)),
            income("300", date(2024, 8, 1)),
        ]

        assert rollover.total_income(JULY, txs) == Money("1000")
        assert rollover.total_expenses(JULY, txs) == Money("250")


class TestResolveMonthBudget:
    """Tests for stored entry lookup and the legacy fallback."""

    def test_returns_stored_entry(self) -> None:
        """Test a stored entry is returned as-is."""
        rent = Category("Rent", budgeted_amount=Money("999"))
        stored = entry(rent, JULY, "500")

        assert rollover.resolve_month_budget(rent, date(2024, 7, 20), [stored]) is stored

    def test_falls_back_to_legacy_amount(self) -> None:
        """Test the category's own amount stands in without an entry."""
        rent = Category("Rent", budgeted_amount=Money("800"))

        result = rollover.resolve_month_budget(rent, JULY, [])

        assert result.budgeted_amount == Money("800")
        assert result.available_from_previous == Money.zero()
        assert result.month == JULY


class TestCarryForward:
    """Tests for available_from_previous_month and get_or_create_month_budget."""

    def test_unspent_money_carries_forward(self) -> None:
        """Test July's leftover Rent money rolls into August."""
        rent = Category("Rent", CategoryType.FIXED)
        entries = [entry(rent, JULY, "1000")]
        txs = [expense("800", date(2024, 7, 1), rent)]

        august, created = rollover.get_or_create_month_budget(
            rent, AUGUST, txs, entries, today=TODAY
        )

        assert created
        assert august.available_from_previous == Money("200")
        assert august.budgeted_amount == Money.zero()
        assert august.month == AUGUST

    def test_overspending_clamps_to_zero(self) -> None:
        """Test overspent categories carry nothing forward."""
        food = Category("Food")
        entries = [entry(food, JULY, "100")]
        txs = [expense("150", date(2024, 7, 12), food)]

        august, _ = rollover.get_or_create_month_budget(food, AUGUST, txs, entries, today=TODAY)

        assert august.available_from_previous == Money.zero()

    def test_previous_carry_is_included(self) -> None:
        """Test the previous month's own carry-forward counts."""
        food = Category("Food")
        entries = [entry(food, JULY, "100", carried="40")]
        txs = [expense("90", date(2024, 7, 12), food)]

        august, _ = rollover.get_or_create_month_budget(food, AUGUST, txs, entries, today=TODAY)

        assert august.available_from_previous == Money("50")

    def test_past_month_gets_no_carry(self) -> None:
        """Test months before the current one start from zero."""
        food = Category("Food")
        entries = [entry(food, date(2024, 5, 1), "300")]

        june, created = rollover.get_or_create_month_budget(food, JUNE, [], entries, today=TODAY)

        assert created
        assert june.available_from_previous == Money.zero()

    def test_current_month_gets_carry(self) -> None:
        """Test the current month looks back at the previous one."""
        food = Category("Food")
        entries = [entry(food, JUNE, "300")]

        july, _ = rollover.get_or_create_month_budget(food, JULY, [], entries, today=TODAY)

        assert july.available_from_previous == Money("300")

    def test_legacy_amount_feeds_carry(self) -> None:
        """Test a previous month without an entry uses the legacy amount."""
        rent = Category("Rent", budgeted_amount=Money("800"))
        txs = [expense("700", date(2024, 7, 1), rent)]

        august, _ = rollover.get_or_create_month_budget(rent, AUGUST, txs, [], today=TODAY)

        assert august.available_from_previous == Money("100")

    def test_existing_entry_returned_unchanged(self) -> None:
        """Test entries are not recomputed after later edits."""
        food = Category("Food")
        july = entry(food, JULY, "100")
        august = entry(food, AUGUST, "0", carried="100")
        txs = [expense("60", date(2024, 7, 3), food)]

        result, created = rollover.get_or_create_month_budget(
            food, date(2024, 8, 20), txs, [july, august], today=TODAY
        )

        assert not created
        assert result is august
        assert result.available_from_previous == Money("100")

    def test_does_not_mutate_entries(self) -> None:
        """Test the new entry is only returned."""
        food = Category("Food")
        entries: list[CategoryMonthBudget] = []

        rollover.get_or_create_month_budget(food, JULY, [], entries, today=TODAY)

        assert entries == []


class TestMaterialize:
    """Tests for bulk materialization."""

    def test_materialize_month_skips_income_and_existing(self) -> None:
        """Test only missing expense categories get entries."""
        rent = Category("Rent", CategoryType.FIXED)
        food = Category("Food")
        salary = Category("Salary", CategoryType.INCOME)
        existing = entry(rent, JULY, "900")

        created = rollover.materialize_month(
            [rent, food, salary], JULY, [], [existing], today=TODAY
        )

        assert [e.category_id for e in created] == [food.id]

    def test_materialize_range_chains_months(self) -> None:
        """Test carry-forward flows through every month of a range."""
        food = Category("Food")
        entries = [entry(food, JULY, "100")]
        txs = [expense("30", date(2024, 7, 10), food), expense("20", date(2024, 8, 10), food)]

        created = rollover.materialize_range(
            food, JULY, date(2024, 10, 1), txs, entries, today=TODAY
        )

        assert [e.month for e in created] == [AUGUST, date(2024, 9, 1), date(2024, 10, 1)]
        assert [e.available_from_previous for e in created] == [
            Money("70"),
            Money("50"),
            Money("50"),
        ]
        assert len(entries) == 1


class TestMigrateCategory:
    """Tests for migrate_category function."""

    def test_copies_legacy_amount(self) -> None:
        """Test the legacy amount becomes the month's budget."""
        rent = Category("Rent", budgeted_amount=Money("750"))

        result, created = rollover.migrate_category(rent, JULY, [])

        assert created
        assert result.budgeted_amount == Money("750")
        assert rent.budgeted_amount == Money("750")

    def test_keeps_existing_entry(self) -> None:
        """Test migration does not overwrite a stored entry."""
        rent = Category("Rent", budgeted_amount=Money("750"))
        stored = entry(rent, JULY, "900")

        result, created = rollover.migrate_category(rent, JULY, [stored])

        assert not created
        assert result is stored


class TestCategoryAvailable:
    """Tests for category_available function."""

    def test_negative_when_overspent(self) -> None:
        """Test availability is not clamped within the month."""
        food = Category("Food")
        entries = [entry(food, JULY, "100", carried="10")]
        txs = [expense("130", date(2024, 7, 10), food)]

        assert rollover.category_available(food, JULY, txs, entries) == Money("-20")

    def test_total_available_helper(self) -> None:
        """Test the module level helper delegates to the entry."""
        food = Category("Food")

        assert rollover.total_available(entry(food, JULY, "50", "5"), Money("15")) == Money("40")
