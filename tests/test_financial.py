import copy
from decimal import Decimal

from paintpro.services.financial import (
    build_category_breakdown,
    build_recipient_breakdown,
    build_time_series,
    normalize_recipient_type,
    profit_margin,
    totals,
)


class TestTimeSeries:
    def test_union_of_dates_with_zero_for_missing_side(self):
        payments = [{"date": "2024-03-02", "amount": "40.00"}, {"date": "2024-03-03", "amount": 10}]
        invoices = [{"date": "2024-03-01", "amount": "100.00"}, {"date": "2024-03-03", "amount": "25.50"}]

        rows = build_time_series(payments, invoices)

        assert [row["date"] for row in rows] == ["2024-03-01", "2024-03-02", "2024-03-03"]
        assert rows[0] == {"date": "2024-03-01", "income": Decimal("100.00"), "expense": Decimal("0"), "profit": Decimal("100.00")}
        assert rows[1]["income"] == 0 and rows[1]["expense"] == Decimal("40.00")
        assert rows[1]["profit"] == Decimal("-40.00")
        assert rows[2]["profit"] == Decimal("15.50")

    def test_sorted_ascending_regardless_of_input_order(self):
        rows = build_time_series(
            [{"date": "2024-02-10", "amount": 1}, {"date": "2024-01-05", "amount": 1}],
            [{"date": "2023-12-31", "amount": 1}],
        )
        assert [row["date"] for row in rows] == ["2023-12-31", "2024-01-05", "2024-02-10"]

    def test_duplicate_dates_are_summed(self):
        rows = build_time_series([{"date": "2024-01-01", "amount": 5}, {"date": "2024-01-01", "amount": 7}], [])
        assert rows == [{"date": "2024-01-01", "income": Decimal("0"), "expense": Decimal("12"), "profit": Decimal("-12")}]

    def test_empty_inputs(self):
        assert build_time_series([], []) == []
        assert build_time_series(None, None) == []

    def test_inputs_are_not_mutated(self):
        payments = [{"date": "2024-01-01", "amount": "5"}]
        invoices = [{"date": "2024-01-02", "amount": "9"}]
        before = copy.deepcopy((payments, invoices))
        build_time_series(payments, invoices)
        assert (payments, invoices) == before


class TestCategoryBreakdown:
    def test_maps_in_input_order(self):
        summary = [{"name": "materials", "total": "120.00"}, {"name": "labor", "total": 300}]
        assert build_category_breakdown(summary) == [
            {"name": "materials", "value": Decimal("120.00")},
            {"name": "labor", "value": Decimal("300")},
        ]

    def test_idempotent(self):
        summary = [{"name": "fuel", "total": "10"}]
        assert build_category_breakdown(summary) == build_category_breakdown(summary)
        assert summary == [{"name": "fuel", "total": "10"}]


class TestRecipientBreakdown:
    def test_groups_by_normalized_type(self):
        summary = [
            {"type": "subcontractor", "id": 1, "total": "100"},
            {"type": "subcontractor", "id": 2, "total": "50"},
            {"type": "staff", "id": 3, "total": "20"},
            {"type": "employee", "id": 4, "total": "5"},
            {"type": "supplier", "id": 5, "total": "7.25"},
            {"type": "landlord", "id": 6, "total": "1"},
        ]
        result = {row["type"]: row for row in build_recipient_breakdown(summary)}

        assert result["subcontractor"]["value"] == Decimal("150")
        assert result["employee"]["value"] == Decimal("25")
        assert result["supplier"]["value"] == Decimal("7.25")
        assert result["other"]["value"] == Decimal("1")
        assert result["employee"]["name"] == "Employees"

    def test_labels_are_localized(self):
        rows = build_recipient_breakdown([{"type": "supplier", "total": 1}], "es")
        assert rows[0]["name"] == "Proveedores"

    def test_normalize(self):
        assert normalize_recipient_type("Staff") == "employee"
        assert normalize_recipient_type(None) == "other"


class TestMargins:
    def test_profit_margin_percentage(self):
        assert profit_margin(Decimal("200"), Decimal("50")) == 75.0
        assert profit_margin(Decimal("3"), Decimal("2")) == 33.33

    def test_no_revenue_has_no_margin(self):
        assert profit_margin(Decimal("0"), Decimal("10")) is None

    def test_totals(self):
        rows = build_time_series([{"date": "2024-01-01", "amount": 4}], [{"date": "2024-01-02", "amount": 10}])
        assert totals(rows) == {"income": Decimal("10"), "expense": Decimal("4"), "profit": Decimal("6")}
