from datetime import date, timedelta
from decimal import Decimal

import pytest

from paintpro.document_creator.pdf_builder import build_financial_report_pdf
from paintpro.services.summaries import financial_report, resolve_range


RANGE = {"startDate": "2024-05-01", "endDate": "2024-05-31"}


@pytest.fixture
def books(admin_client, make_project, make_supplier):
    """Two projects with invoices and payments inside May 2024."""
    kitchen = make_project(title="Kitchen")
    porch = make_project(title="Porch")
    supplier = make_supplier(name="Coastal")

    def invoice(project, total, day):
        resp = admin_client.post(
            "/api/invoices",
            json={"projectId": project["id"], "clientId": project["clientId"], "totalAmount": total, "issueDate": day},
        )
        assert resp.status_code == 201

    def payment(project, amount, day, rtype="supplier", rid=None, category="materials"):
        resp = admin_client.post(
            "/api/payments",
            json={
                "amount": amount,
                "date": day,
                "recipientType": rtype,
                "recipientId": rid or supplier["id"],
                "projectId": project["id"],
                "category": category,
            },
        )
        assert resp.status_code == 201

    invoice(kitchen, "1000", "2024-05-02")
    invoice(porch, "400", "2024-05-10")
    payment(kitchen, "250", "2024-05-03")
    payment(porch, "500", "2024-05-10", rtype="subcontractor", rid=99, category="labor")
    return kitchen, porch


class TestFinancialReport:
    def test_report_combines_both_summaries(self, admin_client, books):
        body = admin_client.get("/api/reports/financial", params=RANGE).json()

        assert body["startDate"] == "2024-05-01"
        assert body["endDate"] == "2024-05-31"
        assert [row["date"] for row in body["timeSeries"]] == ["2024-05-02", "2024-05-03", "2024-05-10"]
        may_10 = body["timeSeries"][2]
        assert Decimal(may_10["income"]) == Decimal("400")
        assert Decimal(may_10["expense"]) == Decimal("500")
        assert Decimal(may_10["profit"]) == Decimal("-100")
        assert Decimal(body["totals"]["profit"]) == Decimal("650")
        assert {c["name"] for c in body["categoryBreakdown"]} == {"materials", "labor"}
        groups = {r["type"]: r["name"] for r in body["recipientBreakdown"]}
        assert groups == {"supplier": "Suppliers", "subcontractor": "Subcontractors"}

    def test_report_labels_follow_accept_language(self, admin_client, books):
        body = admin_client.get("/api/reports/financial", params=RANGE, headers={"Accept-Language": "es"}).json()
        assert {r["name"] for r in body["recipientBreakdown"]} == {"Proveedores", "Subcontratistas"}

    def test_default_range_is_last_thirty_days(self):
        start, end = resolve_range()
        assert end - start == timedelta(days=30)
        assert resolve_range(date(2024, 2, 1), date(2024, 1, 1)) == (date(2024, 1, 1), date(2024, 2, 1))

    def test_pdf_download(self, admin_client, books):
        resp = admin_client.get("/api/reports/financial.pdf", params=RANGE)
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert 'filename="financial-report-2024-05-01-2024-05-31.pdf"' in resp.headers["content-disposition"]
        assert resp.content.startswith(b"%PDF")

    def test_pdf_has_page_numbers(self, db, books):
        report = financial_report(db, date(2024, 5, 1), date(2024, 5, 31))
        pdf = build_financial_report_pdf(report, compress=False)
        assert b"Page 1 of 1" in pdf

    def test_pdf_for_empty_period(self, db):
        report = financial_report(db, date(2020, 1, 1), date(2020, 1, 31))
        pdf = build_financial_report_pdf(report, locale="es", compress=False)
        assert pdf.startswith(b"%PDF")


class TestProfitability:
    def test_projects_financial_rows(self, admin_client, books):
        kitchen, porch = books
        rows = {row["projectId"]: row for row in admin_client.get("/api/projects/financial").json()}
        assert Decimal(rows[kitchen["id"]]["profit"]) == Decimal("750")
        assert rows[kitchen["id"]]["margin"] == 75.0
        assert rows[porch["id"]]["margin"] == -25.0

    def test_profit_margin_average(self, admin_client, books):
        body = admin_client.get("/api/financial/profit-margin").json()
        assert body["averageMargin"] == 25.0
        assert len(body["projects"]) == 2

    def test_project_without_revenue_has_no_margin(self, admin_client, make_project):
        make_project()
        body = admin_client.get("/api/financial/profit-margin").json()
        assert body["projects"][0]["margin"] is None
        assert body["averageMargin"] is None
