import re
from decimal import Decimal

from paintpro.models.models import PurchaseOrderItem


ITEMS = [
    {"description": "Primer", "unit": "gal", "quantity": 2, "unitPrice": "25.00", "totalPrice": "50.00"},
    {"description": "Tape", "quantity": "3", "unitPrice": 4.5, "totalPrice": 13.5},
]


class TestPurchaseOrders:
    def test_create_with_items(self, admin_client, make_supplier):
        supplier = make_supplier()
        resp = admin_client.post("/api/purchase-orders", json={"supplierId": supplier["id"], "items": ITEMS})
        assert resp.status_code == 201
        body = resp.json()
        assert re.fullmatch(r"PO-\d{8}-[A-Z0-9]{4}", body["orderNumber"])
        assert Decimal(body["totalAmount"]) == Decimal("63.50")
        assert [i["description"] for i in body["items"]] == ["Primer", "Tape"]
        assert Decimal(body["items"][1]["quantity"]) == Decimal("3")

    def test_explicit_number_and_total_are_kept(self, admin_client, make_supplier):
        supplier = make_supplier()
        body = admin_client.post(
            "/api/purchase-orders",
            json={"supplierId": supplier["id"], "orderNumber": "PO-CUSTOM-1", "totalAmount": "70", "items": ITEMS},
        ).json()
        assert body["orderNumber"] == "PO-CUSTOM-1"
        assert Decimal(body["totalAmount"]) == Decimal("70")

    def test_duplicate_order_number_is_a_conflict(self, admin_client, make_supplier):
        supplier = make_supplier()
        payload = {"supplierId": supplier["id"], "orderNumber": "PO-DUP"}
        assert admin_client.post("/api/purchase-orders", json=payload).status_code == 201
        resp = admin_client.post("/api/purchase-orders", json=payload)
        assert resp.status_code == 409
        assert resp.json()["message"] == "Purchase order conflicts with an existing record"

    def test_unknown_supplier(self, admin_client):
        resp = admin_client.post("/api/purchase-orders", json={"supplierId": 404})
        assert resp.status_code == 404
        assert resp.json()["message"] == "Supplier not found"

    def test_updating_items_replaces_the_set(self, admin_client, make_supplier, db):
        supplier = make_supplier()
        po = admin_client.post("/api/purchase-orders", json={"supplierId": supplier["id"], "items": ITEMS}).json()

        resp = admin_client.put(
            f"/api/purchase-orders/{po['id']}",
            json={"items": [{"description": "Roller", "quantity": 1, "unitPrice": 9, "totalPrice": "9.00"}]},
        )
        body = resp.json()
        assert [i["description"] for i in body["items"]] == ["Roller"]
        assert Decimal(body["totalAmount"]) == Decimal("9.00")
        assert db.query(PurchaseOrderItem).count() == 1

    def test_status_update_keeps_items(self, admin_client, make_supplier):
        supplier = make_supplier()
        po = admin_client.post("/api/purchase-orders", json={"supplierId": supplier["id"], "items": ITEMS}).json()
        body = admin_client.put(f"/api/purchase-orders/{po['id']}", json={"status": "sent"}).json()
        assert body["status"] == "sent"
        assert len(body["items"]) == 2
        assert Decimal(body["totalAmount"]) == Decimal("63.50")

    def test_delete_removes_items(self, admin_client, make_supplier, db):
        supplier = make_supplier()
        po = admin_client.post("/api/purchase-orders", json={"supplierId": supplier["id"], "items": ITEMS}).json()
        assert admin_client.delete(f"/api/purchase-orders/{po['id']}").status_code == 204
        assert db.query(PurchaseOrderItem).count() == 0

    def test_filters(self, admin_client, make_supplier):
        a = make_supplier(name="A")
        b = make_supplier(name="B")
        admin_client.post("/api/purchase-orders", json={"supplierId": a["id"], "status": "sent"})
        admin_client.post("/api/purchase-orders", json={"supplierId": b["id"]})
        by_supplier = admin_client.get("/api/purchase-orders", params={"supplierId": b["id"]}).json()
        assert [po["supplierId"] for po in by_supplier] == [b["id"]]
        by_status = admin_client.get("/api/purchase-orders", params={"status": "sent"}).json()
        assert [po["supplierId"] for po in by_status] == [a["id"]]

    def test_supplier_with_orders_cannot_be_deleted(self, admin_client, make_supplier):
        supplier = make_supplier()
        admin_client.post("/api/purchase-orders", json={"supplierId": supplier["id"]})
        assert admin_client.delete(f"/api/suppliers/{supplier['id']}").status_code == 409

    def test_line_totals_finer_than_cents_are_rejected(self, admin_client, make_supplier):
        supplier = make_supplier()
        items = [
            {"description": "Primer", "quantity": 1, "unitPrice": "10.12", "totalPrice": "10.125"},
            {"description": "Tape", "quantity": 1, "unitPrice": "10.10", "totalPrice": "10.1"},
        ]
        resp = admin_client.post("/api/purchase-orders", json={"supplierId": supplier["id"], "items": items})
        assert resp.status_code == 400
        assert list(resp.json()["errors"]) == ["items.0.totalPrice"]
        assert admin_client.get("/api/purchase-orders").json() == []

    def test_total_matches_stored_lines(self, admin_client, make_supplier):
        supplier = make_supplier()
        items = [
            {"description": "Primer", "totalPrice": "10.12"},
            {"description": "Tape", "totalPrice": 10.1},
        ]
        body = admin_client.post("/api/purchase-orders", json={"supplierId": supplier["id"], "items": items}).json()
        stored = sum(Decimal(i["totalPrice"]) for i in body["items"])
        assert Decimal(body["totalAmount"]) == stored == Decimal("20.22")

    def test_blank_order_number_is_a_validation_error(self, admin_client, make_supplier):
        supplier = make_supplier()
        po = admin_client.post("/api/purchase-orders", json={"supplierId": supplier["id"]}).json()
        resp = admin_client.put(f"/api/purchase-orders/{po['id']}", json={"orderNumber": "  "})
        assert resp.status_code == 400
        assert resp.json()["errors"] == {"orderNumber": ["orderNumber is required"]}
        assert admin_client.get(f"/api/purchase-orders/{po['id']}").json()["orderNumber"] == po["orderNumber"]
