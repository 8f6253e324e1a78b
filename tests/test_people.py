class TestStaff:
    def test_crud_and_availability_filter(self, admin_client, make_staff):
        alex = make_staff(name="Alex", skills=["interior", "exterior"])
        make_staff(name="Dana", availability="on_leave")
        assert alex["availability"] == "available"
        assert alex["skills"] == ["interior", "exterior"]

        on_leave = admin_client.get("/api/staff", params={"availability": "on_leave"}).json()
        assert [s["name"] for s in on_leave] == ["Dana"]

        updated = admin_client.put(f"/api/staff/{alex['id']}", json={"role": "Lead Painter"}).json()
        assert updated["role"] == "Lead Painter"
        assert admin_client.delete(f"/api/staff/{alex['id']}").status_code == 204

    def test_invalid_availability(self, admin_client):
        resp = admin_client.post("/api/staff", json={"name": "X", "role": "Painter", "phone": "1", "availability": "asleep"})
        assert resp.status_code == 400
        assert list(resp.json()["errors"]) == ["availability"]

    def test_plain_users_cannot_update_or_delete(self, user_client, make_staff):
        sid = make_staff()["id"]
        assert user_client.put(f"/api/staff/{sid}", json={"role": "x"}).status_code == 403
        assert user_client.delete(f"/api/staff/{sid}").status_code == 403


class TestSubcontractors:
    def test_create_and_filter_by_status(self, admin_client):
        body = {"name": "Rivera", "specialty": "drywall", "phone": "555", "rate": "45.50"}
        created = admin_client.post("/api/subcontractors", json=body)
        assert created.status_code == 201
        assert created.json()["rateType"] == "hourly"
        assert created.json()["rate"] == "45.50"
        admin_client.post("/api/subcontractors", json={**body, "name": "Banned", "status": "blacklisted"})

        active = admin_client.get("/api/subcontractors", params={"status": "active"}).json()
        assert [s["name"] for s in active] == ["Rivera"]

    def test_requires_admin(self, user_client):
        resp = user_client.post("/api/subcontractors", json={"name": "R", "specialty": "d", "phone": "1"})
        assert resp.status_code == 403


class TestSuppliers:
    def test_category_filter_and_name_order(self, admin_client, make_supplier):
        make_supplier(name="Zeta", category="paint")
        make_supplier(name="Alpha", category="paint")
        make_supplier(name="Tools R Us", category="tools")

        paint = admin_client.get("/api/suppliers", params={"category": "paint"}).json()
        assert [s["name"] for s in paint] == ["Alpha", "Zeta"]

    def test_missing_supplier(self, admin_client):
        assert admin_client.put("/api/suppliers/55", json={"name": "x"}).status_code == 404
