from paintpro.models.models import Activity


class TestClients:
    def test_crud_round(self, admin_client):
        created = admin_client.post(
            "/api/clients",
            json={"name": "Jane", "email": "j@example.com", "phone": "555", "address": "1 Main", "createdAt": "1999-01-01"},
        )
        assert created.status_code == 201
        body = created.json()
        assert body["classification"] == "residential"
        assert body["type"] == "client"
        assert not body["createdAt"].startswith("1999")

        cid = body["id"]
        updated = admin_client.put(f"/api/clients/{cid}", json={"phone": "555-9999"})
        assert updated.status_code == 200
        assert updated.json()["phone"] == "555-9999"
        assert updated.json()["name"] == "Jane"

        assert admin_client.get(f"/api/clients/{cid}").json()["phone"] == "555-9999"
        assert admin_client.delete(f"/api/clients/{cid}").status_code == 204
        assert admin_client.get(f"/api/clients/{cid}").status_code == 404

    def test_missing_client(self, admin_client):
        resp = admin_client.get("/api/clients/999")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Client not found"}

    def test_not_found_message_is_localized(self, admin_client):
        resp = admin_client.get("/api/clients/999", headers={"Accept-Language": "es"})
        assert resp.json() == {"message": "Cliente no encontrado"}

    def test_validation_error_body(self, admin_client):
        resp = admin_client.post("/api/clients", json={"name": "Jane"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["message"] == "Invalid client data"
        assert body["errors"]["email"] == ["email is required"]

    def test_validation_happens_before_any_write(self, admin_client, db):
        admin_client.post("/api/clients", json={"name": "Jane", "classification": "castle"})
        assert admin_client.get("/api/clients").json() == []
        assert db.query(Activity).count() == 0

    def test_filter_by_type(self, admin_client, make_client):
        make_client(name="A", type="client")
        make_client(name="B", type="prospect")
        names = [c["name"] for c in admin_client.get("/api/clients", params={"type": "prospect"}).json()]
        assert names == ["B"]

    def test_delete_with_projects_is_blocked(self, admin_client, make_project):
        project = make_project()
        resp = admin_client.delete(f"/api/clients/{project['clientId']}")
        assert resp.status_code == 409
        assert admin_client.get(f"/api/clients/{project['clientId']}").status_code == 200

    def test_writes_are_logged_with_the_acting_user(self, admin_client, admin_user_id, db):
        cid = admin_client.post(
            "/api/clients", json={"name": "Jane", "email": "j@example.com", "phone": "555", "address": "1 Main"}
        ).json()["id"]
        entry = db.query(Activity).filter(Activity.type == "client_created").one()
        assert entry.user_id == admin_user_id
        assert entry.client_id == cid


class TestProjects:
    def test_create_defaults(self, make_project):
        project = make_project()
        assert project["status"] == "pending"
        assert project["priority"] == "medium"
        assert project["progress"] == 0
        assert project["completedDate"] is None

    def test_unknown_client_is_404(self, admin_client):
        resp = admin_client.post(
            "/api/projects",
            json={"clientId": 404, "title": "T", "description": "D", "address": "A", "serviceType": "interior"},
        )
        assert resp.status_code == 404
        assert resp.json()["message"] == "Client not found"

    def test_invalid_date_is_rejected_with_field_error(self, admin_client, make_client):
        resp = admin_client.post(
            "/api/projects",
            json={
                "clientId": make_client()["id"],
                "title": "T",
                "description": "D",
                "address": "A",
                "serviceType": "interior",
                "dueDate": "next week",
            },
        )
        assert resp.status_code == 400
        assert resp.json()["errors"] == {"dueDate": ["Invalid date for dueDate"]}

    def test_dates_are_stored_and_returned(self, make_project):
        project = make_project(startDate="2024-04-01T09:00:00Z")
        assert project["startDate"].startswith("2024-04-01T09:00:00")

    def test_completion_stamps_completed_date(self, admin_client, make_project):
        pid = make_project()["id"]
        resp = admin_client.put(f"/api/projects/{pid}", json={"status": "completed"})
        assert resp.status_code == 200
        assert resp.json()["completedDate"] is not None

    def test_supplied_completed_date_wins(self, admin_client, make_project):
        pid = make_project()["id"]
        resp = admin_client.put(
            f"/api/projects/{pid}", json={"status": "completed", "completedDate": "2024-02-02T00:00:00Z"}
        )
        assert resp.json()["completedDate"].startswith("2024-02-02")

    def test_partial_update_leaves_other_fields(self, admin_client, make_project):
        project = make_project(priority="high")
        resp = admin_client.put(f"/api/projects/{project['id']}", json={"progress": 50})
        assert resp.json()["progress"] == 50
        assert resp.json()["priority"] == "high"
        assert resp.json()["title"] == project["title"]

    def test_filters(self, admin_client, make_client, make_project):
        first = make_client(name="First")["id"]
        second = make_client(name="Second")["id"]
        make_project(client_id=first, status="in_progress")
        make_project(client_id=second)

        by_client = admin_client.get("/api/projects", params={"clientId": second}).json()
        assert [p["clientId"] for p in by_client] == [second]
        by_status = admin_client.get("/api/projects", params={"status": "in_progress"}).json()
        assert [p["clientId"] for p in by_status] == [first]

    def test_details_bundle(self, admin_client, make_project):
        project = make_project()
        admin_client.post("/api/quotes", json={"projectId": project["id"], "totalEstimate": "1500"})
        resp = admin_client.get(f"/api/projects/{project['id']}/details")
        assert resp.status_code == 200
        body = resp.json()
        assert body["client"]["id"] == project["clientId"]
        assert len(body["quotes"]) == 1
        assert body["serviceOrders"] == []
        assert body["invoices"] == []

    def test_project_quote_returns_latest(self, admin_client, make_project):
        pid = make_project()["id"]
        assert admin_client.get(f"/api/projects/{pid}/quote").status_code == 404
        admin_client.post("/api/quotes", json={"projectId": pid, "totalEstimate": 100})
        latest = admin_client.post("/api/quotes", json={"projectId": pid, "totalEstimate": 200}).json()
        assert admin_client.get(f"/api/projects/{pid}/quote").json()["id"] == latest["id"]

    def test_delete_project_with_quotes_is_blocked(self, admin_client, make_project):
        pid = make_project()["id"]
        admin_client.post("/api/quotes", json={"projectId": pid, "totalEstimate": 100})
        resp = admin_client.delete(f"/api/projects/{pid}")
        assert resp.status_code == 409
        assert resp.json()["message"] == "Project is still referenced by other records"

    def test_delete_unreferenced_project(self, admin_client, make_project):
        pid = make_project()["id"]
        assert admin_client.delete(f"/api/projects/{pid}").status_code == 204
        assert admin_client.get(f"/api/projects/{pid}").status_code == 404
