def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_request_id_is_echoed(client):
    resp = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["X-Request-ID"] == "abc-123"
    assert client.get("/api/health").headers["X-Request-ID"]


def test_bad_path_parameter_is_a_400(admin_client):
    resp = admin_client.get("/api/clients/not-a-number")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid request data"
    assert resp.json()["errors"]


def test_bad_query_parameter_in_spanish(admin_client):
    resp = admin_client.get("/api/reports/financial", params={"startDate": "nope"}, headers={"Accept-Language": "es"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Datos de solicitud inválidos"


def test_protected_routes_need_a_token(client):
    resp = client.get("/api/projects")
    assert resp.status_code == 401
    assert "message" in resp.json()
