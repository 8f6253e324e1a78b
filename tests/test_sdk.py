import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from paintpro.main import app
from paintpro.sdk.api import ApiClient, NotFound, TransientError, Unauthorized, ValidationFailed
from paintpro.sdk.cache import QueryCache
from paintpro.sdk.forms import EntityForm
from paintpro.sdk.summary import FinancialSummary
from paintpro.sdk.views import ListView, relative_date


pytestmark = pytest.mark.anyio

CLIENT = {"name": "Jane Smith", "email": "jane@example.com", "phone": "555-0100", "address": "12 Maple St"}


def _api(token=None, locale=None) -> ApiClient:
    return ApiClient(base_url="http://test", token=token, locale=locale, transport=httpx.ASGITransport(app=app))


class GatedApi:
    """Fake API whose GETs block until the test releases them, in any order."""

    def __init__(self):
        self.gates = []

    async def get(self, path, params=None):
        gate = asyncio.Event()
        self.gates.append(gate)
        number = len(self.gates)
        await gate.wait()
        return f"response {number}"


class CountingApi:
    def __init__(self):
        self.calls = []
        self.failing = set()

    async def get(self, path, params=None):
        self.calls.append(path)
        if path in self.failing:
            raise TransientError(503, "down")
        return {"path": path, "call": len(self.calls)}

    async def post(self, path, json=None):
        self.calls.append(path)
        return {"id": 1, **json}


class TestApiClient:
    async def test_error_mapping(self, override_db, admin_token):
        async with _api(admin_token) as api:
            with pytest.raises(NotFound) as missing:
                await api.get("/api/clients/999")
            assert missing.value.message == "Client not found"

            with pytest.raises(ValidationFailed) as invalid:
                await api.post("/api/clients", json={"email": "x@example.com"})
            assert invalid.value.status == 400
            assert "name" in invalid.value.errors

    async def test_missing_token(self, override_db):
        async with _api() as api:
            with pytest.raises(Unauthorized):
                await api.get("/api/projects")

    async def test_login_keeps_the_token(self, override_db, admin_user_id):
        async with _api(locale="es") as api:
            user = await api.login("admin", "secret123")
            assert user["username"] == "admin"
            with pytest.raises(NotFound) as missing:
                await api.get("/api/clients/1")
            assert missing.value.message == "Cliente no encontrado"

    async def test_pdf_download(self, override_db, admin_token):
        async with _api(admin_token) as api:
            pdf = await api.download("/api/reports/financial.pdf")
        assert pdf.startswith(b"%PDF")


class TestQueryCache:
    async def test_latest_started_load_wins(self):
        api = GatedApi()
        cache = QueryCache(api)
        first = asyncio.create_task(cache.fetch("/api/clients"))
        while len(api.gates) < 1:
            await asyncio.sleep(0)
        second = asyncio.create_task(cache.fetch("/api/clients", force=True))
        while len(api.gates) < 2:
            await asyncio.sleep(0)

        api.gates[1].set()
        assert await second == "response 2"
        api.gates[0].set()
        assert await first == "response 2"
        assert cache.peek("/api/clients").data == "response 2"

    async def test_cached_until_invalidated(self):
        api = CountingApi()
        cache = QueryCache(api)
        await cache.fetch("/api/clients", {"type": "client"})
        await cache.fetch("/api/clients", {"type": "client"})
        assert api.calls == ["/api/clients"]

        await cache.invalidate("/api/clients")
        assert cache.peek("/api/clients", {"type": "client"}).stale
        await cache.fetch("/api/clients", {"type": "client"})
        assert len(api.calls) == 2

    async def test_failed_refetch_does_not_affect_others(self):
        api = CountingApi()
        cache = QueryCache(api)
        seen = []
        cache.subscribe("/api/clients", None, seen.append)
        cache.subscribe("/api/projects", None, seen.append)
        await cache.fetch("/api/clients")
        old_projects = await cache.fetch("/api/projects")

        api.failing.add("/api/projects")
        results = await cache.invalidate("/api/clients", "/api/projects")

        assert sum(isinstance(r, TransientError) for r in results) == 1
        assert seen[-1]["path"] == "/api/clients"
        projects = cache.peek("/api/projects")
        assert projects.data == old_projects
        assert projects.stale
        assert isinstance(projects.error, TransientError)


class TestEntityForm:
    async def test_reset_restores_the_record(self):
        record = {"id": 7, "createdAt": "2024-01-01T00:00:00Z", **CLIENT}
        form = EntityForm(QueryCache(CountingApi()), "clients", record=record)
        form.set("phone", "555-9999")
        form.error = ValidationFailed(400, "bad")
        assert form.dirty

        form.reset()
        assert not form.dirty
        assert form.values == CLIENT
        assert form.error is None
        assert form.record_id == 7

    async def test_invalid_input_never_reaches_the_server(self):
        api = CountingApi()
        form = EntityForm(QueryCache(api), "clients")
        form.set("name", "Jane").set("email", "jane@example.com")

        with pytest.raises(ValidationFailed) as failed:
            await form.submit()
        assert set(failed.value.errors) == {"phone", "address"}
        assert api.calls == []
        assert form.values == {"name": "Jane", "email": "jane@example.com"}
        assert form.error is failed.value

    async def test_create_then_edit(self, override_db, admin_token):
        async with _api(admin_token) as api:
            form = EntityForm(QueryCache(api), "clients")
            for field, value in CLIENT.items():
                form.set(field, value)
            saved = await form.submit()
            assert form.record_id == saved["id"]
            assert not form.dirty

            form.set("phone", "555-9999")
            assert form.validate() == {"phone": "555-9999"}
            await form.submit()
            assert (await api.get(f"/api/clients/{saved['id']}"))["phone"] == "555-9999"

    async def test_server_error_keeps_the_buffer(self, override_db, admin_token):
        async with _api(admin_token) as api:
            form = EntityForm(QueryCache(api), "projects")
            form.set("clientId", 404).set("title", "Deck").set("description", "Stain").set("address", "1 Elm")
            form.set("serviceType", "exterior")
            with pytest.raises(NotFound):
                await form.submit()
            assert form.values["title"] == "Deck"
            assert form.record_id is None

    async def test_quote_refreshes_project_views(self, override_db, admin_token):
        async with _api(admin_token) as api:
            client = await api.post("/api/clients", json=CLIENT)
            project = await api.post(
                "/api/projects",
                json={"clientId": client["id"], "title": "Deck", "description": "Stain", "address": "1 Elm", "serviceType": "exterior"},
            )
            cache = QueryCache(api)
            updates = []
            view = ListView(cache, "projects", on_change=updates.append)
            await view.load()
            before = len(updates)

            form = EntityForm(cache, "quotes").set("projectId", project["id"]).set("totalEstimate", "1500").set("status", "sent")
            await form.submit()

            assert len(updates) > before
            assert view.detail(project["id"])["status"] == "quoted"
            view.close()


class TestListView:
    ROWS = [
        {"id": 1, "title": "Kitchen", "description": "Walls", "address": "1 Oak", "status": "pending", "serviceType": "interior", "priority": "high"},
        {"id": 2, "title": "Porch", "description": "Deck stain", "address": "2 Oak", "status": "in_progress", "serviceType": "exterior", "priority": "low"},
        {"id": 3, "title": "Office", "description": "Kitchen cabinets", "address": "3 Elm", "status": "pending", "serviceType": "interior"},
    ]

    class StaticApi:
        def __init__(self, rows):
            self.rows = rows

        async def get(self, path, params=None):
            return self.rows

    async def test_filters_combine(self):
        view = ListView(QueryCache(self.StaticApi(self.ROWS)), "projects")
        await view.load()

        view.search = "kitchen"
        assert [r["id"] for r in view.visible()] == [1, 3]
        view.status = "pending"
        view.category = "interior"
        assert [r["id"] for r in view.visible()] == [1, 3]
        view.search = "oak"
        assert [r["id"] for r in view.visible()] == [1]

    async def test_badges(self):
        view = ListView(QueryCache(self.StaticApi(self.ROWS)), "projects", locale="es")
        await view.load()
        assert view.badge(self.ROWS[1]).label == "En Progreso"
        assert view.badge(self.ROWS[1]).color == "yellow"
        assert view.priority(self.ROWS[0]).label == "Alta"
        assert view.priority(self.ROWS[2]).color == "gray"

    async def test_clients_have_no_status_badge(self):
        view = ListView(QueryCache(self.StaticApi([])), "clients")
        assert view.badge({"classification": "commercial"}) is None


def test_relative_date():
    now = datetime(2024, 5, 10, 12, tzinfo=timezone.utc)
    assert relative_date("2024-05-10T01:00:00", now) == "today"
    assert relative_date("2024-05-07", now) == "3 days ago"
    assert relative_date(None, now) == relative_date("", now)


class TestFinancialSummary:
    PAYMENTS = {
        "timeSeriesData": [{"date": "2024-05-02", "amount": "100"}],
        "categorySummary": [{"name": "materials", "total": "100"}],
        "recipientSummary": [{"type": "staff", "id": 1, "name": "Alex", "total": "100"}],
    }
    INVOICES = {"timeSeriesData": [{"date": "2024-05-02", "amount": "300"}]}

    def test_waits_for_both_summaries(self):
        summary = FinancialSummary()
        assert summary.update(self.PAYMENTS, self.INVOICES)
        series = summary.time_series

        assert not summary.update(None, self.INVOICES)
        assert not summary.update(self.PAYMENTS, None)
        assert summary.time_series is series
        assert summary.recipient_breakdown[0]["type"] == "employee"
        assert str(summary.totals["profit"]) == "200"

    async def test_load_from_api(self, override_db, admin_token):
        async with _api(admin_token) as api:
            summary = FinancialSummary()
            assert await summary.load(QueryCache(api))
        assert summary.time_series == []
