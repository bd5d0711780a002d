"""
Tests for the HTTP API
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from repair_shop.api import API_PREFIX, create_app
from repair_shop.api.security import check_api_key
from repair_shop.config import Settings
from repair_shop.storage import MemoryRecordStore

TICKET = {
    "clientName": "Ana Pop",
    "clientPhone": "0722111222",
    "productType": "laptop",
    "problemDescription": "Nu pornește",
    "cost": 250,
    "dateReceived": "2026-10-15T12:00:00Z",
}


def bot_api(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("/sendMessage"):
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 321}})
    if request.url.path.endswith("/getUpdates"):
        return httpx.Response(200, json={"ok": True, "result": []})
    return httpx.Response(200, json={"ok": True, "result": {"id": 1}})


def make_client(store=None, **config) -> TestClient:
    settings = Settings(storage_backend="memory", **{"api_key": None, **config})
    app = create_app(settings, store=store or MemoryRecordStore(), telegram_transport=httpx.MockTransport(bot_api))
    return TestClient(app)


@pytest.fixture
def client():
    with make_client() as client:
        yield client


def client_names(response):
    return [t["clientName"] for t in response.json()]


def create_ticket(client, **overrides):
    response = client.post(f"{API_PREFIX}/tickets", json={**TICKET, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    def test_health(self, client):
        """Test health endpoint reports storage status"""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["services"] == {"storage": True}


class TestTicketsApi:
    """CRUD over /api/v1/tickets"""

    def test_create_and_get(self, client):
        """Test creating a ticket and reading it back"""
        created = create_ticket(client)

        assert created["id"]
        assert created["clientName"] == "Ana Pop"
        assert created["status"] == "pending"
        assert created["technicianName"] == "Technician"
        assert created["telegramSent"] is False

        response = client.get(f"{API_PREFIX}/tickets/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

    def test_create_uses_settings_technician_and_now(self, client):
        """Test default technician and reception time on create"""
        client.patch(f"{API_PREFIX}/settings", json={"technicianName": "Ion"})

        created = create_ticket(client, dateReceived=None)

        assert created["technicianName"] == "Ion"
        assert created["dateReceived"]

    @pytest.mark.parametrize("overrides", [
        {"clientName": "   "},
        {"clientPhone": ""},
        {"productType": "fridge"},
        {"cost": -5},
    ])
    def test_create_rejects_invalid_input(self, client, overrides):
        """Test validation errors on create"""
        response = client.post(f"{API_PREFIX}/tickets", json={**TICKET, **overrides})

        assert response.status_code == 422

    def test_create_posts_to_telegram_when_configured(self, client):
        """Test that a new ticket is posted to the group when configured"""
        client.patch(f"{API_PREFIX}/settings", json={"telegramConfig": {"botToken": "1:abc", "groupId": "-100"}})

        created = create_ticket(client)

        assert created["telegramSent"] is True
        assert created["telegramMessageId"] == "321"
        assert len(client.get(f"{API_PREFIX}/tickets").json()) == 1

    def test_create_without_notification(self, client):
        """Test creating a ticket with notification turned off"""
        client.patch(f"{API_PREFIX}/settings", json={"telegramConfig": {"botToken": "1:abc", "groupId": "-100"}})

        response = client.post(f"{API_PREFIX}/tickets", params={"notify": False}, json=TICKET)

        assert response.json()["telegramSent"] is False

    def test_get_unknown_ticket(self, client):
        """Test 404 for an unknown ticket"""
        assert client.get(f"{API_PREFIX}/tickets/missing").status_code == 404

    def test_patch(self, client):
        """Test partial update of a ticket"""
        created = create_ticket(client)

        response = client.patch(
            f"{API_PREFIX}/tickets/{created['id']}",
            json={"status": "completed", "solutionApplied": "Placă de bază înlocuită"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "completed"
        assert body["solutionApplied"] == "Placă de bază înlocuită"
        assert body["createdAt"] == created["createdAt"]
        assert body["clientName"] == created["clientName"]

    def test_patch_unknown_ticket(self, client):
        """Test 404 when patching an unknown ticket"""
        response = client.patch(f"{API_PREFIX}/tickets/missing", json={"cost": 1})

        assert response.status_code == 404

    def test_delete(self, client):
        """Test ticket deletion"""
        created = create_ticket(client)
        url = f"{API_PREFIX}/tickets/{created['id']}"

        assert client.delete(url).json() == {"deleted": True}
        assert client.delete(url).json() == {"deleted": False}
        assert client.get(url).status_code == 404

    def test_delete_with_retract(self, client):
        """Test deleting a ticket together with its group message"""
        client.patch(f"{API_PREFIX}/settings", json={"telegramConfig": {"botToken": "1:abc", "groupId": "-100"}})
        created = create_ticket(client)

        response = client.delete(f"{API_PREFIX}/tickets/{created['id']}", params={"retract": True})

        assert created["telegramMessageId"] == "321"
        assert response.json() == {"deleted": True}

    def test_list_filters(self, client):
        """Test ticket list filters from query parameters"""
        create_ticket(client, clientName="Ana Pop", productType="laptop")
        create_ticket(client, clientName="Vlad", productType="phone", dateReceived="2026-09-01T12:00:00Z")

        assert len(client.get(f"{API_PREFIX}/tickets").json()) == 2
        assert client_names(client.get(f"{API_PREFIX}/tickets", params={"clientName": "vla"})) == ["Vlad"]
        assert client_names(client.get(f"{API_PREFIX}/tickets", params={"productType": "laptop"})) == ["Ana Pop"]
        assert client_names(client.get(
            f"{API_PREFIX}/tickets",
            params={"dateRangeStart": "2026-10-01", "dateRangeEnd": "2026-10-31"},
        )) == ["Ana Pop"]

    def test_resend_to_telegram(self, client):
        """Test resending a ticket to Telegram"""
        created = create_ticket(client)

        unconfigured = client.post(f"{API_PREFIX}/tickets/{created['id']}/telegram").json()
        client.patch(f"{API_PREFIX}/settings", json={"telegramConfig": {"botToken": "1:abc", "groupId": "-100"}})
        sent = client.post(f"{API_PREFIX}/tickets/{created['id']}/telegram").json()

        assert unconfigured["success"] is False
        assert sent == {"success": True, "messageId": "321", "error": None}

    def test_label_and_qr(self, client):
        """Test ticket label and QR payload endpoints"""
        created = create_ticket(client)

        label = client.get(f"{API_PREFIX}/tickets/{created['id']}/label")
        qr = client.get(f"{API_PREFIX}/tickets/{created['id']}/qr").json()

        assert label.headers["content-type"] == "application/octet-stream"
        assert f"itservice://ticket/{created['id']}".encode() in label.content
        assert qr == {"value": f"itservice://ticket/{created['id']}", "size": 200, "fallbackUrl": ""}


class TestStorageFailures:
    def test_write_failure_returns_503(self, failing_store):
        """Test that a storage write failure maps to 503"""
        with make_client(store=failing_store) as client:
            response = client.post(f"{API_PREFIX}/tickets", json=TICKET)

        assert response.status_code == 503
        assert response.json()["detail"].startswith("Storage unavailable")

    def test_corrupted_collection_lists_empty(self):
        """Test that a corrupted collection lists as empty"""
        store = MemoryRecordStore()
        store.put_raw("@it_service_manager/tickets", "corrupt")

        with make_client(store=store) as client:
            assert client.get(f"{API_PREFIX}/tickets").json() == []


class TestReportsApi:
    def test_reports(self, client):
        """Test revenue, technician, product and dashboard endpoints"""
        created = create_ticket(client, technicianName="Ion")
        client.patch(f"{API_PREFIX}/tickets/{created['id']}", json={"status": "completed"})
        create_ticket(client, technicianName="Ion", cost=50, clientName="Vlad")
        period = {"start": "2026-10-01", "end": "2026-10-31"}

        revenue = client.get(f"{API_PREFIX}/reports/revenue", params=period).json()
        technicians = client.get(f"{API_PREFIX}/reports/technicians", params=period).json()
        products = client.get(f"{API_PREFIX}/reports/products", params=period).json()
        dashboard = client.get(f"{API_PREFIX}/reports/dashboard").json()

        assert revenue["totalRevenue"] == 250
        assert revenue["totalProfit"] == pytest.approx(175)
        assert technicians[0]["technicianName"] == "Ion"
        assert technicians[0]["totalRevenue"] == 300
        assert products[0]["repairCount"] == 2
        assert dashboard["totalTickets"] == 2
        assert dashboard["completedTickets"] == 1

    def test_report_requires_dates(self, client):
        """Test that date bounds are required"""
        assert client.get(f"{API_PREFIX}/reports/revenue").status_code == 422

    def test_client_endpoints(self, client):
        """Test client list and client history endpoints"""
        create_ticket(client, clientName="Vlad")
        create_ticket(client, clientName="Ana Pop")

        assert client.get(f"{API_PREFIX}/reports/clients").json() == ["Ana Pop", "Vlad"]
        assert client.get(f"{API_PREFIX}/reports/clients/vlad").json()["ticketCount"] == 1
        assert client.get(f"{API_PREFIX}/reports/clients/Nobody").status_code == 404
        assert client.get(f"{API_PREFIX}/reports/technician-names").json() == ["Technician"]


class TestSettingsAndDataApi:
    def test_settings_roundtrip(self, client):
        """Test settings update and read back"""
        assert client.get(f"{API_PREFIX}/settings").json()["theme"] == "auto"

        response = client.patch(f"{API_PREFIX}/settings", json={"theme": "dark"})

        assert response.json()["theme"] == "dark"
        assert client.get(f"{API_PREFIX}/settings").json()["theme"] == "dark"

    def test_settings_reject_unknown_theme(self, client):
        """Test rejection of an unknown theme"""
        assert client.patch(f"{API_PREFIX}/settings", json={"theme": "neon"}).status_code == 422

    def test_telegram_test_and_sync(self, client):
        """Test Telegram connection check and sync endpoints"""
        client.patch(f"{API_PREFIX}/settings", json={"telegramConfig": {"botToken": "1:abc", "groupId": "-100"}})

        assert client.post(f"{API_PREFIX}/settings/telegram/test").json()["success"] is True
        sync = client.post(f"{API_PREFIX}/settings/telegram/sync").json()
        assert sync["success"] is True
        assert sync["count"] == 0

    def test_export_and_clear(self, client):
        """Test data export and wipe"""
        create_ticket(client)
        client.patch(f"{API_PREFIX}/settings", json={"technicianName": "Ion"})

        export = client.get(f"{API_PREFIX}/data/export").json()
        assert len(export["tickets"]) == 1
        assert export["settings"]["technicianName"] == "Ion"
        assert export["exportDate"]

        assert client.delete(f"{API_PREFIX}/data").status_code == 204
        assert client.get(f"{API_PREFIX}/tickets").json() == []
        assert client.get(f"{API_PREFIX}/settings").json()["technicianName"] == "Technician"


class TestLabelsAndLinksApi:
    def test_product_and_test_labels(self, client):
        """Test product and test label endpoints"""
        product = client.post(
            f"{API_PREFIX}/labels/product",
            json={"productName": "Incarcator Lenovo", "specifications": "65W", "price": 140},
        )

        assert b"PRET 140 RON" in product.content
        assert b"TEST IMPRIMARE" in client.get(f"{API_PREFIX}/labels/test").content

    def test_resolve_link(self, client):
        """Test resolving a deep link to a ticket"""
        created = create_ticket(client)

        response = client.get(f"{API_PREFIX}/links/resolve", params={"url": f"itservice://ticket/{created['id']}"})

        assert response.json()["id"] == created["id"]

    def test_resolve_unknown_ticket_offers_fallback(self, client):
        """Test fallback URL for a link to a missing ticket"""
        client.patch(f"{API_PREFIX}/settings", json={"telegramConfig": {"botToken": "1:abc", "groupId": "-100"}})

        response = client.get(f"{API_PREFIX}/links/resolve", params={"url": "itservice://ticket/abc-123"})

        assert response.status_code == 404
        assert response.json()["detail"]["fallbackUrl"] == "https://t.me/search?q=abc-123"

    def test_resolve_rejects_other_urls(self, client):
        """Test rejection of foreign URLs"""
        response = client.get(f"{API_PREFIX}/links/resolve", params={"url": "https://example.com"})

        assert response.status_code == 400


class TestApiKey:
    def test_check_api_key(self):
        """Test API key comparison"""
        assert check_api_key(None, None) is True
        assert check_api_key("anything", "") is True
        assert check_api_key(None, "secret") is False
        assert check_api_key("wrong", "secret") is False
        assert check_api_key("secret", "secret") is True

    def test_protected_routes(self):
        """Test API key enforcement on routes"""
        with make_client(api_key="secret") as client:
            assert client.get(f"{API_PREFIX}/tickets").status_code == 401
            assert client.get(f"{API_PREFIX}/tickets", headers={"X-API-Key": "wrong"}).status_code == 401
            assert client.get(f"{API_PREFIX}/tickets", headers={"X-API-Key": "secret"}).status_code == 200
            assert client.get("/health").status_code == 200


class TestReportDocumentsApi:
    """Printable report documents over HTTP"""

    def test_daily_document(self, client):
        """Test the daily document for a given date"""
        create_ticket(client)

        response = client.get(f"{API_PREFIX}/reports/daily/document", params={"date": "2026-10-15"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'filename="Raport_Zilei_15-10-2026.html"' in response.headers["content-disposition"]
        assert "Ana Pop" in response.text

    def test_technician_document(self, client):
        """Test the technician document"""
        create_ticket(client, technicianName="Ion")

        response = client.get(f"{API_PREFIX}/reports/technicians/document", params={"name": "Ion"})

        assert response.status_code == 200
        assert "Tehnician: Ion" in response.text

    def test_product_document(self, client):
        """Test the product document and product type validation"""
        create_ticket(client)

        ok = client.get(f"{API_PREFIX}/reports/products/document", params={"productType": "laptop"})
        bad = client.get(f"{API_PREFIX}/reports/products/document", params={"productType": "fridge"})

        assert ok.status_code == 200
        assert "Tip Produs: Laptop" in ok.text
        assert bad.status_code == 422
