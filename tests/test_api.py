"""
Tests for the HTTP API: public lookup and submission, admin CRUD, auth and
error rendering. Every test runs against both storage backings.
"""
import pytest

ADMIN_ROUTES = [
    ("get", "/api/admin/partners"),
    ("post", "/api/admin/partners"),
    ("get", "/api/admin/partners/1234"),
    ("put", "/api/admin/partners/1234"),
    ("delete", "/api/admin/partners/1234"),
    ("get", "/api/admin/requests"),
    ("post", "/api/admin/requests"),
    ("get", "/api/admin/requests/abc"),
    ("put", "/api/admin/requests/abc"),
    ("delete", "/api/admin/requests/abc"),
]


@pytest.fixture
def existing_partner(storage, partner_in):
    return storage.create_partner(partner_in)


# ============== Public Endpoint Tests ==============

class TestPartnerLookup:
    """Test cases for GET /partners/{id}"""

    def test_lookup(self, client, existing_partner):
        response = client.get("/api/partners/1234")

        assert response.status_code == 200
        assert response.json() == {
            "id": "1234",
            "name": "Acme",
            "email": "a@x.com",
            "phone": "555-0100",
            "referringCaseManager": None,
        }

    def test_unknown_partner(self, client):
        response = client.get("/api/partners/9999")

        assert response.status_code == 404
        assert response.json()["message"] == "Partner not found"

    @pytest.mark.parametrize("bad_id", ["123", "12345", "12ab"])
    def test_malformed_id(self, client, bad_id):
        response = client.get(f"/api/partners/{bad_id}")

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation error"
        assert body["errors"][0]["field"] == "partner_id"

    def test_unsupported_method(self, client, existing_partner):
        response = client.delete("/api/partners/1234")

        assert response.status_code == 405
        assert "message" in response.json()


class TestRequestSubmission:
    """Test cases for POST /requests"""

    def test_submit(self, client, storage, notifier, existing_partner, request_payload):
        response = client.post("/api/requests", json=request_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["id"]
        assert body["createdAt"]
        assert body["partnerId"] == "1234"
        assert body["partnerName"] == "Acme"
        assert body["urgency"] == "high"
        assert [r.id for r in storage.list_requests()] == [body["id"]]
        assert [r.id for r in notifier.sent] == [body["id"]]

    def test_client_supplied_id_is_ignored(self, client, existing_partner, request_payload):
        response = client.post(
            "/api/requests",
            json={**request_payload, "id": "mine", "createdAt": "2000-01-01T00:00:00Z"},
        )

        assert response.status_code == 201
        assert response.json()["id"] != "mine"
        assert not response.json()["createdAt"].startswith("2000")

    def test_unknown_partner_rejected(self, client, storage, notifier, existing_partner, request_payload):
        response = client.post("/api/requests", json={**request_payload, "partnerId": "9999"})

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "partnerId", "message": "Partner 9999 not found"}
        ]
        assert storage.list_requests() == []
        assert notifier.sent == []

    def test_validation_errors_listed_per_field(self, client, storage, existing_partner):
        response = client.post("/api/requests", json={
            "partnerId": "1234",
            "urgency": "whenever",
            "preferredContact": "email",
            "description": "",
        })

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation error"
        assert {e["field"] for e in body["errors"]} == {"urgency", "description"}
        assert storage.list_requests() == []

    def test_malformed_json(self, client):
        response = client.post(
            "/api/requests", content="{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "body"


# ============== Admin Auth Tests ==============

class TestAdminAuth:
    """Every admin route demands the shared secret"""

    @pytest.mark.parametrize("method,path", ADMIN_ROUTES)
    def test_missing_secret(self, client, method, path):
        response = client.request(method.upper(), path)

        assert response.status_code == 401
        assert response.json()["message"] == "Not authenticated"

    @pytest.mark.parametrize("method,path", ADMIN_ROUTES)
    def test_wrong_secret(self, client, method, path):
        response = client.request(method.upper(), path, headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401

    def test_non_bearer_scheme(self, client):
        response = client.get("/api/admin/partners", headers={"Authorization": "Basic test-secret"})

        assert response.status_code == 401

    @pytest.mark.parametrize("method,path", [
        ("post", "/api/admin/partners"),
        ("put", "/api/admin/partners/1234"),
        ("post", "/api/admin/requests"),
        ("put", "/api/admin/requests/abc"),
    ])
    def test_malformed_body_without_secret(self, client, method, path):
        """The secret is checked before the body is parsed"""
        response = client.request(
            method.upper(), path, content="{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Not authenticated"

    def test_malformed_path_without_secret(self, client):
        assert client.get("/api/admin/partners/12x").status_code == 401


# ============== Admin Partner Tests ==============

class TestAdminPartners:
    """Test cases for /admin/partners"""

    def test_create_and_list(self, admin_client, partner_payload):
        response = admin_client.post("/api/admin/partners", json=partner_payload)
        assert response.status_code == 201
        assert response.json()["id"] == "1234"

        admin_client.post("/api/admin/partners", json={**partner_payload, "id": "0001"})
        listed = admin_client.get("/api/admin/partners").json()

        assert [p["id"] for p in listed] == ["0001", "1234"]

    def test_create_duplicate(self, admin_client, existing_partner, partner_payload):
        response = admin_client.post("/api/admin/partners", json={**partner_payload, "name": "Other"})

        assert response.status_code == 409
        assert admin_client.get("/api/admin/partners/1234").json()["name"] == "Acme"

    def test_create_invalid(self, admin_client, partner_payload):
        response = admin_client.post("/api/admin/partners", json={**partner_payload, "id": "12"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "id"

    def test_get_unknown(self, admin_client):
        assert admin_client.get("/api/admin/partners/4321").status_code == 404

    def test_update(self, admin_client, existing_partner):
        response = admin_client.put("/api/admin/partners/1234", json={
            "name": "Acme Ltd",
            "email": "ops@acme.com",
            "phone": "555-0101",
            "referringCaseManager": "Dana",
        })

        assert response.status_code == 200
        assert response.json()["referringCaseManager"] == "Dana"
        assert admin_client.get("/api/partners/1234").json()["name"] == "Acme Ltd"

    def test_update_round_trips_fetched_record(self, admin_client, existing_partner):
        """A partner fetched from the API can be edited and sent back as-is"""
        record = admin_client.get("/api/admin/partners/1234").json()
        record["name"] = "Acme Holdings"

        response = admin_client.put("/api/admin/partners/1234", json=record)

        assert response.status_code == 200
        assert response.json() == record

    def test_update_cannot_change_id(self, admin_client, existing_partner, partner_payload):
        response = admin_client.put(
            "/api/admin/partners/1234", json={**partner_payload, "id": "5678"}
        )

        assert response.status_code == 400
        assert response.json()["errors"] == [
            {"field": "id", "message": "Partner ID cannot be changed"}
        ]
        assert admin_client.get("/api/admin/partners/5678").status_code == 404
        assert admin_client.get("/api/admin/partners/1234").json()["name"] == "Acme"

    def test_update_unknown(self, admin_client):
        response = admin_client.put("/api/admin/partners/4321", json={
            "name": "X", "email": "x@x.com", "phone": "1",
        })

        assert response.status_code == 404

    def test_delete(self, admin_client, existing_partner):
        response = admin_client.delete("/api/admin/partners/1234")

        assert response.status_code == 200
        assert response.json()["message"] == "Partner deleted successfully"
        assert admin_client.get("/api/partners/1234").status_code == 404

    def test_unsupported_method(self, admin_client):
        assert admin_client.patch("/api/admin/partners/1234", json={}).status_code == 405


# ============== Admin Request Tests ==============

class TestAdminRequests:
    """Test cases for /admin/requests"""

    def test_create_list_get(self, admin_client, notifier, existing_partner, request_payload):
        created = admin_client.post("/api/admin/requests", json=request_payload)
        assert created.status_code == 201
        request_id = created.json()["id"]

        listed = admin_client.get("/api/admin/requests").json()
        fetched = admin_client.get(f"/api/admin/requests/{request_id}").json()

        assert [r["id"] for r in listed] == [request_id]
        assert listed[0]["partnerName"] == "Acme"
        assert fetched == created.json()
        assert len(notifier.sent) == 1

    def test_update_round_trips_fetched_record(self, admin_client, existing_partner, request_payload):
        """A record fetched from the API can be edited and sent back as-is"""
        record = admin_client.post("/api/admin/requests", json=request_payload).json()
        record["urgency"] = "urgent"

        response = admin_client.put(f"/api/admin/requests/{record['id']}", json=record)

        assert response.status_code == 200
        assert response.json()["urgency"] == "urgent"
        assert response.json()["createdAt"] == record["createdAt"]

    def test_update_to_unknown_partner(self, admin_client, existing_partner, request_payload):
        record = admin_client.post("/api/admin/requests", json=request_payload).json()

        response = admin_client.put(
            f"/api/admin/requests/{record['id']}", json={**request_payload, "partnerId": "9999"}
        )

        assert response.status_code == 400
        assert admin_client.get(f"/api/admin/requests/{record['id']}").json()["partnerId"] == "1234"

    def test_unknown_request(self, admin_client, request_payload):
        assert admin_client.get("/api/admin/requests/nope").status_code == 404
        assert admin_client.put("/api/admin/requests/nope", json=request_payload).status_code == 404
        assert admin_client.delete("/api/admin/requests/nope").status_code == 404


# ============== End-to-end Scenario ==============

class TestPartnerLifecycle:
    """A partner with requests cannot be deleted until its requests are gone"""

    def test_scenario(self, client, admin_client, partner_payload, request_payload):
        assert admin_client.post("/api/admin/partners", json=partner_payload).status_code == 201
        assert client.get("/api/partners/1234").json()["name"] == "Acme"

        created = client.post("/api/requests", json=request_payload)
        assert created.status_code == 201
        request_id = created.json()["id"]
        assert request_id in [r["id"] for r in admin_client.get("/api/admin/requests").json()]

        blocked = admin_client.delete("/api/admin/partners/1234")
        assert blocked.status_code == 409
        assert "message" in blocked.json()

        assert admin_client.delete(f"/api/admin/requests/{request_id}").status_code == 200
        assert admin_client.delete("/api/admin/partners/1234").status_code == 200
        assert client.get("/api/partners/1234").status_code == 404
