"""
HTTP tests for the v1 API.

Run with: pytest tests/test_api.py -v

Requests go through FastAPI's ``TestClient``.  Money comes back as
decimal strings, so assertions compare against ``"100.00"`` and not
floats.
"""

from datetime import datetime, timezone

import pytest

PATIENT = {"name": "John Doe", "date_of_birth": "1985-06-15", "contact_info": "555-1234"}


@pytest.fixture
def patient(client):
    response = client.post("/api/v1/patients/", json=PATIENT)
    assert response.status_code == 201
    return response.json()


def post_transaction(client, patient_id, amount="100.00", status="Paid",
                     when="2025-01-10T00:00:00Z", service_type="Consultation"):
    return client.post(
        "/api/v1/transactions/",
        json={
            "patient_id": patient_id,
            "service_type": service_type,
            "amount": amount,
            "transaction_date": when,
            "status": status,
        },
    )


class TestPatientEndpoints:
    """Tests for /api/v1/patients."""

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_create_and_get(self, client, patient):
        assert patient["medical_record_number"].startswith("MRN-")
        response = client.get(f"/api/v1/patients/{patient['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "John Doe"

    def test_duplicate_mrn_conflicts(self, client):
        body = dict(PATIENT, medical_record_number="MRN-001")
        assert client.post("/api/v1/patients/", json=body).status_code == 201
        assert client.post("/api/v1/patients/", json=body).status_code == 409

    def test_validation_errors(self, client):
        body = dict(PATIENT, contact_info="x" * 21)
        assert client.post("/api/v1/patients/", json=body).status_code == 422
        assert client.post("/api/v1/patients/", json={"name": "No Birthday"}).status_code == 422

    def test_update_and_missing(self, client, patient):
        response = client.put(f"/api/v1/patients/{patient['id']}", json={"name": "Johnny Doe"})
        assert response.status_code == 200
        assert response.json()["name"] == "Johnny Doe"
        assert response.json()["contact_info"] == "555-1234"
        assert client.put("/api/v1/patients/999", json={"name": "X"}).status_code == 404
        assert client.get("/api/v1/patients/999").status_code == 404

    def test_lookup_by_medical_record_number(self, client):
        body = dict(PATIENT, medical_record_number="MRN-001")
        created = client.post("/api/v1/patients/", json=body).json()
        response = client.get("/api/v1/patients/by-mrn/MRN-001")
        assert response.status_code == 200
        assert response.json()["id"] == created["id"]
        assert client.get("/api/v1/patients/by-mrn/MRN-999").status_code == 404

    def test_search_by_name(self, client, patient):
        response = client.get("/api/v1/patients/search/by-name", params={"name": "doe"})
        assert [p["id"] for p in response.json()] == [patient["id"]]
        assert client.get("/api/v1/patients/search/by-name", params={"name": " "}).status_code == 400

    def test_delete_removes_transactions(self, client, patient):
        post_transaction(client, patient["id"])
        assert client.delete(f"/api/v1/patients/{patient['id']}").status_code == 204
        assert client.get("/api/v1/transactions/").json() == []
        assert client.delete(f"/api/v1/patients/{patient['id']}").status_code == 404


class TestTransactionEndpoints:
    """Tests for /api/v1/transactions CRUD and lookups."""

    def test_create_and_read(self, client, patient):
        response = post_transaction(client, patient["id"], amount="19.9")
        assert response.status_code == 201
        created = response.json()
        assert created["amount"] == "19.90"
        assert created["status"] == "Paid"
        assert created["patient_name"] == "John Doe"
        fetched = client.get(f"/api/v1/transactions/{created['id']}").json()
        assert fetched["id"] == created["id"]

    def test_unknown_patient_is_bad_request(self, client):
        response = post_transaction(client, 42)
        assert response.status_code == 400
        assert "does not exist" in response.json()["detail"]

    @pytest.mark.parametrize(
        "overrides",
        [{"amount": "-1.00"}, {"status": "Refunded"}, {"service_type": ""}, {"amount": "1.234"}],
    )
    def test_invalid_payloads_rejected(self, client, patient, overrides):
        fields = {"amount": "10.00", "status": "Paid", "service_type": "Lab"}
        fields.update(overrides)
        response = post_transaction(client, patient["id"], **fields)
        assert response.status_code == 422

    def test_update(self, client, patient):
        tx = post_transaction(client, patient["id"], status="Unpaid").json()
        response = client.put(f"/api/v1/transactions/{tx['id']}", json={"status": "Paid"})
        assert response.status_code == 200
        assert response.json()["status"] == "Paid"
        assert response.json()["updated_at"] is not None

        moved = client.put(f"/api/v1/transactions/{tx['id']}", json={"patient_id": 999})
        assert moved.status_code == 400
        assert client.put("/api/v1/transactions/999", json={"status": "Paid"}).status_code == 404

    def test_delete(self, client, patient):
        tx = post_transaction(client, patient["id"]).json()
        assert client.delete(f"/api/v1/transactions/{tx['id']}").status_code == 204
        assert client.get(f"/api/v1/transactions/{tx['id']}").status_code == 404

    def test_by_patient_and_status(self, client, patient):
        paid = post_transaction(client, patient["id"], status="Paid").json()
        unpaid = post_transaction(client, patient["id"], status="Unpaid").json()

        by_patient = client.get(f"/api/v1/transactions/by-patient/{patient['id']}").json()
        assert {tx["id"] for tx in by_patient} == {paid["id"], unpaid["id"]}
        assert client.get("/api/v1/transactions/by-patient/999").status_code == 404

        by_status = client.get("/api/v1/transactions/by-status/Unpaid").json()
        assert [tx["id"] for tx in by_status] == [unpaid["id"]]
        assert client.get("/api/v1/transactions/by-status/Pending").status_code == 422


class TestAnalyticsEndpoints:
    """Tests for the dashboard views."""

    def test_monthly_revenue_has_requested_length(self, client, patient):
        now = datetime.now(timezone.utc)
        post_transaction(client, patient["id"], amount="40.00", when=now.isoformat())

        response = client.get("/api/v1/transactions/analytics/monthly-revenue", params={"months": 6})
        trend = response.json()

        assert response.status_code == 200
        assert len(trend) == 6
        assert list(trend.values())[-1] == "40.00"
        assert all(value == "0.00" for value in list(trend.values())[:-1])

    def test_monthly_revenue_defaults_on_non_positive(self, client):
        trend = client.get("/api/v1/transactions/analytics/monthly-revenue", params={"months": 0}).json()
        assert len(trend) == 12

    def test_monthly_revenue_rejects_oversized_window(self, client):
        url = "/api/v1/transactions/analytics/monthly-revenue"
        assert client.get(url, params={"months": 30000}).status_code == 422
        assert len(client.get(url, params={"months": 1200}).json()) == 1200

    def test_breakdowns(self, client, patient):
        post_transaction(client, patient["id"], amount="100.00", status="Paid", service_type="Consultation")
        post_transaction(client, patient["id"], amount="50.00", status="Unpaid", service_type="X-Ray")
        post_transaction(client, patient["id"], amount="25.00", status="Paid", service_type="X-Ray")

        status_summary = client.get("/api/v1/transactions/analytics/status-summary").json()
        assert status_summary == {"Paid": 2, "Unpaid": 1}

        by_status = client.get("/api/v1/transactions/analytics/revenue-by-status").json()
        assert by_status == {"Paid": "125.00", "Unpaid": "50.00"}

        by_service = client.get("/api/v1/transactions/analytics/revenue-by-service").json()
        assert list(by_service.items()) == [("Consultation", "100.00"), ("X-Ray", "75.00")]

    def test_dashboard(self, client, patient):
        now = datetime.now(timezone.utc)
        post_transaction(client, patient["id"], amount="100.00", status="Paid", when=now.isoformat())
        post_transaction(client, patient["id"], amount="30.00", status="Unpaid", when="2020-01-01T00:00:00Z")

        dashboard = client.get("/api/v1/transactions/analytics/dashboard").json()

        assert dashboard["total_transactions_count"] == 2
        assert dashboard["total_revenue"] == "130.00"
        assert dashboard["paid_revenue"] == "100.00"
        assert dashboard["unpaid_revenue"] == "30.00"
        assert len(dashboard["monthly_revenue"]) == 12
        assert [tx["amount"] for tx in dashboard["recent_transactions"]] == ["100.00"]
        assert dashboard["transaction_count_by_status"] == {"Paid": 1, "Unpaid": 1}

    def test_patient_summary(self, client, patient):
        post_transaction(client, patient["id"], amount="100.00", status="Paid")
        post_transaction(client, patient["id"], amount="30.00", status="Unpaid")

        summary = client.get(f"/api/v1/transactions/patient/{patient['id']}/summary").json()

        assert summary == {
            "patient_id": patient["id"],
            "patient_name": "John Doe",
            "total_amount": "130.00",
            "paid_amount": "100.00",
            "unpaid_amount": "30.00",
        }
        assert client.get("/api/v1/transactions/patient/999/summary").status_code == 404
