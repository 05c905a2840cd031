"""Integration tests for the /api/configure endpoints."""

from fastapi.testclient import TestClient

from cpq.api.main import app

client = TestClient(app)


def validate(**payload):
    return client.post("/api/configure/validate", json=payload)


# ---------------------------------------------------------------------------
# Single validation
# ---------------------------------------------------------------------------


class TestValidateEndpoint:
    def test_valid_configuration(self):
        resp = validate(
            productId="cloud-server-basic",
            selectedOptions=["ram-8gb", "storage-ssd-100gb"],
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["isValid"] is True
        assert body["errors"] == []

    def test_conflicting_options(self):
        resp = validate(productId="cloud-server-basic", selectedOptions=["ram-8gb", "ram-16gb"])
        assert resp.status_code == 200
        body = resp.json()
        assert body["isValid"] is False
        assert "cannot be selected together" in body["errors"][0]["message"]

    def test_invalid_option(self):
        body = validate(productId="cloud-server-basic", selectedOptions=["invalid-option"]).json()
        assert body["isValid"] is False
        assert any("Invalid option" in e["message"] for e in body["errors"])

    def test_missing_dependency(self):
        body = validate(
            productId="professional-services", selectedOptions=["training-advanced"]
        ).json()
        assert body["isValid"] is False
        assert any("requires" in e["message"] for e in body["errors"])

    def test_unknown_product_is_200_invalid(self):
        resp = validate(productId="invalid-product", selectedOptions=[])
        assert resp.status_code == 200
        body = resp.json()
        assert body["isValid"] is False
        assert body["errors"][0]["field"] == "productId"
        assert "not found" in body["errors"][0]["message"]

    def test_warnings_included(self):
        body = validate(productId="cloud-server-basic", selectedOptions=["ram-8gb"]).json()
        assert body["isValid"] is True
        assert len(body["warnings"]) > 0

    def test_warnings_omitted_when_none(self):
        body = validate(productId="database-managed-mysql").json()
        assert "warnings" not in body

    def test_selected_options_default_to_empty(self):
        body = validate(productId="database-managed-mysql").json()
        assert body["isValid"] is True

    def test_snake_case_accepted(self):
        resp = client.post(
            "/api/configure/validate",
            json={"product_id": "cloud-server-basic", "selected_options": ["backup-daily"]},
        )
        assert resp.status_code == 200
        assert resp.json()["isValid"] is True


class TestValidateEndpointErrors:
    def test_missing_product_id_is_400(self):
        resp = validate(selectedOptions=[])
        assert resp.status_code == 400
        body = resp.json()
        assert body["error"].startswith("Invalid request")
        assert body["details"]["errors"][0]["field"] == "productId"

    def test_wrong_type_is_400(self):
        resp = validate(productId="cloud-server-basic", selectedOptions="ram-8gb")
        assert resp.status_code == 400

    def test_malformed_json_is_400(self):
        resp = client.post(
            "/api/configure/validate",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert "error" in resp.json()


# ---------------------------------------------------------------------------
# Batch validation
# ---------------------------------------------------------------------------


class TestValidateBatchEndpoint:
    def test_batch_all_valid(self):
        resp = client.post(
            "/api/configure/validate-batch",
            json={
                "configurations": [
                    {"productId": "cloud-server-basic", "selectedOptions": ["backup-daily"]},
                    {"productId": "database-managed-mysql"},
                ]
            },
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["isValid"] is True
        assert [r["productId"] for r in body["results"]] == [
            "cloud-server-basic",
            "database-managed-mysql",
        ]

    def test_batch_reports_per_item(self):
        resp = client.post(
            "/api/configure/validate-batch",
            json={
                "configurations": [
                    {"productId": "cloud-server-basic"},
                    {"productId": "ghost"},
                ]
            },
        )
        body = resp.json()
        assert body["isValid"] is False
        assert body["results"][0]["validation"]["isValid"] is True
        assert body["results"][1]["validation"]["isValid"] is False

    def test_batch_empty_is_400(self):
        resp = client.post("/api/configure/validate-batch", json={"configurations": []})
        assert resp.status_code == 400
