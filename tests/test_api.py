"""
API Integration Tests

Tests for the health, form administration and submission endpoints.

Run: pytest tests/test_api.py -v
"""

import pytest
from jose import jwt

from config.settings import settings


async def create_form(client, payload) -> dict:
    response = await client.post("/api/admin/forms", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]["form"]


# =============================================================================
# Health Check Tests
# =============================================================================

class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["app"] == settings.APP_NAME

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["components"]["database"] is True
        assert data["version"] == settings.APP_VERSION


# =============================================================================
# Form Administration Tests
# =============================================================================

class TestFormAdministration:

    @pytest.mark.asyncio
    async def test_create_and_fetch(self, client, form_payload):
        form = await create_form(client, form_payload)

        assert form["name"] == "Clinic Intake"
        assert form["applicationType"] == "clinical"
        assert form["createdBy"] == "admin-user-id"
        assert form["fields"][0]["fieldId"] == "firstName"

        response = await client.get(f"/api/admin/forms/{form['id']}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["form"]["id"] == form["id"]
        assert data["usage"] == {"applicationCount": 0, "recentApplications": []}

    @pytest.mark.asyncio
    async def test_duplicate_orders_rejected(self, client, form_payload):
        form_payload["fields"][1]["order"] = 1

        response = await client.post("/api/admin/forms", json=form_payload)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Validation failed",
            "details": ["Field orders must be unique"],
        }

    @pytest.mark.asyncio
    async def test_malformed_body_rejected(self, client, form_payload):
        del form_payload["name"]
        form_payload["applicationType"] = "enterprise"

        response = await client.post("/api/admin/forms", json=form_payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert len(body["details"]) == 2

    @pytest.mark.asyncio
    async def test_missing_form_returns_404(self, client):
        response = await client.get("/api/admin/forms/999")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Form configuration not found"}

    @pytest.mark.asyncio
    async def test_list_with_filters(self, client, form_payload):
        await create_form(client, form_payload)
        await create_form(client, dict(form_payload, applicationType="affiliate", name="Partners"))

        response = await client.get("/api/admin/forms", params={"applicationType": "affiliate"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert [f["name"] for f in data["forms"]] == ["Partners"]
        assert data["pagination"]["totalCount"] == 1

    @pytest.mark.asyncio
    async def test_update_clone_and_set_default(self, client, form_payload):
        form = await create_form(client, form_payload)

        response = await client.put(
            f"/api/admin/forms/{form['id']}",
            json={"description": "Updated", "createdBy": "someone-else"},
        )
        assert response.status_code == 200
        updated = response.json()["data"]["form"]
        assert updated["description"] == "Updated"
        assert updated["createdBy"] == "admin-user-id"

        response = await client.post(f"/api/admin/forms/{form['id']}/clone")
        assert response.status_code == 201
        clone = response.json()["data"]["form"]
        assert clone["name"] == "Clinic Intake (Copy)"
        assert clone["isDefault"] is False

        response = await client.post(f"/api/admin/forms/{clone['id']}/set-default")
        assert response.status_code == 200
        assert response.json()["message"] == "Form configuration set as default for clinical applications"

        response = await client.get("/api/admin/forms/types/clinical/default")
        assert response.json()["data"]["form"]["id"] == clone["id"]

        response = await client.get("/api/admin/forms", params={"isDefault": "true"})
        assert [f["id"] for f in response.json()["data"]["forms"]] == [clone["id"]]

    @pytest.mark.asyncio
    async def test_form_dry_run(self, client, form_payload):
        form = await create_form(client, form_payload)

        response = await client.post(
            f"/api/admin/forms/{form['id']}/test",
            json={"testData": {"firstName": "Ann", "email": "ann@example.com", "extra": 1}},
        )

        assert response.status_code == 200
        result = response.json()["data"]["testResult"]
        assert result["isValid"] is True
        assert result["warnings"][0]["type"] == "unexpected_field"

    @pytest.mark.asyncio
    async def test_delete_unused_form(self, client, form_payload):
        form = await create_form(client, form_payload)

        response = await client.delete(f"/api/admin/forms/{form['id']}")

        assert response.status_code == 200
        assert response.json()["message"] == "Form configuration deleted successfully"
        assert (await client.get(f"/api/admin/forms/{form['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_used_form_archives(self, client, form_payload):
        form = await create_form(client, form_payload)
        submitted = await client.post("/api/applications", json={"firstName": "Ann", "email": "a@b.co"})
        assert submitted.status_code == 201

        response = await client.delete(f"/api/admin/forms/{form['id']}")

        body = response.json()
        assert body["message"] == "Form configuration archived (1 associated applications preserved)"
        assert body["data"]["form"]["isActive"] is False
        assert body["data"]["form"]["archivedAt"] is not None

    @pytest.mark.asyncio
    async def test_analytics_summary(self, client, form_payload):
        await create_form(client, form_payload)
        await client.post("/api/applications", json={"firstName": "Ann", "email": "a@b.co"})

        response = await client.get("/api/admin/forms/analytics/summary")

        summary = response.json()["data"]["summary"]
        assert summary["totalForms"] == 1
        assert summary["totalApplications"] == 1


class TestDefaultFormLookup:

    @pytest.mark.asyncio
    async def test_missing_default_returns_404(self, client):
        response = await client.get("/api/admin/forms/types/wholesale/default")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "No active form configuration found for application type: wholesale",
        }


# =============================================================================
# Admin Authentication Tests
# =============================================================================

class TestAdminAuthentication:

    @pytest.fixture(autouse=True)
    def production(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")

    def _token(self, **claims) -> str:
        return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @pytest.mark.asyncio
    async def test_missing_token(self, client):
        response = await client.get("/api/admin/forms")
        assert response.status_code == 401
        assert response.json()["error"] == "Admin authentication required"

    @pytest.mark.asyncio
    async def test_invalid_token(self, client):
        response = await client.get("/api/admin/forms", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_non_admin_token(self, client):
        token = self._token(sub="user-7", role="member")
        response = await client.get("/api/admin/forms", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_token_is_recorded_as_creator(self, client, form_payload):
        token = self._token(sub="admin-42", role="admin")
        response = await client.post(
            "/api/admin/forms",
            json=form_payload,
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 201
        assert response.json()["data"]["form"]["createdBy"] == "admin-42"

    @pytest.mark.asyncio
    async def test_default_lookup_stays_public(self, client):
        response = await client.get("/api/admin/forms/types/clinical/default")
        assert response.status_code == 404


# =============================================================================
# Submission Tests
# =============================================================================

class TestApplicationSubmission:

    @pytest.mark.asyncio
    async def test_valid_submission(self, client, form_payload):
        form = await create_form(client, form_payload)

        response = await client.post("/api/applications", json={
            "applicationType": "clinical",
            "personalInfo": {"firstName": "Ann", "email": "ANN@example.com"},
            "businessInfo": {"businessType": "Wellnes"},
        })

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Application submitted successfully"
        application = body["data"]["application"]
        assert application["formConfigurationId"] == form["id"]
        assert application["responseData"] == {
            "firstName": "Ann",
            "email": "ann@example.com",
            "businessType": "wellness",
        }
        assert body["data"]["validationWarnings"][0]["suggestion"] == "wellness"

    @pytest.mark.asyncio
    async def test_invalid_submission(self, client, form_payload):
        await create_form(client, form_payload)

        response = await client.post("/api/applications", json={"email": "broken"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["errorType"] == "VALIDATION_ERROR"
        assert body["details"] == ["First Name is required", "Please provide a valid email address"]

    @pytest.mark.asyncio
    async def test_first_submission_provisions_default_form(self, client):
        response = await client.post("/api/applications", json={
            "applicationType": "wholesale",
            "email": "buyer@example.com",
        })
        assert response.status_code == 400

        response = await client.get("/api/admin/forms/types/wholesale/default")
        assert response.status_code == 200
        assert response.json()["data"]["form"]["name"] == "Default Wholesale Application Form"
