# =============================================================================
# tests/test_api.py - API Endpoint Tests
# =============================================================================
# Tests for the HTTP surface: routing, request validation, response
# shapes and error bodies. Services are patched where they would reach
# Supabase or S3.
# =============================================================================

from unittest.mock import MagicMock, patch

from tests.conftest import USER_ID

FILE_ID = "33333333-3333-4333-8333-333333333333"
TEMPLATE_ID = "44444444-4444-4444-8444-444444444444"
FOLDER_ID = "55555555-5555-4555-8555-555555555555"


# =============================================================================
# Root / Health
# =============================================================================

class TestRootAndHealth:
    """Test unauthenticated endpoints."""

    def test_root(self, api_client):
        response = api_client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "Template Studio API"

    def test_health(self, api_client):
        response = api_client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_live(self, api_client):
        assert api_client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_ready_degraded_when_storage_down(self, api_client, storage):
        from app.exceptions import StorageError
        from lib.supabase_client import SupabaseClient

        storage.check_bucket.side_effect = StorageError("head_bucket", "unreachable")

        with patch.object(SupabaseClient, "get_client", return_value=MagicMock()):
            response = api_client.get("/api/v1/health/ready")

        data = response.json()
        assert data["status"] == "degraded"
        assert data["checks"]["database"] == "healthy"
        assert data["checks"]["storage"].startswith("unhealthy")


# =============================================================================
# Files
# =============================================================================

class TestFileEndpoints:
    """Test /api/v1/files."""

    def test_upload_url(self, api_client):
        result = {
            "success": True,
            "url": "https://s3.example/signed",
            "key": f"uploads/{USER_ID}/a-1-ab.csv",
            "bucket": "test-bucket",
            "expires_in": 900,
            "file_id": FILE_ID,
            "metadata": {"filename": "a.csv", "content_type": "text/csv"},
        }

        with patch("app.routers.files.FileService.create_upload", return_value=result) as create:
            response = api_client.post(
                "/api/v1/files/upload-url",
                json={"filename": "a.csv", "contentType": "text/csv"},
            )

        assert response.status_code == 200
        assert response.json()["file_id"] == FILE_ID
        assert create.call_args.kwargs["content_type"] == "text/csv"

    def test_upload_url_missing_filename(self, api_client):
        response = api_client.post("/api/v1/files/upload-url", json={"content_type": "text/csv"})

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_REQUIRED_FIELDS"

    def test_upload_url_bad_prefix(self, api_client):
        response = api_client.post(
            "/api/v1/files/upload-url",
            json={"filename": "a.csv", "content_type": "text/csv", "prefix": "secrets/"},
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid prefix"

    def test_status_update(self, api_client, file_row):
        with patch("app.routers.files.FileService.update_status", return_value=file_row):
            response = api_client.patch(
                "/api/v1/files/status",
                json={"fileId": FILE_ID, "status": "uploaded"},
            )

        assert response.status_code == 200
        assert response.json()["file"]["status"] == "uploaded"

    def test_status_not_reportable(self, api_client):
        response = api_client.patch(
            "/api/v1/files/status",
            json={"file_id": FILE_ID, "status": "completed"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_STATUS"

    def test_status_bad_file_id(self, api_client):
        response = api_client.patch(
            "/api/v1/files/status",
            json={"file_id": "nope", "status": "uploaded"},
        )

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"

    def test_list(self, api_client):
        listing = {"files": [], "total_count": 0, "current_page": 2, "total_pages": 0}

        with patch("app.routers.files.FileService.list_files", return_value=listing) as list_files:
            response = api_client.get(
                "/api/v1/files",
                params={"page": 2, "sort_by": "name", "sort_order": "asc", "filter_type": "csv"},
            )

        assert response.status_code == 200
        assert response.json()["current_page"] == 2
        kwargs = list_files.call_args.kwargs
        assert kwargs["sort_by"] == "name"
        assert kwargs["filter_type"] == "csv"

    def test_list_rejects_wildcard_type_filter(self, api_client):
        from lib.supabase_client import SupabaseClient

        with patch.object(SupabaseClient, "get_client", return_value=MagicMock()) as get_client:
            response = api_client.get("/api/v1/files", params={"filter_type": "c_v"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILTER"
        get_client.assert_not_called()

    def test_list_rejects_bad_sort(self, api_client):
        response = api_client.get("/api/v1/files", params={"sort_by": "size"})
        assert response.status_code == 422

    def test_content(self, api_client):
        content = {
            "type": "csv",
            "columns": [{"id": "col-0", "name": "Region", "selected": False}],
            "first_row": {"Region": "EMEA"},
        }

        with patch("app.routers.files.ContentService.get_file_content", return_value=content):
            response = api_client.get(f"/api/v1/files/{FILE_ID}/content")

        assert response.status_code == 200
        assert response.json() == content

    def test_content_by_query(self, api_client):
        content = {
            "type": "text",
            "columns": [{"id": "content-column", "name": "a.txt content", "selected": True}],
            "first_row": {"a.txt content": "hello"},
            "warning": None,
        }

        with patch("app.routers.files.ContentService.get_file_content", return_value=content):
            response = api_client.get("/api/v1/files/content", params={"file_id": FILE_ID})

        assert response.status_code == 200
        assert "warning" not in response.json()

    def test_content_forbidden(self, api_client):
        from app.exceptions import FileAccessDeniedError

        with patch(
            "app.routers.files.ContentService.get_file_content",
            side_effect=FileAccessDeniedError(FILE_ID),
        ):
            response = api_client.get(f"/api/v1/files/{FILE_ID}/content")

        assert response.status_code == 403
        assert response.json()["detail"] == "Unauthorized access"


# =============================================================================
# Folders / Messages
# =============================================================================

class TestFolderEndpoints:
    """Test /api/v1/folders and /api/v1/messages."""

    def test_create(self, api_client):
        row = {
            "id": FOLDER_ID,
            "user_id": str(USER_ID),
            "name": "Onboarding",
            "parent_folder_id": None,
            "created_at": "2024-01-15T10:30:00+00:00",
        }

        with patch("app.routers.folders.FolderService.create_folder", return_value=row):
            response = api_client.post("/api/v1/folders", json={"name": "Onboarding"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["folder"]["id"] == FOLDER_ID
        assert data["message"] == "Folder created successfully"

    def test_create_short_name(self, api_client):
        response = api_client.post("/api/v1/folders", json={"name": "ab"})
        assert response.status_code == 422

    def test_list(self, api_client):
        tree = [{"id": FOLDER_ID, "name": "Onboarding", "parent_folder_id": None, "children": []}]

        with patch("app.routers.folders.FolderService.list_folders", return_value=tree):
            response = api_client.get("/api/v1/folders")

        assert response.json() == {"success": True, "folders": tree}

    def test_messages(self, api_client):
        overview = [{
            "id": FOLDER_ID,
            "name": "Onboarding",
            "messages": [{"id": TEMPLATE_ID, "name": "Welcome", "folder_id": FOLDER_ID}],
        }]

        with patch("app.routers.messages.FolderService.list_folders_with_templates", return_value=overview):
            response = api_client.get("/api/v1/messages")

        assert response.status_code == 200
        assert response.json()[0]["messages"][0]["name"] == "Welcome"


# =============================================================================
# Templates
# =============================================================================

class TestTemplateEndpoints:
    """Test /api/v1/templates."""

    def test_save_created(self, api_client, template_config):
        with patch("app.routers.templates.TemplateService.save_template", return_value=(TEMPLATE_ID, True)):
            response = api_client.post(
                "/api/v1/templates/save",
                json={"name": "Weekly", "type": "csv", "config": template_config},
            )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "template_id": TEMPLATE_ID,
            "message": "Template created successfully",
        }

    def test_save_updated(self, api_client, template_config):
        with patch("app.routers.templates.TemplateService.save_template", return_value=(TEMPLATE_ID, False)):
            response = api_client.post(
                "/api/v1/templates/save",
                json={"id": TEMPLATE_ID, "name": "Weekly", "type": "csv", "config": template_config},
            )

        assert response.json()["message"] == "Template updated successfully"

    def test_save_invalid(self, api_client, template_config):
        response = api_client.post(
            "/api/v1/templates/save",
            json={"name": "ab", "type": "csv", "config": template_config},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "TEMPLATE_VALIDATION_ERROR"
        assert body["details"]["errors"][0]["path"] == "name"

    def test_get_returns_camel_case_config(self, api_client, template_row):
        with patch("app.routers.templates.TemplateService.get_template", return_value=template_row):
            response = api_client.get(f"/api/v1/templates/{TEMPLATE_ID}")

        assert response.status_code == 200
        data = response.json()
        assert data["folder_id"] is None
        assert "errorMessage" in data["config"]["validation"]

    def test_get_missing(self, api_client):
        from app.exceptions import TemplateNotFoundError

        with patch(
            "app.routers.templates.TemplateService.get_template",
            side_effect=TemplateNotFoundError(TEMPLATE_ID),
        ):
            response = api_client.get(f"/api/v1/templates/{TEMPLATE_ID}")

        assert response.status_code == 404

    def test_list(self, api_client, template_row):
        with patch("app.routers.templates.TemplateService.list_templates", return_value=[template_row]) as list_templates:
            response = api_client.get("/api/v1/templates", params={"folder_id": FOLDER_ID})

        assert len(response.json()) == 1
        assert str(list_templates.call_args.kwargs["folder_id"]) == FOLDER_ID

    def test_delete(self, api_client):
        with patch("app.routers.templates.TemplateService.delete_template") as delete:
            response = api_client.delete(f"/api/v1/templates/{TEMPLATE_ID}")

        assert response.status_code == 200
        assert response.json()["success"] is True
        delete.assert_called_once()

    def test_preview(self, api_client):
        with patch("app.routers.templates.TemplateService.preview_template", return_value="Hi\n\n[Region]\n\n"):
            response = api_client.get(f"/api/v1/templates/{TEMPLATE_ID}/preview")

        assert response.status_code == 200
        assert response.json()["preview"] == "Hi\n\n[Region]\n\n"
        assert response.json()["file_id"] is None


# =============================================================================
# Constructor
# =============================================================================

class TestConstructorEndpoint:
    """Test /api/v1/constructor/preview."""

    def test_preview(self, api_client):
        response = api_client.post(
            "/api/v1/constructor/preview",
            json={
                "columns": [
                    {"id": "col-0", "name": "Region", "selected": True, "preface": "Region: "},
                    {"id": "col-1", "name": "Revenue"},
                    {"id": "col-2", "name": "Order Date", "selected": True},
                ],
                "introduction": "Hello",
                "conclusion": "Bye",
                "first_row": {"Region": "EMEA"},
                "items_per_page": 2,
                "page": 5,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["preview"] == "Hello\n\nRegion: EMEA\n[Order Date]\n\nBye"
        assert data["total_pages"] == 2
        assert data["current_page"] == 2
        assert [col["id"] for col in data["columns"]] == ["col-2"]
        assert [col["id"] for col in data["selected_columns"]] == ["col-0", "col-2"]

    def test_search(self, api_client):
        response = api_client.post(
            "/api/v1/constructor/preview",
            json={
                "columns": [{"id": "a", "name": "Region"}, {"id": "b", "name": "Revenue"}],
                "search_query": "rev",
            },
        )

        assert [col["id"] for col in response.json()["columns"]] == ["b"]
