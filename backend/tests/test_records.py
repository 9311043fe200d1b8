"""
Test medical record upload, catalog and file access.
"""

import json
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from healthvault.services.record_service import RecordService

PDF_BYTES = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF\n"


def _upload(client: TestClient, headers, filename="blood-test.pdf", content=PDF_BYTES, **form):
    return client.post(
        "/api/v1/records",
        files={"file": (filename, content, "application/pdf")},
        data=form,
        headers=headers,
    )


def test_upload_record(client: TestClient, auth_headers, settings):
    response = _upload(
        client,
        auth_headers,
        type="LAB_REPORT",
        title="CBC March",
        description="Complete blood count",
        metadata=json.dumps({"lab": "City Lab"}),
        tags=json.dumps(["blood", "annual"]),
    )

    assert response.status_code == 201
    record = response.json()
    assert record["type"] == "LAB_REPORT"
    assert record["title"] == "CBC March"
    assert record["fileName"] == "blood-test.pdf"
    assert record["fileSize"] == len(PDF_BYTES)
    assert record["mimeType"] == "application/pdf"
    assert record["metadata"] == {"lab": "City Lab"}
    assert record["tags"] == ["blood", "annual"]

    stored = Path(settings.upload_dir) / record["fileUrl"]
    assert stored.read_bytes() == PDF_BYTES


def test_upload_defaults(client: TestClient, auth_headers):
    """Test title falls back to the filename and type to OTHER."""
    record = _upload(client, auth_headers, filename="scan.png").json()

    assert record["type"] == "OTHER"
    assert record["title"] == "scan.png"
    assert record["metadata"] == {}
    assert record["tags"] == []


def test_upload_rejects_disallowed_extension(client: TestClient, auth_headers):
    response = _upload(client, auth_headers, filename="notes.txt")

    assert response.status_code == 422
    assert "not allowed" in response.json()["detail"]


def test_upload_rejects_bad_json_fields(client: TestClient, auth_headers):
    response = _upload(client, auth_headers, metadata="{broken")
    assert response.status_code == 422

    response = _upload(client, auth_headers, tags=json.dumps({"not": "a list"}))
    assert response.status_code == 422


def test_upload_rejects_empty_file(client: TestClient, auth_headers):
    response = _upload(client, auth_headers, content=b"")
    assert response.status_code == 422


def test_upload_rejects_oversized_file(client: TestClient, app, auth_headers):
    app.state.settings.max_file_size_mb = 1
    response = _upload(client, auth_headers, content=b"x" * (1024 * 1024 + 1))
    assert response.status_code == 422


def test_upload_requires_auth(client: TestClient):
    response = _upload(client, {})
    assert response.status_code == 401


def test_list_filter_and_search(client: TestClient, auth_headers):
    _upload(client, auth_headers, type="LAB_REPORT", title="Lipid panel")
    _upload(client, auth_headers, type="PRESCRIPTION", title="Inhaler", description="Asthma refill")
    _upload(client, auth_headers, type="LAB_REPORT", title="Thyroid")

    records = client.get("/api/v1/records", headers=auth_headers).json()
    assert [r["title"] for r in records] == ["Thyroid", "Inhaler", "Lipid panel"]

    labs = client.get("/api/v1/records", params={"type": "LAB_REPORT"}, headers=auth_headers).json()
    assert {r["title"] for r in labs} == {"Lipid panel", "Thyroid"}

    found = client.get("/api/v1/records", params={"search": "asthma"}, headers=auth_headers).json()
    assert [r["title"] for r in found] == ["Inhaler"]

    counts = client.get("/api/v1/records/by-type", headers=auth_headers).json()
    assert counts == [
        {"type": "LAB_REPORT", "count": 2},
        {"type": "PRESCRIPTION", "count": 1},
    ]


def test_update_record_is_partial(client: TestClient, auth_headers):
    record = _upload(
        client, auth_headers, title="Old title", tags=json.dumps(["keep"])
    ).json()

    response = client.put(
        f"/api/v1/records/{record['id']}",
        json={"title": "New title", "type": "VACCINATION"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "New title"
    assert updated["type"] == "VACCINATION"
    assert updated["tags"] == ["keep"]
    assert updated["fileUrl"] == record["fileUrl"]


def test_delete_record_removes_file(client: TestClient, auth_headers, settings):
    record = _upload(client, auth_headers).json()
    stored = Path(settings.upload_dir) / record["fileUrl"]
    assert stored.exists()

    response = client.delete(f"/api/v1/records/{record['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert not stored.exists()
    assert client.get(f"/api/v1/records/{record['id']}", headers=auth_headers).status_code == 404


def test_download_record_file(client: TestClient, auth_headers):
    record = _upload(client, auth_headers).json()

    response = client.get(f"/api/v1/records/{record['id']}/file", headers=auth_headers)

    assert response.status_code == 200
    assert response.content == PDF_BYTES
    assert response.headers["content-type"].startswith("application/pdf")


def test_records_are_private(client: TestClient, auth_headers, verified_user):
    """Test another user's records look like they do not exist."""
    record = _upload(client, auth_headers).json()
    other = {"Authorization": f"Bearer {verified_user.token}"}

    assert client.get(f"/api/v1/records/{record['id']}", headers=other).status_code == 404
    assert client.get(f"/api/v1/records/{record['id']}/file", headers=other).status_code == 404
    assert client.delete(f"/api/v1/records/{record['id']}", headers=other).status_code == 404
    assert client.get("/api/v1/records", headers=other).json() == []


def test_update_with_null_type_keeps_stored_type(client: TestClient, auth_headers):
    """Test null for a required field leaves the stored value alone."""
    record = _upload(client, auth_headers, type="LAB_REPORT", title="CBC").json()

    response = client.put(
        f"/api/v1/records/{record['id']}",
        json={"type": None, "title": None, "description": "Fasting"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["type"] == "LAB_REPORT"
    assert updated["title"] == "CBC"
    assert updated["description"] == "Fasting"


def test_search_treats_wildcards_literally(client: TestClient, auth_headers):
    _upload(client, auth_headers, title="HbA1c 6.1%")
    _upload(client, auth_headers, title="Chest x-ray")
    _upload(client, auth_headers, title="lab_report_march")

    found = client.get("/api/v1/records", params={"search": "%"}, headers=auth_headers).json()
    assert [r["title"] for r in found] == ["HbA1c 6.1%"]

    found = client.get("/api/v1/records", params={"search": "_"}, headers=auth_headers).json()
    assert [r["title"] for r in found] == ["lab_report_march"]


def test_failed_save_removes_stored_file(
    client: TestClient, app, auth_headers, settings, monkeypatch
):
    """Test the uploaded file is deleted when the record row cannot be written."""

    def broken_create(self, **kwargs):
        raise OperationalError("INSERT INTO medical_records", {}, Exception("disk I/O error"))

    monkeypatch.setattr(RecordService, "create_record", broken_create)
    server_errors = TestClient(app, raise_server_exceptions=False)

    response = _upload(server_errors, auth_headers)

    assert response.status_code == 500
    assert response.json()["error"] == "server_error"
    uploads = Path(settings.upload_dir)
    assert [p for p in uploads.rglob("*") if p.is_file()] == []
