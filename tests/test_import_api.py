"""HTTP-level tests for /api/v1/import."""

import pytest

from app.api.v1.imports.importers.subjects import SubjectImporter
from app.core.config import settings
from app.core.models import School, Subject, Teacher

from conftest import auth_headers_for, count, csv_bytes

URL = "/api/v1/import"


def form(school_id, import_type="teachers", mode=None, **extra):
    data = {"type": import_type, "schoolId": str(school_id)}
    if mode:
        data["mode"] = mode
    data.update(extra)
    return data


def upload(*lines):
    return {"file": ("import.csv", csv_bytes(*lines), "text/csv")}


@pytest.mark.asyncio
async def test_preview_returns_rows_without_writing(client, db_session, school, make, auth_headers):
    await make.subject("Math")
    files = upload("Name,Email,Subjects", "Amal Trabelsi,amal@x.com,Math; Physics", "Sami Ben Ali,,Math")

    first = await client.post(URL, data=form(school.id), files=files, headers=auth_headers)
    second = await client.post(URL, data=form(school.id, mode="preview"), files=files, headers=auth_headers)

    assert first.status_code == 200
    body = first.json()
    assert body == second.json()
    assert body["total"] == 2
    assert "created" not in body
    error_row, ok_row = body["rows"]
    assert error_row["row_index"] == 1
    assert error_row["status"] == "error"
    assert error_row["errors"] == ["Unknown subject: Physics"]
    assert error_row["data"]["name"] == "Amal Trabelsi"
    assert ok_row["status"] == "ok"
    assert ok_row["matched_id"] is None
    assert await count(db_session, Teacher) == 0


@pytest.mark.asyncio
async def test_commit_reports_counts(client, db_session, school, make, auth_headers):
    teacher = await make.teacher("Sami Ben Ali")
    files = upload("Name,Email", "Amal Trabelsi,amal@x.com", "sami ben ali,sami@x.com", "Bad,nope")

    response = await client.post(URL, data=form(school.id, mode="commit"), files=files, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert (body["created"], body["updated"], body["skipped"]) == (1, 1, 1)
    assert body["created"] + body["updated"] + body["skipped"] == body["total"]
    assert body["rows"][1]["status"] == "update"
    assert body["rows"][1]["matched_id"] == str(teacher.id)
    assert await count(db_session, Teacher) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "data_overrides,lines,message",
    [
        ({"type": "students"}, ("Name", "Amal"), "Invalid import type"),
        ({"mode": "dry-run"}, ("Name", "Amal"), "Invalid mode: must be preview or commit"),
        ({}, ("Name",), "CSV must have a header row and at least one data row"),
        ({}, ("Email", "amal@x.com"), 'CSV must have a "Name" column'),
        ({"schoolId": "not-a-uuid"}, ("Name", "Amal"), "Invalid schoolId"),
    ],
)
async def test_structural_errors_return_400(client, school, auth_headers, data_overrides, lines, message):
    data = form(school.id)
    data.update(data_overrides)

    response = await client.post(URL, data=data, files=upload(*lines), headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"error": message}


@pytest.mark.asyncio
async def test_missing_file_is_rejected(client, school, auth_headers):
    response = await client.post(URL, data=form(school.id), headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}


@pytest.mark.asyncio
async def test_unknown_school_is_rejected(client, db_session, auth_headers):
    other = School(name="Unrelated")
    db_session.add(other)
    await db_session.commit()
    headers = auth_headers_for(other.id, role="SUPER_ADMIN")
    await db_session.delete(other)
    await db_session.commit()

    response = await client.post(URL, data=form(other.id), files=upload("Name", "Amal"), headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": "School not found"}


@pytest.mark.asyncio
async def test_requires_authentication(client, school):
    response = await client.post(URL, data=form(school.id), files=upload("Name", "Amal"))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_cannot_import_into_another_school(client, db_session, school):
    other = School(name="Other School")
    db_session.add(other)
    await db_session.commit()

    headers = auth_headers_for(other.id)
    response = await client.post(URL, data=form(school.id), files=upload("Name", "Amal"), headers=headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_permission_is_checked_for_non_admin_roles(client, school):
    files = upload("Name", "Amal")

    denied = await client.post(
        URL, data=form(school.id), files=files, headers=auth_headers_for(school.id, role="TEACHER")
    )
    allowed = await client.post(
        URL,
        data=form(school.id),
        files=files,
        headers=auth_headers_for(school.id, role="SECRETARY", permissions={"imports": {"create": True}}),
    )

    assert denied.status_code == 403
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_failed_commit_saves_nothing(client, db_session, school, auth_headers, monkeypatch):
    real_create_row = SubjectImporter.create_row

    async def create_row(self, db, row):
        if row.row_index == 2:
            raise RuntimeError("disk full")
        await real_create_row(self, db, row)

    monkeypatch.setattr(SubjectImporter, "create_row", create_row)

    response = await client.post(
        URL,
        data=form(school.id, import_type="subjects", mode="commit"),
        files=upload("Name", "Math", "Physics", "Arts"),
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Import failed at row 2; no changes were saved"}
    assert await count(db_session, Subject) == 0


@pytest.mark.asyncio
async def test_per_row_commit_keeps_earlier_rows(client, db_session, school, auth_headers, monkeypatch):
    real_create_row = SubjectImporter.create_row

    async def create_row(self, db, row):
        if row.row_index == 2:
            raise RuntimeError("disk full")
        await real_create_row(self, db, row)

    monkeypatch.setattr(SubjectImporter, "create_row", create_row)
    monkeypatch.setattr(settings, "import_commit_per_row", True)

    response = await client.post(
        URL,
        data=form(school.id, import_type="subjects", mode="commit"),
        files=upload("Name", "Math", "Physics", "Arts"),
        headers=auth_headers,
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Import failed at row 2; rows before it were saved"}
    assert await count(db_session, Subject) == 1


@pytest.mark.asyncio
async def test_download_template(client, auth_headers):
    response = await client.get(f"{URL}/templates/teachers", headers=auth_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "teachers-template.csv" in response.headers["content-disposition"]
    assert response.text == "Name,Email,Phone,Subjects,Max/Day,Max/Week\n"


@pytest.mark.asyncio
async def test_template_for_unknown_type(client, auth_headers):
    response = await client.get(f"{URL}/templates/students", headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_template_needs_read_permission(client, school):
    denied = await client.get(f"{URL}/templates/rooms", headers=auth_headers_for(school.id, role="TEACHER"))
    allowed = await client.get(
        f"{URL}/templates/rooms",
        headers=auth_headers_for(school.id, role="TEACHER", permissions={"imports": {"read": True}}),
    )

    assert denied.status_code == 403
    assert allowed.status_code == 200
