import uuid

from conftest import auth

from nexus.models.document import Document


def _stored(store):
    if not store.root.exists():
        return []
    return sorted(p.name for p in store.root.iterdir())


def upload(client, project, user, name="notes.txt", content=b"hello nexus", ctype="text/plain", **data):
    return client.post(
        f"/api/documents/{project.id}",
        files={"file": (name, content, ctype)},
        data=data,
        headers=auth(user),
    )


def test_lead_uploads_document(client, make_user, make_project, store, db):
    lead = make_user("project-lead")
    p = make_project(lead)

    r = upload(client, p, lead, description="Design notes")
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["fileName"] == "notes.txt"
    assert data["fileType"] == "text/plain"
    assert data["fileSize"] == len(b"hello nexus")
    assert data["description"] == "Design notes"
    assert data["uploadedBy"]["id"] == str(lead.id)
    assert "filePath" not in data

    doc = db.get(Document, uuid.UUID(data["id"]))
    assert store.exists(doc.file_path)
    assert _stored(store) == [doc.file_path]


def test_member_developer_upload_is_denied_before_storing(client, make_user, make_project, store):
    lead = make_user("project-lead")
    dev = make_user("developer")
    p = make_project(lead, members=[dev])

    r = upload(client, p, dev)
    assert r.status_code == 403
    assert r.json()["code"] == "not-lead-or-admin"
    assert _stored(store) == []


def test_invalid_file_type_is_rejected_without_a_blob(client, make_user, make_project, store):
    lead = make_user("project-lead")
    p = make_project(lead)

    r = upload(client, p, lead, name="tool.exe", content=b"MZ", ctype="application/x-msdownload")
    assert r.status_code == 400
    assert r.json()["code"] == "invalid-file-type"
    assert _stored(store) == []


def test_upload_to_unknown_project(client, make_user):
    admin = make_user("admin")
    r = client.post(
        f"/api/documents/{uuid.uuid4()}",
        files={"file": ("a.txt", b"x", "text/plain")},
        headers=auth(admin),
    )
    assert r.status_code == 404


def test_members_list_documents_outsiders_cannot(client, make_user, make_project):
    lead = make_user("project-lead")
    dev = make_user("developer")
    outsider = make_user("developer")
    p = make_project(lead, members=[dev])
    upload(client, p, lead, name="first.txt")
    upload(client, p, lead, name="second.txt")

    r = client.get(f"/api/documents/{p.id}", headers=auth(dev))
    assert r.status_code == 200
    assert r.json()["count"] == 2
    assert {d["fileName"] for d in r.json()["data"]} == {"first.txt", "second.txt"}

    r = client.get(f"/api/documents/{p.id}", headers=auth(outsider))
    assert r.status_code == 403
    assert r.json()["code"] == "not-project-member"


def test_download_and_info(client, make_user, make_project):
    lead = make_user("project-lead")
    dev = make_user("developer")
    outsider = make_user("developer")
    p = make_project(lead, members=[dev])
    doc_id = upload(client, p, lead, content=b"line one\nline two\n").json()["data"]["id"]

    r = client.get(f"/api/documents/download/{doc_id}", headers=auth(dev))
    assert r.status_code == 200
    assert r.content == b"line one\nline two\n"
    assert "notes.txt" in r.headers["content-disposition"]

    r = client.get(f"/api/documents/info/{doc_id}", headers=auth(dev))
    assert r.status_code == 200
    assert r.json()["data"]["id"] == doc_id

    r = client.get(f"/api/documents/download/{doc_id}", headers=auth(outsider))
    assert r.status_code == 403


def test_download_when_blob_is_missing(client, make_user, make_project, store, db):
    lead = make_user("project-lead")
    p = make_project(lead)
    doc_id = upload(client, p, lead).json()["data"]["id"]

    doc = db.get(Document, uuid.UUID(doc_id))
    store.delete(doc.file_path)

    r = client.get(f"/api/documents/download/{doc_id}", headers=auth(lead))
    assert r.status_code == 404
    assert r.json()["message"] == "File not found on server"


def test_only_uploader_or_admin_deletes(client, make_user, make_project, store, db):
    lead = make_user("project-lead")
    dev = make_user("developer")
    admin = make_user("admin")
    p = make_project(lead, members=[dev])
    first = upload(client, p, lead, name="first.txt").json()["data"]["id"]
    second = upload(client, p, lead, name="second.txt").json()["data"]["id"]

    r = client.delete(f"/api/documents/{first}", headers=auth(dev))
    assert r.status_code == 403
    assert r.json()["code"] == "not-owner-or-admin"

    r = client.delete(f"/api/documents/{first}", headers=auth(lead))
    assert r.status_code == 200
    assert r.json()["message"] == "Document deleted successfully"

    r = client.delete(f"/api/documents/{second}", headers=auth(admin))
    assert r.status_code == 200

    assert db.query(Document).count() == 0
    assert _stored(store) == []

    r = client.get(f"/api/documents/info/{first}", headers=auth(admin))
    assert r.status_code == 404
    assert r.json()["code"] == "document-not-found"
