import io
import os

import pytest

from extensions import db
from models import Document, DocumentType, DocumentUserTypeEnum, RoleEnum, User
from api.utils.auth import create_access_token

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\n%%EOF\n"


@pytest.fixture
def document_type_id(app):
    with app.app_context():
        document_type = DocumentType(name="RG", user_type=DocumentUserTypeEnum.STUDENT, is_required=True)
        db.session.add(document_type)
        db.session.commit()
        return document_type.id


@pytest.fixture
def student(make_user, make_student):
    return make_user("student", student_id=make_student())


def _pdf(name="rg.pdf", content=PDF_BYTES, mimetype="application/pdf"):
    return (io.BytesIO(content), name, mimetype)


def _post(client, user, data):
    return client.post(
        "/api/v1/documents",
        data=data,
        headers=user["headers"],
        content_type="multipart/form-data",
    )


def _stored_files(app):
    root = os.path.join(app.config["UPLOAD_DIR"], "documents")
    found = []
    for dirpath, _dirnames, filenames in os.walk(root):
        found.extend(os.path.join(dirpath, name) for name in filenames)
    return found


def test_upload_document(app, client, student, document_type_id):
    response = _post(client, student, {"file": _pdf(), "documentTypeId": str(document_type_id)})

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["status"] == "pending"
    assert data["fileName"] == "rg.pdf"
    assert data["fileSize"] == len(PDF_BYTES)
    assert data["mimeType"] == "application/pdf"

    files = _stored_files(app)
    assert len(files) == 1
    assert os.path.basename(files[0]).endswith("-rg.pdf")
    assert os.path.dirname(files[0]).endswith(os.path.join("documents", str(student["id"])))

    download = client.get(f"/api/v1/documents/{data['id']}/download", headers=student["headers"])
    assert download.status_code == 200
    assert download.data == PDF_BYTES


def _setup_isolated(app):
    """Tipo de documento e aluno num app criado com configuração própria."""
    with app.app_context():
        document_type = DocumentType(name="RG", user_type=DocumentUserTypeEnum.BOTH)
        user = User(login="aluno", name="Aluno", role=RoleEnum.STUDENT)
        user.set_password("Senha123")
        db.session.add_all([document_type, user])
        db.session.commit()
        return document_type.id, {"Authorization": f"Bearer {create_access_token(user)}"}


def test_file_larger_than_limit_is_not_written(app_factory):
    app = app_factory(MAX_FILE_SIZE=16)
    type_id, headers = _setup_isolated(app)

    response = app.test_client().post(
        "/api/v1/documents",
        data={"file": _pdf(), "documentTypeId": str(type_id)},
        headers=headers,
        content_type="multipart/form-data",
    )

    assert response.status_code == 413
    assert response.get_json()["error"]["code"] == "FILE_TOO_LARGE"
    assert _stored_files(app) == []


def test_request_body_over_max_content_length(app_factory):
    app = app_factory(MAX_CONTENT_LENGTH=256)
    type_id, headers = _setup_isolated(app)

    response = app.test_client().post(
        "/api/v1/documents",
        data={"file": (io.BytesIO(b"x" * 4096), "big.pdf", "application/pdf"), "documentTypeId": str(type_id)},
        headers=headers,
        content_type="multipart/form-data",
    )
    assert response.status_code == 413
    assert response.get_json()["error"]["code"] == "FILE_TOO_LARGE"
    assert _stored_files(app) == []


@pytest.mark.parametrize(
    "name, mimetype",
    [("virus.exe", "application/octet-stream"), ("foto.gif", "image/gif"), ("doc.pdf", "text/plain")],
)
def test_invalid_file_type(app, client, student, document_type_id, name, mimetype):
    response = _post(client, student, {"file": _pdf(name, mimetype=mimetype), "documentTypeId": str(document_type_id)})
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "INVALID_FILE"
    assert _stored_files(app) == []


def test_empty_file(client, student, document_type_id):
    response = _post(client, student, {"file": _pdf(content=b""), "documentTypeId": str(document_type_id)})
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "INVALID_FILE"


def test_missing_file(client, student, document_type_id):
    response = _post(client, student, {"documentTypeId": str(document_type_id)})
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "NO_FILE"


def test_too_many_files(client, student, document_type_id):
    response = _post(
        client,
        student,
        {"file": [_pdf("a.pdf"), _pdf("b.pdf")], "documentTypeId": str(document_type_id)},
    )
    assert response.status_code == 400
    assert response.get_json()["error"]["code"] == "LIMIT_FILE_COUNT"


def test_file_removed_when_request_fails_after_upload(app, client, student):
    missing_type = _post(client, student, {"file": _pdf()})
    assert missing_type.status_code == 400
    assert missing_type.get_json()["error"]["code"] == "VALIDATION_ERROR"

    unknown_type = _post(client, student, {"file": _pdf(), "documentTypeId": "999"})
    assert unknown_type.status_code == 404

    assert _stored_files(app) == []
    with app.app_context():
        assert Document.query.count() == 0


def test_teacher_cannot_send_student_document(app, client, make_user, document_type_id):
    teacher = make_user("teacher")
    response = _post(client, teacher, {"file": _pdf(), "documentTypeId": str(document_type_id)})
    assert response.status_code == 422
    assert response.get_json()["error"]["code"] == "DOCUMENT_TYPE_NOT_ALLOWED"
    assert _stored_files(app) == []


def test_review_flow(client, admin, student, document_type_id):
    document_id = _post(
        client, student, {"file": _pdf(), "documentTypeId": str(document_type_id)}
    ).get_json()["data"]["id"]

    status = client.get("/api/v1/documents/required-status", headers=student["headers"]).get_json()["data"]
    assert status == [
        {"documentTypeId": document_type_id, "name": "RG", "status": "pending", "documentId": document_id}
    ]

    no_reason = client.patch(f"/api/v1/documents/{document_id}/reject", json={}, headers=admin["headers"])
    assert no_reason.status_code == 400

    rejected = client.patch(
        f"/api/v1/documents/{document_id}/reject",
        json={"observations": "Documento ilegível"},
        headers=admin["headers"],
    )
    assert rejected.get_json()["data"]["status"] == "rejected"

    approved = client.patch(f"/api/v1/documents/{document_id}/approve", json={}, headers=admin["headers"])
    assert approved.status_code == 200
    assert approved.get_json()["data"]["status"] == "approved"
    assert approved.get_json()["data"]["reviewedBy"] == admin["id"]

    blocked = client.delete(f"/api/v1/documents/{document_id}", headers=student["headers"])
    assert blocked.status_code == 422


def test_student_only_sees_own_documents(client, make_user, student, document_type_id):
    document_id = _post(
        client, student, {"file": _pdf(), "documentTypeId": str(document_type_id)}
    ).get_json()["data"]["id"]
    other = make_user("student")

    assert client.get(f"/api/v1/documents/{document_id}", headers=other["headers"]).status_code == 403
    listed = client.get("/api/v1/documents", headers=other["headers"]).get_json()
    assert listed["data"] == []
