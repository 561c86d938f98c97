import os
from datetime import date

import pytest

from extensions import db
from models import Contract, Enrollment, EnrollmentStatusEnum
from services import ContractService, PDFService


def _accept(client, pending):
    return client.post(
        f"/api/v1/reenrollments/accept/{pending['enrollment_id']}",
        headers=pending["user"]["headers"],
    )


def _contract_files(app):
    folder = os.path.join(app.config["UPLOAD_DIR"], "contracts")
    if not os.path.isdir(folder):
        return []
    return os.listdir(folder)


def test_pdf_failure_rolls_back_contract_and_enrollment(app, client, pending_reenrollment, monkeypatch):
    def broken_pdf(*, content, output_dir, file_name, institution_name, title=None):
        os.makedirs(output_dir, exist_ok=True)
        with open(os.path.join(output_dir, file_name), "wb") as fh:
            fh.write(b"%PDF-1.4 parcial")
        raise OSError("disco cheio")

    monkeypatch.setattr(PDFService, "generate_contract_pdf", staticmethod(broken_pdf))

    response = _accept(client, pending_reenrollment)

    assert response.status_code == 500
    assert response.get_json()["error"]["code"] == "CONTRACT_GENERATION_FAILED"
    assert _contract_files(app) == []
    with app.app_context():
        assert Contract.query.count() == 0
        enrollment = db.session.get(Enrollment, pending_reenrollment["enrollment_id"])
        assert enrollment.status == EnrollmentStatusEnum.PENDING


def test_invalid_pdf_output_is_discarded(app, client, pending_reenrollment, monkeypatch):
    def not_a_pdf(*, content, output_dir, file_name, institution_name, title=None):
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, file_name)
        with open(path, "wb") as fh:
            fh.write(b"<html>sem pdf</html>")
        return {"file_path": path, "file_name": file_name, "file_size": os.path.getsize(path)}

    monkeypatch.setattr(PDFService, "generate_contract_pdf", staticmethod(not_a_pdf))

    response = _accept(client, pending_reenrollment)

    assert response.status_code == 500
    assert response.get_json()["error"]["code"] == "CONTRACT_GENERATION_FAILED"
    assert _contract_files(app) == []
    with app.app_context():
        assert Contract.query.count() == 0
        enrollment = db.session.get(Enrollment, pending_reenrollment["enrollment_id"])
        assert enrollment.status == EnrollmentStatusEnum.PENDING


def test_accept_contract_once(client, pending_reenrollment):
    contract = _accept(client, pending_reenrollment).get_json()["data"]["contract"]
    headers = pending_reenrollment["user"]["headers"]

    first = client.post(f"/api/v1/contracts/{contract['id']}/accept", headers=headers)
    assert first.status_code == 200
    assert first.get_json()["data"]["status"] == "accepted"
    assert first.get_json()["data"]["acceptedAt"] is not None

    second = client.post(f"/api/v1/contracts/{contract['id']}/accept", headers=headers)
    assert second.status_code == 422
    assert second.get_json()["error"]["code"] == "CONTRACT_ALREADY_ACCEPTED"


def test_list_contracts_by_status(client, admin, pending_reenrollment):
    contract = _accept(client, pending_reenrollment).get_json()["data"]["contract"]
    headers = pending_reenrollment["user"]["headers"]

    pending = client.get("/api/v1/contracts?status=pending", headers=headers).get_json()
    assert [c["id"] for c in pending["data"]] == [contract["id"]]
    assert pending["pagination"]["total"] == 1

    client.post(f"/api/v1/contracts/{contract['id']}/accept", headers=headers)
    accepted = client.get("/api/v1/contracts?status=accepted", headers=headers).get_json()
    assert [c["id"] for c in accepted["data"]] == [contract["id"]]

    invalid = client.get("/api/v1/contracts?status=signed", headers=headers)
    assert invalid.status_code == 400


def test_other_user_cannot_read_contract(client, make_user, admin, pending_reenrollment):
    contract = _accept(client, pending_reenrollment).get_json()["data"]["contract"]
    other = make_user("student")

    assert client.get(f"/api/v1/contracts/{contract['id']}", headers=other["headers"]).status_code == 403
    assert client.get(f"/api/v1/contracts/{contract['id']}/pdf", headers=other["headers"]).status_code == 403
    assert client.post(f"/api/v1/contracts/{contract['id']}/accept", headers=admin["headers"]).status_code == 403
    assert client.get(f"/api/v1/contracts/{contract['id']}", headers=admin["headers"]).status_code == 200


def test_admin_generates_contract(app, client, admin, pending_reenrollment):
    response = client.post(
        "/api/v1/contracts/generate",
        json={"userId": pending_reenrollment["user"]["id"], "semester": 2, "year": 2026},
        headers=admin["headers"],
    )
    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["hasPdf"] is True
    assert data["enrollmentId"] == pending_reenrollment["enrollment_id"]
    assert len(_contract_files(app)) == 1


def test_generate_without_template(app, client, admin, make_user):
    user = make_user("student")
    response = client.post("/api/v1/contracts/generate", json={"userId": user["id"]}, headers=admin["headers"])
    assert response.status_code == 422
    assert response.get_json()["error"]["code"] == "NO_ACTIVE_TEMPLATE"


def test_regenerate_missing_pdfs(app, client, pending_reenrollment):
    contract_id = _accept(client, pending_reenrollment).get_json()["data"]["contract"]["id"]

    with app.app_context():
        contract = db.session.get(Contract, contract_id)
        os.remove(os.path.join(app.config["UPLOAD_DIR"], contract.file_path))
        contract.file_path = None
        contract.file_name = None
        db.session.commit()

        report = ContractService.regenerate_missing_pdfs()

        assert report == {"total": 1, "regenerated": [contract_id], "failed": []}
        contract = db.session.get(Contract, contract_id)
        assert contract.has_pdf
        assert PDFService.is_valid_pdf(os.path.join(app.config["UPLOAD_DIR"], contract.file_path))


def test_regenerate_reports_failures_and_continues(app, client, pending_reenrollment, monkeypatch):
    contract_id = _accept(client, pending_reenrollment).get_json()["data"]["contract"]["id"]

    with app.app_context():
        contract = db.session.get(Contract, contract_id)
        contract.file_path = None
        db.session.commit()

    def broken_pdf(**kwargs):
        raise RuntimeError("reportlab indisponível")

    monkeypatch.setattr(PDFService, "generate_contract_pdf", staticmethod(broken_pdf))

    with app.app_context():
        report = ContractService.regenerate_missing_pdfs()
        assert report["total"] == 1
        assert report["regenerated"] == []
        assert report["failed"] == [{"contract_id": contract_id, "error": "reportlab indisponível"}]


def test_delete_contract_is_soft(app, client, admin, pending_reenrollment):
    contract_id = _accept(client, pending_reenrollment).get_json()["data"]["contract"]["id"]

    assert client.delete(f"/api/v1/contracts/{contract_id}", headers=admin["headers"]).status_code == 200
    assert client.get(f"/api/v1/contracts/{contract_id}", headers=admin["headers"]).status_code == 404
    with app.app_context():
        assert db.session.get(Contract, contract_id).deleted_at is not None


@pytest.mark.parametrize("month, expected", [(1, 1), (6, 1), (7, 2), (12, 2)])
def test_current_period(month, expected):
    assert ContractService.current_period(date(2026, month, 15)) == (expected, 2026)
