from datetime import datetime, timedelta, timezone

import jwt

from extensions import db
from models import User


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_login_returns_tokens_and_user(client, make_user):
    user = make_user("admin", login="secretaria", password="Senha123")

    response = client.post("/api/v1/auth/login", json={"login": "secretaria", "password": "Senha123"})

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["tokenType"] == "Bearer"
    assert data["user"]["id"] == user["id"]
    assert data["user"]["role"] == "admin"

    me = client.get("/api/v1/auth/me", headers=_bearer(data["accessToken"]))
    assert me.status_code == 200
    assert me.get_json()["data"]["login"] == "secretaria"


def test_login_with_wrong_password(client, make_user):
    make_user("admin", login="secretaria")
    response = client.post("/api/v1/auth/login", json={"login": "secretaria", "password": "Outra123"})
    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_missing_token(client):
    response = client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.get_json() == {
        "success": False,
        "error": {"code": "TOKEN_NOT_PROVIDED", "message": "Token de autenticação não fornecido"},
    }


def test_malformed_header_and_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Token abc"})
    assert response.get_json()["error"]["code"] == "TOKEN_MALFORMED"

    response = client.get("/api/v1/auth/me", headers=_bearer("not-a-jwt"))
    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "TOKEN_MALFORMED"


def _token(app, user_id, **overrides):
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "type": "access",
        "iss": app.config["JWT_ISSUER"],
        "aud": app.config["JWT_AUDIENCE"],
        "iat": now,
        "exp": now + timedelta(minutes=5),
    }
    secret = overrides.pop("secret", app.config["JWT_SECRET"])
    claims.update(overrides)
    return jwt.encode(claims, secret, algorithm="HS256")


def test_expired_token(app, client, admin):
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    token = _token(app, admin["id"], iat=past - timedelta(minutes=15), exp=past)

    response = client.get("/api/v1/auth/me", headers=_bearer(token))
    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "TOKEN_EXPIRED"


def test_invalid_signature_and_audience(app, client, admin):
    forged = _token(app, admin["id"], secret="another-secret-that-is-long-enough-1234")
    assert client.get("/api/v1/auth/me", headers=_bearer(forged)).get_json()["error"]["code"] == "TOKEN_INVALID"

    wrong_aud = _token(app, admin["id"], aud="someone-else")
    assert client.get("/api/v1/auth/me", headers=_bearer(wrong_aud)).get_json()["error"]["code"] == "TOKEN_INVALID"


def test_refresh_token_cannot_be_used_as_access_token(client, make_user):
    make_user("admin", login="secretaria", password="Senha123")
    tokens = client.post(
        "/api/v1/auth/login", json={"login": "secretaria", "password": "Senha123"}
    ).get_json()["data"]

    response = client.get("/api/v1/auth/me", headers=_bearer(tokens["refreshToken"]))
    assert response.get_json()["error"]["code"] == "TOKEN_INVALID"

    refreshed = client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert refreshed.status_code == 200
    new_access = refreshed.get_json()["data"]["accessToken"]
    assert client.get("/api/v1/auth/me", headers=_bearer(new_access)).status_code == 200


def test_token_of_deleted_user_is_rejected(app, client, admin):
    with app.app_context():
        db.session.get(User, admin["id"]).soft_delete()
        db.session.commit()

    response = client.get("/api/v1/auth/me", headers=admin["headers"])
    assert response.status_code == 401
    assert response.get_json()["error"]["code"] == "TOKEN_INVALID"


def test_change_password(app, client, make_user):
    user = make_user("student", password="Senha123")

    wrong = client.post(
        "/api/v1/auth/change-password",
        json={"currentPassword": "Errada123", "newPassword": "NovaSenha1"},
        headers=user["headers"],
    )
    assert wrong.status_code == 401
    assert wrong.get_json()["error"]["code"] == "INVALID_PASSWORD"

    weak = client.post(
        "/api/v1/auth/change-password",
        json={"currentPassword": "Senha123", "newPassword": "fraca"},
        headers=user["headers"],
    )
    assert weak.status_code == 400

    ok = client.post(
        "/api/v1/auth/change-password",
        json={"currentPassword": "Senha123", "newPassword": "NovaSenha1"},
        headers=user["headers"],
    )
    assert ok.status_code == 200
    with app.app_context():
        assert db.session.get(User, user["id"]).check_password("NovaSenha1")
