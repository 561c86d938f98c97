# api/auth.py

from flask_login import current_user, login_required

from . import api_bp
from api.services import AuthService, UserService
from api.utils.rate_limit import rate_limited
from api.utils.responses import success
from api.utils.serializers import serialize_user
from api.utils.validation import validate_json


def _login_rules(v):
    v.string("login", required=True, max_length=100)
    v.string("password", required=True)


def _refresh_rules(v):
    v.string("refresh_token", required=True)


def _change_password_rules(v):
    v.string("current_password", required=True)
    v.password("new_password", required=True)


def _token_payload(result: dict) -> dict:
    return {
        "user": serialize_user(result["user"]),
        "access_token": result["access_token"],
        "refresh_token": result["refresh_token"],
        "token_type": result["token_type"],
        "expires_in": result["expires_in"],
    }


@api_bp.post("/auth/login")
@rate_limited("login")
@validate_json(_login_rules)
def login(payload):
    """
    Body JSON:
    {
        "login": "admin",
        "password": "Senha123"
    }
    """
    result = AuthService.login(payload["login"], payload["password"])
    return success(_token_payload(result), message="Login realizado com sucesso")


@api_bp.post("/auth/refresh")
@validate_json(_refresh_rules)
def refresh_token(payload):
    result = AuthService.refresh(payload["refresh_token"])
    return success(_token_payload(result))


@api_bp.get("/auth/me")
@login_required
def me():
    return success(serialize_user(current_user))


@api_bp.post("/auth/change-password")
@login_required
@rate_limited("password_change")
@validate_json(_change_password_rules)
def change_password(payload):
    UserService.change_password(current_user, payload["current_password"], payload["new_password"])
    return success(None, message="Senha alterada com sucesso")
