# api/utils/auth.py
"""
Autenticação por Bearer token (JWT HS256) sobre o Flask-Login.

O request_loader decodifica o token a cada requisição; quando falha, o
motivo fica em g.auth_error e o unauthorized_handler responde 401 com o
código correspondente (TOKEN_NOT_PROVIDED, TOKEN_MALFORMED, TOKEN_EXPIRED,
TOKEN_INVALID).
"""

from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app, g, jsonify

from errors import unauthorized
from extensions import login_manager
from api.utils.responses import error_body

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def _encode(user, token_type: str, expires_in: timedelta) -> str:
    config = current_app.config
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.id),
        "login": user.login,
        "role": user.role.value,
        "type": token_type,
        "iss": config["JWT_ISSUER"],
        "aud": config["JWT_AUDIENCE"],
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(claims, config["JWT_SECRET"], algorithm=config["JWT_ALGORITHM"])


def create_access_token(user) -> str:
    minutes = current_app.config["JWT_ACCESS_EXPIRATION_MINUTES"]
    return _encode(user, ACCESS_TOKEN, timedelta(minutes=minutes))


def create_refresh_token(user) -> str:
    days = current_app.config["JWT_REFRESH_EXPIRATION_DAYS"]
    return _encode(user, REFRESH_TOKEN, timedelta(days=days))


def issue_tokens(user) -> dict:
    return {
        "access_token": create_access_token(user),
        "refresh_token": create_refresh_token(user),
        "token_type": "Bearer",
        "expires_in": current_app.config["JWT_ACCESS_EXPIRATION_MINUTES"] * 60,
    }


def decode_token(token: str, expected_type: str = ACCESS_TOKEN) -> dict:
    config = current_app.config
    try:
        claims = jwt.decode(
            token,
            config["JWT_SECRET"],
            algorithms=[config["JWT_ALGORITHM"]],
            issuer=config["JWT_ISSUER"],
            audience=config["JWT_AUDIENCE"],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise unauthorized("Token expirado", "TOKEN_EXPIRED")
    except jwt.InvalidSignatureError:
        raise unauthorized("Token inválido", "TOKEN_INVALID")
    except jwt.DecodeError:
        raise unauthorized("Token mal formatado", "TOKEN_MALFORMED")
    except jwt.InvalidTokenError:
        raise unauthorized("Token inválido", "TOKEN_INVALID")

    if claims.get("type") != expected_type:
        raise unauthorized("Tipo de token inválido", "TOKEN_INVALID")
    return claims


def extract_bearer_token(header_value: str | None) -> str:
    if not header_value:
        raise unauthorized("Token de autenticação não fornecido", "TOKEN_NOT_PROVIDED")
    parts = header_value.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise unauthorized("Formato esperado: Bearer <token>", "TOKEN_MALFORMED")
    return parts[1]


def init_auth(app) -> None:
    login_manager.init_app(app)

    @login_manager.request_loader
    def load_user_from_request(req):
        from models import User

        try:
            token = extract_bearer_token(req.headers.get("Authorization"))
            claims = decode_token(token)
        except Exception as exc:
            g.auth_error = (getattr(exc, "code", "TOKEN_INVALID"), getattr(exc, "message", "Token inválido"))
            return None

        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError):
            g.auth_error = ("TOKEN_INVALID", "Token inválido")
            return None

        user = User.get_active(user_id)
        if not user:
            g.auth_error = ("TOKEN_INVALID", "Usuário do token não encontrado")
            return None

        g.token_claims = claims
        return user

    @login_manager.unauthorized_handler
    def unauthorized_response():
        code, message = g.get("auth_error") or (
            "TOKEN_NOT_PROVIDED",
            "Token de autenticação não fornecido",
        )
        return jsonify(error_body(code, message)), 401
