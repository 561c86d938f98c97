# api/services/auth_service.py

from __future__ import annotations

import logging

from errors import unauthorized
from models import User
from api.utils.auth import REFRESH_TOKEN, decode_token, issue_tokens

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def login(login: str, password: str) -> dict:
        user = User.active().filter(User.login == login).first()
        if not user or not user.check_password(password):
            logger.warning("Falha de login para '%s'", login)
            raise unauthorized("Login ou senha inválidos", "INVALID_CREDENTIALS")

        return {"user": user, **issue_tokens(user)}

    @staticmethod
    def refresh(refresh_token: str) -> dict:
        claims = decode_token(refresh_token, expected_type=REFRESH_TOKEN)
        user = User.get_active(int(claims["sub"]))
        if not user:
            raise unauthorized("Usuário do token não encontrado", "TOKEN_INVALID")
        return {"user": user, **issue_tokens(user)}
