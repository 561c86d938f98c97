# errors.py
"""
Erros de domínio da aplicação.

AppError é o erro "operacional": condição esperada (validação, não encontrado,
conflito, permissão...) com código estável e status HTTP. Qualquer outra
exceção é tratada como bug pelo handler global (api/error_handlers.py).
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    is_operational = True

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "BAD_REQUEST",
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    def to_dict(self) -> dict:
        payload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


def validation_error(details: list[dict], message: str = "Dados inválidos") -> AppError:
    return AppError(message, 400, "VALIDATION_ERROR", details)


def not_found(resource: str) -> AppError:
    return AppError(f"{resource} não encontrado(a)", 404, "NOT_FOUND")


def unauthorized(message: str = "Não autorizado", code: str = "UNAUTHORIZED") -> AppError:
    return AppError(message, 401, code)


def forbidden(message: str = "Acesso negado") -> AppError:
    return AppError(message, 403, "FORBIDDEN")


def conflict(message: str) -> AppError:
    return AppError(message, 409, "CONFLICT")


def unprocessable(message: str, code: str = "UNPROCESSABLE_ENTITY") -> AppError:
    return AppError(message, 422, code)
