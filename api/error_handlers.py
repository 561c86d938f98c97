# api/error_handlers.py

import traceback

from flask import current_app, jsonify, request
from flask_login import current_user
from werkzeug.exceptions import HTTPException

from errors import AppError
from api.utils.responses import error_body

HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "FILE_TOO_LARGE",
    415: "UNSUPPORTED_MEDIA_TYPE",
    422: "UNPROCESSABLE_ENTITY",
    429: "RATE_LIMIT_EXCEEDED",
}

HTTP_ERROR_MESSAGES = {
    404: "Recurso não encontrado",
    405: "Método não permitido",
    413: "Arquivo excede o tamanho máximo permitido",
}


def _request_context() -> str:
    user_id = None
    try:
        if current_user.is_authenticated:
            user_id = current_user.id
    except Exception:
        user_id = None
    return f"{request.method} {request.path} ip={request.remote_addr} user={user_id}"


def register_error_handlers(app) -> None:
    @app.errorhandler(AppError)
    def handle_app_error(error: AppError):
        current_app.logger.warning("%s %s -> %s", error.code, error.message, _request_context())
        response = jsonify(error_body(error.code, error.message, error.details))
        response.status_code = error.status_code
        for key, value in (getattr(error, "headers", None) or {}).items():
            response.headers[key] = value
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        status = error.code or 500
        code = HTTP_ERROR_CODES.get(status, "HTTP_ERROR")
        message = HTTP_ERROR_MESSAGES.get(status) or error.description or error.name
        current_app.logger.warning("HTTP %s %s -> %s", status, code, _request_context())
        return jsonify(error_body(code, message)), status

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        current_app.logger.exception("Erro não tratado em %s", _request_context())
        body = error_body("INTERNAL_ERROR", "Erro interno do servidor")
        if current_app.config.get("APP_ENV") == "development":
            body["error"]["details"] = {
                "message": str(error),
                "stack": traceback.format_exception(type(error), error, error.__traceback__),
            }
        return jsonify(body), 500
