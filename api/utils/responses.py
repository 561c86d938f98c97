# api/utils/responses.py

import math

from flask import jsonify, request

from errors import validation_error
from api.utils.serializers import camelize

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def success(data=None, status: int = 200, message: str | None = None, pagination: dict | None = None):
    body = {"success": True, "data": camelize(data)}
    if message:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return jsonify(body), status


def error_body(code: str, message: str, details=None) -> dict:
    error = {"code": code, "message": message}
    if details:
        error["details"] = camelize(details)
    return {"success": False, "error": error}


def get_pagination_args() -> tuple[int, int]:
    """Lê ?page=&limit= da query string (limit máximo 100)."""
    details = []
    page = request.args.get("page", 1)
    limit = request.args.get("limit", DEFAULT_PAGE_SIZE)
    try:
        page = int(page)
        if page < 1:
            raise ValueError
    except (TypeError, ValueError):
        details.append({"field": "page", "message": "page deve ser um inteiro maior que zero"})
    try:
        limit = int(limit)
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValueError
    except (TypeError, ValueError):
        details.append({"field": "limit", "message": f"limit deve estar entre 1 e {MAX_PAGE_SIZE}"})
    if details:
        raise validation_error(details)
    return page, limit


def paginated(query, serializer, message: str | None = None):
    page, limit = get_pagination_args()
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
    }
    return success([serializer(item) for item in items], message=message, pagination=pagination)
