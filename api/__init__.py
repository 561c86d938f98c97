from flask import Blueprint

api_bp = Blueprint("api", __name__, url_prefix="/api/v1")

from . import (
    health,
    auth,
    users,
    students,
    teachers,
    courses,
    classes,
    enrollments,
    evaluations,
    documents,
    contracts,
    reenrollments,
    admin,
)
