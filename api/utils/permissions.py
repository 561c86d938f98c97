# api/utils/permissions.py

from functools import wraps

from flask_login import current_user

from errors import forbidden, unauthorized
from extensions import db
from models import ClassTeacher, RoleEnum


def has_role(*role_names: str) -> bool:
    """
    True se o usuário autenticado tem algum dos papéis indicados
    ("admin", "teacher", "student").
    """
    if not current_user.is_authenticated or not current_user.role:
        return False
    return current_user.role.value in role_names


def require_roles(*role_names: str):
    """
    Decorador para limitar uma view a certos papéis. Vai depois de
    @login_required:
        @require_roles("admin")
        @require_roles("admin", "teacher")
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                raise unauthorized("Token de autenticação não fornecido", "TOKEN_NOT_PROVIDED")
            if not has_role(*role_names):
                raise forbidden("Você não tem permissão para acessar este recurso")
            return f(*args, **kwargs)
        return wrapper
    return decorator


def is_admin() -> bool:
    return has_role(RoleEnum.ADMIN.value)


def is_teacher() -> bool:
    return has_role(RoleEnum.TEACHER.value)


def is_student() -> bool:
    return has_role(RoleEnum.STUDENT.value)


def teacher_teaches_class(teacher_id: int | None, class_id: int) -> bool:
    if teacher_id is None:
        return False
    query = ClassTeacher.query.filter_by(teacher_id=teacher_id, class_id=class_id)
    return db.session.query(query.exists()).scalar()


def ensure_can_manage_class(user, class_id: int) -> None:
    """Admin gerencia qualquer turma; professor apenas as turmas em que leciona."""
    if user.is_admin:
        return
    if user.role == RoleEnum.TEACHER and teacher_teaches_class(user.teacher_id, class_id):
        return
    raise forbidden("Você não leciona nesta turma")
