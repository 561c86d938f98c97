# api/users.py

from flask import request
from flask_login import current_user, login_required

from . import api_bp
from errors import validation_error
from models import RoleEnum
from api.services import UserService
from api.utils.permissions import require_roles
from api.utils.responses import paginated, success
from api.utils.serializers import serialize_user
from api.utils.validation import validate_json


def _create_rules(v):
    v.string("login", required=True, max_length=100)
    v.choice("role", RoleEnum, required=True)
    v.string("name", max_length=255)
    v.email("email")
    v.cpf("cpf")
    v.string("rg", max_length=20)
    v.integer("student_id", min_value=1)
    v.integer("teacher_id", min_value=1)
    v.password("password")


def _update_rules(v):
    v.string("login", required=True, max_length=100)
    v.string("name", required=True, max_length=255)
    v.email("email")
    v.cpf("cpf")
    v.string("rg", max_length=20)


@api_bp.get("/users")
@login_required
@require_roles("admin")
def list_users():
    role = request.args.get("role")
    if role:
        try:
            role = RoleEnum(role)
        except ValueError:
            raise validation_error([{"field": "role", "message": "Papel inválido"}])
    query = UserService.query_filtered(request.args.get("search"), role or None)
    return paginated(query, serialize_user)


@api_bp.get("/users/<int:user_id>")
@login_required
@require_roles("admin")
def get_user(user_id):
    return success(serialize_user(UserService.get(user_id)))


@api_bp.post("/users")
@login_required
@require_roles("admin")
@validate_json(_create_rules)
def create_user(payload):
    """
    Cria o login de um aluno/professor (ou de outro admin).
    Sem "password", gera uma senha provisória que só aparece nesta resposta.
    """
    user, provisional = UserService.create_user(payload)
    data = serialize_user(user)
    if provisional:
        data["provisional_password"] = provisional
    return success(data, status=201, message="Usuário criado com sucesso")


@api_bp.put("/users/<int:user_id>")
@login_required
@require_roles("admin")
@validate_json(_update_rules, partial=True)
def update_user(user_id, payload):
    user = UserService.update(user_id, payload)
    return success(serialize_user(user), message="Usuário atualizado com sucesso")


@api_bp.post("/users/<int:user_id>/reset-password")
@login_required
@require_roles("admin")
def reset_user_password(user_id):
    user, provisional = UserService.reset_password(user_id)
    data = serialize_user(user)
    data["provisional_password"] = provisional
    return success(data, message="Senha redefinida")


@api_bp.delete("/users/<int:user_id>")
@login_required
@require_roles("admin")
def delete_user(user_id):
    UserService.delete_user(user_id, current_user)
    return success(None, message="Usuário removido com sucesso")
