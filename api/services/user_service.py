# api/services/user_service.py

from __future__ import annotations

import logging
import secrets
import string
from typing import Mapping

from extensions import db
from errors import AppError, conflict, unauthorized, validation_error
from models import RoleEnum, Student, Teacher, User
from api.services.crud_service import CrudService

logger = logging.getLogger(__name__)


def generate_provisional_password(length: int = 10) -> str:
    """Senha aleatória com maiúscula, minúscula e dígito garantidos."""
    alphabet = string.ascii_letters + string.digits
    chars = [
        secrets.choice(string.ascii_uppercase),
        secrets.choice(string.ascii_lowercase),
        secrets.choice(string.digits),
    ]
    chars += [secrets.choice(alphabet) for _ in range(length - len(chars))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


class UserService(CrudService):
    """
    Logins do sistema. Alunos e professores existem sem login; o admin cria
    o login vinculado à pessoa com uma senha provisória, devolvida uma única vez.
    """

    model = User
    resource_name = "Usuário"
    search_fields = ("login", "name", "email", "cpf")

    @staticmethod
    def query_filtered(search: str | None = None, role: RoleEnum | None = None):
        query = UserService.query(search)
        if role is not None:
            query = query.filter(User.role == role)
        return query

    @staticmethod
    def _ensure_unique(field: str, value, exclude_id: int | None = None) -> None:
        if not value:
            return
        query = User.active().filter(getattr(User, field) == value)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        if query.first():
            label = {"login": "login", "cpf": "CPF"}.get(field, field)
            raise conflict(f"Já existe um usuário com este {label}")

    @staticmethod
    def _resolve_person(role: RoleEnum, data: Mapping):
        if role == RoleEnum.STUDENT:
            person = Student.get_active(data.get("student_id"))
            field, label, link = "studentId", "Aluno", User.student_id
        elif role == RoleEnum.TEACHER:
            person = Teacher.get_active(data.get("teacher_id"))
            field, label, link = "teacherId", "Professor", User.teacher_id
        else:
            return None

        if person is None:
            raise validation_error([{"field": field, "message": f"{label} não encontrado"}])
        if User.active().filter(link == person.id).first():
            raise conflict(f"{label} já possui login")
        return person

    @staticmethod
    def create_user(data: Mapping) -> tuple[User, str | None]:
        data = dict(data)
        role = data["role"]
        person = UserService._resolve_person(role, data)

        name = data.get("name") or (person.name if person else None)
        if not name:
            raise validation_error([{"field": "name", "message": "Campo obrigatório"}])
        cpf = data.get("cpf") or (person.cpf if person else None)
        email = data.get("email") or (person.email if person else None)

        UserService._ensure_unique("login", data["login"])
        UserService._ensure_unique("cpf", cpf)

        provisional = None
        password = data.get("password")
        if not password:
            provisional = password = generate_provisional_password()

        user = User(
            login=data["login"],
            role=role,
            name=name,
            email=email,
            cpf=cpf,
            rg=data.get("rg") or (person.rg if person else None),
            student_id=person.id if role == RoleEnum.STUDENT else None,
            teacher_id=person.id if role == RoleEnum.TEACHER else None,
            must_change_password=provisional is not None,
        )
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

        logger.info("Usuário %s (%s) criado", user.login, role.value)
        return user, provisional

    @classmethod
    def validate_update(cls, record, data: Mapping) -> None:
        if "login" in data:
            cls._ensure_unique("login", data["login"], exclude_id=record.id)
        if "cpf" in data:
            cls._ensure_unique("cpf", data["cpf"], exclude_id=record.id)

    @staticmethod
    def delete_user(user_id: int, acting_user: User) -> None:
        if user_id == acting_user.id:
            raise AppError("Você não pode remover o próprio usuário", 422, "CANNOT_DELETE_SELF")
        UserService.delete(user_id)

    @staticmethod
    def reset_password(user_id: int) -> tuple[User, str]:
        user = UserService.get(user_id)
        provisional = generate_provisional_password()
        user.set_password(provisional)
        user.must_change_password = True
        db.session.commit()
        logger.info("Senha do usuário %s redefinida", user.id)
        return user, provisional

    @staticmethod
    def change_password(user: User, current_password: str, new_password: str) -> User:
        if not user.check_password(current_password):
            raise unauthorized("Senha atual incorreta", "INVALID_PASSWORD")
        if current_password == new_password:
            raise AppError("A nova senha deve ser diferente da atual", 422, "SAME_PASSWORD")

        user.set_password(new_password)
        user.must_change_password = False
        db.session.commit()
        return user
