# api/services/person_service.py

from __future__ import annotations

from typing import Mapping

from errors import conflict
from models import Student, Teacher
from api.services.crud_service import CrudService


class _PersonService(CrudService):
    search_fields = ("name", "cpf", "email")
    default_order = "name"

    @classmethod
    def _ensure_unique_cpf(cls, cpf: str | None, exclude_id: int | None = None) -> None:
        if not cpf:
            return
        query = cls.model.active().filter(cls.model.cpf == cpf)
        if exclude_id is not None:
            query = query.filter(cls.model.id != exclude_id)
        if query.first():
            raise conflict(f"Já existe um(a) {cls.resource_name.lower()} com este CPF")

    @classmethod
    def validate_create(cls, data: Mapping) -> None:
        cls._ensure_unique_cpf(data.get("cpf"))

    @classmethod
    def validate_update(cls, record, data: Mapping) -> None:
        if "cpf" in data:
            cls._ensure_unique_cpf(data["cpf"], exclude_id=record.id)


class StudentService(_PersonService):
    model = Student
    resource_name = "Aluno"
    search_fields = ("name", "cpf", "email", "registration_number")


class TeacherService(_PersonService):
    model = Teacher
    resource_name = "Professor"
