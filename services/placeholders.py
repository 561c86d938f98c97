# services/placeholders.py
"""
Substituição de placeholders {{chave}} dos templates de contrato.

build_placeholder_data() monta SEMPRE todas as chaves documentadas em
PLACEHOLDER_KEYS, com valores de fallback quando o dado opcional não existe,
para que nenhum token documentado sobreviva à renderização.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Mapping

from services.formatters import (
    format_cpf,
    format_date_br,
    format_datetime_br,
    format_phone,
)

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")

NOT_AVAILABLE = "N/A"
COURSE_FALLBACK = "Curso não especificado"
DURATION_FALLBACK = "conforme currículo"

PLACEHOLDER_KEYS = (
    "studentId",
    "studentName",
    "cpf",
    "studentCPF",
    "rg",
    "studentRG",
    "birthDate",
    "studentBirthDate",
    "address",
    "studentAddress",
    "phone",
    "studentPhone",
    "email",
    "studentEmail",
    "courseId",
    "courseName",
    "duration",
    "semester",
    "year",
    "currentSemester",
    "enrollmentId",
    "enrollmentNumber",
    "enrollmentDate",
    "startDate",
    "institutionName",
    "currentDate",
    "currentDateTime",
    "date",
    "contractDate",
)


def find_placeholders(content: str | None) -> list[str]:
    """Lista (sem repetição, na ordem em que aparecem) as chaves do template."""
    seen: list[str] = []
    for key in PLACEHOLDER_PATTERN.findall(content or ""):
        if key not in seen:
            seen.append(key)
    return seen


def render_template_text(content: str | None, data: Mapping[str, object]) -> str:
    """
    Substitui cada {{chave}} presente em data. Chaves ausentes ficam intactas
    (unresolved_placeholders() permite detectá-las).
    """

    def _replace(match: re.Match) -> str:
        key = match.group(1)
        if key not in data:
            return match.group(0)
        value = data[key]
        return "" if value is None else str(value)

    return PLACEHOLDER_PATTERN.sub(_replace, content or "")


def unresolved_placeholders(text: str | None) -> list[str]:
    return find_placeholders(text)


def _or_na(value) -> str:
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, str) and not value.strip():
        return NOT_AVAILABLE
    return value


def build_placeholder_data(
    *,
    user,
    semester: int,
    year: int,
    student=None,
    enrollment=None,
    course=None,
    contract_created_at: datetime | None = None,
    institution_name: str = "Secretaria Online",
    now: datetime | None = None,
) -> dict[str, object]:
    """
    Monta o mapa de substituição a partir do usuário (login), da ficha do
    aluno, da matrícula e do curso. Dados do aluno têm precedência sobre os
    do usuário; tudo que faltar vira "N/A".
    """
    now = now or datetime.now()
    today = format_date_br(now)

    person = student or getattr(user, "student", None)

    name = (person.name if person else None) or user.name
    raw_cpf = (person.cpf if person else None) or user.cpf
    raw_rg = (person.rg if person else None) or user.rg
    email = (person.email if person else None) or user.email
    phone = person.phone if person else None
    birth_date = person.birth_date if person else None
    address = person.full_address() if person else None

    cpf = _or_na(format_cpf(raw_cpf) if raw_cpf else None)
    rg = _or_na(raw_rg)
    birth = _or_na(format_date_br(birth_date) if birth_date else None)
    address = _or_na(address)
    phone = _or_na(format_phone(phone) if phone else None)
    email = _or_na(email)

    data: dict[str, object] = {
        "studentId": person.id if person else user.id,
        "studentName": name,
        "cpf": cpf,
        "studentCPF": cpf,
        "rg": rg,
        "studentRG": rg,
        "birthDate": birth,
        "studentBirthDate": birth,
        "address": address,
        "studentAddress": address,
        "phone": phone,
        "studentPhone": phone,
        "email": email,
        "studentEmail": email,
        "semester": semester,
        "year": year,
        "institutionName": institution_name,
        "currentDate": today,
        "currentDateTime": format_datetime_br(now),
        "date": today,
        "contractDate": format_date_br(contract_created_at) if contract_created_at else today,
    }

    if course is not None:
        data["courseId"] = course.id
        data["courseName"] = course.name
        data["duration"] = course.duration_label() or DURATION_FALLBACK
    else:
        data["courseId"] = NOT_AVAILABLE
        data["courseName"] = COURSE_FALLBACK
        data["duration"] = DURATION_FALLBACK

    if enrollment is not None:
        data["enrollmentId"] = enrollment.id
        data["enrollmentNumber"] = enrollment.id
        enrollment_date = _or_na(
            format_date_br(enrollment.enrollment_date) if enrollment.enrollment_date else None
        )
        data["enrollmentDate"] = enrollment_date
        data["startDate"] = enrollment_date
        data["currentSemester"] = enrollment.current_semester or semester
    else:
        data["enrollmentId"] = NOT_AVAILABLE
        data["enrollmentNumber"] = NOT_AVAILABLE
        data["enrollmentDate"] = NOT_AVAILABLE
        data["startDate"] = today
        data["currentSemester"] = semester

    return data
