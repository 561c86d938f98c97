# api/utils/serializers.py
"""
Conversão camelCase <-> snake_case e serialização dos models.

Os serializers devolvem dicts em snake_case; a conversão para camelCase
acontece uma única vez, em responses.success().
"""

import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def camelize(value):
    if isinstance(value, dict):
        return {to_camel(k) if isinstance(k, str) else k: camelize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [camelize(v) for v in value]
    return _plain(value)


def snake_keys(payload: dict) -> dict:
    return {to_snake(k) if isinstance(k, str) else k: v for k, v in payload.items()}


def _plain(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _base(obj) -> dict:
    return {
        "id": obj.id,
        "created_at": obj.created_at,
        "updated_at": obj.updated_at,
    }


def _address(obj) -> dict:
    return {
        "street": obj.street,
        "number": obj.number,
        "complement": obj.complement,
        "district": obj.district,
        "city": obj.city,
        "state": obj.state,
        "zip_code": obj.zip_code,
    }


def serialize_user(user) -> dict:
    return {
        **_base(user),
        "login": user.login,
        "name": user.name,
        "email": user.email,
        "cpf": user.cpf,
        "rg": user.rg,
        "role": user.role,
        "student_id": user.student_id,
        "teacher_id": user.teacher_id,
        "must_change_password": user.must_change_password,
    }


def serialize_student(student) -> dict:
    return {
        **_base(student),
        "name": student.name,
        "cpf": student.cpf,
        "rg": student.rg,
        "birth_date": student.birth_date,
        "phone": student.phone,
        "email": student.email,
        "mother_name": student.mother_name,
        "father_name": student.father_name,
        "registration_number": student.registration_number,
        **_address(student),
    }


def serialize_teacher(teacher) -> dict:
    return {
        **_base(teacher),
        "name": teacher.name,
        "cpf": teacher.cpf,
        "rg": teacher.rg,
        "birth_date": teacher.birth_date,
        "phone": teacher.phone,
        "email": teacher.email,
        **_address(teacher),
    }


def serialize_course(course, with_disciplines: bool = False) -> dict:
    data = {
        **_base(course),
        "name": course.name,
        "description": course.description,
        "duration": course.duration,
        "duration_type": course.duration_type,
        "course_type": course.course_type,
    }
    if with_disciplines:
        data["disciplines"] = [
            {
                "discipline_id": link.discipline_id,
                "name": link.discipline.name if link.discipline else None,
                "semester": link.semester,
            }
            for link in course.disciplines
        ]
    return data


def serialize_discipline(discipline) -> dict:
    return {
        **_base(discipline),
        "name": discipline.name,
        "code": discipline.code,
        "workload_hours": discipline.workload_hours,
    }


def serialize_class(school_class, detailed: bool = False) -> dict:
    data = {
        **_base(school_class),
        "course_id": school_class.course_id,
        "semester": school_class.semester,
        "year": school_class.year,
    }
    if detailed:
        data["teachers"] = [
            {"teacher_id": link.teacher_id, "discipline_id": link.discipline_id}
            for link in school_class.teachers
        ]
        data["student_ids"] = [link.student_id for link in school_class.students]
    return data


def serialize_enrollment(enrollment) -> dict:
    return {
        **_base(enrollment),
        "student_id": enrollment.student_id,
        "course_id": enrollment.course_id,
        "course_name": enrollment.course.name if enrollment.course else None,
        "status": enrollment.status,
        "enrollment_date": enrollment.enrollment_date,
        "current_semester": enrollment.current_semester,
        "reenrollment_semester": enrollment.reenrollment_semester,
        "reenrollment_year": enrollment.reenrollment_year,
    }


def serialize_evaluation(evaluation) -> dict:
    return {
        **_base(evaluation),
        "class_id": evaluation.class_id,
        "teacher_id": evaluation.teacher_id,
        "discipline_id": evaluation.discipline_id,
        "name": evaluation.name,
        "date": evaluation.date,
        "type": evaluation.type,
    }


def serialize_grade(grade) -> dict:
    return {
        **_base(grade),
        "evaluation_id": grade.evaluation_id,
        "student_id": grade.student_id,
        "grade": grade.grade,
        "concept": grade.concept,
    }


def serialize_document_type(document_type) -> dict:
    return {
        **_base(document_type),
        "name": document_type.name,
        "description": document_type.description,
        "user_type": document_type.user_type,
        "is_required": document_type.is_required,
    }


def serialize_document(document) -> dict:
    return {
        **_base(document),
        "user_id": document.user_id,
        "document_type_id": document.document_type_id,
        "document_type_name": document.document_type.name if document.document_type else None,
        "file_name": document.file_name,
        "file_size": document.file_size,
        "mime_type": document.mime_type,
        "status": document.status,
        "reviewed_by": document.reviewed_by,
        "reviewed_at": document.reviewed_at,
        "observations": document.observations,
    }


def serialize_contract_template(template) -> dict:
    return {
        **_base(template),
        "name": template.name,
        "content": template.content,
        "is_active": template.is_active,
    }


def serialize_contract(contract) -> dict:
    return {
        **_base(contract),
        "user_id": contract.user_id,
        "template_id": contract.template_id,
        "enrollment_id": contract.enrollment_id,
        "file_name": contract.file_name,
        "has_pdf": contract.has_pdf,
        "semester": contract.semester,
        "year": contract.year,
        "status": contract.status,
        "accepted_at": contract.accepted_at,
    }
