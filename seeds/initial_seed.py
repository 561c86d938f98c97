# seeds/initial_seed.py
"""
Seed inicial da Secretaria Online.

CRIA (ou reutiliza se já existirem):
    - Usuário admin
    - Tipos de documento obrigatórios de alunos e professores
    - Template de contrato padrão
    - (demo) Curso, professor e aluno com login

Modo de uso:
    flask seed --admin-password "Senha123"
    flask seed --demo
"""

from datetime import date

from extensions import db
from models import (
    ContractTemplate,
    Course,
    DocumentType,
    DocumentUserTypeEnum,
    DurationTypeEnum,
    Enrollment,
    EnrollmentStatusEnum,
    RoleEnum,
    Student,
    Teacher,
    User,
)

DEFAULT_ADMIN_LOGIN = "admin"

DOCUMENT_TYPES = [
    ("RG", "Documento de identidade", DocumentUserTypeEnum.BOTH),
    ("CPF", "Cadastro de pessoa física", DocumentUserTypeEnum.BOTH),
    ("Comprovante de residência", "Emitido nos últimos 90 dias", DocumentUserTypeEnum.BOTH),
    ("Certificado de conclusão do ensino médio", None, DocumentUserTypeEnum.STUDENT),
    ("Diploma de graduação", None, DocumentUserTypeEnum.TEACHER),
]

DEFAULT_CONTRACT_TEMPLATE = """
<h2>Contrato de Prestação de Serviços Educacionais</h2>
<p>Pelo presente instrumento, <b>{{institutionName}}</b> e o(a) aluno(a)
<b>{{studentName}}</b>, CPF {{studentCPF}}, RG {{studentRG}}, nascido(a) em
{{studentBirthDate}}, residente em {{studentAddress}}, telefone {{studentPhone}},
e-mail {{studentEmail}}, celebram o presente contrato.</p>
<h3>Cláusula 1 - Do curso</h3>
<p>O(A) aluno(a) está matriculado(a) no curso <b>{{courseName}}</b>, com duração de
{{duration}}, matrícula nº {{enrollmentNumber}} de {{enrollmentDate}}.</p>
<h3>Cláusula 2 - Do período</h3>
<p>Este contrato refere-se ao {{semester}}º semestre de {{year}}, cursando o
{{currentSemester}}º semestre do curso.</p>
<p>Documento emitido em {{currentDate}}.</p>
""".strip()


def _get_or_create(model, defaults=None, **kwargs):
    instance = model.active().filter_by(**kwargs).first()
    if instance:
        return instance, False

    params = {**kwargs}
    if defaults:
        params.update(defaults)

    instance = model(**params)
    db.session.add(instance)
    return instance, True


def _ensure_user(login, name, role, password, **extra):
    user, created = _get_or_create(User, login=login, defaults={"name": name, "role": role, **extra})
    if created or not user.password_hash:
        user.set_password(password)
    return user, created


def _seed_demo(stats: dict) -> None:
    course, created = _get_or_create(
        Course,
        name="Teologia",
        defaults={
            "description": "Bacharelado em Teologia",
            "duration": 8,
            "duration_type": DurationTypeEnum.SEMESTERS,
            "course_type": "Bacharelado",
        },
    )
    stats["courses"] += int(created)

    teacher, _ = _get_or_create(Teacher, cpf="39053344705", defaults={"name": "Professor Demo", "email": "professor@demo.com"})
    student, _ = _get_or_create(Student, cpf="52998224725", defaults={"name": "Aluno Demo", "email": "aluno@demo.com"})
    db.session.flush()

    _, created = _ensure_user("professor", teacher.name, RoleEnum.TEACHER, "Professor123", teacher_id=teacher.id)
    stats["users"] += int(created)
    _, created = _ensure_user("aluno", student.name, RoleEnum.STUDENT, "Aluno1234", student_id=student.id)
    stats["users"] += int(created)

    _, created = _get_or_create(
        Enrollment,
        student_id=student.id,
        course_id=course.id,
        defaults={"status": EnrollmentStatusEnum.ACTIVE, "enrollment_date": date.today(), "current_semester": 1},
    )
    stats["enrollments"] += int(created)


def run_seed(admin_password: str = "Admin123", demo: bool = False) -> dict:
    stats = {"users": 0, "document_types": 0, "contract_templates": 0, "courses": 0, "enrollments": 0}

    _, created = _ensure_user(DEFAULT_ADMIN_LOGIN, "Administrador", RoleEnum.ADMIN, admin_password)
    stats["users"] += int(created)

    for name, description, user_type in DOCUMENT_TYPES:
        _, created = _get_or_create(
            DocumentType,
            name=name,
            defaults={"description": description, "user_type": user_type, "is_required": True},
        )
        stats["document_types"] += int(created)

    if not ContractTemplate.first_available():
        db.session.add(ContractTemplate(name="Contrato padrão", content=DEFAULT_CONTRACT_TEMPLATE, is_active=True))
        stats["contract_templates"] += 1

    if demo:
        _seed_demo(stats)

    db.session.commit()
    return stats
