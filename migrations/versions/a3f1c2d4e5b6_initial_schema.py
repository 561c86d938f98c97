"""initial schema

Revision ID: a3f1c2d4e5b6
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a3f1c2d4e5b6'
down_revision = None
branch_labels = None
depends_on = None

role_enum = sa.Enum('ADMIN', 'TEACHER', 'STUDENT', name='roleenum')
duration_type_enum = sa.Enum('SEMESTERS', 'YEARS', 'MONTHS', name='durationtypeenum')
enrollment_status_enum = sa.Enum('PENDING', 'ACTIVE', 'CANCELLED', 'REENROLLED', name='enrollmentstatusenum')
evaluation_type_enum = sa.Enum('GRADE', 'CONCEPT', name='evaluationtypeenum')
concept_enum = sa.Enum('SATISFACTORY', 'UNSATISFACTORY', name='conceptenum')
document_user_type_enum = sa.Enum('STUDENT', 'TEACHER', 'BOTH', name='documentusertypeenum')
document_status_enum = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='documentstatusenum')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
    ]


def _address():
    return [
        sa.Column('street', sa.String(length=300), nullable=True),
        sa.Column('number', sa.String(length=20), nullable=True),
        sa.Column('complement', sa.String(length=200), nullable=True),
        sa.Column('district', sa.String(length=200), nullable=True),
        sa.Column('city', sa.String(length=200), nullable=True),
        sa.Column('state', sa.String(length=2), nullable=True),
        sa.Column('zip_code', sa.String(length=8), nullable=True),
    ]


def _deleted_at_index(table):
    op.create_index(f'ix_{table}_deleted_at', table, ['deleted_at'], unique=False)


def upgrade():
    op.create_table(
        'student',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('cpf', sa.String(length=11), nullable=True),
        sa.Column('rg', sa.String(length=20), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=200), nullable=True),
        sa.Column('mother_name', sa.String(length=200), nullable=True),
        sa.Column('father_name', sa.String(length=200), nullable=True),
        sa.Column('registration_number', sa.String(length=30), nullable=True),
        sa.Column('legacy_course_name', sa.String(length=100), nullable=True),
        *_address(),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_student_cpf', 'student', ['cpf'], unique=False)
    _deleted_at_index('student')

    op.create_table(
        'teacher',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('cpf', sa.String(length=11), nullable=True),
        sa.Column('rg', sa.String(length=20), nullable=True),
        sa.Column('birth_date', sa.Date(), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('email', sa.String(length=200), nullable=True),
        *_address(),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_teacher_cpf', 'teacher', ['cpf'], unique=False)
    _deleted_at_index('teacher')

    op.create_table(
        'course',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.Column('duration_type', duration_type_enum, nullable=False),
        sa.Column('course_type', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _deleted_at_index('course')

    op.create_table(
        'discipline',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('code', sa.String(length=50), nullable=True),
        sa.Column('workload_hours', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _deleted_at_index('discipline')

    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('login', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=True),
        sa.Column('role', role_enum, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('cpf', sa.String(length=11), nullable=True),
        sa.Column('rg', sa.String(length=20), nullable=True),
        sa.Column('must_change_password', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('student_id', sa.Integer(), nullable=True),
        sa.Column('teacher_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['student_id'], ['student.id']),
        sa.ForeignKeyConstraint(['teacher_id'], ['teacher.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_user_login', 'user', ['login'], unique=False)
    _deleted_at_index('user')

    op.create_table(
        'course_discipline',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('discipline_id', sa.Integer(), nullable=False),
        sa.Column('semester', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['course_id'], ['course.id']),
        sa.ForeignKeyConstraint(['discipline_id'], ['discipline.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('course_id', 'discipline_id', name='uq_course_discipline')
    )

    op.create_table(
        'school_class',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('semester', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['course_id'], ['course.id']),
        sa.PrimaryKeyConstraint('id')
    )
    _deleted_at_index('school_class')

    op.create_table(
        'class_teacher',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('class_id', sa.Integer(), nullable=False),
        sa.Column('teacher_id', sa.Integer(), nullable=False),
        sa.Column('discipline_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['class_id'], ['school_class.id']),
        sa.ForeignKeyConstraint(['teacher_id'], ['teacher.id']),
        sa.ForeignKeyConstraint(['discipline_id'], ['discipline.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('class_id', 'teacher_id', 'discipline_id', name='uq_class_teacher_discipline')
    )

    op.create_table(
        'class_student',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('class_id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['class_id'], ['school_class.id']),
        sa.ForeignKeyConstraint(['student_id'], ['student.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('class_id', 'student_id', name='uq_class_student')
    )

    op.create_table(
        'enrollment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('course_id', sa.Integer(), nullable=False),
        sa.Column('status', enrollment_status_enum, nullable=False),
        sa.Column('enrollment_date', sa.Date(), nullable=False),
        sa.Column('current_semester', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reenrollment_semester', sa.Integer(), nullable=True),
        sa.Column('reenrollment_year', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['student_id'], ['student.id']),
        sa.ForeignKeyConstraint(['course_id'], ['course.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_enrollment_student_id', 'enrollment', ['student_id'], unique=False)
    op.create_index('ix_enrollment_course_id', 'enrollment', ['course_id'], unique=False)
    op.create_index('ix_enrollment_status', 'enrollment', ['status'], unique=False)
    _deleted_at_index('enrollment')

    op.create_table(
        'evaluation',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('class_id', sa.Integer(), nullable=False),
        sa.Column('teacher_id', sa.Integer(), nullable=False),
        sa.Column('discipline_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('type', evaluation_type_enum, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['class_id'], ['school_class.id']),
        sa.ForeignKeyConstraint(['teacher_id'], ['teacher.id']),
        sa.ForeignKeyConstraint(['discipline_id'], ['discipline.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_evaluation_class_id', 'evaluation', ['class_id'], unique=False)
    _deleted_at_index('evaluation')

    op.create_table(
        'grade',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('evaluation_id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('grade', sa.Numeric(precision=4, scale=2), nullable=True),
        sa.Column('concept', concept_enum, nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['evaluation_id'], ['evaluation.id']),
        sa.ForeignKeyConstraint(['student_id'], ['student.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_grade_evaluation_id', 'grade', ['evaluation_id'], unique=False)
    op.create_index('ix_grade_student_id', 'grade', ['student_id'], unique=False)
    _deleted_at_index('grade')

    op.create_table(
        'document_type',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('user_type', document_user_type_enum, nullable=False),
        sa.Column('is_required', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _deleted_at_index('document_type')

    op.create_table(
        'document',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('document_type_id', sa.Integer(), nullable=False),
        sa.Column('file_path', sa.String(length=500), nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=False),
        sa.Column('file_size', sa.Integer(), nullable=False),
        sa.Column('mime_type', sa.String(length=100), nullable=False),
        sa.Column('status', document_status_enum, nullable=False),
        sa.Column('reviewed_by', sa.Integer(), nullable=True),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('observations', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.ForeignKeyConstraint(['document_type_id'], ['document_type.id']),
        sa.ForeignKeyConstraint(['reviewed_by'], ['user.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_document_user_id', 'document', ['user_id'], unique=False)
    _deleted_at_index('document')

    op.create_table(
        'contract_template',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _deleted_at_index('contract_template')

    op.create_table(
        'contract',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('enrollment_id', sa.Integer(), nullable=True),
        sa.Column('file_path', sa.String(length=255), nullable=True),
        sa.Column('file_name', sa.String(length=255), nullable=True),
        sa.Column('semester', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('accepted_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['user.id']),
        sa.ForeignKeyConstraint(['template_id'], ['contract_template.id']),
        sa.ForeignKeyConstraint(['enrollment_id'], ['enrollment.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_contract_user_id', 'contract', ['user_id'], unique=False)
    op.create_index('ix_contract_enrollment_id', 'contract', ['enrollment_id'], unique=False)
    _deleted_at_index('contract')

    op.create_table(
        'data_migration_run',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('finished_at', sa.DateTime(), nullable=True),
        sa.Column('stats', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_data_migration_run_name', 'data_migration_run', ['name'], unique=False)


def downgrade():
    op.drop_table('data_migration_run')
    op.drop_table('contract')
    op.drop_table('contract_template')
    op.drop_table('document')
    op.drop_table('document_type')
    op.drop_table('grade')
    op.drop_table('evaluation')
    op.drop_table('enrollment')
    op.drop_table('class_student')
    op.drop_table('class_teacher')
    op.drop_table('school_class')
    op.drop_table('course_discipline')
    op.drop_table('user')
    op.drop_table('discipline')
    op.drop_table('course')
    op.drop_table('teacher')
    op.drop_table('student')

    bind = op.get_bind()
    for enum_type in (
        document_status_enum,
        document_user_type_enum,
        concept_enum,
        evaluation_type_enum,
        enrollment_status_enum,
        duration_type_enum,
        role_enum,
    ):
        enum_type.drop(bind, checkfirst=True)
