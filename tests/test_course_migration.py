import json

from extensions import db
from models import DataMigrationRun, Enrollment, EnrollmentStatusEnum, Student
from services.course_migration_service import CourseMigrationService


def _students(app, rows):
    with app.app_context():
        students = [Student(name=name, legacy_course_name=course) for name, course in rows]
        db.session.add_all(students)
        db.session.commit()
        return [s.id for s in students]


def test_migration_matches_normalized_names_only(app, make_course, make_enrollment):
    teologia = make_course("Teologia")
    adm = make_course("Administração")
    ids = _students(
        app,
        [
            ("Ana", "TEOLOGIA"),
            ("Bruno", "administracao"),
            ("Carla", "Adm"),
            ("Davi", None),
            ("Eva", "  Teologia  "),
        ],
    )
    make_enrollment(ids[4], teologia)

    with app.app_context():
        stats = CourseMigrationService.migrate_student_courses()

        assert stats["total_students"] == 5
        assert stats["students_with_course"] == 4
        assert stats["courses_found"] == 3
        assert stats["courses_not_found"] == 1
        assert stats["enrollments_created"] == 2
        assert stats["enrollments_skipped"] == 1
        assert stats["errors"] == 0
        assert stats["students_without_course"] == [
            {"student_id": ids[2], "student_name": "Carla", "course_name": "Adm"}
        ]

        created = {
            e.student_id: e for e in Enrollment.query.filter(Enrollment.student_id.in_(ids[:2])).all()
        }
        assert created[ids[0]].course_id == teologia
        assert created[ids[1]].course_id == adm
        assert created[ids[0]].status == EnrollmentStatusEnum.ACTIVE


def test_dry_run_writes_nothing(app, make_course):
    make_course("Teologia")
    _students(app, [("Ana", "Teologia")])

    with app.app_context():
        stats = CourseMigrationService.migrate_student_courses(dry_run=True)
        assert stats["enrollments_created"] == 1
        assert Enrollment.query.count() == 0


def test_duplicate_course_names_use_first_course(app, make_course):
    first = make_course("Teologia")
    make_course("TEOLOGIA")

    with app.app_context():
        index = CourseMigrationService.build_course_index()
        assert list(index) == ["teologia"]
        assert index["teologia"].id == first


def test_migrate_command_records_run_and_writes_report(app, make_course, tmp_path):
    make_course("Teologia")
    _students(app, [("Ana", "Teologia"), ("Bia", "Direito")])
    report_path = tmp_path / "sem-curso.json"

    result = app.test_cli_runner().invoke(args=["migrate-student-courses", "--report", str(report_path)])

    assert result.exit_code == 0, result.output
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["total_students_without_course"] == 1
    assert report["students"][0]["course_name"] == "Direito"

    with app.app_context():
        run = DataMigrationRun.query.one()
        assert run.name == "migrate-student-courses"
        assert run.status == "success"
        assert run.stats["enrollments_created"] == 1
        assert run.finished_at is not None


def test_seed_command_is_idempotent(app, client):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "--admin-password", "Segura123"])
    assert first.exit_code == 0, first.output
    assert json.loads(first.output)["users"] == 1

    second = runner.invoke(args=["seed", "--admin-password", "Segura123"])
    stats = json.loads(second.output)
    assert stats["users"] == 0
    assert stats["contract_templates"] == 0

    login = client.post("/api/v1/auth/login", json={"login": "admin", "password": "Segura123"})
    assert login.status_code == 200


def test_regenerate_command_with_nothing_to_do(app):
    result = app.test_cli_runner().invoke(args=["regenerate-contract-pdfs"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"total": 0, "regenerated": [], "failed": []}
