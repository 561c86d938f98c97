# commands.py
"""
Comandos de operador (Flask CLI). Cada execução fica registrada em
DataMigrationRun com status e estatísticas.

    flask seed [--admin-password ...] [--demo]
    flask migrate-student-courses [--dry-run] [--report arquivo.json]
    flask regenerate-contract-pdfs
"""

import json
import logging
from datetime import datetime

import click

from extensions import db
from models import DataMigrationRun

logger = logging.getLogger(__name__)


def run_recorded(name: str, task):
    """Executa task() registrando início, fim, status e estatísticas."""
    run = DataMigrationRun(name=name, status="running")
    db.session.add(run)
    db.session.commit()

    try:
        stats = task()
    except Exception:
        db.session.rollback()
        run.status = "failed"
        run.finished_at = datetime.utcnow()
        db.session.commit()
        logger.exception("Comando %s falhou", name)
        raise

    run.status = "success"
    run.stats = stats
    run.finished_at = datetime.utcnow()
    db.session.commit()
    return stats


def register_commands(app) -> None:
    @app.cli.command("seed")
    @click.option("--admin-password", default="Admin123", show_default=True, help="Senha do usuário admin.")
    @click.option("--demo", is_flag=True, help="Cria também curso, professor e aluno de demonstração.")
    def seed_command(admin_password, demo):
        """Cria admin, tipos de documento e template de contrato padrão."""
        from seeds.initial_seed import run_seed

        stats = run_recorded("seed", lambda: run_seed(admin_password=admin_password, demo=demo))
        click.echo(json.dumps(stats, indent=2))

    @app.cli.command("migrate-student-courses")
    @click.option("--dry-run", is_flag=True, help="Calcula o resultado sem gravar matrículas.")
    @click.option("--report", type=click.Path(dir_okay=False, writable=True), help="Grava os alunos sem curso em JSON.")
    def migrate_student_courses_command(dry_run, report):
        """Cria matrículas a partir do curso em texto livre dos alunos."""
        from services.course_migration_service import CourseMigrationService

        stats = run_recorded(
            "migrate-student-courses",
            lambda: CourseMigrationService.migrate_student_courses(dry_run=dry_run),
        )

        if report:
            with open(report, "w", encoding="utf-8") as fh:
                json.dump(
                    {
                        "generated_at": datetime.utcnow().isoformat(),
                        "total_students_without_course": len(stats["students_without_course"]),
                        "students": stats["students_without_course"],
                    },
                    fh,
                    ensure_ascii=False,
                    indent=2,
                )

        summary = {k: v for k, v in stats.items() if k != "students_without_course"}
        click.echo(json.dumps(summary, indent=2))
        if stats["courses_not_found"]:
            click.echo(f"{stats['courses_not_found']} aluno(s) com curso não encontrado.", err=True)

    @app.cli.command("regenerate-contract-pdfs")
    def regenerate_contract_pdfs_command():
        """Gera o PDF dos contratos que ficaram sem arquivo."""
        from services import ContractService

        report = run_recorded("regenerate-contract-pdfs", ContractService.regenerate_missing_pdfs)
        click.echo(json.dumps(report, indent=2))
        if report["failed"]:
            raise SystemExit(1)
