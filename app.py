# app.py
import os

from flask import Flask
from flask_cors import CORS
from flask_migrate import Migrate

from config import get_config
from extensions import db
from logging_setup import configure_logging


def create_app(config_object=None, test_config: dict | None = None) -> Flask:
    """
    App factory.
    - Carrega configuração (APP_ENV ou config_object explícito)
    - Inicializa extensões, autenticação JWT e rate limiting
    - Registra blueprint da API, handlers de erro e comandos CLI
    - Conecta migrações
    """
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or get_config())
    if test_config:
        app.config.update(test_config)

    if app.config.get("APP_ENV") == "production":
        missing = [key for key in ("SECRET_KEY", "JWT_SECRET") if not app.config.get(key)]
        if missing:
            raise RuntimeError(f"Variáveis obrigatórias em produção: {', '.join(missing)}")

    configure_logging(app)

    os.makedirs(app.config["UPLOAD_DIR"], exist_ok=True)

    # Extensões
    db.init_app(app)
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGIN"]}},
        supports_credentials=True,
    )

    from api.utils.auth import init_auth
    from api.utils.rate_limit import init_rate_limiting
    from api.error_handlers import register_error_handlers

    init_auth(app)
    init_rate_limiting(app)
    register_error_handlers(app)

    # Blueprint da API
    from api import api_bp

    app.register_blueprint(api_bp)

    # Migrações (Alembic/Flask-Migrate)
    Migrate(app, db)

    from commands import register_commands

    register_commands(app)

    app.logger.info("Secretaria Online iniciada (env=%s)", app.config.get("APP_ENV"))
    return app


app = create_app()
