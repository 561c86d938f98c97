# logging_setup.py
import logging
import os
from logging.handlers import RotatingFileHandler

from flask import Flask

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app: Flask) -> None:
    """
    Console sempre; arquivos rotativos (app.log / error.log) quando LOG_TO_FILE.
    O logger raiz recebe os handlers para que logging.getLogger(__name__)
    dos services siga o mesmo formato de current_app.logger.
    """
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    if not any(getattr(h, "_secretaria", False) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        console._secretaria = True
        root.addHandler(console)

        if app.config.get("LOG_TO_FILE"):
            log_dir = app.config["LOG_DIR"]
            os.makedirs(log_dir, exist_ok=True)

            app_file = RotatingFileHandler(
                os.path.join(log_dir, "app.log"), maxBytes=5 * 1024 * 1024, backupCount=5
            )
            app_file.setFormatter(formatter)
            app_file._secretaria = True
            root.addHandler(app_file)

            error_file = RotatingFileHandler(
                os.path.join(log_dir, "error.log"), maxBytes=5 * 1024 * 1024, backupCount=5
            )
            error_file.setLevel(logging.ERROR)
            error_file.setFormatter(formatter)
            error_file._secretaria = True
            root.addHandler(error_file)

    # O handler padrão do Flask duplicaria as mensagens no console.
    app.logger.handlers.clear()
    app.logger.propagate = True
    app.logger.setLevel(level)
