# api/utils/uploads.py

import logging
import os
from dataclasses import dataclass
from functools import wraps
from pathlib import Path

from flask import current_app, request
from flask_login import current_user

from errors import AppError
from services.storage_service import build_document_destination, delete_file_quietly

logger = logging.getLogger(__name__)


@dataclass
class UploadedFile:
    original_name: str
    file_name: str
    absolute_path: str
    relative_path: str
    mime_type: str
    size: int


def _stream_size(storage) -> int:
    stream = storage.stream
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _validate_type(storage) -> None:
    config = current_app.config
    ext = Path(storage.filename or "").suffix.lower()
    mimetype = (storage.mimetype or "").lower()
    if ext not in config["ALLOWED_UPLOAD_EXTENSIONS"] or mimetype not in config["ALLOWED_UPLOAD_MIMETYPES"]:
        allowed = ", ".join(sorted(e.lstrip(".").upper() for e in config["ALLOWED_UPLOAD_EXTENSIONS"]))
        raise AppError(f"Tipo de arquivo não permitido. Use: {allowed}", 400, "INVALID_FILE")


def _verify_descriptor(upload: UploadedFile) -> None:
    ok = (
        upload.file_name
        and upload.mime_type
        and os.path.isfile(upload.absolute_path)
        and os.path.getsize(upload.absolute_path) == upload.size
    )
    if not ok:
        delete_file_quietly(upload.absolute_path)
        logger.error("Arquivo enviado não foi gravado corretamente: %s", upload.absolute_path)
        raise AppError("Falha ao salvar o arquivo enviado", 500, "UPLOAD_FAILED")


def handle_upload(field_name: str = "file"):
    """
    Decorador de upload de um único arquivo no campo `field_name`.

    - mais arquivos que MAX_FILES_PER_REQUEST (ou mais de um no campo) -> 400 LIMIT_FILE_COUNT
    - nenhum arquivo -> 400 NO_FILE
    - extensão/mimetype fora da lista -> 400 INVALID_FILE
    - maior que MAX_FILE_SIZE -> 413 FILE_TOO_LARGE, sem gravar nada em disco

    A view recebe o kwarg `upload` (UploadedFile). Se ela levantar exceção
    ou responder com status >= 400, o arquivo gravado é removido.
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            config = current_app.config

            total_files = sum(len(request.files.getlist(key)) for key in request.files)
            if total_files > config["MAX_FILES_PER_REQUEST"]:
                raise AppError(
                    f"Máximo de {config['MAX_FILES_PER_REQUEST']} arquivos por requisição",
                    400,
                    "LIMIT_FILE_COUNT",
                )

            files = [item for item in request.files.getlist(field_name) if item and item.filename]
            if not files:
                raise AppError("Nenhum arquivo enviado", 400, "NO_FILE")
            if len(files) > 1:
                raise AppError("Envie apenas um arquivo", 400, "LIMIT_FILE_COUNT")

            storage = files[0]
            _validate_type(storage)

            size = _stream_size(storage)
            if size > config["MAX_FILE_SIZE"]:
                raise AppError(
                    f"Arquivo excede o limite de {config['MAX_UPLOAD_MB']}MB",
                    413,
                    "FILE_TOO_LARGE",
                )
            if size == 0:
                raise AppError("Arquivo vazio", 400, "INVALID_FILE")

            destination, relative_path = build_document_destination(
                config["UPLOAD_DIR"], current_user.id, storage.filename
            )
            storage.save(str(destination))

            upload = UploadedFile(
                original_name=storage.filename,
                file_name=destination.name,
                absolute_path=str(destination),
                relative_path=relative_path,
                mime_type=storage.mimetype,
                size=size,
            )
            _verify_descriptor(upload)

            kwargs["upload"] = upload
            try:
                response = current_app.make_response(f(*args, **kwargs))
            except Exception:
                delete_file_quietly(upload.absolute_path)
                raise

            if response.status_code >= 400:
                delete_file_quietly(upload.absolute_path)
            return response

        return wrapper
    return decorator
