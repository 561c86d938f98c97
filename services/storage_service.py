# services/storage_service.py
import logging
import os
import time
from pathlib import Path

from werkzeug.utils import secure_filename

from services.formatters import sanitize_filename_stem

logger = logging.getLogger(__name__)

DOCUMENTS_SUBDIR = "documents"
CONTRACTS_SUBDIR = "contracts"


def timestamp_ms() -> int:
    return int(time.time() * 1000)


def contracts_dir(upload_dir: str) -> str:
    return os.path.join(upload_dir, CONTRACTS_SUBDIR)


def build_document_destination(upload_dir: str, user_id, original_filename: str) -> tuple[Path, str]:
    """
    Destino de um upload: UPLOAD_DIR/documents/<user_id>/<timestamp>-<nome>.<ext>.
    Retorna (caminho absoluto, caminho relativo a UPLOAD_DIR).
    """
    filename = secure_filename(original_filename or "") or "arquivo"
    ext = Path(filename).suffix.lower() or Path(original_filename or "").suffix.lower()
    stem = sanitize_filename_stem(Path(filename).stem)
    final_name = f"{timestamp_ms()}-{stem}{ext}"

    user_part = str(user_id) if user_id is not None else "unknown"
    storage_dir = Path(upload_dir) / DOCUMENTS_SUBDIR / user_part
    storage_dir.mkdir(parents=True, exist_ok=True)
    return storage_dir / final_name, f"{DOCUMENTS_SUBDIR}/{user_part}/{final_name}"


def relative_to_upload_dir(upload_dir: str, absolute_path: str) -> str:
    return Path(os.path.relpath(absolute_path, upload_dir)).as_posix()


def resolve_upload_path(upload_dir: str, relative_path: str | None) -> Path | None:
    """Resolve um caminho salvo no banco; None se sair de UPLOAD_DIR."""
    if not relative_path:
        return None
    base = Path(upload_dir).resolve()
    candidate = (base / relative_path).resolve()
    if base != candidate and base not in candidate.parents:
        return None
    return candidate


def delete_file_quietly(path) -> bool:
    """Remoção best-effort: falhas só geram warning."""
    if not path:
        return False
    try:
        os.remove(path)
        return True
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.warning("Não foi possível remover o arquivo %s: %s", path, exc)
        return False
