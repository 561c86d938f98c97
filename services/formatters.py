# services/formatters.py
"""
Formatação de dados brasileiros (CPF, telefone, CEP, datas) e normalização
de textos usada nos contratos e nos comandos de migração.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime

_NON_DIGITS = re.compile(r"\D")
_NON_KEY_CHARS = re.compile(r"[^a-z0-9\s]")


def strip_non_digits(value: str | None) -> str:
    if not value:
        return ""
    return _NON_DIGITS.sub("", str(value))


def format_cpf(cpf: str | None) -> str:
    """
    '12345678901' -> '123.456.789-01'. Entrada já formatada produz o mesmo
    resultado; qualquer coisa que não tenha 11 dígitos volta como veio.
    """
    if not cpf:
        return ""
    digits = strip_non_digits(cpf)
    if len(digits) != 11:
        return cpf
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


def format_phone(phone: str | None) -> str:
    if not phone:
        return ""
    digits = strip_non_digits(phone)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return phone


def format_zip_code(zip_code: str | None) -> str:
    if not zip_code:
        return ""
    digits = strip_non_digits(zip_code)
    if len(digits) != 8:
        return zip_code
    return f"{digits[:5]}-{digits[5:]}"


def format_date_br(value: date | datetime | str | None) -> str:
    if not value:
        return ""
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value[:10])
        except ValueError:
            return ""
    return value.strftime("%d/%m/%Y")


def format_datetime_br(value: datetime | None) -> str:
    if not value:
        return ""
    return value.strftime("%d/%m/%Y %H:%M:%S")


def remove_accents(text: str | None) -> str:
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def normalize_course_name(name: str | None) -> str:
    """
    Chave de comparação de nomes de curso: minúsculas, sem acentos, sem
    pontuação. "Administração" e "ADMINISTRACAO" viram "administracao".
    A comparação é sempre por igualdade da chave, nunca por prefixo.
    """
    if not name:
        return ""
    key = remove_accents(name.lower())
    key = _NON_KEY_CHARS.sub("", key)
    return " ".join(key.split())


def sanitize_filename_stem(stem: str, max_length: int = 50) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9_-]", "_", remove_accents(stem))
    return cleaned[:max_length] or "arquivo"
