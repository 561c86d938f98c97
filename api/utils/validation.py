# api/utils/validation.py
"""
Validação de payloads JSON.

Validator acumula TODOS os erros de um payload e só então levanta
VALIDATION_ERROR com a lista em details. Os campos chegam em camelCase e
são tratados em snake_case (ver serializers.snake_keys).
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from functools import wraps
from typing import Callable

from flask import request

from errors import validation_error
from api.utils.serializers import snake_keys, to_camel
from services.formatters import strip_non_digits

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_MISSING = object()


def is_valid_cpf(value) -> bool:
    digits = strip_non_digits(value)
    if len(digits) != 11 or digits == digits[0] * 11:
        return False

    numbers = [int(d) for d in digits]
    for position in (9, 10):
        total = sum(numbers[i] * (position + 1 - i) for i in range(position))
        check = (total * 10) % 11
        if check == 10:
            check = 0
        if check != numbers[position]:
            return False
    return True


def is_valid_phone(value) -> bool:
    digits = strip_non_digits(value)
    if len(digits) not in (10, 11):
        return False
    return digits != digits[0] * len(digits)


def is_valid_email(value) -> bool:
    return bool(value) and bool(EMAIL_RE.match(str(value)))


def parse_iso_date(value) -> date:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not ISO_DATE_RE.match(value):
        raise ValueError("data deve estar no formato AAAA-MM-DD")
    return date.fromisoformat(value)


def parse_grade(value) -> Decimal:
    """Nota de 0 a 10 com no máximo duas casas decimais."""
    if isinstance(value, bool) or value is None:
        raise ValueError("nota deve ser numérica")
    try:
        grade = Decimal(str(value))
    except InvalidOperation:
        raise ValueError("nota deve ser numérica")
    if not grade.is_finite() or grade < 0 or grade > 10:
        raise ValueError("nota deve estar entre 0 e 10")
    if grade.as_tuple().exponent < -2:
        raise ValueError("nota deve ter no máximo duas casas decimais")
    return grade.quantize(Decimal("0.01"))


def is_strong_password(value) -> bool:
    if not isinstance(value, str) or len(value) < 8:
        return False
    return (
        any(c.islower() for c in value)
        and any(c.isupper() for c in value)
        and any(c.isdigit() for c in value)
    )


def get_json_body() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise validation_error([{"field": "body", "message": "O corpo da requisição deve ser um objeto JSON"}])
    return snake_keys(payload)


class Validator:
    """
    Uso:
        v = Validator(payload)
        v.string("name", required=True, max_length=200)
        v.cpf("cpf")
        v.raise_if_errors()
        data = v.cleaned

    Com partial=True (updates) campos ausentes são ignorados, mas um campo
    obrigatório enviado vazio continua sendo erro.
    """

    def __init__(self, data: dict, partial: bool = False):
        self.data = data or {}
        self.partial = partial
        self.errors: list[dict] = []
        self.cleaned: dict = {}

    def add_error(self, field: str, message: str) -> None:
        self.errors.append({"field": to_camel(field), "message": message})

    def _raw(self, field: str, required: bool):
        value = self.data.get(field, _MISSING)
        blank = value is _MISSING or value is None or (isinstance(value, str) and not value.strip())
        if blank:
            if required and not (self.partial and value is _MISSING):
                self.add_error(field, "Campo obrigatório")
            elif value is not _MISSING:
                self.cleaned[field] = None
            return _MISSING
        return value

    def string(self, field: str, required: bool = False, max_length: int | None = None):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        if not isinstance(value, str):
            self.add_error(field, "Deve ser um texto")
            return None
        value = value.strip()
        if max_length and len(value) > max_length:
            self.add_error(field, f"Deve ter no máximo {max_length} caracteres")
            return None
        self.cleaned[field] = value
        return value

    def integer(self, field: str, required: bool = False, min_value: int | None = None, max_value: int | None = None):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            self.add_error(field, "Deve ser um número inteiro")
            return None
        try:
            value = int(value)
        except (TypeError, ValueError):
            self.add_error(field, "Deve ser um número inteiro")
            return None
        if min_value is not None and value < min_value:
            self.add_error(field, f"Deve ser maior ou igual a {min_value}")
            return None
        if max_value is not None and value > max_value:
            self.add_error(field, f"Deve ser menor ou igual a {max_value}")
            return None
        self.cleaned[field] = value
        return value

    def boolean(self, field: str, required: bool = False):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        if not isinstance(value, bool):
            self.add_error(field, "Deve ser verdadeiro ou falso")
            return None
        self.cleaned[field] = value
        return value

    def date(self, field: str, required: bool = False):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        try:
            value = parse_iso_date(value)
        except ValueError:
            self.add_error(field, "Data inválida (use AAAA-MM-DD)")
            return None
        self.cleaned[field] = value
        return value

    def cpf(self, field: str = "cpf", required: bool = False):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        if not isinstance(value, str) or not is_valid_cpf(value):
            self.add_error(field, "CPF inválido")
            return None
        value = strip_non_digits(value)
        self.cleaned[field] = value
        return value

    def phone(self, field: str = "phone", required: bool = False):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        if not isinstance(value, str) or not is_valid_phone(value):
            self.add_error(field, "Telefone inválido")
            return None
        value = strip_non_digits(value)
        self.cleaned[field] = value
        return value

    def email(self, field: str = "email", required: bool = False):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        if not isinstance(value, str) or not is_valid_email(value.strip()):
            self.add_error(field, "E-mail inválido")
            return None
        value = value.strip().lower()
        self.cleaned[field] = value
        return value

    def zip_code(self, field: str = "zip_code", required: bool = False):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        digits = strip_non_digits(value) if isinstance(value, str) else ""
        if len(digits) != 8:
            self.add_error(field, "CEP inválido")
            return None
        self.cleaned[field] = digits
        return digits

    def choice(self, field: str, enum_cls, required: bool = False):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        try:
            member = enum_cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in enum_cls)
            self.add_error(field, f"Valor inválido. Use: {allowed}")
            return None
        self.cleaned[field] = member
        return member

    def semester(self, field: str = "semester", required: bool = False, max_value: int = 12):
        return self.integer(field, required=required, min_value=1, max_value=max_value)

    def grade(self, field: str = "grade", required: bool = False):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        try:
            value = parse_grade(value)
        except ValueError as exc:
            self.add_error(field, str(exc).capitalize())
            return None
        self.cleaned[field] = value
        return value

    def password(self, field: str = "password", required: bool = False):
        value = self._raw(field, required)
        if value is _MISSING:
            return None
        if not is_strong_password(value):
            self.add_error(
                field,
                "A senha deve ter pelo menos 8 caracteres, com letras maiúsculas, minúsculas e números",
            )
            return None
        self.cleaned[field] = value
        return value

    def raise_if_errors(self) -> None:
        if self.errors:
            raise validation_error(self.errors)


def validate_json(rules: Callable[[Validator], None], partial: bool = False):
    """
    Decorador: valida o corpo JSON com `rules` e entrega o resultado limpo
    (snake_case) à view no kwarg `payload`.
    """

    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            validator = Validator(get_json_body(), partial=partial)
            rules(validator)
            validator.raise_if_errors()
            kwargs["payload"] = validator.cleaned
            return f(*args, **kwargs)

        return wrapper

    return decorator


def person_rules(v: Validator) -> None:
    """Campos comuns de aluno e professor."""
    v.string("name", required=True, max_length=200)
    v.cpf("cpf")
    v.string("rg", max_length=20)
    v.date("birth_date")
    v.phone("phone")
    v.email("email")
    v.string("street", max_length=300)
    v.string("number", max_length=20)
    v.string("complement", max_length=200)
    v.string("district", max_length=200)
    v.string("city", max_length=200)
    v.string("state", max_length=2)
    v.zip_code("zip_code")
