# api/services/crud_service.py

from __future__ import annotations

from typing import Mapping

from extensions import db
from errors import not_found


class CrudService:
    """
    Base dos CRUDs simples. As consultas partem sempre de Model.active(),
    então registros com exclusão lógica nunca aparecem.

    Subclasses definem model, resource_name, search_fields e, quando
    necessário, sobrescrevem validate_create / validate_update.
    """

    model = None
    resource_name = "Registro"
    search_fields: tuple[str, ...] = ()
    default_order = "id"

    @classmethod
    def query(cls, search: str | None = None):
        query = cls.model.active()
        if search and cls.search_fields:
            term = f"%{search.strip()}%"
            query = query.filter(
                db.or_(*[getattr(cls.model, field).ilike(term) for field in cls.search_fields])
            )
        return query.order_by(getattr(cls.model, cls.default_order).asc())

    @classmethod
    def get(cls, record_id: int):
        record = cls.model.get_active(record_id)
        if not record:
            raise not_found(cls.resource_name)
        return record

    @classmethod
    def validate_create(cls, data: Mapping) -> None:
        pass

    @classmethod
    def validate_update(cls, record, data: Mapping) -> None:
        pass

    @classmethod
    def create(cls, data: Mapping):
        cls.validate_create(data)
        record = cls.model(**data)
        db.session.add(record)
        db.session.commit()
        return record

    @classmethod
    def update(cls, record_id: int, data: Mapping):
        record = cls.get(record_id)
        cls.validate_update(record, data)
        for field, value in data.items():
            setattr(record, field, value)
        db.session.commit()
        return record

    @classmethod
    def delete(cls, record_id: int) -> None:
        record = cls.get(record_id)
        record.soft_delete()
        db.session.commit()
