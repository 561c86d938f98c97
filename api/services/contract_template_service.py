# api/services/contract_template_service.py

from __future__ import annotations

from models import ContractTemplate
from api.services.crud_service import CrudService
from services.placeholders import PLACEHOLDER_KEYS, find_placeholders


class ContractTemplateService(CrudService):
    model = ContractTemplate
    resource_name = "Template de contrato"
    search_fields = ("name",)

    @staticmethod
    def unknown_placeholders(content: str | None) -> list[str]:
        """Tokens do template que build_placeholder_data() não preenche."""
        return [key for key in find_placeholders(content) if key not in PLACEHOLDER_KEYS]

    @staticmethod
    def available_placeholders() -> list[str]:
        return list(PLACEHOLDER_KEYS)
