from .pdf_service import PDFService
from .contract_service import ContractService
from .reenrollment_service import ReenrollmentService

__all__ = [
    "PDFService",
    "ContractService",
    "ReenrollmentService",
]
