# services/pdf_service.py

from __future__ import annotations

import html
import logging
import os
import re
from xml.sax.saxutils import escape

from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer

logger = logging.getLogger(__name__)

_HAS_TAGS = re.compile(r"<\s*/?\s*[a-zA-Z][^>]*>")
_BLOCK_BREAK = re.compile(r"(?i)<\s*(?:br\s*/?|/p|/div|/li|/tr|/h[1-6])\s*>")
_HEADING_OPEN = re.compile(r"(?i)<\s*h[1-6](?:\s[^>]*)?>")
_TAG = re.compile(r"<\s*(/?)\s*([a-zA-Z0-9]+)[^>]*>")
_INLINE_TAGS = {"b": "b", "strong": "b", "i": "i", "em": "i", "u": "u"}
_COMMENT = re.compile(r"<!--.*?-->", re.S)
_DECLARATION = re.compile(r"<![^>]*>")
_BODY = re.compile(r"(?is)<\s*body\b[^>]*>(.*?)(?:<\s*/\s*body\s*>|$)")
_NON_CONTENT = re.compile(r"(?is)<\s*(head|style|script|title)\b[^>]*>.*?<\s*/\s*\1\s*>")


def _document_content(content: str) -> str:
    """
    Reduz um documento HTML completo ao que vai para o PDF: sem DOCTYPE,
    comentários, <head>, <style>, <script> e <title>; só o <body> quando existir.
    """
    content = _COMMENT.sub("", content)
    content = _DECLARATION.sub("", content)
    body = _BODY.search(content)
    if body:
        content = body.group(1)
    return _NON_CONTENT.sub("", content)


def _inline_markup(fragment: str) -> str:
    """
    Converte um trecho HTML na marcação mínima aceita pelo Paragraph do
    reportlab: mantém negrito/itálico/sublinhado, remove o resto e escapa o texto.
    """
    out: list[str] = []
    stack: list[str] = []
    pos = 0
    for match in _TAG.finditer(fragment):
        out.append(escape(html.unescape(fragment[pos:match.start()])))
        pos = match.end()

        closing, name = match.group(1), match.group(2).lower()
        tag = _INLINE_TAGS.get(name)
        if not tag:
            continue
        if closing:
            if tag in stack:
                while stack:
                    top = stack.pop()
                    out.append(f"</{top}>")
                    if top == tag:
                        break
        else:
            stack.append(tag)
            out.append(f"<{tag}>")
    out.append(escape(html.unescape(fragment[pos:])))
    while stack:
        out.append(f"</{stack.pop()}>")
    return "".join(out).strip()


def html_to_blocks(content: str | None) -> list[tuple[str, str]]:
    """
    Quebra o conteúdo do template em blocos ("heading" | "body", markup).
    Conteúdo sem tags HTML é tratado como texto puro, um bloco por linha.
    """
    content = _document_content(content or "")
    if _HAS_TAGS.search(content):
        fragments = _BLOCK_BREAK.split(content)
    else:
        fragments = content.split("\n")

    blocks: list[tuple[str, str]] = []
    for fragment in fragments:
        markup = _inline_markup(" ".join(fragment.split()) if _HAS_TAGS.search(content) else fragment)
        if not markup:
            continue
        kind = "heading" if _HEADING_OPEN.search(fragment) else "body"
        blocks.append((kind, markup))
    return blocks


class PDFService:
    """
    Renderização de contratos em PDF (reportlab/platypus).
    """

    DEFAULT_TITLE = "CONTRATO DE MATRÍCULA"

    @staticmethod
    def build_contract_file_name(student_id, semester: int, year: int, timestamp_ms: int) -> str:
        return f"contract_{student_id}_s{semester}_{year}_{timestamp_ms}.pdf"

    @staticmethod
    def generate_contract_pdf(
        *,
        content: str,
        output_dir: str,
        file_name: str,
        institution_name: str = "Secretaria Online",
        title: str | None = None,
    ) -> dict:
        """
        Gera o PDF em output_dir/file_name a partir do conteúdo já com os
        placeholders substituídos. Retorna {file_path, file_name, file_size}.
        """
        os.makedirs(output_dir, exist_ok=True)
        file_path = os.path.join(output_dir, file_name)

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            "ContractTitle",
            parent=styles["Heading1"],
            fontSize=18,
            alignment=TA_CENTER,
            spaceAfter=18,
        )
        heading_style = ParagraphStyle(
            "ContractHeading",
            parent=styles["Heading3"],
            spaceBefore=8,
            spaceAfter=6,
        )
        body_style = ParagraphStyle(
            "ContractBody",
            parent=styles["Normal"],
            fontSize=11,
            leading=16,
            alignment=TA_JUSTIFY,
            spaceAfter=6,
        )
        footer_style = ParagraphStyle(
            "ContractFooter",
            parent=styles["Normal"],
            fontSize=8,
            alignment=TA_CENTER,
        )

        elements = [Paragraph(escape(title or PDFService.DEFAULT_TITLE), title_style)]
        for kind, markup in html_to_blocks(content):
            elements.append(Paragraph(markup, heading_style if kind == "heading" else body_style))

        elements.append(Spacer(1, 1.5 * cm))
        elements.append(Paragraph("_" * 50, footer_style))
        elements.append(Paragraph("Assinatura do responsável", footer_style))
        elements.append(Spacer(1, 1 * cm))
        elements.append(
            Paragraph(escape(f"Documento gerado eletronicamente por {institution_name}"), footer_style)
        )

        doc = SimpleDocTemplate(
            file_path,
            pagesize=A4,
            rightMargin=50,
            leftMargin=50,
            topMargin=50,
            bottomMargin=40,
            title=title or PDFService.DEFAULT_TITLE,
        )
        doc.build(elements)

        file_size = os.path.getsize(file_path)
        logger.info("Contrato PDF gerado: %s (%s bytes)", file_name, file_size)
        return {"file_path": file_path, "file_name": file_name, "file_size": file_size}

    @staticmethod
    def is_valid_pdf(file_path: str) -> bool:
        if not file_path.lower().endswith(".pdf") or not os.path.isfile(file_path):
            return False
        if os.path.getsize(file_path) == 0:
            return False
        with open(file_path, "rb") as fh:
            return fh.read(4) == b"%PDF"
