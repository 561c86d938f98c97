from services.pdf_service import PDFService, html_to_blocks


def test_html_blocks_keep_inline_formatting():
    blocks = html_to_blocks(
        "<h2>Contrato</h2><p>Aluno: <strong>Maria &amp; Filhos</strong></p>"
        "<div class='x'>Curso <i>Teologia</i><br>Semestre 1</div>"
    )
    assert blocks == [
        ("heading", "Contrato"),
        ("body", "Aluno: <b>Maria &amp; Filhos</b>"),
        ("body", "Curso <i>Teologia</i>"),
        ("body", "Semestre 1"),
    ]


def test_html_blocks_drop_unknown_tags_and_balance_open_ones():
    blocks = html_to_blocks("<p><span>a &lt; b</span> <u>sublinhado</p><table><tr><td>x</td></tr></table>")
    assert blocks == [("body", "a &lt; b <u>sublinhado</u>"), ("body", "x")]


def test_plain_text_is_split_by_line():
    assert html_to_blocks("Linha 1\n\nLinha 2 & mais") == [("body", "Linha 1"), ("body", "Linha 2 &amp; mais")]
    assert html_to_blocks(None) == []


def test_contract_file_name():
    assert PDFService.build_contract_file_name(7, 2, 2026, 1700000000000) == "contract_7_s2_2026_1700000000000.pdf"


def test_generate_contract_pdf(tmp_path):
    result = PDFService.generate_contract_pdf(
        content="<h3>Cláusula 1</h3><p>O aluno <b>Maria</b> declara ciência.</p>",
        output_dir=str(tmp_path / "contracts"),
        file_name="contract_1_s1_2026_1.pdf",
        institution_name="Faculdade Exemplo",
    )

    assert result["file_name"] == "contract_1_s1_2026_1.pdf"
    assert result["file_size"] > 0
    assert PDFService.is_valid_pdf(result["file_path"])


def test_is_valid_pdf_rejects_other_files(tmp_path):
    fake = tmp_path / "fake.pdf"
    fake.write_bytes(b"not a pdf")
    empty = tmp_path / "empty.pdf"
    empty.write_bytes(b"")
    text = tmp_path / "doc.txt"
    text.write_bytes(b"%PDF-1.4")

    assert not PDFService.is_valid_pdf(str(fake))
    assert not PDFService.is_valid_pdf(str(empty))
    assert not PDFService.is_valid_pdf(str(text))
    assert not PDFService.is_valid_pdf(str(tmp_path / "missing.pdf"))


FULL_DOCUMENT = """<!DOCTYPE html>
<html lang="pt-BR">
<head>
  <meta charset="UTF-8">
  <title>Contrato de Matrícula</title>
  <style>
    body { font-family: Arial, sans-serif; }
    .header { text-align: center; }
  </style>
</head>
<body>
  <!-- cabeçalho institucional -->
  <div class="header"><h1>IFT</h1></div>
  <div class="field-group"><span class="label">Aluno:</span> <span class="value">{{studentName}}</span></div>
  <script>window.print();</script>
</body>
</html>"""


def test_full_html_document_renders_only_the_body():
    blocks = html_to_blocks(FULL_DOCUMENT)

    assert blocks == [("heading", "IFT"), ("body", "Aluno: {{studentName}}")]
    text = " ".join(markup for _, markup in blocks)
    assert "font-family" not in text
    assert "DOCTYPE" not in text
    assert "Contrato de Matrícula" not in text
    assert "cabeçalho" not in text
    assert "window.print" not in text


def test_full_html_document_generates_pdf(tmp_path):
    result = PDFService.generate_contract_pdf(
        content=FULL_DOCUMENT,
        output_dir=str(tmp_path),
        file_name="contract_1_s1_2026_2.pdf",
    )
    assert PDFService.is_valid_pdf(result["file_path"])
