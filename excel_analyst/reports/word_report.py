"""Word报告渲染 (Renders the strategic report as a .docx document)"""
import io
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor

from ..models.analysis import ComprehensiveAnalysis

ACCENT = RGBColor(0x2E, 0x86, 0xAB)
MUTED = RGBColor(0x66, 0x66, 0x66)
MAX_METRIC_ROWS = 5

LIST_LINE = re.compile(r"^(•|\d+\.)")

MONTHS_ES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre"
]


def format_number_es(value: float, max_decimals: int = 2) -> str:
    """1234567.891 -> "1.234.567,89" """
    text = f"{value:,.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text.replace(",", "\x00").replace(".", ",").replace("\x00", ".")


def report_filename(generated_at: datetime) -> str:
    return f"Informe_Estrategico_{generated_at.date().isoformat()}.docx"


def _add_run(paragraph, text: str, size: int, bold: bool = False, italic: bool = False,
             color: Optional[RGBColor] = None):
    run = paragraph.add_run(text)
    run.font.size = Pt(size)
    run.bold = bold
    run.italic = italic
    if color is not None:
        run.font.color.rgb = color
    return run


def _shade(cell, fill: str) -> None:
    shading = OxmlElement("w:shd")
    shading.set(qn("w:val"), "clear")
    shading.set(qn("w:color"), "auto")
    shading.set(qn("w:fill"), fill)
    cell._tc.get_or_add_tcPr().append(shading)


def _add_section_title(document, text: str) -> None:
    paragraph = document.add_paragraph()
    paragraph.paragraph_format.space_before = Pt(30)
    paragraph.paragraph_format.space_after = Pt(15)
    _add_run(paragraph, text, 12, bold=True, color=ACCENT)


def _add_body(document, report_text: str) -> None:
    """LLM正文：**标题** 行、列表行和普通段落"""
    for line in report_text.split("\n"):
        stripped = line.strip()
        paragraph = document.add_paragraph()
        if stripped.startswith("**") and stripped.endswith("**") and len(stripped) > 4:
            paragraph.paragraph_format.space_before = Pt(20)
            paragraph.paragraph_format.space_after = Pt(10)
            _add_run(paragraph, stripped.replace("**", ""), 12, bold=True, color=ACCENT)
        elif LIST_LINE.match(stripped):
            paragraph.paragraph_format.left_indent = Inches(0.25)
            paragraph.paragraph_format.space_after = Pt(5)
            _add_run(paragraph, stripped.replace("**", ""), 11)
        elif stripped:
            paragraph.paragraph_format.space_after = Pt(10)
            _add_run(paragraph, stripped, 11)
        else:
            paragraph.paragraph_format.space_after = Pt(5)


def _add_metrics_table(document, analysis: ComprehensiveAnalysis) -> None:
    rows = [("Total de Registros", format_number_es(analysis.total_records),
             "Número total de registros analizados")]
    for column, summary in list(analysis.metrics.items())[:MAX_METRIC_ROWS]:
        rows.append((column, format_number_es(summary.average), f"Promedio de {column}"))

    table = document.add_table(rows=1, cols=3)
    table.style = "Table Grid"
    for cell, title in zip(table.rows[0].cells, ("Métrica", "Valor", "Descripción")):
        cell.text = ""
        paragraph = cell.paragraphs[0]
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        _add_run(paragraph, title, 11, bold=True, color=RGBColor(0xFF, 0xFF, 0xFF))
        _shade(cell, "2E86AB")

    for name, value, description in rows:
        cells = table.add_row().cells
        cells[0].text = name
        cells[1].text = value
        cells[1].paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.CENTER
        cells[2].text = description


def render_report_docx(report_text: str, analysis: ComprehensiveAnalysis,
                       charts: List[Dict[str, Any]], generated_at: datetime) -> bytes:
    """
    生成Word报告

    Args:
        report_text: LLM生成的报告正文
        analysis: 完整分析
        charts: VisualizationAgent 生成的图表 [{"title", "image"}]
        generated_at: 生成时间

    Returns:
        .docx 文件字节
    """
    document = Document()
    document.core_properties.author = "Excel AI Analyst"
    document.core_properties.title = "Informe Estratégico"
    document.core_properties.comments = "Análisis estratégico generado por IA"

    title = document.add_paragraph()
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _add_run(title, "INFORME ESTRATÉGICO", 16, bold=True, color=ACCENT)

    subtitle = document.add_paragraph()
    subtitle.alignment = WD_ALIGN_PARAGRAPH.CENTER
    subtitle.paragraph_format.space_after = Pt(30)
    _add_run(subtitle, f"Generado el: {generated_at:%d/%m/%Y}", 10, italic=True)

    _add_body(document, report_text)

    if charts:
        _add_section_title(document, "ANÁLISIS VISUAL")
        for chart in charts:
            caption = document.add_paragraph()
            _add_run(caption, chart["title"], 10, bold=True)
            document.add_picture(io.BytesIO(chart["image"]), width=Inches(6))
            document.paragraphs[-1].alignment = WD_ALIGN_PARAGRAPH.CENTER
    else:
        _add_section_title(document, "DISTRIBUCIONES DE DATOS")
        note = document.add_paragraph()
        _add_run(note, "Las distribuciones de datos se han analizado y están incluidas "
                       "en el análisis estratégico anterior.", 10, italic=True)

    _add_section_title(document, "RESUMEN DE MÉTRICAS CLAVE")
    _add_metrics_table(document, analysis)

    footer = document.add_paragraph()
    footer.alignment = WD_ALIGN_PARAGRAPH.CENTER
    footer.paragraph_format.space_before = Pt(40)
    _add_run(footer, "---", 10)

    disclaimer = document.add_paragraph()
    disclaimer.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _add_run(disclaimer, "Este informe ha sido generado automáticamente por Excel AI Analyst utilizando "
                         "análisis de datos avanzado e inteligencia artificial.", 9, italic=True, color=MUTED)

    stamp = document.add_paragraph()
    stamp.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _add_run(stamp, f"Fecha de generación: {generated_at.day} de {MONTHS_ES[generated_at.month - 1]} de "
                    f"{generated_at.year}, {generated_at:%H:%M}", 8, color=RGBColor(0x99, 0x99, 0x99))

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
