from __future__ import annotations

import asyncio
import io
from datetime import datetime

from docx import Document

from excel_analyst.agents.interpret_agent import InterpretationAgent
from excel_analyst.agents.viz_agent import VisualizationAgent, render_chart_png
from excel_analyst.analysis.question_router import build_comprehensive_analysis, chart_spec
from excel_analyst.models.session import ConversationLog
from excel_analyst.reports.word_report import format_number_es, render_report_docx, report_filename

PNG_SIGNATURE = b"\x89PNG"


def test_format_number_es() -> None:
    assert format_number_es(1234567.891) == "1.234.567,89"
    assert format_number_es(11.666666) == "11,67"
    assert format_number_es(3) == "3"
    assert format_number_es(100) == "100"


def test_report_filename() -> None:
    assert report_filename(datetime(2026, 3, 9, 10, 30)) == "Informe_Estrategico_2026-03-09.docx"


def test_render_chart_png() -> None:
    image = render_chart_png(chart_spec("region", {"A": 2, "B": 1}, "pie"))

    assert image.startswith(PNG_SIGNATURE)


def test_visualization_agent_renders_first_three_distributions() -> None:
    dataset = [
        {"a": i % 2, "b": i % 3, "c": i % 4, "d": i % 5}
        for i in range(20)
    ]
    analysis = build_comprehensive_analysis(dataset)

    result = asyncio.run(VisualizationAgent().process({"comprehensive_analysis": analysis}))

    assert [chart["title"] for chart in result["charts"]] == [
        "Distribución por a",
        "Distribución por b",
        "Distribución por c",
    ]
    assert all(chart["image"].startswith(PNG_SIGNATURE) for chart in result["charts"])


def test_render_report_docx_contains_body_and_metrics_table(sales: list) -> None:
    analysis = build_comprehensive_analysis(sales)
    report = "**RESUMEN EJECUTIVO**\nLas ventas suman 35.\n\n• Región A lidera\n1. **Acción Prioritaria:** crecer en B"

    content = render_report_docx(report, analysis, [], datetime(2026, 3, 9, 10, 30))

    document = Document(io.BytesIO(content))
    texts = [paragraph.text for paragraph in document.paragraphs]
    assert "INFORME ESTRATÉGICO" in texts
    assert "RESUMEN EJECUTIVO" in texts
    assert "1. Acción Prioritaria: crecer en B" in texts
    assert "DISTRIBUCIONES DE DATOS" in texts

    table = document.tables[0]
    rows = [[cell.text for cell in row.cells] for row in table.rows]
    assert rows[0] == ["Métrica", "Valor", "Descripción"]
    assert rows[1] == ["Total de Registros", "3", "Número total de registros analizados"]
    assert rows[2] == ["ventas", "11,67", "Promedio de ventas"]


def test_render_report_docx_embeds_charts(sales: list) -> None:
    analysis = build_comprehensive_analysis(sales)
    charts = asyncio.run(VisualizationAgent().process({"comprehensive_analysis": analysis}))["charts"]

    content = render_report_docx("Texto", analysis, charts, datetime(2026, 3, 9))

    document = Document(io.BytesIO(content))
    assert "ANÁLISIS VISUAL" in [paragraph.text for paragraph in document.paragraphs]
    assert len(document.inline_shapes) == len(charts) == 2


def test_question_prompt_includes_context_and_sample(sales: list) -> None:
    log = ConversationLog()
    log.append("question", "¿cuántas regiones hay?")

    prompt = InterpretationAgent.build_question_prompt(
        "¿cuántas regiones hay?", ["region", "ventas"], tuple(sales), 2, log.recent()
    )

    assert "Total de registros: 3" in prompt
    assert "Columnas disponibles: region, ventas" in prompt
    assert "question: ¿cuántas regiones hay?" in prompt
    assert '"ventas": 20' in prompt
    assert '"ventas": 5' not in prompt


def test_report_prompt_includes_metrics_and_distributions(sales: list) -> None:
    analysis = build_comprehensive_analysis(sales)

    prompt = InterpretationAgent.build_report_prompt(["region", "ventas"], tuple(sales), analysis)

    assert "INFORME ESTRATÉGICO" in prompt
    assert '"average": 11.666666666666666' in prompt
    assert '"A": 2' in prompt


def test_interpretation_agent_rejects_unknown_mode() -> None:
    async def llm(prompt: str) -> str:
        return "x"

    result = asyncio.run(InterpretationAgent(llm).process({"mode": "other"}))

    assert "error" in result
