"""
问题路由：判断问题是否需要图表，并选择作图的列

这些都是基于关键词和基数阈值的启发式规则，误判是可以接受的。
"""
from typing import Dict, Optional

from ..models.analysis import AnalysisResult, ChartSpec, ComprehensiveAnalysis
from .distribution import compute_all_distributions, compute_question_distributions, count_categories, is_categorical
from .metrics import DEFAULT_POLICY, MetricPolicy, compute_metrics, compute_question_metrics
from .schema import Dataset, column_names, profile

CHART_KEYWORDS = ("gráfica", "gráfico", "distribución", "muestra", "comparar")

NAMED_CHART_MAX_CARDINALITY = 15
FALLBACK_CHART_MAX_CARDINALITY = 10
PIE_MAX_CATEGORIES = 5


def needs_chart(question: str) -> bool:
    lowered = question.lower()
    return any(keyword in lowered for keyword in CHART_KEYWORDS)


def chart_spec(column: str, distribution: Dict[str, int], kind: str) -> ChartSpec:
    return ChartSpec(
        type=kind,
        labels=list(distribution.keys()),
        data=list(distribution.values()),
        title=f"Distribución por {column}"
    )


def select_chart_column(question: str, dataset: Dataset) -> Optional[ChartSpec]:
    """
    选择作图的列

    先找问题中明确提到且基数在 (1, 15) 内的列（不超过5类用饼图，否则柱状图）；
    找不到时退回第一个基数在 (1, 10) 内的列并使用柱状图。
    """
    if not dataset:
        return None

    lowered = question.lower()
    columns = column_names(dataset)

    for column in columns:
        if column.lower() not in lowered:
            continue
        distribution = count_categories(dataset, column)
        if is_categorical(len(distribution), NAMED_CHART_MAX_CARDINALITY):
            kind = "pie" if len(distribution) <= PIE_MAX_CATEGORIES else "bar"
            return chart_spec(column, distribution, kind)

    for column in columns:
        distribution = count_categories(dataset, column)
        if is_categorical(len(distribution), FALLBACK_CHART_MAX_CARDINALITY):
            return chart_spec(column, distribution, "bar")

    return None


def build_calculations(dataset: Dataset, policy: MetricPolicy = DEFAULT_POLICY) -> Dict[str, object]:
    if not dataset:
        return {}
    calculations: Dict[str, object] = {"totalRegistros": len(dataset)}
    calculations.update(compute_question_metrics(dataset, policy))
    calculations.update(compute_question_distributions(dataset))
    return calculations


def build_response(llm_text: str, question: str, dataset: Dataset,
                   policy: MetricPolicy = DEFAULT_POLICY) -> AnalysisResult:
    """把LLM文字、确定性计算和可选图表组合为分析结果"""
    wants_chart = needs_chart(question)
    return AnalysisResult(
        type="grafica" if wants_chart else "metrica",
        ai_response=llm_text,
        calculations=build_calculations(dataset, policy),
        chart_data=select_chart_column(question, dataset) if wants_chart else None
    )


def build_comprehensive_analysis(dataset: Dataset) -> ComprehensiveAnalysis:
    """报告用的完整分析"""
    if not dataset:
        return ComprehensiveAnalysis()
    return ComprehensiveAnalysis(
        total_records=len(dataset),
        columns=profile(dataset),
        metrics=compute_metrics(dataset),
        distributions=compute_all_distributions(dataset)
    )
