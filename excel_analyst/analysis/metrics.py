"""数值列的聚合指标 (count / sum / average / min / max)"""
from dataclasses import dataclass
from typing import Dict, Tuple

from ..data.processor import numeric_values
from ..models.analysis import MetricSummary
from .schema import Dataset, column_names, column_values


@dataclass(frozen=True)
class MetricPolicy:
    """
    问答时使用的指标过滤策略

    列名包含任一子串（不区分大小写）的列被视为标识符类列而跳过；
    require_positive_average 为 True 时跳过平均值不大于 0 的列。
    """
    excluded_substrings: Tuple[str, ...] = ("id", "numero")
    require_positive_average: bool = True

    def allows(self, column: str, summary: MetricSummary) -> bool:
        lowered = column.lower()
        if any(fragment.lower() in lowered for fragment in self.excluded_substrings):
            return False
        if self.require_positive_average and not summary.average > 0:
            return False
        return True


DEFAULT_POLICY = MetricPolicy()


def summarize(values) -> MetricSummary:
    total = sum(values)
    return MetricSummary(
        count=len(values),
        sum=total,
        average=total / len(values),
        min=min(values),
        max=max(values)
    )


def compute_metrics(dataset: Dataset) -> Dict[str, MetricSummary]:
    """为每个至少含一个数值的列计算聚合指标，非数值的值被静默忽略"""
    metrics = {}
    for column in column_names(dataset):
        values = numeric_values(column_values(dataset, column))
        if values:
            metrics[column] = summarize(values)
    return metrics


def compute_question_metrics(dataset: Dataset, policy: MetricPolicy = DEFAULT_POLICY) -> Dict[str, float]:
    """问答用的精简指标：total_<列> 和 promedio_<列>"""
    calculations = {}
    for column, summary in compute_metrics(dataset).items():
        if not policy.allows(column, summary):
            continue
        calculations[f"total_{column}"] = summary.sum
        calculations[f"promedio_{column}"] = summary.average
    return calculations
