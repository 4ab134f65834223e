"""分类列的频数分布"""
from typing import Any, Dict, Optional

from ..data.processor import is_missing
from .schema import Dataset, column_names, column_values

UNCLASSIFIED_LABEL = "Sin clasificar"

# 各调用点的基数上限（不含上限本身）
REPORT_MAX_CARDINALITY = 50
QUESTION_MAX_CARDINALITY = 20


def category_label(value: Any) -> str:
    """分布的键：缺失值归入 "Sin clasificar"，整数值的浮点数去掉小数部分"""
    if is_missing(value):
        return UNCLASSIFIED_LABEL
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def count_categories(dataset: Dataset, column: str) -> Dict[str, int]:
    """按首次出现的顺序统计每个取值的行数，每行恰好计一次"""
    distribution: Dict[str, int] = {}
    for value in column_values(dataset, column):
        label = category_label(value)
        distribution[label] = distribution.get(label, 0) + 1
    return distribution


def is_categorical(distinct_count: int, max_cardinality: int) -> bool:
    return 1 < distinct_count < max_cardinality


def compute_distribution(dataset: Dataset, column: str, max_cardinality: int) -> Optional[Dict[str, int]]:
    """
    计算单列的频数分布

    Args:
        dataset: 记录列表
        column: 列名
        max_cardinality: 基数上限（不含）

    Returns:
        {取值: 次数}；近似常量列或近似唯一列返回 None
    """
    distribution = count_categories(dataset, column)
    if not is_categorical(len(distribution), max_cardinality):
        return None
    return distribution


def compute_all_distributions(dataset: Dataset,
                              max_cardinality: int = REPORT_MAX_CARDINALITY) -> Dict[str, Dict[str, int]]:
    distributions = {}
    for column in column_names(dataset):
        distribution = compute_distribution(dataset, column, max_cardinality)
        if distribution is not None:
            distributions[column] = distribution
    return distributions


def compute_question_distributions(dataset: Dataset,
                                   max_cardinality: int = QUESTION_MAX_CARDINALITY) -> Dict[str, Dict[str, int]]:
    return {
        f"distribucion_{column}": distribution
        for column, distribution in compute_all_distributions(dataset, max_cardinality).items()
    }
