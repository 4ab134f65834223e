"""
列推断 (Schema inference)

数据集是一组结构一致的记录，列集合由第一条记录的键顺序决定；
后续记录缺少的键按 None 处理。空数据集返回空结果而不是抛出异常。
"""
import math
from typing import Any, Dict, List, Sequence

from ..data.processor import CellKind, is_missing, parse_cell
from ..models.analysis import ColumnProfile

Dataset = Sequence[Dict[str, Any]]

SAMPLE_SIZE = 3


def column_names(dataset: Dataset) -> List[str]:
    if not dataset:
        return []
    return list(dataset[0].keys())


def column_values(dataset: Dataset, column: str) -> List[Any]:
    return [record.get(column) for record in dataset]


def distinct_values(values: Sequence[Any]) -> List[Any]:
    """按首次出现的顺序去重"""
    seen = set()
    result = []
    for value in values:
        key = _hashable(value)
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def _hashable(value: Any) -> Any:
    # 1 和 True 在 Python 中相等，去重时需按类型区分
    return (isinstance(value, bool), value)


def primitive_type(value: Any) -> str:
    """第一条记录中值的原始类型"""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if parse_cell(value).kind is CellKind.NUMBER and not isinstance(value, str):
        return "number"
    return "string"


def profile(dataset: Dataset) -> List[ColumnProfile]:
    """
    为每一列计算画像

    Args:
        dataset: 记录列表

    Returns:
        按第一条记录键顺序排列的 ColumnProfile 列表，空数据集返回 []
    """
    if not dataset:
        return []

    first_record = dataset[0]
    profiles = []
    for column in column_names(dataset):
        present = [value for value in column_values(dataset, column) if not is_missing(value)]
        unique = distinct_values(present)
        profiles.append(ColumnProfile(
            name=column,
            type=primitive_type(first_record.get(column)),
            unique_count=len(unique),
            sample_values=unique[:SAMPLE_SIZE]
        ))
    return profiles


def numeric_columns(dataset: Dataset) -> List[str]:
    """至少有一个值能解析为数字的列"""
    return [
        column for column in column_names(dataset)
        if any(parse_cell(value).kind is CellKind.NUMBER for value in column_values(dataset, column))
    ]
