import math
import re
from enum import Enum
from typing import Any, Dict, List, NamedTuple

import numpy as np
import pandas as pd


class CellKind(str, Enum):
    """单元格的标记类型"""
    NUMBER = "number"
    TEXT = "text"
    MISSING = "missing"


class Cell(NamedTuple):
    kind: CellKind
    value: Any


MISSING_CELL = Cell(CellKind.MISSING, None)

DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def is_missing(raw: Any) -> bool:
    """None、NaN 以及空字符串都视为缺失值"""
    if raw is None:
        return True
    if isinstance(raw, float) and math.isnan(raw):
        return True
    if isinstance(raw, str) and not raw.strip():
        return True
    return False


def parse_cell(raw: Any) -> Cell:
    """
    将原始值解析为带标记的单元格 (Parse a raw scalar into a tagged cell)

    唯一的数值解析规则：数字以及可以按十进制解析的字符串（如 "42"）为 NUMBER，
    布尔值和其他文本为 TEXT。

    Args:
        raw: 记录中的原始值

    Returns:
        Cell(kind, value)，NUMBER 的 value 为 float
    """
    if is_missing(raw):
        return MISSING_CELL
    if isinstance(raw, (bool, np.bool_)):
        return Cell(CellKind.TEXT, raw)
    if isinstance(raw, (int, float, np.integer, np.floating)):
        if not math.isfinite(raw):
            return Cell(CellKind.TEXT, raw)
        return Cell(CellKind.NUMBER, float(raw))
    if isinstance(raw, str):
        text = raw.strip()
        # "inf"、"1_000" 这类 float() 能接受的写法不算数字
        if not DECIMAL_PATTERN.match(text):
            return Cell(CellKind.TEXT, raw)
        parsed = float(text)
        if not math.isfinite(parsed):
            return Cell(CellKind.TEXT, raw)
        return Cell(CellKind.NUMBER, parsed)
    return Cell(CellKind.TEXT, raw)


def numeric_values(values: List[Any]) -> List[float]:
    """只保留可以解析为数字的值，其余静默丢弃"""
    return [cell.value for cell in map(parse_cell, values) if cell.kind is CellKind.NUMBER]


def convert_numpy_types(obj: Any) -> Any:
    """将NumPy/Pandas类型转换为Python原生类型"""
    if isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        # 处理无穷大和NaN值
        if np.isinf(obj) or np.isnan(obj):
            return None
        return float(obj)
    elif isinstance(obj, float):
        if math.isinf(obj) or math.isnan(obj):
            return None
        return obj
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, pd.Timestamp):
        return obj.isoformat()
    elif obj is pd.NaT:
        return None
    elif isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy_types(item) for item in obj]
    return obj


class DataProcessor:
    """负责把DataFrame转换为会话使用的记录列表"""

    @staticmethod
    def to_records(df: pd.DataFrame) -> List[Dict[str, Any]]:
        """
        DataFrame -> 有序记录列表

        列名只去掉首尾空白，不做其他改写，问题中的列名匹配依赖原始列名。
        """
        cleaned_df = DataProcessor._clean_column_names(df)
        # 完全空白的行在电子表格里很常见，直接丢弃
        cleaned_df = cleaned_df.dropna(how="all")
        records = cleaned_df.astype(object).where(pd.notna(cleaned_df), None).to_dict(orient="records")
        return [convert_numpy_types(record) for record in records]

    @staticmethod
    def _clean_column_names(df: pd.DataFrame) -> pd.DataFrame:
        """清理列名，去掉首尾空白"""
        cleaned_df = df.copy()
        cleaned_df.columns = [str(col).strip() for col in cleaned_df.columns]
        return cleaned_df

