from __future__ import annotations

import numpy as np
import pandas as pd

from excel_analyst.data.processor import (
    CellKind,
    DataProcessor,
    convert_numpy_types,
    numeric_values,
    parse_cell,
)


def test_parse_cell_numbers_and_numeric_strings() -> None:
    assert parse_cell(42) == (CellKind.NUMBER, 42.0)
    assert parse_cell(2.5) == (CellKind.NUMBER, 2.5)
    assert parse_cell("42") == (CellKind.NUMBER, 42.0)
    assert parse_cell(" 3.5 ") == (CellKind.NUMBER, 3.5)
    assert parse_cell(np.int64(7)).kind is CellKind.NUMBER


def test_parse_cell_missing_values() -> None:
    for raw in (None, float("nan"), "", "   "):
        assert parse_cell(raw).kind is CellKind.MISSING


def test_parse_cell_text_values() -> None:
    assert parse_cell("Lima").kind is CellKind.TEXT
    assert parse_cell("nan").kind is CellKind.TEXT
    assert parse_cell(True).kind is CellKind.TEXT


def test_numeric_values_drops_unparseable() -> None:
    assert numeric_values([1, "2", "x", None, "", 3.5]) == [1.0, 2.0, 3.5]


def test_to_records_converts_nan_and_numpy_types() -> None:
    df = pd.DataFrame({" region ": ["A", None], "ventas": [np.nan, 5]})

    records = DataProcessor.to_records(df)

    assert records == [{"region": "A", "ventas": None}, {"region": None, "ventas": 5.0}]
    assert type(records[1]["ventas"]) is float


def test_to_records_drops_blank_rows() -> None:
    df = pd.DataFrame({"a": [1, None], "b": ["x", None]})

    assert DataProcessor.to_records(df) == [{"a": 1.0, "b": "x"}]


def test_convert_numpy_types_nested() -> None:
    value = {"a": [np.int64(1), np.float64(2.5)], "b": np.float64("inf")}

    assert convert_numpy_types(value) == {"a": [1, 2.5], "b": None}


def test_parse_cell_rejects_non_decimal_spellings() -> None:
    for raw in ("inf", "-Infinity", "1e999", "1_000", "0x10"):
        assert parse_cell(raw) == (CellKind.TEXT, raw)
    assert parse_cell(float("inf")).kind is CellKind.TEXT
    assert parse_cell("1e3") == (CellKind.NUMBER, 1000.0)
    assert parse_cell("-.5") == (CellKind.NUMBER, -0.5)
    assert numeric_values(["inf", "abc", "2"]) == [2.0]
