from __future__ import annotations

import pytest

from excel_analyst.analysis.metrics import MetricPolicy, compute_metrics, compute_question_metrics


def test_compute_metrics_example(sales: list) -> None:
    metrics = compute_metrics(sales)

    assert list(metrics) == ["ventas"]
    ventas = metrics["ventas"]
    assert ventas.count == 3
    assert ventas.sum == 35
    assert ventas.average == pytest.approx(11.6666666)
    assert ventas.min == 5
    assert ventas.max == 20


def test_average_is_exactly_sum_over_count() -> None:
    dataset = [{"x": 0.1}, {"x": 0.2}, {"x": "0.3"}, {"y": 7}]

    for summary in compute_metrics(dataset).values():
        assert summary.average == summary.sum / summary.count


def test_columns_without_numeric_values_are_excluded() -> None:
    dataset = [
        {"nombre": "a", "vacio": None, "monto": "12"},
        {"nombre": "b", "vacio": "", "monto": "abc"},
    ]

    metrics = compute_metrics(dataset)

    assert "nombre" not in metrics
    assert "vacio" not in metrics
    assert metrics["monto"].count == 1
    assert metrics["monto"].sum == 12


def test_empty_dataset_has_no_metrics() -> None:
    assert compute_metrics([]) == {}


def test_question_metrics_skip_identifier_like_and_non_positive_columns() -> None:
    dataset = [
        {"ID_cliente": 1, "Numero_cuenta": 900, "saldo": -5, "monto": 10},
        {"ID_cliente": 2, "Numero_cuenta": 901, "saldo": -1, "monto": 30},
    ]

    calculations = compute_question_metrics(dataset)

    assert calculations == {"total_monto": 40.0, "promedio_monto": 20.0}


def test_question_metrics_policy_is_configurable() -> None:
    dataset = [{"numero_ventas": 4, "saldo": -2}, {"numero_ventas": 6, "saldo": 0}]
    policy = MetricPolicy(excluded_substrings=(), require_positive_average=False)

    calculations = compute_question_metrics(dataset, policy)

    assert calculations["total_numero_ventas"] == 10
    assert calculations["promedio_numero_ventas"] == 5
    assert calculations["total_saldo"] == -2


def test_keys_missing_from_first_record_are_ignored() -> None:
    dataset = [{"monto": 1}, {"monto": 2, "extra": 50}, {"extra": 70}]

    metrics = compute_metrics(dataset)

    assert list(metrics) == ["monto"]
    assert metrics["monto"].count == 2
    assert compute_question_metrics(dataset) == {"total_monto": 3, "promedio_monto": 1.5}
