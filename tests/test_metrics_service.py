from dataclasses import replace

import math
import pytest

from core.config import RATING_GOOD, RATING_WARN, RATING_RISK
from models.metrics import MetricInputs, MetricResults
from services.metrics_service import compute_metrics, rate_metric, rate_results, build_snapshot


def test_worked_example(example_inputs):
    results = compute_metrics(example_inputs)

    assert results.avg_mrr_per_client == pytest.approx(2000)
    assert results.service_gm_pct == pytest.approx(65)
    assert results.cac == pytest.approx(2000)
    assert results.monthly_gross_margin_per_client == pytest.approx(1300)
    assert results.ltv == pytest.approx(31200)
    assert results.ltv_cac_ratio == pytest.approx(15.6)
    assert results.dso == pytest.approx(30)


def test_staff_ratio_and_utilization():
    results = compute_metrics(MetricInputs(
        arr=3_000_000, fte_count=15, available_hours_per_fte=40, billable_hours=420,
    ))

    assert results.staff_to_revenue_ratio == pytest.approx(200_000)
    assert results.utilization_pct == pytest.approx(70)


def test_all_zero_inputs_give_all_zero_results():
    results = compute_metrics(MetricInputs())

    assert results == MetricResults()


@pytest.mark.parametrize("denominator, metric", [
    ("mrr_clients", "avg_mrr_per_client"),
    ("service_revenue", "service_gm_pct"),
    ("new_clients", "cac"),
    ("revenue_90d", "dso"),
    ("fte_count", "staff_to_revenue_ratio"),
    ("fte_count", "utilization_pct"),
    ("available_hours_per_fte", "utilization_pct"),
])
def test_zero_denominator_resolves_to_zero(example_inputs, denominator, metric):
    inputs = replace(example_inputs, arr=1_000_000, fte_count=10, available_hours_per_fte=40, billable_hours=300)
    inputs = replace(inputs, **{denominator: 0})

    value = getattr(compute_metrics(inputs), metric)

    assert value == 0
    assert math.isfinite(value)


def test_ltv_cac_is_zero_without_new_clients(example_inputs):
    results = compute_metrics(replace(example_inputs, new_clients=0))

    assert results.cac == 0
    assert results.ltv_cac_ratio == 0
    assert results.ltv == pytest.approx(31200)


def test_negative_denominator_resolves_to_zero():
    results = compute_metrics(MetricInputs(mrr=1000, mrr_clients=-5))

    assert results.avg_mrr_per_client == 0


def test_gross_margin_can_be_negative():
    results = compute_metrics(MetricInputs(service_revenue=100, service_cogs=150))

    assert results.service_gm_pct == pytest.approx(-50)


def test_compute_metrics_is_pure(example_inputs):
    first = compute_metrics(example_inputs)
    compute_metrics(MetricInputs(mrr=5, mrr_clients=1))
    second = compute_metrics(example_inputs)

    assert first == second


def test_from_form_coerces_bad_values_and_defaults_hours():
    inputs = MetricInputs.from_form({
        "mrr": "$100,000",
        "mrrClients": "abc",
        "newClients": -4,
        "fteCount": "10",
    })

    assert inputs.mrr == 100000
    assert inputs.mrr_clients == 0
    assert inputs.new_clients == 0
    assert inputs.fte_count == 10
    assert inputs.available_hours_per_fte == 40


@pytest.mark.parametrize("name, value, expected", [
    ("service_gm_pct", 65, RATING_GOOD),
    ("service_gm_pct", 62, RATING_WARN),
    ("service_gm_pct", 59.9, RATING_RISK),
    ("ltv_cac_ratio", 3.0, RATING_GOOD),
    ("ltv_cac_ratio", 2.5, RATING_WARN),
    ("ltv_cac_ratio", 1.0, RATING_RISK),
    ("dso", 34, RATING_GOOD),
    ("dso", 35, RATING_WARN),
    ("dso", 45, RATING_WARN),
    ("dso", 46, RATING_RISK),
    ("utilization_pct", 70, RATING_GOOD),
    ("utilization_pct", 65, RATING_WARN),
    ("utilization_pct", 64, RATING_RISK),
])
def test_rate_metric(name, value, expected):
    assert rate_metric(name, value) == expected


def test_rate_metric_without_thresholds():
    assert rate_metric("cac", 2000) is None


def test_rate_metric_uses_supplied_thresholds():
    thresholds = {"utilization_pct": {"good": 80, "warn": 75, "lower_is_better": False}}

    assert rate_metric("utilization_pct", 78, thresholds) == RATING_WARN


def test_build_snapshot_rates_only_thresholded_metrics(example_inputs):
    snapshot = build_snapshot(example_inputs)

    assert snapshot.ratings == rate_results(snapshot.results)
    assert snapshot.ratings["service_gm_pct"] == RATING_GOOD
    assert snapshot.ratings["dso"] == RATING_GOOD
    assert "cac" not in snapshot.ratings
