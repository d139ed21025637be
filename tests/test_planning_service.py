from datetime import date

import pytest

from models.planning import BackwardPlanInputs, CashForecastInputs
from services.planning_service import backward_plan, cash_forecast, months_between


@pytest.mark.parametrize("start, end, expected", [
    (date(2024, 1, 15), date(2024, 3, 15), 2),
    (date(2024, 1, 15), date(2024, 3, 14), 1),
    (date(2024, 1, 31), date(2025, 1, 31), 12),
    (date(2024, 6, 1), date(2024, 1, 1), 0),
])
def test_months_between(start, end, expected):
    assert months_between(start, end) == expected


def test_backward_plan_without_churn_or_expansion():
    plan = backward_plan(BackwardPlanInputs(
        target_arr=6_000_000,
        target_date=date(2026, 1, 1),
        current_arr=4_800_000,
        current_mrr=400_000,
        arpa=2_000,
        win_rate=0.25,
    ), today=date(2025, 1, 1))

    assert plan.months_to_target == 12
    assert plan.required_arr_delta == 1_200_000
    assert plan.required_mrr_delta == 100_000
    assert plan.projected_expansion_mrr == 0
    assert plan.churned_mrr == 0
    assert plan.net_new_mrr_needed == 100_000
    assert plan.net_new_clients_needed == 50
    assert plan.pipeline_needed == 600


def test_backward_plan_with_churn_and_expansion():
    plan = backward_plan(BackwardPlanInputs(
        target_arr=1_200_000,
        target_date=date(2025, 3, 1),
        current_arr=1_200_000,
        current_mrr=100_000,
        arpa=1_000,
        revenue_churn_rate=0.1,
        am_expansion_rate=0.1,
        win_rate=0.5,
    ), today=date(2025, 1, 1))

    assert plan.months_to_target == 2
    assert plan.projected_expansion_mrr == pytest.approx(21_000)
    assert plan.churned_mrr == pytest.approx(-19_000)
    assert plan.net_new_mrr_needed == pytest.approx(-2_000)
    assert plan.net_new_clients_needed == pytest.approx(-2)
    assert plan.pipeline_needed == pytest.approx(-12)


def test_backward_plan_guards_zero_arpa_and_win_rate():
    plan = backward_plan(BackwardPlanInputs(
        target_arr=2_400_000,
        target_date=date(2025, 1, 1),
        current_arr=1_200_000,
        current_mrr=100_000,
        arpa=0,
        win_rate=0,
    ), today=date(2025, 6, 1))

    assert plan.months_to_target == 0
    assert plan.net_new_clients_needed == 0
    assert plan.pipeline_needed == 0


def test_cash_forecast_with_full_month_lag():
    forecast = cash_forecast(CashForecastInputs(
        starting_cash=100_000,
        starting_ar=60_000,
        current_dso=45,
        monthly_recurring_revenue=50_000,
        monthly_project_revenue=10_000,
        monthly_cogs=20_000,
        monthly_opex=30_000,
        one_time_investments=15_000,
    ))

    first, second, third = forecast.months
    assert first.collections_from_ar == 60_000
    assert first.current_month_collections == 0
    assert first.outflows == 65_000
    assert first.closing_cash == 95_000
    assert second.collections_from_ar == 60_000
    assert second.closing_cash == 105_000
    assert third.closing_cash == 115_000
    assert forecast.ending_cash == 115_000
    assert forecast.ending_ar == 60_000
    assert forecast.runway_months == pytest.approx(2.3)
    assert forecast.lowest_cash == 95_000


def test_cash_forecast_partial_lag():
    forecast = cash_forecast(CashForecastInputs(
        starting_cash=0,
        starting_ar=0,
        current_dso=15,
        monthly_recurring_revenue=30_000,
    ), months=2)

    first, second = forecast.months
    assert first.current_month_collections == pytest.approx(15_000)
    assert first.closing_ar == pytest.approx(15_000)
    assert second.inflows == pytest.approx(30_000)
    assert forecast.runway_months == 0
