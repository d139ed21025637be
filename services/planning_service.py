from datetime import date
from typing import Optional

from models.planning import (
    BackwardPlanInputs,
    BackwardPlan,
    CashForecastInputs,
    CashForecastMonth,
    CashForecast
)
from utils.data_processing import safe_divide

PIPELINE_COVERAGE = 3
DAYS_PER_MONTH = 30

def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end; 0 when end is not after start."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)

def backward_plan(inputs: BackwardPlanInputs, today: Optional[date] = None) -> BackwardPlan:
    today = today or date.today()
    months = months_between(today, inputs.target_date)

    required_arr_delta = inputs.target_arr - inputs.current_arr
    required_mrr_delta = required_arr_delta / 12
    projected_expansion_mrr = inputs.current_mrr * (1 + inputs.am_expansion_rate) ** months - inputs.current_mrr
    churned_mrr = inputs.current_mrr * ((1 - inputs.revenue_churn_rate) ** months - 1)
    net_new_mrr_needed = required_mrr_delta - projected_expansion_mrr + abs(churned_mrr)
    net_new_clients_needed = safe_divide(net_new_mrr_needed, inputs.arpa)
    pipeline_needed = safe_divide(net_new_clients_needed, inputs.win_rate) * PIPELINE_COVERAGE

    return BackwardPlan(
        months_to_target=months,
        required_arr_delta=required_arr_delta,
        required_mrr_delta=required_mrr_delta,
        projected_expansion_mrr=projected_expansion_mrr,
        churned_mrr=churned_mrr,
        net_new_mrr_needed=net_new_mrr_needed,
        net_new_clients_needed=net_new_clients_needed,
        pipeline_needed=pipeline_needed,
    )

def cash_forecast(inputs: CashForecastInputs, months: int = 3) -> CashForecast:
    """Project cash month by month.

    The share min(30, DSO) / 30 of each month's revenue is collected the
    following month; the rest lands in the same month. The starting AR is
    collected in month one, together with the one-time investments going out.
    """
    lag_share = min(DAYS_PER_MONTH, max(inputs.current_dso, 0)) / DAYS_PER_MONTH
    revenue = inputs.monthly_recurring_revenue + inputs.monthly_project_revenue
    monthly_burn = inputs.monthly_cogs + inputs.monthly_opex

    cash = inputs.starting_cash
    ar = inputs.starting_ar
    rows = []
    for month in range(1, months + 1):
        deferred = revenue * lag_share
        current_collections = revenue - deferred
        outflows = monthly_burn + (inputs.one_time_investments if month == 1 else 0.0)
        closing_cash = cash + ar + current_collections - outflows
        rows.append(CashForecastMonth(
            month=month,
            opening_cash=cash,
            collections_from_ar=ar,
            current_month_collections=current_collections,
            outflows=outflows,
            closing_cash=closing_cash,
            closing_ar=deferred,
        ))
        cash, ar = closing_cash, deferred

    return CashForecast(
        months=rows,
        ending_cash=cash,
        ending_ar=ar,
        runway_months=safe_divide(cash, monthly_burn),
        lowest_cash=min((row.closing_cash for row in rows), default=None),
    )
