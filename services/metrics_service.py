from core.config import METRIC_THRESHOLDS, RATING_GOOD, RATING_WARN, RATING_RISK
from models.metrics import MetricInputs, MetricResults, MetricsSnapshot
from utils.data_processing import safe_divide

def compute_metrics(inputs: MetricInputs) -> MetricResults:
    avg_mrr_per_client = safe_divide(inputs.mrr, inputs.mrr_clients)
    service_gm_pct = safe_divide(inputs.service_revenue - inputs.service_cogs, inputs.service_revenue) * 100
    cac = safe_divide(inputs.marketing_spend, inputs.new_clients)
    monthly_gross_margin_per_client = avg_mrr_per_client * (service_gm_pct / 100)
    ltv = monthly_gross_margin_per_client * inputs.retention_months
    ltv_cac_ratio = safe_divide(ltv, cac)

    # Average daily revenue over the trailing quarter
    daily_revenue = inputs.revenue_90d / 90 if inputs.revenue_90d > 0 else 0.0
    dso = safe_divide(inputs.ar_balance, daily_revenue)

    staff_to_revenue_ratio = safe_divide(inputs.arr, inputs.fte_count)
    total_available_hours = inputs.fte_count * inputs.available_hours_per_fte
    utilization_pct = safe_divide(inputs.billable_hours, total_available_hours) * 100

    return MetricResults(
        avg_mrr_per_client=avg_mrr_per_client,
        service_gm_pct=service_gm_pct,
        cac=cac,
        monthly_gross_margin_per_client=monthly_gross_margin_per_client,
        ltv=ltv,
        ltv_cac_ratio=ltv_cac_ratio,
        dso=dso,
        staff_to_revenue_ratio=staff_to_revenue_ratio,
        utilization_pct=utilization_pct,
    )

def rate_metric(name, value, thresholds=None):
    """Map a result to good/warn/risk, or None for metrics without thresholds."""
    thresholds = thresholds if thresholds is not None else METRIC_THRESHOLDS
    limits = thresholds.get(name)
    if not limits:
        return None
    if limits.get("lower_is_better"):
        if value < limits["good"]:
            return RATING_GOOD
        if value <= limits["warn"]:
            return RATING_WARN
        return RATING_RISK
    if value >= limits["good"]:
        return RATING_GOOD
    if value >= limits["warn"]:
        return RATING_WARN
    return RATING_RISK

def rate_results(results: MetricResults, thresholds=None):
    ratings = {}
    for name, value in results.to_dict().items():
        rating = rate_metric(name, value, thresholds)
        if rating:
            ratings[name] = rating
    return ratings

def build_snapshot(inputs: MetricInputs, thresholds=None) -> MetricsSnapshot:
    results = compute_metrics(inputs)
    return MetricsSnapshot(inputs=inputs, results=results, ratings=rate_results(results, thresholds))
