def format_currency(amount):
    return f"${amount:,.0f}"

def format_percentage(value, decimals=1):
    """Format a value that is already expressed in percent."""
    return f"{value:,.{decimals}f}%"

def format_days(value):
    return f"{value:,.0f} days"

def format_ratio(value, decimals=1):
    return f"{value:,.{decimals}f}"

METRIC_FORMATTERS = {
    "avg_mrr_per_client": format_currency,
    "service_gm_pct": format_percentage,
    "cac": format_currency,
    "monthly_gross_margin_per_client": format_currency,
    "ltv": format_currency,
    "ltv_cac_ratio": format_ratio,
    "dso": format_days,
    "staff_to_revenue_ratio": format_currency,
    "utilization_pct": format_percentage,
}

def format_metric(name, value):
    formatter = METRIC_FORMATTERS.get(name, format_ratio)
    return formatter(value)
