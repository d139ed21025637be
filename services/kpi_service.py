"""
Row-by-row KPI worksheets (monthly KPIs, CAC/LTV periods, AR/DSO, gross margin
by service, weekly utilization).

Each function takes a DataFrame with the worksheet's input columns and returns
a copy with the derived columns added. Numeric inputs are coerced, NaN becomes
0 and negatives are clipped; divisions by a zero or negative denominator give 0.
"""

from typing import List

import numpy as np
import pandas as pd

DAYS_PER_MONTH = 30


def _clean_numeric(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    result = df.copy()
    for column in columns:
        if column not in result.columns:
            result[column] = 0.0
        result[column] = (
            pd.to_numeric(result[column], errors="coerce")
            .replace([np.inf, -np.inf], np.nan)
            .fillna(0.0)
            .clip(lower=0.0)
            .astype(float)
        )
    return result


def safe_divide(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    return numerator.div(denominator.where(denominator > 0)).fillna(0.0)


def kpi_table(df: pd.DataFrame) -> pd.DataFrame:
    result = _clean_numeric(df, [
        "revenue", "mrr", "new_clients", "churned_clients", "service_revenue",
        "service_cogs", "ar_balance", "ftes", "utilization_pct", "sla_attainment_pct",
    ])
    result["service_gm_pct"] = safe_divide(result["service_revenue"] - result["service_cogs"], result["service_revenue"]) * 100
    result["dso"] = safe_divide(result["ar_balance"], result["revenue"] / DAYS_PER_MONTH)
    return result


def cac_ltv_table(df: pd.DataFrame) -> pd.DataFrame:
    result = _clean_numeric(df, [
        "spend", "new_clients", "avg_mrr_per_new_client", "service_gm_pct", "retention_months",
    ])
    result["cac"] = safe_divide(result["spend"], result["new_clients"])
    result["ltv"] = result["avg_mrr_per_new_client"] * (result["service_gm_pct"] / 100) * result["retention_months"]
    result["ltv_cac"] = safe_divide(result["ltv"], result["cac"])
    return result


def ar_dso_table(df: pd.DataFrame) -> pd.DataFrame:
    result = _clean_numeric(df, ["revenue", "collections", "ending_ar"])
    result["dso"] = safe_divide(result["ending_ar"], result["revenue"] / DAYS_PER_MONTH)
    return result


def gm_by_service(df: pd.DataFrame) -> pd.DataFrame:
    result = _clean_numeric(df, ["revenue", "cogs"])
    result["gm_dollars"] = result["revenue"] - result["cogs"]
    result["gm_pct"] = safe_divide(result["gm_dollars"], result["revenue"]) * 100
    return result


def utilization_table(df: pd.DataFrame) -> pd.DataFrame:
    result = _clean_numeric(df, ["fte_count", "available_hours_per_fte", "billable_hours"])
    result["total_available_hours"] = result["fte_count"] * result["available_hours_per_fte"]
    result["utilization_pct"] = safe_divide(result["billable_hours"], result["total_available_hours"]) * 100
    return result
