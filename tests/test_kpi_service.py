import numpy as np
import pandas as pd
import pytest

from services.kpi_service import (
    kpi_table,
    cac_ltv_table,
    ar_dso_table,
    gm_by_service,
    utilization_table,
)


def test_kpi_table_adds_gm_and_dso():
    df = pd.DataFrame({
        "date": ["2024-01", "2024-02"],
        "revenue": [300000, 0],
        "service_revenue": [80000, 0],
        "service_cogs": [28000, 5000],
        "ar_balance": [350000, 10000],
    })

    result = kpi_table(df)

    assert result["service_gm_pct"].tolist() == pytest.approx([65.0, 0.0])
    assert result["dso"].tolist() == pytest.approx([35.0, 0.0])
    assert result["mrr"].tolist() == [0.0, 0.0]
    assert list(df.columns) == ["date", "revenue", "service_revenue", "service_cogs", "ar_balance"]


def test_cac_ltv_table():
    df = pd.DataFrame({
        "spend": [20000, 5000],
        "new_clients": [10, 0],
        "avg_mrr_per_new_client": [2000, 1500],
        "service_gm_pct": [65, 60],
        "retention_months": [24, 36],
    })

    result = cac_ltv_table(df)

    assert result["cac"].tolist() == pytest.approx([2000.0, 0.0])
    assert result["ltv"].tolist() == pytest.approx([31200.0, 32400.0])
    assert result["ltv_cac"].tolist() == pytest.approx([15.6, 0.0])


def test_ar_dso_table_coerces_bad_values():
    df = pd.DataFrame({
        "month": ["Jan", "Feb", "Mar"],
        "revenue": ["90000", "n/a", -100],
        "collections": [80000, 0, 0],
        "ending_ar": [120000, 50000, 50000],
    })

    result = ar_dso_table(df)

    assert result["revenue"].tolist() == [90000.0, 0.0, 0.0]
    assert result["dso"].tolist() == pytest.approx([40.0, 0.0, 0.0])


def test_gm_by_service():
    df = pd.DataFrame({
        "service": ["Managed", "Projects", "Licensing"],
        "revenue": [50000, 20000, 0],
        "cogs": [15000, 14000, 300],
    })

    result = gm_by_service(df)

    assert result["gm_dollars"].tolist() == pytest.approx([35000, 6000, -300])
    assert result["gm_pct"].tolist() == pytest.approx([70.0, 30.0, 0.0])


def test_utilization_table():
    df = pd.DataFrame({
        "week_start": ["2024-01-01", "2024-01-08"],
        "fte_count": [10, 0],
        "available_hours_per_fte": [40, 40],
        "billable_hours": [280, 10],
    })

    result = utilization_table(df)

    assert result["total_available_hours"].tolist() == [400.0, 0.0]
    assert result["utilization_pct"].tolist() == pytest.approx([70.0, 0.0])


def test_worksheets_never_produce_nan_or_inf():
    df = pd.DataFrame({
        "revenue": [0, np.nan, np.inf],
        "cogs": [np.nan, 0, 1],
    })

    result = gm_by_service(df)

    assert np.isfinite(result["gm_pct"]).all()
    assert np.isfinite(result["gm_dollars"]).all()
