from datetime import date, timedelta

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from core.config import RevenueBand, SYSTEM_FLAGS, RATING_GOOD, RATING_WARN, RATING_RISK
from core.exceptions import CatalogMismatchError
from models.planning import BackwardPlanInputs, CashForecastInputs
from models.assessment import SYSTEM_FORM_FIELDS
from models.metrics import FORM_FIELDS
from services.checklist_service import CHECKLIST_CATALOG, get_checklist_items
from services.kpi_service import kpi_table, cac_ltv_table, gm_by_service, utilization_table, ar_dso_table
from services.planning_service import backward_plan, cash_forecast
from utils.formatting import format_metric, format_currency

RATING_CLASSES = {
    RATING_GOOD: "rating-good",
    RATING_WARN: "rating-warn",
    RATING_RISK: "rating-risk",
}

RISK_CLASSES = {
    "High Risk": "risk-high",
    "Medium Risk": "risk-medium",
    "Low Risk": "risk-low",
}

METRIC_FIELDS = [
    ("arr", "ARR (USD)", 0.0),
    ("mrr", "MRR (USD)", 0.0),
    ("mrrClients", "MRR clients", 0.0),
    ("serviceRevenue", "Service revenue, monthly (USD)", 0.0),
    ("serviceCogs", "Service COGS, monthly (USD)", 0.0),
    ("marketingSpend", "Sales and marketing spend this period (USD)", 0.0),
    ("newClients", "New clients this period", 0.0),
    ("retentionMonths", "Average retention (months)", 0.0),
    ("arBalance", "AR balance today (USD)", 0.0),
    ("revenue90d", "Revenue last 90 days (USD)", 0.0),
    ("fteCount", "FTE count", 0.0),
    ("availableHours", "Available hours per FTE per week", 40.0),
    ("billableHours", "Billable hours last week", 0.0),
]

METRIC_LABELS = {
    "avg_mrr_per_client": "Avg MRR per Client",
    "service_gm_pct": "Service GM %",
    "cac": "CAC",
    "ltv": "LTV",
    "ltv_cac_ratio": "LTV / CAC",
    "dso": "DSO",
    "staff_to_revenue_ratio": "Revenue per FTE",
    "utilization_pct": "Utilization %",
}

def render_sidebar():
    with st.sidebar:
        st.markdown('<div class="sidebar-header">', unsafe_allow_html=True)
        st.title("🧭 MSP Revenue Roadmap")
        st.markdown('</div>', unsafe_allow_html=True)
        st.markdown("### Navigation")
        page = st.radio("Navigation", [
            "📈 Metrics Calculator",
            "🧭 Phase Assessment",
            "✅ Phase Checklists",
            "📊 KPI Worksheets",
            "🗓️ Planning",
        ], key="main_nav", label_visibility="collapsed")
        st.markdown("---")
        st.markdown(f"<div style='text-align: center; padding: 1rem; font-size: 0.8rem; color: #64748B;'>{date.today().strftime('%B %d, %Y')}</div>", unsafe_allow_html=True)
    return page

def render_metrics_page(service):
    st.markdown("# 📈 Metrics Calculator")
    saved = service.load_metrics()
    saved_inputs = saved.inputs.to_dict() if saved else {}

    raw = {}
    cols = st.columns(3)
    for idx, (field_id, label, default) in enumerate(METRIC_FIELDS):
        current = saved_inputs.get(FORM_FIELDS[field_id]) or default
        with cols[idx % 3]:
            raw[field_id] = st.number_input(label, min_value=0.0, value=float(current), key=f"metric_{field_id}")

    snapshot = service.update_metrics(raw)
    results = snapshot.results.to_dict()

    st.markdown("### Results")
    result_cols = st.columns(4)
    for idx, (name, label) in enumerate(METRIC_LABELS.items()):
        css_class = RATING_CLASSES.get(snapshot.ratings.get(name), "")
        with result_cols[idx % 4]:
            st.markdown(f"""
            <div class="metric-card">
                <div class="metric-value {css_class}">{format_metric(name, results[name])}</div>
                <div class="metric-label">{label}</div>
            </div>
            """, unsafe_allow_html=True)

def render_assessment_page(service):
    st.markdown("# 🧭 Phase Assessment")
    st.markdown("<div class='card'><h4>Business Snapshot</h4>", unsafe_allow_html=True)
    with st.form("assessment_form"):
        form = {"revenueBand": st.selectbox("Revenue band", RevenueBand.values())}
        col1, col2 = st.columns(2)
        with col1:
            form["clientCount"] = st.number_input("Client count", min_value=0, step=1)
        with col2:
            form["avgMRR"] = st.number_input("Average MRR per client (USD)", min_value=0, step=100)
        st.markdown("#### Core systems in place")
        attr_to_form = {attr: form_id for form_id, attr in SYSTEM_FORM_FIELDS.items()}
        for name, label, _ in SYSTEM_FLAGS:
            form[attr_to_form[name]] = st.checkbox(label, key=f"system_{name}")
        submitted = st.form_submit_button("Assess my phase")
    st.markdown("</div>", unsafe_allow_html=True)

    result = service.submit_assessment(form) if submitted else service.load_assessment()
    if result is None:
        st.info("Complete the form to see your phase, risk level and reading plan.")
        return
    display_assessment_result(result)

def display_assessment_result(result):
    if not result.is_classified:
        st.error(result.error)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Phase", result.phase_label)
    with col2:
        st.metric("Pages to read", result.page_range or "-")
    with col3:
        st.markdown(f"""
        <div class="metric-card">
            <div class="metric-value {RISK_CLASSES[result.risk_label]}">{result.risk_label}</div>
            <div class="metric-label">{result.risk_description}</div>
        </div>
        """, unsafe_allow_html=True)

    st.markdown(f"**Red flags:** {result.red_flags} of {len(SYSTEM_FLAGS)} core systems missing")
    st.markdown("### Recommendations")
    for recommendation in result.recommendations:
        st.markdown(f"- {recommendation}")

def checklist_widget_key(phase, item_id):
    return f"phase{phase}_{item_id}"

def reset_checklist(service, phase, widget_state):
    """Clear stored progress and the checkbox states, which would otherwise
    re-check every item on the next run."""
    progress = service.checklists.reset(phase)
    for item in get_checklist_items(phase):
        widget_state.pop(checklist_widget_key(phase, item.id), None)
    return progress

def render_checklist_page(service):
    st.markdown("# ✅ Phase Checklists")
    assessment = service.load_assessment()
    default_phase = assessment.phase if assessment and assessment.phase else 1
    phases = list(CHECKLIST_CATALOG)
    phase = st.selectbox("Phase", phases, index=phases.index(default_phase) if default_phase in phases else 0, format_func=lambda p: f"Phase {p}")

    progress = service.checklists.get_progress(phase)
    for item in get_checklist_items(phase):
        checked = st.checkbox(item.text, value=progress.items[item.id], key=checklist_widget_key(phase, item.id))
        if checked != progress.items[item.id]:
            try:
                progress = service.checklists.toggle_item(phase, item.id)
            except CatalogMismatchError as e:
                st.error(str(e))

    st.progress(progress.ratio)
    st.markdown(f"**{progress.completed} / {progress.total}** items complete")

    if st.button("Reset this checklist"):
        reset_checklist(service, phase, st.session_state)
        st.rerun()

    all_progress = service.checklists.get_all_progress()
    chart_df = pd.DataFrame({
        "phase": [f"Phase {p}" for p in all_progress],
        "completed": [p.completed for p in all_progress.values()],
        "remaining": [p.total - p.completed for p in all_progress.values()],
    })
    fig = px.bar(chart_df, x="phase", y=["completed", "remaining"], title="Checklist progress by phase",
                 color_discrete_sequence=["#0D9488", "#E2E8F0"])
    st.plotly_chart(fig, use_container_width=True)

def render_kpi_page():
    st.markdown("# 📊 KPI Worksheets")
    tab_kpi, tab_cac, tab_gm, tab_util, tab_ar = st.tabs(
        ["Monthly KPIs", "CAC / LTV", "GM by Service", "Utilization", "AR / DSO"])

    with tab_kpi:
        kpi_df = st.data_editor(
            pd.DataFrame({
                "date": [date.today().strftime("%Y-%m")], "revenue": [0.0], "mrr": [0.0],
                "new_clients": [0.0], "churned_clients": [0.0], "service_revenue": [0.0],
                "service_cogs": [0.0], "ar_balance": [0.0], "ftes": [0.0],
                "utilization_pct": [0.0], "sla_attainment_pct": [0.0],
            }),
            num_rows="dynamic", key="kpi_editor")
        kpi_result = kpi_table(kpi_df)
        st.dataframe(kpi_result, use_container_width=True)
        if len(kpi_result) > 1:
            st.line_chart(kpi_result.set_index("date")[["service_gm_pct", "dso"]])

    with tab_cac:
        cac_df = st.data_editor(
            pd.DataFrame({
                "period": [date.today().strftime("%Y-%m")], "spend": [0.0], "new_clients": [0.0],
                "avg_mrr_per_new_client": [0.0], "service_gm_pct": [0.0], "retention_months": [0.0],
            }),
            num_rows="dynamic", key="cac_editor")
        st.dataframe(cac_ltv_table(cac_df), use_container_width=True)

    with tab_gm:
        services_df = st.data_editor(
            pd.DataFrame({"service": ["Managed services", "Projects"], "revenue": [0.0, 0.0], "cogs": [0.0, 0.0]}),
            num_rows="dynamic", key="gm_editor")
        st.dataframe(gm_by_service(services_df), use_container_width=True)

    with tab_util:
        week = date.today() - timedelta(days=date.today().weekday())
        util_df = st.data_editor(
            pd.DataFrame({"week_start": [week], "fte_count": [0.0], "available_hours_per_fte": [40.0], "billable_hours": [0.0]}),
            num_rows="dynamic", key="util_editor")
        st.dataframe(utilization_table(util_df), use_container_width=True)

    with tab_ar:
        ar_df = st.data_editor(
            pd.DataFrame({"month": [date.today().strftime("%Y-%m")], "revenue": [0.0], "collections": [0.0], "ending_ar": [0.0]}),
            num_rows="dynamic", key="ar_editor")
        ar_result = ar_dso_table(ar_df)
        st.dataframe(ar_result, use_container_width=True)
        if len(ar_result) > 1:
            st.line_chart(ar_result.set_index("month")["dso"])

def render_planning_page():
    st.markdown("# 🗓️ Planning")
    tab_backward, tab_cash = st.tabs(["Backward Plan", "90-Day Cash"])

    with tab_backward:
        col1, col2 = st.columns(2)
        with col1:
            target_arr = st.number_input("Target ARR at exit", min_value=0.0, value=10_000_000.0)
            target_date = st.date_input("Target date", value=date.today() + timedelta(days=3 * 365))
            current_arr = st.number_input("Current ARR", min_value=0.0, value=5_000_000.0)
            current_mrr = st.number_input("Current MRR", min_value=0.0, value=current_arr / 12)
            arpa = st.number_input("ARPA (monthly)", min_value=0.0, value=2_500.0)
        with col2:
            revenue_churn = st.number_input("Revenue churn rate (monthly)", min_value=0.0, max_value=1.0, value=0.01)
            am_expansion = st.number_input("AM expansion rate (monthly)", min_value=0.0, max_value=1.0, value=0.01)
            win_rate = st.number_input("Win rate", min_value=0.0, max_value=1.0, value=0.25)
        plan = backward_plan(BackwardPlanInputs(
            target_arr=target_arr, target_date=target_date, current_arr=current_arr,
            current_mrr=current_mrr, arpa=arpa,
            revenue_churn_rate=revenue_churn, am_expansion_rate=am_expansion, win_rate=win_rate))
        cols = st.columns(4)
        cols[0].metric("Months to target", plan.months_to_target)
        cols[1].metric("Net-new MRR needed", format_currency(plan.net_new_mrr_needed))
        cols[2].metric("Net-new clients needed", f"{plan.net_new_clients_needed:,.1f}")
        cols[3].metric("Pipeline needed (3x)", f"{plan.pipeline_needed:,.1f}")

    with tab_cash:
        col1, col2 = st.columns(2)
        with col1:
            starting_cash = st.number_input("Starting cash", min_value=0.0, value=250_000.0)
            starting_ar = st.number_input("Starting AR", min_value=0.0, value=150_000.0)
            current_dso = st.number_input("Current DSO (days)", min_value=0.0, value=35.0)
            one_time = st.number_input("One-time investments", min_value=0.0, value=0.0)
        with col2:
            mrr = st.number_input("Monthly recurring revenue", min_value=0.0, value=400_000.0)
            project_revenue = st.number_input("Monthly project revenue", min_value=0.0, value=50_000.0)
            cogs = st.number_input("Monthly COGS", min_value=0.0, value=180_000.0)
            opex = st.number_input("Monthly OpEx", min_value=0.0, value=200_000.0)
        forecast = cash_forecast(CashForecastInputs(
            starting_cash=starting_cash, starting_ar=starting_ar, current_dso=current_dso,
            monthly_recurring_revenue=mrr, monthly_project_revenue=project_revenue,
            monthly_cogs=cogs, monthly_opex=opex, one_time_investments=one_time))
        cols = st.columns(3)
        cols[0].metric("Ending cash", format_currency(forecast.ending_cash))
        cols[1].metric("Ending AR", format_currency(forecast.ending_ar))
        cols[2].metric("Runway (months)", f"{forecast.runway_months:,.1f}")

        fig = go.Figure(go.Bar(
            x=[f"Month {m.month}" for m in forecast.months],
            y=[m.closing_cash for m in forecast.months],
            marker_color="#1E3A8A"))
        fig.update_layout(title="Closing cash by month", yaxis_title="USD")
        st.plotly_chart(fig, use_container_width=True)
