import streamlit as st
from datetime import datetime

from core.logging_config import setup_logging
from core.repository import StateRepository
from core.storage import get_store
from services.roadmap_service import RoadmapService
from components.ui_components import (
    render_sidebar,
    render_metrics_page,
    render_assessment_page,
    render_checklist_page,
    render_kpi_page,
    render_planning_page
)

logger = setup_logging()

# Set page configuration
st.set_page_config(
    page_title="MSP Revenue Roadmap",
    page_icon="🧭",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main .block-container {
        padding-top: 2rem;
        padding-bottom: 2rem;
    }
    h1, h2, h3 {
        color: #1E3A8A;
    }
    .stButton>button {
        background-color: #1E3A8A;
        color: white;
        border-radius: 6px;
        padding: 0.5rem 1rem;
        font-weight: 500;
    }
    .card {
        background-color: #F8FAFC;
        border-radius: 0.5rem;
        padding: 1.5rem;
        margin-bottom: 1rem;
        border: 1px solid #E2E8F0;
        box-shadow: 0 1px 3px rgba(0,0,0,0.1);
    }
    .metric-card {
        background-color: #EFF6FF;
        border-radius: 0.5rem;
        padding: 1rem;
        margin-bottom: 1rem;
        text-align: center;
        border: 1px solid #BFDBFE;
    }
    .metric-value {
        font-size: 1.5rem;
        font-weight: bold;
        color: #1E3A8A;
    }
    .metric-label {
        font-size: 0.875rem;
        color: #64748B;
    }
    .rating-good, .risk-low { color: #16A34A !important; }
    .rating-warn, .risk-medium { color: #CA8A04 !important; }
    .rating-risk, .risk-high { color: #DC2626 !important; }
</style>
""", unsafe_allow_html=True)

def get_service():
    # The store lives in the session so an in-memory backend survives reruns
    if 'roadmap_store' not in st.session_state:
        st.session_state.roadmap_store = get_store()
    return RoadmapService(StateRepository(st.session_state.roadmap_store))

def main():
    page = render_sidebar()
    service = get_service()

    if "Metrics Calculator" in page:
        render_metrics_page(service)
    elif "Phase Assessment" in page:
        render_assessment_page(service)
    elif "Phase Checklists" in page:
        render_checklist_page(service)
    elif "KPI Worksheets" in page:
        render_kpi_page()
    elif "Planning" in page:
        render_planning_page()

# --- Footer ---
def render_footer():
    st.markdown(f"""
    <hr style='margin: 2rem 0;'>
    <div style='padding: 1rem; text-align: center; font-size: 0.8rem; color: #64748B;'>
        MSP Revenue Roadmap © {datetime.now().year}
    </div>
    """, unsafe_allow_html=True)

# Main execution
if __name__ == "__main__":
    try:
        main()
        render_footer()
    except Exception as e:
        logger.exception("Unhandled error while rendering the page")
        st.error(f"An unexpected error occurred: {str(e)}")
