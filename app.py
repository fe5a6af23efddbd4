import streamlit as st

from core.config import configure_logging, load_settings
from core.engine import compute_budget
from core import state
from core.version import __version__
from ui.components import current_request, engine_config, fmt_kr, fmt_pct
from ui.costs import render_costs_section
from ui.dashboard import render_dashboard_view, render_scenario_controls
from ui.exports import render_exports_view
from ui.forecast import render_forecast_controls, render_forecast_view
from ui.income import render_income_section
from ui.loans import render_loan_cards

st.set_page_config(page_title="Household Mortgage Budget", layout="wide")


def init_state():
    if "engine_config" in st.session_state:
        return
    settings = load_settings()
    configure_logging(settings.log_level)
    state.SESSION_FILE = settings.session_file
    st.session_state["engine_config"] = settings.engine
    st.session_state.setdefault("tax_adjustment_enabled", settings.engine.tax_adjustment_enabled)
    state.load_state()


def render_sidebar(result):
    snap = result.snapshot
    st.sidebar.markdown(f"**Household Mortgage Budget v{__version__}**")
    if snap is None:
        st.sidebar.caption("Add a loan to see the budget.")
        return
    st.sidebar.metric("Combined plan / month", fmt_kr(snap.combined_monthly_plan))
    st.sidebar.metric("Share of income", fmt_pct(snap.income_share))
    st.sidebar.metric("Remaining", fmt_kr(snap.remaining_income))


init_state()

steps = ["Income", "Loans", "Costs & savings", "Results", "Forecast", "Exports"]
nav = st.sidebar.radio("Navigate", steps, key="nav")

st.title("HOUSEHOLD MORTGAGE BUDGET")
st.caption("Net income • Loans & amortization requirement • Step-down and rate scenarios • Forecasts")

if nav == "Income":
    render_income_section()
elif nav == "Loans":
    render_loan_cards(engine_config().max_loans)
elif nav == "Costs & savings":
    render_costs_section()
elif nav == "Results":
    render_scenario_controls()
elif nav == "Forecast":
    render_forecast_controls()

# Widgets above have written the latest inputs into session state; the
# snapshot is recomputed from scratch on every rerun.
request = current_request()
result = compute_budget(request, engine_config())

if nav == "Results":
    render_dashboard_view(result)
elif nav == "Forecast":
    render_forecast_view(result)
elif nav == "Exports":
    render_exports_view(result, request.cost_items)

render_sidebar(result)
state.save_state()
