import streamlit as st

from core.models import BudgetResult
from core.presets import (
    DEFAULT_FORECAST_YEARS,
    DEFAULT_SAVINGS_FORECAST_YEARS,
    FORECAST_YEARS_MAX,
    FORECAST_YEARS_MIN,
)
from export.csv_export import forecast_frame
from ui.components import fmt_kr


def render_forecast_controls():
    st.header("Forecast")
    c1, c2 = st.columns(2)
    st.session_state["forecast_years"] = c1.slider(
        "Years of amortization to show", FORECAST_YEARS_MIN, FORECAST_YEARS_MAX,
        int(st.session_state.get("forecast_years") or DEFAULT_FORECAST_YEARS), key="forecast_years_slider",
    )
    st.session_state["savings_forecast_years"] = c2.slider(
        "Years of savings to show", FORECAST_YEARS_MIN, FORECAST_YEARS_MAX,
        int(st.session_state.get("savings_forecast_years") or DEFAULT_SAVINGS_FORECAST_YEARS), key="savings_years_slider",
    )


def render_forecast_view(result: BudgetResult):
    df = forecast_frame(result).set_index("Year")
    if result.forecast_rows:
        st.line_chart(df["RemainingPrincipal"].dropna())
        last = result.forecast_rows[-1]
        st.caption(f"Year {last.year}: {fmt_kr(last.remaining_principal)} remaining")
    else:
        st.info("Amortization forecast not applicable (no amortizing loans).")
    if result.savings_forecast_rows:
        st.line_chart(df["SavingsBalance"].dropna())
        last = result.savings_forecast_rows[-1]
        st.caption(f"Savings reach {fmt_kr(last.balance)} after {last.year} years.")
