import streamlit as st

from core.config import EngineConfig
from core.inputs import normalize_request
from core.models import BudgetRequest

REQUEST_KEYS = (
    "persons",
    "net_income",
    "loans",
    "cost_items",
    "savings_items",
    "property_info",
    "electricity",
    "broadband",
    "property_insurance_annual",
    "future_amortization_override",
    "rate_shock_delta_pct",
    "forecast_years",
    "savings_forecast_years",
)


def fmt_kr(value) -> str:
    if value is None:
        return "–"
    return f"{value:,.0f} kr".replace(",", " ")


def fmt_pct(value) -> str:
    if value is None:
        return "–"
    return f"{value * 100:.1f}%"


def engine_config() -> EngineConfig:
    base = st.session_state.get("engine_config") or EngineConfig()
    return base.model_copy(
        update={"tax_adjustment_enabled": bool(st.session_state.get("tax_adjustment_enabled", False))}
    )


def current_request() -> BudgetRequest:
    """Engine request built from whatever the user has entered so far."""
    raw = {k: st.session_state.get(k) for k in REQUEST_KEYS}
    return normalize_request(raw, engine_config().max_loans)
