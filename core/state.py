import json
import logging
import os
from typing import Any

import streamlit as st

logger = logging.getLogger(__name__)

SESSION_FILE = "session_data.json"

# Only persist a curated subset of ``st.session_state`` keys. Streamlit
# widgets such as buttons inject their own keys (e.g. ``add_loan``) into
# ``session_state`` when interacted with, and assigning to those keys on the
# next run raises ``StreamlitAPIException``.
PERSISTED_KEYS = {
    "nav",
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
    "tax_adjustment_enabled",
}


def _serializable(value: Any) -> bool:
    return isinstance(value, (int, float, str, bool, list, dict))


def load_state() -> None:
    """Restore Streamlit session state from ``SESSION_FILE`` if it exists."""
    if not os.path.exists(SESSION_FILE):
        return
    try:
        with open(SESSION_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not read session file %s: %s", SESSION_FILE, e)
        return
    if not isinstance(data, dict):
        logger.warning("Ignoring session file %s: expected a JSON object", SESSION_FILE)
        return
    for key, val in data.items():
        if key in PERSISTED_KEYS:
            st.session_state.setdefault(key, val)


def save_state() -> None:
    """Persist serializable session state to ``SESSION_FILE``."""
    data = {
        k: v
        for k, v in st.session_state.items()
        if k in PERSISTED_KEYS and _serializable(v)
    }
    try:
        with open(SESSION_FILE, "w", encoding="utf-8") as f:
            json.dump(data, f)
    except (OSError, TypeError, ValueError) as e:
        logger.warning("Could not write session file %s: %s", SESSION_FILE, e)
