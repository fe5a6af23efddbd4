import streamlit as st

from core.calculators import (
    broadband_monthly_cost,
    electricity_monthly_cost,
    extra_monthly_total,
    savings_monthly_total,
)
from core.inputs import normalize_cost, normalize_savings
from core.models import Broadband, ElectricityUsage
from core.presets import DEFAULT_CATEGORIES, FREQUENCY_LABELS
from core.utils import parse_number
from ui.components import fmt_kr

FREQUENCIES = list(FREQUENCY_LABELS.keys())


def _frequency_select(label, current, key, col):
    current = current if current in FREQUENCIES else "monthly"
    return col.selectbox(label, FREQUENCIES, index=FREQUENCIES.index(current), format_func=FREQUENCY_LABELS.get, key=key)


def _render_items(state_key: str, title: str, shared: bool):
    st.session_state.setdefault(state_key, [])
    items = st.session_state[state_key]
    st.subheader(title)
    if st.button(f"Add {title[:-1] if title.endswith('s') else title}", key=f"add_{state_key}"):
        item = {"name": "", "amount": 0.0, "frequency": "monthly"}
        if shared:
            item.update({"share_with_other": False, "category_id": next(iter(DEFAULT_CATEGORIES))})
        items.append(item)
    for idx, item in enumerate(list(items)):
        c1, c2, c3, c4 = st.columns([3, 2, 2, 1])
        item["name"] = c1.text_input("Name", value=item.get("name", ""), key=f"{state_key}_{idx}_name")
        item["amount"] = c2.number_input("Amount", min_value=0.0, value=float(item.get("amount") or 0.0), step=100.0, key=f"{state_key}_{idx}_amount")
        item["frequency"] = _frequency_select("Frequency", item.get("frequency"), f"{state_key}_{idx}_freq", c3)
        if shared:
            cats = list(DEFAULT_CATEGORIES.keys())
            cat = item.get("category_id") if item.get("category_id") in cats else cats[0]
            item["category_id"] = c1.selectbox("Category", cats, index=cats.index(cat), format_func=DEFAULT_CATEGORIES.get, key=f"{state_key}_{idx}_cat")
            item["share_with_other"] = c2.checkbox("Shared (count half)", value=bool(item.get("share_with_other")), key=f"{state_key}_{idx}_shared")
        if c4.button("Remove", key=f"{state_key}_remove_{idx}"):
            items.pop(idx)
            st.rerun()
    return items


def render_costs_section():
    """Recurring costs, savings and housing extras with their monthly totals."""
    costs = _render_items("cost_items", "Costs", shared=True)
    savings = _render_items("savings_items", "Savings", shared=False)

    with st.expander("Property & housing extras"):
        prop = st.session_state.setdefault("property_info", {"name": "", "value": 0.0})
        prop["name"] = st.text_input("Property", value=prop.get("name", ""), key="property_name")
        prop["value"] = st.number_input("Property value", min_value=0.0, value=float(prop.get("value") or 0.0), step=50000.0, key="property_value")
        el = st.session_state.setdefault("electricity", {"annual_kwh": 0.0, "price_per_kwh": 0.0})
        c1, c2 = st.columns(2)
        el["annual_kwh"] = c1.number_input("Electricity kWh / year", min_value=0.0, value=float(el.get("annual_kwh") or 0.0), step=500.0, key="el_kwh")
        el["price_per_kwh"] = c2.number_input("Price per kWh", min_value=0.0, value=float(el.get("price_per_kwh") or 0.0), step=0.1, key="el_price")
        st.caption(f"Electricity: {fmt_kr(electricity_monthly_cost(ElectricityUsage(**el)))} / month")
        bb = st.session_state.setdefault("broadband", {"cost": 0.0, "frequency": "monthly"})
        bb["cost"] = c1.number_input("Broadband cost", min_value=0.0, value=float(bb.get("cost") or 0.0), step=50.0, key="bb_cost")
        bb["frequency"] = c2.selectbox("Broadband billed", ["monthly", "yearly"], index=1 if bb.get("frequency") == "yearly" else 0, key="bb_freq")
        st.caption(f"Broadband: {fmt_kr(broadband_monthly_cost(Broadband(**bb)))} / month")
        st.session_state["property_insurance_annual"] = st.number_input(
            "Home insurance premium / year",
            min_value=0.0,
            value=float(parse_number(st.session_state.get("property_insurance_annual")) or 0.0),
            step=500.0,
            key="insurance_annual",
        )

    extra = extra_monthly_total(
        [normalize_cost(c, i) for i, c in enumerate(costs)],
        ElectricityUsage(**el),
        Broadband(**bb),
        st.session_state["property_insurance_annual"],
    )
    saved = savings_monthly_total(normalize_savings(s, i) for i, s in enumerate(savings))
    st.markdown(f"**Other Costs / Month:** {fmt_kr(extra)} • **Savings / Month:** {fmt_kr(saved)}")
