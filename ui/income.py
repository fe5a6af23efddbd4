import streamlit as st

from core.calculators import income_breakdown
from core.inputs import normalize_person
from core.presets import TAX_TABLES
from ui.components import fmt_kr


def _new_person(idx: int) -> dict:
    return {"name": f"Person {idx + 1}", "gross_monthly_income": 0.0, "tax_table_id": "30", "pre_tax_deduction": 0.0}


def render_income_section():
    """Income cards per person with the household gross, tax and net."""
    st.session_state.setdefault("persons", [_new_person(0)])
    if st.button("Add Person", key="add_person"):
        st.session_state.persons.append(_new_person(len(st.session_state.persons)))
    table_ids = list(TAX_TABLES.keys())
    for idx, p in enumerate(list(st.session_state.persons)):
        with st.expander(f"Income #{idx+1} · {p.get('name') or 'Person'}", expanded=True):
            c1, c2 = st.columns(2)
            p["name"] = c1.text_input("Name", value=p.get("name", ""), key=f"person_{idx}_name")
            p["gross_monthly_income"] = c2.number_input(
                "Gross monthly income",
                min_value=0.0,
                value=float(p.get("gross_monthly_income") or 0.0),
                step=500.0,
                key=f"person_{idx}_gross",
            )
            current = str(p.get("tax_table_id", "30"))
            p["tax_table_id"] = c1.selectbox(
                "Tax table",
                table_ids,
                index=table_ids.index(current) if current in table_ids else table_ids.index("30"),
                format_func=lambda k: TAX_TABLES[k]["label"],
                key=f"person_{idx}_table",
            )
            p["pre_tax_deduction"] = c2.number_input(
                "Pre-tax deduction (e.g. car benefit)",
                min_value=0.0,
                value=float(p.get("pre_tax_deduction") or 0.0),
                step=100.0,
                key=f"person_{idx}_deduction",
            )
            if len(st.session_state.persons) > 1 and st.button("Remove", key=f"person_remove_{idx}"):
                st.session_state.persons.pop(idx)
                st.rerun()
    breakdown = income_breakdown(normalize_person(p, i) for i, p in enumerate(st.session_state.persons))
    cols = st.columns(3)
    cols[0].metric("Gross", fmt_kr(breakdown.total_gross))
    cols[1].metric("Tax", fmt_kr(breakdown.total_tax))
    cols[2].metric("Net", fmt_kr(breakdown.net_income))
