import copy
import streamlit as st

from core.calculators import active_loans, loan_row, loan_totals
from core.inputs import normalize_loans
from core.presets import DEFAULT_AMORTIZATION_PCT, DEFAULT_FIXED_TERM_YEARS, MAX_LOANS
from ui.components import fmt_kr

LOAN_TEMPLATE = {
    "name": "",
    "principal": 0.0,
    "annual_interest_rate_pct": 0.0,
    "amortization_pct": DEFAULT_AMORTIZATION_PCT,
    "rate_type": "variable",
    "fixed_term_years": DEFAULT_FIXED_TERM_YEARS,
}


def _new_loan(idx: int) -> dict:
    loan = copy.deepcopy(LOAN_TEMPLATE)
    loan["name"] = f"Loan {idx + 1}"
    return loan


def render_loan_cards(max_loans: int = MAX_LOANS):
    st.session_state.setdefault("loans", [])
    loans = st.session_state.loans
    if st.button("Add Loan", key="add_loan", disabled=len(loans) >= max_loans):
        loans.append(_new_loan(len(loans)))
    for idx, loan in enumerate(list(loans)):
        with st.expander(f"Loan #{idx+1} · {loan.get('name') or 'Loan'}", expanded=True):
            c1, c2 = st.columns(2)
            loan["name"] = c1.text_input("Name", value=loan.get("name", ""), key=f"loan_{idx}_name")
            loan["principal"] = c2.number_input(
                "Loan amount", min_value=0.0, value=float(loan.get("principal") or 0.0), step=10000.0, key=f"loan_{idx}_principal"
            )
            loan["annual_interest_rate_pct"] = c1.number_input(
                "Interest rate %", min_value=0.0, value=float(loan.get("annual_interest_rate_pct") or 0.0), step=0.05, key=f"loan_{idx}_rate"
            )
            loan["amortization_pct"] = c2.number_input(
                "Amortization % per year", min_value=0.0, value=float(loan.get("amortization_pct") or 0.0), step=0.5, key=f"loan_{idx}_amort"
            )
            loan["rate_type"] = c1.radio(
                "Rate type", ["variable", "fixed"], index=1 if loan.get("rate_type") == "fixed" else 0, horizontal=True, key=f"loan_{idx}_type"
            )
            if loan["rate_type"] == "fixed":
                loan["fixed_term_years"] = int(
                    c2.number_input("Fixed term (years)", min_value=1, value=int(loan.get("fixed_term_years") or DEFAULT_FIXED_TERM_YEARS), key=f"loan_{idx}_term")
                )
            if st.button("Remove", key=f"loan_remove_{idx}"):
                loans.pop(idx)
                st.rerun()
    active = active_loans(normalize_loans(loans, max_loans), max_loans)
    rows = [loan_row(loan) for loan in active]
    totals = loan_totals(rows)
    st.caption(f"{len(active)} of {max_loans} loans active")
    st.markdown(f"**Total Monthly Loan Cost:** {fmt_kr(totals.total_monthly_cost)}")
