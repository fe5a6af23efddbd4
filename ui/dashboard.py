import streamlit as st

from core.models import BudgetResult
from core.presets import DEFAULT_RATE_SHOCK_PCT
from core.rules import evaluate_rules
from ui.components import fmt_kr, fmt_pct


def render_rules(result: BudgetResult):
    for r in evaluate_rules(result):
        if r.severity == "critical":
            st.error(f"[{r.code}] {r.message}")
        elif r.severity == "warn":
            st.warning(f"[{r.code}] {r.message}")
        else:
            st.info(f"[{r.code}] {r.message}")


def render_scenario_controls():
    """Scenario inputs; drawn before the budget is computed so a change applies on the same rerun."""
    st.header("Results & scenarios")
    c1, c2, c3 = st.columns(3)
    st.session_state["future_amortization_override"] = c1.text_input(
        "Future amortization % (blank = automatic)",
        value=str(st.session_state.get("future_amortization_override") or ""),
        key="future_override_input",
    )
    st.session_state["tax_adjustment_enabled"] = c2.toggle(
        "Include interest deduction in income",
        value=bool(st.session_state.get("tax_adjustment_enabled", False)),
        key="tax_adjustment_toggle",
    )
    current = st.session_state.get("rate_shock_delta_pct")
    st.session_state["rate_shock_delta_pct"] = c3.slider(
        "Change in variable rates (percentage points)", 0.0, 5.0,
        float(DEFAULT_RATE_SHOCK_PCT if current is None else current), 0.25, key="rate_shock_slider",
    )


def render_dashboard_view(result: BudgetResult):
    """Render budget metrics, scenarios and rule evaluations."""
    render_rules(result)
    snap = result.snapshot
    if snap is None:
        return
    view = st.radio("Scenario", ["current", "future"], horizontal=True, key="scenario_mode",
                    format_func={"current": "Today", "future": "After amortization step-down"}.get)
    fut = result.future_scenario
    if view == "future" and fut is not None:
        loan_cost, combined, leftover, share = fut.total_monthly_cost, fut.combined_plan, fut.leftover, fut.share
        st.caption(f"Amortization {fut.percent_value:.2f}% • {fmt_kr(abs(fut.difference_monthly))} "
                   f"{'more' if fut.difference_monthly > 0 else 'less' if fut.difference_monthly < 0 else 'unchanged'} per month")
    else:
        loan_cost, combined, leftover, share = snap.totals.total_monthly_cost, snap.combined_monthly_plan, snap.remaining_income, snap.income_share

    cols = st.columns(4)
    cols[0].metric("Income", fmt_kr(snap.income_for_plan))
    cols[1].metric("Loan cost", fmt_kr(loan_cost))
    cols[2].metric("Combined plan", fmt_kr(combined), delta=fmt_pct(share) if share is not None else None, delta_color="off")
    cols[3].metric("Remaining", fmt_kr(leftover))
    if leftover is not None:
        if leftover < 0:
            st.warning("Deficit: the plan exceeds net income.")
        else:
            st.success("Surplus: the plan fits within net income.")
    st.caption(f"Interest deduction: {fmt_kr(snap.interest_deduction_monthly)} / month")

    req = result.amortization_requirement
    if req is not None:
        st.markdown(f"**Amortization requirement:** {req.percent:.0f}% (loan-to-value {fmt_pct(req.ratio)})")

    st.subheader("Interest rate stress test")
    shock = result.rate_sensitivity
    if shock is None:
        st.caption("No variable-rate loans to stress.")
    else:
        s1, s2 = st.columns(2)
        s1.metric(f"Rates −{shock.delta_pct:.2f}", fmt_kr(shock.decrease.total), delta=f"{shock.decrease.diff:+,.0f} kr", delta_color="inverse")
        s2.metric(f"Rates +{shock.delta_pct:.2f}", fmt_kr(shock.increase.total), delta=f"{shock.increase.diff:+,.0f} kr", delta_color="inverse")
    fvv = result.fixed_vs_variable
    if fvv is not None:
        st.caption(f"Fixed-rate loans cost {fmt_kr(fvv.total_difference)} / month versus a variable rate of {fvv.reference_rate_pct:.2f}%.")
