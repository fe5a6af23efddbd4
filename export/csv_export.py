"""Tabular views of a budget result for CSV download and charts."""
from __future__ import annotations

import io
from typing import Iterable

import pandas as pd

from core.calculators import effective_monthly_cost, is_valid_item, monthly_equivalent
from core.models import BudgetResult, CostItem


def loans_frame(result: BudgetResult) -> pd.DataFrame:
    cols = ["Name", "RateType", "Principal", "RatePct", "AmortizationPct", "MonthlyInterest", "MonthlyAmortization", "TotalMonthlyCost"]
    if result.snapshot is None:
        return pd.DataFrame(columns=cols)
    return pd.DataFrame(
        [
            {
                "Name": r.name,
                "RateType": r.rate_type,
                "Principal": r.principal,
                "RatePct": r.annual_interest_rate_pct,
                "AmortizationPct": r.amortization_pct,
                "MonthlyInterest": r.monthly_interest,
                "MonthlyAmortization": r.monthly_amortization,
                "TotalMonthlyCost": r.total_monthly_cost,
            }
            for r in result.snapshot.loans
        ],
        columns=cols,
    )


def cost_summary_frame(result: BudgetResult, cost_items: Iterable[CostItem]) -> pd.DataFrame:
    """One row per monthly outgoing: the mortgage first, then each cost item.

    ``Amount`` is what the household pays (shared items halved) and
    ``OriginalAmount`` the full monthly equivalent before splitting.
    """

    cols = ["Label", "Amount", "OriginalAmount", "Annual"]
    if result.snapshot is None:
        return pd.DataFrame(columns=cols)
    loan_cost = result.snapshot.totals.total_monthly_cost
    rows = [{"Label": "Mortgage", "Amount": loan_cost, "OriginalAmount": loan_cost}]
    for item in cost_items:
        if not is_valid_item(item):
            continue
        label = item.name + (" (your share)" if item.share_with_other else "")
        rows.append(
            {
                "Label": label,
                "Amount": effective_monthly_cost(item),
                "OriginalAmount": monthly_equivalent(item.amount, item.frequency),
            }
        )
    out = pd.DataFrame(rows, columns=cols[:-1])
    out["Annual"] = out["Amount"] * 12
    return out[cols]


def forecast_frame(result: BudgetResult) -> pd.DataFrame:
    """Amortization and savings forecasts side by side, indexed by year.

    The two horizons may differ; missing years are left empty.
    """

    loans = pd.DataFrame(
        [r.model_dump() for r in result.forecast_rows],
        columns=["year", "remaining_principal", "loan_to_value"],
    )
    savings = pd.DataFrame(
        [r.model_dump() for r in result.savings_forecast_rows], columns=["year", "balance"]
    )
    if loans.empty:
        out = savings.assign(remaining_principal=None, loan_to_value=None)
    elif savings.empty:
        out = loans.assign(balance=None)
    else:
        out = loans.merge(savings, on="year", how="outer")
    out = out[["year", "remaining_principal", "loan_to_value", "balance"]].sort_values("year")
    out = out.rename(
        columns={
            "year": "Year",
            "remaining_principal": "RemainingPrincipal",
            "loan_to_value": "LoanToValue",
            "balance": "SavingsBalance",
        }
    )
    return out.reset_index(drop=True)


def summary_frame(result: BudgetResult) -> pd.DataFrame:
    snap = result.snapshot
    if snap is None:
        return pd.DataFrame(columns=["Field", "Value"])
    fut = result.future_scenario
    req = result.amortization_requirement
    rows = {
        "NetIncome": snap.net_income,
        "IncomeForPlan": snap.income_for_plan,
        "InterestDeductionMonthly": snap.interest_deduction_monthly,
        "LoanAmount": snap.totals.loan_amount,
        "MonthlyInterest": snap.totals.monthly_interest,
        "MonthlyAmortization": snap.totals.monthly_amortization,
        "LoanMonthlyCost": snap.totals.total_monthly_cost,
        "ExtraMonthlyTotal": snap.extra_monthly_total,
        "SavingsMonthlyTotal": snap.savings_monthly_total,
        "CombinedMonthlyPlan": snap.combined_monthly_plan,
        "IncomeShare": snap.income_share,
        "RemainingIncome": snap.remaining_income,
        "LoanToValue": snap.loan_to_value,
        "RequiredAmortizationPct": req.percent if req else None,
        "FutureAmortizationPct": fut.percent_value if fut else None,
        "FutureCombinedPlan": fut.combined_plan if fut else None,
        "FutureLeftover": fut.leftover if fut else None,
    }
    return pd.DataFrame([{"Field": k, "Value": v} for k, v in rows.items()])


def make_csv_bytes(result: BudgetResult, cost_items: Iterable[CostItem] = ()) -> bytes:
    buf = io.StringIO()
    summary_frame(result).to_csv(buf, index=False)
    buf.write("\n")
    loans_frame(result).to_csv(buf, index=False)
    buf.write("\n")
    cost_summary_frame(result, cost_items).to_csv(buf, index=False)
    buf.write("\n")
    forecast_frame(result).to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")
