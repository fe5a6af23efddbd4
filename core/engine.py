"""Budget aggregation: the single place where all calculators are composed."""
from __future__ import annotations

import logging
from typing import Optional

from core.calculators import (
    active_loans,
    amortization_forecast,
    amortization_requirement,
    extra_monthly_total,
    fixed_vs_variable,
    future_amortization_percent,
    future_scenario,
    income_breakdown,
    interest_deduction_monthly,
    is_active_loan,
    is_valid_item,
    loan_averages,
    loan_row,
    loan_totals,
    rate_sensitivity,
    savings_forecast,
    savings_monthly_total,
    shared_costs,
)
from core.config import EngineConfig
from core.models import BudgetRequest, BudgetResult, BudgetSnapshot, IncomeBreakdown
from core.presets import DEFAULT_RATE_SHOCK_PCT
from core.utils import is_finite, safe_ratio

logger = logging.getLogger(__name__)


def _household_income(request: BudgetRequest, config: EngineConfig) -> IncomeBreakdown:
    if request.persons:
        return income_breakdown(request.persons, config.default_tax_table_id)
    net = request.net_income if is_finite(request.net_income) and request.net_income > 0 else None
    return IncomeBreakdown(total_net=net or 0.0, net_income=net)


def _excluded_ids(request: BudgetRequest, config: EngineConfig) -> tuple:
    excluded = [loan.id for loan in request.loans[: config.max_loans] if not is_active_loan(loan)]
    excluded += [loan.id for loan in request.loans[config.max_loans:]]
    excluded += [c.id for c in request.cost_items if not is_valid_item(c)]
    excluded += [s.id for s in request.savings_items if not is_valid_item(s)]
    return tuple(excluded)


def compute_budget(request: BudgetRequest, config: Optional[EngineConfig] = None) -> BudgetResult:
    """Compute the monthly budget snapshot and its scenarios.

    The function is pure: it never raises for bad field values and keeps no
    state between calls.  Invalid entries are left out and listed in
    ``excluded``; without any usable loan the result has status
    ``"insufficient_data"`` and no snapshot.  Income is optional, but without
    it every share and leftover field is ``None``.
    """

    config = config or EngineConfig()
    income = _household_income(request, config)
    excluded = _excluded_ids(request, config)
    if excluded:
        logger.debug("Excluded invalid entries from budget: %s", ", ".join(excluded))

    savings_total = savings_monthly_total(request.savings_items)
    savings_rows = tuple(
        savings_forecast(savings_total, request.savings_forecast_years, config.savings_growth_rate)
    )

    loans = active_loans(request.loans, config.max_loans)
    if not loans:
        logger.debug("No active loans; budget snapshot not computable yet")
        return BudgetResult(
            status="insufficient_data",
            income=income,
            savings_forecast_rows=savings_rows,
            excluded=excluded,
        )

    rows = tuple(loan_row(loan) for loan in loans)
    totals = loan_totals(rows)
    averages = loan_averages(totals)
    extra_total = extra_monthly_total(
        request.cost_items,
        request.electricity,
        request.broadband,
        request.property_insurance_annual,
    )
    combined = totals.total_monthly_cost + extra_total + savings_total

    deduction = interest_deduction_monthly(totals.monthly_interest)
    net_income = income.net_income
    income_for_plan = None
    if net_income is not None:
        income_for_plan = net_income + (deduction if config.tax_adjustment_enabled else 0.0)

    remaining = income_for_plan - combined if income_for_plan is not None else None
    property_value = request.property_info.value if request.property_info else None
    status = None
    if remaining is not None:
        status = "deficit" if remaining < 0 else "surplus"

    snapshot = BudgetSnapshot(
        net_income=net_income,
        income_for_plan=income_for_plan,
        interest_deduction_monthly=deduction,
        loans=rows,
        totals=totals,
        averages=averages,
        extra_monthly_total=extra_total,
        shared_costs=shared_costs(request.cost_items),
        savings_monthly_total=savings_total,
        combined_monthly_plan=combined,
        income_share=safe_ratio(combined, income_for_plan),
        loan_income_share=safe_ratio(totals.total_monthly_cost, income_for_plan),
        extra_income_share=safe_ratio(extra_total, income_for_plan),
        savings_income_share=safe_ratio(savings_total, income_for_plan),
        remaining_income=remaining,
        leftover_share=safe_ratio(remaining, income_for_plan),
        loan_to_value=safe_ratio(totals.loan_amount, property_value),
        budget_status=status,
    )

    current_pct = averages.effective_amortization_pct if averages else None
    target_pct = future_amortization_percent(current_pct, request.future_amortization_override)
    scenario = None
    if target_pct is not None:
        scenario = future_scenario(
            totals, target_pct, extra_total, savings_total, income_for_plan, combined
        )

    delta = request.rate_shock_delta_pct
    sensitivity = rate_sensitivity(rows, DEFAULT_RATE_SHOCK_PCT if delta is None else delta)

    return BudgetResult(
        status="ok",
        income=income,
        snapshot=snapshot,
        future_scenario=scenario,
        rate_sensitivity=sensitivity,
        amortization_requirement=amortization_requirement(totals.loan_amount, property_value),
        fixed_vs_variable=fixed_vs_variable(rows),
        forecast_rows=tuple(
            amortization_forecast(totals.loan_amount, current_pct, request.forecast_years, property_value)
        ),
        savings_forecast_rows=savings_rows,
        excluded=excluded,
    )
