from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from core.models import (
    AmortizationRequirement,
    Broadband,
    CostItem,
    ElectricityUsage,
    FixedVariableComparison,
    ForecastRow,
    IncomeBreakdown,
    Loan,
    LoanAverages,
    LoanRow,
    LoanTotals,
    LoanTypeBreakdown,
    Person,
    PersonIncome,
    RateSensitivity,
    RateShockResult,
    RateTypeTotals,
    SavingsForecastRow,
    SavingsItem,
    ScenarioResult,
    SharedCosts,
)
from core.presets import (
    AMORTIZATION_REQUIREMENT_TIERS,
    AMORTIZATION_STEP_DOWN_FLOOR_PCT,
    AMORTIZATION_STEP_DOWN_PCT,
    DEFAULT_FORECAST_YEARS,
    DEFAULT_SAVINGS_FORECAST_YEARS,
    DEFAULT_TAX_TABLE_ID,
    FORECAST_YEARS_MAX,
    FORECAST_YEARS_MIN,
    FREQUENCY_DIVISORS,
    INTEREST_DEDUCTION,
    MAX_LOANS,
    SAVINGS_GROWTH_RATE,
    SHARED_COST_DIVISOR,
    TAX_TABLES,
)
from core.utils import clamp_years, is_finite, nz, safe_ratio


# ---------------------------------------------------------------------------
# Income
# ---------------------------------------------------------------------------


def tax_rate(table_id, default_table_id: str = DEFAULT_TAX_TABLE_ID) -> Tuple[str, float]:
    """Resolve a tax table id to ``(id, flat_rate)``.

    Unknown ids fall back to the default table so a stale or mistyped
    selection never blocks the income calculation.
    """

    key = str(table_id) if table_id is not None else ""
    if key not in TAX_TABLES:
        key = default_table_id if default_table_id in TAX_TABLES else DEFAULT_TAX_TABLE_ID
    return key, TAX_TABLES[key]["rate"]


def person_income(person: Person, default_table_id: str = DEFAULT_TAX_TABLE_ID) -> PersonIncome:
    gross = max(nz(person.gross_monthly_income), 0.0)
    deduction = max(nz(person.pre_tax_deduction), 0.0)
    table_id, rate = tax_rate(person.tax_table_id, default_table_id)
    taxable = max(gross - deduction, 0.0)
    tax = taxable * rate
    net = max(taxable - tax, 0.0)
    return PersonIncome(
        id=person.id,
        name=person.name,
        gross=gross,
        deduction=deduction,
        taxable=taxable,
        tax_table_id=table_id,
        tax_rate=rate,
        tax=tax,
        net=net,
    )


def income_breakdown(
    persons: Iterable[Person], default_table_id: str = DEFAULT_TAX_TABLE_ID
) -> IncomeBreakdown:
    """Convert gross monthly incomes into net income per person and combined.

    Each person's pre-tax deduction (for example a car benefit) is removed
    from gross pay before the flat table rate is applied.  When the combined
    net is zero the household income is reported as unknown (``None``) rather
    than ``0`` so that income shares are suppressed downstream.
    """

    rows = tuple(person_income(p, default_table_id) for p in persons)
    total_net = sum(r.net for r in rows)
    return IncomeBreakdown(
        persons=rows,
        total_gross=sum(r.gross for r in rows),
        total_tax=sum(r.tax for r in rows),
        total_net=total_net,
        total_deduction=sum(r.deduction for r in rows),
        net_income=total_net if total_net > 0 else None,
    )


# ---------------------------------------------------------------------------
# Loans
# ---------------------------------------------------------------------------


def is_active_loan(loan: Loan) -> bool:
    """A loan counts only when principal, rate and amortization are usable."""

    return (
        is_finite(loan.principal)
        and loan.principal > 0
        and is_finite(loan.annual_interest_rate_pct)
        and loan.annual_interest_rate_pct >= 0
        and is_finite(loan.amortization_pct)
        and loan.amortization_pct >= 0
    )


def active_loans(loans: Sequence[Loan], max_loans: int = MAX_LOANS) -> List[Loan]:
    return [loan for loan in list(loans)[:max_loans] if is_active_loan(loan)]


def loan_row(loan: Loan) -> LoanRow:
    """Monthly interest and straight-line amortization for one loan.

    ``annual_interest_rate_pct`` and ``amortization_pct`` are yearly
    percentages of the principal (``4.2`` for 4.2%).
    """

    principal = float(loan.principal)
    monthly_rate = loan.annual_interest_rate_pct / 100 / 12
    monthly_interest = principal * monthly_rate
    monthly_amortization = principal * (loan.amortization_pct / 100) / 12
    return LoanRow(
        id=loan.id,
        name=loan.name,
        principal=principal,
        annual_interest_rate_pct=float(loan.annual_interest_rate_pct),
        amortization_pct=float(loan.amortization_pct),
        rate_type=loan.rate_type,
        fixed_term_years=loan.fixed_term_years,
        monthly_interest=monthly_interest,
        monthly_amortization=monthly_amortization,
        total_monthly_cost=monthly_interest + monthly_amortization,
    )


def loan_totals(rows: Iterable[LoanRow]) -> LoanTotals:
    loan_amount = monthly_interest = monthly_amortization = total = 0.0
    for r in rows:
        loan_amount += r.principal
        monthly_interest += r.monthly_interest
        monthly_amortization += r.monthly_amortization
        total += r.total_monthly_cost
    return LoanTotals(
        loan_amount=loan_amount,
        monthly_interest=monthly_interest,
        monthly_amortization=monthly_amortization,
        total_monthly_cost=total,
    )


def loan_averages(totals: LoanTotals) -> Optional[LoanAverages]:
    """Principal-weighted yearly interest and amortization percentages.

    Returns ``None`` when there is no principal to weight by.
    """

    if not totals.loan_amount > 0:
        return None
    return LoanAverages(
        effective_rate_pct=totals.monthly_interest * 12 / totals.loan_amount * 100,
        effective_amortization_pct=totals.monthly_amortization * 12 / totals.loan_amount * 100,
    )


def loan_type_breakdown(rows: Iterable[LoanRow]) -> LoanTypeBreakdown:
    acc = {"variable": [0.0, 0.0], "fixed": [0.0, 0.0]}
    for r in rows:
        bucket = acc["fixed" if r.rate_type == "fixed" else "variable"]
        bucket[0] += r.principal
        bucket[1] += r.monthly_interest
    return LoanTypeBreakdown(
        variable=RateTypeTotals(amount=acc["variable"][0], monthly_interest=acc["variable"][1]),
        fixed=RateTypeTotals(amount=acc["fixed"][0], monthly_interest=acc["fixed"][1]),
    )


def variable_reference_rate(rows: Sequence[LoanRow]) -> Optional[float]:
    """Weighted rate of the variable loans, or of all loans when none is variable."""

    variable = [r for r in rows if r.rate_type != "fixed"]
    for group in (variable, rows):
        amount = sum(r.principal for r in group)
        if amount > 0:
            return sum(r.principal * r.annual_interest_rate_pct for r in group) / amount
    return None


def fixed_vs_variable(rows: Sequence[LoanRow]) -> Optional[FixedVariableComparison]:
    """What the fixed-rate loans cost per month compared with the variable reference rate.

    A positive ``total_difference`` means the fixed terms are more expensive
    than paying the reference rate on the same principal.
    """

    reference = variable_reference_rate(rows)
    fixed = [r for r in rows if r.rate_type == "fixed"]
    if reference is None or not fixed:
        return None
    difference = 0.0
    amount = 0.0
    for r in fixed:
        variable_interest = r.principal * reference / 100 / 12
        difference += r.monthly_interest - variable_interest
        amount += r.principal
    if amount <= 0:
        return None
    return FixedVariableComparison(
        reference_rate_pct=reference, total_difference=difference, total_amount=amount
    )


# ---------------------------------------------------------------------------
# Regulatory and tax rules
# ---------------------------------------------------------------------------


def amortization_requirement(principal, property_value) -> Optional[AmortizationRequirement]:
    """Required yearly amortization from the loan-to-value ratio.

    Above 70% LTV the requirement is 2% per year, above 50% it is 1%, and
    otherwise nothing.  Bounds are strict: exactly 70% falls in the 1% tier.
    """

    if not is_finite(principal) or not is_finite(property_value):
        return None
    if property_value <= 0 or principal <= 0:
        return None
    ratio = principal / property_value
    percent = 0.0
    for bound, pct in AMORTIZATION_REQUIREMENT_TIERS:
        if ratio > bound:
            percent = pct
            break
    return AmortizationRequirement(percent=percent, ratio=ratio)


def interest_deduction_monthly(monthly_interest, table=INTEREST_DEDUCTION) -> float:
    """Monthly tax rebate on mortgage interest.

    Yearly interest up to the threshold is deducted at the base rate and the
    part above it at the lower excess rate; the yearly rebate is spread over
    twelve months.
    """

    if not is_finite(monthly_interest) or monthly_interest <= 0:
        return 0.0
    yearly_interest = monthly_interest * 12
    threshold = table["threshold"]
    base = min(yearly_interest, threshold)
    excess = max(yearly_interest - threshold, 0.0)
    yearly = base * table["base_rate"] + excess * table["excess_rate"]
    return yearly / 12


# ---------------------------------------------------------------------------
# Recurring costs and savings
# ---------------------------------------------------------------------------


def monthly_equivalent(amount, frequency: str) -> float:
    return nz(amount) / FREQUENCY_DIVISORS.get(frequency, 1)


def is_valid_item(item) -> bool:
    return is_finite(item.amount) and item.amount > 0


def effective_monthly_cost(item: CostItem) -> float:
    """Monthly cost counted in the budget; shared costs count half."""

    base = monthly_equivalent(item.amount, item.frequency)
    return base / SHARED_COST_DIVISOR if item.share_with_other else base


def shared_costs(items: Iterable[CostItem]) -> SharedCosts:
    total = my_share = 0.0
    for item in items:
        if item.share_with_other and is_valid_item(item):
            total += monthly_equivalent(item.amount, item.frequency)
            my_share += effective_monthly_cost(item)
    return SharedCosts(total=total, my_share=my_share)


def electricity_monthly_cost(usage: Optional[ElectricityUsage]) -> float:
    if usage is None:
        return 0.0
    kwh, price = usage.annual_kwh, usage.price_per_kwh
    if not is_finite(kwh) or kwh <= 0 or not is_finite(price) or price < 0:
        return 0.0
    return kwh / 12 * price


def broadband_monthly_cost(broadband: Optional[Broadband]) -> float:
    if broadband is None or not is_finite(broadband.cost) or broadband.cost <= 0:
        return 0.0
    return broadband.cost / 12 if broadband.frequency == "yearly" else broadband.cost


def insurance_monthly_cost(annual_premium) -> float:
    return annual_premium / 12 if is_finite(annual_premium) and annual_premium > 0 else 0.0


def extra_monthly_total(
    items: Iterable[CostItem],
    electricity: Optional[ElectricityUsage] = None,
    broadband: Optional[Broadband] = None,
    property_insurance_annual=None,
) -> float:
    """Everything besides the mortgage that the household pays each month."""

    base = sum(effective_monthly_cost(i) for i in items if is_valid_item(i))
    return (
        base
        + electricity_monthly_cost(electricity)
        + insurance_monthly_cost(property_insurance_annual)
        + broadband_monthly_cost(broadband)
    )


def savings_monthly_total(items: Iterable[SavingsItem]) -> float:
    return sum(monthly_equivalent(i.amount, i.frequency) for i in items if is_valid_item(i))


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


def future_amortization_percent(current_pct, override=None) -> Optional[float]:
    """Amortization percent used for the "after step-down" scenario.

    An explicit ``override`` wins (never below zero).  Otherwise the current
    weighted percent is lowered one step: from 1% and up it drops by one
    point but never below 1%; under 1% it is kept as is.
    """

    if override is not None:
        return max(float(override), 0.0) if is_finite(override) else None
    if not is_finite(current_pct):
        return None
    if current_pct >= AMORTIZATION_STEP_DOWN_FLOOR_PCT:
        return max(current_pct - AMORTIZATION_STEP_DOWN_PCT, AMORTIZATION_STEP_DOWN_FLOOR_PCT)
    return max(current_pct, 0.0)


def future_scenario(
    totals: LoanTotals,
    percent,
    extra_total: float,
    savings_total: float,
    income=None,
    current_combined_plan: Optional[float] = None,
) -> Optional[ScenarioResult]:
    if not is_finite(percent) or percent < 0:
        return None
    monthly_amortization = totals.loan_amount * (percent / 100) / 12
    total_monthly_cost = totals.monthly_interest + monthly_amortization
    combined = total_monthly_cost + extra_total + savings_total
    known_income = is_finite(income) and income > 0
    if current_combined_plan is None:
        current_combined_plan = totals.total_monthly_cost + extra_total + savings_total
    return ScenarioResult(
        percent_value=float(percent),
        monthly_amortization=monthly_amortization,
        total_monthly_cost=total_monthly_cost,
        combined_plan=combined,
        share=safe_ratio(combined, income),
        leftover=income - combined if known_income else None,
        difference_monthly=combined - current_combined_plan,
    )


def rate_sensitivity(rows: Sequence[LoanRow], delta_pct) -> Optional[RateSensitivity]:
    """Loan cost if variable rates moved ``delta_pct`` points down or up.

    Fixed-rate loans keep their current interest.  Adjusted rates never go
    below zero.  ``None`` means there is no variable principal to shock,
    which is different from a computed change of zero.
    """

    if not is_finite(delta_pct):
        return None
    delta = abs(float(delta_pct))
    breakdown = loan_type_breakdown(rows)
    if breakdown.variable.amount <= 0:
        return None
    totals = loan_totals(rows)
    base_total = totals.total_monthly_cost
    fixed_interest = totals.monthly_interest - breakdown.variable.monthly_interest

    def variable_interest(diff: float) -> float:
        total = 0.0
        for r in rows:
            if r.rate_type == "fixed" or r.principal <= 0:
                continue
            adjusted = max(r.annual_interest_rate_pct + diff, 0.0)
            total += r.principal * adjusted / 100 / 12
        return total

    def build(diff: float) -> RateShockResult:
        interest = fixed_interest + variable_interest(diff)
        total = interest + totals.monthly_amortization
        return RateShockResult(monthly_interest_total=interest, total=total, diff=total - base_total)

    return RateSensitivity(
        delta_pct=delta,
        base_total=base_total,
        increase=build(delta),
        decrease=build(-delta),
        variable_amount=breakdown.variable.amount,
        fixed_amount=breakdown.fixed.amount,
    )


# ---------------------------------------------------------------------------
# Forecasts
# ---------------------------------------------------------------------------


def amortization_forecast(
    starting_principal, amortization_pct, years=DEFAULT_FORECAST_YEARS, property_value=None
) -> List[ForecastRow]:
    """Remaining principal year by year under straight-line amortization.

    The yearly payment is a fixed share of the starting principal; interest
    is never added to the balance.  An empty list means "not applicable"
    (no principal or no amortization), not a flat line.
    """

    if not is_finite(starting_principal) or starting_principal <= 0:
        return []
    if not is_finite(amortization_pct) or amortization_pct <= 0:
        return []
    horizon = clamp_years(years, FORECAST_YEARS_MIN, FORECAST_YEARS_MAX, DEFAULT_FORECAST_YEARS)
    yearly = starting_principal * (amortization_pct / 100)
    known_value = is_finite(property_value) and property_value > 0
    rows = []
    remaining = float(starting_principal)
    for year in range(horizon + 1):
        if year > 0:
            remaining = max(remaining - yearly, 0.0)
        rows.append(
            ForecastRow(
                year=year,
                remaining_principal=remaining,
                loan_to_value=remaining / property_value if known_value else None,
            )
        )
    return rows


def savings_forecast(
    monthly_contribution, years=DEFAULT_SAVINGS_FORECAST_YEARS, growth_rate=SAVINGS_GROWTH_RATE
) -> List[SavingsForecastRow]:
    """Savings balance when a year of deposits is added and then grown once."""

    horizon = clamp_years(
        years, FORECAST_YEARS_MIN, FORECAST_YEARS_MAX, DEFAULT_SAVINGS_FORECAST_YEARS
    )
    yearly_contribution = nz(monthly_contribution) * 12
    rows = []
    balance = 0.0
    for year in range(horizon + 1):
        if year > 0:
            balance = (balance + yearly_contribution) * (1 + growth_rate)
        rows.append(SavingsForecastRow(year=year, balance=balance))
    return rows
