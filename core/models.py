from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from core.presets import (
    DEFAULT_AMORTIZATION_PCT,
    DEFAULT_FORECAST_YEARS,
    DEFAULT_SAVINGS_FORECAST_YEARS,
    DEFAULT_TAX_TABLE_ID,
)

RateType = Literal["variable", "fixed"]
Frequency = Literal["monthly", "quarterly", "yearly", "term", "season"]
BudgetStatus = Literal["surplus", "deficit"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Inputs.  Numbers are Optional: a blank field is carried as ``None`` and the
# calculators decide whether the entry takes part in the budget.
# ---------------------------------------------------------------------------


class Person(_Frozen):
    id: str = "person-1"
    name: str = "Person 1"
    gross_monthly_income: Optional[float] = None
    tax_table_id: str = DEFAULT_TAX_TABLE_ID
    pre_tax_deduction: Optional[float] = None


class Loan(_Frozen):
    id: str = "loan-1"
    name: str = "Loan 1"
    principal: Optional[float] = None
    annual_interest_rate_pct: Optional[float] = None
    amortization_pct: Optional[float] = DEFAULT_AMORTIZATION_PCT
    rate_type: RateType = "variable"
    fixed_term_years: Optional[int] = None


class CostItem(_Frozen):
    id: str = "cost-1"
    name: str = ""
    amount: Optional[float] = None
    frequency: Frequency = "monthly"
    share_with_other: bool = False
    category_id: Optional[str] = None


class SavingsItem(_Frozen):
    id: str = "savings-1"
    name: str = ""
    amount: Optional[float] = None
    frequency: Frequency = "monthly"


class PropertyInfo(_Frozen):
    name: str = ""
    value: Optional[float] = None


class ElectricityUsage(_Frozen):
    annual_kwh: Optional[float] = None
    price_per_kwh: Optional[float] = None


class Broadband(_Frozen):
    cost: Optional[float] = None
    frequency: Literal["monthly", "yearly"] = "monthly"


class BudgetRequest(_Frozen):
    persons: Tuple[Person, ...] = ()
    net_income: Optional[float] = None
    loans: Tuple[Loan, ...] = ()
    cost_items: Tuple[CostItem, ...] = ()
    savings_items: Tuple[SavingsItem, ...] = ()
    property_info: Optional[PropertyInfo] = None
    electricity: Optional[ElectricityUsage] = None
    broadband: Optional[Broadband] = None
    property_insurance_annual: Optional[float] = None
    future_amortization_override: Optional[float] = None
    rate_shock_delta_pct: Optional[float] = None
    forecast_years: int = DEFAULT_FORECAST_YEARS
    savings_forecast_years: int = DEFAULT_SAVINGS_FORECAST_YEARS


# ---------------------------------------------------------------------------
# Outputs.  All frozen; a new computation replaces them wholesale.
# ---------------------------------------------------------------------------


class PersonIncome(_Frozen):
    id: str
    name: str
    gross: float
    deduction: float
    taxable: float
    tax_table_id: str
    tax_rate: float
    tax: float
    net: float


class IncomeBreakdown(_Frozen):
    persons: Tuple[PersonIncome, ...] = ()
    total_gross: float = 0.0
    total_tax: float = 0.0
    total_net: float = 0.0
    total_deduction: float = 0.0
    net_income: Optional[float] = None


class LoanRow(_Frozen):
    id: str
    name: str
    principal: float
    annual_interest_rate_pct: float
    amortization_pct: float
    rate_type: RateType
    fixed_term_years: Optional[int] = None
    monthly_interest: float
    monthly_amortization: float
    total_monthly_cost: float


class LoanTotals(_Frozen):
    loan_amount: float = 0.0
    monthly_interest: float = 0.0
    monthly_amortization: float = 0.0
    total_monthly_cost: float = 0.0


class LoanAverages(_Frozen):
    effective_rate_pct: float
    effective_amortization_pct: float


class RateTypeTotals(_Frozen):
    amount: float = 0.0
    monthly_interest: float = 0.0


class LoanTypeBreakdown(_Frozen):
    variable: RateTypeTotals = Field(default_factory=RateTypeTotals)
    fixed: RateTypeTotals = Field(default_factory=RateTypeTotals)


class FixedVariableComparison(_Frozen):
    reference_rate_pct: float
    total_difference: float
    total_amount: float


class SharedCosts(_Frozen):
    total: float = 0.0
    my_share: float = 0.0


class AmortizationRequirement(_Frozen):
    percent: float
    ratio: float


class BudgetSnapshot(_Frozen):
    net_income: Optional[float] = None
    income_for_plan: Optional[float] = None
    interest_deduction_monthly: float = 0.0
    loans: Tuple[LoanRow, ...] = ()
    totals: LoanTotals = Field(default_factory=LoanTotals)
    averages: Optional[LoanAverages] = None
    extra_monthly_total: float = 0.0
    shared_costs: SharedCosts = Field(default_factory=SharedCosts)
    savings_monthly_total: float = 0.0
    combined_monthly_plan: float = 0.0
    income_share: Optional[float] = None
    loan_income_share: Optional[float] = None
    extra_income_share: Optional[float] = None
    savings_income_share: Optional[float] = None
    remaining_income: Optional[float] = None
    leftover_share: Optional[float] = None
    loan_to_value: Optional[float] = None
    budget_status: Optional[BudgetStatus] = None


class ScenarioResult(_Frozen):
    percent_value: float
    monthly_amortization: float
    total_monthly_cost: float
    combined_plan: float
    share: Optional[float] = None
    leftover: Optional[float] = None
    difference_monthly: float = 0.0


class RateShockResult(_Frozen):
    monthly_interest_total: float
    total: float
    diff: float


class RateSensitivity(_Frozen):
    delta_pct: float
    base_total: float
    increase: RateShockResult
    decrease: RateShockResult
    variable_amount: float
    fixed_amount: float


class ForecastRow(_Frozen):
    year: int
    remaining_principal: float
    loan_to_value: Optional[float] = None


class SavingsForecastRow(_Frozen):
    year: int
    balance: float


class BudgetResult(_Frozen):
    status: Literal["ok", "insufficient_data"]
    income: IncomeBreakdown = Field(default_factory=IncomeBreakdown)
    snapshot: Optional[BudgetSnapshot] = None
    future_scenario: Optional[ScenarioResult] = None
    rate_sensitivity: Optional[RateSensitivity] = None
    amortization_requirement: Optional[AmortizationRequirement] = None
    fixed_vs_variable: Optional[FixedVariableComparison] = None
    forecast_rows: Tuple[ForecastRow, ...] = ()
    savings_forecast_rows: Tuple[SavingsForecastRow, ...] = ()
    excluded: Tuple[str, ...] = ()
