import pytest

from core.calculators import (
    amortization_forecast,
    amortization_requirement,
    broadband_monthly_cost,
    effective_monthly_cost,
    electricity_monthly_cost,
    extra_monthly_total,
    fixed_vs_variable,
    future_amortization_percent,
    future_scenario,
    income_breakdown,
    interest_deduction_monthly,
    is_active_loan,
    loan_averages,
    loan_row,
    loan_totals,
    monthly_equivalent,
    rate_sensitivity,
    savings_forecast,
    shared_costs,
    tax_rate,
)
from core.models import Broadband, CostItem, ElectricityUsage, Loan, Person


def _loan(principal=2_500_000, rate=4.2, amort=2.0, rate_type="variable", id="loan-1"):
    return Loan(id=id, principal=principal, annual_interest_rate_pct=rate, amortization_pct=amort, rate_type=rate_type)


def test_loan_row_worked_example():
    row = loan_row(_loan())
    assert row.monthly_interest == pytest.approx(8750.0)
    assert row.monthly_amortization == pytest.approx(4166.6667, abs=0.01)
    assert row.total_monthly_cost == pytest.approx(12916.6667, abs=0.01)
    assert row.total_monthly_cost / 35000 == pytest.approx(0.3690476190476191)


def test_inactive_loans():
    assert not is_active_loan(Loan(principal=None, annual_interest_rate_pct=4.0))
    assert not is_active_loan(Loan(principal=0, annual_interest_rate_pct=4.0))
    assert not is_active_loan(Loan(principal=100000, annual_interest_rate_pct=-1.0))
    assert not is_active_loan(Loan(principal=100000, annual_interest_rate_pct=4.0, amortization_pct=None))
    assert is_active_loan(Loan(principal=100000, annual_interest_rate_pct=0.0, amortization_pct=0.0))


def test_totals_are_order_independent():
    a = loan_row(_loan(1_000_000, 3.0, 1.0, id="a"))
    b = loan_row(_loan(2_000_000, 4.5, 2.0, "fixed", id="b"))
    t1, t2 = loan_totals([a, b]), loan_totals([b, a])
    assert t1.total_monthly_cost == pytest.approx(t2.total_monthly_cost)
    assert t1.loan_amount == 3_000_000


def test_loan_averages_weighted_by_principal():
    rows = [loan_row(_loan(1_000_000, 3.0, 1.0)), loan_row(_loan(3_000_000, 5.0, 3.0))]
    avg = loan_averages(loan_totals(rows))
    assert avg.effective_rate_pct == pytest.approx(4.5)
    assert avg.effective_amortization_pct == pytest.approx(2.5)
    assert loan_averages(loan_totals([])) is None


@pytest.mark.parametrize(
    "principal,value,expected",
    [
        (2_100_000, 3_000_000, 1.0),  # exactly 70%
        (2_130_000, 3_000_000, 2.0),
        (1_500_000, 3_000_000, 0.0),  # exactly 50%
        (1_530_000, 3_000_000, 1.0),
        (500_000, 3_000_000, 0.0),
    ],
)
def test_amortization_requirement_tiers(principal, value, expected):
    assert amortization_requirement(principal, value).percent == expected


def test_amortization_requirement_needs_property_value():
    assert amortization_requirement(2_000_000, None) is None
    assert amortization_requirement(2_000_000, 0) is None


def test_interest_deduction_above_threshold():
    assert interest_deduction_monthly(10000) == pytest.approx(2850.0)
    assert interest_deduction_monthly(5000) == pytest.approx(1500.0)
    assert interest_deduction_monthly(0) == 0.0
    assert interest_deduction_monthly(None) == 0.0


@pytest.mark.parametrize(
    "current,expected",
    [(2.0, 1.0), (1.5, 1.0), (1.0, 1.0), (3.0, 2.0), (0.8, 0.8), (0.0, 0.0)],
)
def test_step_down(current, expected):
    assert future_amortization_percent(current) == pytest.approx(expected)


def test_override_wins_and_is_clamped():
    assert future_amortization_percent(2.0, override=0.5) == 0.5
    assert future_amortization_percent(2.0, override=-3) == 0.0
    assert future_amortization_percent(None) is None


def test_future_scenario_without_income():
    totals = loan_totals([loan_row(_loan())])
    fut = future_scenario(totals, 1.0, 0.0, 0.0)
    assert fut.monthly_amortization == pytest.approx(2083.3333, abs=0.01)
    assert fut.difference_monthly == pytest.approx(-2083.3333, abs=0.01)
    assert fut.share is None and fut.leftover is None


def test_rate_sensitivity_leaves_fixed_loans_unchanged():
    rows = [loan_row(_loan()), loan_row(_loan(1_000_000, 3.0, 2.0, "fixed", id="f"))]
    shock = rate_sensitivity(rows, 1.0)
    assert shock.increase.diff == pytest.approx(2083.3333, abs=0.01)
    assert shock.decrease.diff == pytest.approx(-2083.3333, abs=0.01)
    assert shock.fixed_amount == 1_000_000
    assert rate_sensitivity(rows, -1.0).increase.diff == pytest.approx(shock.increase.diff)


def test_rate_sensitivity_without_variable_loans():
    assert rate_sensitivity([loan_row(_loan(rate_type="fixed"))], 1.0) is None


def test_rate_sensitivity_never_below_zero_rate():
    shock = rate_sensitivity([loan_row(_loan(rate=0.5))], 1.0)
    assert shock.decrease.monthly_interest_total == 0.0


def test_fixed_vs_variable_reference():
    rows = [loan_row(_loan(1_000_000, 4.0)), loan_row(_loan(1_000_000, 5.2, rate_type="fixed", id="f"))]
    comp = fixed_vs_variable(rows)
    assert comp.reference_rate_pct == pytest.approx(4.0)
    assert comp.total_difference == pytest.approx(1000.0)
    assert fixed_vs_variable([rows[0]]) is None


def test_amortization_forecast():
    rows = amortization_forecast(1_000_000, 2.0, 10, 2_000_000)
    assert rows[0].remaining_principal == 1_000_000
    assert rows[1].remaining_principal == pytest.approx(980_000)
    assert rows[10].remaining_principal == pytest.approx(800_000)
    assert rows[10].loan_to_value == pytest.approx(0.4)
    assert len(rows) == 11


def test_amortization_forecast_never_negative():
    rows = amortization_forecast(1_000_000, 5.0, 40)
    assert rows[20].remaining_principal == 0.0
    assert min(r.remaining_principal for r in rows) == 0.0
    assert amortization_forecast(1_000_000, 0.0) == []


def test_savings_forecast_deposit_then_grow():
    rows = savings_forecast(1000, 2)
    assert rows[1].balance == pytest.approx(12240.0)
    assert rows[2].balance == pytest.approx(24724.8)


def test_forecast_horizon_is_clamped():
    assert len(savings_forecast(1000, 99)) == 41
    assert len(savings_forecast(1000, 0)) == 2


def test_frequencies_and_sharing():
    assert monthly_equivalent(1200, "yearly") == 100
    assert monthly_equivalent(600, "term") == 100
    assert monthly_equivalent(400, "season") == 100
    item = CostItem(amount=300, frequency="quarterly", share_with_other=True)
    assert effective_monthly_cost(item) == 50
    shared = shared_costs([item, CostItem(amount=500)])
    assert shared.total == 100 and shared.my_share == 50


def test_housing_extras():
    assert electricity_monthly_cost(ElectricityUsage(annual_kwh=12000, price_per_kwh=1.5)) == pytest.approx(1500)
    assert broadband_monthly_cost(Broadband(cost=4800, frequency="yearly")) == 400
    total = extra_monthly_total(
        [CostItem(amount=1000), CostItem(amount=None)],
        ElectricityUsage(annual_kwh=12000, price_per_kwh=1.0),
        Broadband(cost=400),
        2400,
    )
    assert total == pytest.approx(1000 + 1000 + 400 + 200)


def test_income_breakdown():
    inc = income_breakdown(
        [
            Person(id="a", gross_monthly_income=40000, tax_table_id="30"),
            Person(id="b", gross_monthly_income=30000, tax_table_id="32", pre_tax_deduction=5000),
        ]
    )
    assert inc.persons[0].net == pytest.approx(28000)
    assert inc.persons[1].net == pytest.approx(17000)
    assert inc.net_income == pytest.approx(45000)
    assert income_breakdown([Person()]).net_income is None


def test_unknown_tax_table_falls_back():
    assert tax_rate("99") == ("30", 0.30)
