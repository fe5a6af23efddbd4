from core.engine import compute_budget
from core.models import BudgetRequest, Loan, PropertyInfo
from core.rules import evaluate_rules, has_blocking


def _codes(request):
    return {r.code for r in evaluate_rules(compute_budget(request))}


LOAN = Loan(id="l1", principal=2_500_000, annual_interest_rate_pct=4.2, amortization_pct=2.0)


def test_no_loans_is_blocking():
    res = evaluate_rules(compute_budget(BudgetRequest(net_income=30000)))
    assert {r.code for r in res} == {"NO_LOANS"}
    assert has_blocking(res)


def test_missing_income():
    assert "NO_INCOME" in _codes(BudgetRequest(loans=(LOAN,)))


def test_budget_deficit():
    codes = _codes(BudgetRequest(net_income=10000, loans=(LOAN,)))
    assert "BUDGET_DEFICIT" in codes
    assert "FUTURE_DEFICIT" in codes


def test_amortization_below_requirement():
    loan = LOAN.model_copy(update={"amortization_pct": 1.0})
    codes = _codes(BudgetRequest(net_income=50000, loans=(loan,), property_info=PropertyInfo(value=3_000_000)))
    assert "AMORTIZATION_BELOW_REQUIREMENT" in codes


def test_rate_shock_turns_surplus_into_deficit():
    codes = _codes(BudgetRequest(net_income=14000, loans=(LOAN,)))
    assert "BUDGET_DEFICIT" not in codes
    assert "RATE_SHOCK_DEFICIT" in codes


def test_excluded_entries_reported():
    bad = Loan(id="bad", principal=None)
    res = evaluate_rules(compute_budget(BudgetRequest(net_income=50000, loans=(LOAN, bad))))
    info = next(r for r in res if r.code == "ENTRIES_EXCLUDED")
    assert info.context["ids"] == ["bad"]
    assert not has_blocking(res)
