import pytest

from core.config import EngineConfig
from core.engine import compute_budget
from core.models import BudgetRequest, CostItem, Loan, Person, PropertyInfo, SavingsItem


def _request(**kw):
    base = dict(
        net_income=35000,
        loans=(Loan(id="l1", principal=2_500_000, annual_interest_rate_pct=4.2, amortization_pct=2.0),),
    )
    base.update(kw)
    return BudgetRequest(**base)


def test_no_loans_is_insufficient_data():
    res = compute_budget(BudgetRequest(net_income=35000, savings_items=(SavingsItem(amount=1000),)))
    assert res.status == "insufficient_data"
    assert res.snapshot is None
    assert res.income.net_income == 35000
    assert res.savings_forecast_rows[1].balance == pytest.approx(12240)


def test_snapshot_worked_example():
    res = compute_budget(_request())
    snap = res.snapshot
    assert res.status == "ok"
    assert snap.totals.total_monthly_cost == pytest.approx(12916.6667, abs=0.01)
    assert snap.income_share == pytest.approx(0.3690476190476191)
    assert snap.remaining_income == pytest.approx(35000 - 12916.6667, abs=0.01)
    assert snap.budget_status == "surplus"
    assert res.future_scenario.percent_value == pytest.approx(1.0)
    assert res.rate_sensitivity.delta_pct == 1.0


def test_unknown_income_suppresses_shares():
    res = compute_budget(_request(net_income=None))
    snap = res.snapshot
    assert snap.income_share is None
    assert snap.remaining_income is None
    assert snap.budget_status is None
    assert res.future_scenario.leftover is None


def test_persons_take_precedence_over_net_income():
    res = compute_budget(_request(persons=(Person(gross_monthly_income=50000),), net_income=1))
    assert res.snapshot.net_income == pytest.approx(35000)


def test_compute_is_idempotent():
    req = _request(cost_items=(CostItem(amount=1200, frequency="yearly"),))
    assert compute_budget(req) == compute_budget(req)


def test_tax_adjustment_adds_deduction():
    req = _request()
    plain = compute_budget(req).snapshot
    adjusted = compute_budget(req, EngineConfig(tax_adjustment_enabled=True)).snapshot
    assert adjusted.interest_deduction_monthly == pytest.approx(2587.5)
    assert adjusted.income_for_plan == pytest.approx(plain.income_for_plan + 2587.5)


def test_invalid_entries_are_excluded():
    req = _request(
        loans=(
            Loan(id="good", principal=1_000_000, annual_interest_rate_pct=3.0),
            Loan(id="bad", principal=None, annual_interest_rate_pct=3.0),
        ),
        cost_items=(CostItem(id="c-bad", amount=-5),),
    )
    res = compute_budget(req)
    assert res.excluded == ("bad", "c-bad")
    assert [r.id for r in res.snapshot.loans] == ["good"]


def test_loans_above_max_are_ignored():
    loans = tuple(Loan(id=f"l{i}", principal=100_000, annual_interest_rate_pct=3.0) for i in range(4))
    res = compute_budget(_request(loans=loans), EngineConfig(max_loans=2))
    assert len(res.snapshot.loans) == 2
    assert res.excluded == ("l2", "l3")


def test_requirement_and_forecast_use_property_value():
    res = compute_budget(_request(property_info=PropertyInfo(value=3_000_000)))
    assert res.amortization_requirement.percent == 2.0
    assert res.snapshot.loan_to_value == pytest.approx(2_500_000 / 3_000_000)
    assert res.forecast_rows[1].remaining_principal == pytest.approx(2_450_000)
    assert len(res.forecast_rows) == 11
