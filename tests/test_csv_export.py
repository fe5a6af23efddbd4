import pytest

from core.engine import compute_budget
from core.models import BudgetRequest, CostItem, Loan, SavingsItem
from export.csv_export import cost_summary_frame, forecast_frame, make_csv_bytes

COSTS = (
    CostItem(id="c1", name="Daycare", amount=3000, frequency="quarterly", share_with_other=True),
    CostItem(id="c2", name="Broken", amount=None),
)
REQUEST = BudgetRequest(
    net_income=35000,
    loans=(Loan(id="l1", principal=1_000_000, annual_interest_rate_pct=3.0),),
    cost_items=COSTS,
    savings_items=(SavingsItem(amount=1000),),
    forecast_years=3,
    savings_forecast_years=5,
)


def test_cost_summary_halves_shared_items():
    df = cost_summary_frame(compute_budget(REQUEST), COSTS)
    assert list(df["Label"]) == ["Mortgage", "Daycare (your share)"]
    row = df.iloc[1]
    assert row["Amount"] == 500
    assert row["OriginalAmount"] == 1000
    assert row["Annual"] == 6000


def test_forecast_frame_aligns_horizons():
    df = forecast_frame(compute_budget(REQUEST))
    assert list(df["Year"]) == [0, 1, 2, 3, 4, 5]
    assert df["RemainingPrincipal"].isna().sum() == 2
    assert df.loc[1, "SavingsBalance"] == pytest.approx(12240)


def test_forecast_frame_without_loans():
    df = forecast_frame(compute_budget(BudgetRequest(savings_items=(SavingsItem(amount=1000),))))
    assert len(df) == 6
    assert df["RemainingPrincipal"].isna().all()


def test_csv_bytes():
    data = make_csv_bytes(compute_budget(REQUEST), COSTS).decode("utf-8")
    assert "CombinedMonthlyPlan" in data
    assert "Daycare (your share)" in data
