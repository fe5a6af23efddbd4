import pytest

from core.engine import compute_budget
from core.models import BudgetRequest, Loan, PropertyInfo
from core.rules import RuleResult, evaluate_rules
from export.pdf_export import build_budget_pdf

REQUEST = BudgetRequest(
    net_income=35000,
    loans=(Loan(id="l1", name="Main", principal=2_500_000, annual_interest_rate_pct=4.2),),
    property_info=PropertyInfo(name="Storgatan 1", value=3_000_000),
)


def test_writes_pdf(tmp_path):
    out = tmp_path / "budget.pdf"
    result = compute_budget(REQUEST)
    build_budget_pdf(str(out), result, {"household": "Anna", "property": "Storgatan 1"}, evaluate_rules(result))
    assert out.read_bytes().startswith(b"%PDF")


def test_requires_snapshot(tmp_path):
    with pytest.raises(ValueError):
        build_budget_pdf(str(tmp_path / "x.pdf"), compute_budget(BudgetRequest()))


def test_requires_override_with_critical(tmp_path):
    critical = [RuleResult(code="X", severity="critical", message="blocked")]
    result = compute_budget(REQUEST)
    with pytest.raises(ValueError):
        build_budget_pdf(str(tmp_path / "x.pdf"), result, warnings=critical)
    out = build_budget_pdf(str(tmp_path / "ok.pdf"), result, warnings=critical, override_reason="Bank confirmed")
    assert out.endswith("ok.pdf")
