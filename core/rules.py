from __future__ import annotations
from typing import Literal, List, Dict, Any
from pydantic import BaseModel, Field

from core.models import BudgetResult


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_rules(result: BudgetResult) -> List[RuleResult]:
    res: List[RuleResult] = []

    if result.excluded:
        res.append(
            RuleResult(
                code="ENTRIES_EXCLUDED",
                severity="info",
                message="Some entries are incomplete or invalid and were left out of the budget.",
                context={"ids": list(result.excluded)},
            )
        )

    snap = result.snapshot
    if result.status == "insufficient_data" or snap is None:
        res.append(
            RuleResult(
                code="NO_LOANS",
                severity="critical",
                message="Add at least one loan with amount, interest and amortization.",
            )
        )
        return res

    if snap.income_for_plan is None:
        res.append(
            RuleResult(
                code="NO_INCOME",
                severity="warn",
                message="No income entered; shares of income cannot be shown.",
            )
        )

    if snap.remaining_income is not None and snap.remaining_income < 0:
        res.append(
            RuleResult(
                code="BUDGET_DEFICIT",
                severity="warn",
                message="The current plan exceeds net income.",
                context={"remaining": snap.remaining_income},
            )
        )

    fut = result.future_scenario
    if fut is not None and fut.leftover is not None and fut.leftover < 0:
        res.append(
            RuleResult(
                code="FUTURE_DEFICIT",
                severity="warn",
                message="The plan after the amortization step-down exceeds net income.",
                context={"leftover": fut.leftover, "percent": fut.percent_value},
            )
        )

    req = result.amortization_requirement
    if req is not None and snap.averages is not None:
        current = snap.averages.effective_amortization_pct
        if current < req.percent:
            res.append(
                RuleResult(
                    code="AMORTIZATION_BELOW_REQUIREMENT",
                    severity="warn",
                    message="Amortization is below the requirement for this loan-to-value ratio.",
                    context={"actual": current, "required": req.percent, "ratio": req.ratio},
                )
            )

    shock = result.rate_sensitivity
    if (
        shock is not None
        and snap.remaining_income is not None
        and snap.remaining_income >= 0
        and snap.remaining_income - shock.increase.diff < 0
    ):
        res.append(
            RuleResult(
                code="RATE_SHOCK_DEFICIT",
                severity="warn",
                message="A rate increase on the variable loans would turn the budget into a deficit.",
                context={"delta_pct": shock.delta_pct, "increase": shock.increase.diff},
            )
        )

    return res


def has_blocking(res: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in res)
