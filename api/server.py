"""JSON API around the budget engine."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

from core.calculators import is_active_loan, loan_row, loan_totals
from core.config import AppSettings, configure_logging, load_settings
from core.engine import compute_budget
from core.errors import InvalidRequestError
from core.inputs import normalize_loan, normalize_request
from core.models import Loan
from core.presets import DEFAULT_AMORTIZATION_PCT
from core.rules import evaluate_rules
from core.utils import parse_number
from core.version import __version__

logger = logging.getLogger(__name__)


def _calculate_loan(raw: Dict[str, Any], index: int = 0) -> Loan:
    # An unparseable amortization falls back to the default percent here;
    # the full budget excludes such a loan instead.
    loan = normalize_loan(raw, index)
    if loan.amortization_pct is None:
        loan = loan.model_copy(update={"amortization_pct": DEFAULT_AMORTIZATION_PCT})
    return loan


def _calculate_loans(body: Dict[str, Any]) -> List[Loan]:
    """Valid loans from a ``/api/calculate`` body.

    Falls back to a single loan described by top-level fields when the
    ``loans`` list holds nothing usable.
    """

    items = body.get("loans") if isinstance(body.get("loans"), list) else []
    if not items:
        raise InvalidRequestError("At least one loan is required to calculate.")
    loans = [loan for loan in (_calculate_loan(raw if isinstance(raw, dict) else {}, i) for i, raw in enumerate(items)) if is_active_loan(loan)]
    if not loans:
        fallback = _calculate_loan(
            {
                "id": "loan-1",
                "name": body.get("loanName"),
                "loanAmount": body.get("loanAmount"),
                "annualInterestRate": body.get("annualInterestRate"),
                "amortizationPercent": body.get("amortizationPercent"),
            }
        )
        if is_active_loan(fallback):
            loans.append(fallback)
    if not loans:
        raise InvalidRequestError(
            "At least one loan with amount, interest rate and amortization is required to calculate."
        )
    return loans


def _loan_payload(row) -> Dict[str, Any]:
    return {
        "id": row.id,
        "name": row.name,
        "loanAmount": row.principal,
        "annualInterestRate": row.annual_interest_rate_pct,
        "amortizationPercent": row.amortization_pct,
        "monthlyInterest": row.monthly_interest,
        "monthlyAmortization": row.monthly_amortization,
        "totalMonthlyCost": row.total_monthly_cost,
        "rateType": row.rate_type,
    }


def create_app(settings: Optional[AppSettings] = None) -> Flask:
    settings = settings or load_settings()
    app = Flask(__name__)
    app.config["BUDGET_SETTINGS"] = settings

    @app.errorhandler(InvalidRequestError)
    def handle_invalid(err: InvalidRequestError):
        logger.info("Rejected request to %s: %s", request.path, err.message)
        return jsonify({"error": err.message}), err.status_code

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok", "version": __version__})

    @app.post("/api/calculate")
    def calculate():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}
        income = parse_number(body.get("income"))
        rows = [loan_row(loan) for loan in _calculate_loans(body)]
        totals = loan_totals(rows)
        payload: Dict[str, Any] = {
            "income": income,
            "loans": [_loan_payload(r) for r in rows],
            "totals": {
                "loanAmount": totals.loan_amount,
                "monthlyInterest": totals.monthly_interest,
                "monthlyAmortization": totals.monthly_amortization,
                "totalMonthlyCost": totals.total_monthly_cost,
            },
        }
        if income is not None and income > 0:
            payload["incomeShare"] = totals.total_monthly_cost / income
        return jsonify(payload)

    @app.post("/api/budget")
    def budget():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise InvalidRequestError("Request body must be a JSON object.")
        engine = settings.engine
        result = compute_budget(normalize_request(body, engine.max_loans), engine)
        return jsonify(
            {
                "result": result.model_dump(mode="json"),
                "rules": [r.model_dump() for r in evaluate_rules(result)],
            }
        )

    return app


if __name__ == "__main__":
    settings = load_settings()
    configure_logging(settings.log_level)
    create_app(settings).run(debug=False, host=settings.api_host, port=settings.api_port)
