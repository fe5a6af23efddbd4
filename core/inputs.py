"""Turn raw field values into engine input models.

Form widgets, saved session files and API payloads all hand over loosely
typed dictionaries: numbers as strings, blanks, missing names, and the
camelCase keys used by older saved profiles.  Every default is resolved here,
once, so the calculators can work with plain typed values.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from core.models import (
    Broadband,
    BudgetRequest,
    CostItem,
    ElectricityUsage,
    Loan,
    Person,
    PropertyInfo,
    SavingsItem,
)
from core.presets import (
    DEFAULT_AMORTIZATION_PCT,
    DEFAULT_FIXED_TERM_YEARS,
    DEFAULT_FORECAST_YEARS,
    DEFAULT_SAVINGS_FORECAST_YEARS,
    DEFAULT_TAX_TABLE_ID,
    FORECAST_YEARS_MAX,
    FORECAST_YEARS_MIN,
    FREQUENCY_ALIASES,
    FREQUENCY_DIVISORS,
    MAX_LOANS,
    TAX_TABLES,
)
from core.utils import clamp_years, parse_number

logger = logging.getLogger(__name__)


def _first(raw: Mapping[str, Any], *keys, default=None):
    for k in keys:
        if k in raw and raw[k] is not None and raw[k] != "":
            return raw[k]
    return default


def _text(value, fallback: str) -> str:
    s = str(value).strip() if value is not None else ""
    return s or fallback


def normalize_frequency(value) -> str:
    key = str(value or "").strip().lower()
    key = FREQUENCY_ALIASES.get(key, key)
    return key if key in FREQUENCY_DIVISORS else "monthly"


def normalize_tax_table(value, default: str = DEFAULT_TAX_TABLE_ID) -> str:
    key = str(value).strip() if value is not None else ""
    return key if key in TAX_TABLES else default


def normalize_person(raw: Mapping[str, Any], index: int = 0) -> Person:
    return Person(
        id=_text(raw.get("id"), f"person-{index + 1}"),
        name=_text(raw.get("name"), f"Person {index + 1}"),
        gross_monthly_income=parse_number(
            _first(raw, "gross_monthly_income", "incomeGross", "income")
        ),
        tax_table_id=normalize_tax_table(_first(raw, "tax_table_id", "taxTable", "table")),
        pre_tax_deduction=parse_number(_first(raw, "pre_tax_deduction", "carBenefit")),
    )


def normalize_loan(raw: Mapping[str, Any], index: int = 0) -> Loan:
    rate_type = "fixed" if str(_first(raw, "rate_type", "rateType", default="")).lower() == "fixed" else "variable"
    amortization = _first(raw, "amortization_pct", "amortizationPercent")
    fixed_term = None
    if rate_type == "fixed":
        term = parse_number(_first(raw, "fixed_term_years", "fixedTermYears"))
        fixed_term = int(term) if term is not None and term > 0 else DEFAULT_FIXED_TERM_YEARS
    return Loan(
        id=_text(raw.get("id"), f"loan-{index + 1}"),
        name=_text(raw.get("name"), f"Loan {index + 1}"),
        principal=parse_number(_first(raw, "principal", "loanAmount", "amount")),
        annual_interest_rate_pct=parse_number(
            _first(raw, "annual_interest_rate_pct", "annualInterestRate", "rate")
        ),
        amortization_pct=DEFAULT_AMORTIZATION_PCT if amortization is None else parse_number(amortization),
        rate_type=rate_type,
        fixed_term_years=fixed_term,
    )


def normalize_cost(raw: Mapping[str, Any], index: int = 0) -> CostItem:
    return CostItem(
        id=_text(raw.get("id"), f"cost-{index + 1}"),
        name=_text(raw.get("name"), f"Cost {index + 1}"),
        amount=parse_number(raw.get("amount")),
        frequency=normalize_frequency(raw.get("frequency")),
        share_with_other=bool(_first(raw, "share_with_other", "shareWithEx", default=False)),
        category_id=raw.get("category_id") or raw.get("categoryId"),
    )


def normalize_savings(raw: Mapping[str, Any], index: int = 0) -> SavingsItem:
    return SavingsItem(
        id=_text(raw.get("id"), f"savings-{index + 1}"),
        name=_text(raw.get("name"), f"Savings {index + 1}"),
        amount=parse_number(raw.get("amount")),
        frequency=normalize_frequency(raw.get("frequency")),
    )


def _entries(value, kind: str) -> List[Mapping[str, Any]]:
    """Mapping entries of a list-like collection; anything else is skipped."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        logger.info("Ignoring %s: expected a list, got %s", kind, type(value).__name__)
        return []
    entries = [item for item in value if isinstance(item, Mapping)]
    if len(entries) < len(value):
        logger.info("Skipping %d malformed %s entries", len(value) - len(entries), kind)
    return entries


def normalize_loans(items: Optional[Iterable[Mapping[str, Any]]], max_loans: int = MAX_LOANS) -> List[Loan]:
    items = _entries(items, "loan")
    if len(items) > max_loans:
        logger.info("Dropping %d loan(s) above the limit of %d", len(items) - max_loans, max_loans)
    return [normalize_loan(raw, i) for i, raw in enumerate(items[:max_loans])]


def normalize_request(raw: Mapping[str, Any], max_loans: int = MAX_LOANS) -> BudgetRequest:
    """Build a :class:`BudgetRequest` from a raw payload.

    Never raises for bad field values; unusable numbers become ``None`` and
    are excluded later by the engine.
    """

    raw = raw or {}
    prop = raw.get("property_info") or raw.get("property")
    electricity = raw.get("electricity")
    broadband = raw.get("broadband")
    override = _first(raw, "future_amortization_override", "futureAmortizationPercent")
    request: Dict[str, Any] = {
        "persons": tuple(normalize_person(p, i) for i, p in enumerate(_entries(raw.get("persons"), "person"))),
        "net_income": parse_number(_first(raw, "net_income", "income")),
        "loans": tuple(normalize_loans(raw.get("loans"), max_loans)),
        "cost_items": tuple(normalize_cost(c, i) for i, c in enumerate(_entries(_first(raw, "cost_items", "costItems"), "cost"))),
        "savings_items": tuple(
            normalize_savings(s, i) for i, s in enumerate(_entries(_first(raw, "savings_items", "savingsItems"), "savings"))
        ),
        "property_info": None,
        "electricity": None,
        "broadband": None,
        "property_insurance_annual": parse_number(raw.get("property_insurance_annual")),
        "future_amortization_override": parse_number(override),
        "rate_shock_delta_pct": parse_number(_first(raw, "rate_shock_delta_pct", "rateScenarioDelta")),
        "forecast_years": clamp_years(
            _first(raw, "forecast_years", "forecastYears"),
            FORECAST_YEARS_MIN,
            FORECAST_YEARS_MAX,
            DEFAULT_FORECAST_YEARS,
        ),
        "savings_forecast_years": clamp_years(
            _first(raw, "savings_forecast_years", "savingsForecastYears"),
            FORECAST_YEARS_MIN,
            FORECAST_YEARS_MAX,
            DEFAULT_SAVINGS_FORECAST_YEARS,
        ),
    }
    if isinstance(prop, Mapping):
        request["property_info"] = PropertyInfo(
            name=_text(prop.get("name"), ""), value=parse_number(prop.get("value"))
        )
    if isinstance(electricity, Mapping):
        request["electricity"] = ElectricityUsage(
            annual_kwh=parse_number(_first(electricity, "annual_kwh", "consumption")),
            price_per_kwh=parse_number(_first(electricity, "price_per_kwh", "price")),
        )
    if isinstance(broadband, Mapping):
        request["broadband"] = Broadband(
            cost=parse_number(broadband.get("cost")),
            frequency="yearly" if broadband.get("frequency") == "yearly" else "monthly",
        )
    return BudgetRequest(**request)
