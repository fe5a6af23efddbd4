from core.inputs import normalize_frequency, normalize_loan, normalize_loans, normalize_request
from core.utils import parse_number


def test_parse_number_accepts_form_strings():
    assert parse_number("2 500 000") == 2_500_000
    assert parse_number("4,2") == 4.2
    assert parse_number("") is None
    assert parse_number("abc") is None
    assert parse_number(float("nan")) is None
    assert parse_number(True) is None


def test_frequency_aliases():
    assert normalize_frequency("semester") == "term"
    assert normalize_frequency("Yearly") == "yearly"
    assert normalize_frequency("weekly") == "monthly"


def test_loan_defaults_and_camel_case_keys():
    loan = normalize_loan({"loanAmount": "1000000", "annualInterestRate": "3,5", "rateType": "fixed"}, 1)
    assert loan.id == "loan-2" and loan.name == "Loan 2"
    assert loan.principal == 1_000_000
    assert loan.annual_interest_rate_pct == 3.5
    assert loan.amortization_pct == 2.0
    assert loan.rate_type == "fixed"
    assert loan.fixed_term_years == 3


def test_blank_amortization_is_kept_invalid():
    loan = normalize_loan({"principal": 1000, "annual_interest_rate_pct": 3, "amortization_pct": "abc"})
    assert loan.amortization_pct is None


def test_loans_truncated_to_max():
    loans = normalize_loans([{"principal": 1}] * 7, max_loans=5)
    assert len(loans) == 5


def test_request_never_raises_on_garbage():
    req = normalize_request(
        {
            "persons": [{"incomeGross": "x", "taxTable": "77"}],
            "loans": [{"principal": None}],
            "costItems": [{"amount": "100", "frequency": "quarterly", "shareWithEx": True}],
            "property": {"value": "3 000 000"},
            "forecastYears": 500,
            "savingsForecastYears": "",
        }
    )
    assert req.persons[0].tax_table_id == "30"
    assert req.persons[0].gross_monthly_income is None
    assert req.cost_items[0].share_with_other is True
    assert req.property_info.value == 3_000_000
    assert req.forecast_years == 40
    assert req.savings_forecast_years == 5


def test_request_skips_malformed_collections():
    req = normalize_request(
        {
            "persons": "ab",
            "loans": ["x", {"principal": "100000", "rate": 3}, 7],
            "costItems": [1, None],
            "savings_items": {"amount": 500},
        }
    )
    assert req.persons == ()
    assert [loan.principal for loan in req.loans] == [100000]
    assert req.cost_items == ()
    assert req.savings_items == ()
    assert normalize_request({"loans": {"a": 1}}).loans == ()
