DISCLAIMER = (
    "This tool estimates a household mortgage budget from the figures you enter "
    "(flat-rate tax tables, straight-line amortization and a simplified interest deduction). "
    "Results are estimates only; your bank's calculation, current tax rules and the "
    "amortization requirement applied by your lender prevail."
)

# Flat-rate approximation of the Swedish withholding tables.
TAX_TABLES = {
    "29": {"label": "Table 29 (~29% tax)", "rate": 0.29},
    "30": {"label": "Table 30 (~30% tax)", "rate": 0.30},
    "31": {"label": "Table 31 (~31% tax)", "rate": 0.31},
    "32": {"label": "Table 32 (~32% tax)", "rate": 0.32},
    "33": {"label": "Table 33 (~33% tax)", "rate": 0.33},
    "34": {"label": "Table 34 (~34% tax)", "rate": 0.34},
}
DEFAULT_TAX_TABLE_ID = "30"

FREQUENCY_DIVISORS = {"monthly": 1, "quarterly": 3, "yearly": 12, "term": 6, "season": 4}
FREQUENCY_ALIASES = {"semester": "term"}
FREQUENCY_LABELS = {
    "monthly": "Monthly",
    "quarterly": "Quarterly",
    "yearly": "Yearly",
    "term": "Per term (6 mo)",
    "season": "Per season (4 mo)",
}

# A cost shared with another household is split evenly.
SHARED_COST_DIVISOR = 2.0

MAX_LOANS = 5
DEFAULT_AMORTIZATION_PCT = 2.0
DEFAULT_FIXED_TERM_YEARS = 3

INTEREST_DEDUCTION = {"threshold": 100000.0, "base_rate": 0.30, "excess_rate": 0.21}

# Loan-to-value tiers, highest first: ratio strictly above the bound -> yearly percent.
AMORTIZATION_REQUIREMENT_TIERS = [(0.70, 2.0), (0.50, 1.0)]
AMORTIZATION_STEP_DOWN_PCT = 1.0
AMORTIZATION_STEP_DOWN_FLOOR_PCT = 1.0

SAVINGS_GROWTH_RATE = 0.02

FORECAST_YEARS_MIN = 1
FORECAST_YEARS_MAX = 40
DEFAULT_FORECAST_YEARS = 10
DEFAULT_SAVINGS_FORECAST_YEARS = 5
DEFAULT_RATE_SHOCK_PCT = 1.0

DEFAULT_CATEGORIES = {
    "household": "Running costs & household",
    "food": "Food & groceries",
    "entertainment": "Entertainment",
}
