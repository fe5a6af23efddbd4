import pytest

from core.config import AppSettings, load_settings
from core.errors import BudgetError


def test_defaults_from_empty_env():
    settings = load_settings({})
    assert settings == AppSettings()
    assert settings.engine.max_loans == 5
    assert settings.engine.tax_adjustment_enabled is False


def test_env_overrides():
    settings = load_settings(
        {
            "BOLANBUDGET_TAX_ADJUSTMENT": "yes",
            "BOLANBUDGET_MAX_LOANS": "3",
            "BOLANBUDGET_SAVINGS_GROWTH_RATE": "0.03",
            "BOLANBUDGET_LOG_LEVEL": "debug",
            "BOLANBUDGET_API_PORT": "5001",
            "BOLANBUDGET_SESSION_FILE": " ",
        }
    )
    assert settings.engine.tax_adjustment_enabled is True
    assert settings.engine.max_loans == 3
    assert settings.engine.savings_growth_rate == 0.03
    assert settings.log_level == "DEBUG"
    assert settings.api_port == 5001
    assert settings.session_file == "session_data.json"


@pytest.mark.parametrize("key", ["MAX_LOANS", "SAVINGS_GROWTH_RATE", "API_PORT"])
def test_malformed_number_names_the_variable(key):
    with pytest.raises(BudgetError, match=f"BOLANBUDGET_{key}"):
        load_settings({f"BOLANBUDGET_{key}": "lots"})
