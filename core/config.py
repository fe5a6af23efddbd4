"""Runtime configuration read from the environment (and an optional ``.env``)."""
from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from core.errors import BudgetError
from core.presets import DEFAULT_TAX_TABLE_ID, MAX_LOANS, SAVINGS_GROWTH_RATE

ENV_PREFIX = "BOLANBUDGET_"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_TRUE = {"1", "true", "yes", "on"}


class EngineConfig(BaseModel):
    # When enabled the monthly interest deduction is added to net income
    # before shares and leftover are computed.
    tax_adjustment_enabled: bool = False
    max_loans: int = Field(default=MAX_LOANS, ge=1)
    savings_growth_rate: float = Field(default=SAVINGS_GROWTH_RATE, ge=0)
    default_tax_table_id: str = DEFAULT_TAX_TABLE_ID


class AppSettings(BaseModel):
    log_level: str = "INFO"
    session_file: str = "session_data.json"
    api_host: str = "127.0.0.1"
    api_port: int = 4000
    engine: EngineConfig = Field(default_factory=EngineConfig)


def _get(env: Mapping[str, str], key: str) -> Optional[str]:
    val = env.get(ENV_PREFIX + key)
    if val is None or not str(val).strip():
        return None
    return str(val).strip()


def _convert(env: Mapping[str, str], key: str, cast):
    raw = _get(env, key)
    try:
        return cast(raw)
    except ValueError as e:
        raise BudgetError(f"Invalid value for {ENV_PREFIX}{key}: {raw!r}") from e


def load_settings(env: Optional[Mapping[str, str]] = None) -> AppSettings:
    """Build settings from ``BOLANBUDGET_*`` variables.

    When ``env`` is omitted the process environment is used after loading a
    ``.env`` file from the working directory (existing variables win).
    """

    if env is None:
        load_dotenv(override=False)
        env = os.environ
    engine = {}
    if _get(env, "TAX_ADJUSTMENT") is not None:
        engine["tax_adjustment_enabled"] = _get(env, "TAX_ADJUSTMENT").lower() in _TRUE
    if _get(env, "MAX_LOANS") is not None:
        engine["max_loans"] = _convert(env, "MAX_LOANS", int)
    if _get(env, "SAVINGS_GROWTH_RATE") is not None:
        engine["savings_growth_rate"] = _convert(env, "SAVINGS_GROWTH_RATE", float)
    if _get(env, "DEFAULT_TAX_TABLE") is not None:
        engine["default_tax_table_id"] = _get(env, "DEFAULT_TAX_TABLE")

    app = {}
    if _get(env, "LOG_LEVEL") is not None:
        app["log_level"] = _get(env, "LOG_LEVEL").upper()
    if _get(env, "SESSION_FILE") is not None:
        app["session_file"] = _get(env, "SESSION_FILE")
    if _get(env, "API_HOST") is not None:
        app["api_host"] = _get(env, "API_HOST")
    if _get(env, "API_PORT") is not None:
        app["api_port"] = _convert(env, "API_PORT", int)
    return AppSettings(engine=EngineConfig(**engine), **app)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)
