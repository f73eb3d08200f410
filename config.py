from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import streamlit as st
from streamlit.errors import StreamlitAPIException


DEFAULT_DATA_PATH = "data/trip_logger.json"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@dataclass(frozen=True)
class Settings:
    """
    App settings, read from .streamlit/secrets.toml:

        DATA_PATH = "data/trip_logger.json"
        APP_USERNAME = "..."
        APP_PASSWORD = "..."
        SHOW_DEV_DETAILS = false
        LOG_LEVEL = "INFO"
    """
    data_path: Path = Path(DEFAULT_DATA_PATH)
    username: str = "vsat"
    password: str = "0558"
    show_dev_details: bool = False
    log_level: str = "INFO"


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def settings_from_secrets(secrets: Optional[Mapping[str, Any]]) -> Settings:
    """Build Settings from any mapping (st.secrets, or a plain dict in tests)."""
    if not secrets:
        return Settings()

    defaults = Settings()
    return Settings(
        data_path=Path(str(secrets.get("DATA_PATH") or defaults.data_path)),
        username=str(secrets.get("APP_USERNAME") or defaults.username),
        password=str(secrets.get("APP_PASSWORD") or defaults.password),
        show_dev_details=_as_bool(secrets.get("SHOW_DEV_DETAILS", False)),
        log_level=str(secrets.get("LOG_LEVEL") or defaults.log_level).upper(),
    )


def load_settings() -> Settings:
    """
    Read settings from Streamlit secrets.
    Running without a secrets.toml is fine: defaults apply.
    """
    try:
        secrets = {key: st.secrets[key] for key in st.secrets.keys()}
    except (FileNotFoundError, StreamlitAPIException):
        secrets = {}
    return settings_from_secrets(secrets)


def configure_logging(level: str = "INFO") -> None:
    """Install one stdout handler on the root logger (idempotent across reruns)."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root.handlers:
        if getattr(handler, "_trip_logger", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler._trip_logger = True  # type: ignore[attr-defined]
    root.addHandler(handler)
