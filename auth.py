from __future__ import annotations

import hmac
import logging
from typing import MutableMapping, Optional

import streamlit as st

from config import Settings


logger = logging.getLogger(__name__)

SESSION_KEY = "is_authenticated"


# -----------------------------
# State helpers
# -----------------------------

def _state(state: Optional[MutableMapping] = None) -> MutableMapping:
    return st.session_state if state is None else state


# -----------------------------
# Core auth functions
# -----------------------------

def check_credentials(username: str, password: str, settings: Settings) -> bool:
    """Compare against the single configured username / password pair."""
    user_ok = hmac.compare_digest(
        (username or "").strip().encode("utf-8"), settings.username.encode("utf-8")
    )
    pass_ok = hmac.compare_digest(
        (password or "").encode("utf-8"), settings.password.encode("utf-8")
    )
    return user_ok and pass_ok


def login(
    username: str,
    password: str,
    settings: Settings,
    state: Optional[MutableMapping] = None,
) -> bool:
    """Set the session flag on success. The flag lives only as long as the browser session."""
    if not check_credentials(username, password, settings):
        logger.info("Rejected sign-in for %r", username)
        return False
    _state(state)[SESSION_KEY] = True
    logger.info("Signed in as %r", username)
    return True


def logout(state: Optional[MutableMapping] = None) -> None:
    _state(state).pop(SESSION_KEY, None)


def is_authenticated(state: Optional[MutableMapping] = None) -> bool:
    return bool(_state(state).get(SESSION_KEY, False))
