"""Configuration and simple helper utilities for the Doggos web app."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from doggos.roster import MatchPolicy

load_dotenv()

logger = logging.getLogger(__name__)

APP_DIR = Path(__file__).resolve().parent
APP_TITLE = "Doggos"
MAX_QUERY_LENGTH = 80
MAX_NAME_LENGTH = 80
MAX_BREED_LENGTH = 80
IMAGE_FETCH_WORKERS = 2
LOADING_REFRESH_SECONDS = 1
DEFAULT_OWNER_NAME = "Jan Brzechwa"
DEFAULT_MATCH_POLICY = MatchPolicy.PREFIX
DUPLICATE_NAME_MESSAGE = "A dog with this name already exists."
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_match_policy() -> MatchPolicy:
    """Return the search match policy from env, with a sensible default."""
    raw = os.environ.get("DOGGOS_MATCH_POLICY")
    try:
        return MatchPolicy.parse(raw, DEFAULT_MATCH_POLICY)
    except ValueError as exc:
        logger.warning(f"{exc} Using '{DEFAULT_MATCH_POLICY.value}'.")
        return DEFAULT_MATCH_POLICY


def get_owner_name() -> str:
    """Return the name shown on the profile screen."""
    return (os.environ.get("DOGGOS_OWNER_NAME") or "").strip() or DEFAULT_OWNER_NAME


def get_log_level() -> str:
    return (os.environ.get("LOG_LEVEL") or "INFO").upper()


def normalize_query(value: str | None) -> str:
    """Collapse whitespace and cap the length of a search query."""
    return " ".join((value or "").split())[:MAX_QUERY_LENGTH]
