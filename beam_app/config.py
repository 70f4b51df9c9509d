"""Configuration from environment."""

import os

from dotenv import load_dotenv

from beam_checker.config import (
    DEFAULT_LAYOUT_PREFIX,
    DEFAULT_PRIMITIVE_PREFIX,
    DEFAULT_STATE_WORDS,
    DEFAULT_THEME_PATTERN,
    CheckerConfig,
)
from beam_checker.errors import ConfigurationError

load_dotenv()

_TRUE_VALUES = {"1", "true", "yes", "on"}


def get_strict() -> bool:
    """Treat warnings as errors. Default: false."""
    return os.environ.get("BEAM_STRICT", "").strip().lower() in _TRUE_VALUES


def get_state_words() -> frozenset:
    """Comma-separated vocabulary for rule:state-in-class."""
    raw = os.environ.get("BEAM_STATE_WORDS", "").strip()
    if not raw:
        return DEFAULT_STATE_WORDS
    return frozenset(w.strip().lower() for w in raw.split(",") if w.strip())


def get_theme_pattern() -> str:
    return os.environ.get("BEAM_THEME_PATTERN", DEFAULT_THEME_PATTERN).strip() or DEFAULT_THEME_PATTERN


def get_layout_prefix() -> str:
    return os.environ.get("BEAM_LAYOUT_PREFIX", DEFAULT_LAYOUT_PREFIX).strip()


def get_primitive_prefix() -> str:
    return os.environ.get("BEAM_PRIMITIVE_PREFIX", DEFAULT_PRIMITIVE_PREFIX).strip()


def get_max_workers() -> int:
    raw = os.environ.get("BEAM_MAX_WORKERS", "4")
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError("BEAM_MAX_WORKERS", f"not an integer: {raw!r}") from None


def get_log_level() -> str:
    return os.environ.get("BEAM_LOG_LEVEL", "INFO").strip().upper() or "INFO"


def get_host() -> str:
    return os.environ.get("HOST", "0.0.0.0").strip()


def get_port() -> int:
    try:
        return int(os.environ.get("PORT", "8000"))
    except ValueError:
        return 8000


def load_checker_config() -> CheckerConfig:
    """Build and validate a CheckerConfig from the environment."""
    return CheckerConfig(
        strict=get_strict(),
        state_words=get_state_words(),
        theme_artifact_matcher=get_theme_pattern(),
        layout_prefix=get_layout_prefix(),
        primitive_prefix=get_primitive_prefix(),
        max_workers=get_max_workers(),
    ).validate()
