"""Startup validation and configuration checks."""

from pathlib import Path

from beam_checker.errors import ConfigurationError
from beam_checker.log import configure_logging, get_logger

from .config import get_log_level, load_checker_config

logger = get_logger(__name__)


def validate_config() -> bool:
    """Configure logging and warn about configuration problems. Returns True when usable."""
    configure_logging(get_log_level())
    if not Path(".env").exists():
        logger.info(".env file not found; using environment and defaults")
    try:
        config = load_checker_config()
    except ConfigurationError as e:
        logger.warning("Invalid checker configuration: {}", e)
        return False
    logger.info(
        "Checker configured: theme pattern {!r}, {} state words, strict={}",
        config.theme_artifact_matcher, len(config.state_words), config.strict,
    )
    return True
