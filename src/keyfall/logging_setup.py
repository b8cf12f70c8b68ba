import logging
import os
from typing import Optional

ENV_VAR = "KEYFALL_LOG_LEVEL"


def _parse_level(s: Optional[str]) -> Optional[int]:
    if not s:
        return None
    v = str(s).strip().upper()
    if v == "WARN":
        v = "WARNING"
    level = logging.getLevelName(v)
    return level if isinstance(level, int) else None


def setup_logging(quiet: bool = False, debug: bool = False, *, name: str = "keyfall") -> int:
    """Configure logging once and return the effective level.

    Priority (highest first): env KEYFALL_LOG_LEVEL, --debug, --quiet, INFO.
    """
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    if debug:
        level = logging.DEBUG
    env_level = _parse_level(os.environ.get(ENV_VAR))
    if env_level is not None:
        level = env_level

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level,
            format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    logging.getLogger(name).setLevel(level)
    logging.getLogger(name).debug(
        "logging initialized (level=%s, quiet=%s, debug=%s)",
        logging.getLevelName(level), quiet, debug,
    )
    return level
