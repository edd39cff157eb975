# jsonjwt/config.py
"""
Centralized configuration for jsonjwt.

All configurable values are read from environment variables with sensible defaults.

Usage:
    from jsonjwt.config import QUOTE_STRINGS, INDENT

Environment Variables:
    JSONJWT_QUOTE_STRINGS: Show string values wrapped in quotes (default: true)
    JSONJWT_INDENT: Indentation used by the format command (default: 2)
    JSONJWT_STATE_PATH: Where the CLI keeps the last inputs (default: ~/.jsonjwt/state.json)
    JSONJWT_PERSIST: Whether the CLI remembers inputs between runs (default: true)
    JSONJWT_LOG_LEVEL: Log level when not running with --verbose (default: WARNING)
"""

import os
from pathlib import Path
from typing import Final


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# Display Configuration
# =============================================================================

# Default for the "Generate String with Quotes" toggle
QUOTE_STRINGS: Final[bool] = _env_flag("JSONJWT_QUOTE_STRINGS", "true")

# Indentation for pretty-printed JSON
INDENT: Final[int] = int(os.getenv("JSONJWT_INDENT", "2"))

# =============================================================================
# Persistence Configuration
# =============================================================================

STATE_PATH: Final[Path] = Path(
    os.getenv("JSONJWT_STATE_PATH", str(Path.home() / ".jsonjwt" / "state.json"))
).expanduser()

PERSIST: Final[bool] = _env_flag("JSONJWT_PERSIST", "true")

# =============================================================================
# Logging Configuration
# =============================================================================

LOG_LEVEL: Final[str] = os.getenv("JSONJWT_LOG_LEVEL", "WARNING").upper()


def config_items() -> dict:
    return {
        "QUOTE_STRINGS": QUOTE_STRINGS,
        "INDENT": INDENT,
        "STATE_PATH": str(STATE_PATH),
        "PERSIST": PERSIST,
        "LOG_LEVEL": LOG_LEVEL,
    }


def print_config() -> None:
    """Print current configuration (useful for debugging)."""
    print("jsonjwt Configuration:")
    for name, value in config_items().items():
        print(f"  {name + ':':<15}{value}")


if __name__ == "__main__":
    print_config()
