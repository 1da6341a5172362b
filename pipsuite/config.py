"""Configuration loading for pipsuite.

Settings live in a TOML file at ``~/.config/pipsuite/config.toml``.
"""

import logging
from pathlib import Path
from typing import Optional

import toml

from pipsuite.fx.frankfurter import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "pipsuite"
CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_DB_PATH = CONFIG_DIR / "pipsuite.db"

TEMPLATE = {
    "journal": {
        "db_path": str(DEFAULT_DB_PATH),
        "default_account": "default_1",
    },
    "risk": {
        "default_balance": 10000.0,
        "default_risk_percentage": 1.0,
        "default_leverage": 100.0,
    },
    "fx": {
        "base_url": DEFAULT_BASE_URL,
        "timeout": DEFAULT_TIMEOUT,
    },
}


def load_config(config_path: Optional[Path] = None) -> Optional[dict]:
    """Load configuration.

    Args:
        config_path: Config file; defaults to ``~/.config/pipsuite/config.toml``.

    Returns:
        Config dict or None if not configured.
    """
    config_path = config_path or CONFIG_PATH

    if not config_path.exists():
        return None

    try:
        return toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Could not read config %s: %s", config_path, e)
        return None


def create_template_config(config_path: Optional[Path] = None) -> Path:
    """Create a template configuration file.

    Returns:
        Path of the written file.
    """
    config_path = config_path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = {section: dict(values) for section, values in TEMPLATE.items()}
    template["journal"]["db_path"] = str(config_path.parent / DEFAULT_DB_PATH.name)

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path


def get_db_path(config: Optional[dict]) -> Path:
    """Database path from config, falling back to the default location."""
    db_path = (config or {}).get("journal", {}).get("db_path")
    return Path(db_path).expanduser() if db_path else DEFAULT_DB_PATH


def get_section(config: Optional[dict], name: str) -> dict:
    """A config section merged over its template defaults."""
    section = dict(TEMPLATE.get(name, {}))
    section.update((config or {}).get(name, {}))
    return section
