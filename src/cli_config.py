"""Runtime settings resolution for the CLI.

Precedence, highest first: CLI flags, environment variables, the YAML config
file, built-in defaults from ``Constants``. The result is an immutable
``Settings`` value handed explicitly to the collaborators.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one invocation."""
    install_root: Path
    releases_index_url: str
    install_script_url: Optional[str] = None


def default_install_root() -> Path:
    return Path.home() / Constants.DEFAULT_INSTALL_DIRNAME


def load_config_file(config_path: Optional[str]) -> Dict[str, Any]:
    """Load the YAML config file; missing or malformed files yield ``{}``.

    Args:
        config_path: Path to a YAML file, ``~`` is expanded.

    Returns:
        The ``dver`` section if present, otherwise the whole mapping.
    """
    if not config_path:
        return {}
    path = Path(config_path).expanduser()
    if not path.is_file():
        logger.debug("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring config file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Ignoring config file %s: expected a mapping", path)
        return {}
    section = data.get("dver", data)
    return section if isinstance(section, dict) else {}


def _first(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return None


def load_settings(args, env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from parsed arguments, environment and config file."""
    env = os.environ if env is None else env
    config_path = _first(
        getattr(args, "CONFIG", None),
        env.get(Constants.ENV_CONFIG),
        Constants.DEFAULT_CONFIG_PATH,
    )
    cfg = load_config_file(config_path)

    install_dir = _first(
        getattr(args, "INSTALL_DIR", None),
        env.get(Constants.ENV_INSTALL_DIR),
        cfg.get("install_dir"),
    )
    install_root = Path(str(install_dir)).expanduser() if install_dir else default_install_root()

    releases_index_url = _first(
        env.get(Constants.ENV_RELEASES_INDEX_URL),
        cfg.get("releases_index_url"),
        Constants.RELEASES_INDEX_URL,
    )

    settings = Settings(
        install_root=install_root,
        releases_index_url=str(releases_index_url),
        install_script_url=cfg.get("install_script_url") or None,
    )
    logger.debug("Settings resolved: %s", settings)
    return settings
