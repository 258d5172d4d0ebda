"""Version label resolution."""

import json
import logging
import tomllib
from pathlib import Path
from typing import Optional

from .constants import DEFAULT_VERSION

logger = logging.getLogger(__name__)


def read_package_json_version(root: Path) -> Optional[str]:
    """Read ``version`` from package.json, or None."""
    path = root / "package.json"
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.debug("Could not read %s: %s", path, e)
        return None
    version = data.get("version") if isinstance(data, dict) else None
    return str(version) if version else None


def read_pyproject_version(root: Path) -> Optional[str]:
    """Read ``[project].version`` from pyproject.toml, or None."""
    path = root / "pyproject.toml"
    if not path.exists():
        return None
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("Could not read %s: %s", path, e)
        return None
    version = data.get("project", {}).get("version")
    return str(version) if version else None


def resolve_version(root: Path, explicit: Optional[str] = None) -> str:
    """Pick the version label for this run.

    Order: explicit value, package.json, pyproject.toml, then "0.0.0".
    """
    if explicit:
        return explicit
    return (
        read_package_json_version(root)
        or read_pyproject_version(root)
        or DEFAULT_VERSION
    )
