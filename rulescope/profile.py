"""
Local package manifest inspection for Rulescope.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

NOT_INSTALLED = "not installed"


def read_package_manifest(root: Path) -> dict[str, Any] | None:
    """Parse package.json, returning None if it is missing or malformed."""
    package_path = root / "package.json"
    if not package_path.exists():
        return None

    try:
        with open(package_path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, IOError) as e:
        logger.warning("Could not read %s: %s", package_path, e)
        return None

    return data if isinstance(data, dict) else None


def detect_dependency_version(root: Path, name: str = "react") -> str | None:
    """
    Look up the declared version range of a dependency.

    dependencies wins over devDependencies. Returns None when the package
    is not declared or there is no usable package.json.
    """
    manifest = read_package_manifest(root)
    if manifest is None:
        return None

    for section in ("dependencies", "devDependencies"):
        deps = manifest.get(section) or {}
        if isinstance(deps, dict) and deps.get(name):
            return str(deps[name])
    return None
