"""Package version lookup."""

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DIST_NAME = "loopdash"
UNKNOWN_VERSION = "0.0.0+unknown"

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _checkout_version() -> str | None:
    """Version declared by the surrounding source checkout, if this is one."""
    try:
        with _PYPROJECT.open("rb") as fh:
            project = tomllib.load(fh).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return None
    if project.get("name") != DIST_NAME:
        return None
    declared = project.get("version")
    return declared if isinstance(declared, str) else None


def get_version() -> str:
    """Checkout version first, then the installed distribution's."""
    declared = _checkout_version()
    if declared:
        return declared
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return UNKNOWN_VERSION


__version__ = get_version()
