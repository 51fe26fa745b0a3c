"""Version of the exprcalc distribution."""

import tomllib
from importlib import metadata
from pathlib import Path

# Present only in a source checkout
_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """Installed metadata first, then ``[project].version`` from a checkout."""
    try:
        return metadata.version("exprcalc")
    except metadata.PackageNotFoundError:
        pass
    if _PYPROJECT.is_file():
        with _PYPROJECT.open("rb") as fh:
            project = tomllib.load(fh).get("project", {})
        version = project.get("version")
        if isinstance(version, str):
            return version
    return "0.0.0"


__version__ = get_version()
