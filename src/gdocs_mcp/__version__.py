"""Version information for gdocs-mcp."""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DISTRIBUTION_NAME = "gdocs-mcp"


def _get_version() -> str:
    """Resolve the version from a VERSION file, installed metadata, or a fallback."""
    for candidate in (
        Path(__file__).parent / "VERSION",
        Path(__file__).resolve().parents[2] / "VERSION",
    ):
        if candidate.exists():
            return candidate.read_text().strip()

    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        return "0.1.0"


__version__ = _get_version()
