"""Update check against PyPI.

Notify-only: the result is shown as a notice, nothing is installed.
Network failures are never surfaced to the user.

PUBLIC API:
  - VersionInfo: Current/latest version and whether an update exists
  - check_for_update: Check PyPI, honoring a 24h cache
  - is_newer_version: Compare two dotted versions
  - update_message: Banner message for a VersionInfo, or None
"""

import json
import logging
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from . import __version__

logger = logging.getLogger(__name__)

PACKAGE_NAME = "prockiller"
PYPI_URL = f"https://pypi.org/pypi/{PACKAGE_NAME}/json"
CACHE_FILE = Path(tempfile.gettempdir()) / "prockiller-py-update-check.json"
CACHE_TTL = 24 * 60 * 60
FETCH_TIMEOUT = 5.0


@dataclass
class VersionInfo:
    current_version: str
    latest_version: str
    update_available: bool
    last_checked: float


def _version_parts(version: str) -> list[int]:
    parts = []
    for segment in version.split(".")[:3]:
        parts.append(int(segment) if segment.isdigit() else 0)
    return parts + [0] * (3 - len(parts))


def is_newer_version(current: str, latest: str) -> bool:
    """Check whether latest is newer than current (major.minor.patch)."""
    return _version_parts(latest) > _version_parts(current)


def _read_cache(path: Path) -> Optional[dict]:
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError):
        return None
    if not isinstance(data, dict) or not isinstance(data.get("latestVersion"), str):
        return None
    if not isinstance(data.get("lastChecked"), (int, float)):
        return None
    return data


def _write_cache(path: Path, latest_version: str, checked: float) -> None:
    try:
        path.write_text(json.dumps({"lastChecked": checked, "latestVersion": latest_version}))
    except OSError as e:
        logger.debug(f"Could not write update cache {path}: {e}")


def fetch_latest_version(url: str = PYPI_URL, timeout: float = FETCH_TIMEOUT) -> str:
    """Fetch latest released version from PyPI.

    Raises:
        httpx.HTTPError: On connection or HTTP error.
        ValueError: If the response has no version.
    """
    response = httpx.get(url, timeout=timeout, headers={"Accept": "application/json"})
    response.raise_for_status()
    data = response.json()
    info = data.get("info") if isinstance(data, dict) else None
    latest = info.get("version") if isinstance(info, dict) else None
    if not isinstance(latest, str) or not latest:
        raise ValueError("Could not find latest version")
    return latest


def check_for_update(
    force: bool = False,
    current_version: str = __version__,
    cache_file: Path = CACHE_FILE,
) -> VersionInfo:
    """Check whether a newer release exists. Never raises.

    Args:
        force: Ignore a fresh cache entry.
        current_version: Installed version.
        cache_file: Where the last check is remembered.
    """
    now = time.time()
    cache = _read_cache(cache_file)

    if not force and cache and 0 <= now - cache["lastChecked"] < CACHE_TTL:
        latest = cache["latestVersion"]
        return VersionInfo(current_version, latest, is_newer_version(current_version, latest), cache["lastChecked"])

    try:
        latest = fetch_latest_version()
    except (httpx.HTTPError, ValueError) as e:
        logger.debug(f"Update check failed: {e}")
        if cache:
            latest = cache["latestVersion"]
            return VersionInfo(
                current_version, latest, is_newer_version(current_version, latest), cache["lastChecked"]
            )
        return VersionInfo(current_version, current_version, False, now)

    _write_cache(cache_file, latest, now)
    return VersionInfo(current_version, latest, is_newer_version(current_version, latest), now)


def update_message(info: VersionInfo) -> Optional[str]:
    """Get banner message for info, None when up to date."""
    if not info.update_available:
        return None
    return f"Update available (v{info.latest_version}). Run: pip install -U {PACKAGE_NAME}"
