"""Check whether a newer urldedupe release is available."""

from dataclasses import dataclass
from typing import Optional

import httpx

from urldedupe.core.constants import UPDATE_TIMEOUT, VERSION_URL
from urldedupe.core.exceptions import UpdateCheckError


@dataclass
class UpdateStatus:
    current: str
    latest: str

    @property
    def update_available(self) -> bool:
        # Release tags may or may not carry a "v" prefix
        return self.latest.lstrip("v") != self.current.lstrip("v")


async def fetch_latest_version(
    url: str = VERSION_URL,
    *,
    timeout: float = UPDATE_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Fetch the latest released version string.

    Args:
        url: Location of a plain-text VERSION file
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)

    Returns:
        First line of the VERSION file, stripped

    Raises:
        UpdateCheckError: If the request fails or the file is empty
    """
    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise UpdateCheckError(
            f"Error fetching version: HTTP {e.response.status_code}"
        ) from e
    except httpx.HTTPError as e:
        raise UpdateCheckError(f"Error checking for updates: {e}") from e

    lines = response.text.strip().splitlines()
    latest = lines[0].strip() if lines else ""
    if not latest:
        raise UpdateCheckError("Unable to fetch the latest version")
    return latest


async def check_for_updates(
    current: str,
    url: str = VERSION_URL,
    *,
    timeout: float = UPDATE_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UpdateStatus:
    """Compare ``current`` against the latest released version."""
    latest = await fetch_latest_version(url, timeout=timeout, transport=transport)
    return UpdateStatus(current=current, latest=latest)
