"""
HTTP client for the static game options list.

The list is a JSON object mapping category names to arrays of candidate
secret items. It is fetched once per process; a failure degrades to an empty
mapping and the round falls back to a default item.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from ..core.exceptions import OptionsFetchFailed

logger = logging.getLogger(__name__)

GAME_OPTIONS_URL = (
    "https://gist.githubusercontent.com/prateekchaplot/8bf4ed2f7206c56d66ec73b776c1113a/raw/"
    "1efbf16242e65d3d782ceb4a948d7eccbf3fbdf8/imposter-detective.json"
)
DEFAULT_TIMEOUT = 10.0


@dataclass
class OptionsResult:
    """Resolved provider result: the mapping plus the error if the fetch failed."""
    options: Dict[str, List[str]] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def parse_options(data: Any) -> Dict[str, List[str]]:
    """
    Validate a decoded options payload.

    Raises:
        OptionsFetchFailed: payload is not a JSON object
    """
    if not isinstance(data, dict):
        raise OptionsFetchFailed("Fetched game options are not in the expected format.")

    options: Dict[str, List[str]] = {}
    for category, items in data.items():
        if not isinstance(items, list):
            logger.warning("Ignoring options category '%s': expected a list", category)
            continue
        options[str(category)] = [item for item in items if isinstance(item, str) and item.strip()]
    return options


class OptionsProvider:
    """Fetches the options list with a single GET; no retries."""

    def __init__(self, url: str = GAME_OPTIONS_URL, *,
                 session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self) -> Dict[str, List[str]]:
        """
        Fetch and validate the options mapping.

        Raises:
            OptionsFetchFailed: network error, non-2xx status, or malformed JSON
        """
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else "?"
            raise OptionsFetchFailed(f"Failed to fetch game options: HTTP {status}") from exc
        except requests.RequestException as exc:
            raise OptionsFetchFailed(f"Failed to fetch game options: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise OptionsFetchFailed("Fetched game options are not valid JSON.") from exc
        return parse_options(data)

    def load(self) -> OptionsResult:
        """Fetch, converting any failure into an empty result with ``error`` set."""
        try:
            options = self.fetch()
        except OptionsFetchFailed as exc:
            logger.error("Error fetching game options from %s", self.url, exc_info=True)
            return OptionsResult(options={}, error=exc.message)
        logger.info("Loaded %d option categories", len(options))
        return OptionsResult(options=options)
