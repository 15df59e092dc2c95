"""HTTP client for the task service (AUT) log endpoint."""

import logging
from typing import Optional

import requests

from .github_client import APIResponse
from .session import GitHubSession

logger = logging.getLogger(__name__)


class TaskLogClient:
    """Read-only client for ``GET /api/logs`` on the task service."""

    def __init__(self, session: GitHubSession):
        self.base_url = session.aut_base_url.rstrip("/")
        self.timeout = session.timeout
        self.session = requests.Session()

    def get_logs(self, last: Optional[int] = None, start: Optional[int] = None,
                 end: Optional[int] = None) -> APIResponse:
        """
        Fetch parsed log entries, oldest first.

        The service applies the time range first and then keeps the trailing
        ``last`` entries of what remains.

        Args:
            last: Keep only the last N entries
            start: UTC milliseconds lower bound (``from``)
            end: UTC milliseconds upper bound (``to``)

        Returns:
            APIResponse with a list of {timestamp, level, message} or error
        """
        url = f"{self.base_url}/api/logs"
        params = {"last": last, "from": start, "to": end}
        params = {k: v for k, v in params.items() if v is not None}

        logger.debug("GET %s %s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.ConnectionError:
            return APIResponse(success=False, error=f"Cannot reach task service at {self.base_url}. Is it running?")
        except requests.Timeout:
            return APIResponse(success=False, error="Task service request timed out.")
        except requests.RequestException as e:
            return APIResponse(success=False, error=f"Error fetching logs: {e}")

        if response.status_code != 200:
            try:
                detail = response.json().get("error")
            except (ValueError, AttributeError):
                detail = None
            error = f"AUT logs API returned {response.status_code}"
            if detail:
                error = f"{error}: {detail}"
            return APIResponse(success=False, error=error, http_code=response.status_code)

        try:
            return APIResponse(success=True, data=response.json(), http_code=200)
        except ValueError:
            return APIResponse(success=False, error="AUT logs API returned invalid JSON", http_code=200)
