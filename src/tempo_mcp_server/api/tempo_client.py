"""Minimal Tempo API client for worklog and account management."""

import logging
from typing import Any

import requests

from ..domain.models import Account
from .errors import wrap_error

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.tempo.io/4"


class TempoClient:
    """Simple Tempo API client.

    Failed calls raise ApiError prefixed with the call context.
    """

    def __init__(self, api_token: str, base_url: str = DEFAULT_BASE_URL) -> None:
        """Initialize Tempo client.

        Args:
            api_token: Tempo API authentication token
            base_url: Tempo REST API base URL
        """
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Authorization": f"Bearer {api_token}",
            "Content-Type": "application/json",
        }

    def _make_request(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        """Make authenticated request to Tempo API.

        Args:
            method: HTTP method
            endpoint: API endpoint, or an absolute URL (pagination cursors)
            **kwargs: Additional request arguments

        Returns:
            Response object
        """
        if endpoint.startswith(("http://", "https://")):
            url = endpoint
        else:
            url = f"{self.base_url}{endpoint}"

        try:
            response = requests.request(method, url, headers=self.headers, timeout=30, **kwargs)
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            logger.error(f"Tempo API request failed: {method} {url}: {e}")
            raise

    def get_user_worklogs(self, account_id: str, from_date: str, to_date: str) -> dict[str, Any]:
        """Get the first page of a user's worklogs for a date range.

        Args:
            account_id: Jira account ID of the worklog author
            from_date: Start date (YYYY-MM-DD)
            to_date: End date (YYYY-MM-DD)

        Returns:
            Page payload with ``results`` and ``metadata`` (``next`` cursor)
        """
        try:
            response = self._make_request(
                "GET",
                f"/worklogs/user/{account_id}",
                params={"from": from_date, "to": to_date},
            )
            return response.json()
        except Exception as e:
            raise wrap_error(e, f"Failed to get worklogs for user {account_id}") from e

    def get_page(self, url: str) -> dict[str, Any]:
        """Follow a pagination cursor returned in ``metadata.next``."""
        try:
            return self._make_request("GET", url).json()
        except Exception as e:
            raise wrap_error(e, "Failed to get next worklog page") from e

    def get_worklog(self, worklog_id: str) -> dict[str, Any]:
        try:
            return self._make_request("GET", f"/worklogs/{worklog_id}").json()
        except Exception as e:
            raise wrap_error(e, f"Failed to get worklog {worklog_id}") from e

    def create_worklog(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a single worklog.

        Args:
            payload: Worklog payload including ``issueId``

        Returns:
            Created worklog (carries ``tempoWorklogId``)
        """
        try:
            return self._make_request("POST", "/worklogs", json=payload).json()
        except Exception as e:
            raise wrap_error(e, f"Failed to create worklog for issue {payload.get('issueId')}") from e

    def bulk_create_worklogs(
        self, issue_id: str, payloads: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Create several worklogs on one issue with a single call.

        Args:
            issue_id: Jira issue ID all worklogs belong to
            payloads: Worklog payloads (without ``issueId``)

        Returns:
            Created worklogs, positionally matching the submitted payloads
        """
        try:
            response = self._make_request(
                "POST", f"/worklogs/issue/{issue_id}/bulk", json=payloads
            )
            data = response.json()
        except Exception as e:
            raise wrap_error(e, f"Failed to bulk create worklogs for issue {issue_id}") from e
        return data if isinstance(data, list) else []

    def update_worklog(self, worklog_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            return self._make_request("PUT", f"/worklogs/{worklog_id}", json=payload).json()
        except Exception as e:
            raise wrap_error(e, f"Failed to update worklog {worklog_id}") from e

    def delete_worklog(self, worklog_id: str) -> None:
        try:
            self._make_request("DELETE", f"/worklogs/{worklog_id}")
        except Exception as e:
            raise wrap_error(e, f"Failed to delete worklog {worklog_id}") from e
        logger.info(f"Deleted Tempo worklog {worklog_id}")

    def get_account(self, account_id: str) -> Account:
        """Get Tempo account details.

        Args:
            account_id: Tempo account ID

        Returns:
            Account with key and display name
        """
        try:
            data = self._make_request("GET", f"/accounts/{account_id}").json()
            return Account(key=data["key"], name=data.get("name", data["key"]))
        except Exception as e:
            raise wrap_error(e, f"Failed to get Tempo account {account_id}") from e
