"""Minimal Jira API client for user and issue lookups."""

import logging
from typing import Any, Optional, Union

import requests

from ..domain.models import IssueRef
from ..domain.schemas import validate_issue_identifier
from .errors import wrap_error

logger = logging.getLogger(__name__)


class JiraClient:
    """Simple Jira API client."""

    def __init__(
        self,
        base_url: str,
        email: str,
        api_token: str,
        tempo_account_field_id: Optional[str] = None,
    ) -> None:
        """Initialize Jira client.

        Args:
            base_url: Jira base URL
            email: User email for authentication and user lookup
            api_token: Jira API token
            tempo_account_field_id: ID of the custom field linking issues to
                Tempo accounts (e.g. '10234'), if the organization uses one
        """
        self.base_url = base_url.rstrip("/")
        self.email = email
        self.api_token = api_token
        self.tempo_account_field_id = tempo_account_field_id
        self.headers = {"Accept": "application/json", "Content-Type": "application/json"}

    def _make_request(self, method: str, endpoint: str, **kwargs: Any) -> requests.Response:
        """Make authenticated request to Jira API.

        Args:
            method: HTTP method
            endpoint: API endpoint
            **kwargs: Additional request arguments

        Returns:
            Response object
        """
        url = f"{self.base_url}/rest/api/3{endpoint}"
        auth = (self.email, self.api_token)

        try:
            response = requests.request(
                method, url, headers=self.headers, auth=auth, timeout=30, **kwargs
            )
            response.raise_for_status()
            return response
        except requests.RequestException as e:
            logger.error(f"Jira API request failed: {e}")
            raise

    def get_current_user_account_id(self) -> str:
        """Get the account ID of the configured user.

        Looks the user up by email and requires an exact email match.

        Returns:
            Jira account ID
        """
        try:
            response = self._make_request("GET", "/user/search", params={"query": self.email})
            users = response.json() or []
            if not users:
                raise ValueError(f"No user found with email: {self.email}")

            user = next((u for u in users if u.get("emailAddress") == self.email), None)
            if user is None:
                raise ValueError(f"No exact match for email: {self.email}")
            return user["accountId"]
        except Exception as e:
            raise wrap_error(e, "Failed to get user account ID") from e

    def get_issue_key_by_id(self, issue_id: Union[str, int]) -> str:
        """Get issue key from issue ID.

        Args:
            issue_id: Jira issue ID (e.g. '10386' or 10386)

        Returns:
            Issue key (e.g. 'PROJ-123')
        """
        try:
            validated = validate_issue_identifier(issue_id)
            response = self._make_request("GET", f"/issue/{validated}", params={"fields": "key"})
            return response.json()["key"]
        except Exception as e:
            raise wrap_error(e, f"Failed to get issue key for ID {issue_id}") from e

    def get_issue(self, id_or_key: Union[str, int]) -> IssueRef:
        """Get issue reference from issue ID or key.

        When a Tempo account custom field is configured, the linked account
        ID is read from it and must be present.

        Args:
            id_or_key: Issue ID or key

        Returns:
            IssueRef with id, key and optional Tempo account ID
        """
        try:
            validated = validate_issue_identifier(id_or_key)
            response = self._make_request("GET", f"/issue/{validated}")
            data = response.json()

            account_id = None
            if self.tempo_account_field_id:
                field_name = f"customfield_{self.tempo_account_field_id}"
                linked = (data.get("fields") or {}).get(field_name)
                if not isinstance(linked, dict) or linked.get("id") is None:
                    raise ValueError(f"Tempo account field {field_name} is empty")
                account_id = str(linked["id"])

            return IssueRef(id=str(data["id"]), key=data["key"], account_id=account_id)
        except Exception as e:
            raise wrap_error(e, f"Failed to get issue for {id_or_key}") from e
