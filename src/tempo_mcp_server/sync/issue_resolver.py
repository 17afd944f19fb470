"""Resolution of Jira issue keys and Tempo accounts."""

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

from ..api.jira_client import JiraClient
from ..api.tempo_client import TempoClient
from ..domain.models import Account, IssueRef

logger = logging.getLogger(__name__)


def unique_issue_ids(worklogs: Iterable[Dict[str, Any]]) -> List[str]:
    """Collect distinct issue IDs in first-occurrence order, skipping missing ones."""
    issue_ids: Dict[str, None] = {}
    for worklog in worklogs:
        issue_id = (worklog.get("issue") or {}).get("id")
        if issue_id is not None:
            issue_ids.setdefault(str(issue_id), None)
    return list(issue_ids)


class IssueResolver:
    """Maps Tempo issue IDs to Jira issue keys."""

    def __init__(self, jira_client: JiraClient) -> None:
        self.jira_client = jira_client

    async def get_issue_keys_map(self, worklogs: Iterable[Dict[str, Any]]) -> Dict[str, str]:
        """Resolve the issue keys referenced by a list of worklogs.

        Every distinct issue ID is looked up once and all lookups run
        concurrently. IDs whose lookup fails are left out of the mapping.

        Args:
            worklogs: Tempo worklog payloads

        Returns:
            Dictionary mapping issue ID to issue key
        """
        issue_ids = unique_issue_ids(worklogs)
        if not issue_ids:
            return {}

        keys = await asyncio.gather(*(self._lookup_key(issue_id) for issue_id in issue_ids))
        return {issue_id: key for issue_id, key in zip(issue_ids, keys) if key is not None}

    async def _lookup_key(self, issue_id: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self.jira_client.get_issue_key_by_id, issue_id)
        except Exception as e:
            logger.warning(f"Could not get key for issue ID {issue_id}: {e}")
            return None


class AccountResolver:
    """Fetches the Tempo account linked to an issue."""

    def __init__(self, tempo_client: TempoClient) -> None:
        self.tempo_client = tempo_client

    async def resolve(self, issue: IssueRef) -> Optional[Account]:
        """Return the issue's Tempo account, or None if it has none.

        Fetch errors propagate to the caller.
        """
        if not issue.account_id:
            return None
        return await asyncio.to_thread(self.tempo_client.get_account, issue.account_id)
