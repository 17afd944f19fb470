"""Bulk creation of worklogs grouped by issue."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..api.errors import format_error
from ..api.jira_client import JiraClient
from ..api.tempo_client import TempoClient
from ..domain.models import Account, WorklogEntry, WorklogError, WorklogResult
from ..utils.time_math import calculate_end_time, hours_to_seconds, to_api_time
from .issue_resolver import AccountResolver

logger = logging.getLogger(__name__)

ACCOUNT_ATTRIBUTE_KEY = "_Account_"
NOT_CREATED_MESSAGE = "Worklog was not created by Tempo"

GroupOutcome = Tuple[List[WorklogResult], List[WorklogError]]


def build_worklog_payload(
    entry: WorklogEntry,
    author_account_id: str,
    account: Optional[Account] = None,
    issue_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Convert a worklog entry into a Tempo worklog payload.

    Args:
        entry: Worklog entry to convert
        author_account_id: Jira account ID of the author
        account: Tempo account to tag the worklog with, if any
        issue_id: Jira issue ID, required for single worklog creation

    Returns:
        Payload for the Tempo worklog endpoints
    """
    payload: Dict[str, Any] = {}
    if issue_id is not None:
        payload["issueId"] = issue_id
    payload.update(
        {
            "timeSpentSeconds": hours_to_seconds(entry.time_spent_hours),
            "startDate": entry.date,
            "authorAccountId": author_account_id,
            "description": entry.description or "",
        }
    )
    if entry.start_time:
        payload["startTime"] = to_api_time(entry.start_time)
    if account:
        payload["attributes"] = [{"key": ACCOUNT_ATTRIBUTE_KEY, "value": account.key}]
    return payload


def group_entries_by_issue(entries: Sequence[WorklogEntry]) -> Dict[str, List[WorklogEntry]]:
    """Group entries by issue key, keeping first-occurrence order."""
    groups: Dict[str, List[WorklogEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.issue_key, []).append(entry)
    return groups


@dataclass
class BatchOutcome:
    """Aggregated result of a bulk creation."""

    successes: List[WorklogResult] = field(default_factory=list)
    failures: List[WorklogError] = field(default_factory=list)

    @property
    def total_success(self) -> int:
        return len(self.successes)

    @property
    def total_failure(self) -> int:
        return len(self.failures)

    @property
    def is_error(self) -> bool:
        """Only a batch where nothing succeeded counts as an error."""
        return self.total_success == 0 and self.total_failure > 0


class BulkWorklogWriter:
    """Creates a batch of worklogs with one bulk call per issue."""

    def __init__(
        self,
        tempo_client: TempoClient,
        jira_client: JiraClient,
        account_resolver: Optional[AccountResolver] = None,
    ) -> None:
        self.tempo_client = tempo_client
        self.jira_client = jira_client
        self.account_resolver = account_resolver or AccountResolver(tempo_client)

    async def write(self, entries: Sequence[WorklogEntry]) -> BatchOutcome:
        """Create all entries, isolating failures per issue.

        A failing issue group marks only its own entries as failed. Results
        are returned in first-occurrence order of the issue keys.

        Args:
            entries: Worklog entries to create

        Returns:
            BatchOutcome with one success or failure per entry
        """
        author_account_id = await asyncio.to_thread(
            self.jira_client.get_current_user_account_id
        )
        groups = group_entries_by_issue(entries)
        logger.info(f"Creating {len(entries)} worklogs across {len(groups)} issue(s)")

        group_outcomes = await asyncio.gather(
            *(
                self._write_group(issue_key, group, author_account_id)
                for issue_key, group in groups.items()
            )
        )

        outcome = BatchOutcome()
        for successes, failures in group_outcomes:
            outcome.successes.extend(successes)
            outcome.failures.extend(failures)
        return outcome

    async def _write_group(
        self, issue_key: str, entries: List[WorklogEntry], author_account_id: str
    ) -> GroupOutcome:
        try:
            issue = await asyncio.to_thread(self.jira_client.get_issue, issue_key)
            account = await self.account_resolver.resolve(issue)
            payloads = [build_worklog_payload(entry, author_account_id, account) for entry in entries]
            created = await asyncio.to_thread(
                self.tempo_client.bulk_create_worklogs, issue.id, payloads
            )
        except Exception as e:
            message = format_error(e)
            logger.error(f"Failed to create worklogs for {issue_key}: {message}")
            return [], [WorklogError.from_entry(entry, message) for entry in entries]

        successes: List[WorklogResult] = []
        failures: List[WorklogError] = []
        for index, entry in enumerate(entries):
            item = created[index] if index < len(created) else None
            worklog_id = item.get("tempoWorklogId") if isinstance(item, dict) else None
            if worklog_id is None:
                failures.append(WorklogError.from_entry(entry, NOT_CREATED_MESSAGE))
                continue

            end_time = None
            if entry.start_time:
                end_time = calculate_end_time(entry.start_time, entry.time_spent_hours)

            successes.append(
                WorklogResult(
                    issue_key=issue_key,
                    time_spent_hours=entry.time_spent_hours,
                    date=entry.date,
                    worklog_id=str(worklog_id),
                    start_time=entry.start_time,
                    end_time=end_time,
                    account=account.name if account else None,
                )
            )

        if failures:
            logger.warning(
                f"Tempo accepted {len(successes)} of {len(entries)} worklogs for {issue_key}"
            )
        return successes, failures
