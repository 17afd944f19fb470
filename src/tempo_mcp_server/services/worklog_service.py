"""Core worklog service exposing the tool operations."""

import asyncio
import logging
import time
from typing import Any, Awaitable, Dict, Optional, Sequence

from ..api.errors import format_error
from ..api.jira_client import JiraClient
from ..api.tempo_client import TempoClient
from ..domain.models import RemoteWorklog, ToolResponse, WorklogEntry
from ..sync.bulk_writer import BulkWorklogWriter, build_worklog_payload
from ..sync.formatter import (
    format_bulk_report,
    format_created_message,
    format_updated_message,
    format_worklog_line,
)
from ..sync.issue_resolver import AccountResolver, IssueResolver
from ..sync.pagination import PaginatedRetriever
from ..utils.logging import StructuredLogger
from ..utils.time_math import format_hours, hours_to_seconds, to_api_time

logger = logging.getLogger(__name__)


class WorklogService:
    """Service for reading and writing Tempo worklogs.

    Every public method returns a ToolResponse and never raises: failures
    are reported as error responses.
    """

    def __init__(
        self,
        tempo_client: TempoClient,
        jira_client: JiraClient,
        structured_logger: Optional[StructuredLogger] = None,
    ):
        self.tempo_client = tempo_client
        self.jira_client = jira_client
        self.structured_logger = structured_logger
        self.retriever = PaginatedRetriever(tempo_client)
        self.issue_resolver = IssueResolver(jira_client)
        self.account_resolver = AccountResolver(tempo_client)
        self.bulk_writer = BulkWorklogWriter(tempo_client, jira_client, self.account_resolver)

    async def retrieve_worklogs(self, start_date: str, end_date: str) -> ToolResponse:
        """Retrieve the configured user's worklogs within a date range."""
        return await self._run(
            "retrieveWorklogs",
            "Error retrieving worklogs",
            self._retrieve_worklogs(start_date, end_date),
        )

    async def create_worklog(
        self,
        issue_key: str,
        time_spent_hours: float,
        date: str,
        description: str = "",
        start_time: Optional[str] = None,
    ) -> ToolResponse:
        """Create a single worklog."""
        return await self._run(
            "createWorklog",
            "Failed to create worklog",
            self._create_worklog(issue_key, time_spent_hours, date, description, start_time),
        )

    async def bulk_create_worklogs(self, entries: Sequence[WorklogEntry]) -> ToolResponse:
        """Create multiple worklogs, reporting successes and failures per entry."""
        return await self._run(
            "bulkCreateWorklogs",
            "Error processing bulk worklogs",
            self._bulk_create_worklogs(entries),
        )

    async def edit_worklog(
        self,
        worklog_id: str,
        time_spent_hours: float,
        description: Optional[str] = None,
        date: Optional[str] = None,
        start_time: Optional[str] = None,
    ) -> ToolResponse:
        """Edit an existing worklog, keeping the fields that are not changed."""
        return await self._run(
            "editWorklog",
            "Failed to edit worklog",
            self._edit_worklog(worklog_id, time_spent_hours, description, date, start_time),
        )

    async def delete_worklog(self, worklog_id: str) -> ToolResponse:
        """Delete a worklog."""
        return await self._run(
            "deleteWorklog",
            "Failed to delete worklog",
            self._delete_worklog(worklog_id),
        )

    async def _run(
        self, operation: str, error_prefix: str, call: Awaitable[ToolResponse]
    ) -> ToolResponse:
        """Await an operation, converting any exception into an error response."""
        started = time.monotonic()
        if self.structured_logger:
            self.structured_logger.log_operation_start(operation)

        error_message = None
        try:
            response = await call
        except Exception as e:
            error_message = format_error(e)
            logger.error(f"{operation} failed: {error_message}")
            response = ToolResponse.error(f"{error_prefix}: {error_message}")

        if self.structured_logger:
            duration_ms = int((time.monotonic() - started) * 1000)
            details = {
                key: value
                for key, value in (response.metadata or {}).items()
                if key != "details"
            }
            self.structured_logger.log_operation_complete(
                operation,
                duration_ms,
                status="error" if response.is_error else "success",
                details=details,
                error=error_message,
            )
        return response

    async def _retrieve_worklogs(self, start_date: str, end_date: str) -> ToolResponse:
        account_id = await asyncio.to_thread(self.jira_client.get_current_user_account_id)
        page_result = await self.retriever.fetch_all(account_id, start_date, end_date)

        metadata = {
            "totalCount": len(page_result.worklogs),
            "pagesProcessed": page_result.pages_processed,
            "startDate": start_date,
            "endDate": end_date,
        }

        if not page_result.worklogs:
            return ToolResponse.from_lines(
                ["No worklogs found for the specified date range."], metadata=metadata
            )

        issue_keys = await self.issue_resolver.get_issue_keys_map(page_result.worklogs)
        lines = [format_worklog_line(worklog, issue_keys) for worklog in page_result.worklogs]
        return ToolResponse.from_lines(lines, metadata=metadata)

    async def _create_worklog(
        self,
        issue_key: str,
        time_spent_hours: float,
        date: str,
        description: str,
        start_time: Optional[str],
    ) -> ToolResponse:
        issue, author_account_id = await asyncio.gather(
            asyncio.to_thread(self.jira_client.get_issue, issue_key),
            asyncio.to_thread(self.jira_client.get_current_user_account_id),
        )
        account = await self.account_resolver.resolve(issue)

        entry = WorklogEntry(
            issue_key=issue_key,
            time_spent_hours=time_spent_hours,
            date=date,
            description=description,
            start_time=start_time,
        )
        payload = build_worklog_payload(entry, author_account_id, account, issue_id=issue.id)
        created = await asyncio.to_thread(self.tempo_client.create_worklog, payload)

        worklog_id = str(created.get("tempoWorklogId"))
        logger.info(f"Created Tempo worklog {worklog_id} for {issue_key}")
        message = format_created_message(
            worklog_id, issue_key, time_spent_hours, date, start_time, account
        )
        return ToolResponse.from_lines([message], metadata={"worklogId": worklog_id})

    async def _bulk_create_worklogs(self, entries: Sequence[WorklogEntry]) -> ToolResponse:
        outcome = await self.bulk_writer.write(entries)
        metadata = {
            "totalSuccess": outcome.total_success,
            "totalFailure": outcome.total_failure,
            "details": {
                "successes": [result.to_dict() for result in outcome.successes],
                "failures": [error.to_dict() for error in outcome.failures],
            },
        }
        return ToolResponse.from_lines(
            format_bulk_report(outcome.successes, outcome.failures),
            metadata=metadata,
            is_error=outcome.is_error,
        )

    async def _edit_worklog(
        self,
        worklog_id: str,
        time_spent_hours: float,
        description: Optional[str],
        date: Optional[str],
        start_time: Optional[str],
    ) -> ToolResponse:
        current = RemoteWorklog.from_api(
            await asyncio.to_thread(self.tempo_client.get_worklog, worklog_id)
        )

        seconds = hours_to_seconds(time_spent_hours)
        payload: Dict[str, Any] = {
            "authorAccountId": current.author_account_id,
            "startDate": date or current.start_date,
            "timeSpentSeconds": seconds,
            "billableSeconds": seconds,
        }
        if description is not None:
            payload["description"] = description
        elif current.description is not None:
            payload["description"] = current.description
        if start_time:
            payload["startTime"] = to_api_time(start_time)
        elif current.start_time:
            payload["startTime"] = current.start_time

        await asyncio.to_thread(self.tempo_client.update_worklog, worklog_id, payload)
        logger.info(f"Updated Tempo worklog {worklog_id}")
        return ToolResponse.from_lines([format_updated_message(time_spent_hours, start_time)])

    async def _delete_worklog(self, worklog_id: str) -> ToolResponse:
        metadata: Optional[Dict[str, Any]] = None
        try:
            current = RemoteWorklog.from_api(
                await asyncio.to_thread(self.tempo_client.get_worklog, worklog_id)
            )
            metadata = {
                "worklogId": current.worklog_id or worklog_id,
                "issueId": current.issue_id,
                "startDate": current.start_date,
                "hours": format_hours(current.time_spent_seconds),
            }
        except Exception as e:
            # Continue with deletion even if we can't get details
            logger.warning(f"Could not fetch worklog details for {worklog_id}: {format_error(e)}")

        await asyncio.to_thread(self.tempo_client.delete_worklog, worklog_id)
        return ToolResponse.from_lines(["Worklog deleted successfully"], metadata=metadata)