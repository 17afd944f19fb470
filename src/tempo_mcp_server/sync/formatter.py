"""Human-readable rendering of worklog results."""

from typing import Any, Dict, List, Optional, Sequence

from ..domain.models import Account, WorklogError, WorklogResult
from ..utils.time_math import calculate_end_time, format_hours


def format_hours_value(hours: float) -> str:
    """Render an hour amount without a trailing '.0' (1.0 -> '1', 1.25 -> '1.25')."""
    return f"{hours:.2f}".rstrip("0").rstrip(".")


def format_worklog_line(worklog: Dict[str, Any], issue_keys: Dict[str, str]) -> str:
    """Format a Tempo worklog as a single line.

    Args:
        worklog: Tempo worklog payload
        issue_keys: Mapping of issue ID to issue key

    Returns:
        Line with issue key, issue ID, date, optional start time, hours and description
    """
    raw_issue_id = (worklog.get("issue") or {}).get("id")
    issue_id = str(raw_issue_id) if raw_issue_id is not None else "Unknown"
    issue_key = issue_keys.get(issue_id, "Unknown")
    description = worklog.get("description") or "No description"
    hours = format_hours(worklog.get("timeSpentSeconds") or 0)
    date = worklog.get("startDate") or "Unknown"
    start_time = worklog.get("startTime") or ""

    time_info = f" | StartTime: {start_time}" if start_time else ""
    return (
        f"IssueKey: {issue_key} | IssueId: {issue_id} | Date: {date}{time_info}"
        f" | Hours: {hours} | Description: {description}"
    )


def _success_line(result: WorklogResult) -> str:
    time_info = ""
    if result.start_time:
        time_info = f" starting at {result.start_time}"
        if result.end_time:
            time_info += f" and ending at {result.end_time}"
    account_info = f" for account '{result.account}'" if result.account else ""
    return (
        f"- Issue {result.issue_key}: {format_hours_value(result.time_spent_hours)} hours"
        f" on {result.date}{time_info}{account_info}"
    )


def _failure_line(error: WorklogError) -> str:
    return (
        f"- Issue {error.issue_key}: {format_hours_value(error.time_spent_hours)} hours"
        f" on {error.date}. Error: {error.error}"
    )


def format_bulk_report(
    successes: Sequence[WorklogResult], failures: Sequence[WorklogError]
) -> List[str]:
    """Render a bulk creation report, successes first."""
    lines: List[str] = []

    if successes:
        lines.append(f"Successfully created {len(successes)} worklogs:")
        lines.extend(_success_line(result) for result in successes)

    if failures:
        lines.append(f"Failed to create {len(failures)} worklogs:")
        lines.extend(_failure_line(error) for error in failures)

    return lines


def format_created_message(
    worklog_id: str,
    issue_key: str,
    time_spent_hours: float,
    date: str,
    start_time: Optional[str] = None,
    account: Optional[Account] = None,
) -> str:
    time_info = ""
    if start_time:
        end_time = calculate_end_time(start_time, time_spent_hours)
        time_info = f" starting at {start_time} and ending at {end_time}"
    account_info = f" with account '{account.name}'" if account else ""
    return (
        f"Worklog with ID {worklog_id} created successfully for {issue_key}{account_info}."
        f" Time logged: {format_hours_value(time_spent_hours)} hours on {date}{time_info}"
    )


def format_updated_message(time_spent_hours: float, start_time: Optional[str] = None) -> str:
    message = "Worklog updated successfully"
    if start_time:
        end_time = calculate_end_time(start_time, time_spent_hours)
        message += (
            f". Time logged: {format_hours_value(time_spent_hours)} hours"
            f" starting at {start_time} and ending at {end_time}"
        )
    return message
