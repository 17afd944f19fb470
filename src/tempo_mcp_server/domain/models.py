"""Domain models and value objects for worklog operations."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class WorklogEntry:
    """A single worklog requested by the caller."""

    issue_key: str
    time_spent_hours: float
    date: str
    description: Optional[str] = None
    start_time: Optional[str] = None


@dataclass(frozen=True)
class RemoteWorklog:
    """Worklog record as stored by Tempo."""

    worklog_id: str
    issue_id: Optional[str]
    time_spent_seconds: int
    start_date: str
    author_account_id: Optional[str] = None
    start_time: Optional[str] = None
    billable_seconds: Optional[int] = None
    description: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemoteWorklog":
        """Build a worklog from a Tempo API payload.

        Args:
            data: Worklog JSON as returned by Tempo

        Returns:
            RemoteWorklog instance
        """
        issue_id = (data.get("issue") or {}).get("id", data.get("issueId"))
        return cls(
            worklog_id=str(data.get("tempoWorklogId", "")),
            issue_id=str(issue_id) if issue_id is not None else None,
            time_spent_seconds=int(data.get("timeSpentSeconds") or 0),
            start_date=data.get("startDate", ""),
            author_account_id=(data.get("author") or {}).get("accountId"),
            start_time=data.get("startTime"),
            billable_seconds=data.get("billableSeconds"),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class IssueRef:
    """Jira issue id/key pair with its optional Tempo account link."""

    id: str
    key: str
    account_id: Optional[str] = None


@dataclass(frozen=True)
class Account:
    """Tempo account (cost center) used to tag worklogs."""

    key: str
    name: str


@dataclass(frozen=True)
class WorklogResult:
    """Successfully created worklog within a batch."""

    issue_key: str
    time_spent_hours: float
    date: str
    worklog_id: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    account: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issueKey": self.issue_key,
            "timeSpentHours": self.time_spent_hours,
            "date": self.date,
            "worklogId": self.worklog_id,
            "success": True,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "account": self.account,
        }


@dataclass(frozen=True)
class WorklogError:
    """Worklog of a batch that could not be created."""

    issue_key: str
    time_spent_hours: float
    date: str
    error: str

    @classmethod
    def from_entry(cls, entry: WorklogEntry, error: str) -> "WorklogError":
        return cls(
            issue_key=entry.issue_key,
            time_spent_hours=entry.time_spent_hours,
            date=entry.date,
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issueKey": self.issue_key,
            "timeSpentHours": self.time_spent_hours,
            "date": self.date,
            "error": self.error,
        }


@dataclass
class ToolResponse:
    """Uniform response envelope returned by every operation."""

    content: List[Dict[str, str]] = field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
    is_error: bool = False

    @classmethod
    def from_lines(
        cls,
        lines: List[str],
        metadata: Optional[Dict[str, Any]] = None,
        is_error: bool = False,
    ) -> "ToolResponse":
        """Create a response with one text item per line."""
        return cls(
            content=[{"type": "text", "text": line} for line in lines],
            metadata=metadata,
            is_error=is_error,
        )

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        """Create an error response carrying a single message."""
        return cls.from_lines([message], is_error=True)

    @property
    def lines(self) -> List[str]:
        return [item["text"] for item in self.content]

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"content": self.content, "isError": self.is_error}
        if self.metadata is not None:
            result["metadata"] = self.metadata
        return result
