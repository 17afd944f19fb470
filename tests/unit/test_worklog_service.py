"""Tests for WorklogService operations."""

import asyncio
from unittest.mock import Mock

import pytest

from tempo_mcp_server.api.errors import ApiError
from tempo_mcp_server.domain.models import Account, IssueRef, WorklogEntry
from tempo_mcp_server.services.worklog_service import WorklogService


@pytest.fixture
def jira_client():
    client = Mock()
    client.get_current_user_account_id.return_value = "acc-1"
    client.get_issue.return_value = IssueRef("10001", "PROJ-1")
    client.get_issue_key_by_id.side_effect = lambda issue_id: {"10001": "PROJ-1"}[issue_id]
    return client


@pytest.fixture
def tempo_client():
    return Mock()


@pytest.fixture
def service(tempo_client, jira_client):
    return WorklogService(tempo_client, jira_client, structured_logger=Mock())


EXISTING_WORKLOG = {
    "tempoWorklogId": 55,
    "issue": {"id": 10001},
    "timeSpentSeconds": 5400,
    "billableSeconds": 5400,
    "startDate": "2025-02-03",
    "startTime": "08:30:00",
    "description": "Code review",
    "author": {"accountId": "acc-1"},
}


class TestRetrieveWorklogs:
    """Test worklog retrieval."""

    def test_formats_lines_with_metadata(self, service, tempo_client):
        tempo_client.get_user_worklogs.return_value = {
            "results": [EXISTING_WORKLOG, {**EXISTING_WORKLOG, "issue": {"id": 20002}}],
            "metadata": {"count": 2},
        }

        response = asyncio.run(service.retrieve_worklogs("2025-02-01", "2025-02-28"))

        assert not response.is_error
        assert response.metadata == {
            "totalCount": 2,
            "pagesProcessed": 1,
            "startDate": "2025-02-01",
            "endDate": "2025-02-28",
        }
        assert response.lines[0].startswith("IssueKey: PROJ-1 | IssueId: 10001")
        assert response.lines[1].startswith("IssueKey: Unknown | IssueId: 20002")
        tempo_client.get_user_worklogs.assert_called_once_with("acc-1", "2025-02-01", "2025-02-28")

    def test_empty_range(self, service, tempo_client, jira_client):
        """Test that an empty listing is reported without an error."""
        tempo_client.get_user_worklogs.return_value = {"results": [], "metadata": {}}

        response = asyncio.run(service.retrieve_worklogs("2025-02-01", "2025-02-28"))

        assert not response.is_error
        assert response.lines == ["No worklogs found for the specified date range."]
        assert response.metadata["totalCount"] == 0
        jira_client.get_issue_key_by_id.assert_not_called()

    def test_user_lookup_failure(self, service, jira_client):
        jira_client.get_current_user_account_id.side_effect = ApiError(
            "Failed to get user account ID", "No user found with email: me@example.com"
        )

        response = asyncio.run(service.retrieve_worklogs("2025-02-01", "2025-02-28"))

        assert response.is_error
        assert response.lines == [
            "Error retrieving worklogs: Failed to get user account ID: "
            "No user found with email: me@example.com"
        ]


class TestCreateWorklog:
    """Test single worklog creation."""

    def test_creates_with_account(self, service, tempo_client, jira_client):
        jira_client.get_issue.return_value = IssueRef("10001", "PROJ-1", account_id="4")
        tempo_client.get_account.return_value = Account(key="OPS", name="Operations")
        tempo_client.create_worklog.return_value = {"tempoWorklogId": 77}

        response = asyncio.run(
            service.create_worklog("PROJ-1", 1.5, "2025-02-03", "Deploy", "17:00")
        )

        assert not response.is_error
        assert response.metadata == {"worklogId": "77"}
        assert response.lines == [
            "Worklog with ID 77 created successfully for PROJ-1 with account 'Operations'."
            " Time logged: 1.5 hours on 2025-02-03 starting at 17:00 and ending at 18:30"
        ]
        payload = tempo_client.create_worklog.call_args.args[0]
        assert payload == {
            "issueId": "10001",
            "timeSpentSeconds": 5400,
            "startDate": "2025-02-03",
            "authorAccountId": "acc-1",
            "description": "Deploy",
            "startTime": "17:00:00",
            "attributes": [{"key": "_Account_", "value": "OPS"}],
        }

    def test_unknown_issue(self, service, jira_client, tempo_client):
        jira_client.get_issue.side_effect = ApiError(
            "Failed to get issue for NOPE-1", "Issue does not exist", 404
        )

        response = asyncio.run(service.create_worklog("NOPE-1", 1, "2025-02-03"))

        assert response.is_error
        assert response.lines == [
            "Failed to create worklog: Failed to get issue for NOPE-1: 404 - Issue does not exist"
        ]
        tempo_client.create_worklog.assert_not_called()


class TestBulkCreateWorklogs:
    """Test bulk creation responses."""

    def test_partial_failure_is_not_error(self, service, tempo_client, jira_client):
        def get_issue(issue_key):
            if issue_key == "NOPE-1":
                raise ApiError("Failed to get issue for NOPE-1", "Issue does not exist", 404)
            return IssueRef("10001", issue_key)

        jira_client.get_issue.side_effect = get_issue
        tempo_client.bulk_create_worklogs.return_value = [{"tempoWorklogId": 1}]

        response = asyncio.run(
            service.bulk_create_worklogs(
                [WorklogEntry("PROJ-1", 1, "2025-02-03"), WorklogEntry("NOPE-1", 2, "2025-02-03")]
            )
        )

        assert not response.is_error
        assert response.metadata["totalSuccess"] == 1
        assert response.metadata["totalFailure"] == 1
        assert response.metadata["details"]["successes"][0]["worklogId"] == "1"
        assert response.metadata["details"]["failures"][0]["issueKey"] == "NOPE-1"
        assert response.lines[0] == "Successfully created 1 worklogs:"
        assert response.lines[2] == "Failed to create 1 worklogs:"

    def test_all_failed_is_error(self, service, jira_client):
        jira_client.get_issue.side_effect = RuntimeError("Jira down")

        response = asyncio.run(
            service.bulk_create_worklogs([WorklogEntry("PROJ-1", 1, "2025-02-03")])
        )

        assert response.is_error
        assert response.metadata["totalSuccess"] == 0

    def test_user_lookup_failure(self, service, jira_client):
        jira_client.get_current_user_account_id.side_effect = RuntimeError("Jira down")

        response = asyncio.run(
            service.bulk_create_worklogs([WorklogEntry("PROJ-1", 1, "2025-02-03")])
        )

        assert response.is_error
        assert response.lines == ["Error processing bulk worklogs: Jira down"]


class TestEditWorklog:
    """Test worklog edits."""

    def test_keeps_unchanged_fields(self, service, tempo_client):
        tempo_client.get_worklog.return_value = EXISTING_WORKLOG

        response = asyncio.run(service.edit_worklog("55", 2))

        assert response.lines == ["Worklog updated successfully"]
        worklog_id, payload = tempo_client.update_worklog.call_args.args
        assert worklog_id == "55"
        assert payload == {
            "authorAccountId": "acc-1",
            "startDate": "2025-02-03",
            "timeSpentSeconds": 7200,
            "billableSeconds": 7200,
            "description": "Code review",
            "startTime": "08:30:00",
        }

    def test_applies_new_values(self, service, tempo_client):
        tempo_client.get_worklog.return_value = EXISTING_WORKLOG

        response = asyncio.run(
            service.edit_worklog("55", 0.75, "Pairing", "2025-02-04", "13:45")
        )

        assert response.lines == [
            "Worklog updated successfully. Time logged: 0.75 hours"
            " starting at 13:45 and ending at 14:30"
        ]
        payload = tempo_client.update_worklog.call_args.args[1]
        assert payload["startDate"] == "2025-02-04"
        assert payload["description"] == "Pairing"
        assert payload["startTime"] == "13:45:00"

    def test_missing_worklog(self, service, tempo_client):
        tempo_client.get_worklog.side_effect = RuntimeError("404 Client Error")

        response = asyncio.run(service.edit_worklog("999", 1))

        assert response.is_error
        assert response.lines == ["Failed to edit worklog: 404 Client Error"]
        tempo_client.update_worklog.assert_not_called()


class TestDeleteWorklog:
    """Test worklog deletion."""

    def test_returns_deleted_details(self, service, tempo_client):
        tempo_client.get_worklog.return_value = EXISTING_WORKLOG

        response = asyncio.run(service.delete_worklog("55"))

        assert response.lines == ["Worklog deleted successfully"]
        assert response.metadata == {
            "worklogId": "55",
            "issueId": "10001",
            "startDate": "2025-02-03",
            "hours": "1.50",
        }
        tempo_client.delete_worklog.assert_called_once_with("55")

    def test_deletes_when_details_unavailable(self, service, tempo_client):
        """Test that a failing pre-fetch does not block deletion."""
        tempo_client.get_worklog.side_effect = RuntimeError("timeout")

        response = asyncio.run(service.delete_worklog("55"))

        assert not response.is_error
        assert response.metadata is None
        tempo_client.delete_worklog.assert_called_once_with("55")

    def test_delete_failure(self, service, tempo_client):
        tempo_client.get_worklog.return_value = EXISTING_WORKLOG
        tempo_client.delete_worklog.side_effect = RuntimeError("403 Client Error")

        response = asyncio.run(service.delete_worklog("55"))

        assert response.is_error
        assert response.lines == ["Failed to delete worklog: 403 Client Error"]


class TestOperationLogging:
    def test_logs_start_and_completion(self, service, tempo_client):
        tempo_client.get_worklog.side_effect = RuntimeError("boom")

        asyncio.run(service.edit_worklog("1", 1))

        service.structured_logger.log_operation_start.assert_called_once_with("editWorklog")
        kwargs = service.structured_logger.log_operation_complete.call_args.kwargs
        assert kwargs["status"] == "error"
        assert kwargs["error"] == "boom"
