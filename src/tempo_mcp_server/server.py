"""MCP server registering the worklog tools."""

import logging
from typing import Annotated, Any, Awaitable, Callable, Dict, List, Optional, Tuple, Type

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.types import TextContent
from pydantic import BaseModel, Field

from .api.errors import ValidationError
from .config import ServerConfig
from .domain.models import ToolResponse
from .domain.schemas import (
    BulkCreateWorklogsArgs,
    CreateWorklogArgs,
    DeleteWorklogArgs,
    EditWorklogArgs,
    RetrieveWorklogsArgs,
    parse_arguments,
)
from .services.worklog_service import WorklogService

logger = logging.getLogger(__name__)

ToolHandler = Callable[[WorklogService, Any], Awaitable[ToolResponse]]

TOOLS: Dict[str, Tuple[Type[BaseModel], ToolHandler]] = {
    "retrieveWorklogs": (
        RetrieveWorklogsArgs,
        lambda service, args: service.retrieve_worklogs(args.start_date, args.end_date),
    ),
    "createWorklog": (
        CreateWorklogArgs,
        lambda service, args: service.create_worklog(
            args.issue_key, args.time_spent_hours, args.date, args.description, args.start_time
        ),
    ),
    "bulkCreateWorklogs": (
        BulkCreateWorklogsArgs,
        lambda service, args: service.bulk_create_worklogs(args.to_entries()),
    ),
    "editWorklog": (
        EditWorklogArgs,
        lambda service, args: service.edit_worklog(
            args.worklog_id, args.time_spent_hours, args.description, args.date, args.start_time
        ),
    ),
    "deleteWorklog": (
        DeleteWorklogArgs,
        lambda service, args: service.delete_worklog(args.worklog_id),
    ),
}


async def dispatch(service: WorklogService, tool_name: str, arguments: Dict[str, Any]) -> ToolResponse:
    """Validate arguments and run a tool.

    Invalid arguments produce an error response before any API call.

    Args:
        service: Worklog service to run the operation on
        tool_name: Registered tool name (e.g. 'bulkCreateWorklogs')
        arguments: Raw tool arguments keyed by camelCase names

    Returns:
        ToolResponse of the operation
    """
    schema, handler = TOOLS[tool_name]
    try:
        args = parse_arguments(schema, arguments)
    except ValidationError as e:
        logger.warning(f"Invalid arguments for {tool_name}: {e}")
        return ToolResponse.error(f"Invalid arguments for {tool_name}: {e}")
    return await handler(service, args)


def to_tool_content(response: ToolResponse) -> List[TextContent]:
    """Convert a ToolResponse into MCP content, raising ToolError for errors."""
    if response.is_error:
        raise ToolError("\n".join(response.lines))
    return [TextContent(type="text", text=line) for line in response.lines]


def _present(**arguments: Any) -> Dict[str, Any]:
    return {name: value for name, value in arguments.items() if value is not None}


def create_server(service: WorklogService, config: ServerConfig) -> FastMCP:
    """Create the MCP server with all worklog tools registered.

    Args:
        service: Worklog service backing the tools
        config: Server configuration (name)

    Returns:
        FastMCP server instance
    """
    mcp = FastMCP(config.name)

    @mcp.tool(name="retrieveWorklogs")
    async def retrieve_worklogs(
        startDate: Annotated[str, Field(description="Start date (YYYY-MM-DD)")],
        endDate: Annotated[str, Field(description="End date (YYYY-MM-DD)")],
    ) -> List[TextContent]:
        """Retrieve your worklogs between two dates."""
        response = await dispatch(
            service, "retrieveWorklogs", {"startDate": startDate, "endDate": endDate}
        )
        return to_tool_content(response)

    @mcp.tool(name="createWorklog")
    async def create_worklog(
        issueKey: Annotated[str, Field(description="Jira issue key (e.g. PROJ-123)")],
        timeSpentHours: Annotated[float, Field(description="Hours spent, in 0.25 steps")],
        date: Annotated[str, Field(description="Date (YYYY-MM-DD)")],
        description: str = "",
        startTime: Annotated[
            Optional[str], Field(description="Start time (HH:MM, 15-minute steps)")
        ] = None,
    ) -> List[TextContent]:
        """Create a worklog on a Jira issue."""
        response = await dispatch(
            service,
            "createWorklog",
            _present(
                issueKey=issueKey,
                timeSpentHours=timeSpentHours,
                date=date,
                description=description,
                startTime=startTime,
            ),
        )
        return to_tool_content(response)

    @mcp.tool(name="bulkCreateWorklogs")
    async def bulk_create_worklogs(
        worklogEntries: Annotated[
            List[Dict[str, Any]],
            Field(
                description=(
                    "Worklog entries with issueKey, timeSpentHours, date and optional "
                    "description and startTime"
                )
            ),
        ],
    ) -> List[TextContent]:
        """Create multiple worklogs at once."""
        response = await dispatch(
            service, "bulkCreateWorklogs", {"worklogEntries": worklogEntries}
        )
        return to_tool_content(response)

    @mcp.tool(name="editWorklog")
    async def edit_worklog(
        worklogId: Annotated[str, Field(description="Tempo worklog ID")],
        timeSpentHours: Annotated[float, Field(description="Hours spent, in 0.25 steps")],
        description: Optional[str] = None,
        date: Annotated[Optional[str], Field(description="New date (YYYY-MM-DD)")] = None,
        startTime: Annotated[
            Optional[str], Field(description="New start time (HH:MM, 15-minute steps)")
        ] = None,
    ) -> List[TextContent]:
        """Modify an existing worklog."""
        response = await dispatch(
            service,
            "editWorklog",
            _present(
                worklogId=worklogId,
                timeSpentHours=timeSpentHours,
                description=description,
                date=date,
                startTime=startTime,
            ),
        )
        return to_tool_content(response)

    @mcp.tool(name="deleteWorklog")
    async def delete_worklog(
        worklogId: Annotated[str, Field(description="Tempo worklog ID")],
    ) -> List[TextContent]:
        """Delete an existing worklog."""
        response = await dispatch(service, "deleteWorklog", {"worklogId": worklogId})
        return to_tool_content(response)

    return mcp
