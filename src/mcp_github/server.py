"""MCP server setup and tool registration for mcp-github."""

from typing import Any, Dict, Optional

from mcp.server import Server
from mcp.types import CallToolResult, Tool

from .audit import AuditLogger
from .aut_client import TaskLogClient
from .catalog import ToolCatalog
from .dispatcher import Dispatcher
from .github_client import GitHubClient
from .tools import ToolHandler
from .tools.contents import (
    CreateOrUpdateFileTool,
    DeleteFileTool,
    GetFileContentsTool,
    ListRepoContentsTool,
    PushFilesTool,
)
from .tools.history import CreateBranchTool, GetCommitTool, ListBranchesTool, ListCommitsTool
from .tools.issues import CreateIssueCommentTool, CreateIssueTool, GetIssueTool, ListIssuesTool
from .tools.logs import TaskLogsTool
from .tools.pulls import (
    CreatePullRequestTool,
    GetPullRequestTool,
    ListPullRequestsTool,
    MergePullRequestTool,
)
from .tools.repos import (
    CreateRepositoryTool,
    ForkRepositoryTool,
    GetRepositoryTool,
    GetUserTool,
    ListRepositoriesTool,
    SearchCodeTool,
    SearchRepositoriesTool,
)

SERVER_NAME = "github-mcp-server"

GITHUB_TOOLS = (
    # Files
    GetFileContentsTool,
    CreateOrUpdateFileTool,
    PushFilesTool,
    DeleteFileTool,
    ListRepoContentsTool,
    # Commits and branches
    ListCommitsTool,
    GetCommitTool,
    ListBranchesTool,
    CreateBranchTool,
    # Pull requests
    ListPullRequestsTool,
    GetPullRequestTool,
    CreatePullRequestTool,
    MergePullRequestTool,
    # Issues
    ListIssuesTool,
    GetIssueTool,
    CreateIssueTool,
    CreateIssueCommentTool,
    # Repositories, search, users
    GetRepositoryTool,
    CreateRepositoryTool,
    ForkRepositoryTool,
    ListRepositoriesTool,
    SearchCodeTool,
    SearchRepositoriesTool,
    GetUserTool,
)


def create_tool_handlers(github: GitHubClient, task_logs: TaskLogClient,
                         audit_logger: Optional[AuditLogger] = None) -> Dict[str, ToolHandler]:
    """
    Build the handler table in registration order.

    Args:
        github: Client every GitHub tool calls
        task_logs: Client for the task service log endpoint
        audit_logger: Audit trail shared by write tools

    Returns:
        Mapping of tool name to handler
    """
    audit_logger = audit_logger or AuditLogger()
    handlers = [tool(github, audit_logger) for tool in GITHUB_TOOLS]
    handlers.append(TaskLogsTool(task_logs, audit_logger))
    return {handler.name: handler for handler in handlers}


def build_server(handlers: Dict[str, ToolHandler]) -> Server:
    """
    Create the MCP server exposing ``list_tools`` and ``call_tool``.

    The catalog and the dispatcher are built from the same handler table.
    """
    catalog = ToolCatalog.from_handlers(handlers.values())
    dispatcher = Dispatcher(handlers)
    app = Server(SERVER_NAME)

    @app.list_tools()
    async def list_tools() -> list[Tool]:
        """
        List all available GitHub tools.

        Returns:
            List of Tool descriptions for MCP
        """
        return catalog.to_mcp_tools()

    # argument validation is the dispatcher's job
    @app.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]) -> CallToolResult:
        """
        Execute a GitHub tool with given arguments.

        Args:
            name: Tool name to execute
            arguments: Tool arguments from MCP

        Returns:
            CallToolResult, with isError set for any failure
        """
        result = await dispatcher.dispatch(name, arguments)
        return result.to_mcp()

    return app
