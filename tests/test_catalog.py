"""Tests for catalog/handler parity."""

import pytest

from mcp_github.catalog import ToolCatalog, ToolDefinition
from mcp_github.dispatcher import Dispatcher
from mcp_github.schema import REPO_BASE


EXPECTED_TOOLS = [
    "get_file_contents", "create_or_update_file", "push_files", "delete_file", "list_repo_contents",
    "list_commits", "get_commit", "list_branches", "create_branch",
    "list_pull_requests", "get_pull_request", "create_pull_request", "merge_pull_request",
    "list_issues", "get_issue", "create_issue", "create_issue_comment",
    "get_repository", "create_repository", "fork_repository", "list_repositories",
    "search_code", "search_repositories", "get_user", "tasksAutLogs",
]


def test_catalog_lists_every_handler_once_in_registration_order(handlers):
    catalog = ToolCatalog.from_handlers(handlers.values())
    assert catalog.names() == EXPECTED_TOOLS
    assert list(handlers) == EXPECTED_TOOLS


def test_catalog_schema_is_the_handler_schema(handlers):
    catalog = ToolCatalog.from_handlers(handlers.values())
    dispatcher = Dispatcher(handlers)
    for definition in catalog.list():
        assert definition.parameter_schema is dispatcher.handlers[definition.name].schema


def test_catalog_order_is_stable(handlers):
    catalog = ToolCatalog.from_handlers(handlers.values())
    assert catalog.list() == catalog.list()
    assert [t.name for t in catalog.to_mcp_tools()] == catalog.names()


def test_mcp_tool_input_schema_matches_handler(handlers):
    catalog = ToolCatalog.from_handlers(handlers.values())
    for tool in catalog.to_mcp_tools():
        assert tool.inputSchema == handlers[tool.name].schema.to_json_schema()
        assert tool.description


def test_repository_tools_require_owner_and_repo(handlers):
    global_tools = {"create_repository", "list_repositories", "search_code",
                    "search_repositories", "get_user", "tasksAutLogs"}
    for name, handler in handlers.items():
        required = handler.schema.required
        if name in global_tools:
            assert "owner" not in required
        else:
            assert required[:2] == ["owner", "repo"], name


def test_duplicate_names_rejected():
    definition = ToolDefinition("get_repository", "d", REPO_BASE)
    with pytest.raises(ValueError, match="Duplicate tool names"):
        ToolCatalog([definition, definition])
