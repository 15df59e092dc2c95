"""Tool registry base class and projection helpers for MCP tools."""

import asyncio
from typing import Any, Callable, Dict, Optional

from ..audit import AuditLogger
from ..errors import ShapeError
from ..github_client import APIResponse
from ..schema import Schema


class ToolHandler:
    """Base class for MCP tool handlers."""

    description: str = ""
    schema: Schema = Schema()

    def __init__(self, name: str, client: Any = None, audit_logger: Optional[AuditLogger] = None):
        """
        Initialize tool handler.

        Args:
            name: Tool name as advertised to MCP clients
            client: External collaborator client the handler calls
            audit_logger: Audit trail for write operations
        """
        self.name = name
        self.client = client
        self.audit_logger = audit_logger or AuditLogger()

    def validate(self, arguments: Any) -> Dict[str, Any]:
        """
        Validate raw arguments against the tool schema.

        Raises:
            ValidationError: If arguments do not match
        """
        return self.schema.validate(arguments)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        """
        Execute the tool with validated arguments.

        Must be implemented by subclasses.

        Args:
            arguments: Output of :meth:`validate`

        Returns:
            JSON-serializable normalized output
        """
        raise NotImplementedError

    async def call(self, method: Callable[..., APIResponse], *args: Any, **kwargs: Any) -> Any:
        """Run a blocking client call off the event loop and unwrap its data."""
        response = await asyncio.to_thread(method, *args, **kwargs)
        return response.unwrap()

    def audit(self, action: str, arguments: Dict[str, Any], details: str = "", target: Optional[str] = None):
        if target is None:
            target = f"{arguments.get('owner')}/{arguments.get('repo')}"
            if arguments.get("path"):
                target = f"{target}:{arguments['path']}"
        self.audit_logger.log(action, self.name, target, details)


def expect_dict(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ShapeError(f"expected an object for {what}, got {type(data).__name__}")
    return data


def expect_list(data: Any, what: str) -> list:
    if not isinstance(data, list):
        raise ShapeError(f"expected a list for {what}, got {type(data).__name__}")
    return data


def dig(data: Any, *keys: str) -> Any:
    """Follow nested keys, returning None as soon as one is missing."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def require(data: Any, *keys: str) -> Any:
    """Like :func:`dig` but raise ShapeError when the value is missing."""
    value = dig(data, *keys)
    if value is None:
        raise ShapeError(f"missing '{'.'.join(keys)}' in response")
    return value


def commit_ref(commit: Any) -> Dict[str, Any]:
    return {
        "sha": dig(commit, "sha"),
        "message": dig(commit, "message"),
        "url": dig(commit, "html_url"),
    }
