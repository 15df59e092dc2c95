"""
Name-keyed dispatch of tool calls.

``Dispatcher.dispatch`` always returns a :class:`CallResult`. Validation
failures and unknown names are answered without touching GitHub; every
failure raised while a handler executes is converted into an error result
here and never reaches the protocol layer.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from mcp.types import CallToolResult, TextContent

from .errors import UpstreamError, ValidationError
from .tools import ToolHandler

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    UNKNOWN_OPERATION = "UnknownOperation"
    VALIDATION_ERROR = "ValidationError"
    UPSTREAM_ERROR = "UpstreamError"


@dataclass(frozen=True)
class CallResult:
    """Uniform success/failure envelope for one tool call."""

    content: List[Dict[str, str]] = field(default_factory=list)
    is_error: bool = False
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, output: Any) -> "CallResult":
        text = json.dumps(output, indent=2, ensure_ascii=False)
        return cls(content=[{"type": "text", "text": text}])

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "CallResult":
        return cls(
            content=[{"type": "text", "text": f"❌ {kind.value}: {message}"}],
            is_error=True,
            error_kind=kind,
        )

    @property
    def text(self) -> str:
        return self.content[0]["text"] if self.content else ""

    def to_mcp(self) -> CallToolResult:
        return CallToolResult(
            content=[TextContent(type="text", text=item["text"]) for item in self.content],
            isError=self.is_error,
        )


class Dispatcher:
    """Routes tool calls to their handlers."""

    def __init__(self, handlers: Mapping[str, ToolHandler]):
        for name, handler in handlers.items():
            if handler.name != name:
                raise ValueError(f"Handler registered as '{name}' is named '{handler.name}'")
        self.handlers: Dict[str, ToolHandler] = dict(handlers)

    async def dispatch(self, name: str, arguments: Any) -> CallResult:
        """
        Validate and execute one tool call.

        Args:
            name: Tool name
            arguments: Raw arguments from the MCP request

        Returns:
            CallResult; never raises
        """
        handler = self.handlers.get(name)
        if handler is None:
            logger.warning("Unknown tool requested: %s", name)
            return CallResult.failure(
                ErrorKind.UNKNOWN_OPERATION,
                f"Unknown tool: {name}\n\nAvailable tools: {', '.join(self.handlers)}",
            )

        try:
            validated = handler.validate(arguments)
        except ValidationError as e:
            logger.info("Invalid arguments for %s: %s", name, e)
            return CallResult.failure(
                ErrorKind.VALIDATION_ERROR,
                f"Invalid arguments for {name}:\n" + "\n".join(f"- {p}" for p in e.problems),
            )

        logger.info("Calling %s", name)
        try:
            output = await handler.execute(validated)
            return CallResult.success(output)
        except UpstreamError as e:
            logger.warning("%s failed: %s", name, e)
            return CallResult.failure(ErrorKind.UPSTREAM_ERROR, f"Error executing {name}: {e}")
        except Exception as e:
            logger.exception("Unexpected error in %s", name)
            return CallResult.failure(
                ErrorKind.UPSTREAM_ERROR,
                f"Error executing {name}: {type(e).__name__}: {e}",
            )
