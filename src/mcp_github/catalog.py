"""Tool catalog advertised by ``list_tools``."""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from mcp.types import Tool

from .schema import Schema
from .tools import ToolHandler


@dataclass(frozen=True)
class ToolDefinition:
    """Name, description and parameter schema of one tool."""

    name: str
    description: str
    parameter_schema: Schema

    def to_mcp(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.parameter_schema.to_json_schema(),
        )


class ToolCatalog:
    """Immutable, ordered set of tool definitions built from the handler table."""

    def __init__(self, definitions: Iterable[ToolDefinition]):
        self._definitions: Tuple[ToolDefinition, ...] = tuple(definitions)
        names = [d.name for d in self._definitions]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate tool names in catalog: {', '.join(duplicates)}")

    @classmethod
    def from_handlers(cls, handlers: Iterable[ToolHandler]) -> "ToolCatalog":
        # the handler's own schema object, never a copy
        return cls(ToolDefinition(h.name, h.description, h.schema) for h in handlers)

    def list(self) -> Tuple[ToolDefinition, ...]:
        return self._definitions

    def names(self) -> List[str]:
        return [d.name for d in self._definitions]

    def to_mcp_tools(self) -> List[Tool]:
        return [d.to_mcp() for d in self._definitions]

    def __len__(self) -> int:
        return len(self._definitions)
