"""Task service log tool: tasksAutLogs."""

from typing import Any, Dict

from ..schema import EMPTY, integer
from . import ToolHandler, expect_list

TASK_LOGS_SCHEMA = EMPTY.extend(
    last=integer("Return only the last N log entries (applied after from/to)", minimum=1),
    **{
        "from": integer("Return log entries at or after this unix epoch timestamp (milliseconds)"),
        "to": integer("Return log entries at or before this unix epoch timestamp (milliseconds)"),
    },
)


class TaskLogsTool(ToolHandler):
    """Tool for reading the task service's parsed log entries."""

    description = "Get logs from the AUT task management server, oldest first"
    schema = TASK_LOGS_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("tasksAutLogs", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = await self.call(
            self.client.get_logs,
            last=arguments.get("last"), start=arguments.get("from"), end=arguments.get("to"),
        )
        return expect_list(data, "log entries")
