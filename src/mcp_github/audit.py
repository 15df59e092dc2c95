"""Audit logging for write operations against GitHub."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def _escape(value: object) -> str:
    """Keep one entry per line: CR and LF are written as literal escapes."""
    return str(value).replace("\r", "\\r").replace("\n", "\\n")


class AuditLogger:
    """Append-only audit trail of tools that change repository state."""

    def __init__(self, log_path: Optional[Union[str, Path]] = None):
        """
        Initialize audit logger.

        Args:
            log_path: Path to audit log file. None disables the audit trail.
        """
        self.log_path = Path(log_path) if log_path else None

    @property
    def enabled(self) -> bool:
        return self.log_path is not None

    def log(self, action: str, tool: str, target: str, details: str = "", user: str = "mcp-server"):
        """
        Write audit log entry.

        Args:
            action: Outcome (SUCCESS, FAILED)
            tool: Tool name
            target: What was changed, e.g. "owner/repo:path"
            details: Additional details
            user: User/source of the action
        """
        if not self.enabled:
            return

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        log_entry = (
            f"[{timestamp}] USER={_escape(user)} ACTION={_escape(action)} TOOL={_escape(tool)} "
            f"TARGET={_escape(target)} DETAILS={_escape(details)}\n"
        )

        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(log_entry)
        except OSError as e:
            logger.warning("Could not write to audit log %s: %s", self.log_path, e)
