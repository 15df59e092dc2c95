"""Server configuration loaded once from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_AUT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class GitHubSession:
    """Credentials and endpoints used by the external collaborator clients."""

    github_token: str
    api_url: str = DEFAULT_API_URL
    aut_base_url: str = DEFAULT_AUT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    audit_log_path: Optional[Path] = None
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.github_token:
            raise ConfigurationError(
                "GITHUB_TOKEN environment variable is required.\n\n"
                "Create a personal access token and export it before starting the server:\n"
                "  export GITHUB_TOKEN='ghp_...'"
            )

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "GitHubSession":
        """
        Load the session from environment variables.

        Args:
            environ: Mapping to read from (default: os.environ)

        Returns:
            GitHubSession with defaults applied for optional variables

        Raises:
            ConfigurationError: If GITHUB_TOKEN is missing or a value is malformed
        """
        env = os.environ if environ is None else environ

        timeout = DEFAULT_TIMEOUT
        raw_timeout = env.get("GITHUB_MCP_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid GITHUB_MCP_TIMEOUT: {raw_timeout}. Must be a number of seconds."
                )
            if timeout <= 0:
                raise ConfigurationError("GITHUB_MCP_TIMEOUT must be greater than zero.")

        audit_log = env.get("GITHUB_MCP_AUDIT_LOG")

        return cls(
            github_token=env.get("GITHUB_TOKEN", ""),
            api_url=(env.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
            aut_base_url=(env.get("AUT_BASE_URL") or DEFAULT_AUT_BASE_URL).rstrip("/"),
            timeout=timeout,
            audit_log_path=Path(audit_log) if audit_log else None,
            log_level=(env.get("GITHUB_MCP_LOG_LEVEL") or "INFO").upper(),
        )
