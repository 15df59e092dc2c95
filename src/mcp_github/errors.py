"""Error taxonomy shared by the schema registry, handlers and dispatcher."""

from typing import List, Optional


class GitHubMCPError(Exception):
    """Base class for all errors raised by mcp-github."""
    pass


class ConfigurationError(GitHubMCPError):
    """Raised at startup when the server cannot be configured (fatal)."""
    pass


class ValidationError(GitHubMCPError):
    """Raised when tool arguments do not match the tool's schema."""

    def __init__(self, problems: List[str]):
        """
        Initialize validation error.

        Args:
            problems: One human-readable entry per offending field, each
                starting with the field path (e.g. "files[1].path: is required")
        """
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))

    @property
    def fields(self) -> List[str]:
        """Paths of the offending fields, in the order they were found."""
        return [problem.split(":", 1)[0] for problem in self.problems]


class UpstreamError(GitHubMCPError):
    """Raised when an external collaborator rejected or failed a call."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class ShapeError(UpstreamError):
    """Raised when an upstream response does not have the expected shape."""

    def __init__(self, message: str):
        super().__init__(f"Unexpected response shape: {message}")
