"""HTTP client for GitHub REST API interactions."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .errors import UpstreamError
from .session import GitHubSession

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"


@dataclass
class APIResponse:
    """Structured response from an HTTP API."""
    success: bool
    data: Any = None
    error: Optional[str] = None
    http_code: Optional[int] = None

    def unwrap(self) -> Any:
        """
        Return the response data or raise if the call failed.

        Raises:
            UpstreamError: Carrying the error message and HTTP status
        """
        if not self.success:
            raise UpstreamError(self.error or "Unknown upstream error", status=self.http_code)
        return self.data


def describe_failure(response: requests.Response, what: str) -> str:
    """Build a readable error message for a non-2xx response."""
    status = response.status_code
    if status == 404:
        message = f"Not found: {what}"
    elif status == 401:
        message = "Authentication failed. GITHUB_TOKEN may be invalid or expired."
    elif status == 403:
        message = f"Permission denied: {what}. Token may lack required scopes or rate limit exceeded."
    elif status == 409:
        message = f"Conflict: {what}"
    elif status == 422:
        message = f"Validation failed: {what}"
    else:
        message = f"HTTP {status}: {what}"

    try:
        detail = response.json().get("message")
    except (ValueError, AttributeError):
        detail = None
    if detail:
        message = f"{message} ({detail})"
    return message


class GitHubClient:
    """Client for the subset of the GitHub REST API the MCP tools use."""

    def __init__(self, session: GitHubSession):
        """
        Initialize GitHub client.

        Args:
            session: Configured session holding the token and API URL
        """
        self.api_url = session.api_url.rstrip("/")
        self.timeout = session.timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {session.github_token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": "mcp-github",
        })

    def _request(self, method: str, path: str, what: str,
                 params: Optional[Dict[str, Any]] = None,
                 json: Optional[Dict[str, Any]] = None) -> APIResponse:
        url = f"{self.api_url}{path}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        if json is not None:
            json = {k: v for k, v in json.items() if v is not None}

        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.ConnectionError:
            return APIResponse(success=False, error=f"Cannot reach GitHub at {self.api_url}. Check network connectivity.")
        except requests.Timeout:
            return APIResponse(success=False, error=f"GitHub request timed out after {self.timeout}s: {what}")
        except requests.RequestException as e:
            return APIResponse(success=False, error=f"Request error for {what}: {e}")

        if not 200 <= response.status_code < 300:
            return APIResponse(success=False, error=describe_failure(response, what), http_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return APIResponse(success=True, data={}, http_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            return APIResponse(success=False, error=f"Invalid JSON returned for {what}", http_code=response.status_code)
        return APIResponse(success=True, data=data, http_code=response.status_code)

    @staticmethod
    def _repo(owner: str, repo: str) -> str:
        return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"

    def _contents(self, owner: str, repo: str, path: str) -> str:
        path = path.strip("/")
        base = f"{self._repo(owner, repo)}/contents"
        return f"{base}/{quote(path)}" if path else base

    # Contents

    def get_content(self, owner: str, repo: str, path: str, ref: Optional[str] = None) -> APIResponse:
        """Read a file or directory. Directories come back as a list."""
        return self._request(
            "GET", self._contents(owner, repo, path),
            f"{owner}/{repo}/{path}", params={"ref": ref},
        )

    def put_content(self, owner: str, repo: str, path: str, message: str, content: str,
                    branch: Optional[str] = None, sha: Optional[str] = None) -> APIResponse:
        """Create or replace a file. ``content`` must already be base64-encoded."""
        return self._request(
            "PUT", self._contents(owner, repo, path),
            f"{owner}/{repo}/{path}",
            json={"message": message, "content": content, "branch": branch, "sha": sha},
        )

    def delete_content(self, owner: str, repo: str, path: str, message: str, sha: str,
                       branch: Optional[str] = None) -> APIResponse:
        return self._request(
            "DELETE", self._contents(owner, repo, path),
            f"{owner}/{repo}/{path}",
            json={"message": message, "sha": sha, "branch": branch},
        )

    # Git database primitives

    def create_blob(self, owner: str, repo: str, content: str, encoding: str = "base64") -> APIResponse:
        return self._request(
            "POST", f"{self._repo(owner, repo)}/git/blobs", f"blob in {owner}/{repo}",
            json={"content": content, "encoding": encoding},
        )

    def create_tree(self, owner: str, repo: str, tree: List[Dict[str, Any]],
                    base_tree: Optional[str] = None) -> APIResponse:
        return self._request(
            "POST", f"{self._repo(owner, repo)}/git/trees", f"tree in {owner}/{repo}",
            json={"tree": tree, "base_tree": base_tree},
        )

    def create_commit(self, owner: str, repo: str, message: str, tree: str,
                      parents: List[str]) -> APIResponse:
        return self._request(
            "POST", f"{self._repo(owner, repo)}/git/commits", f"commit in {owner}/{repo}",
            json={"message": message, "tree": tree, "parents": parents},
        )

    def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> APIResponse:
        return self._request(
            "POST", f"{self._repo(owner, repo)}/git/refs", f"{ref} in {owner}/{repo}",
            json={"ref": ref, "sha": sha},
        )

    def update_ref(self, owner: str, repo: str, ref: str, sha: str, force: bool = False) -> APIResponse:
        return self._request(
            "PATCH", f"{self._repo(owner, repo)}/git/refs/{quote(ref)}", f"{ref} in {owner}/{repo}",
            json={"sha": sha, "force": force},
        )

    # Repositories, branches, commits

    def get_repository(self, owner: str, repo: str) -> APIResponse:
        return self._request("GET", self._repo(owner, repo), f"repository {owner}/{repo}")

    def create_repository(self, name: str, **options: Any) -> APIResponse:
        return self._request("POST", "/user/repos", f"repository {name}", json={"name": name, **options})

    def fork_repository(self, owner: str, repo: str, organization: Optional[str] = None) -> APIResponse:
        return self._request(
            "POST", f"{self._repo(owner, repo)}/forks", f"fork of {owner}/{repo}",
            json={"organization": organization},
        )

    def list_repositories(self, **params: Any) -> APIResponse:
        return self._request("GET", "/user/repos", "repositories of authenticated user", params=params)

    def get_branch(self, owner: str, repo: str, branch: str) -> APIResponse:
        return self._request(
            "GET", f"{self._repo(owner, repo)}/branches/{quote(branch)}", f"branch '{branch}' in {owner}/{repo}",
        )

    def list_branches(self, owner: str, repo: str, **params: Any) -> APIResponse:
        return self._request("GET", f"{self._repo(owner, repo)}/branches", f"branches of {owner}/{repo}", params=params)

    def list_commits(self, owner: str, repo: str, **params: Any) -> APIResponse:
        return self._request("GET", f"{self._repo(owner, repo)}/commits", f"commits of {owner}/{repo}", params=params)

    def get_commit(self, owner: str, repo: str, ref: str) -> APIResponse:
        return self._request(
            "GET", f"{self._repo(owner, repo)}/commits/{quote(ref, safe='')}", f"commit {ref} in {owner}/{repo}",
        )

    # Pull requests

    def list_pulls(self, owner: str, repo: str, **params: Any) -> APIResponse:
        return self._request("GET", f"{self._repo(owner, repo)}/pulls", f"pull requests of {owner}/{repo}", params=params)

    def get_pull(self, owner: str, repo: str, number: int) -> APIResponse:
        return self._request("GET", f"{self._repo(owner, repo)}/pulls/{number}", f"pull request #{number} in {owner}/{repo}")

    def create_pull(self, owner: str, repo: str, **fields: Any) -> APIResponse:
        return self._request("POST", f"{self._repo(owner, repo)}/pulls", f"pull request in {owner}/{repo}", json=fields)

    def merge_pull(self, owner: str, repo: str, number: int, **fields: Any) -> APIResponse:
        return self._request(
            "PUT", f"{self._repo(owner, repo)}/pulls/{number}/merge", f"merge of #{number} in {owner}/{repo}",
            json=fields,
        )

    # Issues

    def list_issues(self, owner: str, repo: str, **params: Any) -> APIResponse:
        return self._request("GET", f"{self._repo(owner, repo)}/issues", f"issues of {owner}/{repo}", params=params)

    def get_issue(self, owner: str, repo: str, number: int) -> APIResponse:
        return self._request("GET", f"{self._repo(owner, repo)}/issues/{number}", f"issue #{number} in {owner}/{repo}")

    def create_issue(self, owner: str, repo: str, **fields: Any) -> APIResponse:
        return self._request("POST", f"{self._repo(owner, repo)}/issues", f"issue in {owner}/{repo}", json=fields)

    def create_issue_comment(self, owner: str, repo: str, number: int, body: str) -> APIResponse:
        return self._request(
            "POST", f"{self._repo(owner, repo)}/issues/{number}/comments", f"comment on #{number} in {owner}/{repo}",
            json={"body": body},
        )

    # Search and users

    def search_code(self, query: str, **params: Any) -> APIResponse:
        return self._request("GET", "/search/code", f"code search '{query}'", params={"q": query, **params})

    def search_repositories(self, query: str, **params: Any) -> APIResponse:
        return self._request("GET", "/search/repositories", f"repository search '{query}'", params={"q": query, **params})

    def get_user(self, username: str) -> APIResponse:
        return self._request("GET", f"/users/{quote(username, safe='')}", f"user {username}")

    def get_authenticated_user(self) -> APIResponse:
        return self._request("GET", "/user", "authenticated user")
