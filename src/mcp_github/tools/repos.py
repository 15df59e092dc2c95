"""Repository, search and user tools."""

from typing import Any, Dict

from ..schema import EMPTY, PAGINATION, REPO_BASE, boolean, enum, string
from . import ToolHandler, dig, expect_dict, expect_list

GET_REPOSITORY_SCHEMA = REPO_BASE

CREATE_REPOSITORY_SCHEMA = EMPTY.extend(
    name=string("Repository name", required=True),
    description=string("Repository description"),
    private=boolean("Make the repository private (default: false)"),
    auto_init=boolean("Initialize with a README (default: false)"),
    gitignore_template=string("Gitignore template language (e.g. Node)"),
)

FORK_REPOSITORY_SCHEMA = REPO_BASE.extend(
    organization=string("Organization to fork into (default: authenticated user)"),
)

LIST_REPOSITORIES_SCHEMA = EMPTY.extend(
    type=enum("all", "owner", "public", "private", "member", description="Repository type filter"),
    sort=enum("created", "updated", "pushed", "full_name", description="Sort field"),
    **PAGINATION,
)

SEARCH_CODE_SCHEMA = EMPTY.extend(
    query=string("GitHub code search query (e.g. 'repo:owner/repo filename:index.ts')", required=True),
    **PAGINATION,
)

SEARCH_REPOSITORIES_SCHEMA = EMPTY.extend(
    query=string("GitHub repository search query", required=True),
    sort=enum("stars", "forks", "help-wanted-issues", "updated", description="Sort field"),
    **PAGINATION,
)

GET_USER_SCHEMA = EMPTY.extend(
    username=string("GitHub username (default: authenticated user)"),
)


class GetRepositoryTool(ToolHandler):
    """Tool for reading repository metadata."""

    description = "Get details about a GitHub repository"
    schema = GET_REPOSITORY_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("get_repository", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        r = expect_dict(await self.call(self.client.get_repository, arguments["owner"], arguments["repo"]), "repository")
        return {
            "full_name": r.get("full_name"),
            "description": r.get("description"),
            "private": r.get("private"),
            "default_branch": r.get("default_branch"),
            "language": r.get("language"),
            "stars": r.get("stargazers_count"),
            "forks": r.get("forks_count"),
            "open_issues": r.get("open_issues_count"),
            "created_at": r.get("created_at"),
            "updated_at": r.get("updated_at"),
            "url": r.get("html_url"),
            "clone_url": r.get("clone_url"),
            "topics": r.get("topics") or [],
        }


class CreateRepositoryTool(ToolHandler):
    """Tool for creating a repository owned by the authenticated user."""

    description = "Create a new GitHub repository"
    schema = CREATE_REPOSITORY_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("create_repository", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            r = await self.call(
                self.client.create_repository, arguments["name"],
                description=arguments.get("description"),
                private=arguments.get("private"),
                auto_init=arguments.get("auto_init"),
                gitignore_template=arguments.get("gitignore_template"),
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e), target=arguments["name"])
            raise

        r = expect_dict(r, "repository")
        result = {
            "full_name": r.get("full_name"),
            "url": r.get("html_url"),
            "clone_url": r.get("clone_url"),
            "private": r.get("private"),
            "default_branch": r.get("default_branch"),
        }
        self.audit("SUCCESS", arguments, f"private={result['private']}", target=result["full_name"])
        return result


class ForkRepositoryTool(ToolHandler):
    """Tool for forking a repository."""

    description = "Fork a repository to the authenticated user or an organization"
    schema = FORK_REPOSITORY_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("fork_repository", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            r = await self.call(
                self.client.fork_repository, arguments["owner"], arguments["repo"],
                organization=arguments.get("organization"),
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e))
            raise

        r = expect_dict(r, "fork")
        result = {"full_name": r.get("full_name"), "url": r.get("html_url"), "clone_url": r.get("clone_url")}
        self.audit("SUCCESS", arguments, f"fork={result['full_name']}")
        return result


class ListRepositoriesTool(ToolHandler):
    """Tool for listing the authenticated user's repositories."""

    description = "List repositories for the authenticated user"
    schema = LIST_REPOSITORIES_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("list_repositories", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = await self.call(self.client.list_repositories, **arguments)
        return [
            {
                "full_name": r.get("full_name"),
                "description": r.get("description"),
                "private": r.get("private"),
                "language": r.get("language"),
                "stars": r.get("stargazers_count"),
                "url": r.get("html_url"),
            }
            for r in (expect_dict(r, "repository") for r in expect_list(data, "repository list"))
        ]


class SearchCodeTool(ToolHandler):
    """Tool for GitHub code search."""

    description = "Search for code on GitHub"
    schema = SEARCH_CODE_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("search_code", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = expect_dict(
            await self.call(
                self.client.search_code, arguments["query"],
                per_page=arguments.get("per_page"), page=arguments.get("page"),
            ),
            "search result",
        )
        return {
            "total_count": data.get("total_count"),
            "items": [
                {
                    "name": item.get("name"),
                    "path": item.get("path"),
                    "repository": dig(item, "repository", "full_name"),
                    "url": item.get("html_url"),
                }
                for item in data.get("items") or []
            ],
        }


class SearchRepositoriesTool(ToolHandler):
    """Tool for GitHub repository search."""

    description = "Search GitHub repositories"
    schema = SEARCH_REPOSITORIES_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("search_repositories", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = expect_dict(
            await self.call(
                self.client.search_repositories, arguments["query"], sort=arguments.get("sort"),
                per_page=arguments.get("per_page"), page=arguments.get("page"),
            ),
            "search result",
        )
        return {
            "total_count": data.get("total_count"),
            "items": [
                {
                    "full_name": r.get("full_name"),
                    "description": r.get("description"),
                    "stars": r.get("stargazers_count"),
                    "language": r.get("language"),
                    "url": r.get("html_url"),
                }
                for r in data.get("items") or []
            ],
        }


class GetUserTool(ToolHandler):
    """Tool for reading a user profile, or the authenticated user's."""

    description = "Get information about a GitHub user (or the authenticated user if no username given)"
    schema = GET_USER_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("get_user", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        username = arguments.get("username")
        if username:
            u = await self.call(self.client.get_user, username)
        else:
            u = await self.call(self.client.get_authenticated_user)
        u = expect_dict(u, "user")

        result = {
            "login": u.get("login"),
            "name": u.get("name"),
            "bio": u.get("bio"),
            "company": u.get("company"),
            "location": u.get("location"),
            "public_repos": u.get("public_repos"),
            "followers": u.get("followers"),
            "following": u.get("following"),
            "url": u.get("html_url"),
        }
        if not username:
            result["private_repos"] = u.get("total_private_repos")
        return result
