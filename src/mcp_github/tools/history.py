"""Commit and branch tools: list_commits, get_commit, list_branches, create_branch."""

from typing import Any, Dict

from ..pipeline import Pipeline, Stage
from ..schema import PAGINATION, REPO_BASE, string
from . import ToolHandler, dig, expect_dict, expect_list, require

LIST_COMMITS_SCHEMA = REPO_BASE.extend(
    branch=string("Branch name (default: repo default branch)"),
    **PAGINATION,
    path=string("Only commits touching this path"),
    author=string("GitHub username or email to filter by"),
    since=string("ISO 8601 date - commits after this date"),
    until=string("ISO 8601 date - commits before this date"),
)

GET_COMMIT_SCHEMA = REPO_BASE.extend(
    sha=string("Commit SHA", required=True),
)

LIST_BRANCHES_SCHEMA = REPO_BASE.extend(**PAGINATION)

CREATE_BRANCH_SCHEMA = REPO_BASE.extend(
    branch=string("New branch name", required=True),
    from_branch=string("Source branch (default: repo default branch)"),
)


def commit_summary(commit: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "sha": commit.get("sha"),
        "message": dig(commit, "commit", "message"),
        "author": dig(commit, "commit", "author", "name"),
        "date": dig(commit, "commit", "author", "date"),
        "url": commit.get("html_url"),
    }


class ListCommitsTool(ToolHandler):
    """Tool for listing commits on a branch."""

    description = "List commits on a repository branch"
    schema = LIST_COMMITS_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("list_commits", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = await self.call(
            self.client.list_commits,
            arguments["owner"], arguments["repo"],
            sha=arguments.get("branch"),
            per_page=arguments.get("per_page"),
            page=arguments.get("page"),
            path=arguments.get("path"),
            author=arguments.get("author"),
            since=arguments.get("since"),
            until=arguments.get("until"),
        )
        return [commit_summary(expect_dict(c, "commit")) for c in expect_list(data, "commit list")]


class GetCommitTool(ToolHandler):
    """Tool for reading one commit with its changed files."""

    description = "Get details of a specific commit including changed files"
    schema = GET_COMMIT_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("get_commit", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = expect_dict(
            await self.call(self.client.get_commit, arguments["owner"], arguments["repo"], arguments["sha"]),
            "commit",
        )
        result = commit_summary(data)
        result["stats"] = data.get("stats")
        result["files"] = [
            {
                "filename": f.get("filename"),
                "status": f.get("status"),
                "additions": f.get("additions"),
                "deletions": f.get("deletions"),
                "changes": f.get("changes"),
                "patch": f.get("patch"),
            }
            for f in data.get("files") or []
        ]
        return result


class ListBranchesTool(ToolHandler):
    """Tool for listing branches."""

    description = "List branches in a repository"
    schema = LIST_BRANCHES_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("list_branches", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = await self.call(
            self.client.list_branches, arguments["owner"], arguments["repo"],
            per_page=arguments.get("per_page"), page=arguments.get("page"),
        )
        return [
            {"name": b.get("name"), "sha": dig(b, "commit", "sha"), "protected": b.get("protected")}
            for b in (expect_dict(b, "branch") for b in expect_list(data, "branch list"))
        ]


class CreateBranchTool(ToolHandler):
    """Tool for creating a branch from another branch's head."""

    description = "Create a new branch in a repository"
    schema = CREATE_BRANCH_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("create_branch", client, audit_logger)
        self.pipeline = Pipeline(
            "create_branch",
            inputs=("owner", "repo", "branch", "from_branch"),
            stages=[
                Stage("source", self._resolve_source, requires=("owner", "repo", "from_branch")),
                Stage("sha", self._resolve_sha, requires=("owner", "repo", "source")),
                Stage("ref", self._create_ref, requires=("owner", "repo", "branch", "sha")),
            ],
        )

    async def _resolve_source(self, ctx: Dict[str, Any]) -> str:
        if ctx["from_branch"]:
            return ctx["from_branch"]
        repository = await self.call(self.client.get_repository, ctx["owner"], ctx["repo"])
        return require(repository, "default_branch")

    async def _resolve_sha(self, ctx: Dict[str, Any]) -> str:
        branch = await self.call(self.client.get_branch, ctx["owner"], ctx["repo"], ctx["source"])
        return require(branch, "commit", "sha")

    async def _create_ref(self, ctx: Dict[str, Any]) -> Dict[str, Any]:
        return expect_dict(
            await self.call(self.client.create_ref, ctx["owner"], ctx["repo"], f"refs/heads/{ctx['branch']}", ctx["sha"]),
            "git ref",
        )

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            ctx = await self.pipeline.run(
                owner=arguments["owner"],
                repo=arguments["repo"],
                branch=arguments["branch"],
                from_branch=arguments.get("from_branch"),
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e))
            raise

        ref = ctx["ref"]
        result = {
            "ref": ref.get("ref"),
            "sha": dig(ref, "object", "sha"),
            "url": ref.get("url"),
        }
        self.audit("SUCCESS", arguments, f"branch={arguments['branch']} from={ctx['source']} sha={ctx['sha']}")
        return result
