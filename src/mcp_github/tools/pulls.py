"""Pull request tools: list_pull_requests, get_pull_request, create_pull_request, merge_pull_request."""

from typing import Any, Dict

from ..schema import PAGINATION, REPO_BASE, boolean, enum, integer, string
from . import ToolHandler, dig, expect_dict, expect_list

LIST_PULLS_SCHEMA = REPO_BASE.extend(
    state=enum("open", "closed", "all", description="PR state (default: open)"),
    **PAGINATION,
)

GET_PULL_SCHEMA = REPO_BASE.extend(
    pull_number=integer("Pull request number", required=True, minimum=1),
)

CREATE_PULL_SCHEMA = REPO_BASE.extend(
    title=string("PR title", required=True),
    body=string("PR description"),
    head=string("Branch containing changes", required=True),
    base=string("Branch to merge into", required=True),
    draft=boolean("Open as a draft PR"),
)

MERGE_PULL_SCHEMA = REPO_BASE.extend(
    pull_number=integer("Pull request number", required=True, minimum=1),
    commit_title=string("Merge commit title"),
    commit_message=string("Merge commit message"),
    merge_method=enum("merge", "squash", "rebase", description="Merge method (default: merge)"),
)


def pull_summary(pr: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "number": pr.get("number"),
        "title": pr.get("title"),
        "state": pr.get("state"),
        "draft": pr.get("draft"),
        "head": dig(pr, "head", "ref"),
        "base": dig(pr, "base", "ref"),
        "author": dig(pr, "user", "login"),
        "created_at": pr.get("created_at"),
        "url": pr.get("html_url"),
    }


class ListPullRequestsTool(ToolHandler):
    """Tool for listing pull requests."""

    description = "List pull requests in a repository"
    schema = LIST_PULLS_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("list_pull_requests", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = await self.call(
            self.client.list_pulls, arguments["owner"], arguments["repo"],
            state=arguments.get("state"), per_page=arguments.get("per_page"), page=arguments.get("page"),
        )
        return [pull_summary(expect_dict(pr, "pull request")) for pr in expect_list(data, "pull request list")]


class GetPullRequestTool(ToolHandler):
    """Tool for reading one pull request."""

    description = "Get details of a specific pull request"
    schema = GET_PULL_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("get_pull_request", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        pr = expect_dict(
            await self.call(self.client.get_pull, arguments["owner"], arguments["repo"], arguments["pull_number"]),
            "pull request",
        )
        result = pull_summary(pr)
        result.update({
            "body": pr.get("body"),
            "updated_at": pr.get("updated_at"),
            "merged": pr.get("merged"),
            "mergeable": pr.get("mergeable"),
            "additions": pr.get("additions"),
            "deletions": pr.get("deletions"),
            "changed_files": pr.get("changed_files"),
        })
        return result


class CreatePullRequestTool(ToolHandler):
    """Tool for opening a pull request."""

    description = "Create a new pull request"
    schema = CREATE_PULL_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("create_pull_request", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            pr = await self.call(
                self.client.create_pull, arguments["owner"], arguments["repo"],
                title=arguments["title"], body=arguments.get("body"),
                head=arguments["head"], base=arguments["base"], draft=arguments.get("draft"),
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e))
            raise

        pr = expect_dict(pr, "pull request")
        result = {
            "number": pr.get("number"),
            "title": pr.get("title"),
            "url": pr.get("html_url"),
            "state": pr.get("state"),
            "draft": pr.get("draft"),
        }
        self.audit("SUCCESS", arguments, f"#{result['number']} {arguments['head']} -> {arguments['base']}")
        return result


class MergePullRequestTool(ToolHandler):
    """Tool for merging a pull request."""

    description = "Merge a pull request"
    schema = MERGE_PULL_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("merge_pull_request", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            data = await self.call(
                self.client.merge_pull, arguments["owner"], arguments["repo"], arguments["pull_number"],
                commit_title=arguments.get("commit_title"),
                commit_message=arguments.get("commit_message"),
                merge_method=arguments.get("merge_method"),
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e))
            raise

        data = expect_dict(data, "merge result")
        result = {"sha": data.get("sha"), "merged": data.get("merged"), "message": data.get("message")}
        self.audit("SUCCESS", arguments, f"#{arguments['pull_number']} sha={result['sha']}")
        return result
