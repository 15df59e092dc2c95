"""Issue tools: list_issues, get_issue, create_issue, create_issue_comment."""

from typing import Any, Dict, List

from ..schema import PAGINATION, REPO_BASE, Array, enum, integer, string
from . import ToolHandler, dig, expect_dict, expect_list

LIST_ISSUES_SCHEMA = REPO_BASE.extend(
    state=enum("open", "closed", "all", description="Issue state (default: open)"),
    labels=string("Comma-separated list of label names"),
    **PAGINATION,
)

GET_ISSUE_SCHEMA = REPO_BASE.extend(
    issue_number=integer("Issue number", required=True, minimum=1),
)

CREATE_ISSUE_SCHEMA = REPO_BASE.extend(
    title=string("Issue title", required=True),
    body=string("Issue body"),
    labels=Array(description="Labels to apply", items=string()),
    assignees=Array(description="Usernames to assign", items=string()),
)

CREATE_COMMENT_SCHEMA = REPO_BASE.extend(
    issue_number=integer("Issue or PR number", required=True, minimum=1),
    body=string("Comment body", required=True),
)


def label_names(labels: Any) -> List[Any]:
    # labels come back either as plain strings or as label objects
    return [label if isinstance(label, str) else dig(label, "name") for label in labels or []]


def issue_summary(issue: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "number": issue.get("number"),
        "title": issue.get("title"),
        "state": issue.get("state"),
        "author": dig(issue, "user", "login"),
        "labels": label_names(issue.get("labels")),
        "created_at": issue.get("created_at"),
        "url": issue.get("html_url"),
    }


class ListIssuesTool(ToolHandler):
    """Tool for listing issues, excluding pull requests."""

    description = "List issues in a repository"
    schema = LIST_ISSUES_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("list_issues", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = await self.call(
            self.client.list_issues, arguments["owner"], arguments["repo"],
            state=arguments.get("state"), labels=arguments.get("labels"),
            per_page=arguments.get("per_page"), page=arguments.get("page"),
        )
        issues = (expect_dict(issue, "issue") for issue in expect_list(data, "issue list"))
        return [issue_summary(issue) for issue in issues if not issue.get("pull_request")]


class GetIssueTool(ToolHandler):
    """Tool for reading one issue."""

    description = "Get details of a specific issue"
    schema = GET_ISSUE_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("get_issue", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        issue = expect_dict(
            await self.call(self.client.get_issue, arguments["owner"], arguments["repo"], arguments["issue_number"]),
            "issue",
        )
        result = issue_summary(issue)
        result.update({
            "body": issue.get("body"),
            "assignees": [dig(a, "login") for a in issue.get("assignees") or []],
            "updated_at": issue.get("updated_at"),
        })
        return result


class CreateIssueTool(ToolHandler):
    """Tool for opening an issue."""

    description = "Create a new issue in a repository"
    schema = CREATE_ISSUE_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("create_issue", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            issue = await self.call(
                self.client.create_issue, arguments["owner"], arguments["repo"],
                title=arguments["title"], body=arguments.get("body"),
                labels=arguments.get("labels"), assignees=arguments.get("assignees"),
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e))
            raise

        issue = expect_dict(issue, "issue")
        result = {
            "number": issue.get("number"),
            "title": issue.get("title"),
            "url": issue.get("html_url"),
            "state": issue.get("state"),
        }
        self.audit("SUCCESS", arguments, f"#{result['number']}")
        return result


class CreateIssueCommentTool(ToolHandler):
    """Tool for commenting on an issue or pull request."""

    description = "Add a comment to an issue or pull request"
    schema = CREATE_COMMENT_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("create_issue_comment", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            comment = await self.call(
                self.client.create_issue_comment, arguments["owner"], arguments["repo"],
                arguments["issue_number"], arguments["body"],
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e))
            raise

        comment = expect_dict(comment, "comment")
        result = {"id": comment.get("id"), "url": comment.get("html_url"), "created_at": comment.get("created_at")}
        self.audit("SUCCESS", arguments, f"#{arguments['issue_number']} comment={result['id']}")
        return result
