"""Repository content tools: get_file_contents, list_repo_contents, create_or_update_file, push_files, delete_file."""

import asyncio
import base64
from typing import Any, Dict, List

from ..pipeline import Pipeline, Stage
from ..schema import REPO_BASE, Array, Object, Schema, string
from . import ToolHandler, commit_ref, dig, expect_dict, expect_list, require

GET_FILE_SCHEMA = REPO_BASE.extend(
    path=string("File path within the repository", required=True),
    ref=string("Branch, tag, or commit SHA (default: repo default branch)"),
)

LIST_CONTENTS_SCHEMA = REPO_BASE.extend(
    path=string("Directory path (default: root)"),
    ref=string("Branch, tag, or commit SHA"),
)

CREATE_OR_UPDATE_SCHEMA = REPO_BASE.extend(
    path=string("File path within the repository", required=True),
    message=string("Commit message", required=True),
    content=string("File content (plain text, will be base64-encoded)", required=True),
    branch=string("Branch to commit to (default: repo default branch)"),
    sha=string("SHA of the file being replaced (required when updating)"),
)

PUSH_FILES_SCHEMA = REPO_BASE.extend(
    branch=string("Branch to push to", required=True),
    message=string("Commit message", required=True),
    files=Array(
        description="Files to push",
        required=True,
        min_items=1,
        items=Object(schema=Schema({
            "path": string("File path", required=True),
            "content": string("File content", required=True),
        })),
    ),
)

DELETE_FILE_SCHEMA = REPO_BASE.extend(
    path=string("File path to delete", required=True),
    message=string("Commit message", required=True),
    sha=string("SHA of the file to delete", required=True),
    branch=string("Branch to delete from"),
)


def encode_content(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_content(content: Any, encoding: Any) -> str:
    """Decode a contents API payload; non-base64 content passes through."""
    if content is None:
        return ""
    if encoding == "base64" and content:
        return base64.b64decode(content).decode("utf-8", errors="replace")
    return content


def entry_summary(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": item.get("name"),
        "path": item.get("path"),
        "type": item.get("type"),
        "size": item.get("size"),
        "sha": item.get("sha"),
    }


class GetFileContentsTool(ToolHandler):
    """Tool for reading a file (decoded) or a directory listing."""

    description = "Get the contents of a file or directory from a GitHub repository"
    schema = GET_FILE_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("get_file_contents", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        data = await self.call(
            self.client.get_content,
            arguments["owner"], arguments["repo"], arguments["path"], ref=arguments.get("ref"),
        )

        if isinstance(data, list):
            return [
                {**entry_summary(expect_dict(item, "directory entry")), "url": item.get("html_url")}
                for item in data
            ]

        data = expect_dict(data, "file contents")
        summary = {
            "name": data.get("name"),
            "path": data.get("path"),
            "sha": data.get("sha"),
            "size": data.get("size"),
            "type": data.get("type"),
        }
        if data.get("type") != "file":
            # symlinks and submodules carry no decodable content
            summary["url"] = data.get("html_url")
            return summary

        summary["encoding"] = data.get("encoding")
        summary["content"] = decode_content(data.get("content"), data.get("encoding"))
        summary["url"] = data.get("html_url")
        return summary


class ListRepoContentsTool(ToolHandler):
    """Tool for listing the entries of a directory."""

    description = "List files and directories at a path in a repository"
    schema = LIST_CONTENTS_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("list_repo_contents", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        path = arguments.get("path", "")
        data = await self.call(
            self.client.get_content,
            arguments["owner"], arguments["repo"], path, ref=arguments.get("ref"),
        )
        # a file path answers with the single entry, not a listing
        if isinstance(data, dict):
            return entry_summary(data)
        return [entry_summary(expect_dict(item, "directory entry")) for item in expect_list(data, "directory")]


class CreateOrUpdateFileTool(ToolHandler):
    """Tool for committing a single file."""

    description = "Create or update a single file and commit it to a repository"
    schema = CREATE_OR_UPDATE_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("create_or_update_file", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            data = await self.call(
                self.client.put_content,
                arguments["owner"], arguments["repo"], arguments["path"],
                arguments["message"], encode_content(arguments["content"]),
                branch=arguments.get("branch"), sha=arguments.get("sha"),
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e))
            raise

        data = expect_dict(data, "file commit")
        result = {
            "commit": commit_ref(require(data, "commit")),
            "content": {
                "path": dig(data, "content", "path"),
                "sha": dig(data, "content", "sha"),
                "url": dig(data, "content", "html_url"),
            },
        }
        self.audit("SUCCESS", arguments, f"commit={result['commit']['sha']}")
        return result


class PushFilesTool(ToolHandler):
    """Tool for pushing several files in one commit via the git database API."""

    description = "Push multiple files in a single commit to a repository branch"
    schema = PUSH_FILES_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("push_files", client, audit_logger)
        self.pipeline = Pipeline(
            "push_files",
            inputs=("owner", "repo", "branch", "message", "files"),
            stages=[
                Stage("head", self._resolve_head, requires=("owner", "repo", "branch")),
                Stage("blobs", self._create_blobs, requires=("owner", "repo", "files")),
                Stage("tree", self._create_tree, requires=("head", "blobs")),
                Stage("commit", self._create_commit, requires=("head", "tree", "message")),
                Stage("ref", self._update_ref, requires=("commit", "branch")),
            ],
        )

    async def _resolve_head(self, ctx: Dict[str, Any]) -> Dict[str, str]:
        branch = await self.call(self.client.get_branch, ctx["owner"], ctx["repo"], ctx["branch"])
        return {
            "commit_sha": require(branch, "commit", "sha"),
            "tree_sha": require(branch, "commit", "commit", "tree", "sha"),
        }

    async def _create_blob(self, owner: str, repo: str, file: Dict[str, str]) -> Dict[str, str]:
        blob = await self.call(self.client.create_blob, owner, repo, encode_content(file["content"]), "base64")
        return {"path": file["path"], "mode": "100644", "type": "blob", "sha": require(blob, "sha")}

    async def _create_blobs(self, ctx: Dict[str, Any]) -> List[Dict[str, str]]:
        # blobs are independent of each other; the tree needs all of them
        return list(await asyncio.gather(
            *(self._create_blob(ctx["owner"], ctx["repo"], file) for file in ctx["files"])
        ))

    async def _create_tree(self, ctx: Dict[str, Any]) -> str:
        tree = await self.call(
            self.client.create_tree, ctx["owner"], ctx["repo"], ctx["blobs"],
            base_tree=ctx["head"]["tree_sha"],
        )
        return require(tree, "sha")

    async def _create_commit(self, ctx: Dict[str, Any]) -> Dict[str, Any]:
        commit = await self.call(
            self.client.create_commit, ctx["owner"], ctx["repo"], ctx["message"],
            ctx["tree"], [ctx["head"]["commit_sha"]],
        )
        require(commit, "sha")
        return commit

    async def _update_ref(self, ctx: Dict[str, Any]) -> Any:
        return await self.call(
            self.client.update_ref, ctx["owner"], ctx["repo"], f"heads/{ctx['branch']}", ctx["commit"]["sha"],
        )

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            ctx = await self.pipeline.run(
                owner=arguments["owner"],
                repo=arguments["repo"],
                branch=arguments["branch"],
                message=arguments["message"],
                files=arguments["files"],
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e))
            raise

        result = {
            "commit": commit_ref(ctx["commit"]),
            "files_pushed": len(arguments["files"]),
        }
        paths = ",".join(file["path"] for file in arguments["files"])
        self.audit("SUCCESS", arguments, f"branch={arguments['branch']} commit={result['commit']['sha']} files={paths}")
        return result


class DeleteFileTool(ToolHandler):
    """Tool for deleting a single file."""

    description = "Delete a file from a repository"
    schema = DELETE_FILE_SCHEMA

    def __init__(self, client, audit_logger=None):
        super().__init__("delete_file", client, audit_logger)

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        try:
            data = await self.call(
                self.client.delete_content,
                arguments["owner"], arguments["repo"], arguments["path"],
                arguments["message"], arguments["sha"], branch=arguments.get("branch"),
            )
        except Exception as e:
            self.audit("FAILED", arguments, str(e))
            raise

        result = {"commit": commit_ref(require(data, "commit"))}
        self.audit("SUCCESS", arguments, f"commit={result['commit']['sha']}")
        return result
