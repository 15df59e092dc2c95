"""Tests for commit and branch tools."""

import pytest

from mcp_github.errors import ShapeError, UpstreamError


class TestCreateBranch:
    @pytest.mark.asyncio
    async def test_default_branch_resolved_first(self, handlers, fake_client, audit_log):
        fake_client.responses.update({
            "get_repository": {"full_name": "acme/widgets", "default_branch": "trunk"},
            "get_branch": {"name": "trunk", "commit": {"sha": "abc123"}},
            "create_ref": {
                "ref": "refs/heads/feature-x",
                "object": {"sha": "abc123", "type": "commit"},
                "url": "https://api.github.com/repos/acme/widgets/git/refs/heads/feature-x",
            },
        })

        output = await handlers["create_branch"].execute(
            {"owner": "acme", "repo": "widgets", "branch": "feature-x"}
        )

        assert fake_client.calls == [
            ("get_repository", ("acme", "widgets"), {}),
            ("get_branch", ("acme", "widgets", "trunk"), {}),
            ("create_ref", ("acme", "widgets", "refs/heads/feature-x", "abc123"), {}),
        ]
        assert output == {
            "ref": "refs/heads/feature-x",
            "sha": "abc123",
            "url": "https://api.github.com/repos/acme/widgets/git/refs/heads/feature-x",
        }
        assert "from=trunk sha=abc123" in audit_log.read_text()

    @pytest.mark.asyncio
    async def test_explicit_source_skips_repository_lookup(self, handlers, fake_client):
        fake_client.responses.update({
            "get_branch": {"commit": {"sha": "def456"}},
            "create_ref": {"ref": "refs/heads/fix", "object": {"sha": "def456"}},
        })
        await handlers["create_branch"].execute(
            {"owner": "acme", "repo": "widgets", "branch": "fix", "from_branch": "develop"}
        )
        assert fake_client.call_names == ["get_branch", "create_ref"]
        assert fake_client.calls[0][1] == ("acme", "widgets", "develop")

    @pytest.mark.asyncio
    async def test_missing_source_branch_stops_before_create(self, handlers, fake_client):
        with pytest.raises(UpstreamError):
            await handlers["create_branch"].execute(
                {"owner": "acme", "repo": "widgets", "branch": "fix", "from_branch": "gone"}
            )
        assert "create_ref" not in fake_client.call_names

    @pytest.mark.asyncio
    async def test_repository_without_default_branch(self, handlers, fake_client):
        fake_client.responses["get_repository"] = {"full_name": "acme/widgets"}
        with pytest.raises(ShapeError):
            await handlers["create_branch"].execute({"owner": "acme", "repo": "widgets", "branch": "x"})


@pytest.mark.asyncio
async def test_list_commits_projection_and_filters(handlers, fake_client):
    fake_client.responses["list_commits"] = [
        {"sha": "1", "html_url": "u", "commit": {"message": "m", "author": None}},
    ]
    output = await handlers["list_commits"].execute(
        {"owner": "acme", "repo": "widgets", "branch": "dev", "per_page": 5, "author": "ada"}
    )
    assert output == [{"sha": "1", "message": "m", "author": None, "date": None, "url": "u"}]
    assert fake_client.calls[0][2] == {
        "sha": "dev", "per_page": 5, "page": None, "path": None,
        "author": "ada", "since": None, "until": None,
    }


@pytest.mark.asyncio
async def test_get_commit_includes_files(handlers, fake_client):
    fake_client.responses["get_commit"] = {
        "sha": "abc",
        "html_url": "u",
        "commit": {"message": "m", "author": {"name": "Ada", "date": "d"}},
        "stats": {"total": 3, "additions": 2, "deletions": 1},
        "files": [{"filename": "a.py", "status": "modified", "additions": 2, "deletions": 1,
                   "changes": 3, "patch": "@@", "blob_url": "ignored"}],
    }
    output = await handlers["get_commit"].execute({"owner": "acme", "repo": "widgets", "sha": "abc"})
    assert output["stats"] == {"total": 3, "additions": 2, "deletions": 1}
    assert output["files"] == [{"filename": "a.py", "status": "modified", "additions": 2,
                                "deletions": 1, "changes": 3, "patch": "@@"}]
    assert output["author"] == "Ada"


@pytest.mark.asyncio
async def test_list_branches(handlers, fake_client):
    fake_client.responses["list_branches"] = [
        {"name": "main", "commit": {"sha": "1", "url": "x"}, "protected": True},
    ]
    output = await handlers["list_branches"].execute({"owner": "acme", "repo": "widgets"})
    assert output == [{"name": "main", "sha": "1", "protected": True}]
