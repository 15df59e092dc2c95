"""Tests for the dispatcher's error envelope guarantees."""

import json

import pytest

from mcp_github.dispatcher import CallResult, Dispatcher, ErrorKind
from mcp_github.errors import ShapeError
from mcp_github.github_client import APIResponse


@pytest.fixture
def dispatcher(handlers):
    return Dispatcher(handlers)


class TestUnknownOperation:
    @pytest.mark.asyncio
    async def test_unknown_tool_is_error_result(self, dispatcher, fake_client):
        result = await dispatcher.dispatch("drop_database", {})
        assert result.is_error is True
        assert result.error_kind is ErrorKind.UNKNOWN_OPERATION
        assert result.text.startswith("❌ UnknownOperation: Unknown tool: drop_database")
        assert "get_file_contents" in result.text
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_server_keeps_serving_after_unknown_tool(self, dispatcher, fake_client):
        fake_client.responses["get_repository"] = {"full_name": "acme/widgets"}
        await dispatcher.dispatch("nope", {"owner": "acme"})
        result = await dispatcher.dispatch("get_repository", {"owner": "acme", "repo": "widgets"})
        assert result.is_error is False
        assert json.loads(result.text)["full_name"] == "acme/widgets"


class TestValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,arguments", [
        ("get_file_contents", {"owner": "acme", "repo": "widgets"}),
        ("push_files", {"owner": "acme", "repo": "widgets", "branch": "main", "message": "m"}),
        ("create_branch", {"owner": "acme", "repo": "widgets"}),
        ("merge_pull_request", {"owner": "acme", "repo": "widgets"}),
        ("search_code", {}),
        ("delete_file", {"owner": "acme", "repo": "widgets", "path": "a", "message": "m"}),
    ])
    async def test_missing_required_field_makes_no_external_call(self, dispatcher, fake_client, name, arguments):
        result = await dispatcher.dispatch(name, arguments)
        assert result.is_error is True
        assert result.error_kind is ErrorKind.VALIDATION_ERROR
        assert "is required" in result.text
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_validation_message_lists_offending_fields(self, dispatcher):
        result = await dispatcher.dispatch("list_pull_requests", {"owner": 1, "repo": "w", "state": "merged"})
        assert "- owner: expected string" in result.text
        assert "- state: must be one of" in result.text

    @pytest.mark.asyncio
    async def test_none_arguments(self, dispatcher, fake_client):
        fake_client.responses["get_authenticated_user"] = {"login": "octocat"}
        result = await dispatcher.dispatch("get_user", None)
        assert result.is_error is False
        assert json.loads(result.text)["login"] == "octocat"


class TestUpstreamFailures:
    @pytest.mark.asyncio
    async def test_upstream_rejection_becomes_error_result(self, dispatcher, fake_client):
        fake_client.responses["get_repository"] = APIResponse(
            success=False, error="Not found: repository acme/widgets", http_code=404
        )
        result = await dispatcher.dispatch("get_repository", {"owner": "acme", "repo": "widgets"})
        assert result.is_error is True
        assert result.error_kind is ErrorKind.UPSTREAM_ERROR
        assert "Not found: repository acme/widgets" in result.text

    @pytest.mark.asyncio
    async def test_shape_error_is_upstream_error(self, dispatcher, fake_client):
        fake_client.responses["get_repository"] = ["not", "an", "object"]
        result = await dispatcher.dispatch("get_repository", {"owner": "acme", "repo": "widgets"})
        assert result.error_kind is ErrorKind.UPSTREAM_ERROR
        assert "Unexpected response shape" in result.text

    @pytest.mark.asyncio
    async def test_unexpected_exception_never_escapes(self, dispatcher, fake_client):
        def explode(*args, **kwargs):
            raise RuntimeError("socket closed")

        fake_client.responses["get_repository"] = explode
        result = await dispatcher.dispatch("get_repository", {"owner": "acme", "repo": "widgets"})
        assert result.is_error is True
        assert result.error_kind is ErrorKind.UPSTREAM_ERROR
        assert "RuntimeError: socket closed" in result.text


class TestSuccess:
    @pytest.mark.asyncio
    async def test_success_text_round_trips_to_normalized_output(self, handlers, fake_client):
        fake_client.responses["list_commits"] = [
            {
                "sha": "abc",
                "html_url": "https://github.com/acme/widgets/commit/abc",
                "commit": {"message": "Fix ünïcode", "author": {"name": "Ada", "date": "2024-01-01T00:00:00Z"}},
                "extra": "ignored",
            },
        ]
        arguments = {"owner": "acme", "repo": "widgets"}
        direct = await handlers["list_commits"].execute(arguments)
        result = await Dispatcher(handlers).dispatch("list_commits", arguments)

        assert result.is_error is False
        assert result.error_kind is None
        assert json.loads(result.content[0]["text"]) == direct
        assert direct == [{
            "sha": "abc",
            "message": "Fix ünïcode",
            "author": "Ada",
            "date": "2024-01-01T00:00:00Z",
            "url": "https://github.com/acme/widgets/commit/abc",
        }]


def test_call_result_to_mcp():
    ok = CallResult.success({"a": 1}).to_mcp()
    assert ok.isError is False
    assert ok.content[0].type == "text"
    assert ok.content[0].text == '{\n  "a": 1\n}'

    failed = CallResult.failure(ErrorKind.VALIDATION_ERROR, "bad").to_mcp()
    assert failed.isError is True
    assert failed.content[0].text == "❌ ValidationError: bad"


def test_handler_name_mismatch_rejected(handlers):
    with pytest.raises(ValueError):
        Dispatcher({"other_name": handlers["get_user"]})


def test_shape_error_message():
    assert str(ShapeError("missing 'sha'")) == "Unexpected response shape: missing 'sha'"
