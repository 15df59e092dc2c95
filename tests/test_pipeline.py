"""Tests for ordered stage execution."""

import pytest

from mcp_github.pipeline import Pipeline, Stage


def const(value):
    async def run(context):
        return value
    return run


def test_stage_cannot_require_later_stage():
    with pytest.raises(ValueError, match="requires \\['later'\\]"):
        Pipeline("p", ["x"], [
            Stage("first", const(1), requires=("later",)),
            Stage("later", const(2)),
        ])


def test_duplicate_keys_rejected():
    with pytest.raises(ValueError, match="duplicate key 'x'"):
        Pipeline("p", ["x"], [Stage("x", const(1))])


@pytest.mark.asyncio
async def test_stages_see_earlier_results():
    seen = []

    async def double(context):
        seen.append("double")
        return context["base"] * 2

    async def describe(context):
        seen.append("describe")
        return f"{context['x']}:{context['double']}"

    pipeline = Pipeline("p", ["x"], [
        Stage("base", const(21)),
        Stage("double", double, requires=("base",)),
        Stage("describe", describe, requires=("x", "double")),
    ])
    context = await pipeline.run(x="in")

    assert seen == ["double", "describe"]
    assert context == {"x": "in", "base": 21, "double": 42, "describe": "in:42"}


@pytest.mark.asyncio
async def test_failure_stops_remaining_stages():
    ran = []

    async def boom(context):
        raise RuntimeError("stage failed")

    async def after(context):
        ran.append("after")

    pipeline = Pipeline("p", [], [Stage("boom", boom), Stage("after", after)])
    with pytest.raises(RuntimeError, match="stage failed"):
        await pipeline.run()
    assert ran == []


@pytest.mark.asyncio
async def test_missing_inputs():
    pipeline = Pipeline("p", ["owner", "repo"], [])
    with pytest.raises(ValueError, match="missing inputs \\['repo'\\]"):
        await pipeline.run(owner="acme")
