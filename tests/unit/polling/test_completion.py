"""
Unit tests for the build-check and action-check protocols.
"""

import pytest

from platform_provider.models.enums import DecisionKind
from platform_provider.models.status_models import ActionStatus, BuildStatus
from platform_provider.polling.probes import CompletionProbe
from platform_provider.retry.session import RetrySession
from tests.fixtures import json_reply


BUILD_PATH = "/endpoint/e1/s1/rest/api/v1/builds/b1"
ACTION_PATH = "/endpoint/e1/s1/rest/api/v1/actions/a1"


@pytest.mark.asyncio
async def test_build_failed_reports_compile_error(provider, mock_platform, ctx, diagnostics):
    mock_platform.reply("GET", BUILD_PATH, json_reply({"id": "b1", "status": "failed", "compileError": "syntax error"}))

    result = await provider.poller.wait_for_build(ctx, BUILD_PATH, diagnostics)

    assert result is None
    assert len(mock_platform.calls("GET", BUILD_PATH)) == 1
    assert len(diagnostics) == 1
    assert diagnostics.errors[0].summary == "build failed"
    assert diagnostics.errors[0].detail == "syntax error"


@pytest.mark.asyncio
async def test_build_succeeds_after_progress(provider, mock_platform, ctx, diagnostics):
    mock_platform.reply(
        "GET", BUILD_PATH,
        json_reply({"id": "b1", "status": "pending"}),
        json_reply({"id": "b1", "status": "running"}),
        json_reply({"id": "b1", "status": "succeeded", "compileError": ""}),
    )

    result = await provider.poller.wait_for_build(ctx, BUILD_PATH, diagnostics)

    assert isinstance(result, BuildStatus)
    assert result.id == "b1"
    assert result.status == "succeeded"
    assert len(mock_platform.calls("GET", BUILD_PATH)) == 3
    assert len(diagnostics) == 0


@pytest.mark.asyncio
async def test_action_failed_reports_error(provider, mock_platform, ctx, diagnostics):
    mock_platform.reply(
        "GET", ACTION_PATH,
        json_reply({"id": "a1", "status": "running"}),
        json_reply({"id": "a1", "status": "failed", "error": "deploy reverted"}),
    )

    result = await provider.poller.wait_for_action(ctx, ACTION_PATH, diagnostics)

    assert result is None
    assert len(mock_platform.calls("GET", ACTION_PATH)) == 2
    assert [(d.summary, d.detail) for d in diagnostics] == [("action failed", "deploy reverted")]


@pytest.mark.asyncio
async def test_action_succeeded(provider, mock_platform, ctx, diagnostics):
    mock_platform.reply("GET", ACTION_PATH, json_reply({"id": "a1", "status": "succeeded"}))

    result = await provider.poller.wait_for_action(ctx, ACTION_PATH, diagnostics)

    assert isinstance(result, ActionStatus)
    assert result.status == "succeeded"


@pytest.mark.parametrize(
    "status,expected",
    [
        ("succeeded", DecisionKind.SUCCEED),
        ("failed", DecisionKind.FAIL),
        ("pending", DecisionKind.RETRY),
        ("running", DecisionKind.RETRY),
        ("compiling", DecisionKind.RETRY),
        ("", DecisionKind.RETRY),
        ("SUCCEEDED", DecisionKind.RETRY),
    ],
)
@pytest.mark.asyncio
async def test_status_maps_to_exactly_one_decision(provider, mock_platform, ctx, diagnostics, status, expected):
    mock_platform.reply("GET", BUILD_PATH, json_reply({"status": status}))
    probe = CompletionProbe(provider.executor, ctx, BUILD_PATH, diagnostics, BuildStatus, "build")
    session = RetrySession(name="build-check")

    decision = await probe.attempt(session)

    assert decision.kind is expected
    assert session.progress == f"(waiting for completion - status: {status})"
    assert len(diagnostics) == (1 if expected is DecisionKind.FAIL else 0)
