"""Tests for the Argo Server REST client."""

import json

import httpx
import pytest

from argomcp.argo_server.argo_client import (
    ArgoAPIError,
    ArgoClient,
    ArgoConnectionError,
    ArgoNotFoundError,
    get_argo_client,
    reset_argo_client,
    set_argo_client,
)
from argomcp.argo_server.config import ArgoServerConfig, reset_config, set_config


class RecordingHandler:
    """MockTransport handler that records requests and replies with a fixed response."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


class TestArgoClientRequests:
    """Test request construction for each endpoint."""

    @pytest.mark.asyncio
    async def test_bearer_token_and_base_url(self, mock_client_factory):
        handler = RecordingHandler(httpx.Response(200, json={"metadata": {"name": "wf"}}))
        client = mock_client_factory(handler)

        await client.get_workflow("argo", "wf")

        assert handler.last.headers["Authorization"] == "Bearer secret"
        assert str(handler.last.url) == "https://argo.test:2746/api/v1/workflows/argo/wf"

    @pytest.mark.asyncio
    async def test_existing_bearer_prefix_kept(self):
        handler = RecordingHandler(httpx.Response(200, json={}))
        config = ArgoServerConfig(argo_token="Bearer abc")
        client = ArgoClient(config, transport=httpx.MockTransport(handler))

        await client.get_version()

        assert handler.last.headers["Authorization"] == "Bearer abc"

    @pytest.mark.asyncio
    async def test_no_token_no_header(self):
        handler = RecordingHandler(httpx.Response(200, json={}))
        client = ArgoClient(ArgoServerConfig(), transport=httpx.MockTransport(handler))

        await client.get_version()

        assert "Authorization" not in handler.last.headers

    @pytest.mark.asyncio
    async def test_list_workflows_params(self, mock_client_factory):
        handler = RecordingHandler(httpx.Response(200, json={"items": [{"metadata": {"name": "a"}}]}))
        client = mock_client_factory(handler)

        items = await client.list_workflows("argo", label_selector="app=etl", limit=5)

        assert items == [{"metadata": {"name": "a"}}]
        assert handler.last.url.params["listOptions.labelSelector"] == "app=etl"
        assert handler.last.url.params["listOptions.limit"] == "5"

    @pytest.mark.asyncio
    async def test_list_workflows_null_items(self, mock_client_factory):
        client = mock_client_factory(RecordingHandler(httpx.Response(200, json={"items": None})))

        assert await client.list_workflows("argo") == []

    @pytest.mark.asyncio
    async def test_create_workflow_body(self, mock_client_factory):
        handler = RecordingHandler(httpx.Response(200, json={"metadata": {"name": "wf-abc"}}))
        client = mock_client_factory(handler)
        manifest = {"kind": "Workflow", "metadata": {"generateName": "wf-"}}

        await client.create_workflow("argo", manifest)

        assert handler.last.method == "POST"
        assert handler.last.url.path == "/api/v1/workflows/argo"
        assert json.loads(handler.last.content) == {"namespace": "argo", "workflow": manifest}

    @pytest.mark.asyncio
    async def test_delete_force(self, mock_client_factory):
        handler = RecordingHandler(httpx.Response(200, json={}))
        client = mock_client_factory(handler)

        await client.delete_workflow("argo", "wf", force=True)

        assert handler.last.method == "DELETE"
        assert handler.last.url.params["force"] == "true"

    @pytest.mark.asyncio
    async def test_retry_body_omits_unset_fields(self, mock_client_factory):
        handler = RecordingHandler(httpx.Response(200, json={}))
        client = mock_client_factory(handler)

        await client.retry_workflow("argo", "wf", parameters=["a=1"], restart_successful=True)

        assert handler.last.method == "PUT"
        assert handler.last.url.path == "/api/v1/workflows/argo/wf/retry"
        assert json.loads(handler.last.content) == {
            "name": "wf",
            "namespace": "argo",
            "parameters": ["a=1"],
            "restartSuccessful": True,
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["suspend", "terminate"])
    async def test_simple_actions(self, mock_client_factory, action):
        handler = RecordingHandler(httpx.Response(200, json={}))
        client = mock_client_factory(handler)

        await getattr(client, f"{action}_workflow")("argo", "wf")

        assert handler.last.url.path == f"/api/v1/workflows/argo/wf/{action}"
        assert json.loads(handler.last.content) == {"name": "wf", "namespace": "argo"}


class TestArgoClientErrors:
    """Test HTTP and transport error mapping."""

    @pytest.mark.asyncio
    async def test_not_found(self, mock_client_factory):
        client = mock_client_factory(RecordingHandler(httpx.Response(404, json={"message": "not found"})))

        with pytest.raises(ArgoNotFoundError, match="not found"):
            await client.get_workflow("argo", "missing")

    @pytest.mark.asyncio
    async def test_api_error_carries_status(self, mock_client_factory):
        client = mock_client_factory(RecordingHandler(httpx.Response(403, json={"message": "forbidden"})))

        with pytest.raises(ArgoAPIError) as exc_info:
            await client.get_workflow("argo", "wf")

        assert exc_info.value.status_code == 403
        assert str(exc_info.value) == "forbidden"

    @pytest.mark.asyncio
    async def test_plain_text_error(self, mock_client_factory):
        client = mock_client_factory(RecordingHandler(httpx.Response(502, text="bad gateway")))

        with pytest.raises(ArgoAPIError, match="bad gateway"):
            await client.get_version()

    @pytest.mark.asyncio
    async def test_connection_error(self, mock_client_factory):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = mock_client_factory(handler)

        with pytest.raises(ArgoConnectionError, match="Cannot reach Argo Server"):
            await client.get_version()


class TestLogStreaming:
    """Test newline-delimited JSON log streams."""

    @pytest.mark.asyncio
    async def test_frames_decoded(self, mock_client_factory):
        body = (
            json.dumps({"result": {"content": "line one", "podName": "wf-1"}})
            + "\n\n"
            + json.dumps({"result": {"content": "line two", "podName": "wf-1"}})
            + "\n"
        )
        handler = RecordingHandler(httpx.Response(200, text=body))
        client = mock_client_factory(handler)

        entries = [
            entry
            async for entry in client.stream_workflow_logs(
                "argo", "wf", pod_name="wf-1", container="main", tail_lines=10, grep="line"
            )
        ]

        assert [(e.content, e.pod_name) for e in entries] == [("line one", "wf-1"), ("line two", "wf-1")]
        params = handler.last.url.params
        assert params["podName"] == "wf-1"
        assert params["logOptions.container"] == "main"
        assert params["logOptions.tailLines"] == "10"
        assert params["grep"] == "line"

    @pytest.mark.asyncio
    async def test_error_frame_raises(self, mock_client_factory):
        body = (
            json.dumps({"result": {"content": "partial"}})
            + "\n"
            + json.dumps({"error": {"message": "pod not found"}})
            + "\n"
        )
        client = mock_client_factory(RecordingHandler(httpx.Response(200, text=body)))
        received = []

        with pytest.raises(ArgoAPIError, match="pod not found"):
            async for entry in client.stream_workflow_logs("argo", "wf"):
                received.append(entry.content)

        assert received == ["partial"]

    @pytest.mark.asyncio
    async def test_stream_not_found(self, mock_client_factory):
        client = mock_client_factory(RecordingHandler(httpx.Response(404, json={"message": "no such workflow"})))

        with pytest.raises(ArgoNotFoundError):
            async for _ in client.stream_workflow_logs("argo", "wf"):
                pass


class TestGlobalClient:
    """Test the process-wide client helpers."""

    def teardown_method(self):
        reset_argo_client()
        reset_config()

    def test_get_set_reset(self):
        set_config(ArgoServerConfig(namespace="global"))
        client = get_argo_client()

        assert client is get_argo_client()
        assert client.default_namespace == "global"

        replacement = ArgoClient(ArgoServerConfig())
        set_argo_client(replacement)
        assert get_argo_client() is replacement

        reset_argo_client()
        assert get_argo_client() is not replacement
