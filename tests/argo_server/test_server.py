"""Tests for the Argo Workflows MCP server surface: tools, prompts and resources."""

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastmcp import Client

from argomcp.argo_server.argo_client import get_argo_client, reset_argo_client, set_argo_client
from argomcp.argo_server.resources import RESOURCE_DEFINITIONS, read_doc
from argomcp.argo_server.server import ArgoWorkflowsServer

EXPECTED_TOOLS = {
    "submit_workflow",
    "list_workflows",
    "get_workflow",
    "wait_workflow",
    "get_workflow_node",
    "delete_workflow",
    "logs_workflow",
    "lint_workflow",
    "retry_workflow",
    "resubmit_workflow",
    "suspend_workflow",
    "resume_workflow",
    "stop_workflow",
    "terminate_workflow",
    "diagnose_workflow",
    "health_check",
}


def _tool_payload(result):
    return json.loads(result.content[0].text)


@pytest.fixture
def failing_workflow(make_workflow, make_node):
    return make_workflow(
        [
            make_node("B", node_type="DAG", phase="Failed", children=["A"]),
            make_node("A", phase="Failed", exit_code="137"),
        ]
    )


@pytest.fixture
def server_factory(argo_config, mock_client_factory):
    async def factory(handler):
        server = ArgoWorkflowsServer(argo_config, mock_client_factory(handler))
        await server.initialize()
        return server

    return factory


def _argo_handler(workflow, recorded=None):
    def handler(request):
        if recorded is not None:
            recorded.append(request)
        path = request.url.path
        if path == "/api/v1/version":
            return httpx.Response(200, json={"version": "v3.5.5"})
        if path.endswith("/log"):
            return httpx.Response(200, text=json.dumps({"result": {"content": "Killed", "podName": "wf.A"}}) + "\n")
        if request.method == "POST":
            return httpx.Response(200, json={"metadata": {"name": "hello-abc", "namespace": "argo"}})
        if path == "/api/v1/workflows/argo/wf":
            return httpx.Response(200, json=workflow)
        return httpx.Response(404, json={"message": "not found"})

    return handler


class TestServerInitialization:
    """Test server lifecycle and registration."""

    @pytest.mark.asyncio
    async def test_registers_all_tools(self, server_factory, failing_workflow):
        server = await server_factory(_argo_handler(failing_workflow))

        tools = await server.mcp.get_tools()

        assert set(tools) == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_registers_prompt_and_resources(self, server_factory, failing_workflow):
        server = await server_factory(_argo_handler(failing_workflow))

        prompts = await server.mcp.get_prompts()
        resources = await server.mcp.get_resources()

        assert set(prompts) == {"why_did_this_fail"}
        assert {str(uri) for uri in resources} == {definition.uri for definition in RESOURCE_DEFINITIONS}

    @pytest.mark.asyncio
    async def test_unreachable_argo_server_still_initializes(self, server_factory):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        server = await server_factory(handler)

        assert set(await server.mcp.get_tools()) == EXPECTED_TOOLS

    @pytest.mark.asyncio
    async def test_initialize_twice_registers_once(self, server_factory, failing_workflow):
        server = await server_factory(_argo_handler(failing_workflow))

        await server.initialize()

        assert len(await server.mcp.get_tools()) == len(EXPECTED_TOOLS)

    @pytest.mark.asyncio
    async def test_run_uses_configured_transport_and_closes_client(self, server_factory, failing_workflow):
        server = await server_factory(_argo_handler(failing_workflow))
        server.config.transport = "http"

        with (
            patch.object(server.mcp, "run_async", new=AsyncMock()) as run_async,
            patch.object(server.client, "close", new=AsyncMock()) as close,
        ):
            await server.run()

        run_async.assert_awaited_once_with(transport="http", host="127.0.0.1", port=8080)
        close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_uses_global_client_and_releases_it_on_shutdown(self, argo_config, mock_client_factory):
        shared = mock_client_factory(lambda request: httpx.Response(200, json={"version": "v3.5.5"}))
        set_argo_client(shared)
        try:
            server = ArgoWorkflowsServer(argo_config)
            assert server.client is shared

            await server.shutdown()

            assert get_argo_client(argo_config) is not shared
        finally:
            reset_argo_client()


class TestToolsOverMCP:
    """Test tools through an in-memory MCP client session."""

    @pytest.mark.asyncio
    async def test_get_workflow(self, server_factory, failing_workflow):
        server = await server_factory(_argo_handler(failing_workflow))

        async with Client(server.mcp) as client:
            result = await client.call_tool("get_workflow", {"name": "wf"})

        payload = _tool_payload(result)
        assert payload["phase"] == "Failed"
        assert payload["node_summary"]["failed"] == 2

    @pytest.mark.asyncio
    async def test_json_string_arguments_are_decoded(self, server_factory, failing_workflow):
        """Labels and parameters sent as JSON strings reach the manifest as objects."""
        recorded = []
        server = await server_factory(_argo_handler(failing_workflow, recorded))
        manifest = "kind: Workflow\nmetadata:\n  generateName: hello-\nspec:\n  entrypoint: main\n"

        async with Client(server.mcp) as client:
            result = await client.call_tool(
                "submit_workflow",
                {"manifest": manifest, "labels": '{"team": "data"}', "parameters": '["message=hi"]'},
            )

        assert _tool_payload(result)["name"] == "hello-abc"
        sent = json.loads(recorded[-1].content)["workflow"]
        assert sent["metadata"]["labels"] == {"team": "data"}
        assert sent["spec"]["arguments"]["parameters"] == [{"name": "message", "value": "hi"}]

    @pytest.mark.asyncio
    async def test_diagnose_workflow(self, server_factory, failing_workflow):
        server = await server_factory(_argo_handler(failing_workflow))

        async with Client(server.mcp) as client:
            result = await client.call_tool("diagnose_workflow", {"workflow": "wf"})

        payload = _tool_payload(result)
        assert payload["root_causes"] == ["A"]
        assert "Exit code 137 (OOMKilled or SIGKILL)" in payload["report"]


class TestPromptsAndResources:
    """Test the why_did_this_fail prompt and documentation resources."""

    @pytest.mark.asyncio
    async def test_why_did_this_fail(self, server_factory, failing_workflow):
        server = await server_factory(_argo_handler(failing_workflow))

        async with Client(server.mcp) as client:
            result = await client.get_prompt("why_did_this_fail", {"workflow": "wf"})

        message = result.messages[0]
        assert message.role == "user"
        assert "### Node: A (ROOT CAUSE)" in message.content.text
        assert "Killed" in message.content.text

    @pytest.mark.asyncio
    async def test_why_did_this_fail_missing_workflow(self, server_factory, failing_workflow):
        server = await server_factory(_argo_handler(failing_workflow))

        async with Client(server.mcp) as client:
            with pytest.raises(Exception):
                await client.get_prompt("why_did_this_fail", {"workflow": "nope"})

    @pytest.mark.asyncio
    async def test_read_resource(self, server_factory, failing_workflow):
        server = await server_factory(_argo_handler(failing_workflow))

        async with Client(server.mcp) as client:
            contents = await client.read_resource("argo://examples/hello-world")

        assert contents[0].text.startswith("# Hello World Workflow Example")
        assert contents[0].mimeType == "text/markdown"

    def test_every_definition_has_a_document(self):
        for definition in RESOURCE_DEFINITIONS:
            assert read_doc(definition.doc_file).startswith("# ")

    def test_unknown_document(self):
        with pytest.raises(FileNotFoundError):
            read_doc("does_not_exist.md")

        with pytest.raises(FileNotFoundError):
            read_doc("../__init__.py")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "uri, fragment",
        [
            ("argo://docs/template-types/script", "source"),
            ("argo://docs/template-types/http", "HTTP requests"),
            ("argo://examples/loops", "withParam"),
            ("argo://examples/timeout-limits", "activeDeadlineSeconds"),
            ("argo://examples/volumes", "PersistentVolumeClaim"),
        ],
    )
    async def test_template_type_and_example_documents(self, server_factory, failing_workflow, uri, fragment):
        server = await server_factory(_argo_handler(failing_workflow))

        async with Client(server.mcp) as client:
            contents = await client.read_resource(uri)

        assert fragment in contents[0].text

    def test_catalog_uris_are_unique(self):
        uris = [definition.uri for definition in RESOURCE_DEFINITIONS]

        assert len(uris) == len(set(uris)) == 21
