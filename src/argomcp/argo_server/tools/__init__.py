"""Argo Workflows server tools implementations."""

from typing import Any

from ...utils.json_parameter_middleware import json_convert
from ..models.workflow_models import (
    DeleteWorkflowResponse,
    DiagnoseWorkflowResponse,
    GetWorkflowNodeResponse,
    GetWorkflowResponse,
    HealthCheckResponse,
    LintWorkflowResponse,
    ListWorkflowsResponse,
    LogsWorkflowResponse,
    WaitWorkflowResponse,
    WorkflowActionResponse,
)
from .delete_workflow import delete_workflow_impl
from .diagnose_workflow import diagnose_workflow_impl
from .get_workflow import get_workflow_impl
from .get_workflow_node import get_workflow_node_impl
from .health_check import health_check_impl
from .lifecycle import (
    resubmit_workflow_impl,
    resume_workflow_impl,
    retry_workflow_impl,
    stop_workflow_impl,
    suspend_workflow_impl,
    terminate_workflow_impl,
)
from .lint_workflow import lint_workflow_impl
from .list_workflows import list_workflows_impl
from .logs_workflow import logs_workflow_impl
from .submit_workflow import submit_workflow_impl
from .wait_workflow import wait_workflow_impl


def _as_list(value: Any) -> list[str] | None:
    # A single bare string is one entry, not a list of characters
    if isinstance(value, str):
        return [value]
    return value


def register_argo_tools(mcp, client, config):
    """Register Argo Workflows tools with the MCP server."""

    @mcp.tool
    @json_convert
    async def submit_workflow(
        manifest: str,
        namespace: str | None = None,
        generate_name: str | None = None,
        labels: dict[str, str] | str | None = None,
        parameters: list[str] | str | None = None,
    ) -> WorkflowActionResponse:
        """Submit a Workflow manifest to Argo Workflows.

        Use this tool when:
        - Running a workflow from a YAML or JSON manifest
        - Launching a parameterized workflow with different argument values
        - Creating several runs of the same manifest with generate_name

        Args:
            manifest: Workflow manifest (YAML or JSON, kind: Workflow, max 1 MiB)
            namespace: Target namespace (defaults to the manifest's, then ARGO_NAMESPACE)
            generate_name: Use this generateName prefix instead of metadata.name
            labels: Labels to add, e.g. {"team": "data"}
            parameters: Argument overrides as "key=value" strings

        Examples:
            submit_workflow(manifest, parameters=["message=hello"])
            → {"name": "hello-world-x7k2p", "namespace": "default", "phase": "Pending", ...}

            submit_workflow("kind: Pod")
            → {"error": {"code": "INVALID_INPUT", "message": "manifest must be a Workflow, got kind 'Pod'"}}
        """
        if isinstance(labels, str):
            return WorkflowActionResponse(
                name=generate_name or "",
                namespace=namespace or "",
                error={"code": "INVALID_INPUT", "message": "labels must be an object of string values"},
            )
        return await submit_workflow_impl(client, manifest, namespace, generate_name, labels, _as_list(parameters))

    @mcp.tool
    @json_convert
    async def list_workflows(
        namespace: str | None = None,
        labels: str | None = None,
        status: list[str] | str | None = None,
        limit: int | None = None,
    ) -> ListWorkflowsResponse:
        """List Argo workflows.

        Use this tool when:
        - Finding recent or running workflows in a namespace
        - Looking for failed workflows to investigate
        - Filtering workflows by label selector

        Args:
            namespace: Namespace to list (default ARGO_NAMESPACE; "" lists all namespaces)
            labels: Label selector, e.g. "app=etl,env=prod"
            status: Phases to include: Pending, Running, Succeeded, Failed, Error
            limit: Maximum number of workflows to request

        Examples:
            list_workflows(status=["Failed"])
            → {"workflows": [{"name": "etl-8hx2c", "phase": "Failed", ...}], "total": 1}
        """
        return await list_workflows_impl(client, namespace, labels, _as_list(status), limit)

    @mcp.tool
    @json_convert
    async def get_workflow(name: str, namespace: str | None = None) -> GetWorkflowResponse:
        """Get status, timing, parameters and node counts of a workflow.

        Use this tool when:
        - Checking whether a workflow has finished
        - Reviewing which arguments a workflow ran with
        - Getting an overview before drilling into nodes or logs

        Args:
            name: Workflow name
            namespace: Namespace (default ARGO_NAMESPACE)

        Examples:
            get_workflow("etl-8hx2c")
            → {"name": "etl-8hx2c", "phase": "Failed", "duration": "5m30s", "node_summary": {...}}
        """
        return await get_workflow_impl(client, name, namespace)

    @mcp.tool
    @json_convert
    async def wait_workflow(
        name: str, namespace: str | None = None, timeout: str | None = None
    ) -> WaitWorkflowResponse:
        """Wait for a workflow to complete and return its final status.

        Use this tool when:
        - A workflow was just submitted and you need its outcome
        - Blocking until a retried or resumed workflow finishes

        Args:
            name: Workflow name
            namespace: Namespace (default ARGO_NAMESPACE)
            timeout: Maximum time to wait, e.g. "5m" or "1h" (default: no timeout)

        Examples:
            wait_workflow("etl-8hx2c", timeout="10m")
            → {"name": "etl-8hx2c", "phase": "Succeeded", "duration": "4m12s", "timed_out": false}

        Note: On timeout the last seen phase is returned with timed_out=true.
        """
        return await wait_workflow_impl(client, name, namespace, timeout)

    @mcp.tool
    @json_convert
    async def get_workflow_node(
        workflow_name: str, node_name: str, namespace: str | None = None
    ) -> GetWorkflowNodeResponse:
        """Get details of one workflow node (step, task or pod).

        Use this tool when:
        - Inspecting the inputs and outputs of a single step
        - Reading a node's exit code, message or host
        - Following a node's children through the graph

        Args:
            workflow_name: Workflow name
            node_name: Node id, full node name or display name
            namespace: Namespace (default ARGO_NAMESPACE)

        Examples:
            get_workflow_node("etl-8hx2c", "transform")
            → {"id": "etl-8hx2c-1234", "phase": "Failed", "exit_code": "137", ...}
        """
        return await get_workflow_node_impl(client, workflow_name, node_name, namespace)

    @mcp.tool
    @json_convert
    async def delete_workflow(name: str, namespace: str | None = None, force: bool = False) -> DeleteWorkflowResponse:
        """Delete a workflow.

        Args:
            name: Workflow name
            namespace: Namespace (default ARGO_NAMESPACE)
            force: Remove finalizers so the workflow is deleted immediately
        """
        return await delete_workflow_impl(client, name, namespace, force)

    @mcp.tool
    @json_convert
    async def logs_workflow(
        name: str,
        namespace: str | None = None,
        pod_name: str | None = None,
        container: str | None = None,
        tail_lines: int | None = None,
        grep: str | None = None,
    ) -> LogsWorkflowResponse:
        """Get logs from a workflow's pods.

        Use this tool when:
        - Reading the output of a failed or running step
        - Searching workflow logs for an error message

        Args:
            name: Workflow name
            namespace: Namespace (default ARGO_NAMESPACE)
            pod_name: Only this pod or node
            container: Container name (default "main")
            tail_lines: Lines from the end of each log (default 100)
            grep: Only lines matching this pattern

        Note: Output is capped at 1 MiB; "truncated" is true when lines were dropped.
        """
        return await logs_workflow_impl(client, name, namespace, pod_name, container, tail_lines, grep)

    @mcp.tool
    @json_convert
    async def lint_workflow(manifest: str, namespace: str | None = None) -> LintWorkflowResponse:
        """Validate a Workflow manifest without submitting it.

        Args:
            manifest: Workflow manifest (YAML or JSON)
            namespace: Namespace to lint against (default ARGO_NAMESPACE)

        Examples:
            lint_workflow("kind: Workflow\\nmetadata: {name: x}\\nspec: {}")
            → {"valid": false, "errors": ["spec.entrypoint is required"], ...}
        """
        return await lint_workflow_impl(client, manifest, namespace)

    @mcp.tool
    @json_convert
    async def retry_workflow(
        name: str,
        namespace: str | None = None,
        node_field_selector: str | None = None,
        parameters: list[str] | str | None = None,
        restart_successful: bool = False,
    ) -> WorkflowActionResponse:
        """Retry a failed or errored workflow from its failed steps.

        Args:
            name: Workflow name
            namespace: Namespace (default ARGO_NAMESPACE)
            node_field_selector: Selector of nodes to reset, e.g. "displayName=transform"
            parameters: Argument overrides as "key=value" strings
            restart_successful: Also re-run succeeded nodes matching the selector
        """
        return await retry_workflow_impl(
            client, name, namespace, node_field_selector, _as_list(parameters), restart_successful
        )

    @mcp.tool
    @json_convert
    async def resubmit_workflow(
        name: str,
        namespace: str | None = None,
        memoized: bool = False,
        parameters: list[str] | str | None = None,
    ) -> WorkflowActionResponse:
        """Submit a new run of an existing workflow.

        Args:
            name: Workflow to copy
            namespace: Namespace (default ARGO_NAMESPACE)
            memoized: Reuse outputs of succeeded steps
            parameters: Argument overrides as "key=value" strings
        """
        return await resubmit_workflow_impl(client, name, namespace, memoized, _as_list(parameters))

    @mcp.tool
    @json_convert
    async def suspend_workflow(name: str, namespace: str | None = None) -> WorkflowActionResponse:
        """Suspend a running workflow."""
        return await suspend_workflow_impl(client, name, namespace)

    @mcp.tool
    @json_convert
    async def resume_workflow(
        name: str, namespace: str | None = None, node_field_selector: str | None = None
    ) -> WorkflowActionResponse:
        """Resume a suspended workflow, or only the suspend nodes matching node_field_selector."""
        return await resume_workflow_impl(client, name, namespace, node_field_selector)

    @mcp.tool
    @json_convert
    async def stop_workflow(
        name: str,
        namespace: str | None = None,
        node_field_selector: str | None = None,
        message: str | None = None,
    ) -> WorkflowActionResponse:
        """Stop a workflow. Exit handlers still run.

        Args:
            name: Workflow name
            namespace: Namespace (default ARGO_NAMESPACE)
            node_field_selector: Only stop matching nodes
            message: Reason recorded on the workflow
        """
        return await stop_workflow_impl(client, name, namespace, node_field_selector, message)

    @mcp.tool
    @json_convert
    async def terminate_workflow(name: str, namespace: str | None = None) -> WorkflowActionResponse:
        """Terminate a workflow immediately. Exit handlers do not run."""
        return await terminate_workflow_impl(client, name, namespace)

    @mcp.tool
    @json_convert
    async def diagnose_workflow(workflow: str, namespace: str | None = None) -> DiagnoseWorkflowResponse:
        """Diagnose why a workflow failed.

        Use this tool when:
        - A workflow ended in Failed or Error and the cause is unclear
        - You need the root-cause step rather than every cascading failure
        - You want recent logs and known error patterns in one report

        Args:
            workflow: Workflow name
            namespace: Namespace (default ARGO_NAMESPACE)

        Examples:
            diagnose_workflow("etl-8hx2c")
            → {"description": "Diagnosis for failed workflow default/etl-8hx2c",
               "report": "...## Root Cause Node(s)...", "root_causes": ["transform"], ...}

        Note: Logs are fetched only for root-cause nodes and are bounded by
        DIAGNOSIS_LOG_TAIL_LINES and DIAGNOSIS_MAX_LOG_BYTES.
        """
        return await diagnose_workflow_impl(client, config, workflow, namespace)

    @mcp.tool
    @json_convert
    async def health_check() -> HealthCheckResponse:
        """Check health of the Argo Workflows server connection.

        Use this tool when:
        - Verifying the Argo Server is reachable with the configured token
        - Diagnosing connection issues before other tools fail

        Examples:
            health_check()
            → {"status": "healthy", "components": {"argo_server": {"version": "v3.5.5", ...}}}
        """
        return await health_check_impl(client)


__all__ = ["register_argo_tools"]
