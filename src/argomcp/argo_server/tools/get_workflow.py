"""Implementation of get_workflow MCP tool."""

import logging
from datetime import datetime, timezone

from ...utils.formatting import format_duration, format_timestamp
from ..argo_client import ArgoClient
from ..models.execution_models import ExecutionNode, NodePhase, WorkflowExecution
from ..models.workflow_models import GetWorkflowResponse, NodeSummary, ParameterInfo
from ._helpers import resolve_namespace, tool_error, validate_name

logger = logging.getLogger(__name__)

_SUMMARY_FIELDS = {
    NodePhase.SUCCEEDED: "succeeded",
    NodePhase.FAILED: "failed",
    NodePhase.RUNNING: "running",
    NodePhase.PENDING: "pending",
    NodePhase.SKIPPED: "skipped",
    NodePhase.ERROR: "error",
    NodePhase.OMITTED: "omitted",
}


def build_node_summary(nodes: dict[str, ExecutionNode]) -> NodeSummary:
    """Count nodes per phase."""
    summary = NodeSummary(total=len(nodes))
    for node in nodes.values():
        field_name = _SUMMARY_FIELDS.get(node.phase)
        if field_name:
            setattr(summary, field_name, getattr(summary, field_name) + 1)
    return summary


def elapsed(started_at: datetime | None, finished_at: datetime | None) -> str | None:
    """Format the time between start and finish (or now, if still running)."""
    if started_at is None:
        return None
    end = finished_at or datetime.now(timezone.utc)
    return format_duration(end - started_at)


def build_get_workflow_response(execution: WorkflowExecution) -> GetWorkflowResponse:
    return GetWorkflowResponse(
        name=execution.name,
        namespace=execution.namespace,
        uid=execution.uid or None,
        phase=execution.phase.value or "Pending",
        message=execution.message or None,
        started_at=format_timestamp(execution.started_at) if execution.started_at else None,
        finished_at=format_timestamp(execution.finished_at) if execution.finished_at else None,
        duration=elapsed(execution.started_at, execution.finished_at),
        progress=execution.progress or None,
        parameters=[ParameterInfo(name=p.name, value=p.value) for p in execution.parameters],
        node_summary=build_node_summary(execution.nodes) if execution.nodes else None,
    )


async def get_workflow_impl(client: ArgoClient, name: str, namespace: str | None = None) -> GetWorkflowResponse:
    """Get detailed information about a workflow.

    Args:
        client: Argo Server client
        name: Workflow name
        namespace: Namespace (client default if omitted)

    Returns:
        GetWorkflowResponse with status, timing, parameters and node counts
    """
    namespace = resolve_namespace(namespace, client)
    logger.info(f"Getting workflow {namespace}/{name}")

    try:
        name = validate_name(name)
        data = await client.get_workflow(namespace, name)
        response = build_get_workflow_response(WorkflowExecution.from_dict(data))
        logger.info(f"Workflow {namespace}/{name} is {response.phase}")
        return response
    except Exception as e:
        logger.error(f"Failed to get workflow {namespace}/{name}: {e}")
        return GetWorkflowResponse(name=name, namespace=namespace, error=tool_error(e, "get workflow"))
