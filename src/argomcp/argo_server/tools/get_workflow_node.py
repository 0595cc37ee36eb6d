"""Implementation of get_workflow_node MCP tool."""

import logging

from ...utils.formatting import format_timestamp
from ..argo_client import ArgoClient, ArgoNotFoundError
from ..models.execution_models import ExecutionNode, WorkflowExecution
from ..models.workflow_models import ArtifactInfo, GetWorkflowNodeResponse, ParameterInfo
from ._helpers import resolve_namespace, tool_error, validate_name
from .get_workflow import elapsed

logger = logging.getLogger(__name__)


def find_node(nodes: dict[str, ExecutionNode], name_or_id: str) -> ExecutionNode:
    """Find a node by id, then by full name, then by display name."""
    if name_or_id in nodes:
        return nodes[name_or_id]
    for node in nodes.values():
        if node.name == name_or_id:
            return node
    for node in nodes.values():
        if node.display_name == name_or_id:
            return node
    raise ArgoNotFoundError(f"node {name_or_id!r} not found in workflow")


def build_node_response(node: ExecutionNode, workflow_name: str, namespace: str) -> GetWorkflowNodeResponse:
    return GetWorkflowNodeResponse(
        workflow_name=workflow_name,
        namespace=namespace,
        id=node.id,
        name=node.name,
        display_name=node.display_name or None,
        type=node.type.value or None,
        template_name=node.template_name or None,
        phase=node.phase.value or "Pending",
        message=node.message or None,
        started_at=format_timestamp(node.started_at) if node.started_at else None,
        finished_at=format_timestamp(node.finished_at) if node.finished_at else None,
        duration=elapsed(node.started_at, node.finished_at),
        progress=node.progress or None,
        boundary_id=node.boundary_id or None,
        pod_ip=node.pod_ip or None,
        host_node_name=node.host_node_name or None,
        exit_code=node.exit_code,
        children=list(node.children),
        input_parameters=[ParameterInfo(b.name, b.value) for b in node.inputs if b.type == "parameter"],
        input_artifacts=[ArtifactInfo(b.name, b.source or None) for b in node.inputs if b.type == "artifact"],
        output_parameters=[ParameterInfo(b.name, b.value) for b in node.outputs if b.type == "parameter"],
        output_artifacts=[ArtifactInfo(b.name) for b in node.outputs if b.type == "artifact"],
    )


async def get_workflow_node_impl(
    client: ArgoClient, workflow_name: str, node_name: str, namespace: str | None = None
) -> GetWorkflowNodeResponse:
    """Get the details of one node of a workflow."""
    namespace = resolve_namespace(namespace, client)
    logger.info(f"Getting node {node_name} of workflow {namespace}/{workflow_name}")

    try:
        workflow_name = validate_name(workflow_name)
        node_name = validate_name(node_name, "node name")
        data = await client.get_workflow(namespace, workflow_name)
        node = find_node(WorkflowExecution.from_dict(data).nodes, node_name)
        return build_node_response(node, workflow_name, namespace)
    except Exception as e:
        logger.error(f"Failed to get node {node_name} of workflow {namespace}/{workflow_name}: {e}")
        return GetWorkflowNodeResponse(
            workflow_name=workflow_name, namespace=namespace, error=tool_error(e, "get workflow node")
        )
