"""Implementation of list_workflows MCP tool."""

import logging

from ...utils.formatting import format_timestamp
from ..argo_client import ArgoClient
from ..models.execution_models import WorkflowExecution
from ..models.workflow_models import ListWorkflowsResponse, WorkflowSummary
from ._helpers import tool_error

logger = logging.getLogger(__name__)

VALID_STATUS_FILTERS = ("Pending", "Running", "Succeeded", "Failed", "Error")


async def list_workflows_impl(
    client: ArgoClient,
    namespace: str | None = None,
    labels: str | None = None,
    status: list[str] | None = None,
    limit: int | None = None,
) -> ListWorkflowsResponse:
    """List workflows, optionally filtered by phase and label selector.

    Args:
        client: Argo Server client
        namespace: Namespace to list; None uses the default, "" lists all namespaces
        labels: Label selector, e.g. "app=myapp,env=prod"
        status: Phases to keep
        limit: Maximum number of workflows requested from the server

    Returns:
        ListWorkflowsResponse with one summary per workflow
    """
    if namespace is None:
        namespace = client.default_namespace
    namespace = namespace.strip()
    logger.info(f"Listing workflows in namespace {namespace or '<all>'}")

    try:
        for phase in status or []:
            if phase not in VALID_STATUS_FILTERS:
                raise ValueError(
                    f"invalid status filter {phase!r}, must be one of: {', '.join(VALID_STATUS_FILTERS)}"
                )
        wanted = set(status or [])

        items = await client.list_workflows(namespace, label_selector=labels, limit=limit)

        summaries = []
        for item in items:
            execution = WorkflowExecution.from_dict(item)
            phase = execution.phase.value
            if wanted and phase not in wanted:
                continue
            summaries.append(
                WorkflowSummary(
                    name=execution.name,
                    namespace=execution.namespace,
                    phase=phase,
                    created_at=format_timestamp(execution.created_at) if execution.created_at else None,
                    finished_at=format_timestamp(execution.finished_at) if execution.finished_at else None,
                    message=execution.message or None,
                )
            )

        logger.info(f"Listed {len(summaries)} workflow(s)")
        return ListWorkflowsResponse(workflows=summaries, total=len(summaries))

    except Exception as e:
        logger.error(f"Failed to list workflows: {e}")
        return ListWorkflowsResponse(error=tool_error(e, "list workflows"))
