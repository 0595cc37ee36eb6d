"""Implementation of diagnose_workflow MCP tool."""

import logging

from ..argo_client import ArgoClient, ArgoNotFoundError
from ..config import ArgoServerConfig
from ..diagnosis import diagnose_workflow
from ..models.workflow_models import DiagnoseWorkflowResponse
from ._helpers import tool_error

logger = logging.getLogger(__name__)


async def diagnose_workflow_impl(
    client: ArgoClient, config: ArgoServerConfig, workflow: str, namespace: str | None = None
) -> DiagnoseWorkflowResponse:
    """Run the failure diagnosis for a workflow and return the report.

    Args:
        client: Argo Server client
        config: Server configuration supplying the log evidence limits
        workflow: Workflow name
        namespace: Namespace (client default if omitted)

    Returns:
        DiagnoseWorkflowResponse with the markdown report and node labels
    """
    try:
        report = await diagnose_workflow(
            client,
            workflow,
            namespace,
            tail_lines=config.log_tail_lines,
            max_log_bytes=config.max_log_bytes,
        )
        return DiagnoseWorkflowResponse(
            workflow=workflow.strip(),
            namespace=(namespace or "").strip() or client.default_namespace,
            description=report.description,
            report=report.text,
            root_causes=[record.label for record in report.root_causes],
            failed_nodes=[record.label for record in report.failed_nodes],
        )
    except Exception as e:
        logger.error(f"Failed to diagnose workflow {workflow}: {e}")
        # A missing workflow is reported as NOT_FOUND even though it arrives wrapped
        cause = e.__cause__ if isinstance(e.__cause__, ArgoNotFoundError) else e
        error = tool_error(cause, "diagnose workflow")
        if cause is not e:
            error["message"] = str(e)
        return DiagnoseWorkflowResponse(workflow=workflow, namespace=namespace, error=error)
