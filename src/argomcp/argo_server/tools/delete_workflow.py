"""Implementation of delete_workflow MCP tool."""

import logging

from ..argo_client import ArgoClient
from ..models.workflow_models import DeleteWorkflowResponse
from ._helpers import resolve_namespace, tool_error, validate_name

logger = logging.getLogger(__name__)


async def delete_workflow_impl(
    client: ArgoClient, name: str, namespace: str | None = None, force: bool = False
) -> DeleteWorkflowResponse:
    namespace = resolve_namespace(namespace, client)
    logger.info(f"Deleting workflow {namespace}/{name} (force={force})")

    try:
        name = validate_name(name)
        await client.delete_workflow(namespace, name, force=force)
        return DeleteWorkflowResponse(name=name, namespace=namespace, message=f"Workflow {name} deleted")
    except Exception as e:
        logger.error(f"Failed to delete workflow {namespace}/{name}: {e}")
        return DeleteWorkflowResponse(name=name, namespace=namespace, error=tool_error(e, "delete workflow"))
