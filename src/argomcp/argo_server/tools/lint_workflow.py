"""Implementation of lint_workflow MCP tool."""

import logging

from ..argo_client import ArgoAPIError, ArgoClient
from ..models.workflow_models import LintWorkflowResponse
from ._helpers import resolve_namespace, tool_error
from .submit_workflow import parse_manifest

logger = logging.getLogger(__name__)


async def lint_workflow_impl(client: ArgoClient, manifest: str, namespace: str | None = None) -> LintWorkflowResponse:
    """Validate a Workflow manifest without submitting it.

    Local problems (unparseable YAML, wrong kind) and server-side lint
    rejections are both reported as ``valid=False`` with the reasons in
    ``errors``. Only an unreachable or failing server produces ``error``.
    """
    namespace = resolve_namespace(namespace, client)
    logger.info(f"Linting workflow manifest for namespace {namespace}")

    try:
        workflow = parse_manifest(manifest)
    except ValueError as e:
        return LintWorkflowResponse(valid=False, namespace=namespace, errors=[str(e)])

    metadata = workflow.get("metadata") or {}
    name = metadata.get("name") or metadata.get("generateName")

    try:
        await client.lint_workflow(namespace, workflow)
    except ArgoAPIError as e:
        if e.status_code is not None and 400 <= e.status_code < 500:
            logger.info(f"Workflow manifest {name} failed lint: {e}")
            return LintWorkflowResponse(valid=False, name=name, namespace=namespace, errors=[str(e)])
        logger.error(f"Failed to lint workflow: {e}")
        return LintWorkflowResponse(valid=False, name=name, namespace=namespace, error=tool_error(e, "lint workflow"))
    except Exception as e:
        logger.error(f"Failed to lint workflow: {e}")
        return LintWorkflowResponse(valid=False, name=name, namespace=namespace, error=tool_error(e, "lint workflow"))

    return LintWorkflowResponse(valid=True, name=name, namespace=namespace)
