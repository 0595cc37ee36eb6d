"""Implementations of the workflow lifecycle tools.

retry, resubmit, suspend, resume, stop and terminate all map onto a single
``PUT /api/v1/workflows/{namespace}/{name}/{action}`` call and return the
updated workflow's identity and phase.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..argo_client import ArgoClient
from ..models.workflow_models import WorkflowActionResponse
from ._helpers import parse_parameter_overrides, resolve_namespace, tool_error, validate_name, workflow_identity

logger = logging.getLogger(__name__)


async def _run_action(
    action: str,
    name: str,
    namespace: str,
    call: Callable[[str, str], Awaitable[dict[str, Any]]],
) -> WorkflowActionResponse:
    logger.info(f"Running {action} on workflow {namespace}/{name}")
    try:
        name = validate_name(name)
        result = await call(namespace, name)
        new_name, new_ns, uid = workflow_identity(result)
        phase = (result.get("status") or {}).get("phase") or None
        new_name = new_name or name
        logger.info(f"Workflow {namespace}/{name} {action} accepted")
        return WorkflowActionResponse(
            name=new_name,
            namespace=new_ns or namespace,
            uid=uid or None,
            phase=phase,
            message=f"Workflow {new_name} {action} requested",
        )
    except Exception as e:
        logger.error(f"Failed to {action} workflow {namespace}/{name}: {e}")
        return WorkflowActionResponse(name=name, namespace=namespace, error=tool_error(e, f"{action} workflow"))


def _check_parameters(parameters: list[str] | None) -> list[str] | None:
    """Validate ``key=value`` overrides and return them normalized."""
    overrides = parse_parameter_overrides(parameters)
    return [f"{key}={value}" for key, value in overrides] or None


async def retry_workflow_impl(
    client: ArgoClient,
    name: str,
    namespace: str | None = None,
    node_field_selector: str | None = None,
    parameters: list[str] | None = None,
    restart_successful: bool = False,
) -> WorkflowActionResponse:
    """Retry a failed or errored workflow from its failed nodes."""
    namespace = resolve_namespace(namespace, client)
    try:
        overrides = _check_parameters(parameters)
    except ValueError as e:
        return WorkflowActionResponse(name=name, namespace=namespace, error=tool_error(e, "retry workflow"))

    return await _run_action(
        "retry",
        name,
        namespace,
        lambda ns, n: client.retry_workflow(
            ns,
            n,
            node_field_selector=node_field_selector,
            parameters=overrides,
            restart_successful=restart_successful,
        ),
    )


async def resubmit_workflow_impl(
    client: ArgoClient,
    name: str,
    namespace: str | None = None,
    memoized: bool = False,
    parameters: list[str] | None = None,
) -> WorkflowActionResponse:
    """Create a new workflow from an existing one's spec."""
    namespace = resolve_namespace(namespace, client)
    try:
        overrides = _check_parameters(parameters)
    except ValueError as e:
        return WorkflowActionResponse(name=name, namespace=namespace, error=tool_error(e, "resubmit workflow"))

    return await _run_action(
        "resubmit",
        name,
        namespace,
        lambda ns, n: client.resubmit_workflow(ns, n, memoized=memoized, parameters=overrides),
    )


async def suspend_workflow_impl(client: ArgoClient, name: str, namespace: str | None = None) -> WorkflowActionResponse:
    namespace = resolve_namespace(namespace, client)
    return await _run_action("suspend", name, namespace, client.suspend_workflow)


async def resume_workflow_impl(
    client: ArgoClient, name: str, namespace: str | None = None, node_field_selector: str | None = None
) -> WorkflowActionResponse:
    namespace = resolve_namespace(namespace, client)
    return await _run_action(
        "resume",
        name,
        namespace,
        lambda ns, n: client.resume_workflow(ns, n, node_field_selector=node_field_selector),
    )


async def stop_workflow_impl(
    client: ArgoClient,
    name: str,
    namespace: str | None = None,
    node_field_selector: str | None = None,
    message: str | None = None,
) -> WorkflowActionResponse:
    """Stop a workflow, letting exit handlers run."""
    namespace = resolve_namespace(namespace, client)
    return await _run_action(
        "stop",
        name,
        namespace,
        lambda ns, n: client.stop_workflow(ns, n, node_field_selector=node_field_selector, message=message),
    )


async def terminate_workflow_impl(
    client: ArgoClient, name: str, namespace: str | None = None
) -> WorkflowActionResponse:
    """Terminate a workflow immediately; exit handlers do not run."""
    namespace = resolve_namespace(namespace, client)
    return await _run_action("terminate", name, namespace, client.terminate_workflow)
