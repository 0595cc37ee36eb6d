"""Implementation of wait_workflow MCP tool."""

import asyncio
import logging

from ...utils.formatting import format_timestamp, parse_duration
from ..argo_client import ArgoClient
from ..models.execution_models import WorkflowExecution, WorkflowPhase
from ..models.workflow_models import WaitWorkflowResponse
from ._helpers import resolve_namespace, tool_error, validate_name
from .get_workflow import elapsed

logger = logging.getLogger(__name__)

WAIT_POLL_INTERVAL_SECONDS = 2.0

COMPLETED_PHASES = frozenset({WorkflowPhase.SUCCEEDED, WorkflowPhase.FAILED, WorkflowPhase.ERROR})


def parse_wait_timeout(timeout: str | None) -> float | None:
    """Convert the timeout argument to seconds; None means wait indefinitely."""
    if timeout is None or not timeout.strip():
        return None
    try:
        seconds = parse_duration(timeout).total_seconds()
    except ValueError as e:
        raise ValueError(f"invalid timeout format: {e}") from e
    if seconds <= 0:
        raise ValueError("invalid timeout: must be a positive duration")
    return seconds


async def poll_until_complete(
    client: ArgoClient,
    namespace: str,
    name: str,
    timeout_seconds: float | None,
    poll_interval: float,
) -> tuple[WorkflowExecution, bool]:
    """Fetch the workflow until it completes or the timeout passes.

    Returns:
        The last snapshot seen and whether the wait timed out
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_seconds if timeout_seconds is not None else None

    while True:
        execution = WorkflowExecution.from_dict(await client.get_workflow(namespace, name))
        if execution.phase in COMPLETED_PHASES:
            return execution, False

        delay = poll_interval
        if deadline is not None:
            remaining = deadline - loop.time()
            if remaining <= 0:
                return execution, True
            delay = min(delay, remaining)
        logger.debug(f"Workflow {namespace}/{name} is {execution.phase.value or 'Pending'}, polling again")
        await asyncio.sleep(delay)


async def wait_workflow_impl(
    client: ArgoClient,
    name: str,
    namespace: str | None = None,
    timeout: str | None = None,
    poll_interval: float = WAIT_POLL_INTERVAL_SECONDS,
) -> WaitWorkflowResponse:
    """Wait for a workflow to complete and return its final status.

    Args:
        client: Argo Server client
        name: Workflow name
        namespace: Namespace (client default if omitted)
        timeout: Maximum wait such as "5m" or "1h"; no limit if omitted
        poll_interval: Seconds between status checks

    Returns:
        WaitWorkflowResponse with the final (or last seen) phase
    """
    namespace = resolve_namespace(namespace, client)

    try:
        name = validate_name(name)
        timeout_seconds = parse_wait_timeout(timeout)
        logger.info(f"Waiting for workflow {namespace}/{name} (timeout: {timeout or 'none'})")

        execution, timed_out = await poll_until_complete(client, namespace, name, timeout_seconds, poll_interval)
    except Exception as e:
        logger.error(f"Failed to wait for workflow {namespace}/{name}: {e}")
        return WaitWorkflowResponse(name=name, namespace=namespace, error=tool_error(e, "wait for workflow"))

    phase = execution.phase.value or "Pending"
    message = execution.message or None
    if timed_out:
        note = f"Timed out after {timeout.strip()}. Last phase: {phase}"
        message = f"{message} | {note}" if message else note
        logger.warning(f"Workflow {namespace}/{name} still {phase} after {timeout.strip()}")
    else:
        logger.info(f"Workflow {namespace}/{name} completed: {phase}")

    return WaitWorkflowResponse(
        name=name,
        namespace=namespace,
        phase=phase,
        message=message,
        started_at=format_timestamp(execution.started_at) if execution.started_at else None,
        finished_at=format_timestamp(execution.finished_at) if execution.finished_at else None,
        duration=elapsed(execution.started_at, execution.finished_at),
        progress=execution.progress or None,
        timed_out=timed_out,
    )
