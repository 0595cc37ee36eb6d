"""Implementation of logs_workflow MCP tool."""

import logging

from ..argo_client import ArgoClient
from ..models.workflow_models import LogEntryInfo, LogsWorkflowResponse
from ._helpers import resolve_namespace, tool_error, validate_name

logger = logging.getLogger(__name__)

DEFAULT_TAIL_LINES = 100
MAX_LOG_OUTPUT_BYTES = 1024 * 1024


async def logs_workflow_impl(
    client: ArgoClient,
    name: str,
    namespace: str | None = None,
    pod_name: str | None = None,
    container: str | None = None,
    tail_lines: int | None = None,
    grep: str | None = None,
) -> LogsWorkflowResponse:
    """Collect log lines for a workflow or one of its pods.

    Lines are read from the server's log stream until the output reaches
    MAX_LOG_OUTPUT_BYTES; the remainder is dropped and ``truncated`` is set.

    Args:
        client: Argo Server client
        name: Workflow name
        namespace: Namespace (client default if omitted)
        pod_name: Restrict to one pod (node name or pod name)
        container: Container to read, "main" when omitted
        tail_lines: Lines from the end of each pod's log (default 100)
        grep: Only return lines matching this pattern

    Returns:
        LogsWorkflowResponse with the collected lines
    """
    namespace = resolve_namespace(namespace, client)
    logger.info(f"Fetching logs for workflow {namespace}/{name}")

    try:
        name = validate_name(name)
        if tail_lines is not None and tail_lines < 0:
            raise ValueError("tail_lines cannot be negative")
        tail = tail_lines or DEFAULT_TAIL_LINES

        logs: list[LogEntryInfo] = []
        total = 0
        truncated = False
        async for entry in client.stream_workflow_logs(
            namespace,
            name,
            pod_name=(pod_name or "").strip() or None,
            container=(container or "").strip() or "main",
            tail_lines=tail,
            grep=grep or None,
        ):
            size = len(entry.content.encode("utf-8"))
            if total + size > MAX_LOG_OUTPUT_BYTES:
                truncated = True
                break
            total += size
            logs.append(LogEntryInfo(content=entry.content, pod_name=entry.pod_name or None))

        message = None
        if truncated:
            message = f"Log output truncated at {MAX_LOG_OUTPUT_BYTES} bytes; use tail_lines, pod_name or grep to narrow it"
        elif not logs:
            message = "No logs found"

        logger.info(f"Fetched {len(logs)} log line(s) for workflow {namespace}/{name}")
        return LogsWorkflowResponse(name=name, namespace=namespace, logs=logs, truncated=truncated, message=message)

    except Exception as e:
        logger.error(f"Failed to fetch logs for workflow {namespace}/{name}: {e}")
        return LogsWorkflowResponse(name=name, namespace=namespace, error=tool_error(e, "get workflow logs"))
