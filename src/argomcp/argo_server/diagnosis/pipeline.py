"""End-to-end failure diagnosis for one workflow run."""

import logging
from collections.abc import AsyncIterator
from datetime import datetime, timezone

from ..argo_client import ArgoClient, ArgoClientError
from ..models.execution_models import WorkflowExecution
from .analyzer import analyze_failures
from .classifier import classify_root_causes
from .collector import DEFAULT_LOG_TAIL_LINES, DEFAULT_MAX_LOG_BYTES, LOG_CONTAINER, EvidenceCollector
from .models import Diagnosis, DiagnosisError, DiagnosisReport
from .report import build_report

logger = logging.getLogger(__name__)


def client_log_source(client: ArgoClient):
    """Adapt ArgoClient log streaming to the collector's LogSource shape."""

    async def source(namespace: str, workflow_name: str, node_name: str, tail_lines: int) -> AsyncIterator[str]:
        # Argo names a node's pod after the node.
        async for entry in client.stream_workflow_logs(
            namespace, workflow_name, pod_name=node_name, container=LOG_CONTAINER, tail_lines=tail_lines
        ):
            yield entry.content

    return source


async def diagnose_workflow(
    client: ArgoClient,
    workflow_name: str,
    namespace: str | None = None,
    *,
    tail_lines: int = DEFAULT_LOG_TAIL_LINES,
    max_log_bytes: int = DEFAULT_MAX_LOG_BYTES,
    now: datetime | None = None,
) -> DiagnosisReport:
    """Diagnose why a workflow failed.

    Fetches the workflow once, finds its root-cause failures, collects bounded
    log evidence for them, matches known error patterns and renders the report.

    Raises:
        ValueError: If workflow_name is blank
        DiagnosisError: If the workflow cannot be fetched
    """
    workflow_name = (workflow_name or "").strip()
    if not workflow_name:
        raise ValueError("workflow name is required")
    namespace = (namespace or "").strip() or client.default_namespace

    logger.info(f"Diagnosing workflow {namespace}/{workflow_name}")
    try:
        data = await client.get_workflow(namespace, workflow_name)
    except ArgoClientError as e:
        raise DiagnosisError(f"failed to gather diagnostics: failed to get workflow: {e}") from e

    execution = WorkflowExecution.from_dict(data)
    analysis = analyze_failures(execution.nodes)

    collector = EvidenceCollector(client_log_source(client), tail_lines=tail_lines, max_bytes=max_log_bytes)
    collected = await collector.collect(namespace, workflow_name, analysis.root_causes)
    logger.debug(f"Collected {collected} bytes of log evidence for {namespace}/{workflow_name}")

    classify_root_causes(analysis.root_causes)

    duration = None
    if execution.started_at is not None:
        end = execution.finished_at or now or datetime.now(timezone.utc)
        duration = end - execution.started_at

    diagnosis = Diagnosis(
        workflow_name=execution.name or workflow_name,
        namespace=execution.namespace or namespace,
        phase=execution.phase.value,
        message=execution.message,
        started_at=execution.started_at,
        finished_at=execution.finished_at,
        duration=duration,
        parameters=execution.parameters,
        failed_nodes=analysis.failed_nodes,
        root_causes=analysis.root_causes,
    )

    report = DiagnosisReport(
        description=f"Diagnosis for failed workflow {namespace}/{workflow_name}",
        text=build_report(diagnosis),
        root_causes=analysis.root_causes,
        failed_nodes=analysis.failed_nodes,
    )
    logger.info(f"Diagnosis complete for {namespace}/{workflow_name}")
    return report
