"""Dataclass models for Argo server MCP tool output schemas."""

from dataclasses import dataclass, field
from typing import Any

# Every response carries an optional error object of the form
# {"code": "INVALID_INPUT" | "NOT_FOUND" | "OPERATION_FAILED", "message": str}.


@dataclass
class WorkflowSummary:
    """One row of list_workflows output."""

    name: str
    namespace: str
    phase: str
    created_at: str | None = None
    finished_at: str | None = None
    message: str | None = None


@dataclass
class ListWorkflowsResponse:
    """Response schema for list_workflows tool."""

    workflows: list[WorkflowSummary] = field(default_factory=list)
    total: int = 0
    error: dict[str, str] | None = None


@dataclass
class NodeSummary:
    """Count of workflow nodes per phase."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    running: int = 0
    pending: int = 0
    skipped: int = 0
    error: int = 0
    omitted: int = 0


@dataclass
class ParameterInfo:
    """A named parameter value."""

    name: str
    value: str | None = None


@dataclass
class GetWorkflowResponse:
    """Response schema for get_workflow tool."""

    name: str
    namespace: str
    uid: str | None = None
    phase: str | None = None
    message: str | None = None
    started_at: str | None = None
    finished_at: str | None = None
    duration: str | None = None
    progress: str | None = None
    parameters: list[ParameterInfo] = field(default_factory=list)
    node_summary: NodeSummary | None = None
    error: dict[str, str] | None = None


@dataclass
class ArtifactInfo:
    """A named artifact with its provenance, if known."""

    name: str
    source: str | None = None


@dataclass
class GetWorkflowNodeResponse:
    """Response schema for get_workflow_node tool."""

    workflow_name: str
    namespace: str
    id: str | None = None
    name: str | None = None
    display_name: str | None = None
    type: str | None = None
    template_name: str | None = None
    phase: str | None = None
    message: str | None = None
    started_at: str | None = None
    finished_at: str | None = None
    duration: str | None = None
    progress: str | None = None
    boundary_id: str | None = None
    pod_ip: str | None = None
    host_node_name: str | None = None
    exit_code: str | None = None
    children: list[str] = field(default_factory=list)
    input_parameters: list[ParameterInfo] = field(default_factory=list)
    input_artifacts: list[ArtifactInfo] = field(default_factory=list)
    output_parameters: list[ParameterInfo] = field(default_factory=list)
    output_artifacts: list[ArtifactInfo] = field(default_factory=list)
    error: dict[str, str] | None = None


@dataclass
class WorkflowActionResponse:
    """Response schema for tools that create or transition a workflow.

    Shared by submit_workflow, retry_workflow, resubmit_workflow,
    suspend_workflow, resume_workflow, stop_workflow and terminate_workflow.
    """

    name: str
    namespace: str
    uid: str | None = None
    phase: str | None = None
    message: str | None = None
    error: dict[str, str] | None = None


@dataclass
class DeleteWorkflowResponse:
    """Response schema for delete_workflow tool."""

    name: str
    namespace: str
    message: str | None = None
    error: dict[str, str] | None = None


@dataclass
class LogEntryInfo:
    """One log line and the pod that produced it."""

    content: str
    pod_name: str | None = None


@dataclass
class LogsWorkflowResponse:
    """Response schema for logs_workflow tool."""

    name: str
    namespace: str
    logs: list[LogEntryInfo] = field(default_factory=list)
    truncated: bool = False
    message: str | None = None
    error: dict[str, str] | None = None


@dataclass
class LintWorkflowResponse:
    """Response schema for lint_workflow tool."""

    valid: bool
    name: str | None = None
    namespace: str | None = None
    errors: list[str] = field(default_factory=list)
    error: dict[str, str] | None = None


@dataclass
class WaitWorkflowResponse:
    """Response schema for wait_workflow tool."""

    name: str
    namespace: str
    phase: str | None = None
    message: str | None = None
    started_at: str | None = None
    finished_at: str | None = None
    duration: str | None = None
    progress: str | None = None
    timed_out: bool = False
    error: dict[str, str] | None = None


@dataclass
class DiagnoseWorkflowResponse:
    """Response schema for diagnose_workflow tool."""

    workflow: str
    namespace: str | None = None
    description: str | None = None
    report: str | None = None
    root_causes: list[str] = field(default_factory=list)
    failed_nodes: list[str] = field(default_factory=list)
    error: dict[str, str] | None = None


@dataclass
class HealthCheckResponse:
    """Response schema for health_check tool."""

    status: str  # "healthy" | "unhealthy"
    components: dict[str, Any] = field(default_factory=dict)
    timestamp: str | None = None
    error: dict[str, str] | None = None
