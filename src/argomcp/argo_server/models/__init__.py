"""Argo server models package."""

from .execution_models import (
    ExecutionNode,
    InputBinding,
    NodePhase,
    NodeType,
    OutputBinding,
    Parameter,
    WorkflowExecution,
    WorkflowPhase,
)
from .workflow_models import (
    DeleteWorkflowResponse,
    DiagnoseWorkflowResponse,
    GetWorkflowNodeResponse,
    GetWorkflowResponse,
    HealthCheckResponse,
    LintWorkflowResponse,
    ListWorkflowsResponse,
    LogsWorkflowResponse,
    WaitWorkflowResponse,
    WorkflowActionResponse,
)

__all__ = [
    "ExecutionNode",
    "InputBinding",
    "NodePhase",
    "NodeType",
    "OutputBinding",
    "Parameter",
    "WorkflowExecution",
    "WorkflowPhase",
    "DeleteWorkflowResponse",
    "DiagnoseWorkflowResponse",
    "GetWorkflowNodeResponse",
    "GetWorkflowResponse",
    "HealthCheckResponse",
    "LintWorkflowResponse",
    "ListWorkflowsResponse",
    "LogsWorkflowResponse",
    "WaitWorkflowResponse",
    "WorkflowActionResponse",
]
