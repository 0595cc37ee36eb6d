"""Dataclass models for workflow failure diagnosis."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..models.execution_models import (
    ExecutionNode,
    InputBinding,
    NodePhase,
    NodeType,
    OutputBinding,
    Parameter,
)


class DiagnosisError(Exception):
    """Raised when diagnostics for a workflow cannot be gathered."""

    pass


@dataclass(frozen=True)
class ErrorPattern:
    """A recognised failure signature and what to do about it."""

    label: str
    suggestion: str


@dataclass
class FailureRecord:
    """A failed or errored node, annotated as the diagnosis proceeds.

    The analyzer sets ``is_root_cause``, the evidence collector sets ``logs``
    and the classifier sets ``error_pattern``.
    """

    id: str
    name: str
    display_name: str = ""
    template_name: str = ""
    type: NodeType = NodeType.UNKNOWN
    phase: NodePhase = NodePhase.FAILED
    message: str = ""
    started_at: datetime | None = None
    finished_at: datetime | None = None
    boundary_id: str = ""
    children: list[str] = field(default_factory=list)
    inputs: list[InputBinding] = field(default_factory=list)
    outputs: list[OutputBinding] = field(default_factory=list)
    exit_code: str | None = None
    is_root_cause: bool = False
    logs: str | None = None
    error_pattern: ErrorPattern | None = None

    @classmethod
    def from_node(cls, node: ExecutionNode) -> "FailureRecord":
        return cls(
            id=node.id,
            name=node.name,
            display_name=node.display_name,
            template_name=node.template_name,
            type=node.type,
            phase=node.phase,
            message=node.message,
            started_at=node.started_at,
            finished_at=node.finished_at,
            boundary_id=node.boundary_id,
            children=list(node.children),
            inputs=list(node.inputs),
            outputs=list(node.outputs),
            exit_code=node.exit_code,
        )

    @property
    def label(self) -> str:
        return self.display_name or self.name


@dataclass
class FailureAnalysis:
    """Failed nodes in start order and the subset judged to be root causes."""

    failed_nodes: list[FailureRecord] = field(default_factory=list)
    root_causes: list[FailureRecord] = field(default_factory=list)


@dataclass
class Diagnosis:
    """Everything the report builder needs for one workflow."""

    workflow_name: str
    namespace: str
    phase: str = ""
    message: str = ""
    started_at: datetime | None = None
    finished_at: datetime | None = None
    duration: timedelta | None = None
    parameters: list[Parameter] = field(default_factory=list)
    failed_nodes: list[FailureRecord] = field(default_factory=list)
    root_causes: list[FailureRecord] = field(default_factory=list)


@dataclass
class DiagnosisReport:
    """The rendered diagnosis and a one-line label describing it."""

    description: str
    text: str
    root_causes: list[FailureRecord] = field(default_factory=list)
    failed_nodes: list[FailureRecord] = field(default_factory=list)
