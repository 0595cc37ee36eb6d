"""Dataclass models for Argo workflow execution records.

These mirror the parts of the Argo ``Workflow`` status that the tools and the
failure diagnosis read. Each model has a ``from_dict`` constructor that accepts
the JSON returned by the Argo Server REST API and tolerates missing fields.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ...utils.formatting import parse_timestamp


class WorkflowPhase(Enum):
    """Overall phase of a workflow run."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    ERROR = "Error"
    UNKNOWN = ""

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class NodePhase(Enum):
    """Phase of a single execution node."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    SKIPPED = "Skipped"
    FAILED = "Failed"
    ERROR = "Error"
    OMITTED = "Omitted"
    UNKNOWN = ""

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN

    @property
    def is_failure(self) -> bool:
        return self in (NodePhase.FAILED, NodePhase.ERROR)


class NodeType(Enum):
    """Kind of execution node in the workflow graph."""

    POD = "Pod"
    CONTAINER = "Container"
    STEPS = "Steps"
    STEP_GROUP = "StepGroup"
    DAG = "DAG"
    TASK_GROUP = "TaskGroup"
    RETRY = "Retry"
    SKIPPED = "Skipped"
    SUSPEND = "Suspend"
    HTTP = "HTTP"
    PLUGIN = "Plugin"
    UNKNOWN = ""

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN

    @property
    def is_leaf(self) -> bool:
        """Leaf kinds are the nodes where work actually runs."""
        return self in (NodeType.POD, NodeType.CONTAINER)


@dataclass
class Parameter:
    """A workflow-level input parameter."""

    name: str
    value: str = ""


@dataclass
class InputBinding:
    """A parameter or artifact consumed by a node."""

    name: str
    value: str = ""
    type: str = "parameter"  # "parameter" | "artifact"
    source: str = ""  # Provenance, e.g. "from: {{steps.gen.outputs.artifacts.data}}"


@dataclass
class OutputBinding:
    """A parameter or artifact produced by a node."""

    name: str
    value: str = ""
    type: str = "parameter"  # "parameter" | "artifact"


def _string_value(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def describe_value_from(value_from: dict[str, Any] | None) -> str:
    """Describe where a parameter's value came from."""
    if not value_from:
        return ""

    parts = []
    for key, label in (
        ("path", "path"),
        ("jsonPath", "jsonpath"),
        ("jqFilter", "jq"),
        ("parameter", "parameter"),
        ("expression", "expression"),
    ):
        if value_from.get(key):
            parts.append(f"{label}: {value_from[key]}")
    if value_from.get("default") is not None:
        parts.append(f"default: {_string_value(value_from['default'])}")

    return ", ".join(parts)


def describe_artifact_source(artifact: dict[str, Any]) -> str:
    """Describe where an artifact was loaded from."""
    if artifact.get("from"):
        return f"from: {artifact['from']}"
    if artifact.get("s3"):
        s3 = artifact["s3"]
        return f"s3: {s3.get('bucket', '')}/{s3.get('key', '')}"
    if artifact.get("gcs"):
        gcs = artifact["gcs"]
        return f"gcs: {gcs.get('bucket', '')}/{gcs.get('key', '')}"
    if artifact.get("http"):
        return f"http: {artifact['http'].get('url', '')}"
    if artifact.get("git"):
        return f"git: {artifact['git'].get('repo', '')}"
    return ""


def _parse_inputs(inputs: dict[str, Any] | None) -> list[InputBinding]:
    if not inputs:
        return []

    bindings = [
        InputBinding(
            name=p.get("name") or "",
            value=_string_value(p.get("value")),
            type="parameter",
            source=describe_value_from(p.get("valueFrom")),
        )
        for p in inputs.get("parameters") or []
    ]
    bindings.extend(
        InputBinding(name=a.get("name") or "", type="artifact", source=describe_artifact_source(a))
        for a in inputs.get("artifacts") or []
    )
    return bindings


def _parse_outputs(outputs: dict[str, Any] | None) -> list[OutputBinding]:
    if not outputs:
        return []

    bindings = [
        OutputBinding(name=p.get("name") or "", value=_string_value(p.get("value")), type="parameter")
        for p in outputs.get("parameters") or []
    ]
    bindings.extend(OutputBinding(name=a.get("name") or "", type="artifact") for a in outputs.get("artifacts") or [])
    return bindings


@dataclass
class ExecutionNode:
    """One step or step group in a workflow's execution graph."""

    id: str
    name: str = ""
    display_name: str = ""
    template_name: str = ""
    type: NodeType = NodeType.UNKNOWN
    phase: NodePhase = NodePhase.UNKNOWN
    message: str = ""
    started_at: datetime | None = None
    finished_at: datetime | None = None
    boundary_id: str = ""
    children: list[str] = field(default_factory=list)
    inputs: list[InputBinding] = field(default_factory=list)
    outputs: list[OutputBinding] = field(default_factory=list)
    exit_code: str | None = None
    progress: str = ""
    pod_ip: str = ""
    host_node_name: str = ""

    @classmethod
    def from_dict(cls, node_id: str, data: dict[str, Any]) -> "ExecutionNode":
        """Build a node from an entry of ``status.nodes``."""
        outputs = data.get("outputs") or {}
        exit_code = outputs.get("exitCode")
        return cls(
            id=data.get("id") or node_id,
            name=data.get("name") or "",
            display_name=data.get("displayName") or "",
            template_name=data.get("templateName") or "",
            type=NodeType(data.get("type") or ""),
            phase=NodePhase(data.get("phase") or ""),
            message=data.get("message") or "",
            started_at=parse_timestamp(data.get("startedAt")),
            finished_at=parse_timestamp(data.get("finishedAt")),
            boundary_id=data.get("boundaryID") or "",
            children=list(data.get("children") or []),
            inputs=_parse_inputs(data.get("inputs")),
            outputs=_parse_outputs(outputs),
            exit_code=_string_value(exit_code) if exit_code is not None else None,
            progress=data.get("progress") or "",
            pod_ip=data.get("podIP") or "",
            host_node_name=data.get("hostNodeName") or "",
        )


@dataclass
class WorkflowExecution:
    """A snapshot of one workflow run as reported by the Argo Server."""

    name: str
    namespace: str
    uid: str = ""
    phase: WorkflowPhase = WorkflowPhase.UNKNOWN
    message: str = ""
    started_at: datetime | None = None
    finished_at: datetime | None = None
    created_at: datetime | None = None
    progress: str = ""
    nodes: dict[str, ExecutionNode] = field(default_factory=dict)
    parameters: list[Parameter] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkflowExecution":
        """Build an execution snapshot from an Argo ``Workflow`` object."""
        metadata = data.get("metadata") or {}
        status = data.get("status") or {}
        arguments = (data.get("spec") or {}).get("arguments") or {}

        nodes = {
            node_id: ExecutionNode.from_dict(node_id, node_data or {})
            for node_id, node_data in (status.get("nodes") or {}).items()
        }
        parameters = [
            Parameter(name=p.get("name") or "", value=_string_value(p.get("value")))
            for p in arguments.get("parameters") or []
        ]

        return cls(
            name=metadata.get("name") or "",
            namespace=metadata.get("namespace") or "",
            uid=metadata.get("uid") or "",
            phase=WorkflowPhase(status.get("phase") or ""),
            message=status.get("message") or "",
            started_at=parse_timestamp(status.get("startedAt")),
            finished_at=parse_timestamp(status.get("finishedAt")),
            created_at=parse_timestamp(metadata.get("creationTimestamp")),
            progress=status.get("progress") or "",
            nodes=nodes,
            parameters=parameters,
        )
