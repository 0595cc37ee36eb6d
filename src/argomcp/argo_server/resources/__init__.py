"""Argo Workflows reference documentation exposed as MCP resources."""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DOCS_DIR = Path(__file__).parent / "docs"
MIME_TYPE = "text/markdown"


@dataclass(frozen=True)
class ResourceDefinition:
    """One documentation resource and the markdown file that backs it."""

    uri: str
    name: str
    title: str
    description: str
    doc_file: str


RESOURCE_DEFINITIONS: tuple[ResourceDefinition, ...] = (
    # Schemas
    ResourceDefinition(
        uri="argo://schemas/workflow",
        name="workflow-schema",
        title="Argo Workflow CRD Schema",
        description="Complete schema documentation for the Workflow custom resource definition",
        doc_file="workflow_schema.md",
    ),
    # Template types
    ResourceDefinition(
        uri="argo://docs/template-types",
        name="template-types-overview",
        title="Argo Workflows Template Types Overview",
        description="Documentation for the Argo Workflows Template Types Overview",
        doc_file="template_types_overview.md",
    ),
    ResourceDefinition(
        uri="argo://docs/template-types/container",
        name="template-types-container",
        title="Container Template Type",
        description="Documentation for the Container Template Type",
        doc_file="template_types_container.md",
    ),
    ResourceDefinition(
        uri="argo://docs/template-types/script",
        name="template-types-script",
        title="Script Template Type",
        description="Documentation for the Script Template Type",
        doc_file="template_types_script.md",
    ),
    ResourceDefinition(
        uri="argo://docs/template-types/dag",
        name="template-types-dag",
        title="DAG Template Type",
        description="Documentation for the DAG Template Type",
        doc_file="template_types_dag.md",
    ),
    ResourceDefinition(
        uri="argo://docs/template-types/steps",
        name="template-types-steps",
        title="Steps Template Type",
        description="Documentation for the Steps Template Type",
        doc_file="template_types_steps.md",
    ),
    ResourceDefinition(
        uri="argo://docs/template-types/suspend",
        name="template-types-suspend",
        title="Suspend Template Type",
        description="Documentation for the Suspend Template Type",
        doc_file="template_types_suspend.md",
    ),
    ResourceDefinition(
        uri="argo://docs/template-types/resource",
        name="template-types-resource",
        title="Resource Template Type",
        description="Documentation for the Resource Template Type",
        doc_file="template_types_resource.md",
    ),
    ResourceDefinition(
        uri="argo://docs/template-types/http",
        name="template-types-http",
        title="HTTP Template Type",
        description="Documentation for the HTTP Template Type",
        doc_file="template_types_http.md",
    ),
    # Examples
    ResourceDefinition(
        uri="argo://examples/hello-world",
        name="examples-hello-world",
        title="Hello World Workflow Example",
        description="Simplest workflow example with a single container template",
        doc_file="examples_hello_world.md",
    ),
    ResourceDefinition(
        uri="argo://examples/multi-step",
        name="examples-multi-step",
        title="Multi-Step Workflow Example",
        description="Sequential steps with data passing between steps",
        doc_file="examples_multi_step.md",
    ),
    ResourceDefinition(
        uri="argo://examples/dag-diamond",
        name="examples-dag-diamond",
        title="DAG Diamond Pattern Example",
        description="Classic diamond DAG with fan-out and fan-in pattern",
        doc_file="examples_dag_diamond.md",
    ),
    ResourceDefinition(
        uri="argo://examples/parameters",
        name="examples-parameters",
        title="Parameters Example",
        description="Input parameters, default values, and parameter passing patterns",
        doc_file="examples_parameters.md",
    ),
    ResourceDefinition(
        uri="argo://examples/artifacts",
        name="examples-artifacts",
        title="Artifacts Example",
        description="Artifact passing between steps with S3/GCS configuration",
        doc_file="examples_artifacts.md",
    ),
    ResourceDefinition(
        uri="argo://examples/loops",
        name="examples-loops",
        title="Loops Example",
        description="withItems, withParam, and withSequence for iteration patterns",
        doc_file="examples_loops.md",
    ),
    ResourceDefinition(
        uri="argo://examples/conditionals",
        name="examples-conditionals",
        title="Conditionals Example",
        description="Conditional step execution using when expressions",
        doc_file="examples_conditionals.md",
    ),
    ResourceDefinition(
        uri="argo://examples/retries",
        name="examples-retries",
        title="Retries Example",
        description="Retry strategies and retryPolicy configuration",
        doc_file="examples_retries.md",
    ),
    ResourceDefinition(
        uri="argo://examples/timeout-limits",
        name="examples-timeout-limits",
        title="Timeout and Limits Example",
        description="activeDeadlineSeconds and template-level timeout configurations",
        doc_file="examples_timeout_limits.md",
    ),
    ResourceDefinition(
        uri="argo://examples/resource-management",
        name="examples-resource-management",
        title="Resource Management Example",
        description="CPU/memory requests and limits, pod priority, and resource optimization",
        doc_file="examples_resource_management.md",
    ),
    ResourceDefinition(
        uri="argo://examples/volumes",
        name="examples-volumes",
        title="Volumes Example",
        description="Volume mounts including PVC, ConfigMap, Secret, and shared volumes",
        doc_file="examples_volumes.md",
    ),
    ResourceDefinition(
        uri="argo://examples/exit-handlers",
        name="examples-exit-handlers",
        title="Exit Handlers Example",
        description="OnExit handlers for cleanup and status-specific actions",
        doc_file="examples_exit_handlers.md",
    ),
)


def read_doc(filename: str) -> str:
    """Read a packaged documentation file.

    Raises:
        FileNotFoundError: If no such document is packaged
    """
    path = DOCS_DIR / filename
    if path.parent != DOCS_DIR or not path.is_file():
        raise FileNotFoundError(f"failed to read documentation file {filename}")
    return path.read_text(encoding="utf-8")


def _reader(definition: ResourceDefinition):
    def read() -> str:
        return read_doc(definition.doc_file)

    return read


def register_argo_resources(mcp) -> None:
    """Register every documentation resource with the MCP server."""
    for definition in RESOURCE_DEFINITIONS:
        mcp.resource(
            definition.uri,
            name=definition.name,
            description=definition.description,
            mime_type=MIME_TYPE,
        )(_reader(definition))
    logger.debug(f"Registered {len(RESOURCE_DEFINITIONS)} documentation resources")


__all__ = ["RESOURCE_DEFINITIONS", "ResourceDefinition", "read_doc", "register_argo_resources"]
