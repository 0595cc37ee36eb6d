"""Implementation of submit_workflow MCP tool."""

import logging
from typing import Any

import yaml

from ..argo_client import ArgoClient
from ..models.workflow_models import WorkflowActionResponse
from ._helpers import parse_parameter_overrides, tool_error, workflow_identity

logger = logging.getLogger(__name__)

MAX_MANIFEST_BYTES = 1024 * 1024


def parse_manifest(manifest: str) -> dict[str, Any]:
    """Parse a Workflow manifest from YAML or JSON text.

    Raises:
        ValueError: If the manifest is empty, too large, malformed or not a Workflow
    """
    if not manifest or not manifest.strip():
        raise ValueError("manifest cannot be empty")
    if len(manifest.encode("utf-8")) > MAX_MANIFEST_BYTES:
        raise ValueError(f"manifest exceeds maximum size of {MAX_MANIFEST_BYTES} bytes")

    try:
        workflow = yaml.safe_load(manifest)
    except yaml.YAMLError as e:
        raise ValueError(f"failed to parse manifest: {e}") from e

    if not isinstance(workflow, dict):
        raise ValueError("manifest must be a YAML or JSON object")
    kind = workflow.get("kind")
    if kind != "Workflow":
        raise ValueError(f"manifest must be a Workflow, got kind {kind!r}")
    return workflow


def apply_overrides(
    workflow: dict[str, Any],
    generate_name: str | None = None,
    labels: dict[str, str] | None = None,
    parameters: list[str] | None = None,
) -> dict[str, Any]:
    """Apply submit-time overrides to a parsed manifest in place."""
    overrides = parse_parameter_overrides(parameters)
    metadata = workflow.setdefault("metadata", {})

    if generate_name:
        metadata["generateName"] = generate_name
        metadata.pop("name", None)
    if labels:
        metadata.setdefault("labels", {}).update(labels)

    if overrides:
        arguments = workflow.setdefault("spec", {}).setdefault("arguments", {})
        existing = arguments.setdefault("parameters", [])
        for key, value in overrides:
            for param in existing:
                if param.get("name") == key:
                    param["value"] = value
                    break
            else:
                existing.append({"name": key, "value": value})
    return workflow


async def submit_workflow_impl(
    client: ArgoClient,
    manifest: str,
    namespace: str | None = None,
    generate_name: str | None = None,
    labels: dict[str, str] | None = None,
    parameters: list[str] | None = None,
) -> WorkflowActionResponse:
    """Submit a Workflow manifest to the Argo Server.

    Args:
        client: Argo Server client
        manifest: Workflow manifest as YAML or JSON
        namespace: Target namespace; falls back to the manifest's, then the default
        generate_name: Replace metadata.name with this generateName prefix
        labels: Labels merged into metadata.labels
        parameters: ``key=value`` overrides for spec.arguments.parameters

    Returns:
        WorkflowActionResponse describing the created workflow
    """
    namespace = (namespace or "").strip()
    logger.info("Submitting workflow")

    try:
        workflow = apply_overrides(parse_manifest(manifest), generate_name, labels, parameters)
        metadata = workflow["metadata"]
        if not metadata.get("name") and not metadata.get("generateName"):
            raise ValueError("manifest must set metadata.name or metadata.generateName")

        namespace = namespace or (metadata.get("namespace") or "").strip() or client.default_namespace
        metadata["namespace"] = namespace

        created = await client.create_workflow(namespace, workflow)
        name, created_ns, uid = workflow_identity(created)
        phase = (created.get("status") or {}).get("phase") or "Pending"

        logger.info(f"Submitted workflow {created_ns or namespace}/{name}")
        return WorkflowActionResponse(
            name=name,
            namespace=created_ns or namespace,
            uid=uid or None,
            phase=phase,
            message=f"Workflow {name} submitted",
        )
    except Exception as e:
        logger.error(f"Failed to submit workflow: {e}")
        return WorkflowActionResponse(
            name=generate_name or "", namespace=namespace, error=tool_error(e, "submit workflow")
        )
