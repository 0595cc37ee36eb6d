"""Shared argument handling and error payloads for Argo tools."""

from typing import Any

from ..argo_client import ArgoClient, ArgoNotFoundError


def resolve_namespace(namespace: str | None, client: ArgoClient) -> str:
    """Return the trimmed namespace, or the client's default when blank."""
    namespace = (namespace or "").strip()
    return namespace or client.default_namespace


def validate_name(name: str | None, what: str = "workflow name") -> str:
    """Trim a resource name, raising ValueError if it is empty."""
    name = (name or "").strip()
    if not name:
        raise ValueError(f"{what} cannot be empty")
    return name


def tool_error(exc: Exception, action: str) -> dict[str, str]:
    """Map an exception raised inside a tool to the structured error payload."""
    if isinstance(exc, ArgoNotFoundError):
        return {"code": "NOT_FOUND", "message": f"Failed to {action}: {exc}"}
    if isinstance(exc, ValueError):
        return {"code": "INVALID_INPUT", "message": str(exc)}
    # ArgoClientError and anything unexpected
    return {"code": "OPERATION_FAILED", "message": f"Failed to {action}: {exc}"}


def parse_parameter_overrides(parameters: list[str] | None) -> list[tuple[str, str]]:
    """Split ``key=value`` overrides, rejecting malformed entries."""
    overrides = []
    for param in parameters or []:
        key, sep, value = param.partition("=")
        if not sep:
            raise ValueError(f"invalid parameter format {param!r}, expected key=value")
        key = key.strip()
        if not key:
            raise ValueError(f"invalid parameter format {param!r}, key cannot be empty")
        overrides.append((key, value))
    return overrides


def workflow_identity(data: dict[str, Any]) -> tuple[str, str, str]:
    """Return (name, namespace, uid) from an Argo Workflow object."""
    metadata = data.get("metadata") or {}
    return metadata.get("name") or "", metadata.get("namespace") or "", metadata.get("uid") or ""
