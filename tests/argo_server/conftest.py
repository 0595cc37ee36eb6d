"""Shared builders for Argo workflow test data."""

from typing import Any

import httpx
import pytest

from argomcp.argo_server.argo_client import ArgoClient
from argomcp.argo_server.config import ArgoServerConfig


def _node(
    node_id: str,
    node_type: str = "Pod",
    phase: str = "Succeeded",
    started: str | None = None,
    finished: str | None = None,
    children: list[str] | None = None,
    boundary: str | None = None,
    exit_code: str | None = None,
    message: str | None = "",
    display_name: str | None = None,
    template: str = "",
    **extra: Any,
) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": node_id,
        "name": f"wf.{node_id}",
        "displayName": display_name or node_id,
        "type": node_type,
        "phase": phase,
        "templateName": template,
        "message": message,
    }
    if started:
        data["startedAt"] = started
    if finished:
        data["finishedAt"] = finished
    if children:
        data["children"] = children
    if boundary:
        data["boundaryID"] = boundary
    if exit_code is not None:
        data.setdefault("outputs", {})["exitCode"] = exit_code
    data.update(extra)
    return data


def _workflow(
    nodes: list[dict[str, Any]] | None = None,
    name: str = "wf",
    namespace: str = "argo",
    phase: str = "Failed",
    parameters: list[dict[str, Any]] | None = None,
    started: str | None = "2024-01-01T10:00:00Z",
    finished: str | None = "2024-01-01T10:05:30Z",
    message: str = "",
) -> dict[str, Any]:
    status: dict[str, Any] = {"phase": phase, "message": message}
    if started:
        status["startedAt"] = started
    if finished:
        status["finishedAt"] = finished
    if nodes:
        status["nodes"] = {node["id"]: node for node in nodes}
    spec: dict[str, Any] = {"entrypoint": "main"}
    if parameters:
        spec["arguments"] = {"parameters": parameters}
    return {
        "metadata": {"name": name, "namespace": namespace, "uid": f"{name}-uid"},
        "spec": spec,
        "status": status,
    }


@pytest.fixture
def make_node():
    """Factory for ``status.nodes`` entries."""
    return _node


@pytest.fixture
def make_workflow():
    """Factory for Argo Workflow objects."""
    return _workflow


@pytest.fixture
def argo_config():
    return ArgoServerConfig(argo_server="argo.test:2746", argo_token="secret", namespace="argo")


@pytest.fixture
def mock_client_factory(argo_config):
    """Build an ArgoClient whose HTTP traffic goes to a handler function."""

    def factory(handler) -> ArgoClient:
        return ArgoClient(argo_config, transport=httpx.MockTransport(handler))

    return factory
