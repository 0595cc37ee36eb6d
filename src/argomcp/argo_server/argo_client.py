"""Argo Server REST API client.

Thin async wrapper over the Argo Server ``/api/v1`` endpoints. Every method
performs a single request and returns the decoded JSON; failures surface as
``ArgoClientError`` subclasses.
"""

import json
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

import httpx

from .config import ArgoServerConfig, get_config

logger = logging.getLogger(__name__)


class ArgoClientError(Exception):
    """Raised when a request to the Argo Server fails."""

    pass


class ArgoNotFoundError(ArgoClientError):
    """Raised when the requested Argo resource does not exist."""

    pass


class ArgoAPIError(ArgoClientError):
    """Raised when the Argo Server rejects a request."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ArgoConnectionError(ArgoClientError):
    """Raised when the Argo Server cannot be reached."""

    pass


@dataclass
class LogEntry:
    """One line from a workflow log stream."""

    content: str
    pod_name: str = ""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or response.reason_phrase)
    return response.reason_phrase


class ArgoClient:
    """Async client for the Argo Server REST API."""

    def __init__(
        self,
        config: ArgoServerConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config or get_config()
        headers = {"Accept": "application/json"}
        token = self.config.argo_token.strip()
        if token:
            headers["Authorization"] = token if token.lower().startswith("bearer ") else f"Bearer {token}"

        self._http = httpx.AsyncClient(
            base_url=self.config.base_url,
            headers=headers,
            timeout=self.config.request_timeout,
            verify=not self.config.insecure_skip_verify,
            transport=transport,
        )

    @property
    def default_namespace(self) -> str:
        return self.config.namespace

    async def close(self) -> None:
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        logger.debug(f"Argo API {method} {path}")
        try:
            response = await self._http.request(method, path, params=params, json=body)
        except httpx.TransportError as e:
            raise ArgoConnectionError(f"Cannot reach Argo Server at {self.config.base_url}: {e}") from e

        if response.status_code == 404:
            raise ArgoNotFoundError(_error_message(response))
        if response.is_error:
            raise ArgoAPIError(_error_message(response), status_code=response.status_code)

        if not response.content:
            return {}
        return response.json()

    # Workflows

    async def get_workflow(self, namespace: str, name: str) -> dict[str, Any]:
        return await self._request("GET", f"/api/v1/workflows/{namespace}/{name}")

    async def list_workflows(
        self,
        namespace: str,
        label_selector: str | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {}
        if label_selector:
            params["listOptions.labelSelector"] = label_selector
        if limit:
            params["listOptions.limit"] = limit
        data = await self._request("GET", f"/api/v1/workflows/{namespace}", params=params)
        return data.get("items") or []

    async def create_workflow(self, namespace: str, workflow: dict[str, Any]) -> dict[str, Any]:
        return await self._request(
            "POST", f"/api/v1/workflows/{namespace}", body={"namespace": namespace, "workflow": workflow}
        )

    async def lint_workflow(self, namespace: str, workflow: dict[str, Any]) -> dict[str, Any]:
        return await self._request(
            "POST", f"/api/v1/workflows/{namespace}/lint", body={"namespace": namespace, "workflow": workflow}
        )

    async def delete_workflow(self, namespace: str, name: str, force: bool = False) -> None:
        params = {"force": "true"} if force else None
        await self._request("DELETE", f"/api/v1/workflows/{namespace}/{name}", params=params)

    async def _workflow_action(self, namespace: str, name: str, action: str, **fields: Any) -> dict[str, Any]:
        body = {"name": name, "namespace": namespace}
        body.update({key: value for key, value in fields.items() if value not in (None, "", [], False)})
        return await self._request("PUT", f"/api/v1/workflows/{namespace}/{name}/{action}", body=body)

    async def retry_workflow(
        self,
        namespace: str,
        name: str,
        node_field_selector: str | None = None,
        parameters: list[str] | None = None,
        restart_successful: bool = False,
    ) -> dict[str, Any]:
        return await self._workflow_action(
            namespace,
            name,
            "retry",
            nodeFieldSelector=node_field_selector,
            parameters=parameters,
            restartSuccessful=restart_successful,
        )

    async def resubmit_workflow(
        self,
        namespace: str,
        name: str,
        memoized: bool = False,
        parameters: list[str] | None = None,
    ) -> dict[str, Any]:
        return await self._workflow_action(namespace, name, "resubmit", memoized=memoized, parameters=parameters)

    async def suspend_workflow(self, namespace: str, name: str) -> dict[str, Any]:
        return await self._workflow_action(namespace, name, "suspend")

    async def resume_workflow(self, namespace: str, name: str, node_field_selector: str | None = None) -> dict[str, Any]:
        return await self._workflow_action(namespace, name, "resume", nodeFieldSelector=node_field_selector)

    async def stop_workflow(
        self,
        namespace: str,
        name: str,
        node_field_selector: str | None = None,
        message: str | None = None,
    ) -> dict[str, Any]:
        return await self._workflow_action(
            namespace, name, "stop", nodeFieldSelector=node_field_selector, message=message
        )

    async def terminate_workflow(self, namespace: str, name: str) -> dict[str, Any]:
        return await self._workflow_action(namespace, name, "terminate")

    async def stream_workflow_logs(
        self,
        namespace: str,
        name: str,
        pod_name: str | None = None,
        container: str | None = None,
        tail_lines: int | None = None,
        grep: str | None = None,
    ) -> AsyncIterator[LogEntry]:
        """Stream log lines for a workflow or one of its pods.

        The Argo Server answers with newline-delimited JSON frames of the form
        ``{"result": {"content": ..., "podName": ...}}``; an ``{"error": ...}``
        frame ends the stream with ``ArgoAPIError``.
        """
        params: dict[str, Any] = {}
        if pod_name:
            params["podName"] = pod_name
        if container:
            params["logOptions.container"] = container
        if tail_lines:
            params["logOptions.tailLines"] = tail_lines
        if grep:
            params["grep"] = grep

        path = f"/api/v1/workflows/{namespace}/{name}/log"
        logger.debug(f"Argo API GET {path} (stream)")
        try:
            async with self._http.stream("GET", path, params=params) as response:
                if response.status_code == 404:
                    await response.aread()
                    raise ArgoNotFoundError(_error_message(response))
                if response.is_error:
                    await response.aread()
                    raise ArgoAPIError(_error_message(response), status_code=response.status_code)

                async for line in response.aiter_lines():
                    if not line.strip():
                        continue
                    try:
                        frame = json.loads(line)
                    except json.JSONDecodeError as e:
                        raise ArgoAPIError(f"Malformed log frame: {line[:200]}") from e
                    if frame.get("error"):
                        error = frame["error"]
                        message = error.get("message") if isinstance(error, dict) else str(error)
                        raise ArgoAPIError(f"Log stream error: {message}")
                    result = frame.get("result") or {}
                    yield LogEntry(content=result.get("content", ""), pod_name=result.get("podName", ""))
        except httpx.TransportError as e:
            raise ArgoConnectionError(f"Log stream from {self.config.base_url} interrupted: {e}") from e

    # Server

    async def get_version(self) -> dict[str, Any]:
        return await self._request("GET", "/api/v1/version")


# Global client instance
_client: ArgoClient | None = None


def get_argo_client(config: ArgoServerConfig | None = None) -> ArgoClient:
    """Get the global Argo client instance.

    The first call creates the client from ``config`` (or the global
    configuration); later calls return that same client.
    """
    global _client
    if _client is None:
        _client = ArgoClient(config or get_config())
    return _client


def set_argo_client(client: ArgoClient) -> None:
    """Set the global Argo client instance."""
    global _client
    _client = client


def reset_argo_client() -> None:
    """Reset the global Argo client instance."""
    global _client
    _client = None
