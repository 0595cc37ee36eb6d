"""Implementation of health_check MCP tool."""

import logging
from datetime import datetime, timezone

from ...utils.formatting import format_timestamp
from ..argo_client import ArgoClient
from ..models.workflow_models import HealthCheckResponse

logger = logging.getLogger(__name__)


async def health_check_impl(client: ArgoClient) -> HealthCheckResponse:
    """Check that the Argo Server is reachable and report its version."""
    timestamp = format_timestamp(datetime.now(timezone.utc))
    components = {
        "mcp_server": {"status": "healthy"},
        "argo_server": {"url": client.config.base_url, "namespace": client.default_namespace},
    }

    try:
        version = await client.get_version()
        components["argo_server"].update(
            status="healthy",
            version=version.get("version", "unknown"),
            platform=version.get("platform"),
        )
        return HealthCheckResponse(status="healthy", components=components, timestamp=timestamp)
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        components["argo_server"].update(status="unhealthy", error=str(e))
        return HealthCheckResponse(
            status="unhealthy",
            components=components,
            timestamp=timestamp,
            error={"code": "OPERATION_FAILED", "message": f"Argo Server unreachable: {e}"},
        )
