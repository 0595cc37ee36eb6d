"""Argo Workflows MCP prompts."""

import logging

from ..diagnosis import diagnose_workflow

logger = logging.getLogger(__name__)


def register_argo_prompts(mcp, client, config):
    """Register Argo Workflows prompts with the MCP server."""

    @mcp.prompt(
        name="why_did_this_fail",
        description=(
            "Diagnose why an Argo Workflow failed by analysing node statuses, logs, inputs, and data flow"
        ),
    )
    async def why_did_this_fail(workflow: str, namespace: str | None = None) -> str:
        """Build a failure diagnosis for a workflow as the user message.

        Args:
            workflow: Workflow name to diagnose
            namespace: Kubernetes namespace (uses default if not specified)
        """
        report = await diagnose_workflow(
            client,
            workflow,
            namespace,
            tail_lines=config.log_tail_lines,
            max_log_bytes=config.max_log_bytes,
        )
        logger.info(report.description)
        return report.text


__all__ = ["register_argo_prompts"]
