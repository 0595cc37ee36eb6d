"""Argo Workflows MCP Server - workflow operations and failure diagnosis."""

import asyncio
import logging
import sys

from fastmcp import FastMCP

from .argo_client import ArgoClient, ArgoClientError, get_argo_client, reset_argo_client
from .config import ArgoServerConfig, get_config
from .prompts import register_argo_prompts
from .resources import register_argo_resources
from .tools import register_argo_tools

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


class ArgoWorkflowsServer:
    """Argo Workflows server with lifecycle management."""

    def __init__(self, config: ArgoServerConfig | None = None, client: ArgoClient | None = None):
        self.config = config or get_config()
        self.client = client or get_argo_client(self.config)
        self.mcp = FastMCP(
            name=self.config.server_name,
            version=__version__,
            instructions="""
                Argo Workflows server for running, inspecting and debugging workflows:

                Workflow Tools:
                - submit_workflow / lint_workflow: Submit or validate a Workflow manifest
                - list_workflows / get_workflow / get_workflow_node: Inspect workflows and their nodes
                - wait_workflow: Block until a workflow completes (optional timeout)
                - logs_workflow: Read pod logs (bounded output)
                - retry_workflow / resubmit_workflow: Run a failed workflow again
                - suspend_workflow / resume_workflow / stop_workflow / terminate_workflow: Control running workflows
                - delete_workflow: Remove a workflow
                - diagnose_workflow: Find root-cause failures, their logs and known error patterns
                - health_check: Check the Argo Server connection

                Prompts:
                - why_did_this_fail: Failure diagnosis report for a workflow

                Resources:
                - argo://schemas/*, argo://docs/*, argo://examples/*: Reference documentation

                Best Practices:
                - Use diagnose_workflow before reading logs node by node
                - Use lint_workflow before submitting a new manifest
                - Omit namespace to use the configured default
            """,
        )
        self._initialized = False

    async def initialize(self):
        """Check the Argo Server connection and register tools, prompts and resources."""
        logger.info(f"Initializing Argo Workflows server: {self.config.server_name}")

        logger.info(f"Connecting to Argo Server at {self.config.base_url}")
        try:
            version = await self.client.get_version()
            logger.info(f"Connected to Argo Server {version.get('version', 'unknown')}")
        except ArgoClientError as e:
            logger.warning(f"Argo Server not reachable, continuing: {e}")

        if self._initialized:
            return

        logger.info("Registering Argo tools")
        register_argo_tools(self.mcp, self.client, self.config)

        logger.info("Registering Argo prompts")
        register_argo_prompts(self.mcp, self.client, self.config)

        logger.info("Registering Argo resources")
        register_argo_resources(self.mcp)

        self._initialized = True
        logger.info(f"Argo Workflows server initialized successfully: {self.config.server_name}")

    async def run(self):
        """Run the MCP server on the configured transport."""
        await self.initialize()

        try:
            if self.config.transport == "http":
                logger.info(f"Starting MCP server on http://{self.config.http_host}:{self.config.http_port}")
                await self.mcp.run_async(transport="http", host=self.config.http_host, port=self.config.http_port)
            else:
                logger.info("Starting MCP server on stdio")
                await self.mcp.run_async(transport="stdio")
        finally:
            await self.shutdown()

    async def shutdown(self):
        """Graceful shutdown of server components."""
        logger.info("Shutting down Argo Workflows server")
        await self.client.close()
        reset_argo_client()
        logger.info("Argo Workflows server shutdown complete")


def main():
    """Entry point for the Argo Workflows server."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        config = get_config()
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level))

    logger.info(
        f"Starting Argo Workflows server with configuration: server={config.argo_server}, "
        f"namespace={config.namespace}, transport={config.transport}"
    )

    server = ArgoWorkflowsServer(config)

    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Server failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
